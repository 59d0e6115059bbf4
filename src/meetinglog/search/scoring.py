"""
Index Entry Scoring

Additive substring scoring used by the archive search box.

Each query term is scored independently against an entry and the term
scores are summed:

- ticket number (optionally "#"-prefixed) found in the entry's tickets:
  ticket_weight, and nothing else is checked for that term
- otherwise: title match, summary match, content match plus a bonus per
  content occurrence (capped), and an exact year match
"""

import re
from dataclasses import dataclass

from meetinglog.models import IndexEntry

_NUMERIC_RE = re.compile(r"^\d+$")


@dataclass
class ScoringConfig:
    """Score weights."""

    ticket_weight: int = 100
    title_weight: int = 50
    summary_weight: int = 30
    content_weight: int = 10
    occurrence_bonus: int = 2  # Per content occurrence
    max_bonus_occurrences: int = 5
    year_weight: int = 20


def split_terms(query: str) -> list[str]:
    """Lowercased, whitespace-separated query terms."""
    return query.lower().split()


class EntryScorer:
    """Scores index entries against query terms."""

    def __init__(self, config: ScoringConfig | None = None):
        self.config = config or ScoringConfig()

    def score(self, entry: IndexEntry, terms: list[str]) -> int:
        """Sum of per-term scores for one entry."""
        title = entry.title.lower()
        summary = entry.summary.lower()
        content = entry.content.lower()
        ticket_str = " ".join(entry.tickets)
        year = str(entry.year)

        return sum(
            self._score_term(term, title, summary, content, ticket_str, year)
            for term in terms
        )

    def _score_term(
        self,
        term: str,
        title: str,
        summary: str,
        content: str,
        ticket_str: str,
        year: str,
    ) -> int:
        config = self.config

        ticket_num = term.removeprefix("#")
        if _NUMERIC_RE.match(ticket_num) and ticket_num in ticket_str:
            return config.ticket_weight

        score = 0
        if term in title:
            score += config.title_weight
        if term in summary:
            score += config.summary_weight
        if term in content:
            score += config.content_weight
            occurrences = content.count(term)
            score += min(occurrences, config.max_bonus_occurrences) * config.occurrence_bonus
        if year == term:
            score += config.year_weight
        return score

    def rank(
        self, entries: list[IndexEntry], terms: list[str]
    ) -> list[tuple[IndexEntry, int]]:
        """
        Entries with a positive score, best first.

        Ties keep index order (newest first).
        """
        scored = [(entry, self.score(entry, terms)) for entry in entries]
        scored = [(entry, score) for entry, score in scored if score > 0]
        scored.sort(key=lambda x: x[1], reverse=True)
        return scored
