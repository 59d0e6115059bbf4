"""
Archive Data Models

DocumentRecord is the per-meeting result of the extraction pipeline.
IndexEntry is its flattened, size-capped projection stored in the search
index and validated again when the search engine loads the index.
"""

import datetime
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from meetinglog.core.config import settings

_MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


@dataclass(frozen=True)
class DocumentRecord:
    """
    One meeting log after normalization and extraction.

    Records are immutable. title and language_pair_url are finalized by the
    corpus pass (meetinglog.corpus.finalize_corpus), which returns new
    records via dataclasses.replace.
    """

    source_path: str
    raw_body: str
    normalized_body: str
    year: int
    month: int
    day: int
    title: str
    slug: str
    url: str
    language: str = "en"
    date: datetime.date | None = None
    tickets: tuple[str, ...] = field(default_factory=tuple)
    ticket_count: int = 0
    summary_html: str = ""
    summary_plain: str = ""
    language_pair_url: str | None = None
    has_frontmatter: bool = False

    @property
    def sort_date(self) -> datetime.date:
        """Date used for ordering; undated records sort as January 1st."""
        return self.date or datetime.date(self.year, 1, 1)

    def to_dict(self) -> dict[str, Any]:
        """Template-friendly projection consumed by page rendering."""
        return {
            "title": self.title,
            "date": self.date.isoformat() if self.date else None,
            "date_formatted": (
                f"{_MONTH_NAMES[self.date.month - 1]} {self.date.day:02d}, {self.date.year}"
                if self.date
                else self.title
            ),
            "year": self.year,
            "month": self.month,
            "month_name": _MONTH_NAMES[self.date.month - 1] if self.date else None,
            "day": self.day,
            "slug": self.slug,
            "lang": self.language,
            "url": self.url,
            "summary_html": self.summary_html,
            "summary_plain": self.summary_plain,
            "ticket_count": self.ticket_count,
            "tickets": list(self.tickets[:5]),
            "has_language_pair": self.language_pair_url is not None,
            "language_pair_url": self.language_pair_url,
            "language_pair_lang": "ja" if self.language == "en" else "en",
        }


class IndexEntry(BaseModel):
    """A single search index element."""

    model_config = ConfigDict(frozen=True)

    title: str
    date: str | None = None
    year: int
    url: str
    summary: str = ""
    tickets: list[str] = Field(default_factory=list)
    content: str = Field(default="", max_length=settings.INDEX_CONTENT_MAX_CHARS)
