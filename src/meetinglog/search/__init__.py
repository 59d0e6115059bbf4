"""Meeting Log Archive Search."""

from meetinglog.search.indexer import IndexBuilder, build_index
from meetinglog.search.searcher import (
    SearchEngine,
    SearchHit,
    SearchResult,
    parse_index,
    render_results,
)
from meetinglog.search.scoring import EntryScorer, ScoringConfig
from meetinglog.search.session import SearchSession, SearchState
from meetinglog.search.snippet import generate_snippet, highlight, Snippet

__all__ = [
    "IndexBuilder",
    "build_index",
    "SearchEngine",
    "SearchHit",
    "SearchResult",
    "parse_index",
    "render_results",
    "EntryScorer",
    "ScoringConfig",
    "SearchSession",
    "SearchState",
    "generate_snippet",
    "highlight",
    "Snippet",
]
