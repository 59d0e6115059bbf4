"""
Archive Search Engine

Loads the static search index once over HTTP, scores every entry against a
free-text query, and renders the top hits as HTML.

The index is a build-time artifact, so a failed fetch is final: the engine
logs it and stays inert (every search returns no hits) until it is recreated.
"""

import asyncio
import logging
from dataclasses import dataclass, field

import httpx
from pydantic import TypeAdapter, ValidationError

from meetinglog.core.config import settings
from meetinglog.core.errors import IndexLoadError
from meetinglog.models import IndexEntry
from meetinglog.search.scoring import EntryScorer, ScoringConfig, split_terms
from meetinglog.search.snippet import Snippet, escape_html, generate_snippet, highlight

logger = logging.getLogger(__name__)

MIN_QUERY_LEN = 2

_index_adapter = TypeAdapter(list[IndexEntry])


@dataclass
class SearchHit:
    """A single search result."""

    entry: IndexEntry
    score: int
    snippet: Snippet
    title_html: str

    @property
    def url(self) -> str:
        return self.entry.url


@dataclass
class SearchResult:
    """Search results with metadata."""

    query: str
    total: int
    hits: list[SearchHit] = field(default_factory=list)


def parse_index(data: object) -> list[IndexEntry]:
    """
    Validate a decoded search index.

    Raises:
        IndexLoadError: data is not a JSON array of index entries.
    """
    try:
        return _index_adapter.validate_python(data)
    except ValidationError as e:
        raise IndexLoadError(f"Search index has an unexpected shape: {e}") from e


class SearchEngine:
    """
    Ranking search over the archive's JSON index.

    Index loading is a single asynchronous fetch; concurrent callers share the
    in-flight request and later callers reuse the cached entries.
    """

    def __init__(
        self,
        base_url: str | None = None,
        scoring_config: ScoringConfig | None = None,
        max_results: int | None = None,
        timeout: float | None = None,
    ):
        """
        Initialize search engine.

        Args:
            base_url: Site base url; the index is fetched from
                {base_url}/search-index.json
            scoring_config: Score weights
            max_results: Maximum number of rendered hits
            timeout: Index fetch timeout in seconds
        """
        self.base_url = settings.SEARCH_BASE_URL if base_url is None else base_url
        self.scorer = EntryScorer(scoring_config)
        self.max_results = max_results or settings.SEARCH_MAX_RESULTS
        self.timeout = timeout or settings.SEARCH_FETCH_TIMEOUT_SEC
        self._index: list[IndexEntry] | None = None
        self._load_task: asyncio.Task | None = None
        self._failed = False

    @classmethod
    def from_entries(cls, entries: list[IndexEntry], **kwargs) -> "SearchEngine":
        """Engine over an index that is already in memory."""
        engine = cls(**kwargs)
        engine._index = list(entries)
        return engine

    @property
    def index_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{settings.SEARCH_INDEX_FILENAME}"

    @property
    def is_loaded(self) -> bool:
        return self._index is not None

    @property
    def is_failed(self) -> bool:
        return self._failed

    async def load_index(self) -> list[IndexEntry] | None:
        """
        Fetch the index if needed.

        Returns:
            The cached entries, or None when the fetch failed.
        """
        if self._index is not None:
            return self._index
        if self._failed:
            return None
        if self._load_task is None:
            self._load_task = asyncio.ensure_future(self._fetch_index())
        return await asyncio.shield(self._load_task)

    async def _fetch_index(self) -> list[IndexEntry] | None:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(self.index_url)
            if resp.status_code != 200:
                raise IndexLoadError(
                    f"GET {self.index_url} returned {resp.status_code}"
                )
            entries = parse_index(resp.json())
        except (httpx.HTTPError, ValueError, IndexLoadError) as e:
            logger.warning(f"Failed to load search index from {self.index_url}: {e}")
            self._failed = True
            return None

        logger.info(f"Loaded search index with {len(entries)} entries")
        self._index = entries
        return entries

    def search(self, query: str | None) -> SearchResult:
        """
        Score the loaded index against query.

        Queries shorter than two characters, and any query before the index
        has loaded (or after it failed), return an empty result.
        """
        query = query or ""
        if self._index is None or len(query.strip()) < MIN_QUERY_LEN:
            return SearchResult(query=query, total=0)

        terms = split_terms(query)
        ranked = self.scorer.rank(self._index, terms)

        hits = []
        for entry, score in ranked[: self.max_results]:
            hits.append(
                SearchHit(
                    entry=entry,
                    score=score,
                    snippet=generate_snippet(entry.content or entry.summary, terms),
                    title_html=highlight(escape_html(entry.title), terms),
                )
            )

        return SearchResult(query=query, total=len(ranked), hits=hits)


def render_results(result: SearchResult, cursor: int | None = None) -> str:
    """
    HTML for the result list.

    Args:
        result: Output of SearchEngine.search
        cursor: Index of the highlighted hit, if any
    """
    if not result.hits:
        return (
            '<div class="search-empty">'
            f"No results found for &ldquo;{escape_html(result.query)}&rdquo;"
            "</div>"
        )

    parts = ['<div class="search-results">']
    for i, hit in enumerate(result.hits):
        css = "search-result selected" if i == cursor else "search-result"
        parts.append(
            f'<a href="{escape_html(hit.url)}" class="{css}">'
            f'<span class="search-result-title">{hit.title_html}</span>'
            f'<p class="search-result-snippet">{hit.snippet.text}</p>'
            f'<span class="search-result-date">{escape_html(hit.entry.date)}</span>'
            "</a>"
        )
    parts.append("</div>")
    return "".join(parts)
