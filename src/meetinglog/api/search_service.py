import json
import logging
import os
from pathlib import Path
from typing import Any

from meetinglog.core.config import settings
from meetinglog.core.errors import IndexLoadError
from meetinglog.models import IndexEntry
from meetinglog.search.searcher import SearchEngine, parse_index

logger = logging.getLogger(__name__)


class ArchiveSearchService:
    """Server-side search over the built index file, reloaded when it changes."""

    def __init__(self, index_path: str | Path | None = None):
        self._index_path = Path(index_path) if index_path else None
        self._engine: SearchEngine | None = None
        self._loaded_key: tuple[Path, float] | None = None

    @property
    def index_path(self) -> Path:
        return self._index_path or settings.SEARCH_INDEX_PATH

    def index_exists(self) -> bool:
        return self.index_path.is_file()

    def _load_entries(self) -> list[IndexEntry]:
        try:
            data = json.loads(self.index_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise IndexLoadError(f"Cannot read search index {self.index_path}: {e}") from e
        return parse_index(data)

    def get_engine(self) -> SearchEngine | None:
        """Engine over the current index file, or None when it is missing or invalid."""
        if not self.index_exists():
            return None

        key = (self.index_path, os.path.getmtime(self.index_path))
        if self._engine is None or key != self._loaded_key:
            try:
                entries = self._load_entries()
            except IndexLoadError as e:
                logger.warning(f"Search index unavailable: {e}")
                return None
            self._engine = SearchEngine.from_entries(entries)
            self._loaded_key = key
            logger.info(f"Loaded {len(entries)} index entries from {self.index_path}")
        return self._engine

    def search(self, q: str | None, k: int | None = None) -> dict[str, Any]:
        if not q:
            return self._empty_result(q)

        engine = self.get_engine()
        if engine is None:
            return self._empty_result(q)

        result = engine.search(q)
        hits = result.hits[:k] if k else result.hits
        return {
            "query": q,
            "total": result.total,
            "hits": [
                {
                    "title": hit.entry.title,
                    "url": hit.url,
                    "date": hit.entry.date,
                    "year": hit.entry.year,
                    "score": hit.score,
                    "snip": hit.snippet.text,
                    "snip_plain": hit.snippet.plain_text,
                    "tickets": hit.entry.tickets,
                }
                for hit in hits
            ],
        }

    def _empty_result(self, q: str | None = None) -> dict[str, Any]:
        return {"query": q or "", "total": 0, "hits": []}


search_service = ArchiveSearchService()
