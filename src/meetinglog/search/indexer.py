"""
Search Index Builder

Flattens DocumentRecords into the JSON search index served next to the
archive pages. The builder never reorders: callers pass records already
sorted (newest first) and the index keeps that order.
"""

import json
import logging
import re
from pathlib import Path
from typing import Iterable

from meetinglog.core.config import settings
from meetinglog.models import DocumentRecord, IndexEntry

logger = logging.getLogger(__name__)

_CODE_BLOCK_RE = re.compile(r"```.*?```", re.DOTALL)
_INLINE_CODE_RE = re.compile(r"`[^`]+`")
_LINK_RE = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_MARKDOWN_CHARS_RE = re.compile(r"[#*_~>|]")
_WHITESPACE_RE = re.compile(r"\s+")


def plain_text(markdown_text: str) -> str:
    """Rough single-pass markdown stripping for searchable body text."""
    text = _CODE_BLOCK_RE.sub("", markdown_text)
    text = _INLINE_CODE_RE.sub("", text)
    text = _LINK_RE.sub(r"\1", text)
    text = _MARKDOWN_CHARS_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


class IndexBuilder:
    """Builds and writes the client-side search index."""

    def __init__(self, content_max_chars: int | None = None):
        self.content_max_chars = (
            settings.INDEX_CONTENT_MAX_CHARS
            if content_max_chars is None
            else content_max_chars
        )

    def build_entry(self, record: DocumentRecord) -> IndexEntry:
        content = plain_text(record.normalized_body)
        return IndexEntry(
            title=record.title,
            date=record.date.isoformat() if record.date else None,
            year=record.year,
            url=record.url,
            summary=record.summary_plain,
            tickets=list(record.tickets),
            content=content[: self.content_max_chars],
        )

    def build(self, records: Iterable[DocumentRecord]) -> list[IndexEntry]:
        """One entry per record, in input order."""
        return [self.build_entry(record) for record in records]

    def write(self, entries: list[IndexEntry], path: str | Path) -> Path:
        """
        Write entries as a pretty-printed JSON array.

        Returns:
            The path written.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = [entry.model_dump() for entry in entries]
        path.write_text(
            json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8"
        )
        logger.info(f"Wrote search index with {len(entries)} entries to {path}")
        return path


def build_index(records: Iterable[DocumentRecord]) -> list[IndexEntry]:
    """Build index entries with the default content cap."""
    return IndexBuilder().build(records)
