"""
Meeting Log Corpus

Loads every meeting log under the corpus root into DocumentRecords, then runs
the corpus-wide passes that need all records at once (language pairing and
title disambiguation).

Per-document extraction never sees another document. A document that fails
to parse is logged and skipped; the rest of the corpus is unaffected.
"""

import dataclasses
import datetime
import logging
from collections import defaultdict
from pathlib import Path
from typing import Iterable

from meetinglog.metadata import extract_metadata, parse_frontmatter
from meetinglog.models import DocumentRecord
from meetinglog.normalizer import normalize
from meetinglog.summary import MarkdownRenderer, extract_summary, render_inline_html

logger = logging.getLogger(__name__)

SKIPPED_FILENAMES = {"README.md"}


def build_record(
    path: Path,
    corpus_root: Path,
    renderer: MarkdownRenderer = render_inline_html,
) -> DocumentRecord:
    """
    Build the record for a single meeting log.

    Raises:
        MetadataError: The filename names an impossible date or the file is
            not inside a year directory.
        OSError / UnicodeDecodeError: The file could not be read.
    """
    raw = path.read_text(encoding="utf-8")
    return build_record_from_text(
        raw,
        relative_path=path.relative_to(corpus_root).as_posix(),
        source_path=str(path),
        renderer=renderer,
    )


def build_record_from_text(
    raw: str,
    relative_path: str,
    source_path: str | None = None,
    renderer: MarkdownRenderer = render_inline_html,
) -> DocumentRecord:
    """Build a record from file contents and its path relative to the corpus root."""
    frontmatter, body = parse_frontmatter(raw)
    normalized = normalize(body)

    parts = relative_path.split("/")
    metadata = extract_metadata(parts[-1], parts[0], frontmatter)
    summary = extract_summary(normalized, renderer=renderer)

    return DocumentRecord(
        source_path=source_path or relative_path,
        raw_body=body,
        normalized_body=normalized,
        year=metadata.year,
        month=metadata.month,
        day=metadata.day,
        title=metadata.title,
        slug=metadata.slug,
        url=metadata.url,
        language=metadata.language,
        date=metadata.date,
        tickets=summary.tickets,
        ticket_count=summary.ticket_count,
        summary_html=summary.summary_html,
        summary_plain=summary.summary_plain,
        has_frontmatter=frontmatter is not None,
    )


def iter_meeting_files(corpus_root: Path) -> Iterable[Path]:
    for path in sorted(corpus_root.rglob("*.md")):
        if path.is_file() and path.name not in SKIPPED_FILENAMES:
            yield path


def load_records(
    corpus_root: str | Path,
    renderer: MarkdownRenderer = render_inline_html,
) -> list[DocumentRecord]:
    """
    Build records for every meeting log under corpus_root.

    A missing corpus directory is reported as a warning and yields no records.
    """
    root = Path(corpus_root)
    if not root.is_dir():
        logger.warning(f"Meeting log directory not found: {root}")
        return []

    records: list[DocumentRecord] = []
    for path in iter_meeting_files(root):
        try:
            records.append(build_record(path, root, renderer=renderer))
        except Exception as e:
            logger.warning(f"Error parsing {path}: {e}")

    logger.info(f"Found {len(records)} meeting logs")
    return records


def pair_languages(records: list[DocumentRecord]) -> list[DocumentRecord]:
    """
    Cross-link the English and Japanese logs of the same meeting.

    Records are grouped by exact date; a date with both an "en" and a "ja"
    record links the first of each to the other.
    """
    by_date: dict[datetime.date, list[int]] = defaultdict(list)
    for index, record in enumerate(records):
        if record.date is not None:
            by_date[record.date].append(index)

    paired = list(records)
    for indexes in by_date.values():
        if len(indexes) < 2:
            continue
        en = next((i for i in indexes if records[i].language == "en"), None)
        ja = next((i for i in indexes if records[i].language == "ja"), None)
        if en is None or ja is None:
            continue
        paired[en] = dataclasses.replace(records[en], language_pair_url=records[ja].url)
        paired[ja] = dataclasses.replace(records[ja], language_pair_url=records[en].url)
    return paired


def disambiguate_titles(records: list[DocumentRecord]) -> list[DocumentRecord]:
    """
    Number the titles of months with more than one meeting ("Mar 2019 Meeting #2").

    Japanese logs that already have an English pair do not take a slot: the
    English record represents that meeting.
    """
    by_month: dict[tuple[int, int], list[int]] = defaultdict(list)
    for index, record in enumerate(records):
        if record.date is None:
            continue
        if record.language == "ja" and record.language_pair_url:
            continue
        by_month[(record.year, record.month)].append(index)

    numbered = list(records)
    for indexes in by_month.values():
        if len(indexes) < 2:
            continue
        ordered = sorted(indexes, key=lambda i: records[i].date)
        for position, i in enumerate(ordered, start=1):
            numbered[i] = dataclasses.replace(
                records[i], title=f"{records[i].title} #{position}"
            )
    return numbered


def finalize_corpus(records: list[DocumentRecord]) -> list[DocumentRecord]:
    """Run the corpus-wide passes. Must be called once, after all records exist."""
    return disambiguate_titles(pair_languages(records))


def sort_by_date_desc(records: Iterable[DocumentRecord]) -> list[DocumentRecord]:
    """Newest first; undated records sort as January 1st of their year."""
    return sorted(records, key=lambda r: r.sort_date, reverse=True)


def load_corpus(
    corpus_root: str | Path,
    renderer: MarkdownRenderer = render_inline_html,
) -> list[DocumentRecord]:
    """Load, finalize and sort (newest first) every record under corpus_root."""
    return sort_by_date_desc(finalize_corpus(load_records(corpus_root, renderer)))
