"""Pytest configuration for meeting log archive tests."""

import datetime
import os
import sys
from pathlib import Path

# Set ENVIRONMENT before importing any modules that use meetinglog.core.config
os.environ.setdefault("ENVIRONMENT", "test")

# Add src to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

import pytest  # noqa: E402

from meetinglog.models import DocumentRecord, IndexEntry  # noqa: E402


@pytest.fixture
def make_record():
    """Factory for DocumentRecords with sensible defaults."""

    def _make(**overrides) -> DocumentRecord:
        date = overrides.pop("date", datetime.date(2019, 3, 14))
        year = overrides.pop("year", date.year if date else 2019)
        slug = overrides.pop("slug", date.strftime("%m-%d") if date else "notes")
        fields = {
            "source_path": f"{year}/{slug}.md",
            "raw_body": "",
            "normalized_body": "",
            "year": year,
            "month": date.month if date else 1,
            "day": date.day if date else 1,
            "title": "Mar 2019 Meeting",
            "slug": slug,
            "url": f"/meetings/{year}/{slug}/",
            "date": date,
        }
        fields.update(overrides)
        return DocumentRecord(**fields)

    return _make


@pytest.fixture
def sample_entries() -> list[IndexEntry]:
    """A small index, newest first."""
    return [
        IndexEntry(
            title="Dec 2019 Meeting",
            date="2019-12-12",
            year=2019,
            url="/meetings/2019/12-12/",
            summary="Pattern matching | keyword arguments",
            tickets=["16166", "16300"],
            content="Discussion about pattern matching. Pattern matching is experimental.",
        ),
        IndexEntry(
            title="Mar 2019 Meeting",
            date="2019-03-14",
            year=2019,
            url="/meetings/2019/03-14/",
            summary="fix | add",
            tickets=["100", "200"],
            content="Ruby 2.7 release plan and the GC compaction proposal.",
        ),
        IndexEntry(
            title="Jul 2015 DevCamp",
            date="2015-07-31",
            year=2015,
            url="/meetings/2015/devcamp-07-31/",
            summary="Frozen string literals",
            tickets=[],
            content="Frozen string literal magic comment for Ruby 3.",
        ),
    ]


@pytest.fixture
def corpus_dir(tmp_path) -> Path:
    """A meeting log tree laid out as {root}/{year}/{name}.md."""
    root = tmp_path / "dev-meeting-log"
    files = {
        "2019/DevMeeting-2019-03-14.md": (
            "### [[Bug #100]](http://x) fix\n### [[Feature #200]](http://y) add\n"
        ),
        "2019/DevMeeting-2019-03-14-JA.md": (
            "### [[Bug #100]](http://x) 修正\n"
        ),
        "2019/DevMeeting-2019-03-28.md": (
            "## Check security tickets\n\n[secret]\n\n"
            "### [[Feature #300](https://www.google.com/url?q=https://bugs.ruby-lang.org/issues/300&sa=D)] "
            "Add Array#intersect?\n"
        ),
        "2019/README.md": "# Meeting logs for 2019\n",
        "2019/DevMeeting-2019-02-30.md": "### broken date\n",
        "2015/DevCamp-07-31.md": "---\nlang: en\n---\nNotes from the camp.\nSecond line.\n",
    }
    for relative, body in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body, encoding="utf-8")
    return root
