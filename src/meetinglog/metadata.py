"""
Meeting Metadata Extraction

Derives date, title, slug, language and url for a meeting log from its
filename, the year directory it lives in, and an optional YAML frontmatter.

Filenames follow one of several historical conventions. Each convention is
a matcher that either returns a Metadata or None; the first match wins and
anything else falls back to a generic title/slug derivation.
"""

import datetime
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable

import yaml

from meetinglog.core.errors import MetadataError

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"
LANGUAGES = ("en", "ja")

_FRONTMATTER_RE = re.compile(r"\A---\s*\n(.*?\n?)---\s*\n", re.DOTALL)
_YEAR_SEGMENT_RE = re.compile(r"^\d+")
_SLUG_INVALID_RE = re.compile(r"[^a-z0-9\-]")

_MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


@dataclass(frozen=True)
class Frontmatter:
    """Parsed frontmatter block."""

    data: dict[str, Any]

    @property
    def language(self) -> str | None:
        value = self.data.get("lang")
        if value is None:
            return None
        value = str(value).strip().lower()
        return value if value in LANGUAGES else DEFAULT_LANGUAGE


@dataclass(frozen=True)
class Metadata:
    """Identifiers derived from a meeting log's location and name."""

    year: int
    month: int
    day: int
    title: str
    slug: str
    language: str
    date: datetime.date | None = None

    @property
    def url(self) -> str:
        return f"/meetings/{self.year}/{self.slug}/"


def parse_frontmatter(text: str) -> tuple[Frontmatter | None, str]:
    """
    Split an optional leading frontmatter block from the document body.

    A block that is not valid YAML (or not a mapping) is still removed from
    the body, but reported as absent so the document keeps the default
    language.

    Returns:
        (frontmatter or None, body)
    """
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return None, text

    body = text[match.end():]
    try:
        data = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as e:
        logger.debug(f"Ignoring malformed frontmatter: {e}")
        return None, body

    if not isinstance(data, dict):
        logger.debug(f"Ignoring non-mapping frontmatter: {type(data).__name__}")
        return None, body

    return Frontmatter(data=data), body


def parse_year_segment(segment: str) -> int:
    """Parse the year directory name ("2019") into an int."""
    match = _YEAR_SEGMENT_RE.match(segment)
    if not match:
        raise MetadataError(f"Year directory is not numeric: {segment!r}")
    return int(match.group(0))


def _month_abbr(month: int) -> str:
    return _MONTH_ABBR[month - 1] if 1 <= month <= 12 else ""


def _build_date(year: int, month: int, day: int, basename: str) -> datetime.date:
    try:
        return datetime.date(year, month, day)
    except ValueError as e:
        raise MetadataError(f"Invalid date in filename {basename!r}: {e}") from e


# Convention matchers: (basename, year, frontmatter) -> Metadata | None
ConventionMatcher = Callable[[str, int, Frontmatter | None], Metadata | None]

_DEV_MEETING_RE = re.compile(r"\ADevMeeting-(\d{4})-(\d{2})-(\d{2})(-JA)?\Z")
_DEVELOPERS_MEETING_JAPAN_RE = re.compile(
    r"\ADevelopersMeeting(\d{4})(\d{2})(\d{2})Japan\Z"
)
_DEV_CAMP_RE = re.compile(r"\ADevCamp-(\d{2})-(\d{2})\Z")


def _frontmatter_language(frontmatter: Frontmatter | None) -> str | None:
    return frontmatter.language if frontmatter else None


def match_dev_meeting(
    basename: str, year: int, frontmatter: Frontmatter | None
) -> Metadata | None:
    """DevMeeting-YYYY-MM-DD, optionally suffixed -JA for the Japanese log."""
    match = _DEV_MEETING_RE.match(basename)
    if not match:
        return None

    meeting_date = _build_date(
        int(match.group(1)), int(match.group(2)), int(match.group(3)), basename
    )
    declared = _frontmatter_language(frontmatter)
    is_ja = match.group(4) is not None and declared is None

    slug = meeting_date.strftime("%m-%d")
    if is_ja:
        slug += "-ja"

    return Metadata(
        year=year,
        month=meeting_date.month,
        day=meeting_date.day,
        title=f"{_month_abbr(meeting_date.month)} {meeting_date.year} Meeting",
        slug=slug,
        language="ja" if is_ja else (declared or DEFAULT_LANGUAGE),
        date=meeting_date,
    )


def match_developers_meeting_japan(
    basename: str, year: int, frontmatter: Frontmatter | None
) -> Metadata | None:
    """DevelopersMeetingYYYYMMDDJapan (early logs, no separators)."""
    match = _DEVELOPERS_MEETING_JAPAN_RE.match(basename)
    if not match:
        return None

    meeting_date = _build_date(
        int(match.group(1)), int(match.group(2)), int(match.group(3)), basename
    )
    return Metadata(
        year=year,
        month=meeting_date.month,
        day=meeting_date.day,
        title=f"{_month_abbr(meeting_date.month)} {meeting_date.year} Meeting",
        slug=meeting_date.strftime("%m-%d"),
        language=_frontmatter_language(frontmatter) or DEFAULT_LANGUAGE,
        date=meeting_date,
    )


def match_dev_camp(
    basename: str, year: int, frontmatter: Frontmatter | None
) -> Metadata | None:
    """DevCamp-MM-DD; the year comes from the enclosing directory."""
    match = _DEV_CAMP_RE.match(basename)
    if not match:
        return None

    month, day = int(match.group(1)), int(match.group(2))
    try:
        camp_date: datetime.date | None = datetime.date(year, month, day)
    except ValueError:
        # Kept as an undated record; month/day still drive grouping
        logger.debug(f"No calendar date for {basename} in {year}")
        camp_date = None

    abbr = _month_abbr(month)
    title = f"{abbr} {year} DevCamp" if abbr else f"{year} DevCamp"

    return Metadata(
        year=year,
        month=month,
        day=day,
        title=title,
        slug=f"devcamp-{month:02d}-{day:02d}",
        language=_frontmatter_language(frontmatter) or DEFAULT_LANGUAGE,
        date=camp_date,
    )


CONVENTIONS: tuple[ConventionMatcher, ...] = (
    match_dev_meeting,
    match_developers_meeting_japan,
    match_dev_camp,
)


def fallback_metadata(
    basename: str, year: int, frontmatter: Frontmatter | None
) -> Metadata:
    """Generic derivation for filenames outside every known convention."""
    return Metadata(
        year=year,
        month=1,
        day=1,
        title=basename,
        slug=_SLUG_INVALID_RE.sub("-", basename.lower()),
        language=_frontmatter_language(frontmatter) or DEFAULT_LANGUAGE,
    )


def extract_metadata(
    filename: str,
    year_segment: str,
    frontmatter: Frontmatter | None = None,
) -> Metadata:
    """
    Derive metadata for one meeting log.

    Args:
        filename: File name, with or without the ".md" extension.
        year_segment: First path segment under the corpus root ("2019").
        frontmatter: Parsed frontmatter, if the document has a valid one.

    Raises:
        MetadataError: The year segment is not numeric, or a dated
            convention names a day that does not exist.
    """
    basename = filename[:-3] if filename.endswith(".md") else filename
    year = parse_year_segment(year_segment)

    for convention in CONVENTIONS:
        metadata = convention(basename, year, frontmatter)
        if metadata is not None:
            return metadata

    return fallback_metadata(basename, year, frontmatter)
