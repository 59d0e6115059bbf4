"""
Summary and Ticket Extraction

Builds a short synopsis of a meeting log (HTML and plain text) and the list
of ticket numbers it discusses. Input is always the normalized body, so
ticket links are already in the canonical [[Kind #N]](url) form.
"""

import re
from dataclasses import dataclass
from typing import Callable

from markdown_it import MarkdownIt

from meetinglog.core.config import settings
from meetinglog.normalizer import TICKET_KINDS

_KIND = "(?:" + "|".join(TICKET_KINDS) + ")"

# [[Feature #12345]] or a bare [Feature #12345], but not the visible text
# of [Feature #12345](url); the canonical form is tried first at each position
_TICKET_RE = re.compile(
    r"\[\[" + _KIND + r"\s*#(\d+)\]\]|\[" + _KIND + r"\s*#(\d+)\](?!\()"
)

_HEADING_RE = re.compile(r"\A###\s+(.+)")
_HEADING_STRIP_PATTERNS = (
    re.compile(r"\[\[" + _KIND + r"\s*#\d+\]\]\([^)]*\)"),  # [[X #N]](url)
    re.compile(r"\[\[" + _KIND + r"\s*#\d+\]\([^\]]*\)\]"),  # [[X #N](url)]
    re.compile(r"\[" + _KIND + r"\s*#\d+\](?:\([^)]*\))?"),  # [X #N] or [X #N](url)
    re.compile(r"\(.*?\)\s*$"),  # trailing (author)
)
_BOILERPLATE_RE = re.compile(r"\AAbout release", re.IGNORECASE)

TOPIC_SEPARATOR = " &middot; "
MAX_TOPICS = 3
FALLBACK_LINES = 2
ELLIPSIS = "..."

_PARAGRAPH_RE = re.compile(r"\A<p>(.*)</p>\Z", re.DOTALL)

_md = MarkdownIt("commonmark").enable(["table", "strikethrough"])

MarkdownRenderer = Callable[[str], str]


@dataclass(frozen=True)
class SummaryResult:
    """Fields produced by summary extraction."""

    tickets: tuple[str, ...]
    ticket_count: int
    summary_html: str
    summary_plain: str
    summary_markdown: str


def extract_tickets(text: str) -> list[str]:
    """Ticket numbers in first-occurrence order, without duplicates."""
    found: list[str] = []
    for line in text.splitlines():
        found.extend(
            match.group(1) or match.group(2) for match in _TICKET_RE.finditer(line)
        )
    return list(dict.fromkeys(found))


def _heading_topic(heading: str) -> str:
    topic = heading
    for pattern in _HEADING_STRIP_PATTERNS:
        topic = pattern.sub("", topic)
    return topic.strip()


def extract_topics(lines: list[str], limit: int = MAX_TOPICS) -> list[str]:
    """Topics taken from level-3 headings, ticket references removed."""
    topics: list[str] = []
    for line in lines:
        match = _HEADING_RE.match(line)
        if not match:
            continue
        topic = _heading_topic(match.group(1).strip())
        if not topic or _BOILERPLATE_RE.match(topic):
            continue
        topics.append(topic)
        if len(topics) >= limit:
            break
    return topics


def _is_text_line(line: str) -> bool:
    if not line.strip():
        return False
    return not line.startswith(("#", "http", "*", "-"))


def truncate_summary(text: str, max_chars: int | None = None) -> str:
    """
    Shorten a markdown summary without leaving an open code span or link.

    The cut keeps characters 0..max_chars inclusive, then backs off to before
    the last backtick (odd count) and before the last "[" (unbalanced) until
    both hold at once.
    """
    max_chars = settings.SUMMARY_MAX_CHARS if max_chars is None else max_chars
    if len(text) <= max_chars:
        return text

    truncated = text[: max_chars + 1]
    while True:
        before = truncated
        if truncated.count("`") % 2 == 1:
            truncated = truncated[: truncated.rindex("`")]
        if truncated.count("[") > truncated.count("]"):
            truncated = truncated[: truncated.rindex("[")]
        if truncated == before:
            break
    return truncated.rstrip() + ELLIPSIS


def build_summary_markdown(text: str) -> str:
    """Pick the summary source (heading topics, else leading prose) and truncate."""
    lines = text.splitlines()
    topics = extract_topics(lines)
    if topics:
        summary = TOPIC_SEPARATOR.join(topics)
    else:
        prose = [line.strip() for line in lines if _is_text_line(line)]
        summary = " ".join(prose[:FALLBACK_LINES])
    return truncate_summary(summary)


def render_inline_html(markdown_text: str) -> str:
    """Render a short markdown string as inline HTML (no wrapping <p>)."""
    if not markdown_text or not markdown_text.strip():
        return ""
    html = _md.render(markdown_text).strip()
    return _PARAGRAPH_RE.sub(r"\1", html)


def strip_markdown(text: str) -> str:
    """Plain-text rendering of a short markdown string."""
    text = re.sub(r"```(?:[\w+-]*\n)?(.*?)```", r"\1", text, flags=re.DOTALL)
    text = re.sub(r"`([^`]+)`", r"\1", text)
    text = text.replace("`", "")
    text = re.sub(r"\[\[([^\]]+)\]\]\(([^)]+)\)", r"\1", text)
    text = re.sub(r"\[([^\]]+)\]\([^)]+\)", r"\1", text)
    text = re.sub(r"\[\[([^\]]+)\]\]", r"\1", text)
    # Structural characters, kept when glued to a word ("C#", "a*b")
    text = re.sub(r"(?<!\w)[#*~>|]", "", text)
    text = re.sub(r"(?<!\w)\*{1,2}|\*{1,2}(?!\w)", "", text)
    # Emphasis underscores only at token boundaries, never in identifiers
    text = re.sub(r"(?<=\s)_(?=\S)|(?<=\S)_(?=\s)", "", text)
    text = text.replace("&middot;", "|")
    return re.sub(r"\s+", " ", text).strip()


def extract_summary(
    normalized_body: str,
    renderer: MarkdownRenderer = render_inline_html,
) -> SummaryResult:
    """
    Extract tickets and summary from a normalized meeting log body.

    Args:
        normalized_body: Output of meetinglog.normalizer.normalize.
        renderer: Markdown to inline HTML renderer for summary_html.
    """
    tickets = tuple(extract_tickets(normalized_body))
    summary_md = build_summary_markdown(normalized_body)
    return SummaryResult(
        tickets=tickets,
        ticket_count=len(tickets),
        summary_html=renderer(summary_md),
        summary_plain=strip_markdown(summary_md),
        summary_markdown=summary_md,
    )
