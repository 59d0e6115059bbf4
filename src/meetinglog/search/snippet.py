"""
Snippet Generation for Search Results

Generates KWIC (Key Word In Context) snippets from index text, strips the
markdown left over in it, and highlights query terms on escaped HTML.
"""

import re
from dataclasses import dataclass

BEFORE_CHARS = 60
AFTER_CHARS = 100
FALLBACK_CHARS = 150
MIN_HIGHLIGHT_LEN = 2
ELLIPSIS = "..."

_SNIPPET_MARKDOWN_PATTERNS = (
    (re.compile(r"\[\[([^\]]+)\]\]\([^)]*\)"), r"\1"),  # [[text]](url)
    (re.compile(r"\[([^\]]+)\]\([^)]*\)"), r"\1"),  # [text](url)
    (re.compile(r"\[\[([^\]]+)\]\]"), r"\1"),  # [[text]]
    (re.compile(r"`+"), ""),  # code markers
    (re.compile(r"(^|\s)#{1,6}\s+"), r"\1"),  # headings
    (re.compile(r"(^|\s)>\s*"), r"\1"),  # blockquotes
    (re.compile(r"(^|\s)[*\-+]\s+"), r"\1"),  # list items
    (re.compile(r"\*{1,3}|(?<!\w)_{1,3}|_{1,3}(?!\w)"), ""),  # emphasis
)
_WHITESPACE_RE = re.compile(r"\s+")
_ENTITY_PATTERN = r"&#?\w+;"


@dataclass
class Snippet:
    """A text snippet with optional highlighting."""

    text: str  # Escaped HTML, may include <mark> tags
    plain_text: str  # The snippet before escaping


def extract_window(text: str, terms: list[str]) -> str:
    """
    Context window around the first term found in text.

    Terms are tried in query order; the first one present anywhere in the
    text anchors the window [pos - 60, pos + 100).
    """
    if not text:
        return ""

    lower = text.lower()
    position = -1
    for term in terms:
        position = lower.find(term.lower())
        if position != -1:
            break

    if position == -1:
        return text[:FALLBACK_CHARS]

    start = max(0, position - BEFORE_CHARS)
    end = min(len(text), position + AFTER_CHARS)
    snippet = text[start:end]

    if start > 0:
        snippet = ELLIPSIS + snippet
    if end < len(text):
        snippet = snippet + ELLIPSIS
    return snippet


def strip_snippet_markdown(text: str) -> str:
    """Remove link, code, heading, list, blockquote and emphasis syntax."""
    for pattern, replacement in _SNIPPET_MARKDOWN_PATTERNS:
        text = pattern.sub(replacement, text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def escape_html(text: str | None) -> str:
    if not text:
        return ""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def highlight(escaped_text: str, terms: list[str]) -> str:
    """
    Wrap query terms in <mark> tags.

    Operates on already-escaped text; terms shorter than two characters are
    not highlighted.
    """
    escaped_terms = [
        re.escape(escape_html(t)) for t in terms if len(t) >= MIN_HIGHLIGHT_LEN
    ]
    if not escaped_terms:
        return escaped_text

    # Terms first, then entities: a term can still span "&amp;", but an
    # entity not consumed by a term is skipped whole
    pattern = re.compile(
        r"(" + "|".join(escaped_terms) + r")|" + _ENTITY_PATTERN, re.IGNORECASE
    )
    return pattern.sub(
        lambda m: f"<mark>{m.group(1)}</mark>" if m.group(1) else m.group(0),
        escaped_text,
    )


def generate_snippet(text: str, terms: list[str], highlight_terms: bool = True) -> Snippet:
    """
    Generate a display snippet for a search hit.

    Args:
        text: Entry content (or summary when there is no content).
        terms: Query terms, in query order.
        highlight_terms: Whether to add <mark> tags.

    Returns:
        Snippet with escaped (and highlighted) text and the plain snippet.
    """
    plain = strip_snippet_markdown(extract_window(text, terms))
    escaped = escape_html(plain)
    if highlight_terms:
        escaped = highlight(escaped, terms)
    return Snippet(text=escaped, plain_text=plain)
