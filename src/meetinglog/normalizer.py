"""
Meeting Log Text Normalizer

Rewrites raw meeting-log bodies into one canonical markdown dialect.
The logs were written over many years with different editors, so the same
thing (a ticket link, a redacted section) appears in several legacy forms.

Each rule is a pure function. Rules run in the order of NORMALIZATION_RULES;
a rule may rely on the canonical form produced by an earlier one, never on a
later one, so new dialects are appended at the end.
"""

import re
from typing import Callable
from urllib.parse import unquote_plus

TICKET_KINDS = ("Feature", "Bug", "Misc", "Discussion")
_KIND = "(?:" + "|".join(TICKET_KINDS) + ")"

NormalizationRule = Callable[[str], str]

# "## Check security tickets" heading followed by the [secret] marker
_SECRET_HEADING_RE = re.compile(
    r"^##\s*Check security tickets\s*\n+\[secret\]\s*\n+", re.MULTILINE
)
# Older logs: same block without the heading marker
_SECRET_PLAIN_RE = re.compile(
    r"^Check security tickets\s*\n\[secret\]\s*\n+", re.MULTILINE
)
# A standalone [secret] line
_SECRET_LINE_RE = re.compile(r"^\[secret\]\s*\n+", re.MULTILINE)

# https://www.google.com/url?q=REAL_URL&sa=D&source=editors&ust=...
_GOOGLE_REDIRECT_RE = re.compile(
    r"https://www\.google\.com/url\?q=([^&)\]\s]+)(?:&[^)\]\s]*)?"
)

# \[[text](url)\]
_ESCAPED_BRACKET_LINK_RE = re.compile(r"\\\[(\[[^\]]*\]\([^)]+\))\\\]")

# [[Bug #123](url)]
_WRAPPED_TICKET_LINK_RE = re.compile(
    r"\[\[(" + _KIND + r"\s*#\d+)\]\(([^)]+)\)\]"
)

# [[Bug #123](url) followed by whitespace
_UNCLOSED_TICKET_LINK_RE = re.compile(
    r"\[\[(" + _KIND + r"\s*#\d+)\]\(([^)]+)\)(\s)"
)


def remove_secret_sections(text: str) -> str:
    """Drop redacted "security tickets" sections without leaving a trace."""
    text = _SECRET_HEADING_RE.sub("", text)
    text = _SECRET_PLAIN_RE.sub("", text)
    return _SECRET_LINE_RE.sub("", text)


def unwrap_redirects(text: str) -> str:
    """Replace Google Docs redirect links with their decoded targets."""
    return _GOOGLE_REDIRECT_RE.sub(lambda m: unquote_plus(m.group(1)), text)


def fix_escaped_bracket_links(text: str) -> str:
    r"""
    Unwrap links pasted from a word processor: \[[text](url)\] -> [text](url).

    Runs after unwrap_redirects so the url part no longer carries redirect
    parameters that may contain brackets.
    """
    return _ESCAPED_BRACKET_LINK_RE.sub(r"\1", text)


def normalize_ticket_links(text: str) -> str:
    """
    Rewrite [[Bug #123](url)] to the canonical [[Bug #123]](url).

    Requires fix_escaped_bracket_links to have run, otherwise the escaped
    outer brackets hide the closing "]".
    """
    return _WRAPPED_TICKET_LINK_RE.sub(r"[[\1]](\2)", text)


def fix_unclosed_ticket_links(text: str) -> str:
    """
    Rewrite [[Bug #123](url) text to [[Bug #123]](url) text.

    Must run after normalize_ticket_links: the wrapped form also starts with
    an unclosed double bracket and would otherwise keep a stray "]".
    """
    return _UNCLOSED_TICKET_LINK_RE.sub(r"[[\1]](\2)\3", text)


NORMALIZATION_RULES: tuple[NormalizationRule, ...] = (
    remove_secret_sections,
    unwrap_redirects,
    fix_escaped_bracket_links,
    normalize_ticket_links,
    fix_unclosed_ticket_links,
)


def normalize(raw: str) -> str:
    """Apply every normalization rule in order."""
    text = raw
    for rule in NORMALIZATION_RULES:
        text = rule(text)
    return text
