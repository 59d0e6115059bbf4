"""Test snippet generation and highlighting."""

from meetinglog.search.snippet import (
    escape_html,
    extract_window,
    generate_snippet,
    highlight,
    strip_snippet_markdown,
)


class TestExtractWindow:
    """Test KWIC window extraction."""

    def test_no_match_falls_back_to_prefix(self):
        text = "a" * 300
        assert extract_window(text, ["zzz"]) == "a" * 150

    def test_window_around_match(self):
        text = "x" * 200 + "needle" + "y" * 200
        snippet = extract_window(text, ["needle"])
        assert snippet.startswith("...")
        assert snippet.endswith("...")
        assert snippet == "..." + "x" * 60 + "needle" + "y" * 94 + "..."

    def test_match_near_start(self):
        snippet = extract_window("needle in a haystack", ["needle"])
        assert snippet == "needle in a haystack"

    def test_first_present_term_anchors(self):
        text = "alpha " + "-" * 100 + " beta"
        snippet = extract_window(text, ["missing", "beta"])
        assert "beta" in snippet
        assert snippet.startswith("...")

    def test_empty_text(self):
        assert extract_window("", ["x"]) == ""


class TestStripSnippetMarkdown:
    def test_links_and_markup(self):
        text = "## Topic [[Bug #1]](http://x) and **bold** `code` - item"
        assert strip_snippet_markdown(text) == "Topic Bug #1 and bold code item"


class TestHighlight:
    """Test <mark> highlighting."""

    def test_case_insensitive(self):
        assert highlight("Ruby &amp; Rails", ["ruby"]) == "<mark>Ruby</mark> &amp; Rails"

    def test_short_terms_ignored(self):
        assert highlight("a b c", ["a"]) == "a b c"

    def test_overlapping_terms_not_nested(self):
        assert highlight("mark", ["ma", "mark"]) == "<mark>ma</mark>rk"
        assert highlight("mark", ["mark", "ma"]) == "<mark>mark</mark>"

    def test_entities_not_split(self):
        assert highlight("R&amp;D notes", ["amp"]) == "R&amp;D notes"
        assert highlight("&lt;tag&gt; &quot;x&quot;", ["lt", "gt", "quot"]) == (
            "&lt;tag&gt; &quot;x&quot;"
        )

    def test_term_spanning_entity(self):
        assert highlight("R&amp;D notes", ["r&d"]) == "<mark>R&amp;D</mark> notes"

    def test_regex_characters_escaped(self):
        assert highlight("c++ and c", ["c++"]) == "<mark>c++</mark> and c"


class TestGenerateSnippet:
    """Test full snippet generation."""

    def test_html_escaped_then_highlighted(self):
        snippet = generate_snippet("<script> tag", ["script"])
        assert snippet.text == "&lt;<mark>script</mark>&gt; tag"
        assert snippet.plain_text == "<script> tag"

    def test_without_highlighting(self):
        snippet = generate_snippet("Ruby 3.0", ["ruby"], highlight_terms=False)
        assert snippet.text == "Ruby 3.0"

    def test_escape_html(self):
        assert escape_html('a & "b"') == "a &amp; &quot;b&quot;"
        assert escape_html(None) == ""
