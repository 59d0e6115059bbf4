"""Test ticket and summary extraction."""

from meetinglog.summary import (
    build_summary_markdown,
    extract_summary,
    extract_tickets,
    extract_topics,
    render_inline_html,
    strip_markdown,
    truncate_summary,
)


class TestExtractTickets:
    """Test ticket number extraction."""

    def test_order_preserved_and_deduplicated(self):
        text = "[[Bug #5]] ... [[Bug #5]] ... [[Feature #9]]"
        assert extract_tickets(text) == ["5", "9"]

    def test_canonical_links(self):
        text = "### [[Bug #100]](http://x) fix\n### [[Feature #200]](http://y) add"
        assert extract_tickets(text) == ["100", "200"]

    def test_bare_references(self):
        text = "See [Misc #7] and [Discussion #8].\nAlso [Feature #7]."
        assert extract_tickets(text) == ["7", "8"]

    def test_bare_and_canonical_in_line_order(self):
        assert extract_tickets("[Bug #1] then [[Bug #2]]") == ["1", "2"]

    def test_no_tickets(self):
        assert extract_tickets("Nothing here, not even #42.") == []


class TestExtractTopics:
    """Test heading topic extraction."""

    def test_ticket_references_and_author_removed(self):
        lines = ["### [[Bug #1]](http://x) fix the parser (ko1)"]
        assert extract_topics(lines) == ["fix the parser"]

    def test_release_boilerplate_skipped(self):
        lines = ["### About release timeframe", "### [Feature #2] pattern matching"]
        assert extract_topics(lines) == ["pattern matching"]

    def test_limited_to_three(self):
        lines = [f"### topic {i}" for i in range(5)]
        assert extract_topics(lines) == ["topic 0", "topic 1", "topic 2"]

    def test_other_heading_levels_ignored(self):
        assert extract_topics(["## Agenda", "#### detail"]) == []


class TestTruncateSummary:
    """Test backtick and bracket safe truncation."""

    def test_short_text_unchanged(self):
        assert truncate_summary("short", max_chars=200) == "short"

    def test_keeps_cutoff_character(self):
        result = truncate_summary("a" * 300, max_chars=200)
        assert result == "a" * 201 + "..."

    def test_open_code_span_dropped(self):
        text = "x" * 195 + "`abcdefghij`" + "y" * 20
        result = truncate_summary(text, max_chars=200)
        assert result.count("`") % 2 == 0
        assert result == "x" * 195 + "..."

    def test_open_link_dropped(self):
        text = "x" * 195 + "[link text](http://example.com)"
        result = truncate_summary(text, max_chars=200)
        assert "[" not in result
        assert result.endswith("...")

    def test_bracket_back_off_keeps_code_spans_paired(self):
        """Backing off before an open "[" must not leave a lone backtick."""
        text = "x" * 190 + "`a [ b` `c" + "d" * 50
        result = truncate_summary(text, max_chars=200)
        assert result.count("`") % 2 == 0
        assert result.count("[") <= result.count("]")
        assert result == "x" * 190 + "..."

    def test_closed_code_span_kept(self):
        text = "`a` " + "b" * 250
        result = truncate_summary(text, max_chars=200)
        assert result.startswith("`a` ")
        assert result.count("`") == 2


class TestSummaryMarkdown:
    """Test summary source selection."""

    def test_topics_joined(self):
        text = "### first\n### second\n"
        assert build_summary_markdown(text) == "first &middot; second"

    def test_prose_fallback(self):
        text = "# Title\n\nFirst line\n* item\nhttp://example.com\nSecond line\nThird line\n"
        assert build_summary_markdown(text) == "First line Second line"

    def test_empty_body(self):
        assert build_summary_markdown("") == ""


class TestStripMarkdown:
    """Test plain-text conversion of summaries."""

    def test_inline_markup(self):
        assert strip_markdown("`code` and [text](http://x) and **bold**") == (
            "code and text and bold"
        )

    def test_separator_becomes_pipe(self):
        assert strip_markdown("fix &middot; add") == "fix | add"

    def test_fenced_code_keeps_contents(self):
        assert strip_markdown("```ruby\nputs 1\n```") == "puts 1"

    def test_word_internal_characters_kept(self):
        assert strip_markdown("C# and snake_case_name") == "C# and snake_case_name"


class TestRenderInlineHtml:
    """Test summary HTML rendering."""

    def test_no_paragraph_wrapper(self):
        html = render_inline_html("use `foo` here")
        assert html == "use <code>foo</code> here"

    def test_blank(self):
        assert render_inline_html("   ") == ""


class TestExtractSummary:
    """Test the combined extraction."""

    def test_meeting_body(self):
        body = "### [[Bug #100]](http://x) fix\n### [[Feature #200]](http://y) add"
        result = extract_summary(body)
        assert result.tickets == ("100", "200")
        assert result.ticket_count == 2
        assert result.summary_plain == "fix | add"
        assert result.summary_markdown == "fix &middot; add"
        assert "<p>" not in result.summary_html

    def test_custom_renderer(self):
        result = extract_summary("Plain prose line.", renderer=lambda md: f"<em>{md}</em>")
        assert result.summary_html == "<em>Plain prose line.</em>"
