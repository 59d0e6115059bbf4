"""Test corpus loading and the corpus-wide passes."""

import datetime
import logging

from meetinglog.corpus import (
    build_record_from_text,
    disambiguate_titles,
    load_corpus,
    load_records,
    pair_languages,
    sort_by_date_desc,
)


class TestBuildRecord:
    """Test single-document extraction."""

    def test_end_to_end_scenario(self):
        raw = "### [[Bug #100]](http://x) fix\n### [[Feature #200]](http://y) add"
        record = build_record_from_text(raw, "2019/DevMeeting-2019-03-14.md")

        assert record.title == "Mar 2019 Meeting"
        assert record.slug == "03-14"
        assert record.tickets == ("100", "200")
        assert record.summary_plain == "fix | add"
        assert record.url == "/meetings/2019/03-14/"
        assert record.year == record.date.year

    def test_frontmatter_removed_from_body(self):
        raw = "---\nlang: ja\n---\n### 議題\n"
        record = build_record_from_text(raw, "2020/notes.md")
        assert record.has_frontmatter is True
        assert record.language == "ja"
        assert record.raw_body == "### 議題\n"

    def test_normalized_body_kept(self):
        raw = "[[Bug #1](http://x)] crash\n"
        record = build_record_from_text(raw, "2020/DevMeeting-2020-01-09.md")
        assert record.raw_body == raw
        assert record.normalized_body == "[[Bug #1]](http://x) crash\n"


class TestLoadRecords:
    """Test loading a corpus directory."""

    def test_loads_meeting_logs(self, corpus_dir):
        records = load_records(corpus_dir)
        slugs = sorted(r.slug for r in records)
        assert slugs == ["03-14", "03-14-ja", "03-28", "devcamp-07-31"]

    def test_bad_document_skipped_with_warning(self, corpus_dir, caplog):
        with caplog.at_level(logging.WARNING, logger="meetinglog.corpus"):
            records = load_records(corpus_dir)
        assert all("02-30" not in r.source_path for r in records)
        assert any("Error parsing" in m and "DevMeeting-2019-02-30.md" in m for m in caplog.messages)

    def test_secret_section_and_redirect_normalized(self, corpus_dir):
        records = {r.slug: r for r in load_records(corpus_dir)}
        record = records["03-28"]
        assert "[secret]" not in record.normalized_body
        assert record.tickets == ("300",)
        assert record.summary_plain == "Add Array#intersect?"

    def test_missing_directory(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="meetinglog.corpus"):
            records = load_records(tmp_path / "missing")
        assert records == []
        assert any("Meeting log directory not found" in m for m in caplog.messages)


class TestPairLanguages:
    """Test en/ja cross-linking."""

    def test_same_date_pair_linked(self, make_record):
        en = make_record(slug="03-14", language="en")
        ja = make_record(slug="03-14-ja", language="ja")
        other = make_record(date=datetime.date(2019, 3, 28), language="en")

        paired = pair_languages([en, ja, other])

        assert paired[0].language_pair_url == ja.url
        assert paired[1].language_pair_url == en.url
        assert paired[2].language_pair_url is None

    def test_same_language_not_linked(self, make_record):
        a = make_record(slug="03-14", language="en")
        b = make_record(slug="03-14-b", language="en")
        paired = pair_languages([a, b])
        assert all(r.language_pair_url is None for r in paired)

    def test_input_not_mutated(self, make_record):
        en = make_record(language="en")
        ja = make_record(slug="03-14-ja", language="ja")
        records = [en, ja]
        pair_languages(records)
        assert records[0].language_pair_url is None


class TestDisambiguateTitles:
    """Test numbering of months with several meetings."""

    def test_numbered_chronologically(self, make_record):
        d1, d2, d3 = (datetime.date(2019, 3, day) for day in (5, 14, 28))
        records = [
            make_record(date=d3),
            make_record(date=d1),
            make_record(date=d2),
        ]

        titles = {r.date: r.title for r in disambiguate_titles(records)}

        assert titles[d1].endswith(" #1")
        assert titles[d2].endswith(" #2")
        assert titles[d3].endswith(" #3")

    def test_single_meeting_unnumbered(self, make_record):
        records = disambiguate_titles([make_record()])
        assert records[0].title == "Mar 2019 Meeting"

    def test_paired_japanese_log_does_not_take_slot(self, make_record):
        en = make_record(slug="03-14", language="en")
        ja = make_record(slug="03-14-ja", language="ja")
        later = make_record(date=datetime.date(2019, 3, 28), language="en")

        result = disambiguate_titles(pair_languages([en, ja, later]))

        assert result[0].title == "Mar 2019 Meeting #1"
        assert result[1].title == "Mar 2019 Meeting"
        assert result[2].title == "Mar 2019 Meeting #2"

    def test_undated_records_ignored(self, make_record):
        records = [make_record(date=None, year=2015), make_record(date=None, year=2015)]
        result = disambiguate_titles(records)
        assert [r.title for r in result] == [r.title for r in records]


class TestLoadCorpus:
    """Test the full corpus build."""

    def test_sorted_newest_first(self, corpus_dir):
        records = load_corpus(corpus_dir)
        dates = [r.sort_date for r in records]
        assert dates == sorted(dates, reverse=True)
        assert records[-1].slug == "devcamp-07-31"

    def test_pairs_and_titles_finalized(self, corpus_dir):
        records = {r.slug: r for r in load_corpus(corpus_dir)}
        assert records["03-14"].language_pair_url == "/meetings/2019/03-14-ja/"
        assert records["03-14-ja"].language_pair_url == "/meetings/2019/03-14/"
        assert records["03-14"].title == "Mar 2019 Meeting #1"
        assert records["03-28"].title == "Mar 2019 Meeting #2"

    def test_sort_undated_as_january_first(self, make_record):
        undated = make_record(date=None, year=2019)
        dated = make_record(date=datetime.date(2019, 1, 2))
        assert sort_by_date_desc([undated, dated]) == [dated, undated]


class TestRecordDict:
    """Test the template projection of a record."""

    def test_dated_record(self, make_record):
        record = make_record(
            tickets=tuple(str(n) for n in range(7)),
            ticket_count=7,
            language_pair_url="/meetings/2019/03-14-ja/",
        )
        data = record.to_dict()
        assert data["date"] == "2019-03-14"
        assert data["date_formatted"] == "March 14, 2019"
        assert data["month_name"] == "March"
        assert data["tickets"] == ["0", "1", "2", "3", "4"]
        assert data["ticket_count"] == 7
        assert data["has_language_pair"] is True
        assert data["language_pair_lang"] == "ja"

    def test_undated_record(self, make_record):
        data = make_record(date=None, year=2015, title="2015 DevCamp").to_dict()
        assert data["date"] is None
        assert data["date_formatted"] == "2015 DevCamp"
        assert data["has_language_pair"] is False
