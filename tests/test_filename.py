"""Tests for the post filename convention."""

from datetime import date

import pytest

from postlint.parser.filename import parse_draft_filename, parse_post_filename


class TestParsePostFilename:
    """Test YYYY-MM-DD-title.ext parsing."""

    def test_valid_name(self):
        parsed = parse_post_filename("2020-01-15-hello-world.md")

        assert parsed is not None
        assert parsed.date == date(2020, 1, 15)
        assert parsed.slug == "hello-world"
        assert parsed.extension == ".md"
        assert parsed.stem == "2020-01-15-hello-world"

    def test_markdown_extension(self):
        parsed = parse_post_filename("2021-06-30-notes.markdown")
        assert parsed is not None
        assert parsed.extension == ".markdown"

    def test_extension_case_insensitive(self):
        parsed = parse_post_filename("2020-01-15-shouty.MD")
        assert parsed is not None
        assert parsed.extension == ".MD"

    @pytest.mark.parametrize("name", [
        "hello-world.md",
        "2020-1-15-short-month.md",
        "2020-01-15.md",
        "2020-01-15-.md",
        "2020-01-15---.md",
        "2020-01-15-notes.txt",
    ])
    def test_rejects_malformed_names(self, name):
        assert parse_post_filename(name) is None

    @pytest.mark.parametrize("name", ["2019-02-30-leap.md", "2020-13-01-month.md", "2020-00-10-zero.md"])
    def test_rejects_impossible_dates(self, name):
        assert parse_post_filename(name) is None

    def test_custom_extensions(self):
        assert parse_post_filename("2020-01-15-page.html", extensions=[".html"]) is not None
        assert parse_post_filename("2020-01-15-page.md", extensions=[".html"]) is None


class TestParseDraftFilename:
    """Drafts have no date in their name."""

    def test_undated_draft(self):
        parsed = parse_draft_filename("my-draft.md")

        assert parsed is not None
        assert parsed.date is None
        assert parsed.slug == "my-draft"
        assert parsed.stem == "my-draft"

    def test_dated_draft_keeps_date(self):
        parsed = parse_draft_filename("2020-01-15-early.md")
        assert parsed is not None
        assert parsed.date == date(2020, 1, 15)

    def test_wrong_extension(self):
        assert parse_draft_filename("notes.txt") is None
