"""
Tests for front matter parsing.

Tests verify:
- The block is split at the first closing delimiter
- Parse errors carry the absolute line number
- Duplicated front matter at the top of the body is detected
"""

from datetime import date, datetime

import pytest

from postlint.errors import FrontMatterError
from postlint.parser.front_matter import (
    find_duplicate_front_matter,
    load_front_matter,
    parse_front_matter_date,
    split_front_matter,
)


class TestSplitFrontMatter:
    """Test splitting front matter from body."""

    def test_basic_split(self):
        source = split_front_matter("---\ntitle: Hi\n---\nBody\n")

        assert source.has_front_matter
        assert source.raw == "title: Hi\n"
        assert source.body == "Body\n"
        assert source.fm_line == 2
        assert source.body_line == 4

    def test_no_front_matter(self):
        source = split_front_matter("Just a body\n")

        assert not source.has_front_matter
        assert source.raw is None
        assert source.fm_line is None
        assert source.body == "Just a body\n"
        assert source.body_line == 1

    def test_dashes_later_in_file_are_not_front_matter(self):
        source = split_front_matter("Intro\n---\ntitle: x\n---\n")
        assert not source.has_front_matter

    def test_dots_close_block(self):
        source = split_front_matter("---\na: 1\n...\nbody\n")
        assert source.raw == "a: 1\n"
        assert source.body == "body\n"

    def test_empty_block(self):
        source = split_front_matter("---\n---\nbody\n")
        assert source.raw == ""
        assert source.body_line == 3

    def test_byte_order_mark_ignored(self):
        source = split_front_matter("\ufeff---\ntitle: x\n---\n")
        assert source.raw == "title: x\n"

    def test_trailing_whitespace_on_delimiter(self):
        source = split_front_matter("---  \ntitle: x\n---\t\nbody\n")
        assert source.raw == "title: x\n"

    def test_unterminated_raises(self):
        with pytest.raises(FrontMatterError) as exc_info:
            split_front_matter("---\ntitle: x\n\nNo closing line\n")

        assert exc_info.value.kind == "unterminated"
        assert exc_info.value.line == 1


class TestLoadFrontMatter:
    """Test YAML loading."""

    def test_mapping(self):
        data = load_front_matter("title: Hi\ntags: [a, b]\n")
        assert data == {"title": "Hi", "tags": ["a", "b"]}

    def test_empty_is_empty_mapping(self):
        assert load_front_matter("") == {}
        assert load_front_matter("# only a comment\n") == {}

    def test_yaml_error_line_is_absolute(self):
        with pytest.raises(FrontMatterError) as exc_info:
            load_front_matter("title: ok\n  indented: wrong\n", fm_line=2)

        assert exc_info.value.kind == "invalid_yaml"
        assert exc_info.value.line == 3

    def test_impossible_timestamp(self):
        with pytest.raises(FrontMatterError) as exc_info:
            load_front_matter("date: 2019-02-30\n", fm_line=2)

        assert exc_info.value.kind == "invalid_yaml"
        assert exc_info.value.line == 2

    @pytest.mark.parametrize("raw", ["- a\n- b\n", "just some text\n"])
    def test_not_a_mapping(self, raw):
        with pytest.raises(FrontMatterError) as exc_info:
            load_front_matter(raw, fm_line=2)

        assert exc_info.value.kind == "not_mapping"
        assert exc_info.value.line == 2


class TestFindDuplicateFrontMatter:
    """A pasted second block at the top of the body."""

    def test_detects_second_block(self):
        body = "\n---\ntitle: Again\nlayout: post\n---\nText\n"
        assert find_duplicate_front_matter(body, body_line=5) == 6

    def test_horizontal_rules_around_prose(self):
        body = "---\n\nSome prose between rules.\n\n---\n"
        assert find_duplicate_front_matter(body, body_line=5) is None

    def test_body_not_starting_with_delimiter(self):
        body = "Intro\n\n---\ntitle: x\n---\n"
        assert find_duplicate_front_matter(body, body_line=5) is None

    def test_unclosed_second_block(self):
        body = "---\ntitle: x\nmore text\n"
        assert find_duplicate_front_matter(body, body_line=5) is None


class TestParseFrontMatterDate:
    """Dates as PyYAML hands them over."""

    def test_datetime(self):
        assert parse_front_matter_date(datetime(2020, 1, 15, 9, 30)) == date(2020, 1, 15)

    def test_date(self):
        assert parse_front_matter_date(date(2020, 1, 15)) == date(2020, 1, 15)

    @pytest.mark.parametrize("value", [
        "2021-03-04",
        "2021-03-04 10:00:00 -0500",
        "2021-03-04T10:00:00Z",
        "2021-3-4 10:00",
    ])
    def test_strings(self, value):
        assert parse_front_matter_date(value) == date(2021, 3, 4)

    @pytest.mark.parametrize("value", ["next tuesday", 42, None, ["2021-03-04"]])
    def test_not_dates(self, value):
        with pytest.raises(ValueError):
            parse_front_matter_date(value)
