"""Tests for the error hierarchy."""

import pytest

from postlint.errors import (
    ConfigError,
    ErrorCategory,
    FrontMatterError,
    InvalidConfigError,
    MissingConfigError,
    PostLintError,
    PostReadError,
    PostsDirNotFoundError,
    RuleNotFoundError,
)


class TestPostLintError:
    """Base error behavior."""

    def test_defaults(self):
        err = PostLintError("boom")

        assert err.message == "boom"
        assert err.category == ErrorCategory.INTERNAL
        assert err.cause is None
        assert str(err) == "boom"

    def test_with_context(self):
        err = PostLintError("boom").with_context(path="_posts/a.md", line=3, attempt=2)

        assert err.context.path == "_posts/a.md"
        assert err.context.line == 3
        assert err.context.metadata == {"attempt": 2}

    def test_to_dict(self):
        cause = OSError("disk")
        err = PostLintError("boom", cause=cause).with_context(rule="MD001")

        assert err.to_dict() == {
            "error_type": "PostLintError",
            "message": "boom",
            "category": "INTERNAL",
            "context": {"rule": "MD001"},
            "cause": "disk",
        }
        assert err.__cause__ is cause


class TestSubclasses:
    """Categories and messages of the concrete errors."""

    def test_config_errors(self):
        assert isinstance(MissingConfigError("x"), ConfigError)
        assert MissingConfigError("site_root").message == "Missing configuration: site_root"
        assert InvalidConfigError("fail_on", "loud").message == "Invalid value for fail_on: 'loud'"
        assert InvalidConfigError("fail_on", "loud").category == ErrorCategory.CONFIG

    def test_rule_not_found(self):
        err = RuleNotFoundError("XYZ", ["MD001", "MD002"])
        assert err.message == "Rule 'XYZ' not found. Available: MD001, MD002"

    def test_posts_dir_not_found(self):
        err = PostsDirNotFoundError("/site/_posts")

        assert err.category == ErrorCategory.CORPUS
        assert err.context.path == "/site/_posts"

    def test_front_matter_error(self):
        err = FrontMatterError("bad", kind="invalid_yaml", line=4)

        assert err.category == ErrorCategory.PARSE
        assert err.line == 4
        assert err.context.line == 4

    def test_front_matter_error_unknown_kind(self):
        with pytest.raises(ValueError):
            FrontMatterError("bad", kind="weird")

    def test_post_read_error(self):
        err = PostReadError("_posts/a.md", cause=UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte"))

        assert err.category == ErrorCategory.IO
        assert err.path == "_posts/a.md"
        assert err.message.startswith("Cannot read _posts/a.md: ")
