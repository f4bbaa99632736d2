"""
Front matter and filename rules.

These enforce the contract between posts and the site generator: the
``YYYY-MM-DD-title.md`` name, a front matter block that parses as
key-value metadata, and the fields the layouts consume.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from postlint.parser.filename import POST_FILENAME
from postlint.parser.front_matter import parse_front_matter_date
from postlint.report import Finding, Severity
from postlint.rules.base import PostRule, RuleRegistry

if TYPE_CHECKING:
    from postlint.corpus import Corpus
    from postlint.models import Post

# `layout: none` renders the post without a layout
NO_LAYOUT = {"none", "null"}


def key_line(post: Post, key: str) -> int | None:
    """Line where ``key`` is defined in the post's front matter."""
    if post.fm_line is None:
        return None
    pattern = re.compile(rf"^{re.escape(key)}\s*:")
    lines = post.text.splitlines()
    for index in range(post.fm_line - 1, min(post.body_line - 2, len(lines))):
        if pattern.match(lines[index]):
            return index + 1
    return post.fm_line


def _parsed(post: Post) -> bool:
    return post.has_front_matter and post.front_matter_error is None


def _type_name(value: Any) -> str:
    return type(value).__name__


def _matches_type(value: Any, type_name: str) -> bool:
    if type_name == "str":
        return isinstance(value, str)
    if type_name == "bool":
        return isinstance(value, bool)
    if type_name == "int":
        return isinstance(value, int) and not isinstance(value, bool)
    if type_name == "list":
        return isinstance(value, list)
    if type_name == "list|str":
        return isinstance(value, (list, str))
    if type_name == "datetime":
        try:
            parse_front_matter_date(value)
        except ValueError:
            return False
        return True
    raise ValueError(f"Unknown type name: {type_name}")


@RuleRegistry.register
class FilenameFormatRule(PostRule):
    code = "NAME001"
    name = "filename-format"
    description = "Post file names follow YYYY-MM-DD-title.md with a real date"
    severity = Severity.ERROR

    def check(self, post: Post, corpus: Corpus) -> Iterator[Finding]:
        if post.is_draft or post.filename is not None:
            return

        stem = post.path.name
        for ext in corpus.config.extensions:
            if stem.lower().endswith(ext.lower()):
                stem = stem[: -len(ext)]
                break

        match = POST_FILENAME.match(stem)
        if match:
            written = f"{match['year']}-{match['month']}-{match['day']}"
            message = f"Date '{written}' in file name is not a valid calendar date"
        else:
            message = f"File name '{post.path.name}' does not follow YYYY-MM-DD-title{post.path.suffix}"
        yield self.finding(post.rel_path, None, message)


@RuleRegistry.register
class FrontMatterMissingRule(PostRule):
    code = "FM001"
    name = "front-matter-missing"
    description = "Every post starts with a front matter block"
    severity = Severity.ERROR

    def check(self, post: Post, corpus: Corpus) -> Iterator[Finding]:
        if not post.has_front_matter and post.front_matter_error is None:
            yield self.finding(
                post.rel_path, 1, "Post does not start with a '---' front matter block"
            )


@RuleRegistry.register
class FrontMatterUnterminatedRule(PostRule):
    code = "FM002"
    name = "front-matter-unterminated"
    description = "The front matter block has a closing '---' line"
    severity = Severity.ERROR

    def check(self, post: Post, corpus: Corpus) -> Iterator[Finding]:
        error = post.front_matter_error
        if error is not None and error.kind == "unterminated":
            yield self.finding(post.rel_path, error.line, error.message)


@RuleRegistry.register
class FrontMatterInvalidRule(PostRule):
    code = "FM003"
    name = "front-matter-invalid"
    description = "The front matter block parses as YAML key-value metadata"
    severity = Severity.ERROR

    def check(self, post: Post, corpus: Corpus) -> Iterator[Finding]:
        error = post.front_matter_error
        if error is not None and error.kind in ("invalid_yaml", "not_mapping"):
            yield self.finding(post.rel_path, error.line, error.message)


@RuleRegistry.register
class RequiredFieldRule(PostRule):
    code = "FM004"
    name = "required-field-missing"
    description = "Required front matter fields are present and not empty (site defaults count)"
    severity = Severity.ERROR

    def check(self, post: Post, corpus: Corpus) -> Iterator[Finding]:
        if not _parsed(post):
            return

        effective = post.effective
        for field_name in corpus.config.required_fields:
            if field_name not in effective:
                yield self.finding(
                    post.rel_path,
                    post.fm_line,
                    f"Required front matter field '{field_name}' is missing",
                )
                continue

            value = effective[field_name]
            if value is None or (isinstance(value, str) and not value.strip()):
                yield self.finding(
                    post.rel_path,
                    key_line(post, field_name),
                    f"Required front matter field '{field_name}' is empty",
                )


@RuleRegistry.register
class FieldTypeRule(PostRule):
    code = "FM005"
    name = "field-type"
    description = "Front matter values have the expected types"
    severity = Severity.ERROR

    def check(self, post: Post, corpus: Corpus) -> Iterator[Finding]:
        if not _parsed(post):
            return

        for field_name, type_name in corpus.config.field_types.items():
            if field_name not in post.data or post.data[field_name] is None:
                continue
            value = post.data[field_name]
            if _matches_type(value, type_name):
                continue

            if type_name == "datetime":
                message = f"Front matter field '{field_name}' is not a valid date: {value!r}"
            else:
                message = (
                    f"Front matter field '{field_name}' should be {type_name}, "
                    f"got {_type_name(value)} ({value!r})"
                )
            yield self.finding(post.rel_path, key_line(post, field_name), message)


@RuleRegistry.register
class DuplicateFrontMatterRule(PostRule):
    code = "FM006"
    name = "duplicate-front-matter"
    description = "The body does not begin with a second front matter block"
    severity = Severity.WARNING

    def check(self, post: Post, corpus: Corpus) -> Iterator[Finding]:
        if post.duplicate_front_matter_line is not None:
            yield self.finding(
                post.rel_path,
                post.duplicate_front_matter_line,
                "A second front matter block follows the first; it will render as body text",
            )


@RuleRegistry.register
class DateMismatchRule(PostRule):
    code = "FM007"
    name = "date-mismatch"
    description = "A front matter date falls on the day in the file name"
    severity = Severity.WARNING

    def check(self, post: Post, corpus: Corpus) -> Iterator[Finding]:
        if not _parsed(post) or "date" not in post.data:
            return
        if post.filename is None or post.filename.date is None:
            return

        try:
            declared = parse_front_matter_date(post.data["date"])
        except ValueError:
            return

        if declared != post.filename.date:
            yield self.finding(
                post.rel_path,
                key_line(post, "date"),
                f"Front matter date {declared.isoformat()} differs from file name date "
                f"{post.filename.date.isoformat()}",
            )


@RuleRegistry.register
class UnknownLayoutRule(PostRule):
    code = "FM008"
    name = "unknown-layout"
    description = "The layout exists in _layouts/ (skipped when the site uses a theme)"
    severity = Severity.WARNING

    def check(self, post: Post, corpus: Corpus) -> Iterator[Finding]:
        site = corpus.site_config
        if site.layouts is None or site.theme is not None or not _parsed(post):
            return

        layout = post.layout
        if not layout or layout.lower() in NO_LAYOUT or layout in site.layouts:
            return

        line = key_line(post, "layout") if "layout" in post.data else post.fm_line
        available = ", ".join(sorted(site.layouts)) or "none"
        yield self.finding(
            post.rel_path,
            line,
            f"Layout '{layout}' not found in _layouts/ (available: {available})",
        )
