"""
Post entity.

A ``Post`` is one Markdown file from ``_posts`` (or ``_drafts``) with its
front matter, body and scan results. Parse problems are kept on the post
rather than raised, so one broken post never stops the rest of the corpus
from being linted.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

from postlint.config import DEFAULT_EXCERPT_SEPARATOR, SiteConfig
from postlint.errors import FrontMatterError, PostReadError
from postlint.parser.filename import PostFilename, parse_draft_filename, parse_post_filename
from postlint.parser.front_matter import (
    find_duplicate_front_matter,
    load_front_matter,
    parse_front_matter_date,
    split_front_matter,
)
from postlint.parser.markdown import MarkdownDocument, scan_markdown

WORD = re.compile(r"\b\w+\b")


@dataclass
class Post:
    """A blog post and everything parsed from it.

    Attributes:
        path: Absolute path to the file
        rel_path: POSIX path relative to the site root
        is_draft: Whether the post lives in the drafts directory
        filename: Parsed filename (None if it breaks the convention)
        text: Raw file contents
        data: Front matter as written in the file
        defaults: Front matter defaults from ``_config.yml``
        front_matter_error: Why the front matter could not be read, if it could not
        fm_line: Line of the first front matter line (None if there is none)
        body: Markdown body
        body_line: Line of the first body line
        duplicate_front_matter_line: Line of a second front matter block in the body
        document: Scan results for the body
        site_excerpt_separator: Site-wide excerpt separator
    """

    path: Path
    rel_path: str
    is_draft: bool = False
    filename: PostFilename | None = None
    text: str = ""
    data: dict[str, Any] = field(default_factory=dict)
    defaults: dict[str, Any] = field(default_factory=dict)
    front_matter_error: FrontMatterError | None = None
    fm_line: int | None = None
    body: str = ""
    body_line: int = 1
    duplicate_front_matter_line: int | None = None
    document: MarkdownDocument = field(default_factory=MarkdownDocument)
    site_excerpt_separator: str = DEFAULT_EXCERPT_SEPARATOR

    @classmethod
    def from_text(
        cls,
        text: str,
        path: Path,
        rel_path: str,
        site_config: SiteConfig | None = None,
        is_draft: bool = False,
        extensions: tuple[str, ...] | list[str] = (".md", ".markdown"),
    ) -> Post:
        """Build a post from file contents.

        Args:
            text: File contents
            path: File path
            rel_path: Path relative to the site root
            site_config: Site configuration (defaults, excerpt separator)
            is_draft: Whether this is a draft
            extensions: Accepted post extensions

        Returns:
            Post
        """
        parse_name = parse_draft_filename if is_draft else parse_post_filename
        post = cls(
            path=path,
            rel_path=rel_path,
            is_draft=is_draft,
            filename=parse_name(path.name, extensions),
            text=text,
        )

        if site_config is not None:
            post.defaults = site_config.defaults_for(rel_path)
            post.site_excerpt_separator = site_config.excerpt_separator

        try:
            source = split_front_matter(text)
        except FrontMatterError as e:
            post.front_matter_error = e
            post.body = text
            post.body_line = 1
        else:
            post.body = source.body
            post.body_line = source.body_line
            post.fm_line = source.fm_line
            if source.raw is not None:
                try:
                    post.data = load_front_matter(source.raw, source.fm_line or 2)
                except FrontMatterError as e:
                    post.front_matter_error = e
                post.duplicate_front_matter_line = find_duplicate_front_matter(
                    source.body, source.body_line
                )

        post.document = scan_markdown(post.body, post.body_line)
        return post

    @classmethod
    def from_file(
        cls,
        path: Path,
        site_root: Path,
        site_config: SiteConfig | None = None,
        is_draft: bool = False,
        extensions: tuple[str, ...] | list[str] = (".md", ".markdown"),
    ) -> Post:
        """Read and parse a post file.

        Raises:
            PostReadError: If the file cannot be read as UTF-8 text
        """
        rel_path = _relative(path, site_root)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PostReadError(rel_path, cause=e) from e
        return cls.from_text(text, path, rel_path, site_config, is_draft, extensions)

    @property
    def has_front_matter(self) -> bool:
        return self.fm_line is not None

    @property
    def effective(self) -> dict[str, Any]:
        """Front matter as the generator sees it: defaults overlaid by the file."""
        merged = dict(self.defaults)
        merged.update(self.data)
        return merged

    @property
    def title(self) -> str | None:
        value = self.effective.get("title")
        return str(value) if value is not None else None

    @property
    def layout(self) -> str | None:
        value = self.effective.get("layout")
        return str(value) if value is not None else None

    @property
    def slug(self) -> str | None:
        value = self.data.get("slug")
        if isinstance(value, str) and value:
            return value
        return self.filename.slug if self.filename else None

    @property
    def date(self) -> date | None:
        """Front matter ``date`` if it parses, else the filename date."""
        if "date" in self.data:
            try:
                return parse_front_matter_date(self.data["date"])
            except ValueError:
                pass  # reported by the field-type rule
        return self.filename.date if self.filename else None

    @property
    def excerpt_separator(self) -> str:
        value = self.effective.get("excerpt_separator")
        return value if isinstance(value, str) else self.site_excerpt_separator

    @property
    def declares_excerpt_separator(self) -> bool:
        return isinstance(self.effective.get("excerpt_separator"), str) or (
            self.site_excerpt_separator != DEFAULT_EXCERPT_SEPARATOR
        )

    @property
    def stem(self) -> str:
        return self.path.stem

    @property
    def word_count(self) -> int:
        return len(WORD.findall(self.body))


def _relative(path: Path, site_root: Path) -> str:
    try:
        return path.resolve().relative_to(Path(site_root).resolve()).as_posix()
    except ValueError:
        return path.as_posix()
