"""Tests for the Post model."""

from datetime import date
from pathlib import Path

import pytest

from postlint.config import SiteConfig
from postlint.errors import PostReadError
from postlint.models import Post


def make_post(text, name="2020-01-15-hello.md", site_config=None, is_draft=False):
    folder = "_drafts" if is_draft else "_posts"
    path = Path("/site") / folder / name
    return Post.from_text(text, path, f"{folder}/{name}", site_config=site_config, is_draft=is_draft)


class TestPostFromText:
    """Parsing a post from its contents."""

    def test_front_matter_and_body(self):
        post = make_post("---\ntitle: Hello\nlayout: post\n---\nBody text here\n")

        assert post.has_front_matter
        assert post.data == {"title": "Hello", "layout": "post"}
        assert post.fm_line == 2
        assert post.body == "Body text here\n"
        assert post.body_line == 5
        assert post.front_matter_error is None

    def test_no_front_matter(self):
        post = make_post("Only prose.\n")

        assert not post.has_front_matter
        assert post.data == {}
        assert post.body_line == 1

    def test_unterminated_front_matter_kept_as_error(self):
        post = make_post("---\ntitle: Hello\n\n```\ncode\n")

        assert post.front_matter_error is not None
        assert post.front_matter_error.kind == "unterminated"
        assert post.body == post.text
        # the body is still scanned from line 1
        assert post.document.fences[0].start_line == 4

    def test_invalid_yaml_still_scans_body(self):
        post = make_post("---\ntitle: [oops\n---\n```\n")

        assert post.front_matter_error.kind == "invalid_yaml"
        assert post.has_front_matter
        assert post.document.fences[0].start_line == 4

    def test_duplicate_front_matter_line(self):
        post = make_post("---\ntitle: A\n---\n---\ntitle: A\n---\nBody\n")
        assert post.duplicate_front_matter_line == 4

    def test_filename_parsed(self):
        post = make_post("---\n---\n", name="2020-01-15-hello.md")

        assert post.filename.slug == "hello"
        assert post.stem == "2020-01-15-hello"

    def test_bad_filename(self):
        post = make_post("---\n---\n", name="hello.md")
        assert post.filename is None

    def test_draft_filename(self):
        post = make_post("---\n---\n", name="idea.md", is_draft=True)

        assert post.is_draft
        assert post.filename.slug == "idea"
        assert post.date is None


class TestPostFields:
    """Derived front matter values."""

    def test_defaults_overlaid(self):
        site = SiteConfig(
            site_root=Path("/site"),
            data={"defaults": [{"scope": {"path": ""}, "values": {"layout": "post", "title": "Untitled"}}]},
        )
        post = make_post("---\ntitle: Mine\n---\n", site_config=site)

        assert post.defaults == {"layout": "post", "title": "Untitled"}
        assert post.layout == "post"
        assert post.title == "Mine"

    def test_date_from_front_matter(self):
        post = make_post("---\ndate: 2020-01-16 08:00:00 +0100\n---\n")
        assert post.date == date(2020, 1, 16)

    def test_date_from_filename(self):
        post = make_post("---\ntitle: x\n---\n")
        assert post.date == date(2020, 1, 15)

    def test_unparseable_date_falls_back_to_filename(self):
        post = make_post("---\ndate: soon\n---\n")
        assert post.date == date(2020, 1, 15)

    def test_slug_override(self):
        post = make_post("---\nslug: greeting\n---\n")
        assert post.slug == "greeting"

    def test_excerpt_separator(self):
        post = make_post("---\nexcerpt_separator: <!--more-->\n---\n")

        assert post.excerpt_separator == "<!--more-->"
        assert post.declares_excerpt_separator

    def test_default_excerpt_separator_not_declared(self):
        post = make_post("---\ntitle: x\n---\n")

        assert post.excerpt_separator == "\n\n"
        assert not post.declares_excerpt_separator

    def test_site_excerpt_separator(self):
        site = SiteConfig(site_root=Path("/site"), data={"excerpt_separator": "<!--cut-->"})
        post = make_post("---\ntitle: x\n---\n", site_config=site)

        assert post.excerpt_separator == "<!--cut-->"
        assert post.declares_excerpt_separator

    def test_word_count(self):
        post = make_post("---\ntitle: x\n---\nOne two three.\n")
        assert post.word_count == 3


class TestPostFromFile:
    """Reading post files."""

    def test_reads_file(self, tmp_path):
        path = tmp_path / "_posts" / "2020-01-15-a.md"
        path.parent.mkdir()
        path.write_text("---\ntitle: A\n---\n", encoding="utf-8")

        post = Post.from_file(path, tmp_path)

        assert post.rel_path == "_posts/2020-01-15-a.md"
        assert post.title == "A"

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "_posts" / "2020-01-15-a.md"
        path.parent.mkdir()
        path.write_bytes(b"---\ntitle: \xff\xfe\n---\n")

        with pytest.raises(PostReadError) as exc_info:
            Post.from_file(path, tmp_path)

        assert exc_info.value.path == "_posts/2020-01-15-a.md"
        assert isinstance(exc_info.value.cause, UnicodeDecodeError)
