"""
Shared pytest fixtures for postlint tests.

This module provides:
- The paths of the checked-in example sites (``fixtures/site`` and
  ``fixtures/broken-site``)
- A builder for throwaway Jekyll sites under ``tmp_path``
- Logging reset between tests

Usage:
    def test_something(make_site):
        site = make_site({"_posts/2020-01-01-a.md": "---\\ntitle: A\\n---\\n"})
"""

import logging
import textwrap
from pathlib import Path
from typing import Callable

import pytest
import structlog

from postlint.config import LintConfig
from postlint.corpus import Corpus

FIXTURES_DIR = Path(__file__).parent / "fixtures"

DEFAULT_SITE_CONFIG = """\
title: Test Blog
defaults:
  - scope:
      path: ""
      type: posts
    values:
      layout: post
"""


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo ``configure_logging`` so no test logs into another test's stream."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    logging.getLogger().handlers.clear()


@pytest.fixture
def fixture_site() -> Path:
    """The checked-in example site: two clean posts and one draft revision."""
    return FIXTURES_DIR / "site"


@pytest.fixture
def broken_fixture_site() -> Path:
    """The checked-in broken site: one post per corpus defect."""
    return FIXTURES_DIR / "broken-site"


@pytest.fixture
def make_site(tmp_path) -> Callable[..., Path]:
    """Build a Jekyll site from a mapping of relative path to file contents.

    Text values are dedented; bytes are written as-is. ``_posts/`` and a
    ``post`` layout always exist unless ``layouts`` says otherwise.

    Example:
        site = make_site(
            {"_posts/2020-01-01-a.md": '''
                ---
                title: A
                ---
                Body
            '''},
            config="title: Blog\\n",
        )
    """

    def _make(
        files: dict[str, str | bytes] | None = None,
        config: str | None = DEFAULT_SITE_CONFIG,
        layouts: tuple[str, ...] | None = ("default", "post"),
    ) -> Path:
        site = tmp_path / "site"
        (site / "_posts").mkdir(parents=True, exist_ok=True)

        if config is not None:
            (site / "_config.yml").write_text(config, encoding="utf-8")

        if layouts is not None:
            (site / "_layouts").mkdir(exist_ok=True)
            for name in layouts:
                (site / "_layouts" / f"{name}.html").write_text("{{ content }}\n", encoding="utf-8")

        for rel_path, content in (files or {}).items():
            path = site / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
        return site

    return _make


@pytest.fixture
def load_corpus() -> Callable[..., Corpus]:
    """Load a corpus for a site root, with optional LintConfig overrides."""

    def _load(site: Path, **overrides) -> Corpus:
        return Corpus.load(LintConfig(site_root=site, **overrides))

    return _load
