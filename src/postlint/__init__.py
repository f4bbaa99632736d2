"""
postlint: lint a Jekyll blog's post corpus.

Checks that every post under ``_posts/`` follows the contract the site
generator expects: a ``YYYY-MM-DD-title.md`` name, front matter that parses
as key-value metadata, closed code fences and Liquid blocks, and internal
links that point at posts which exist. Also finds duplicated draft
revisions of the same article.

Example:
    >>> from postlint import LintConfig, Linter
    >>> from pathlib import Path
    >>> report = Linter(LintConfig.discover(Path("."))).lint()
    >>> report.exit_code()
    0
"""

__version__ = "0.1.0"

from postlint.config import LintConfig, SiteConfig
from postlint.corpus import Corpus
from postlint.errors import PostLintError
from postlint.linter import Linter
from postlint.models import Post
from postlint.report import Finding, LintReport, Severity

__all__ = [
    "LintConfig",
    "SiteConfig",
    "Corpus",
    "Linter",
    "Post",
    "Finding",
    "LintReport",
    "Severity",
    "PostLintError",
    "__version__",
]
