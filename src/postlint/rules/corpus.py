"""
Corpus-wide rules: draft revisions and unreadable files.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from postlint.report import Finding, Severity
from postlint.rules.base import CorpusRule, RuleRegistry
from postlint.rules.front_matter import key_line

if TYPE_CHECKING:
    from postlint.corpus import Corpus


@RuleRegistry.register
class DuplicateTitleRule(CorpusRule):
    code = "DUP001"
    name = "duplicate-title"
    description = "No two posts share a title (duplicated draft revisions)"
    severity = Severity.WARNING

    def check_corpus(self, corpus: Corpus) -> Iterator[Finding]:
        for posts in corpus.title_groups().values():
            for post in posts[1:]:
                others = ", ".join(p.rel_path for p in posts if p is not post)
                line = key_line(post, "title") if "title" in post.data else post.fm_line
                yield self.finding(
                    post.rel_path,
                    line,
                    f"Title '{post.title}' is also used by {others}",
                )


@RuleRegistry.register
class UnreadablePostRule(CorpusRule):
    code = "IO001"
    name = "unreadable-post"
    description = "Every post file can be read as UTF-8 text"
    severity = Severity.ERROR

    def check_corpus(self, corpus: Corpus) -> Iterator[Finding]:
        for error in corpus.read_errors:
            yield self.finding(error.path, None, error.message)
