"""
Link rules.

Internal links are resolved against the corpus: ``{% post_url %}`` names,
``{% link %}`` paths, relative ``.md`` links and ``/:year/:month/:day/:title``
permalinks. Local assets are checked on disk. External URLs are only probed
when ``check_external`` is enabled.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from postlint.external import ExternalLinkChecker
from postlint.parser.markdown import Link, LinkTarget, classify_target
from postlint.report import Finding, Severity
from postlint.rules.base import CorpusRule, PostRule, RuleRegistry

if TYPE_CHECKING:
    from postlint.corpus import Corpus
    from postlint.models import Post

# Pages the generator produces; nothing on disk to check
GENERATED_SUFFIXES = {"", ".html", ".htm", ".xml"}


def _is_post_file(path: str, corpus: Corpus) -> bool:
    suffix = PurePosixPath(path).suffix.lower()
    return suffix in {ext.lower() for ext in corpus.config.extensions}


def _markdown_targets(post: Post) -> Iterator[tuple[Link, LinkTarget]]:
    for link in post.document.links:
        if link.is_liquid_tag:
            continue
        yield link, classify_target(link.target)


@RuleRegistry.register
class BrokenPostLinkRule(PostRule):
    code = "LNK001"
    name = "broken-post-link"
    description = "post_url, link tags, relative .md links and date permalinks resolve to existing posts"
    severity = Severity.ERROR

    def check(self, post: Post, corpus: Corpus) -> Iterator[Finding]:
        for link in post.document.links:
            if link.kind == "post_url":
                if corpus.find_post_url(link.target) is None:
                    yield self.finding(
                        post.rel_path,
                        link.line,
                        f"{{% post_url {link.target} %}} does not match any post",
                    )
            elif link.kind == "link_tag":
                if "{{" in link.target:
                    continue
                if not (corpus.site_root / link.target.lstrip("/")).exists():
                    yield self.finding(
                        post.rel_path,
                        link.line,
                        f"{{% link {link.target} %}} points at a file that does not exist",
                    )

        for link, target in _markdown_targets(post):
            if target.kind != "local":
                continue

            if _is_post_file(target.path, corpus):
                if not corpus.resolve_local(post, target.path).exists():
                    yield self.finding(
                        post.rel_path,
                        link.line,
                        f"Link to '{target.path}' points at a post that does not exist",
                    )
                continue

            if target.is_site_relative:
                permalink = corpus.match_date_permalink(target.path)
                if (
                    permalink is not None
                    and corpus.find_by_permalink(*permalink) is None
                    and not corpus.resolve_local(post, target.path).exists()
                ):
                    post_date, slug = permalink
                    yield self.finding(
                        post.rel_path,
                        link.line,
                        f"Link '{target.path}' does not match any post dated "
                        f"{post_date.isoformat()} with slug '{slug}'",
                    )


@RuleRegistry.register
class MissingLocalAssetRule(PostRule):
    code = "LNK002"
    name = "missing-local-asset"
    description = "Local images and files linked from a post exist in the site"
    severity = Severity.WARNING

    def check(self, post: Post, corpus: Corpus) -> Iterator[Finding]:
        for link, target in _markdown_targets(post):
            if target.kind != "local" or _is_post_file(target.path, corpus):
                continue
            if target.path.endswith("/"):
                continue
            if PurePosixPath(target.path).suffix.lower() in GENERATED_SUFFIXES:
                continue
            if target.is_site_relative and corpus.match_date_permalink(target.path):
                continue

            candidates = [corpus.resolve_local(post, target.path)]
            if not target.is_site_relative:
                candidates.append(corpus.site_root / target.path)
            if any(candidate.exists() for candidate in candidates):
                continue

            what = "Image" if link.kind == "image" else "File"
            yield self.finding(
                post.rel_path,
                link.line,
                f"{what} '{target.path}' not found in the site",
            )


@RuleRegistry.register
class ExternalLinkRule(CorpusRule):
    code = "LNK003"
    name = "external-link-unreachable"
    description = "External URLs answer with a status below 400 (needs --check-external)"
    severity = Severity.WARNING
    requires_network = True

    def __init__(self, checker: ExternalLinkChecker | None = None):
        self.checker = checker

    def check_corpus(self, corpus: Corpus) -> Iterator[Finding]:
        occurrences: list[tuple[Post, Link, str]] = []
        for post in corpus.posts:
            for link, target in _markdown_targets(post):
                if target.kind != "external":
                    continue
                url = f"https:{target.path}" if target.path.startswith("//") else target.path
                if url.lower().startswith(("http://", "https://")):
                    occurrences.append((post, link, url))

        if not occurrences:
            return

        checker = self.checker or ExternalLinkChecker(
            timeout=corpus.config.external_timeout,
            workers=corpus.config.external_workers,
        )
        statuses = checker.check_all(url for _, _, url in occurrences)

        for post, link, url in occurrences:
            status = statuses.get(url)
            if status is not None and not status.ok:
                yield self.finding(
                    post.rel_path,
                    link.line,
                    f"External link {url} is unreachable ({status.describe()})",
                )
