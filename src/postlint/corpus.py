"""
Post corpus.

Discovers and loads every post of a Jekyll site and indexes them so links
between posts can be resolved and draft revisions can be grouped.

Example:
    >>> corpus = Corpus.load(LintConfig(site_root=Path("blog")))
    >>> corpus.find_post_url("2020-01-01-hello") is not None
    True
"""

from __future__ import annotations

import re
import unicodedata
from collections import Counter
from datetime import date
from pathlib import Path
from typing import Any, Iterator

from postlint.config import LintConfig, SiteConfig
from postlint.errors import PostReadError, PostsDirNotFoundError, SiteRootNotFoundError
from postlint.logging import get_logger
from postlint.models import Post
from postlint.parser.markdown import classify_target

logger = get_logger(__name__)

# /:categories/:year/:month/:day/:title(.html|/); any other suffix is a file, not a post
DATE_PERMALINK = re.compile(
    r"^/(?:.*/)?(?P<year>\d{4})/(?P<month>\d{2})/(?P<day>\d{2})/(?P<slug>[^/.]+)(?:\.html|/)?$"
)
TITLE_PUNCTUATION = re.compile(r"[^\w\s]")
WHITESPACE = re.compile(r"\s+")


def normalize_title(title: str) -> str:
    """Casefold, drop punctuation and collapse whitespace.

    Examples:
        >>> normalize_title("Testing LLMs:  a Grid-Search Tool!")
        'testing llms a gridsearch tool'
    """
    text = unicodedata.normalize("NFKC", title).casefold()
    text = TITLE_PUNCTUATION.sub("", text)
    return WHITESPACE.sub(" ", text).strip()


class Corpus:
    """All posts of one site.

    Manifesto:
        Most post problems are local (a bad fence, a missing title), but the
        interesting ones are not: a ``post_url`` to a renamed post, five
        drafts of the same article competing for one title. The corpus is
        loaded once so every rule can ask questions about the whole site.

    Architecture:
        ```
        LintConfig
            │
            ▼
        Corpus.load()
            │
            ├──► SiteConfig.load()      (_config.yml, _layouts/)
            ├──► _discover(_posts)      (+ _drafts if enabled)
            │         │
            │         ▼
            │    Post.from_file() ──► Post | PostReadError
            │
            └──► _index()  ──► by stem, by posts-relative path, by (date, slug)
        ```

    Features:
        - Discover posts recursively, honoring skip patterns
        - Keep unreadable files as errors instead of aborting
        - Resolve ``post_url`` names, date permalinks and local paths
        - Group draft revisions by normalized title
        - Summarize the corpus for ``postlint stats``

    Guardrails:
        - Do NOT resolve ``post_url`` against drafts
          ✅ Jekyll only links to published posts
        - Do NOT abort on one unreadable file
          ✅ PostReadError is recorded in ``read_errors``
    """

    def __init__(
        self,
        config: LintConfig,
        site_config: SiteConfig,
        posts: list[Post] | None = None,
        read_errors: list[PostReadError] | None = None,
    ):
        self.config = config
        self.site_config = site_config
        self.posts: list[Post] = posts or []
        self.read_errors: list[PostReadError] = read_errors or []

        self._by_stem: dict[str, list[Post]] = {}
        self._by_posts_path: dict[str, Post] = {}
        self._by_permalink: dict[tuple[date, str], list[Post]] = {}
        self._index()

    @classmethod
    def load(cls, config: LintConfig) -> Corpus:
        """Discover and parse all posts of the configured site.

        Raises:
            SiteRootNotFoundError: If the site root does not exist
            PostsDirNotFoundError: If the posts directory does not exist
        """
        site_root = Path(config.site_root)
        if not site_root.is_dir():
            raise SiteRootNotFoundError(str(site_root))
        if not config.posts_path.is_dir():
            raise PostsDirNotFoundError(str(config.posts_path))

        site_config = SiteConfig.load(site_root)
        posts: list[Post] = []
        read_errors: list[PostReadError] = []

        sources = [(config.posts_path, False)]
        if config.include_drafts and config.drafts_path.is_dir():
            sources.append((config.drafts_path, True))

        for directory, is_draft in sources:
            for path in cls._discover(directory, config):
                try:
                    post = Post.from_file(
                        path,
                        site_root,
                        site_config,
                        is_draft=is_draft,
                        extensions=config.extensions,
                    )
                except PostReadError as e:
                    logger.warning("post_unreadable", path=e.path, error=str(e.cause))
                    read_errors.append(e)
                    continue
                posts.append(post)

        logger.info(
            "corpus_loaded",
            site_root=str(site_root),
            posts=sum(1 for p in posts if not p.is_draft),
            drafts=sum(1 for p in posts if p.is_draft),
            unreadable=len(read_errors),
        )
        return cls(config, site_config, posts, read_errors)

    @staticmethod
    def _discover(directory: Path, config: LintConfig) -> Iterator[Path]:
        extensions = {ext.lower() for ext in config.extensions}
        for path in sorted(directory.rglob("*")):
            if not path.is_file() or path.suffix.lower() not in extensions:
                continue
            if config.should_skip(path.relative_to(config.site_root)):
                logger.debug("post_skipped", path=str(path))
                continue
            yield path

    def _index(self) -> None:
        posts_prefix = self.config.posts_dir.strip("/") + "/"
        for post in self.posts:
            if post.is_draft:
                continue
            self._by_stem.setdefault(post.stem, []).append(post)
            if post.rel_path.startswith(posts_prefix):
                inner = post.rel_path[len(posts_prefix):]
                self._by_posts_path[inner.rsplit(".", 1)[0]] = post
            if post.date is not None and post.slug:
                self._by_permalink.setdefault((post.date, post.slug), []).append(post)

    # =========================================================================
    # Lookups
    # =========================================================================

    @property
    def site_root(self) -> Path:
        return Path(self.config.site_root)

    @property
    def published(self) -> list[Post]:
        return [p for p in self.posts if not p.is_draft]

    @property
    def drafts(self) -> list[Post]:
        return [p for p in self.posts if p.is_draft]

    def get(self, rel_path: str) -> Post | None:
        return next((p for p in self.posts if p.rel_path == rel_path), None)

    def find_post_url(self, name: str) -> Post | None:
        """Resolve the argument of a ``{% post_url %}`` tag.

        A name containing ``/`` must match the post's path under the posts
        directory (without extension); any other name matches the file stem.
        """
        name = name.strip().strip("/")
        if "/" in name:
            return self._by_posts_path.get(name)
        matches = self._by_stem.get(name)
        return matches[0] if matches else None

    def find_by_permalink(self, post_date: date, slug: str) -> Post | None:
        matches = self._by_permalink.get((post_date, slug))
        return matches[0] if matches else None

    def match_date_permalink(self, path: str) -> tuple[date, str] | None:
        """Date and slug of a ``/:year/:month/:day/:title`` style URL path."""
        match = DATE_PERMALINK.match(self.strip_baseurl(path))
        if not match:
            return None
        try:
            post_date = date(int(match["year"]), int(match["month"]), int(match["day"]))
        except ValueError:
            return None
        return post_date, match["slug"]

    def strip_baseurl(self, path: str) -> str:
        baseurl = self.site_config.baseurl.rstrip("/")
        if baseurl and (path == baseurl or path.startswith(baseurl + "/")):
            return path[len(baseurl):] or "/"
        return path

    def resolve_local(self, post: Post, path: str) -> Path:
        """File a local link path points at.

        Site-relative paths (leading ``/``) resolve against the site root,
        others against the directory of the linking post.
        """
        if path.startswith("/"):
            return self.site_root / self.strip_baseurl(path).lstrip("/")
        return post.path.parent / path

    # =========================================================================
    # Draft revisions
    # =========================================================================

    def title_groups(self) -> dict[str, list[Post]]:
        """Posts sharing a normalized title, keyed by that title.

        Only groups with more than one post are returned; inside a group,
        published posts come before drafts, then order is by path.
        """
        groups: dict[str, list[Post]] = {}
        for post in self.posts:
            if not post.title:
                continue
            key = normalize_title(post.title)
            if key:
                groups.setdefault(key, []).append(post)
        return {
            key: sorted(posts, key=lambda p: (p.is_draft, p.rel_path))
            for key, posts in sorted(groups.items())
            if len(posts) > 1
        }

    # =========================================================================
    # Statistics
    # =========================================================================

    def stats(self) -> dict[str, Any]:
        """Summary counts describing the corpus."""
        years: Counter[str] = Counter()
        layouts: Counter[str] = Counter()
        blocks: Counter[str] = Counter()
        links: Counter[str] = Counter()
        code_styles: Counter[str] = Counter()

        for post in self.posts:
            if post.date is not None:
                years[str(post.date.year)] += 1
            layouts[post.layout or "(none)"] += 1
            for block in post.document.code_blocks:
                blocks[block.kind] += 1
            for link in post.document.links:
                if link.is_liquid_tag:
                    links[link.kind] += 1
                else:
                    links[classify_target(link.target).kind] += 1

            has_fences = bool(post.document.fences)
            has_highlight = bool(post.document.highlight_blocks)
            if has_fences and has_highlight:
                code_styles["mixed"] += 1
            elif has_fences:
                code_styles["fenced"] += 1
            elif has_highlight:
                code_styles["highlight"] += 1

        groups = self.title_groups()
        return {
            "posts": len(self.published),
            "drafts": len(self.drafts),
            "unreadable": len(self.read_errors),
            "posts_per_year": dict(sorted(years.items())),
            "layouts": dict(layouts.most_common()),
            "code_blocks": dict(sorted(blocks.items())),
            "links": dict(sorted(links.items())),
            "code_styles": dict(sorted(code_styles.items())),
            "duplicate_title_groups": len(groups),
            "posts_in_duplicate_groups": sum(len(posts) for posts in groups.values()),
            "words": sum(post.word_count for post in self.posts),
        }

    def __len__(self) -> int:
        return len(self.posts)

    def __iter__(self) -> Iterator[Post]:
        return iter(self.posts)
