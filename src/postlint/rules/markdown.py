"""
Body rules: code blocks and excerpts.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from postlint.report import Finding, Severity
from postlint.rules.base import PostRule, RuleRegistry
from postlint.rules.front_matter import key_line

if TYPE_CHECKING:
    from postlint.corpus import Corpus
    from postlint.models import Post


@RuleRegistry.register
class UnclosedFenceRule(PostRule):
    code = "MD001"
    name = "unclosed-code-fence"
    description = "Every fenced code block is closed"
    severity = Severity.ERROR

    def check(self, post: Post, corpus: Corpus) -> Iterator[Finding]:
        for block in post.document.fences:
            if not block.closed:
                yield self.finding(
                    post.rel_path,
                    block.start_line,
                    f"Code fence '{block.marker}' is never closed; the rest of the post renders as code",
                )


@RuleRegistry.register
class UnclosedLiquidBlockRule(PostRule):
    code = "MD002"
    name = "unclosed-liquid-block"
    description = "Every {% highlight %}, {% raw %} and {% comment %} block is closed"
    severity = Severity.ERROR

    def check(self, post: Post, corpus: Corpus) -> Iterator[Finding]:
        for block in post.document.liquid_blocks:
            if not block.closed:
                yield self.finding(
                    post.rel_path,
                    block.start_line,
                    f"'{block.marker}' has no matching {{% end{block.kind} %}}",
                )


@RuleRegistry.register
class StrayLiquidEndRule(PostRule):
    code = "MD003"
    name = "stray-liquid-end"
    description = "No Liquid end tag appears without its opening tag"
    severity = Severity.ERROR

    def check(self, post: Post, corpus: Corpus) -> Iterator[Finding]:
        for stray in post.document.stray_liquid_ends:
            yield self.finding(
                post.rel_path,
                stray.line,
                f"{{% {stray.tag} %}} without a matching opening tag",
            )


@RuleRegistry.register
class MixedCodeStylesRule(PostRule):
    code = "MD004"
    name = "mixed-code-styles"
    description = "A post uses either {% highlight %} blocks or code fences, not both"
    severity = Severity.INFO

    def check(self, post: Post, corpus: Corpus) -> Iterator[Finding]:
        document = post.document
        if not document.uses_mixed_code_styles:
            return
        first = min(document.highlight_blocks + document.fences, key=lambda b: b.start_line)
        yield self.finding(
            post.rel_path,
            first.start_line,
            f"Post mixes {len(document.highlight_blocks)} {{% highlight %}} block(s) "
            f"with {len(document.fences)} code fence(s)",
        )


@RuleRegistry.register
class ExcerptSeparatorRule(PostRule):
    code = "MD005"
    name = "excerpt-separator-missing"
    description = "A custom excerpt separator actually appears in the body"
    severity = Severity.WARNING

    def check(self, post: Post, corpus: Corpus) -> Iterator[Finding]:
        if not post.declares_excerpt_separator:
            return
        separator = post.excerpt_separator
        if not separator or separator in post.body:
            return

        if "excerpt_separator" in post.data:
            line = key_line(post, "excerpt_separator")
        else:
            line = post.fm_line
        yield self.finding(
            post.rel_path,
            line,
            f"Excerpt separator {separator!r} does not appear in the body; "
            "the whole post becomes the excerpt",
        )
