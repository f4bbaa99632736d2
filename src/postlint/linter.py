"""
Lint orchestrator.

Coordinates a lint run: loading the corpus, running the enabled rules,
applying configured severities and inline suppressions, and collecting
everything into a LintReport.

Example:
    >>> linter = Linter(LintConfig.discover(Path(".")))
    >>> report = linter.lint()
    >>> report.counts()
    {'info': 0, 'warning': 2, 'error': 1}
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from postlint.config import LintConfig
from postlint.corpus import Corpus
from postlint.external import ExternalLinkChecker
from postlint.logging import LogContext, get_logger
from postlint.models import Post
from postlint.report import Finding, LintReport
from postlint.rules import CorpusRule, ExternalLinkRule, PostRule, Rule, RuleRegistry

logger = get_logger(__name__)


class Linter:
    """Run lint rules over a post corpus.

    Manifesto:
        One command answers "is this blog healthy?". The linter loads the
        corpus once, runs every enabled rule against it and reports all
        problems at the end. A crashing rule is a bug in the rule, not in
        the posts, so it is recorded and the remaining rules still run.

    Architecture:
        ```
        Linter.lint(paths)
              │
              ├──► Corpus.load(config)
              │
              ├──► For each enabled rule:
              │         │
              │         ├──► PostRule.check(post, corpus)   (selected posts)
              │         └──► CorpusRule.check_corpus(corpus)
              │                    │
              │                    ▼
              │         findings ──► severity overrides
              │                  ──► inline suppressions
              │                  ──► path selection
              │
              └──► LintReport (sorted findings, counts, rule errors)
        ```

    Features:
        - Lint a whole site or only selected posts
        - Disable rules and override severities from config
        - Honor ``<!-- postlint-disable -->`` comments
        - Skip network rules unless ``check_external`` is enabled

    Guardrails:
        - Do NOT reload the corpus per rule
          ✅ Load once, share across rules
        - Do NOT fail silently when a rule crashes
          ✅ Log ``rule_failed`` and record it in ``report.errors``
    """

    def __init__(
        self,
        config: LintConfig,
        rules: list[Rule] | None = None,
        link_checker: ExternalLinkChecker | None = None,
    ):
        """Initialize the linter.

        Args:
            config: Lint configuration
            rules: Rules to run (all registered rules if None)
            link_checker: Checker for external links (built on demand if None)
        """
        self.config = config
        self.rules = rules if rules is not None else RuleRegistry.create_all()

        if link_checker is not None:
            for rule in self.rules:
                if isinstance(rule, ExternalLinkRule):
                    rule.checker = link_checker

    @property
    def active_rules(self) -> list[Rule]:
        """Rules that will run under the current configuration."""
        active = []
        for rule in self.rules:
            if not self.config.is_enabled(rule):
                continue
            if rule.requires_network and not self.config.check_external:
                continue
            active.append(rule)
        return active

    def lint(self, paths: list[Path] | None = None) -> LintReport:
        """Load the configured corpus and lint it.

        Args:
            paths: Only report on these post files (all posts if None)

        Returns:
            LintReport
        """
        corpus = Corpus.load(self.config)

        only = None
        if paths:
            only = {self._rel_path(Path(p)) for p in paths}
            unknown = only - {p.rel_path for p in corpus.posts} - {e.path for e in corpus.read_errors}
            for rel_path in sorted(unknown):
                logger.warning("path_not_in_corpus", path=rel_path)

        return self.lint_corpus(corpus, only=only)

    def lint_corpus(self, corpus: Corpus, only: set[str] | None = None) -> LintReport:
        """Run the active rules over an already loaded corpus.

        Args:
            corpus: Loaded corpus
            only: Relative paths to report on (all if None)

        Returns:
            LintReport
        """
        report = LintReport()
        posts = [p for p in corpus.posts if only is None or p.rel_path in only]
        posts_by_path = {p.rel_path: p for p in corpus.posts}
        report.posts_checked = len(posts)

        for rule in self.active_rules:
            report.rules_run.append(rule.code)
            with LogContext(rule=rule.code):
                try:
                    findings = self._run_rule(rule, corpus, posts)
                except Exception as e:
                    logger.exception("rule_failed", error=str(e))
                    report.errors.append({
                        "rule": rule.code,
                        "error_type": type(e).__name__,
                        "message": str(e),
                    })
                    continue

            for finding in findings:
                if only is not None and finding.path not in only:
                    continue
                post = posts_by_path.get(finding.path)
                if post is not None and post.document.is_suppressed(rule.code, rule.name):
                    continue
                finding.severity = self.config.severity_for(rule)
                report.findings.append(finding)

        report.sort()
        report.finished_at = datetime.now()

        counts = report.counts()
        logger.info(
            "lint_finished",
            posts=report.posts_checked,
            rules=len(report.rules_run),
            errors=counts["error"],
            warnings=counts["warning"],
            infos=counts["info"],
            rule_failures=len(report.errors),
        )
        return report

    @staticmethod
    def _run_rule(rule: Rule, corpus: Corpus, posts: list[Post]) -> list[Finding]:
        findings: list[Finding] = []
        if isinstance(rule, PostRule):
            for post in posts:
                findings.extend(rule.check(post, corpus))
        elif isinstance(rule, CorpusRule):
            findings.extend(rule.check_corpus(corpus))
        logger.debug("rule_finished", findings=len(findings))
        return findings

    def _rel_path(self, path: Path) -> str:
        site_root = Path(self.config.site_root).resolve()
        candidate = path if path.is_absolute() else Path.cwd() / path
        try:
            return candidate.resolve().relative_to(site_root).as_posix()
        except ValueError:
            return path.as_posix()
