"""
Base classes and registry for lint rules.

Rules come in two scopes:

* ``PostRule`` looks at one post at a time (``check(post, corpus)``).
* ``CorpusRule`` looks at the whole corpus at once (``check_corpus(corpus)``),
  for properties like duplicate titles that no single post can decide.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import TYPE_CHECKING

from postlint.errors import RuleNotFoundError
from postlint.logging import get_logger
from postlint.report import Finding, Severity

if TYPE_CHECKING:
    from postlint.corpus import Corpus
    from postlint.models import Post

logger = get_logger(__name__)


class Rule(ABC):
    """A lint rule.

    Manifesto:
        One rule, one property. A rule knows how to detect a single kind of
        problem and how to describe it; it does not decide whether the
        problem is fatal. Severity overrides, disabling and inline
        suppression are applied by the linter on top of what rules yield.

    Architecture:
        ```
        RuleRegistry.register ──► {code: Rule subclass}
                                        │
                                        ▼
        Linter ──► rule.check(post, corpus) / rule.check_corpus(corpus)
                                        │
                                        ▼
                              Iterator[Finding] (default severity)
        ```

    Guardrails:
        - Do NOT mutate posts or the corpus from a rule
          ✅ Rules only read and yield findings
        - Do NOT reuse a code for two rules
          ✅ The registry warns when a code is overwritten
    """

    code: str = ""
    name: str = ""
    description: str = ""
    severity: Severity = Severity.ERROR
    scope: str = "post"
    requires_network: bool = False

    def finding(self, path: str, line: int | None, message: str) -> Finding:
        """Create a finding for this rule at its default severity."""
        return Finding(
            code=self.code,
            name=self.name,
            severity=self.severity,
            path=path,
            line=line,
            message=message,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, name={self.name!r})"


class PostRule(Rule):
    """A rule evaluated on each post."""

    scope = "post"

    @abstractmethod
    def check(self, post: Post, corpus: Corpus) -> Iterator[Finding]:
        """Yield findings for one post."""


class CorpusRule(Rule):
    """A rule evaluated once over the whole corpus."""

    scope = "corpus"

    @abstractmethod
    def check_corpus(self, corpus: Corpus) -> Iterator[Finding]:
        """Yield findings for the corpus."""


class RuleRegistry:
    """
    Registry of rule classes, keyed by rule code.

    Use the @RuleRegistry.register decorator to add rules.
    """

    _rules: dict[str, type[Rule]] = {}

    @classmethod
    def register(cls, rule_class: type[Rule]) -> type[Rule]:
        """
        Decorator to register a rule class.

        Usage:
            @RuleRegistry.register
            class MyRule(PostRule):
                code = "X001"
                name = "my-rule"
                ...
        """
        code = rule_class.code
        if not code or not rule_class.name:
            raise ValueError(f"{rule_class.__name__} must define code and name")
        if code in cls._rules:
            logger.warning(
                "rule_overwritten",
                code=code,
                old=cls._rules[code].__name__,
                new=rule_class.__name__,
            )

        cls._rules[code] = rule_class
        logger.debug("rule_registered", code=code, class_name=rule_class.__name__)
        return rule_class

    @classmethod
    def get(cls, code_or_name: str) -> type[Rule] | None:
        """Get a rule class by code or name (case-insensitive)."""
        wanted = code_or_name.strip().upper()
        for code, rule_class in cls._rules.items():
            if code.upper() == wanted or rule_class.name.upper() == wanted:
                return rule_class
        return None

    @classmethod
    def get_or_raise(cls, code_or_name: str) -> type[Rule]:
        """Get a rule class by code or name, raising if not found."""
        rule_class = cls.get(code_or_name)
        if rule_class is None:
            raise RuleNotFoundError(code_or_name, sorted(cls._rules))
        return rule_class

    @classmethod
    def all(cls) -> list[type[Rule]]:
        """All registered rule classes, ordered by code."""
        return [cls._rules[code] for code in sorted(cls._rules)]

    @classmethod
    def create_all(cls) -> list[Rule]:
        """Instantiate every registered rule."""
        return [rule_class() for rule_class in cls.all()]

    @classmethod
    def list_rules(cls) -> list[dict]:
        """List all registered rules with metadata."""
        return [
            {
                "code": rule_class.code,
                "name": rule_class.name,
                "severity": rule_class.severity.value,
                "scope": rule_class.scope,
                "requires_network": rule_class.requires_network,
                "description": rule_class.description,
            }
            for rule_class in cls.all()
        ]
