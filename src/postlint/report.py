"""
Findings and lint reports.

A ``Finding`` is one problem at one place in one post. A ``LintReport``
collects the findings of a run together with what was checked, and decides
the exit status.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class Severity(str, Enum):
    """Finding severity, ordered ``info`` < ``warning`` < ``error``."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @classmethod
    def parse(cls, value: str | Severity) -> Severity:
        """Parse a severity name, case-insensitively.

        Raises:
            ValueError: If the name is not a severity
        """
        if isinstance(value, Severity):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            names = ", ".join(s.value for s in cls)
            raise ValueError(f"Unknown severity '{value}'. Expected one of: {names}") from None

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank


_SEVERITY_RANK = {Severity.INFO: 0, Severity.WARNING: 1, Severity.ERROR: 2}


@dataclass
class Finding:
    """A single lint finding.

    Attributes:
        code: Rule code (e.g. ``MD001``)
        name: Rule name (e.g. ``unclosed-code-fence``)
        severity: Effective severity
        path: Post path relative to the site root
        line: 1-based line number, None for file-level findings
        message: Human-readable description
    """

    code: str
    name: str
    severity: Severity
    path: str
    line: int | None
    message: str

    @property
    def sort_key(self) -> tuple[str, int, str]:
        return (self.path, self.line or 0, self.code)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "name": self.name,
            "severity": self.severity.value,
            "path": self.path,
            "line": self.line,
            "message": self.message,
        }


@dataclass
class LintReport:
    """Result of a lint run.

    Attributes:
        findings: All findings, sorted by path and line
        posts_checked: Number of posts the per-post rules ran on
        rules_run: Codes of the rules that ran
        errors: Rule failures (rule crashed, not a finding)
        started_at: When the run started
        finished_at: When the run finished
    """

    findings: list[Finding] = field(default_factory=list)
    posts_checked: int = 0
    rules_run: list[str] = field(default_factory=list)
    errors: list[dict[str, Any]] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: datetime | None = None

    def sort(self) -> None:
        self.findings.sort(key=lambda f: f.sort_key)

    def counts(self) -> dict[str, int]:
        """Finding count per severity name (all severities present)."""
        counter = Counter(f.severity for f in self.findings)
        return {severity.value: counter.get(severity, 0) for severity in Severity}

    def by_path(self) -> dict[str, list[Finding]]:
        grouped: dict[str, list[Finding]] = {}
        for finding in self.findings:
            grouped.setdefault(finding.path, []).append(finding)
        return grouped

    def failed(self, threshold: Severity | str = Severity.ERROR) -> bool:
        """Whether any finding is at or above ``threshold``, or a rule crashed."""
        threshold = Severity.parse(threshold)
        if self.errors:
            return True
        return any(f.severity >= threshold for f in self.findings)

    def exit_code(self, threshold: Severity | str = Severity.ERROR) -> int:
        return 1 if self.failed(threshold) else 0

    @property
    def duration_seconds(self) -> float | None:
        if self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": {
                "posts_checked": self.posts_checked,
                "rules_run": list(self.rules_run),
                "counts": self.counts(),
                "total": len(self.findings),
                "duration_seconds": self.duration_seconds,
            },
            "findings": [f.to_dict() for f in self.findings],
            "errors": list(self.errors),
        }
