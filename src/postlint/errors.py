"""
Structured error types for postlint.

Provides a small hierarchy of typed errors with enough metadata to report
where a problem was found (file, line, rule) and to chain the underlying
exception.

Manifesto:
    - **Typed Error Hierarchy:** Config, corpus, parse and IO problems are
      distinct types so callers can decide what is fatal
    - **Rich Context:** Errors carry the path and line they refer to
    - **Error Chaining:** Preserve original exceptions as ``cause``

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                     PostLintError                         │
        │             (category, context, cause)                    │
        ├──────────────────────────────────────────────────────────┤
        │  ConfigError            CorpusError         ParseError    │
        │  (CONFIG)               (CORPUS)            (PARSE)       │
        │     │                      │                   │          │
        │  MissingConfigError     SiteRootNotFound    FrontMatter-  │
        │  InvalidConfigError     PostsDirNotFound    Error         │
        │                                                           │
        │  PostReadError (IO)     RuleNotFoundError (CONFIG)        │
        └──────────────────────────────────────────────────────────┘

Guardrails:
    ❌ DON'T: Raise a bare Exception from parsers
    ✅ DO: Raise FrontMatterError with the absolute line number

    ❌ DON'T: Let one unreadable post abort a whole lint run
    ✅ DO: Catch PostReadError at the per-file seam and record it

Usage:
    from postlint.errors import FrontMatterError

    try:
        data = load_front_matter(raw, fm_line)
    except FrontMatterError as e:
        post.front_matter_error = e
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and reporting."""

    CONFIG = "CONFIG"
    CORPUS = "CORPUS"
    PARSE = "PARSE"
    IO = "IO"
    NETWORK = "NETWORK"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """Where an error happened.

    Attributes:
        path: File the error refers to (relative to the site root if known)
        line: 1-based line number inside ``path``
        rule: Rule code active when the error occurred
        metadata: Free-form extra fields
    """

    path: str | None = None
    line: int | None = None
    rule: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.path is not None:
            result["path"] = self.path
        if self.line is not None:
            result["line"] = self.line
        if self.rule is not None:
            result["rule"] = self.rule
        result.update(self.metadata)
        return result


class PostLintError(Exception):
    """Base exception for all postlint errors.

    Subclasses set ``default_category`` so callers rarely pass one.

    Examples:
        >>> err = PostLintError("boom").with_context(path="_posts/a.md", line=3)
        >>> err.context.line
        3
        >>> err.to_dict()["category"]
        'INTERNAL'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> PostLintError:
        """Add context fields; unknown keys go to ``metadata``."""
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# Configuration errors
# =============================================================================


class ConfigError(PostLintError):
    """Invalid or missing configuration."""

    default_category = ErrorCategory.CONFIG


class MissingConfigError(ConfigError):
    """A required configuration file or key is absent."""

    def __init__(self, key: str, message: str | None = None):
        self.key = key
        super().__init__(message or f"Missing configuration: {key}")


class InvalidConfigError(ConfigError):
    """A configuration value has the wrong shape or an unknown name."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid value for {key}: {value!r}")


class RuleNotFoundError(ConfigError):
    """A rule code or name does not match any registered rule."""

    def __init__(self, name: str, available: list[str] | None = None):
        self.name = name
        message = f"Rule '{name}' not found"
        if available:
            message += f". Available: {', '.join(available)}"
        super().__init__(message)


# =============================================================================
# Corpus errors
# =============================================================================


class CorpusError(PostLintError):
    """The site layout does not look like a Jekyll site."""

    default_category = ErrorCategory.CORPUS


class SiteRootNotFoundError(CorpusError):
    def __init__(self, path: str):
        super().__init__(f"Site root does not exist: {path}")
        self.with_context(path=path)


class PostsDirNotFoundError(CorpusError):
    def __init__(self, path: str):
        super().__init__(f"Posts directory does not exist: {path}")
        self.with_context(path=path)


# =============================================================================
# Parse and IO errors
# =============================================================================


class ParseError(PostLintError):
    """Content could not be parsed."""

    default_category = ErrorCategory.PARSE


class FrontMatterError(ParseError):
    """The front-matter block is unterminated or not key-value YAML.

    Attributes:
        kind: ``unterminated``, ``invalid_yaml`` or ``not_mapping``
        line: Absolute 1-based line in the file
    """

    KINDS = ("unterminated", "invalid_yaml", "not_mapping")

    def __init__(
        self,
        message: str,
        kind: str,
        line: int | None = None,
        cause: BaseException | None = None,
    ):
        if kind not in self.KINDS:
            raise ValueError(f"Unknown front matter error kind: {kind}")
        super().__init__(message, cause=cause, context=ErrorContext(line=line))
        self.kind = kind
        self.line = line


class PostReadError(PostLintError):
    """A post file exists but cannot be read or decoded."""

    default_category = ErrorCategory.IO

    def __init__(self, path: str, cause: BaseException | None = None):
        reason = f": {cause}" if cause is not None else ""
        super().__init__(f"Cannot read {path}{reason}", cause=cause)
        self.with_context(path=path)
        self.path = path


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "PostLintError",
    "ConfigError",
    "MissingConfigError",
    "InvalidConfigError",
    "RuleNotFoundError",
    "CorpusError",
    "SiteRootNotFoundError",
    "PostsDirNotFoundError",
    "ParseError",
    "FrontMatterError",
    "PostReadError",
]
