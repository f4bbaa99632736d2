"""
Configuration for postlint.

Two layers of settings feed a lint run:

* ``LintConfig``: what to check and how strictly, loaded from an optional
  ``.postlint.yml`` at the site root.
* ``SiteConfig``: facts about the Jekyll site itself, read from its
  ``_config.yml`` (excerpt separator, front matter defaults, layouts).
"""

from __future__ import annotations

from dataclasses import MISSING, dataclass, field, fields
from pathlib import Path
from typing import Any, Callable

import yaml

from postlint.errors import InvalidConfigError, MissingConfigError
from postlint.report import Severity

CONFIG_FILENAMES = (".postlint.yml", ".postlint.yaml", "postlint.yml")

# Jekyll's built-in excerpt separator
DEFAULT_EXCERPT_SEPARATOR = "\n\n"

TYPE_NAMES = ("str", "bool", "int", "list", "datetime", "list|str")


def _is_str_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value)


def _is_str_mapping(value: Any) -> bool:
    return isinstance(value, dict) and all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# Field name -> (what the value must be, check)
FIELD_SHAPES: dict[str, tuple[str, Callable[[Any], bool]]] = {
    "site_root": ("a path", lambda v: isinstance(v, (str, Path))),
    "posts_dir": ("a string", lambda v: isinstance(v, str)),
    "drafts_dir": ("a string", lambda v: isinstance(v, str)),
    "include_drafts": ("true or false", lambda v: isinstance(v, bool)),
    "extensions": ("a list of strings", _is_str_list),
    "skip_patterns": ("a list of strings", _is_str_list),
    "required_fields": ("a list of strings", _is_str_list),
    "field_types": ("a mapping of field to type name", _is_str_mapping),
    "disabled_rules": ("a list of strings", _is_str_list),
    "severity_overrides": ("a mapping of rule to severity", _is_str_mapping),
    "fail_on": ("a string", lambda v: isinstance(v, str)),
    "check_external": ("true or false", lambda v: isinstance(v, bool)),
    "external_timeout": ("a positive number", lambda v: _is_number(v) and v > 0),
    "external_workers": (
        "a positive integer",
        lambda v: isinstance(v, int) and not isinstance(v, bool) and v >= 1,
    ),
}


@dataclass
class LintConfig:
    """Configuration for a lint run.

    Attributes:
        site_root: Root directory of the Jekyll site
        posts_dir: Posts directory, relative to site_root
        drafts_dir: Drafts directory, relative to site_root
        include_drafts: Whether drafts are linted too
        extensions: File extensions treated as posts
        skip_patterns: Path substrings to skip when scanning
        required_fields: Front matter keys every post must define
        field_types: Front matter key -> expected type name
        disabled_rules: Rule codes or names that never run
        severity_overrides: Rule code -> severity name
        fail_on: Lowest severity that fails the run
        check_external: Probe external URLs over the network
        external_timeout: Per-request timeout in seconds
        external_workers: Parallel requests for external checks
    """

    site_root: Path = field(default_factory=lambda: Path("."))
    posts_dir: str = "_posts"
    drafts_dir: str = "_drafts"
    include_drafts: bool = False

    # File scanning
    extensions: list[str] = field(default_factory=lambda: [".md", ".markdown"])
    skip_patterns: list[str] = field(default_factory=lambda: [
        ".git", "_site", "node_modules", "vendor", ".jekyll-cache",
    ])

    # Front matter contract
    required_fields: list[str] = field(default_factory=lambda: ["layout", "title"])
    field_types: dict[str, str] = field(default_factory=lambda: {
        "layout": "str",
        "title": "str",
        "comments": "bool",
        "excerpt_separator": "str",
        "date": "datetime",
        "tags": "list|str",
        "categories": "list|str",
        "published": "bool",
    })

    # Rule selection
    disabled_rules: list[str] = field(default_factory=list)
    severity_overrides: dict[str, str] = field(default_factory=dict)
    fail_on: str = "error"

    # External links
    check_external: bool = False
    external_timeout: float = 10.0
    external_workers: int = 20

    def __post_init__(self):
        """Check value shapes, normalize paths and validate names."""
        self._check_shapes()
        if isinstance(self.site_root, str):
            self.site_root = Path(self.site_root)

        self.extensions = [
            ext if ext.startswith(".") else f".{ext}" for ext in self.extensions
        ]

        for key, type_name in self.field_types.items():
            if type_name not in TYPE_NAMES:
                raise InvalidConfigError(
                    f"field_types.{key}",
                    type_name,
                    f"Unknown type '{type_name}' for field '{key}'. Expected one of: {', '.join(TYPE_NAMES)}",
                )

        for code, severity in self.severity_overrides.items():
            self._check_severity(f"severity_overrides.{code}", severity)
        self._check_severity("fail_on", self.fail_on)

    def _check_shapes(self) -> None:
        """Reject values of the wrong type.

        ``None`` (an empty section in YAML) falls back to the field default.
        """
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                value = f.default_factory() if f.default_factory is not MISSING else f.default
            description, check = FIELD_SHAPES[f.name]
            if not check(value):
                raise InvalidConfigError(f.name, value, f"{f.name} must be {description}, got {value!r}")
            if isinstance(value, tuple):
                value = list(value)
            setattr(self, f.name, value)

    @staticmethod
    def _check_severity(key: str, value: str) -> None:
        try:
            Severity.parse(value)
        except ValueError as e:
            raise InvalidConfigError(key, value, str(e)) from e

    @property
    def posts_path(self) -> Path:
        return self.site_root / self.posts_dir

    @property
    def drafts_path(self) -> Path:
        return self.site_root / self.drafts_dir

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> LintConfig:
        """Load configuration from a YAML file.

        A relative ``site_root`` in the file is resolved against the file's
        directory; without one, the file's directory is the site root.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            LintConfig instance

        Raises:
            MissingConfigError: If the file does not exist
            InvalidConfigError: If the file is not a YAML mapping of known keys
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.is_file():
            raise MissingConfigError(str(yaml_path), f"Config file not found: {yaml_path}")

        try:
            with open(yaml_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise InvalidConfigError(str(yaml_path), None, f"Invalid YAML in {yaml_path}: {e}") from e

        data = data or {}
        if not isinstance(data, dict):
            raise InvalidConfigError(str(yaml_path), data, f"{yaml_path} must contain a mapping")

        raw_root = data.get("site_root") or "."
        if not isinstance(raw_root, str):
            raise InvalidConfigError("site_root", raw_root, f"site_root must be a path, got {raw_root!r}")
        site_root = Path(raw_root)
        if not site_root.is_absolute():
            site_root = yaml_path.parent / site_root
        data["site_root"] = site_root

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LintConfig:
        """Create config from dictionary, rejecting unknown keys.

        Args:
            data: Configuration dictionary

        Returns:
            LintConfig instance
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidConfigError(
                unknown[0],
                data[unknown[0]],
                f"Unknown configuration key(s): {', '.join(unknown)}",
            )
        return cls(**data)

    @classmethod
    def discover(cls, site_root: Path, **overrides: Any) -> LintConfig:
        """Load the site's config file if it has one, else defaults.

        Args:
            site_root: Site directory to look in
            **overrides: Values that replace whatever the file says

        Returns:
            LintConfig instance
        """
        site_root = Path(site_root)
        for name in CONFIG_FILENAMES:
            candidate = site_root / name
            if candidate.is_file():
                config = cls.from_yaml(candidate)
                break
        else:
            config = cls(site_root=site_root)

        if overrides:
            data = config.to_dict()
            data.update(overrides)
            config = cls.from_dict(data)
        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary.

        Returns:
            Configuration as dictionary
        """
        return {
            "site_root": str(self.site_root),
            "posts_dir": self.posts_dir,
            "drafts_dir": self.drafts_dir,
            "include_drafts": self.include_drafts,
            "extensions": list(self.extensions),
            "skip_patterns": list(self.skip_patterns),
            "required_fields": list(self.required_fields),
            "field_types": dict(self.field_types),
            "disabled_rules": list(self.disabled_rules),
            "severity_overrides": dict(self.severity_overrides),
            "fail_on": self.fail_on,
            "check_external": self.check_external,
            "external_timeout": self.external_timeout,
            "external_workers": self.external_workers,
        }

    def should_skip(self, file_path: Path) -> bool:
        """Check if a file should be skipped during scanning.

        Patterns without a slash match whole path components, so ``vendor``
        skips ``vendor/`` but not ``2020-01-01-vendoring.md``; patterns with
        a slash match anywhere in the POSIX path.

        Args:
            file_path: Path to check (relative to the site root)

        Returns:
            True if file should be skipped
        """
        path = Path(file_path)
        path_str = path.as_posix()
        parts = set(path.parts)
        return any(
            pattern in path_str if "/" in pattern else pattern in parts
            for pattern in self.skip_patterns
        )

    def is_enabled(self, rule: Any) -> bool:
        """Whether a rule (by its code and name) is not disabled."""
        disabled = {name.upper() for name in self.disabled_rules}
        return rule.code.upper() not in disabled and rule.name.upper() not in disabled

    def severity_for(self, rule: Any) -> Severity:
        """Effective severity of a rule after overrides."""
        override = self.severity_overrides.get(rule.code) or self.severity_overrides.get(rule.name)
        if override:
            return Severity.parse(override)
        return rule.severity


@dataclass
class SiteConfig:
    """The parts of a Jekyll ``_config.yml`` that affect post linting.

    Attributes:
        site_root: Root directory of the site
        data: Raw parsed ``_config.yml`` (empty if absent)
        layouts: Layout names found in ``_layouts/``, None if no such directory
    """

    site_root: Path
    data: dict[str, Any] = field(default_factory=dict)
    layouts: set[str] | None = None

    @classmethod
    def load(cls, site_root: Path) -> SiteConfig:
        """Read ``_config.yml`` and ``_layouts/`` under the site root."""
        site_root = Path(site_root)
        config_path = site_root / "_config.yml"
        data: dict[str, Any] = {}

        if config_path.is_file():
            try:
                loaded = yaml.safe_load(config_path.read_text(encoding="utf-8"))
            except yaml.YAMLError as e:
                raise InvalidConfigError(
                    str(config_path), None, f"Invalid YAML in {config_path}: {e}"
                ) from e
            if loaded is not None and not isinstance(loaded, dict):
                raise InvalidConfigError(str(config_path), loaded, f"{config_path} must contain a mapping")
            data = loaded or {}

        layouts_dir = site_root / "_layouts"
        layouts = None
        if layouts_dir.is_dir():
            layouts = {p.stem for p in layouts_dir.iterdir() if p.is_file()}

        return cls(site_root=site_root, data=data, layouts=layouts)

    @property
    def excerpt_separator(self) -> str:
        value = self.data.get("excerpt_separator")
        return value if isinstance(value, str) else DEFAULT_EXCERPT_SEPARATOR

    @property
    def baseurl(self) -> str:
        return str(self.data.get("baseurl") or "")

    @property
    def theme(self) -> str | None:
        theme = self.data.get("theme") or self.data.get("remote_theme")
        return str(theme) if theme else None

    def defaults_for(self, rel_path: str, doc_type: str = "posts") -> dict[str, Any]:
        """Front matter defaults that apply to a document.

        Scopes match when their ``path`` is a prefix of ``rel_path`` and their
        ``type`` (if given) equals ``doc_type``. Less specific scopes are
        applied first so longer paths win.

        Args:
            rel_path: POSIX path of the post relative to the site root
            doc_type: Jekyll collection type

        Returns:
            Merged default values
        """
        matched: list[tuple[int, dict[str, Any]]] = []
        for entry in self.data.get("defaults") or []:
            if not isinstance(entry, dict):
                continue
            scope = entry.get("scope") or {}
            values = entry.get("values") or {}
            if not isinstance(scope, dict) or not isinstance(values, dict):
                continue

            scope_path = str(scope.get("path") or "").strip("/")
            scope_type = scope.get("type")
            if scope_path and not (rel_path == scope_path or rel_path.startswith(scope_path + "/")):
                continue
            if scope_type and scope_type != doc_type:
                continue
            matched.append((len(scope_path), values))

        merged: dict[str, Any] = {}
        for _, values in sorted(matched, key=lambda item: item[0]):
            merged.update(values)
        return merged
