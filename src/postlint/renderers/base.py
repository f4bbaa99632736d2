"""
Base renderer for lint reports.

Provides common functionality for all report renderers, including
template loading and summary data.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from postlint.report import LintReport, Severity

SEVERITY_ICONS = {
    Severity.ERROR: "❌",
    Severity.WARNING: "⚠️",
    Severity.INFO: "ℹ️",
}


class BaseRenderer(ABC):
    """Base class for report renderers.

    Renderers turn a LintReport into text. Templates handle layout where a
    format has one; renderers handle grouping and data assembly.

    Attributes:
        format_name: Name used on the command line (``--format``)
        template_name: Template file name, if the format uses one
    """

    format_name: str = ""
    template_name: str = ""

    def __init__(self, template_dir: Path | None = None):
        """Initialize the renderer.

        Args:
            template_dir: Directory containing templates
        """
        if template_dir is None:
            template_dir = Path(__file__).parent.parent / "templates"
        self.template_dir = Path(template_dir)

        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.env.filters["location"] = self._location_filter
        self.env.filters["severity_icon"] = lambda severity: SEVERITY_ICONS.get(severity, "")

    @abstractmethod
    def render(self, report: LintReport) -> str:
        """Render the report.

        Returns:
            Rendered report as a string
        """

    def _get_template(self, template_name: str | None = None):
        """Load a Jinja2 template."""
        return self.env.get_template(template_name or self.template_name)

    def _get_metadata(self, report: LintReport) -> dict[str, Any]:
        """Common data for templates."""
        return {
            "generated_at": report.finished_at or datetime.now(),
            "counts": report.counts(),
            "total": len(report.findings),
            "posts_checked": report.posts_checked,
            "rules_run": report.rules_run,
            "errors": report.errors,
        }

    @staticmethod
    def _location_filter(finding: Any) -> str:
        """``path:line`` for a finding (just ``path`` without a line)."""
        if finding.line:
            return f"{finding.path}:{finding.line}"
        return finding.path
