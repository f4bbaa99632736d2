"""
Plain text renderer.

One line per finding in the familiar ``path:line: CODE message`` shape so
editors and CI annotations can jump to the location, then a summary line.
"""

from postlint.renderers.base import BaseRenderer
from postlint.report import LintReport


class TextRenderer(BaseRenderer):
    format_name = "text"

    def render(self, report: LintReport) -> str:
        lines = []
        for finding in report.findings:
            location = self._location_filter(finding)
            lines.append(
                f"{location}: {finding.code} [{finding.severity.value}] {finding.message}"
            )

        for error in report.errors:
            lines.append(f"rule {error['rule']} crashed: {error['error_type']}: {error['message']}")

        counts = report.counts()
        if lines:
            lines.append("")
        lines.append(
            f"{report.posts_checked} post(s) checked: "
            f"{counts['error']} error(s), {counts['warning']} warning(s), {counts['info']} info"
        )
        return "\n".join(lines) + "\n"
