"""
Markdown report renderer.

Produces a report suitable for a pull request comment or a CI job
summary: a severity table followed by the findings grouped per post.
"""

from postlint.renderers.base import BaseRenderer
from postlint.report import LintReport


class MarkdownRenderer(BaseRenderer):
    format_name = "markdown"
    template_name = "report.md.j2"

    def render(self, report: LintReport) -> str:
        template = self._get_template()
        return template.render(
            report=report,
            by_path=report.by_path(),
            **self._get_metadata(report),
        )
