"""
JSON renderer for machine consumption.
"""

import json

from postlint.renderers.base import BaseRenderer
from postlint.report import LintReport


class JSONRenderer(BaseRenderer):
    format_name = "json"

    def render(self, report: LintReport) -> str:
        return json.dumps(report.to_dict(), indent=2, default=str) + "\n"
