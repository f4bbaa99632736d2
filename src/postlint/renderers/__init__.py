"""
Report renderers.

Each renderer turns a LintReport into one output format.
"""

from postlint.errors import InvalidConfigError
from postlint.renderers.base import BaseRenderer
from postlint.renderers.json import JSONRenderer
from postlint.renderers.markdown import MarkdownRenderer
from postlint.renderers.text import TextRenderer

# Map format name to renderer class
RENDERERS: dict[str, type[BaseRenderer]] = {
    "text": TextRenderer,
    "json": JSONRenderer,
    "markdown": MarkdownRenderer,
}


def get_renderer(format_name: str) -> BaseRenderer:
    """Instantiate the renderer for a format name.

    Raises:
        InvalidConfigError: If the format is unknown
    """
    renderer_class = RENDERERS.get(format_name.lower())
    if renderer_class is None:
        raise InvalidConfigError(
            "format",
            format_name,
            f"Unknown report format '{format_name}'. Available: {', '.join(RENDERERS)}",
        )
    return renderer_class()


__all__ = [
    "BaseRenderer",
    "TextRenderer",
    "JSONRenderer",
    "MarkdownRenderer",
    "RENDERERS",
    "get_renderer",
]
