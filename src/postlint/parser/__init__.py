"""
Parser module for postlint.

Reads the three layers of a Jekyll post: its file name, its front matter
block and its Markdown/Liquid body.
"""

from postlint.parser.filename import PostFilename, parse_draft_filename, parse_post_filename
from postlint.parser.front_matter import (
    SplitSource,
    find_duplicate_front_matter,
    load_front_matter,
    parse_front_matter_date,
    split_front_matter,
)
from postlint.parser.markdown import (
    CodeBlock,
    Link,
    LinkTarget,
    MarkdownDocument,
    MarkdownScanner,
    classify_target,
    scan_markdown,
)

__all__ = [
    "PostFilename",
    "parse_post_filename",
    "parse_draft_filename",
    "SplitSource",
    "split_front_matter",
    "load_front_matter",
    "find_duplicate_front_matter",
    "parse_front_matter_date",
    "CodeBlock",
    "Link",
    "LinkTarget",
    "MarkdownDocument",
    "MarkdownScanner",
    "classify_target",
    "scan_markdown",
]
