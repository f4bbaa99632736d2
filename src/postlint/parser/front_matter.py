"""
Front matter parsing.

Splits a post into its YAML front matter block and Markdown body the way
Jekyll does: the file must open with a ``---`` line and the block ends at
the next ``---`` (or ``...``) line.

Example:
    >>> source = split_front_matter("---\\ntitle: Hi\\n---\\nBody\\n")
    >>> source.raw, source.body_line
    ('title: Hi\\n', 4)
    >>> load_front_matter(source.raw, source.fm_line)
    {'title': 'Hi'}
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

import yaml

from postlint.errors import FrontMatterError

BOM = "\ufeff"
OPEN_DELIMITER = "---"
CLOSE_DELIMITERS = ("---", "...")

DATE_STRING = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{1,2})-(?P<day>\d{1,2})"
    r"(?:[ T](?P<hour>\d{1,2}):(?P<minute>\d{2})(?::(?P<second>\d{2})(?:\.\d+)?)?)?"
    r"(?:\s*(?:Z|[+-]\d{2}:?\d{2}))?$"
)

FRONT_MATTER_KEY = re.compile(r"^[A-Za-z_][\w-]*\s*:(\s|$)")


@dataclass
class SplitSource:
    """A post split into front matter and body.

    Attributes:
        raw: Front matter text between the delimiters (None if absent)
        body: Everything after the closing delimiter
        fm_line: Line number of the first front matter line (None if absent)
        body_line: Line number of the first body line
    """

    raw: str | None
    body: str
    fm_line: int | None
    body_line: int

    @property
    def has_front_matter(self) -> bool:
        return self.raw is not None


def split_front_matter(text: str) -> SplitSource:
    """Split post text into front matter and body.

    Args:
        text: Full file contents (newlines already normalized)

    Returns:
        SplitSource

    Raises:
        FrontMatterError: If the opening delimiter is never closed
    """
    if text.startswith(BOM):
        text = text[len(BOM):]

    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != OPEN_DELIMITER:
        return SplitSource(raw=None, body=text, fm_line=None, body_line=1)

    for index in range(1, len(lines)):
        if lines[index].rstrip() in CLOSE_DELIMITERS:
            return SplitSource(
                raw="".join(lines[1:index]),
                body="".join(lines[index + 1:]),
                fm_line=2,
                body_line=index + 2,
            )

    raise FrontMatterError(
        "Front matter opened on line 1 is never closed",
        kind="unterminated",
        line=1,
    )


def load_front_matter(raw: str, fm_line: int = 2) -> dict[str, Any]:
    """Parse the front matter block as YAML key-value metadata.

    Args:
        raw: Text between the delimiters
        fm_line: Line number of the first line of ``raw``

    Returns:
        Front matter mapping (empty if the block is empty)

    Raises:
        FrontMatterError: If the block is not YAML or not a mapping
    """
    try:
        data = yaml.safe_load(raw)
    except yaml.MarkedYAMLError as e:
        mark = e.problem_mark or e.context_mark
        line = fm_line + mark.line if mark is not None else fm_line
        raise FrontMatterError(
            f"Front matter is not valid YAML: {e.problem or e}",
            kind="invalid_yaml",
            line=line,
            cause=e,
        ) from e
    except (yaml.YAMLError, ValueError) as e:
        # ValueError: PyYAML rejects impossible timestamps such as 2019-02-30
        raise FrontMatterError(
            f"Front matter is not valid YAML: {e}",
            kind="invalid_yaml",
            line=fm_line,
            cause=e,
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontMatterError(
            f"Front matter must be key-value pairs, got {type(data).__name__}",
            kind="not_mapping",
            line=fm_line,
        )
    return data


def find_duplicate_front_matter(body: str, body_line: int) -> int | None:
    """Find a second front matter block pasted at the top of the body.

    Args:
        body: Post body
        body_line: Line number of the first body line

    Returns:
        Line number of the duplicate block's opening delimiter, or None
    """
    lines = body.splitlines()
    start = next((i for i, line in enumerate(lines) if line.strip()), None)
    if start is None or lines[start].rstrip() != OPEN_DELIMITER:
        return None

    for end in range(start + 1, len(lines)):
        if lines[end].rstrip() in CLOSE_DELIMITERS:
            break
    else:
        return None

    chunk = lines[start + 1:end]
    first = next((line for line in chunk if line.strip()), None)
    if first is None or not FRONT_MATTER_KEY.match(first):
        return None

    try:
        data = yaml.safe_load("\n".join(chunk))
    except (yaml.YAMLError, ValueError):
        return None

    if isinstance(data, dict) and data and all(isinstance(k, str) for k in data):
        return body_line + start
    return None


def parse_front_matter_date(value: Any) -> date:
    """Calendar date of a front matter ``date`` value, as written.

    Accepts ``date``/``datetime`` objects (YAML timestamps) and strings such
    as ``2021-03-04 10:00:00 -0500`` that PyYAML leaves unparsed.

    Raises:
        ValueError: If the value is not a date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        match = DATE_STRING.match(value.strip())
        if match:
            return date(int(match["year"]), int(match["month"]), int(match["day"]))
    raise ValueError(f"Not a date: {value!r}")
