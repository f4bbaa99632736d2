"""
Post filename convention.

Jekyll posts are named ``YYYY-MM-DD-title.ext``; drafts drop the date.
"""

import re
from dataclasses import dataclass
from datetime import date

POST_FILENAME = re.compile(r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})-(?P<slug>.+)$")

DEFAULT_EXTENSIONS = (".md", ".markdown")


@dataclass(frozen=True)
class PostFilename:
    """Parsed parts of a post filename.

    Attributes:
        date: Publication date encoded in the name (None for drafts)
        slug: Title part of the name
        extension: File extension including the dot
    """

    date: date | None
    slug: str
    extension: str

    @property
    def stem(self) -> str:
        if self.date is None:
            return self.slug
        return f"{self.date.isoformat()}-{self.slug}"


def _split_extension(name: str, extensions: tuple[str, ...] | list[str]) -> tuple[str, str] | None:
    lowered = name.lower()
    for ext in sorted(extensions, key=len, reverse=True):
        if lowered.endswith(ext.lower()) and len(name) > len(ext):
            return name[: -len(ext)], name[-len(ext):]
    return None


def parse_post_filename(
    name: str,
    extensions: tuple[str, ...] | list[str] = DEFAULT_EXTENSIONS,
) -> PostFilename | None:
    """Parse ``YYYY-MM-DD-title.ext``.

    Args:
        name: File name (no directories)
        extensions: Accepted extensions

    Returns:
        PostFilename, or None if the name does not follow the convention or
        the date is not a real calendar date
    """
    split = _split_extension(name, extensions)
    if split is None:
        return None
    stem, extension = split

    match = POST_FILENAME.match(stem)
    if not match:
        return None

    try:
        post_date = date(int(match["year"]), int(match["month"]), int(match["day"]))
    except ValueError:
        return None

    slug = match["slug"]
    if not slug.strip("-"):
        return None

    return PostFilename(date=post_date, slug=slug, extension=extension)


def parse_draft_filename(
    name: str,
    extensions: tuple[str, ...] | list[str] = DEFAULT_EXTENSIONS,
) -> PostFilename | None:
    """Parse a draft name, ``title.ext``; a leading date is tolerated."""
    dated = parse_post_filename(name, extensions)
    if dated is not None:
        return dated

    split = _split_extension(name, extensions)
    if split is None or not split[0].strip("-"):
        return None
    return PostFilename(date=None, slug=split[0], extension=split[1])
