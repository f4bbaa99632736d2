"""
Markdown body scanner.

Scans a post body line by line and records what the lint rules need:
code blocks (fenced and Liquid), links, stray Liquid end tags and inline
suppression comments.

The scan follows Jekyll's processing order. Liquid runs before Markdown,
so Liquid blocks are found first and fences are only recognized outside
them. ``post_url``/``link`` tags are evaluated by Liquid even inside code
fences and highlight blocks, so they are collected everywhere except
inside ``raw`` and ``comment`` blocks.

Example:
    >>> doc = scan_markdown("```python\\nprint(1)\\n", body_line=5)
    >>> [(b.kind, b.start_line, b.end_line) for b in doc.code_blocks]
    [('fence', 5, None)]
"""

import re
from dataclasses import dataclass, field
from urllib.parse import unquote

# {% highlight python linenos %} / {%- endraw -%}
LIQUID_BLOCK_TAG = re.compile(
    r"\{%-?\s*(?P<end>end)?(?P<tag>highlight|raw|comment)\b(?P<args>.*?)-?%\}"
)
LIQUID_LITERAL_KINDS = ("raw", "comment")

FENCE_OPEN = re.compile(r"^(?P<indent> {0,3})(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
FENCE_CLOSE = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})\s*$")

POST_URL_TAG = re.compile(r"\{%-?\s*post_url\s+(?P<target>[^\s%]+)\s*-?%\}")
LINK_TAG = re.compile(r"\{%-?\s*link\s+(?P<target>[^\s%]+)\s*-?%\}")

INLINE_CODE = re.compile(r"(`+).+?\1")
# [![alt](image)](target): the outer target of a linked image
LINKED_IMAGE = re.compile(
    r"\[!\[[^\[\]]*\]\((?:[^()]|\([^()]*\))*\)\]\((?P<dest>(?:[^()]|\([^()]*\))*)\)"
)
INLINE_LINK = re.compile(
    r"(?P<bang>!?)\[(?P<text>[^\[\]]*)\]\((?P<dest>(?:[^()]|\([^()]*\))*)\)"
)
REFERENCE_DEF = re.compile(r"^ {0,3}\[(?P<label>[^\]^][^\]]*)\]:\s*(?P<dest><[^>]*>|\S+)")
AUTOLINK = re.compile(r"<(?P<dest>(?:https?|ftp)://[^>\s]+|mailto:[^>\s]+)>")
LINK_TITLE = re.compile(r"""\s+("[^"]*"|'[^']*'|\([^)]*\))\s*$""")

SUPPRESS_DIRECTIVE = re.compile(r"<!--\s*postlint-disable(?P<codes>[^>]*?)\s*-->")

SITE_PREFIX = re.compile(r"^(?:\{\{-?\s*site\.(?:url|baseurl)\s*-?\}\}\s*)+")
URL_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")


@dataclass
class CodeBlock:
    """A fenced or Liquid code block.

    Attributes:
        kind: ``fence``, ``highlight``, ``raw`` or ``comment``
        start_line: Line of the opening fence or tag
        end_line: Line of the closing fence or tag (None if never closed)
        language: Language from the info string or highlight tag
        marker: Opening fence characters or the opening tag text
    """

    kind: str
    start_line: int
    end_line: int | None = None
    language: str | None = None
    marker: str = ""

    @property
    def closed(self) -> bool:
        return self.end_line is not None

    @property
    def is_liquid(self) -> bool:
        return self.kind != "fence"


@dataclass
class Link:
    """A link found in the body.

    Attributes:
        kind: ``inline``, ``image``, ``reference``, ``autolink``,
            ``post_url`` or ``link_tag``
        target: Destination exactly as written (title removed)
        line: Line number
        text: Link text or reference label
    """

    kind: str
    target: str
    line: int
    text: str = ""

    @property
    def is_liquid_tag(self) -> bool:
        return self.kind in ("post_url", "link_tag")


@dataclass
class StrayTag:
    """A Liquid ``end…`` tag with no matching opening tag."""

    tag: str
    line: int


@dataclass
class LinkTarget:
    """A normalized link destination.

    Attributes:
        kind: ``external``, ``anchor``, ``liquid``, ``mail`` or ``local``
        path: For local targets, the URL-decoded path without query or fragment
        original: Target as written
    """

    kind: str
    path: str
    original: str

    @property
    def is_site_relative(self) -> bool:
        return self.kind == "local" and self.path.startswith("/")


@dataclass
class MarkdownDocument:
    """Everything the scanner found in one body."""

    code_blocks: list[CodeBlock] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    stray_liquid_ends: list[StrayTag] = field(default_factory=list)
    suppressed: set[str] = field(default_factory=set)
    suppress_all: bool = False

    @property
    def fences(self) -> list[CodeBlock]:
        return [b for b in self.code_blocks if b.kind == "fence"]

    @property
    def liquid_blocks(self) -> list[CodeBlock]:
        return [b for b in self.code_blocks if b.is_liquid]

    @property
    def highlight_blocks(self) -> list[CodeBlock]:
        return [b for b in self.code_blocks if b.kind == "highlight"]

    @property
    def unclosed_blocks(self) -> list[CodeBlock]:
        return [b for b in self.code_blocks if not b.closed]

    @property
    def uses_mixed_code_styles(self) -> bool:
        return bool(self.fences) and bool(self.highlight_blocks)

    def is_suppressed(self, *names: str) -> bool:
        """Whether any of the given rule codes/names is disabled inline."""
        if self.suppress_all:
            return True
        return any(name.upper() in self.suppressed for name in names)


def classify_target(target: str) -> LinkTarget:
    """Normalize a link destination and decide what kind of link it is.

    ``{{ site.baseurl }}``/``{{ site.url }}`` prefixes are removed (the rest
    is then site-relative), as are the query string and fragment.

    Examples:
        >>> classify_target("{{ site.baseurl }}/assets/a%20b.png?x=1").path
        '/assets/a b.png'
        >>> classify_target("https://example.com").kind
        'external'
    """
    original = target
    stripped = target.strip()
    without_site = SITE_PREFIX.sub("", stripped)
    had_site_prefix = without_site != stripped
    value = without_site.strip()

    if "{%" in value or "{{" in value:
        return LinkTarget("liquid", value, original)
    if had_site_prefix and not value:
        return LinkTarget("local", "/", original)
    if value.startswith("#"):
        return LinkTarget("anchor", value, original)
    if value.lower().startswith("mailto:"):
        return LinkTarget("mail", value, original)
    if value.startswith("//") or URL_SCHEME.match(value):
        return LinkTarget("external", value, original)

    path = unquote(value.split("#", 1)[0].split("?", 1)[0])
    if not path:
        return LinkTarget("anchor", value, original)
    if had_site_prefix and not path.startswith("/"):
        path = "/" + path
    return LinkTarget("local", path, original)


def _clean_destination(dest: str) -> str:
    dest = dest.strip()
    if dest.startswith("<"):
        return dest[1:].split(">", 1)[0].strip()
    dest = LINK_TITLE.sub("", dest)
    if "{%" in dest or "{{" in dest:
        return dest
    return dest.split()[0] if dest else dest


def _blank_spans(line: str, spans: list[tuple[int, int]]) -> str:
    """Replace each span with spaces so match positions stay put."""
    for start, end in spans:
        line = line[:start] + " " * (end - start) + line[end:]
    return line


class MarkdownScanner:
    """Scan a Markdown body into a MarkdownDocument.

    Manifesto:
        Linting a Jekyll post means reading it the way Jekyll reads it.
        Liquid owns the text first; Markdown only sees what Liquid leaves.
        The scanner reproduces that order so a fence inside a
        ``{% highlight %}`` block is content, not a fence, and a
        ``{% post_url %}`` inside a fence still has to resolve.

    Architecture:
        ```
        body lines
            │
            ├──► _scan_liquid()   ──► highlight/raw/comment blocks, stray ends
            │                          masked and literal character spans
            │
            ├──► _scan_fences()   ──► fenced blocks (unmasked lines only)
            │
            ├──► _scan_liquid_links()  ──► post_url / link tags (non-literal lines)
            │
            ├──► _scan_links()    ──► inline, image, reference, autolink
            │                          (outside blocks and inline code)
            │
            └──► _scan_directives() ──► postlint-disable comments
        ```

    Guardrails:
        - Do NOT treat ``{% highlight %}`` inside ``{% raw %}`` as a block
          ✅ Only the matching end tag is searched inside an open block
        - Do NOT report links quoted in code
          ✅ Links are only read outside blocks and inline code spans
    """

    def __init__(self, body: str, body_line: int = 1):
        self.lines = body.splitlines()
        self.body_line = body_line
        self.document = MarkdownDocument()

        count = len(self.lines)
        self._masked = [False] * count
        self._masked_spans: list[list[tuple[int, int]]] = [[] for _ in range(count)]
        self._literal_spans: list[list[tuple[int, int]]] = [[] for _ in range(count)]
        self._in_fence = [False] * count

    def scan(self) -> MarkdownDocument:
        self._scan_liquid()
        self._scan_fences()
        self._scan_liquid_links()
        self._scan_links()
        self._scan_directives()

        self.document.code_blocks.sort(key=lambda b: b.start_line)
        self.document.links.sort(key=lambda link: link.line)
        return self.document

    def _lineno(self, index: int) -> int:
        return self.body_line + index

    def _scan_liquid(self) -> None:
        open_block: CodeBlock | None = None

        for index, line in enumerate(self.lines):
            kinds: set[str] = {open_block.kind} if open_block else set()
            span_start = 0 if open_block else None
            pos = 0

            while True:
                if open_block is not None:
                    close = self._find_end_tag(line, open_block.kind, pos)
                    if close is None:
                        break
                    open_block.end_line = self._lineno(index)
                    self._add_span(index, open_block.kind, span_start, close)
                    open_block = None
                    pos = close
                    continue

                match = LIQUID_BLOCK_TAG.search(line, pos)
                if match is None:
                    break
                pos = match.end()

                if match["end"]:
                    self.document.stray_liquid_ends.append(
                        StrayTag(tag=f"end{match['tag']}", line=self._lineno(index))
                    )
                    continue

                args = match["args"].split()
                open_block = CodeBlock(
                    kind=match["tag"],
                    start_line=self._lineno(index),
                    language=args[0] if match["tag"] == "highlight" and args else None,
                    marker=match.group(0),
                )
                self.document.code_blocks.append(open_block)
                kinds.add(open_block.kind)
                span_start = match.start()

            if open_block is not None:
                self._add_span(index, open_block.kind, span_start, len(line))
            self._masked[index] = bool(kinds)

    def _add_span(self, index: int, kind: str, start: int, end: int) -> None:
        self._masked_spans[index].append((start, end))
        if kind in LIQUID_LITERAL_KINDS:
            self._literal_spans[index].append((start, end))

    @staticmethod
    def _find_end_tag(line: str, kind: str, pos: int) -> int | None:
        for match in LIQUID_BLOCK_TAG.finditer(line, pos):
            if match["end"] and match["tag"] == kind:
                return match.end()
        return None

    def _scan_fences(self) -> None:
        open_block: CodeBlock | None = None

        for index, line in enumerate(self.lines):
            if self._masked[index]:
                self._in_fence[index] = open_block is not None
                continue

            if open_block is not None:
                self._in_fence[index] = True
                close = FENCE_CLOSE.match(line)
                if (
                    close
                    and close["fence"][0] == open_block.marker[0]
                    and len(close["fence"]) >= len(open_block.marker)
                ):
                    open_block.end_line = self._lineno(index)
                    open_block = None
                continue

            match = FENCE_OPEN.match(line)
            if match is None:
                continue
            fence = match["fence"]
            info = match["info"].strip()
            if fence[0] == "`" and "`" in info:
                continue

            language = info.split()[0].strip("{}.") if info else None
            open_block = CodeBlock(
                kind="fence",
                start_line=self._lineno(index),
                language=language or None,
                marker=fence,
            )
            self.document.code_blocks.append(open_block)
            self._in_fence[index] = True

    def _scan_liquid_links(self) -> None:
        for index, raw_line in enumerate(self.lines):
            line = _blank_spans(raw_line, self._literal_spans[index])
            for match in POST_URL_TAG.finditer(line):
                self.document.links.append(
                    Link(kind="post_url", target=match["target"], line=self._lineno(index))
                )
            for match in LINK_TAG.finditer(line):
                self.document.links.append(
                    Link(kind="link_tag", target=match["target"], line=self._lineno(index))
                )

    def _scan_links(self) -> None:
        for index, raw_line in enumerate(self.lines):
            if self._in_fence[index]:
                continue

            line = _blank_spans(raw_line, self._masked_spans[index])
            line = INLINE_CODE.sub(lambda m: " " * len(m.group(0)), line)
            lineno = self._lineno(index)

            reference = REFERENCE_DEF.match(line)
            if reference:
                self.document.links.append(Link(
                    kind="reference",
                    target=_clean_destination(reference["dest"]),
                    line=lineno,
                    text=reference["label"],
                ))
                continue

            for match in LINKED_IMAGE.finditer(line):
                self.document.links.append(Link(
                    kind="inline", target=_clean_destination(match["dest"]), line=lineno
                ))

            for match in INLINE_LINK.finditer(line):
                target = _clean_destination(match["dest"])
                if not target:
                    continue
                self.document.links.append(Link(
                    kind="image" if match["bang"] else "inline",
                    target=target,
                    line=lineno,
                    text=match["text"],
                ))

            for match in AUTOLINK.finditer(line):
                self.document.links.append(
                    Link(kind="autolink", target=match["dest"], line=lineno)
                )

    def _scan_directives(self) -> None:
        for line in self.lines:
            for match in SUPPRESS_DIRECTIVE.finditer(line):
                codes = [c for c in re.split(r"[\s,]+", match["codes"]) if c]
                if not codes:
                    self.document.suppress_all = True
                self.document.suppressed.update(c.upper() for c in codes)


def scan_markdown(body: str, body_line: int = 1) -> MarkdownDocument:
    """Scan a post body.

    Args:
        body: Markdown body (front matter already removed)
        body_line: Line number of the first body line in the file

    Returns:
        MarkdownDocument
    """
    return MarkdownScanner(body, body_line).scan()
