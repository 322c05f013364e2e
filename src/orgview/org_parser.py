"""Parse Org text into a syntax tree.

This covers the subset of Org that the preview renders: headlines with
planning and property drawers, drawers and clocks, keywords, blocks, tables,
lists with checkboxes, and the usual inline markup. Anything it does not
recognise is kept as paragraph text.
"""

from __future__ import annotations

import re
import textwrap
from typing import Callable

from orgview.exceptions import ParseError
from orgview.schemas.org_nodes import (
    Bold,
    Clock,
    Code,
    Drawer,
    ExampleBlock,
    ExportBlock,
    ExportSnippet,
    FixedWidth,
    Headline,
    HorizontalRule,
    Italic,
    Keyword,
    LatexEnvironment,
    LatexFragment,
    LineBreak,
    Link,
    ListItem,
    ListItemTag,
    NodeProperty,
    OrgData,
    OrgNode,
    Paragraph,
    Planning,
    PlainList,
    PropertyDrawer,
    QuoteBlock,
    Section,
    SrcBlock,
    StatisticsCookie,
    StrikeThrough,
    Subscript,
    Superscript,
    Table,
    TableCell,
    TableRow,
    Text,
    Timestamp,
    Underline,
    Verbatim,
)

_HEADLINE_RE = re.compile(r"^(\*+)[ \t]+(.*?)[ \t]*$")
_TODO_KEYWORDS = frozenset({"TODO", "DONE"})
_PRIORITY_RE = re.compile(r"^\[#([A-Za-z0-9])\][ \t]*")
_TAGS_RE = re.compile(r"[ \t]+:((?:[\w@#%]+:)+)$")
_PLANNING_LINE_RE = re.compile(r"^[ \t]*(?:SCHEDULED|DEADLINE|CLOSED):")
_PLANNING_ITEM_RE = re.compile(
    r"(SCHEDULED|DEADLINE|CLOSED):[ \t]*([<\[][^>\]]*[>\]](?:--[<\[][^>\]]*[>\]])?)"
)
_KEYWORD_RE = re.compile(r"^[ \t]*#\+(\w+):[ \t]*(.*?)[ \t]*$")
_BLOCK_BEGIN_RE = re.compile(r"^[ \t]*#\+BEGIN_(\w+)(?:[ \t]+(.*?))?[ \t]*$", re.IGNORECASE)
_COMMENT_RE = re.compile(r"^[ \t]*#(?:[ \t]|$)")
_DRAWER_BEGIN_RE = re.compile(r"^[ \t]*:([\w-]+):[ \t]*$")
_DRAWER_END_RE = re.compile(r"^[ \t]*:END:[ \t]*$", re.IGNORECASE)
_NODE_PROPERTY_RE = re.compile(r"^[ \t]*:([^\s:]+):(?:[ \t]+(.*?))?[ \t]*$")
_CLOCK_RE = re.compile(
    r"^[ \t]*CLOCK:[ \t]*(\[[^\]]+\](?:--\[[^\]]+\])?)?(?:[ \t]*=>[ \t]*(\S+))?[ \t]*$"
)
_TABLE_RE = re.compile(r"^[ \t]*\|")
_TABLE_RULE_RE = re.compile(r"^[ \t]*\|-")
_HR_RE = re.compile(r"^[ \t]*-{5,}[ \t]*$")
_FIXED_WIDTH_RE = re.compile(r"^[ \t]*:(?:[ \t](.*))?$")
_LATEX_BEGIN_RE = re.compile(r"^[ \t]*\\begin\{([A-Za-z*]+)\}")
_LIST_ITEM_RE = re.compile(
    r"^(?P<indent>[ \t]*)(?P<bullet>[-+]|\d+[.)]|(?<=[ \t])\*)(?:[ \t]+(?P<rest>.*))?$"
)
_CHECKBOX_RE = re.compile(r"^\[([ Xx-])\](?:[ \t]+|$)")
_DESCRIPTION_RE = re.compile(r"^(.*?)[ \t]+::(?:[ \t]+(.*)|$)")

_CHECKBOX_STATES = {" ": "off", "X": "on", "x": "on", "-": "trans"}

# Inline patterns
_LINK_RE = re.compile(r"\[\[([^\]\n]+)\](?:\[([^\]\n]*)\])?\]")
_COOKIE_RE = re.compile(r"\[(\d*%|\d*/\d*)\]")
_DISPLAY_DOLLAR_RE = re.compile(r"\$\$(.+?)\$\$", re.DOTALL)
_INLINE_DOLLAR_RE = re.compile(
    r"\$([^\s$.,?;'\"](?:[^$]*?[^\s$.,\\])?)\$(?=[\s\-.,?;:'\")\]]|$)"
)
_LATEX_PAREN_RE = re.compile(r"\\\((.+?)\\\)", re.DOTALL)
_LATEX_BRACKET_RE = re.compile(r"\\\[(.+?)\\\]", re.DOTALL)
_LINE_BREAK_RE = re.compile(r"\\\\[ \t]*(?:\n|$)")
_EXPORT_SNIPPET_RE = re.compile(r"@@([\w-]+):(.*?)@@", re.DOTALL)
_PLAIN_URL_RE = re.compile(r"https?://[^\s<>\[\]\"']+")
_URL_TRAILING_PUNCT = ".,;:!?)"
_LINK_SCHEME_RE = re.compile(r"^([a-z][a-z0-9+.-]*):")
_UNBRACED_SCRIPT_RE = re.compile(r"\d+|[A-Za-z]")

_EMPHASIS_TYPES = {"*": Bold, "/": Italic, "_": Underline, "+": StrikeThrough}
_VERBATIM_TYPES = {"~": Code, "=": Verbatim}
_PRE_CHARS = frozenset(" \t\n-({'\"")
_POST_CHARS = frozenset(" \t\n-.,;:!?')}\"[\\")

InlineMatch = tuple[OrgNode, int]


def parse_org(text: str) -> OrgData:
    """Parse an Org document into an ``org-data`` root node."""
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    root = OrgData()

    headline_indices = [idx for idx, line in enumerate(lines) if _HEADLINE_RE.match(line)]
    preamble_end = headline_indices[0] if headline_indices else len(lines)
    preamble = _parse_elements(lines[:preamble_end])
    if preamble:
        root.children.append(Section(children=preamble))

    # Sections nest by headline level using an explicit stack.
    stack: list[tuple[int, Section]] = []
    bounds = headline_indices + [len(lines)]
    for position, start in enumerate(headline_indices):
        end = bounds[position + 1]
        headline = _parse_headline(lines[start])
        section = Section(children=[headline])
        section.children.extend(_parse_headline_body(lines[start + 1 : end]))

        while stack and stack[-1][0] >= headline.level:
            stack.pop()
        if stack:
            stack[-1][1].children.append(section)
        else:
            root.children.append(section)
        stack.append((headline.level, section))

    return root


def _parse_headline(line: str) -> Headline:
    match = _HEADLINE_RE.match(line)
    if match is None:
        raise ParseError(f"Not a headline: {line!r}")
    stars, rest = match.group(1), match.group(2)
    headline = Headline(level=len(stars))

    first, _, remainder = rest.partition(" ")
    if first in _TODO_KEYWORDS:
        headline.todo_keyword = first
        rest = remainder.lstrip()

    priority = _PRIORITY_RE.match(rest)
    if priority:
        headline.priority = priority.group(1)
        rest = rest[priority.end() :]

    tags = _TAGS_RE.search(rest)
    if tags:
        headline.tags = [tag for tag in tags.group(1).split(":") if tag]
        rest = rest[: tags.start()]

    headline.children = parse_inline(rest.strip())
    return headline


def _parse_headline_body(lines: list[str]) -> list[OrgNode]:
    nodes: list[OrgNode] = []
    if lines and _PLANNING_LINE_RE.match(lines[0]):
        nodes.append(_parse_planning(lines[0]))
        lines = lines[1:]
    nodes.extend(_parse_elements(lines))
    return nodes


def _parse_planning(line: str) -> Planning:
    planning = Planning()
    for label, raw in _PLANNING_ITEM_RE.findall(line):
        setattr(planning, label.lower(), Timestamp(raw_value=raw))
    return planning


def _parse_elements(lines: list[str]) -> list[OrgNode]:
    return _ElementParser(lines).parse()


class _ElementParser:
    """Greedy line scanner producing block-level nodes."""

    def __init__(self, lines: list[str]) -> None:
        self.lines = lines
        self.matchers: list[Callable[[int], tuple[list[OrgNode], int] | None]] = [
            self._block,
            self._latex_environment,
            self._drawer,
            self._clock,
            self._keyword,
            self._comment,
            self._table,
            self._horizontal_rule,
            self._fixed_width,
            self._plain_list,
        ]

    def parse(self) -> list[OrgNode]:
        nodes: list[OrgNode] = []
        index = 0
        while index < len(self.lines):
            if not self.lines[index].strip():
                index += 1
                continue
            for matcher in self.matchers:
                result = matcher(index)
                if result is not None:
                    produced, index = result
                    nodes.extend(produced)
                    break
            else:
                paragraph, index = self._paragraph(index)
                nodes.append(paragraph)
        return nodes

    def _find(self, start: int, pattern: re.Pattern[str]) -> int | None:
        for index in range(start, len(self.lines)):
            if pattern.match(self.lines[index]):
                return index
        return None

    def _block(self, index: int) -> tuple[list[OrgNode], int] | None:
        match = _BLOCK_BEGIN_RE.match(self.lines[index])
        if not match:
            return None
        name = match.group(1).upper()
        params = (match.group(2) or "").split()
        end_re = re.compile(rf"^[ \t]*#\+END_{re.escape(name)}[ \t]*$", re.IGNORECASE)
        end = self._find(index + 1, end_re)
        if end is None:
            return None
        body = self.lines[index + 1 : end]
        value = textwrap.dedent("\n".join(body))

        node: OrgNode
        if name == "SRC":
            node = SrcBlock(language=params[0] if params else "", value=value)
        elif name == "EXPORT":
            node = ExportBlock(backend=params[0].lower() if params else "", value=value)
        elif name in {"QUOTE", "CENTER", "VERSE"}:
            node = QuoteBlock(children=_parse_elements(body))
        else:
            node = ExampleBlock(value=value)
        return [node], end + 1

    def _latex_environment(self, index: int) -> tuple[list[OrgNode], int] | None:
        match = _LATEX_BEGIN_RE.match(self.lines[index])
        if not match:
            return None
        end_re = re.compile(rf".*\\end\{{{re.escape(match.group(1))}\}}")
        end = self._find(index, end_re)
        if end is None:
            return None
        value = "\n".join(self.lines[index : end + 1]).strip()
        return [LatexEnvironment(value=value)], end + 1

    def _drawer(self, index: int) -> tuple[list[OrgNode], int] | None:
        line = self.lines[index]
        if _DRAWER_END_RE.match(line):
            # Stray :END: without an opening drawer.
            return [], index + 1
        match = _DRAWER_BEGIN_RE.match(line)
        if not match:
            return None

        # Drawers do not nest, and ``:KEY:`` inside one is a property or text.
        end = self._find(index + 1, _DRAWER_END_RE)
        if end is None:
            return None

        inner = self.lines[index + 1 : end]
        name = match.group(1)
        if name.upper() == "PROPERTIES":
            properties: list[OrgNode] = []
            for prop_line in inner:
                prop = _NODE_PROPERTY_RE.match(prop_line)
                if prop:
                    properties.append(NodeProperty(key=prop.group(1), value=prop.group(2) or ""))
            return [PropertyDrawer(children=properties)], end + 1
        return [Drawer(name=name, children=_parse_elements(inner))], end + 1

    def _clock(self, index: int) -> tuple[list[OrgNode], int] | None:
        match = _CLOCK_RE.match(self.lines[index])
        if not match:
            return None
        raw, duration = match.group(1), match.group(2) or ""
        status = "running" if raw and "--" not in raw else "closed"
        clock = Clock(
            value=Timestamp(raw_value=raw) if raw else None,
            duration=duration,
            status=status,
        )
        return [clock], index + 1

    def _keyword(self, index: int) -> tuple[list[OrgNode], int] | None:
        match = _KEYWORD_RE.match(self.lines[index])
        if not match:
            return None
        key = match.group(1).upper()
        if key.startswith(("BEGIN_", "END_")):
            return [], index + 1
        return [Keyword(key=key, value=match.group(2))], index + 1

    def _comment(self, index: int) -> tuple[list[OrgNode], int] | None:
        if _COMMENT_RE.match(self.lines[index]):
            return [], index + 1
        return None

    def _table(self, index: int) -> tuple[list[OrgNode], int] | None:
        if not _TABLE_RE.match(self.lines[index]):
            return None
        table = Table()
        cursor = index
        while cursor < len(self.lines) and _TABLE_RE.match(self.lines[cursor]):
            line = self.lines[cursor].strip()
            if _TABLE_RULE_RE.match(line):
                table.children.append(TableRow(row_type="rule"))
            else:
                cells = line.strip("|").split("|")
                table.children.append(
                    TableRow(children=[TableCell(children=parse_inline(cell.strip())) for cell in cells])
                )
            cursor += 1
        return [table], cursor

    def _horizontal_rule(self, index: int) -> tuple[list[OrgNode], int] | None:
        if _HR_RE.match(self.lines[index]):
            return [HorizontalRule()], index + 1
        return None

    def _fixed_width(self, index: int) -> tuple[list[OrgNode], int] | None:
        if not _FIXED_WIDTH_RE.match(self.lines[index]):
            return None
        values: list[str] = []
        cursor = index
        while cursor < len(self.lines):
            match = _FIXED_WIDTH_RE.match(self.lines[cursor])
            if not match:
                break
            values.append(match.group(1) or "")
            cursor += 1
        return [FixedWidth(value="\n".join(values))], cursor

    def _plain_list(self, index: int) -> tuple[list[OrgNode], int] | None:
        first = _LIST_ITEM_RE.match(self.lines[index])
        if not first:
            return None
        indent = _indent_width(first.group("indent"))
        first_rest = _CHECKBOX_RE.sub("", first.group("rest") or "", count=1)
        if first.group("bullet")[0].isdigit():
            list_type = "ordered"
        elif _DESCRIPTION_RE.match(first_rest):
            list_type = "descriptive"
        else:
            list_type = "unordered"
        plain_list = PlainList(list_type=list_type)

        cursor = index
        while cursor < len(self.lines):
            match = _LIST_ITEM_RE.match(self.lines[cursor])
            if not match or _indent_width(match.group("indent")) != indent:
                break
            item, cursor = self._list_item(match, cursor, indent, list_type)
            plain_list.children.append(item)
            # Two consecutive blank lines end the list.
            if cursor >= 2 and not self.lines[cursor - 1].strip() and not self.lines[cursor - 2].strip():
                break
        return [plain_list], cursor

    def _list_item(
        self, match: re.Match[str], index: int, indent: int, list_type: str
    ) -> tuple[ListItem, int]:
        item = ListItem(bullet=match.group("bullet"))
        rest = match.group("rest") or ""

        checkbox = _CHECKBOX_RE.match(rest)
        if checkbox:
            item.checkbox = _CHECKBOX_STATES[checkbox.group(1)]
            rest = rest[checkbox.end() :]

        if list_type == "descriptive":
            description = _DESCRIPTION_RE.match(rest)
            if description:
                item.children.append(ListItemTag(children=parse_inline(description.group(1).strip())))
                rest = description.group(2) or ""

        continuation: list[str] = []
        blank_run = 0
        cursor = index + 1
        while cursor < len(self.lines):
            line = self.lines[cursor]
            if not line.strip():
                blank_run += 1
                cursor += 1
                if blank_run >= 2:
                    break
                continue
            if _indent_width(line[: len(line) - len(line.lstrip())]) <= indent:
                break
            continuation.extend([""] * blank_run)
            blank_run = 0
            continuation.append(line)
            cursor += 1

        body = [rest] if rest.strip() else []
        if continuation:
            body.extend(textwrap.dedent("\n".join(continuation)).split("\n"))
        item.children.extend(_parse_elements(body))
        return item, cursor

    def _paragraph(self, index: int) -> tuple[Paragraph, int]:
        collected = [self.lines[index].strip()]
        cursor = index + 1
        while cursor < len(self.lines):
            line = self.lines[cursor]
            if not line.strip() or self._starts_element(cursor):
                break
            collected.append(line.strip())
            cursor += 1
        return Paragraph(children=parse_inline("\n".join(collected))), cursor

    def _starts_element(self, index: int) -> bool:
        line = self.lines[index]
        return any(
            pattern.match(line)
            for pattern in (
                _BLOCK_BEGIN_RE,
                _LATEX_BEGIN_RE,
                _DRAWER_BEGIN_RE,
                _CLOCK_RE,
                _KEYWORD_RE,
                _TABLE_RE,
                _HR_RE,
                _LIST_ITEM_RE,
            )
        )


def _indent_width(indent: str) -> int:
    return len(indent.expandtabs(8))


def parse_inline(text: str) -> list[OrgNode]:
    """Parse inline markup into text and object nodes."""
    nodes: list[OrgNode] = []
    buffer: list[str] = []
    index = 0
    length = len(text)

    def flush() -> None:
        if buffer:
            nodes.append(Text(value="".join(buffer)))
            buffer.clear()

    while index < length:
        char = text[index]
        match: InlineMatch | None = None
        if char == "[":
            match = _match_link(text, index) or _match_cookie(text, index)
        elif char == "$":
            match = _match_dollar_math(text, index)
        elif char == "\\":
            match = _match_latex_delimited(text, index) or _match_line_break(text, index)
        elif char == "@":
            match = _match_export_snippet(text, index)
        elif char == "h":
            match = _match_plain_url(text, index)

        if match is None and (char in _EMPHASIS_TYPES or char in _VERBATIM_TYPES):
            match = _match_emphasis(text, index)
        if match is None and char in "_^":
            match = _match_script(text, index)

        if match is None:
            buffer.append(char)
            index += 1
            continue
        flush()
        node, index = match
        nodes.append(node)

    flush()
    return nodes


def _match_link(text: str, index: int) -> InlineMatch | None:
    match = _LINK_RE.match(text, index)
    if not match:
        return None
    raw_link, description = match.group(1), match.group(2)
    scheme = _LINK_SCHEME_RE.match(raw_link)
    if scheme:
        link_type = scheme.group(1)
        path = raw_link[scheme.end() :] if link_type == "file" else raw_link
    elif raw_link.startswith(("./", "../", "/", "~/")):
        link_type, path = "file", raw_link
    else:
        link_type, path = "fuzzy", raw_link
    children = parse_inline(description) if description else []
    return Link(link_type=link_type, path=path, raw_link=raw_link, children=children), match.end()


def _match_cookie(text: str, index: int) -> InlineMatch | None:
    match = _COOKIE_RE.match(text, index)
    if not match:
        return None
    return StatisticsCookie(value=match.group(0)), match.end()


def _match_dollar_math(text: str, index: int) -> InlineMatch | None:
    display = _DISPLAY_DOLLAR_RE.match(text, index)
    if display:
        return LatexFragment(value=display.group(0), contents=display.group(1)), display.end()
    if index > 0 and text[index - 1] == "$":
        return None
    inline = _INLINE_DOLLAR_RE.match(text, index)
    if inline:
        return LatexFragment(value=inline.group(0), contents=inline.group(1)), inline.end()
    return None


def _match_latex_delimited(text: str, index: int) -> InlineMatch | None:
    for pattern in (_LATEX_PAREN_RE, _LATEX_BRACKET_RE):
        match = pattern.match(text, index)
        if match:
            return LatexFragment(value=match.group(0), contents=match.group(1)), match.end()
    return None


def _match_line_break(text: str, index: int) -> InlineMatch | None:
    match = _LINE_BREAK_RE.match(text, index)
    if not match:
        return None
    return LineBreak(), match.end()


def _match_export_snippet(text: str, index: int) -> InlineMatch | None:
    match = _EXPORT_SNIPPET_RE.match(text, index)
    if not match:
        return None
    return ExportSnippet(backend=match.group(1), value=match.group(2)), match.end()


def _match_plain_url(text: str, index: int) -> InlineMatch | None:
    if index > 0 and (text[index - 1].isalnum() or text[index - 1] == "_"):
        return None
    match = _PLAIN_URL_RE.match(text, index)
    if not match:
        return None
    url = match.group(0).rstrip(_URL_TRAILING_PUNCT)
    scheme = url.split(":", 1)[0]
    return Link(link_type=scheme, path=url, raw_link=url), index + len(url)


def _match_emphasis(text: str, index: int) -> InlineMatch | None:
    marker = text[index]
    if index > 0 and text[index - 1] not in _PRE_CHARS:
        return None
    if index + 1 >= len(text) or text[index + 1].isspace():
        return None

    for end in range(index + 2, len(text)):
        if text[end] != marker or text[end - 1].isspace():
            continue
        if end + 1 < len(text) and text[end + 1] not in _POST_CHARS:
            continue
        contents = text[index + 1 : end]
        if marker in _VERBATIM_TYPES:
            return _VERBATIM_TYPES[marker](value=contents), end + 1
        return _EMPHASIS_TYPES[marker](children=parse_inline(contents)), end + 1
    return None


def _match_script(text: str, index: int) -> InlineMatch | None:
    """Match ``_`` / ``^`` scripts under a deliberately narrow policy.

    Braced scripts (``x_{i}``, ``x^{2}``) always apply. Unbraced scripts only
    apply to a lone single-character base followed by digits or one letter
    (``x_1``, ``e^x``), so identifiers such as ``snake_case`` or
    ``my_file.org`` stay literal.
    """
    if index == 0 or not text[index - 1].isalnum():
        return None
    node_type = Subscript if text[index] == "_" else Superscript

    if index + 1 < len(text) and text[index + 1] == "{":
        depth = 0
        for end in range(index + 1, len(text)):
            if text[end] == "{":
                depth += 1
            elif text[end] == "}":
                depth -= 1
                if depth == 0:
                    return node_type(children=parse_inline(text[index + 2 : end])), end + 1
        return None

    base_start = index - 1
    while base_start > 0 and (text[base_start - 1].isalnum() or text[base_start - 1] == "_"):
        base_start -= 1
    if index - base_start != 1:
        return None

    script = _UNBRACED_SCRIPT_RE.match(text, index + 1)
    if not script:
        return None
    end = script.end()
    if end < len(text):
        following = text[end]
        if following.isalnum() or following in "_^":
            return None
        if following == "." and end + 1 < len(text) and text[end + 1].isalnum():
            return None
    return node_type(children=[Text(value=script.group(0))]), end
