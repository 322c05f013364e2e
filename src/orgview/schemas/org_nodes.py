"""Org syntax tree models.

The tree is a closed set of dataclasses, one per node kind. Every class
carries its kind name in the ``type`` class attribute; containers derive from
:class:`Parent` and hold their children in document order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Literal, Union

Checkbox = Literal["on", "off", "trans"]
ListType = Literal["ordered", "unordered", "descriptive"]
RowType = Literal["standard", "rule"]
ClockStatus = Literal["running", "closed"]


@dataclass
class OrgNode:
    """Base class for every syntax tree node."""

    type: ClassVar[str] = "node"


@dataclass
class Parent(OrgNode):
    """A node that owns child nodes."""

    children: list[OrgNode] = field(default_factory=list)


@dataclass
class Timestamp:
    """An Org timestamp or range, kept verbatim (e.g. ``<2024-01-02 Tue>``)."""

    raw_value: str


@dataclass
class OrgData(Parent):
    type: ClassVar[str] = "org-data"


@dataclass
class Section(Parent):
    type: ClassVar[str] = "section"


@dataclass
class Headline(Parent):
    type: ClassVar[str] = "headline"

    level: int = 1
    todo_keyword: str | None = None
    priority: str | None = None
    tags: list[str] = field(default_factory=list)


@dataclass
class Paragraph(Parent):
    type: ClassVar[str] = "paragraph"


@dataclass
class PlainList(Parent):
    type: ClassVar[str] = "plain-list"

    list_type: ListType = "unordered"


@dataclass
class ListItem(Parent):
    type: ClassVar[str] = "list-item"

    bullet: str = "-"
    checkbox: Checkbox | None = None


@dataclass
class ListItemTag(Parent):
    """Term of a descriptive list item (``- term :: description``)."""

    type: ClassVar[str] = "list-item-tag"


@dataclass
class QuoteBlock(Parent):
    type: ClassVar[str] = "quote-block"


@dataclass
class Table(Parent):
    type: ClassVar[str] = "table"


@dataclass
class TableRow(Parent):
    type: ClassVar[str] = "table-row"

    row_type: RowType = "standard"


@dataclass
class TableCell(Parent):
    type: ClassVar[str] = "table-cell"


@dataclass
class Keyword(OrgNode):
    type: ClassVar[str] = "keyword"

    key: str = ""
    value: str = ""


@dataclass
class Planning(OrgNode):
    type: ClassVar[str] = "planning"

    scheduled: Timestamp | None = None
    deadline: Timestamp | None = None
    closed: Timestamp | None = None


@dataclass
class PropertyDrawer(Parent):
    type: ClassVar[str] = "property-drawer"


@dataclass
class NodeProperty(OrgNode):
    type: ClassVar[str] = "node-property"

    key: str = ""
    value: str = ""


@dataclass
class Drawer(Parent):
    type: ClassVar[str] = "drawer"

    name: str = ""


@dataclass
class Clock(OrgNode):
    type: ClassVar[str] = "clock"

    value: Timestamp | None = None
    duration: str = ""
    status: ClockStatus = "closed"


@dataclass
class SrcBlock(OrgNode):
    type: ClassVar[str] = "src-block"

    language: str = ""
    value: str = ""


@dataclass
class ExampleBlock(OrgNode):
    type: ClassVar[str] = "example-block"

    value: str = ""


@dataclass
class ExportBlock(OrgNode):
    type: ClassVar[str] = "export-block"

    backend: str = ""
    value: str = ""


@dataclass
class FixedWidth(OrgNode):
    type: ClassVar[str] = "fixed-width"

    value: str = ""


@dataclass
class HorizontalRule(OrgNode):
    type: ClassVar[str] = "horizontal-rule"


@dataclass
class LatexEnvironment(OrgNode):
    """Display math; ``value`` holds the body without delimiters."""

    type: ClassVar[str] = "latex-environment"

    value: str = ""


@dataclass
class Text(OrgNode):
    type: ClassVar[str] = "text"

    value: str = ""


@dataclass
class Bold(Parent):
    type: ClassVar[str] = "bold"


@dataclass
class Italic(Parent):
    type: ClassVar[str] = "italic"


@dataclass
class Underline(Parent):
    type: ClassVar[str] = "underline"


@dataclass
class StrikeThrough(Parent):
    type: ClassVar[str] = "strike-through"


@dataclass
class Code(OrgNode):
    type: ClassVar[str] = "code"

    value: str = ""


@dataclass
class Verbatim(OrgNode):
    type: ClassVar[str] = "verbatim"

    value: str = ""


@dataclass
class Link(Parent):
    type: ClassVar[str] = "link"

    link_type: str = "fuzzy"
    path: str = ""
    raw_link: str = ""


@dataclass
class LineBreak(OrgNode):
    type: ClassVar[str] = "line-break"


@dataclass
class Subscript(Parent):
    type: ClassVar[str] = "subscript"


@dataclass
class Superscript(Parent):
    type: ClassVar[str] = "superscript"


@dataclass
class LatexFragment(OrgNode):
    """Math fragment; ``value`` keeps delimiters, ``contents`` strips them."""

    type: ClassVar[str] = "latex-fragment"

    value: str = ""
    contents: str = ""


@dataclass
class StatisticsCookie(OrgNode):
    type: ClassVar[str] = "statistics-cookie"

    value: str = ""


@dataclass
class ExportSnippet(OrgNode):
    type: ClassVar[str] = "export-snippet"

    backend: str = ""
    value: str = ""


AnyOrgNode = Union[
    OrgData,
    Section,
    Headline,
    Paragraph,
    PlainList,
    ListItem,
    ListItemTag,
    QuoteBlock,
    Table,
    TableRow,
    TableCell,
    Keyword,
    Planning,
    PropertyDrawer,
    NodeProperty,
    Drawer,
    Clock,
    SrcBlock,
    ExampleBlock,
    ExportBlock,
    FixedWidth,
    HorizontalRule,
    LatexEnvironment,
    Text,
    Bold,
    Italic,
    Underline,
    StrikeThrough,
    Code,
    Verbatim,
    Link,
    LineBreak,
    Subscript,
    Superscript,
    LatexFragment,
    StatisticsCookie,
    ExportSnippet,
]
