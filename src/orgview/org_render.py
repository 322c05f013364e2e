"""Convert an Org syntax tree into a render tree."""

from __future__ import annotations

from orgview.render_tree import (
    Element,
    ForeignNode,
    Raw,
    RenderNode,
    Root,
    TextNode,
    h,
)
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
    Parent,
    Planning,
    PlainList,
    PropertyDrawer,
    QuoteBlock,
    Section,
    SrcBlock,
    StrikeThrough,
    Subscript,
    Superscript,
    Table,
    TableRow,
    Text,
    Underline,
    Verbatim,
)

_INLINE_WRAPPERS: dict[type[Parent], tuple[str, list[str]]] = {
    Bold: ("strong", []),
    Italic: ("em", []),
    Underline: ("span", ["underline"]),
    StrikeThrough: ("del", []),
    Subscript: ("sub", []),
    Superscript: ("sup", []),
    Paragraph: ("p", []),
    QuoteBlock: ("blockquote", []),
}
_LIST_TAGS = {"ordered": "ol", "unordered": "ul", "descriptive": "dl"}
_CHECKBOX_CLASSES = {"on": "checkbox-on", "off": "checkbox-off", "trans": "checkbox-trans"}


def org_to_render_tree(root: OrgData) -> Root:
    """Convert an ``org-data`` node into a render ``root``."""
    return Root(children=_convert_children(root))


def _convert_children(node: Parent) -> list[RenderNode]:
    converted: list[RenderNode] = []
    for child in node.children:
        converted.extend(_convert(child))
    return converted


def _convert(node: OrgNode) -> list[RenderNode]:
    if isinstance(node, Section):
        return _convert_children(node)

    if isinstance(node, Headline):
        return [_convert_headline(node)]

    if isinstance(node, Text):
        return [TextNode(value=node.value)]

    wrapper = _INLINE_WRAPPERS.get(type(node))
    if wrapper is not None and isinstance(node, Parent):
        tag_name, classes = wrapper
        properties = {"class": classes} if classes else {}
        return [h(tag_name, properties, *_convert_children(node))]

    if isinstance(node, PlainList):
        return [_convert_list(node)]

    if isinstance(node, ListItem):
        return [_convert_list_item(node)]

    if isinstance(node, ListItemTag):
        return [h("span", {"class": ["list-item-tag"]}, *_convert_children(node))]

    if isinstance(node, Table):
        return [_convert_table(node)]

    if isinstance(node, Code):
        return [h("code", None, TextNode(value=node.value))]

    if isinstance(node, Verbatim):
        return [h("code", {"class": ["verbatim"]}, TextNode(value=node.value))]

    if isinstance(node, Link):
        return [_convert_link(node)]

    if isinstance(node, LineBreak):
        return [h("br")]

    if isinstance(node, LatexFragment):
        return [h("span", {"class": ["math", "math-inline"]}, TextNode(value=node.contents))]

    if isinstance(node, LatexEnvironment):
        return [h("div", {"class": ["math", "math-display"]}, TextNode(value=node.value))]

    if isinstance(node, SrcBlock):
        code_properties = {"class": [f"language-{node.language}"]} if node.language else {}
        return [
            h(
                "pre",
                {"class": ["src-block"]},
                h("code", code_properties, TextNode(value=node.value)),
            )
        ]

    if isinstance(node, ExampleBlock):
        return [h("pre", {"class": ["example"]}, TextNode(value=node.value))]

    if isinstance(node, FixedWidth):
        return [h("pre", {"class": ["fixed-width"]}, TextNode(value=node.value))]

    if isinstance(node, HorizontalRule):
        return [h("hr")]

    if isinstance(node, ExportBlock):
        return [Raw(value=node.value)] if node.backend == "html" else []

    if isinstance(node, ExportSnippet) and node.backend == "html":
        return [Raw(value=node.value)]

    if isinstance(node, (Keyword, Planning, PropertyDrawer, NodeProperty, Drawer, Clock)):
        # No render rule: metadata must be rewritten before conversion.
        return []

    children = _convert_children(node) if isinstance(node, Parent) else None
    return [ForeignNode(kind=node.type, value=getattr(node, "value", None), children=children)]


def _convert_headline(node: Headline) -> Element:
    children: list[RenderNode] = []
    if node.todo_keyword:
        children.append(
            h("span", {"class": ["todo-keyword", node.todo_keyword.lower()]}, TextNode(value=node.todo_keyword))
        )
        children.append(TextNode(value=" "))
    if node.priority:
        children.append(h("span", {"class": ["priority"]}, TextNode(value=f"[#{node.priority}]")))
        children.append(TextNode(value=" "))
    children.extend(_convert_children(node))
    if node.tags:
        tags = [h("span", {"class": ["tag"]}, TextNode(value=tag)) for tag in node.tags]
        children.append(TextNode(value=" "))
        children.append(h("span", {"class": ["tags"]}, *tags))
    return h(f"h{min(node.level, 6)}", None, *children)


def _convert_list(node: PlainList) -> Element:
    tag_name = _LIST_TAGS[node.list_type]
    if node.list_type != "descriptive":
        return h(tag_name, None, *_convert_children(node))

    entries: list[RenderNode] = []
    for item in node.children:
        if not isinstance(item, ListItem):
            entries.extend(_convert(item))
            continue
        body = list(item.children)
        if body and isinstance(body[0], ListItemTag):
            term = body.pop(0)
            entries.append(h("dt", None, *_convert_children(term)))
        description: list[RenderNode] = []
        for child in body:
            description.extend(_convert(child))
        entries.append(h("dd", None, *description))
    return h(tag_name, None, *entries)


def _convert_list_item(node: ListItem) -> Element:
    properties = {"class": ["checkbox", _CHECKBOX_CLASSES[node.checkbox]]} if node.checkbox else {}
    return h("li", properties, *_convert_children(node))


def _convert_table(node: Table) -> Element:
    rows = [row for row in node.children if isinstance(row, TableRow)]
    first_rule = next((index for index, row in enumerate(rows) if row.row_type == "rule"), None)
    has_header = first_rule is not None and any(row.row_type == "standard" for row in rows[:first_rule])

    head: list[RenderNode] = []
    body: list[RenderNode] = []
    for index, row in enumerate(rows):
        if row.row_type == "rule":
            continue
        in_header = has_header and index < first_rule
        cell_tag = "th" if in_header else "td"
        cells = [h(cell_tag, None, *_convert_children(cell)) for cell in row.children if isinstance(cell, Parent)]
        (head if in_header else body).append(h("tr", None, *cells))

    sections: list[RenderNode] = []
    if head:
        sections.append(h("thead", None, *head))
    if body:
        sections.append(h("tbody", None, *body))
    return h("table", None, *sections)


def _convert_link(node: Link) -> Element:
    if node.link_type == "fuzzy":
        href = f"#{node.path}"
    elif node.link_type == "file":
        href = node.path
    else:
        href = node.raw_link
    children = _convert_children(node) or [TextNode(value=node.raw_link)]
    return h("a", {"href": href}, *children)
