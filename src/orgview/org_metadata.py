"""Syntax tree passes that keep Org metadata visible in the rendered output.

The render converter drops or mishandles planning lines, property drawers,
clocks, named drawers, document keywords, checkboxes and display math. These
passes rewrite those nodes into plain paragraphs and math nodes that convert
cleanly:

- ``normalize_metadata``: replace-then-recurse rewrite of metadata nodes.
- ``inject_checkboxes``: prefix checkbox glyphs onto list items.
"""

from __future__ import annotations

from orgview.schemas.org_nodes import (
    Bold,
    Clock,
    Code,
    Drawer,
    Keyword,
    LatexEnvironment,
    LatexFragment,
    LineBreak,
    ListItem,
    ListItemTag,
    NodeProperty,
    OrgNode,
    Paragraph,
    Parent,
    Planning,
    PropertyDrawer,
    Text,
)

DISPLAY_KEYWORDS = frozenset(
    {"TITLE", "AUTHOR", "DATE", "EMAIL", "DESCRIPTION", "CATEGORY", "FILETAGS", "LANGUAGE"}
)
CHECKBOX_GLYPHS = {
    "on": "☑ ",
    "off": "☐ ",
    "trans": "☒ ",  # partial
}
_BLOCK_MATH_DELIMITERS = ("$$", "\\[")


def _bold(text: str) -> Bold:
    return Bold(children=[Text(value=text)])


def _meta_block(key: str, value: str) -> Paragraph:
    return Paragraph(children=[_bold(f"{key}: "), Text(value=f"{value}\n")])


def _planning_block(fields: list[tuple[str, str]]) -> Paragraph:
    children: list[OrgNode] = []
    for position, (label, stamp) in enumerate(fields):
        if position > 0:
            children.append(Text(value="  "))
        children.append(_bold(f"{label}: "))
        children.append(Code(value=stamp))
    children.append(Text(value="\n"))
    return Paragraph(children=children)


def _property_block(properties: list[tuple[str, str]]) -> Paragraph:
    children: list[OrgNode] = [_bold("Properties"), LineBreak()]
    for key, value in properties:
        children.append(Code(value=key))
        children.append(Text(value=f": {value}"))
        children.append(LineBreak())
    return Paragraph(children=children)


def _clock_block(clock: Clock) -> Paragraph:
    children: list[OrgNode] = [
        _bold("CLOCK: "),
        Code(value=clock.value.raw_value if clock.value else ""),
    ]
    if clock.duration:
        children.append(Text(value=" => "))
        children.append(Code(value=clock.duration))
    if clock.status == "running":
        children.append(Text(value=" (running)"))
    children.append(Text(value="\n"))
    return Paragraph(children=children)


def _collect_properties(drawer: PropertyDrawer) -> list[tuple[str, str]]:
    return [
        (child.key, child.value)
        for child in drawer.children
        if isinstance(child, NodeProperty)
    ]


def _expand_drawer(drawer: Drawer) -> list[OrgNode]:
    # Drawer children are not revisited by the top-level pass once nested,
    # so clocks and property drawers are expanded here.
    result: list[OrgNode] = [Paragraph(children=[_bold(drawer.name), Text(value="\n")])]
    for child in drawer.children:
        if isinstance(child, Clock):
            result.append(_clock_block(child))
        elif isinstance(child, PropertyDrawer):
            properties = _collect_properties(child)
            if properties:
                result.append(_property_block(properties))
        else:
            result.append(child)
    return result


def rewrite_node(node: OrgNode) -> list[OrgNode]:
    """Return the replacement nodes for ``node`` (zero, one or many)."""
    if isinstance(node, Keyword):
        if node.key in DISPLAY_KEYWORDS:
            return [_meta_block(node.key, node.value)]
        return [node]

    if isinstance(node, Planning):
        fields = [
            (label, stamp.raw_value)
            for label, stamp in (
                ("SCHEDULED", node.scheduled),
                ("DEADLINE", node.deadline),
                ("CLOSED", node.closed),
            )
            if stamp is not None
        ]
        return [_planning_block(fields)] if fields else []

    if isinstance(node, PropertyDrawer):
        properties = _collect_properties(node)
        return [_property_block(properties)] if properties else []

    if isinstance(node, Drawer):
        return _expand_drawer(node)

    if isinstance(node, Clock):
        return [_clock_block(node)]

    if isinstance(node, LatexFragment):
        if node.value.startswith(_BLOCK_MATH_DELIMITERS):
            return [LatexEnvironment(value=node.contents.strip())]
        return [node]

    return [node]


def normalize_metadata(root: OrgNode) -> None:
    """Rewrite metadata nodes in place, depth first.

    Each level is rewritten before recursing into the rewritten children, so
    nodes produced by a rule are walked for structure but never matched
    against the same rule at their own level again.
    """
    if not isinstance(root, Parent):
        return
    pending: list[Parent] = [root]
    while pending:
        parent = pending.pop()
        rewritten: list[OrgNode] = []
        for child in parent.children:
            rewritten.extend(rewrite_node(child))
        parent.children = rewritten
        pending.extend(
            child for child in reversed(rewritten) if isinstance(child, Parent)
        )


def inject_checkboxes(root: OrgNode) -> None:
    """Insert one checkbox glyph at the start of every checkboxed list item."""
    pending: list[OrgNode] = [root]
    while pending:
        node = pending.pop()
        if isinstance(node, ListItem) and node.checkbox in CHECKBOX_GLYPHS:
            _prepend_glyph(node, CHECKBOX_GLYPHS[node.checkbox])
        if isinstance(node, Parent):
            pending.extend(reversed(node.children))


def _prepend_glyph(item: ListItem, glyph: str) -> None:
    first = item.children[0] if item.children else None
    if isinstance(first, (Paragraph, ListItemTag)) and first.children:
        first.children.insert(0, Text(value=glyph))
    else:
        item.children.insert(0, Paragraph(children=[Text(value=glyph)]))
