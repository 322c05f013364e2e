"""Remove render tree nodes the serializer cannot handle."""

from __future__ import annotations

from collections import deque

from orgview.render_tree import (
    KNOWN_RENDER_TYPES,
    Element,
    ForeignNode,
    RenderNode,
    Root,
    TextNode,
    node_type,
)


def _child_list(node: RenderNode) -> list[RenderNode] | None:
    if isinstance(node, (Root, Element)):
        return node.children
    if isinstance(node, ForeignNode):
        return node.children
    return None


def clean_unknown_nodes(tree: RenderNode) -> RenderNode:
    """Replace unknown nodes throughout ``tree`` in place.

    For each child of an unknown kind: a string ``value`` becomes a plain text
    node, otherwise its children are spliced into its place (and cleaned in
    turn), otherwise it is dropped.
    """
    pending: list[RenderNode] = [tree]
    while pending:
        parent = pending.pop()
        children = _child_list(parent)
        if children is None:
            continue

        cleaned: list[RenderNode] = []
        queue: deque[RenderNode] = deque(children)
        while queue:
            child = queue.popleft()
            if node_type(child) in KNOWN_RENDER_TYPES:
                cleaned.append(child)
                pending.append(child)
                continue
            value = getattr(child, "value", None)
            if isinstance(value, str):
                cleaned.append(TextNode(value=value))
                continue
            spliced = _child_list(child)
            if spliced:
                queue.extendleft(reversed(spliced))

        children[:] = cleaned
    return tree
