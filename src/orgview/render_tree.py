"""Render tree models and the HTML serializer.

The render tree sits between the Org syntax tree and the final markup. The
serializer only understands a closed set of kinds (root, element, text,
comment, doctype, raw); anything else reaching it is a programming error
upstream and raises :class:`SerializationError`.
"""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from orgview.exceptions import SerializationError

KNOWN_RENDER_TYPES = frozenset({"root", "element", "text", "comment", "doctype", "raw"})

VOID_ELEMENTS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"}
)

PropertyValue = Union[str, list[str], bool, None]


@dataclass
class RenderNode:
    type: ClassVar[str] = "node"


@dataclass
class Root(RenderNode):
    type: ClassVar[str] = "root"

    children: list[RenderNode] = field(default_factory=list)


@dataclass
class Element(RenderNode):
    type: ClassVar[str] = "element"

    tag_name: str = "div"
    properties: dict[str, PropertyValue] = field(default_factory=dict)
    children: list[RenderNode] = field(default_factory=list)


@dataclass
class TextNode(RenderNode):
    type: ClassVar[str] = "text"

    value: str = ""


@dataclass
class Comment(RenderNode):
    type: ClassVar[str] = "comment"

    value: str = ""


@dataclass
class Doctype(RenderNode):
    type: ClassVar[str] = "doctype"


@dataclass
class Raw(RenderNode):
    """Markup emitted verbatim (export blocks, export snippets)."""

    type: ClassVar[str] = "raw"

    value: str = ""


@dataclass
class ForeignNode(RenderNode):
    """A node of a kind the serializer does not know.

    The converter emits these for syntax nodes it has no rule for; the
    sanitizer must remove them before serialization.
    """

    kind: str = "unknown"
    value: Any = None
    children: list[RenderNode] | None = None


def node_type(node: RenderNode) -> str:
    """Return the kind name of a render node."""
    if isinstance(node, ForeignNode):
        return node.kind
    return node.type


def h(tag_name: str, properties: dict[str, PropertyValue] | None = None, *children: RenderNode) -> Element:
    """Build an element node."""
    return Element(tag_name=tag_name, properties=dict(properties or {}), children=list(children))


def escape_text(text: str) -> str:
    return html.escape(text, quote=False)


def escape_attribute(text: str) -> str:
    return html.escape(text, quote=True)


def serialize(node: RenderNode) -> str:
    """Serialize a render tree to an HTML string."""
    parts: list[str] = []
    _serialize_into(node, parts)
    return "".join(parts)


def _serialize_into(node: RenderNode, parts: list[str]) -> None:
    if isinstance(node, Root):
        for child in node.children:
            _serialize_into(child, parts)
    elif isinstance(node, Element):
        parts.append(f"<{node.tag_name}{_serialize_properties(node.properties)}>")
        if node.tag_name in VOID_ELEMENTS:
            return
        for child in node.children:
            _serialize_into(child, parts)
        parts.append(f"</{node.tag_name}>")
    elif isinstance(node, TextNode):
        parts.append(escape_text(node.value))
    elif isinstance(node, Comment):
        parts.append(f"<!--{node.value}-->")
    elif isinstance(node, Doctype):
        parts.append("<!doctype html>")
    elif isinstance(node, Raw):
        parts.append(node.value)
    else:
        raise SerializationError(f"Cannot serialize unknown node '{node_type(node)}'")


def _serialize_properties(properties: dict[str, PropertyValue]) -> str:
    rendered: list[str] = []
    for name, value in properties.items():
        if value is None or value is False:
            continue
        if value is True:
            rendered.append(f" {name}")
            continue
        if isinstance(value, list):
            value = " ".join(value)
        rendered.append(f' {name}="{escape_attribute(value)}"')
    return "".join(rendered)
