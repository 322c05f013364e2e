"""Detect file paths in prose and turn them into styled references.

Org documents become clickable links that ask the host to open them; every
other recognised extension is wrapped in a span styled by its kind.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from bs4.element import NavigableString, Tag

from orgview.enhancer.view import DocumentView, Event, has_class
from orgview.schemas.messages import OpenFileRequest


class FileKind(str, Enum):
    DOC_LINK = "doc-link"
    DOC_OTHER = "doc-other"
    CODE = "code"
    CONFIG = "config"
    GENERIC = "generic"


_EXTENSIONS_BY_KIND: dict[FileKind, tuple[str, ...]] = {
    FileKind.DOC_LINK: ("org",),
    FileKind.DOC_OTHER: ("md", "markdown", "txt", "rst", "adoc", "pdf"),
    FileKind.CODE: (
        "py", "ts", "tsx", "js", "jsx", "mjs", "cjs", "go", "rs", "java", "kt", "c", "h",
        "cpp", "hpp", "cs", "rb", "php", "swift", "scala", "sh", "bash", "el", "lua", "sql",
    ),
    FileKind.CONFIG: ("json", "yaml", "yml", "toml", "ini", "cfg", "conf", "env", "lock", "xml"),
    FileKind.GENERIC: ("log", "csv", "tsv", "html", "css", "svg", "png", "jpg", "jpeg", "gif", "zip"),
}


def _build_classification() -> Mapping[str, FileKind]:
    table: dict[str, FileKind] = {}
    for kind, extensions in _EXTENSIONS_BY_KIND.items():
        for extension in extensions:
            table[extension] = kind
    return MappingProxyType(table)


FILE_CLASSIFICATION: Mapping[str, FileKind] = _build_classification()

_EXTENSION_PATTERN = "|".join(sorted((re.escape(ext) for ext in FILE_CLASSIFICATION), key=len, reverse=True))
FILE_REF_RE = re.compile(
    rf"(?<![\w/.\-@:])((?:[\w.\-]+/)*[\w\-][\w.\-]*\.({_EXTENSION_PATTERN}))(?::(\d+))?(?![\w/\-])",
    re.IGNORECASE,
)

_SKIP_TAGS = frozenset({"a", "code", "pre", "script", "style", "nav", "title"})
_SKIP_CLASSES = ("file-ref", "math", "section-toggle")


@dataclass(frozen=True)
class FileReference:
    text: str
    path: str
    extension: str
    kind: FileKind
    line: int | None = None


def classify_extension(extension: str) -> FileKind | None:
    return FILE_CLASSIFICATION.get(extension.lower())


def find_file_references(text: str) -> list[tuple[int, int, FileReference]]:
    """Return ``(start, end, reference)`` for every file path in ``text``."""
    found: list[tuple[int, int, FileReference]] = []
    for match in FILE_REF_RE.finditer(text):
        extension = match.group(2).lower()
        kind = classify_extension(extension)
        if kind is None:
            continue
        line = int(match.group(3)) if match.group(3) else None
        reference = FileReference(
            text=match.group(0), path=match.group(1), extension=extension, kind=kind, line=line
        )
        found.append((match.start(), match.end(), reference))
    return found


def linkify_file_references(view: DocumentView) -> list[FileReference]:
    """Replace file paths in the article's prose with reference elements."""
    article = view.article
    if article is None:
        return []

    references: list[FileReference] = []
    for node in list(article.find_all(string=True)):
        if type(node) is not NavigableString or _is_excluded(node):
            continue
        text = str(node)
        matches = find_file_references(text)
        if not matches:
            continue

        pieces: list[NavigableString | Tag] = []
        cursor = 0
        for start, end, reference in matches:
            if start > cursor:
                pieces.append(NavigableString(text[cursor:start]))
            pieces.append(_reference_element(view, reference))
            references.append(reference)
            cursor = end
        if cursor < len(text):
            pieces.append(NavigableString(text[cursor:]))
        node.replace_with(*pieces)

    return references


def _is_excluded(node: NavigableString) -> bool:
    parent = node.parent
    while parent is not None:
        if parent.name in _SKIP_TAGS:
            return True
        if any(has_class(parent, name) for name in _SKIP_CLASSES):
            return True
        parent = parent.parent
    return False


def _reference_element(view: DocumentView, reference: FileReference) -> Tag:
    attrs = {"data_path": reference.path, "title": reference.path}
    if reference.line is not None:
        attrs["data_line"] = str(reference.line)

    if reference.kind is FileKind.DOC_LINK:
        element = view.new_tag(
            "a", classes=["file-ref", f"file-ref-{reference.kind.value}"], text=reference.text, href="#", **attrs
        )
        view.add_event_listener(element, "click", _make_open_handler(view, reference.path))
        return element

    return view.new_tag(
        "span", classes=["file-ref", f"file-ref-{reference.kind.value}"], text=reference.text, **attrs
    )


def _make_open_handler(view: DocumentView, path: str):
    def on_click(event: Event) -> None:
        event.prevent_default()
        view.post(OpenFileRequest(path=path))

    return on_click
