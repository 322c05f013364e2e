"""Workspace inventory of Org documentation files."""

from __future__ import annotations

import fnmatch
import os
import re
from pathlib import Path
from typing import Callable

from orgview.config import ORGVIEW_DOC_SCAN_LIMIT
from orgview.exceptions import WorkspaceError
from orgview.page import count_tokens
from orgview.schemas.messages import DocFileEntry, DocLayer
from orgview.utils.logging_config import get_logger

logger = get_logger(__name__)

EXCLUDED_DIRS = frozenset({"node_modules", ".git", "dist", "out", ".vscode-test"})
QUICK_REFERENCE_NAME = "quick_reference.org"
_ALL_CAPS_NAME_RE = re.compile(r"^[A-Z][A-Z_]*\.org$")
_LAYER_ORDER: dict[str, int] = {"strategic": 0, "quickref": 1, "other": 2}


def classify_layer(relative_path: str) -> DocLayer:
    """Assign a doc-map layer from a ``/``-separated relative path.

    ``quick_reference.org`` anywhere is quickref. Files at the workspace root,
    and ALL_CAPS files one directory deep, are strategic. Everything else is
    other.
    """
    parts = relative_path.split("/")
    name = parts[-1]
    if name == QUICK_REFERENCE_NAME:
        return "quickref"
    if len(parts) == 1:
        return "strategic"
    if len(parts) == 2 and _ALL_CAPS_NAME_RE.match(name):
        return "strategic"
    return "other"


def iter_workspace_files(root: Path, pattern: str = "*.org"):
    """Yield files under ``root`` matching ``pattern``, skipping excluded dirs."""
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(name for name in dirnames if name not in EXCLUDED_DIRS)
        for filename in sorted(filenames):
            if fnmatch.fnmatch(filename, pattern):
                yield Path(dirpath) / filename


def discover_doc_files(
    root: Path,
    *,
    limit: int = ORGVIEW_DOC_SCAN_LIMIT,
    token_counter: Callable[[str], int | None] = count_tokens,
) -> list[DocFileEntry]:
    """Scan ``root`` for ``*.org`` files and build sorted doc-map entries."""
    root = Path(root)
    if not root.is_dir():
        raise WorkspaceError(f"Workspace root is not a directory: {root}")

    entries: list[DocFileEntry] = []
    for path in iter_workspace_files(root):
        if len(entries) >= limit:
            logger.info("Doc scan limit reached", extra={"limit": limit})
            break
        relative = path.relative_to(root).as_posix()
        directory = path.parent.relative_to(root).as_posix()
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.warning("Could not read doc file", extra={"path": relative, "error": str(exc)})
            content = None
        entries.append(
            DocFileEntry(
                name=path.name,
                path=relative,
                layer=classify_layer(relative),
                dir="" if directory == "." else directory,
                tokens=token_counter(content) if content is not None else None,
            )
        )

    entries.sort(key=lambda entry: (_LAYER_ORDER[entry.layer], entry.path))
    return entries


def resolve_workspace_path(root: Path, relative: str) -> Path:
    """Resolve ``relative`` against ``root``; reject paths escaping it."""
    base = Path(root).resolve()
    candidate = (base / relative).resolve()
    if not candidate.is_relative_to(base):
        raise WorkspaceError(f"Path escapes workspace: {relative!r}")
    return candidate


def find_workspace_file(root: Path, relative: str) -> Path | None:
    """Locate ``relative`` directly under ``root`` or as a suffix anywhere below it."""
    direct = resolve_workspace_path(root, relative)
    if direct.is_file():
        return direct
    suffix = "/" + relative.removeprefix("./")
    for path in iter_workspace_files(Path(root), pattern=Path(relative).name):
        if ("/" + path.relative_to(root).as_posix()).endswith(suffix):
            return path
    return None
