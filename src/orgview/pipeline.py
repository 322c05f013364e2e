"""Render pipeline: document text -> HTML fragment.

Org text goes through parse -> metadata normalizer -> checkbox injector ->
render conversion -> unknown-node sanitizer -> serializer. Failures anywhere in
those stages are caught once here and turned into a visible error fragment.
"""

from __future__ import annotations

from orgview.md_parser import render_markdown
from orgview.org_metadata import inject_checkboxes, normalize_metadata
from orgview.org_parser import parse_org
from orgview.org_render import org_to_render_tree
from orgview.render_tree import escape_text, serialize
from orgview.sanitize import clean_unknown_nodes
from orgview.utils.logging_config import get_logger

logger = get_logger(__name__)

SUPPORTED_LANGUAGES = frozenset({"org", "markdown"})


def render_org(text: str) -> str:
    """Run the Org pipeline without error handling."""
    tree = parse_org(text)
    normalize_metadata(tree)
    inject_checkboxes(tree)
    render_tree = org_to_render_tree(tree)
    clean_unknown_nodes(render_tree)
    return serialize(render_tree)


def org_to_html(text: str) -> str:
    """Parse Org text and return an HTML string (never raises)."""
    try:
        return render_org(text)
    except Exception as exc:  # noqa: BLE001 - pipeline boundary
        logger.warning("Org render failed", extra={"error": str(exc)})
        return error_fragment("org-error", "Org Preview Error", str(exc))


def md_to_html(text: str) -> str:
    """Parse Markdown text and return an HTML string (never raises)."""
    try:
        return render_markdown(text)
    except Exception as exc:  # noqa: BLE001 - pipeline boundary
        logger.warning("Markdown render failed", extra={"error": str(exc)})
        return error_fragment("parse-error", "Markdown Preview Error", str(exc))


def parse_to_html(text: str, language_id: str) -> str:
    """Dispatch ``text`` to the renderer for ``language_id``."""
    if language_id == "org":
        return org_to_html(text)
    if language_id == "markdown":
        return md_to_html(text)
    return (
        '<div class="parse-error">'
        f"<h3>Unsupported format: {escape_text(language_id)}</h3>"
        "</div>"
    )


def error_fragment(css_class: str, title: str, message: str) -> str:
    return (
        f'<div class="{css_class}">\n'
        f"  <h3>{title}</h3>\n"
        f"  <pre>{escape_text(message)}</pre>\n"
        "</div>"
    )
