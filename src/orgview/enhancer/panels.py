"""Toolbar, doc-map panel, template panel and copy feedback."""

from __future__ import annotations

from bs4 import BeautifulSoup
from bs4.element import Tag
from pydantic import BaseModel

from orgview.enhancer.view import DocumentView, Event, add_class
from orgview.schemas.messages import (
    ClipboardCopiedResponse,
    CopyToClipboardRequest,
    DocFileEntry,
    DocFileMapResponse,
    GetTemplateRequest,
    OpenFileRequest,
    ScanDocFilesRequest,
    TemplateDataResponse,
)
from orgview.utils.logging_config import get_logger

logger = get_logger(__name__)

LAYER_TITLES = {
    "strategic": "Strategic",
    "quickref": "Quick Reference",
    "other": "Other",
}
COPY_LABEL = "Copy"
COPIED_LABEL = "Copied!"


def install_toolbar(view: DocumentView) -> Tag | None:
    """Add the Doc Map / Template toolbar when the view can reach a host."""
    if view.channel is None:
        return None

    toolbar = view.new_tag("div", classes=["view-toolbar"])
    doc_map_button = view.new_tag("button", classes=["toolbar-button", "toolbar-doc-map"], text="Doc Map")
    template_button = view.new_tag("button", classes=["toolbar-button", "toolbar-template"], text="Template")
    view.add_event_listener(doc_map_button, "click", _make_sender(view, ScanDocFilesRequest()))
    view.add_event_listener(template_button, "click", _make_sender(view, GetTemplateRequest()))
    toolbar.append(doc_map_button)
    toolbar.append(template_button)
    view.body.insert(0, toolbar)
    return toolbar


def render_doc_map(view: DocumentView, response: DocFileMapResponse) -> Tag:
    """Replace the doc-map panel with one built from ``response``."""
    _remove_existing(view, ".doc-map")
    current_file = _current_file(view)

    panel = view.new_tag("div", classes=["doc-map"])
    panel.append(view.new_tag("div", classes=["doc-map-header"], text="Doc Map"))

    if not response.files:
        panel.append(view.new_tag("p", classes=["doc-map-empty"], text="No .org files found in workspace."))

    for layer, title in LAYER_TITLES.items():
        entries = [entry for entry in response.files if entry.layer == layer]
        if not entries:
            continue
        group = view.new_tag("div", classes=["doc-map-group", f"doc-map-{layer}"])
        group.append(view.new_tag("div", classes=["doc-map-group-title"], text=f"{title} ({len(entries)})"))
        for entry in entries:
            group.append(_doc_map_entry(view, entry, current_file))
        panel.append(group)

    view.body.append(panel)
    return panel


def _doc_map_entry(view: DocumentView, entry: DocFileEntry, current_file: str) -> Tag:
    item = view.new_tag("a", classes=["doc-map-entry"], href="#", data_path=entry.path, title=entry.path)
    item.append(view.new_tag("span", classes=["doc-map-name"], text=entry.name))
    if entry.dir:
        item.append(view.new_tag("span", classes=["doc-map-dir"], text=entry.dir))
    if entry.tokens is not None:
        item.append(view.new_tag("span", classes=["doc-map-tokens"], text=f"{entry.tokens:,} tokens"))
    if current_file == entry.path:
        add_class(item, "current")
    view.add_event_listener(item, "click", _make_sender(view, OpenFileRequest(path=entry.path)))
    return item


def render_template_panel(view: DocumentView, response: TemplateDataResponse) -> Tag:
    """Replace the template panel with the rendered and raw template."""
    _remove_existing(view, ".template-panel")

    panel = view.new_tag("div", classes=["template-panel"])
    header = view.new_tag("div", classes=["template-header"], text="Documentation Template")
    copy_button = view.new_tag("button", classes=["copy-button"], text=COPY_LABEL)
    view.add_event_listener(copy_button, "click", _make_sender(view, CopyToClipboardRequest(text=response.raw)))
    header.append(copy_button)
    panel.append(header)

    rendered = view.new_tag("div", classes=["template-rendered"])
    fragment = BeautifulSoup(response.html, "lxml")
    if fragment.body is not None:
        for child in list(fragment.body.contents):
            rendered.append(child.extract())
    panel.append(rendered)
    panel.append(view.new_tag("pre", classes=["template-raw"], text=response.raw))

    view.body.append(panel)
    return panel


def mark_copied(view: DocumentView) -> None:
    for button in view.soup.select(".copy-button"):
        button.string = COPIED_LABEL
        add_class(button, "copied")


def handle_host_message(view: DocumentView, message: BaseModel) -> None:
    """Apply a host response to the view."""
    if isinstance(message, DocFileMapResponse):
        render_doc_map(view, message)
    elif isinstance(message, TemplateDataResponse):
        render_template_panel(view, message)
    elif isinstance(message, ClipboardCopiedResponse):
        mark_copied(view)
    else:
        logger.debug("Ignoring message", extra={"command": getattr(message, "command", None)})


def _make_sender(view: DocumentView, message: BaseModel):
    def on_click(event: Event) -> None:
        event.prevent_default()
        view.post(message)

    return on_click


def _remove_existing(view: DocumentView, selector: str) -> None:
    for element in view.soup.select(selector):
        element.decompose()


def _current_file(view: DocumentView) -> str:
    article = view.article
    if article is None:
        return ""
    # Workspace-relative, so it compares equal to a doc-map entry path.
    return article.get("data-current-file", "").removeprefix("./")
