"""Table of contents panel."""

from __future__ import annotations

import copy
from dataclasses import dataclass

from bs4.element import Tag

from orgview.enhancer.view import DocumentView, Event, add_class, heading_level


@dataclass
class TocEntry:
    toc_id: str
    level: int
    label: str
    heading: Tag
    item: Tag


def heading_label(heading: Tag) -> str:
    """Heading text without the collapse toggle glyph."""
    clone = copy.copy(heading)
    for toggle in clone.select(".section-toggle"):
        toggle.decompose()
    return " ".join(clone.get_text().split())


def build_toc(view: DocumentView) -> list[TocEntry]:
    """Insert ``nav.org-toc`` at the top of the body, one item per heading.

    Does nothing when the document has no section headings.
    """
    headings = view.soup.select(".section-heading")
    if not headings:
        return []

    nav = view.new_tag("nav", classes=["org-toc"])
    nav.append(view.new_tag("div", classes=["toc-header"], text="Contents"))
    items = view.new_tag("div", classes=["toc-items"])
    nav.append(items)

    entries: list[TocEntry] = []
    for heading in headings:
        toc_id = heading.get("data-toc-id", "")
        level = heading_level(heading)
        label = heading_label(heading)
        item = view.new_tag(
            "a",
            classes=["toc-item", f"toc-level-{level}"],
            text=label,
            href="#",
            title=label,
            data_toc_id=toc_id,
        )
        view.add_event_listener(item, "click", _make_jump_handler(view, heading))
        items.append(item)
        entries.append(TocEntry(toc_id=toc_id, level=level, label=label, heading=heading, item=item))

    view.body.insert(0, nav)
    add_class(view.body, "has-toc")
    return entries


def _make_jump_handler(view: DocumentView, heading: Tag):
    def on_click(event: Event) -> None:
        event.prevent_default()
        view.scroll_into_view(heading, behavior="smooth", block="start")

    return on_click
