"""Highlight the table-of-contents item for the heading in view."""

from __future__ import annotations

from bs4.element import Tag

from orgview.config import ORGVIEW_SCROLL_TOLERANCE_PX
from orgview.enhancer.sticky import sticky_top
from orgview.enhancer.view import DocumentView, Event, add_class, remove_class


class ScrollSpy:
    """Track the active heading, re-evaluated at most once per frame."""

    def __init__(self, view: DocumentView, headings: list[Tag], tolerance: float = ORGVIEW_SCROLL_TOLERANCE_PX):
        self.view = view
        self.headings = headings
        self.tolerance = tolerance
        self.ticking = False
        self.active: Tag | None = None

    def on_scroll(self, event: Event) -> None:
        if self.ticking:
            return
        self.ticking = True
        self.view.request_frame(self._tick)

    def _tick(self) -> None:
        self.update()
        self.ticking = False

    def update(self) -> Tag | None:
        """Mark the last heading at or above its sticky line as active."""
        layout = self.view.layout
        current: Tag | None = None
        for heading in self.headings:
            if layout.top(heading) <= sticky_top(heading) + self.tolerance:
                current = heading

        for item in self.view.soup.select(".toc-item.active"):
            remove_class(item, "active")

        if current is not None:
            toc_id = current.get("data-toc-id", "")
            item = self.view.soup.select_one(f'.toc-item[data-toc-id="{toc_id}"]')
            if item is not None:
                add_class(item, "active")
                layout.scroll_into_view(item, behavior="auto", block="nearest")

        self.active = current
        return current


def setup_scroll_spy(view: DocumentView) -> ScrollSpy | None:
    headings = view.soup.select(".section-heading")
    if not headings:
        return None
    spy = ScrollSpy(view, headings)
    view.add_window_listener("scroll", spy.on_scroll)
    spy.update()
    return spy
