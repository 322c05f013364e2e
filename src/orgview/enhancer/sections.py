"""Wrap headings and their following content into collapsible sections."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from bs4.element import NavigableString, Tag

from orgview.enhancer.view import DocumentView, Event, add_class, has_class, heading_level, toggle_class

TOGGLE_EXPANDED = "▼"
TOGGLE_COLLAPSED = "▶"


class SectionState(str, Enum):
    EXPANDED = "expanded"
    COLLAPSED = "collapsed"


@dataclass
class Section:
    """A heading, its body container, and the wrapper that holds both."""

    level: int
    heading: Tag
    body: Tag
    wrapper: Tag
    toggle: Tag

    @property
    def state(self) -> SectionState:
        return SectionState.COLLAPSED if has_class(self.body, "collapsed") else SectionState.EXPANDED

    def toggle_collapsed(self) -> SectionState:
        collapsed = toggle_class(self.body, "collapsed")
        toggle_class(self.wrapper, "is-collapsed", collapsed)
        self.toggle.string = TOGGLE_COLLAPSED if collapsed else TOGGLE_EXPANDED
        return self.state


def build_sections(view: DocumentView) -> list[Section]:
    """Regroup the article's top-level children into nested sections.

    Each ``h1``-``h6`` opens a ``div.org-section`` holding the heading and a
    ``div.section-body``. Following siblings land in the body of the innermost
    open section; a heading closes every open section of the same or deeper
    level first. Content before the first heading stays at the top level.
    """
    article = view.article
    if article is None:
        return []

    children = list(article.contents)
    for child in children:
        child.extract()

    sections: list[Section] = []
    stack: list[tuple[int, Tag]] = []
    for child in children:
        if isinstance(child, NavigableString) and not child.strip():
            continue
        level = heading_level(child)
        if not level:
            (stack[-1][1] if stack else article).append(child)
            continue

        while stack and stack[-1][0] >= level:
            stack.pop()

        wrapper = view.new_tag("div", classes=["org-section", f"org-level-{level}"])
        toggle = view.new_tag("span", classes=["section-toggle"], text=TOGGLE_EXPANDED)
        body = view.new_tag("div", classes=["section-body"])
        add_class(child, "section-heading")
        child.insert(0, toggle)
        wrapper.append(child)
        wrapper.append(body)
        (stack[-1][1] if stack else article).append(wrapper)
        stack.append((level, body))

        section = Section(level=level, heading=child, body=body, wrapper=wrapper, toggle=toggle)
        view.add_event_listener(child, "click", _make_toggle_handler(view, section))
        sections.append(section)

    view.mark_layout_dirty()
    return sections


def _make_toggle_handler(view: DocumentView, section: Section):
    def on_click(event: Event) -> None:
        if event.target is not None and _inside_link(event.target, section.heading):
            return
        section.toggle_collapsed()
        view.mark_layout_dirty()

    return on_click


def _inside_link(target: Tag, heading: Tag) -> bool:
    node: Tag | None = target
    while node is not None:
        if node.name == "a" or has_class(node, "file-ref"):
            return True
        if node is heading:
            return False
        node = node.parent
    return False
