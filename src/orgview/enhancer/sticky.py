"""Sticky heading offsets and stable heading ids."""

from __future__ import annotations

import re

from bs4.element import Tag

from orgview.enhancer.view import DocumentView

_TOP_RE = re.compile(r"top:\s*(-?[\d.]+)px")


def set_sticky_offsets(view: DocumentView) -> list[float]:
    """Number every section heading and pin it below its ancestors' headings.

    A heading's ``top`` is the summed rendered height of the headings of all
    enclosing sections, so nested headings stack instead of overlapping.
    Computed once, after the initial layout.
    """
    offsets: list[float] = []
    for index, heading in enumerate(view.soup.select(".section-heading")):
        heading["data-toc-id"] = str(index)
        top = 0.0
        section = heading.parent
        ancestor = section.find_parent(class_="org-section") if section is not None else None
        while ancestor is not None:
            parent_heading = ancestor.find(class_="section-heading", recursive=False)
            if parent_heading is not None:
                top += view.layout.height(parent_heading)
            ancestor = ancestor.find_parent(class_="org-section")
        heading["style"] = f"top: {_format_px(top)}"
        offsets.append(top)
    return offsets


def sticky_top(heading: Tag) -> float:
    match = _TOP_RE.search(heading.get("style", ""))
    return float(match.group(1)) if match else 0.0


def _format_px(value: float) -> str:
    return f"{int(value)}px" if value == int(value) else f"{value:g}px"
