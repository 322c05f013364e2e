"""Structural enhancement of a rendered preview page."""

from __future__ import annotations

from dataclasses import dataclass, field

from bs4.element import Tag

from orgview.enhancer.file_refs import FileKind, FileReference, linkify_file_references
from orgview.enhancer.highlight import highlight_code
from orgview.enhancer.panels import handle_host_message, install_toolbar
from orgview.enhancer.scroll_spy import ScrollSpy, setup_scroll_spy
from orgview.enhancer.sections import Section, SectionState, build_sections
from orgview.enhancer.sticky import set_sticky_offsets
from orgview.enhancer.toc import TocEntry, build_toc
from orgview.enhancer.view import DocumentView, Event, FlowLayout, FrameScheduler, LayoutProvider


@dataclass
class EnhancedDocument:
    highlighted: list[Tag] = field(default_factory=list)
    sections: list[Section] = field(default_factory=list)
    toc: list[TocEntry] = field(default_factory=list)
    scroll_spy: ScrollSpy | None = None
    file_references: list[FileReference] = field(default_factory=list)
    toolbar: Tag | None = None


def enhance_document(view: DocumentView) -> EnhancedDocument:
    """Run every enhancement pass over a freshly loaded view, in order."""
    highlighted = highlight_code(view)
    sections = build_sections(view)
    set_sticky_offsets(view)
    toc = build_toc(view)
    spy = setup_scroll_spy(view)
    references = linkify_file_references(view)
    toolbar = install_toolbar(view)
    return EnhancedDocument(
        highlighted=highlighted,
        sections=sections,
        toc=toc,
        scroll_spy=spy,
        file_references=references,
        toolbar=toolbar,
    )


__all__ = [
    "DocumentView",
    "EnhancedDocument",
    "Event",
    "FileKind",
    "FileReference",
    "FlowLayout",
    "FrameScheduler",
    "LayoutProvider",
    "Section",
    "SectionState",
    "enhance_document",
    "handle_host_message",
    "highlight_code",
]
