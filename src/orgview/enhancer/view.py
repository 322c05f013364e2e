"""Live document model the structural enhancer runs against.

``DocumentView`` wraps the rendered page (parsed with BeautifulSoup/lxml) and
provides what a rendering surface would: event listeners with click bubbling,
element geometry through a :class:`LayoutProvider`, an animation-frame queue,
and an outbound message channel to the host.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Protocol

from bs4 import BeautifulSoup
from bs4.element import Tag
from pydantic import BaseModel

from orgview.utils.logging_config import get_logger

if TYPE_CHECKING:
    from orgview.channel import MessageChannel

logger = get_logger(__name__)

_HEADING_RE = re.compile(r"^h([1-6])$")


def heading_level(element: object) -> int:
    """Return 1-6 for ``h1``..``h6`` tags and 0 for anything else."""
    if not isinstance(element, Tag):
        return 0
    match = _HEADING_RE.match(element.name or "")
    return int(match.group(1)) if match else 0


def classes_of(element: Tag) -> list[str]:
    value = element.get("class")
    if not value:
        return []
    if isinstance(value, str):
        return value.split()
    return list(value)


def has_class(element: Tag, name: str) -> bool:
    return name in classes_of(element)


def add_class(element: Tag, *names: str) -> None:
    current = classes_of(element)
    current.extend(name for name in names if name not in current)
    element["class"] = current


def remove_class(element: Tag, name: str) -> None:
    current = [value for value in classes_of(element) if value != name]
    if current:
        element["class"] = current
    elif "class" in element.attrs:
        del element["class"]


def toggle_class(element: Tag, name: str, force: bool | None = None) -> bool:
    """Toggle ``name`` on ``element``; return whether it is now present."""
    enable = not has_class(element, name) if force is None else force
    if enable:
        add_class(element, name)
    else:
        remove_class(element, name)
    return enable


@dataclass
class Event:
    """A dispatched DOM-style event."""

    type: str
    target: Tag | None = None
    current_target: Tag | None = None
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


Listener = Callable[[Event], None]


class FrameScheduler:
    """Queue of animation-frame callbacks, flushed once per repaint."""

    def __init__(self) -> None:
        self._queue: list[Callable[[], None]] = []

    @property
    def pending(self) -> int:
        return len(self._queue)

    def request_animation_frame(self, callback: Callable[[], None]) -> None:
        self._queue.append(callback)

    def run_frame(self) -> int:
        """Run every callback queued before this frame; return how many ran."""
        callbacks, self._queue = self._queue, []
        for callback in callbacks:
            callback()
        return len(callbacks)


class LayoutProvider(Protocol):
    """Element geometry as the rendering surface reports it."""

    scroll_y: float

    def bind(self, view: DocumentView) -> None: ...

    def invalidate(self) -> None: ...

    def height(self, element: Tag) -> float: ...

    def top(self, element: Tag) -> float: ...

    def scroll_into_view(self, element: Tag, *, behavior: str = "auto", block: str = "start") -> None: ...


class FlowLayout:
    """Deterministic block-flow estimate of element geometry.

    Blocks are stacked vertically in document order. Headings take a fixed
    height per level; other blocks take one line per ``chars_per_line``
    characters of text. Collapsed section bodies take no space.
    """

    HEADING_HEIGHTS = {1: 40.0, 2: 34.0, 3: 30.0, 4: 26.0, 5: 24.0, 6: 22.0}

    def __init__(
        self,
        *,
        line_height: float = 20.0,
        chars_per_line: int = 80,
        heading_heights: dict[int, float] | None = None,
    ) -> None:
        self.line_height = line_height
        self.chars_per_line = chars_per_line
        self.heading_heights = dict(heading_heights or self.HEADING_HEIGHTS)
        self.scroll_y = 0.0
        self.panel_reveals: list[Tag] = []
        self._view: DocumentView | None = None
        self._offsets: dict[int, float] | None = None

    def bind(self, view: DocumentView) -> None:
        self._view = view
        self.invalidate()

    def invalidate(self) -> None:
        self._offsets = None

    def height(self, element: Tag) -> float:
        level = heading_level(element)
        if level:
            return self.heading_heights[level]
        text = element.get_text(" ", strip=True)
        lines = max(1, math.ceil(len(text) / self.chars_per_line))
        return lines * self.line_height

    def document_offset(self, element: Tag) -> float:
        offsets = self._compute_offsets()
        node: Tag | None = element
        while node is not None:
            if id(node) in offsets:
                return offsets[id(node)]
            node = node.parent
        return 0.0

    def top(self, element: Tag) -> float:
        return self.document_offset(element) - self.scroll_y

    def scroll_into_view(self, element: Tag, *, behavior: str = "auto", block: str = "start") -> None:
        if element.find_parent("nav") is not None:
            # Elements inside side panels scroll their panel, not the page.
            self.panel_reveals.append(element)
            return
        self.scroll_y = self.document_offset(element)

    def _compute_offsets(self) -> dict[int, float]:
        if self._offsets is not None:
            return self._offsets
        offsets: dict[int, float] = {}
        article = self._view.article if self._view is not None else None
        if article is not None:
            self._flow(article, 0.0, offsets)
        self._offsets = offsets
        return offsets

    def _flow(self, container: Tag, y: float, offsets: dict[int, float]) -> float:
        for child in container.children:
            if not isinstance(child, Tag):
                continue
            if has_class(child, "org-section"):
                offsets[id(child)] = y
                y = self._flow(child, y, offsets)
            elif has_class(child, "section-body"):
                offsets[id(child)] = y
                if not has_class(child, "collapsed"):
                    y = self._flow(child, y, offsets)
            else:
                offsets[id(child)] = y
                y += self.height(child)
        return y


@dataclass
class _ListenerEntry:
    element: Tag
    event_type: str
    listener: Listener


class DocumentView:
    """A rendered page plus the runtime services the enhancer needs."""

    def __init__(
        self,
        html: str,
        *,
        layout: LayoutProvider | None = None,
        scheduler: FrameScheduler | None = None,
        channel: MessageChannel | None = None,
        generation: int = 0,
        is_current: Callable[[int], bool] | None = None,
    ) -> None:
        self.soup = BeautifulSoup(html, "lxml")
        self.layout: LayoutProvider = layout or FlowLayout()
        self.scheduler = scheduler or FrameScheduler()
        self.channel = channel
        self.generation = generation
        self._is_current = is_current or (lambda _generation: True)
        self._listeners: dict[int, list[_ListenerEntry]] = {}
        self._window_listeners: dict[str, list[Listener]] = {}
        self.layout.bind(self)

    @property
    def article(self) -> Tag | None:
        return self.soup.select_one(".org-preview")

    @property
    def body(self) -> Tag:
        return self.soup.body or self.soup

    @property
    def is_current(self) -> bool:
        return self._is_current(self.generation)

    def new_tag(self, name: str, *, classes: list[str] | None = None, text: str | None = None, **attrs: str) -> Tag:
        tag = self.soup.new_tag(name, attrs={key.replace("_", "-"): value for key, value in attrs.items()})
        if classes:
            tag["class"] = list(classes)
        if text is not None:
            tag.string = text
        return tag

    def html(self) -> str:
        return str(self.soup)

    def mark_layout_dirty(self) -> None:
        self.layout.invalidate()

    def add_event_listener(self, element: Tag, event_type: str, listener: Listener) -> None:
        self._listeners.setdefault(id(element), []).append(_ListenerEntry(element, event_type, listener))

    def add_window_listener(self, event_type: str, listener: Listener) -> None:
        self._window_listeners.setdefault(event_type, []).append(listener)

    def dispatch_event(self, target: Tag, event_type: str) -> Event:
        """Dispatch ``event_type`` at ``target`` and bubble it to the root."""
        event = Event(type=event_type, target=target)
        if not self.is_current:
            logger.debug("Ignoring event on stale view", extra={"generation": self.generation})
            return event
        node: Tag | None = target
        while node is not None:
            for entry in list(self._listeners.get(id(node), [])):
                if entry.element is node and entry.event_type == event_type:
                    event.current_target = node
                    entry.listener(event)
            node = node.parent
        return event

    def click(self, target: Tag) -> Event:
        return self.dispatch_event(target, "click")

    def dispatch_window_event(self, event_type: str) -> Event:
        event = Event(type=event_type)
        if not self.is_current:
            return event
        for listener in list(self._window_listeners.get(event_type, [])):
            listener(event)
        return event

    def scroll_to(self, y: float) -> None:
        self.layout.scroll_y = max(0.0, y)
        self.dispatch_window_event("scroll")

    def scroll_into_view(self, element: Tag, *, behavior: str = "auto", block: str = "start") -> None:
        before = self.layout.scroll_y
        self.layout.scroll_into_view(element, behavior=behavior, block=block)
        if self.layout.scroll_y != before:
            self.dispatch_window_event("scroll")

    def request_frame(self, callback: Callable[[], None]) -> None:
        generation = self.generation

        def guarded() -> None:
            if self._is_current(generation):
                callback()

        self.scheduler.request_animation_frame(guarded)

    def post(self, message: BaseModel) -> None:
        """Send ``message`` to the host if this view is still current."""
        if self.channel is None or not self.is_current:
            return
        self.channel.send(message)
