"""View-side controller that rebuilds the enhanced document on each update."""

from __future__ import annotations

from typing import Any, Callable

from pydantic import BaseModel

from orgview.channel import MessageChannel
from orgview.enhancer import EnhancedDocument, enhance_document, handle_host_message
from orgview.enhancer.view import DocumentView, FlowLayout, FrameScheduler, LayoutProvider
from orgview.page import build_page_html, count_tokens
from orgview.pipeline import parse_to_html
from orgview.utils.logging_config import get_logger

logger = get_logger(__name__)

HOST_RESPONSE_COMMANDS = ("docFileMap", "templateData", "clipboardCopied")


class PreviewSession:
    """Own the current view and a monotonically increasing render generation.

    Each load replaces the whole view. Listeners, frame callbacks and host
    responses that belong to an older generation are ignored.
    """

    def __init__(
        self,
        channel: MessageChannel | None = None,
        *,
        layout_factory: Callable[[], LayoutProvider] = FlowLayout,
        scheduler: FrameScheduler | None = None,
        token_counter: Callable[[str], int | None] = count_tokens,
    ) -> None:
        self.channel = channel
        self.scheduler = scheduler or FrameScheduler()
        self.generation = 0
        self.view: DocumentView | None = None
        self.enhanced: EnhancedDocument | None = None
        self._layout_factory = layout_factory
        self._token_counter = token_counter
        if channel is not None:
            for command in HOST_RESPONSE_COMMANDS:
                channel.on(command, self._on_host_message)

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    def load(self, page_html: str) -> DocumentView:
        """Replace the view with ``page_html`` and enhance it."""
        self.generation += 1
        view = DocumentView(
            page_html,
            layout=self._layout_factory(),
            scheduler=self.scheduler,
            channel=self.channel,
            generation=self.generation,
            is_current=self.is_current,
        )
        self.view = view
        self.enhanced = enhance_document(view)
        logger.debug(
            "View loaded",
            extra={"generation": self.generation, "sections": len(self.enhanced.sections)},
        )
        return view

    def render(self, text: str, language_id: str = "org", **page_options: Any) -> DocumentView:
        """Render source text through the pipeline and load the resulting page."""
        body_html = parse_to_html(text, language_id)
        page_html = build_page_html(body_html, token_count=self._token_counter(text), **page_options)
        return self.load(page_html)

    def _on_host_message(self, message: BaseModel) -> None:
        if self.view is None:
            return
        handle_host_message(self.view, message)
