"""Host side of the view protocol."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from orgview.channel import MessageChannel
from orgview.config import ORGVIEW_DOC_SCAN_LIMIT
from orgview.doc_map import discover_doc_files, find_workspace_file
from orgview.exceptions import WorkspaceError
from orgview.page import count_tokens
from orgview.pipeline import org_to_html
from orgview.schemas.messages import (
    ClipboardCopiedResponse,
    CopyToClipboardRequest,
    DocFileMapResponse,
    GetTemplateRequest,
    OpenFileRequest,
    ScanDocFilesRequest,
    TemplateDataResponse,
)
from orgview.template_content import TEMPLATE_ORG
from orgview.utils.logging_config import get_logger

logger = get_logger(__name__)


class HostBridge:
    """Answer view requests arriving on ``channel``.

    File opening and clipboard access are delegated to injected callables so
    the bridge works under any host (editor, web server, tests).
    """

    def __init__(
        self,
        channel: MessageChannel,
        *,
        workspace_root: Path,
        opener: Callable[[Path], None] | None = None,
        clipboard: Callable[[str], None] | None = None,
        scan_limit: int = ORGVIEW_DOC_SCAN_LIMIT,
        token_counter: Callable[[str], int | None] = count_tokens,
    ) -> None:
        self.channel = channel
        self.workspace_root = Path(workspace_root)
        self.scan_limit = scan_limit
        self.token_counter = token_counter
        self.opened: list[Path] = []
        self.clipboard_text: str | None = None
        self._opener = opener
        self._clipboard = clipboard

        channel.on("openFile", self.handle_open_file)
        channel.on("scanDocFiles", self.handle_scan_doc_files)
        channel.on("getTemplate", self.handle_get_template)
        channel.on("copyToClipboard", self.handle_copy_to_clipboard)

    def handle_open_file(self, message: OpenFileRequest) -> None:
        try:
            path = find_workspace_file(self.workspace_root, message.path)
        except WorkspaceError as exc:
            logger.warning("Rejected file reference", extra={"path": message.path, "error": str(exc)})
            return
        if path is None:
            logger.info("Referenced file not found", extra={"path": message.path})
            return

        self.opened.append(path)
        if self._opener is not None:
            self._opener(path)
        else:
            logger.info("Open file requested", extra={"path": str(path)})

    def handle_scan_doc_files(self, message: ScanDocFilesRequest) -> None:
        files = discover_doc_files(self.workspace_root, limit=self.scan_limit, token_counter=self.token_counter)
        logger.debug("Doc map scanned", extra={"count": len(files)})
        self.channel.send(DocFileMapResponse(files=files))

    def handle_get_template(self, message: GetTemplateRequest) -> None:
        self.channel.send(TemplateDataResponse(raw=TEMPLATE_ORG, html=org_to_html(TEMPLATE_ORG)))

    def handle_copy_to_clipboard(self, message: CopyToClipboardRequest) -> None:
        self.clipboard_text = message.text
        if self._clipboard is not None:
            self._clipboard(message.text)
        self.channel.send(ClipboardCopiedResponse())
