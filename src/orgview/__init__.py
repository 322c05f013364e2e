"""orgview: render Org documents into navigable HTML previews."""

from orgview.enhancer import DocumentView, enhance_document
from orgview.exceptions import (
    OrgviewError,
    ParseError,
    ProtocolError,
    SerializationError,
    WorkspaceError,
)
from orgview.page import build_page_html
from orgview.pipeline import md_to_html, org_to_html, parse_to_html
from orgview.session import PreviewSession

__all__ = [
    "DocumentView",
    "OrgviewError",
    "ParseError",
    "PreviewSession",
    "ProtocolError",
    "SerializationError",
    "WorkspaceError",
    "build_page_html",
    "enhance_document",
    "md_to_html",
    "org_to_html",
    "parse_to_html",
]
