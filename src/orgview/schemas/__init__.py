"""Shared schemas for orgview."""

from orgview.schemas.messages import (
    ClipboardCopiedResponse,
    CopyToClipboardRequest,
    DocFileEntry,
    DocFileMapResponse,
    GetTemplateRequest,
    HostResponse,
    Message,
    OpenFileRequest,
    ScanDocFilesRequest,
    TemplateDataResponse,
    ViewRequest,
)

__all__ = [
    "ClipboardCopiedResponse",
    "CopyToClipboardRequest",
    "DocFileEntry",
    "DocFileMapResponse",
    "GetTemplateRequest",
    "HostResponse",
    "Message",
    "OpenFileRequest",
    "ScanDocFilesRequest",
    "TemplateDataResponse",
    "ViewRequest",
]
