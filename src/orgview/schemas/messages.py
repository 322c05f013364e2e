"""Host <-> view message models.

Requests flow from the rendered view to the host; responses flow back. Both
directions are discriminated unions on the ``command`` field.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

DocLayer = Literal["strategic", "quickref", "other"]


class DocFileEntry(BaseModel):
    """A documentation file discovered in the workspace.

    Attributes:
        name: Display name (e.g. ``README.org``).
        path: Path relative to the workspace root, ``/`` separated.
        layer: Structural layer used to group the doc map.
        dir: Parent directory relative to the root, ``""`` for root files.
        tokens: Token estimate of the file contents, if available.
    """

    name: str
    path: str
    layer: DocLayer
    dir: str
    tokens: int | None = None


class OpenFileRequest(BaseModel):
    command: Literal["openFile"] = "openFile"
    path: str = Field(..., min_length=1)


class ScanDocFilesRequest(BaseModel):
    command: Literal["scanDocFiles"] = "scanDocFiles"


class GetTemplateRequest(BaseModel):
    command: Literal["getTemplate"] = "getTemplate"


class CopyToClipboardRequest(BaseModel):
    command: Literal["copyToClipboard"] = "copyToClipboard"
    text: str


class DocFileMapResponse(BaseModel):
    command: Literal["docFileMap"] = "docFileMap"
    files: list[DocFileEntry] = Field(default_factory=list)


class TemplateDataResponse(BaseModel):
    command: Literal["templateData"] = "templateData"
    raw: str
    html: str


class ClipboardCopiedResponse(BaseModel):
    command: Literal["clipboardCopied"] = "clipboardCopied"


ViewRequest = Annotated[
    Union[OpenFileRequest, ScanDocFilesRequest, GetTemplateRequest, CopyToClipboardRequest],
    Field(discriminator="command"),
]
HostResponse = Annotated[
    Union[DocFileMapResponse, TemplateDataResponse, ClipboardCopiedResponse],
    Field(discriminator="command"),
]
Message = Annotated[
    Union[
        OpenFileRequest,
        ScanDocFilesRequest,
        GetTemplateRequest,
        CopyToClipboardRequest,
        DocFileMapResponse,
        TemplateDataResponse,
        ClipboardCopiedResponse,
    ],
    Field(discriminator="command"),
]

VIEW_REQUEST_ADAPTER: TypeAdapter[ViewRequest] = TypeAdapter(ViewRequest)
HOST_RESPONSE_ADAPTER: TypeAdapter[HostResponse] = TypeAdapter(HostResponse)
MESSAGE_ADAPTER: TypeAdapter[Message] = TypeAdapter(Message)
