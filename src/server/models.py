"""Pydantic models for the render API."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from orgview.pipeline import SUPPORTED_LANGUAGES
from server.server_config import MAX_RENDER_SIZE_KB


class RenderRequest(BaseModel):
    """Request model for the /api/render endpoint.

    Attributes
    ----------
    text : str
        Source document text.
    language_id : str
        ``org`` or ``markdown``.
    fragment : bool
        Return only the rendered fragment instead of a full page.

    """

    text: str = Field(..., description="Document source")
    language_id: str = Field(default="org", description="Source language")
    fragment: bool = Field(default=True, description="Return the fragment only")

    @field_validator("text")
    @classmethod
    def validate_text_size(cls, v: str) -> str:
        """Reject documents over the render size limit."""
        if len(v.encode("utf-8")) > MAX_RENDER_SIZE_KB * 1024:
            err = f"text exceeds {MAX_RENDER_SIZE_KB} KB"
            raise ValueError(err)
        return v

    @field_validator("language_id")
    @classmethod
    def validate_language(cls, v: str) -> str:
        """Validate ``language_id`` against the supported renderers."""
        if v not in SUPPORTED_LANGUAGES:
            err = f"unsupported language: {v}"
            raise ValueError(err)
        return v


class RenderResponse(BaseModel):
    """Response model for the /api/render endpoint."""

    html: str
    token_count: int | None = None
