"""Preview page, render API and stylesheet endpoints."""

from __future__ import annotations

import asyncio
from importlib import resources
from pathlib import Path

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import HTMLResponse, Response

from orgview.doc_map import resolve_workspace_path
from orgview.enhancer.highlight import highlight_stylesheet
from orgview.exceptions import WorkspaceError
from orgview.page import build_page_html, count_tokens
from orgview.pipeline import parse_to_html
from orgview.utils.logging_config import get_logger
from server.models import RenderRequest, RenderResponse
from server.server_config import MARKDOWN_SUFFIXES, STYLESHEET_PATH

logger = get_logger(__name__)

router = APIRouter()


@router.get("/preview", response_class=HTMLResponse)
async def preview_file(request: Request, path: str) -> HTMLResponse:
    """Render a workspace file as a full preview page.

    **Query Parameters**

    - **path** (`str`): File path relative to the workspace root

    **Raises**

    - **HTTPException**: **403** - the path resolves outside the workspace
    - **HTTPException**: **404** - the file does not exist

    """
    workspace_root: Path = request.app.state.workspace_root
    try:
        file_path = resolve_workspace_path(workspace_root, path)
    except WorkspaceError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc

    if not file_path.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"File {path!r} not found")

    text = await asyncio.to_thread(file_path.read_text, encoding="utf-8", errors="replace")
    language_id = "markdown" if file_path.suffix.lower() in MARKDOWN_SUFFIXES else "org"
    body_html = parse_to_html(text, language_id)
    logger.info("Rendered preview", extra={"path": path, "language_id": language_id})

    page = build_page_html(
        body_html,
        token_count=count_tokens(text),
        doc_uri=file_path.as_uri(),
        current_file=file_path.relative_to(workspace_root).as_posix(),
        stylesheet_href=STYLESHEET_PATH,
        title=file_path.name,
    )
    return HTMLResponse(page)


@router.post("/api/render", response_model=RenderResponse)
async def api_render(render_request: RenderRequest) -> RenderResponse:
    """Render document text to HTML without touching the workspace."""
    body_html = parse_to_html(render_request.text, render_request.language_id)
    token_count = count_tokens(render_request.text)
    if render_request.fragment:
        return RenderResponse(html=body_html, token_count=token_count)
    page = build_page_html(body_html, token_count=token_count, stylesheet_href=STYLESHEET_PATH)
    return RenderResponse(html=page, token_count=token_count)


@router.get(STYLESHEET_PATH)
async def preview_stylesheet() -> Response:
    """Serve the bundled preview stylesheet plus the code highlighting rules."""
    css = resources.files("orgview").joinpath("static/preview.css").read_text(encoding="utf-8")
    return Response(content=f"{css}\n{highlight_stylesheet()}", media_type="text/css")
