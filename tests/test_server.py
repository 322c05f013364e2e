"""Tests for the FastAPI preview server."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from orgview.config import ORGVIEW_HOST, ORGVIEW_PORT
from server import __main__ as server_main
from server.main import create_app


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    (tmp_path / "README.org").write_text("#+TITLE: Readme\n* Intro\nSee docs/guide.org\n", encoding="utf-8")
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "guide.org").write_text("* Guide\n", encoding="utf-8")
    (tmp_path / "docs" / "notes.md").write_text("# Notes\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def client(workspace: Path) -> TestClient:
    return TestClient(create_app(workspace))


class TestPreviewEndpoints:
    """Tests for the HTTP endpoints."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_preview_page(self, client: TestClient) -> None:
        response = client.get("/preview", params={"path": "README.org"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert '<article class="org-preview"' in response.text
        assert 'data-current-file="README.org"' in response.text
        assert "<h1>Intro</h1>" in response.text
        assert 'href="/static/preview.css"' in response.text

    def test_current_file_is_workspace_relative(self, client: TestClient) -> None:
        response = client.get("/preview", params={"path": "./docs/../docs/guide.org"})

        assert response.status_code == 200
        assert 'data-current-file="docs/guide.org"' in response.text

    def test_markdown_preview(self, client: TestClient) -> None:
        response = client.get("/preview", params={"path": "docs/notes.md"})

        assert response.status_code == 200
        assert "<h1>Notes</h1>" in response.text

    def test_preview_outside_workspace_is_forbidden(self, client: TestClient) -> None:
        response = client.get("/preview", params={"path": "../secret.org"})

        assert response.status_code == 403

    def test_preview_missing_file(self, client: TestClient) -> None:
        response = client.get("/preview", params={"path": "docs/missing.org"})

        assert response.status_code == 404

    def test_stylesheet(self, client: TestClient) -> None:
        response = client.get("/static/preview.css")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/css")
        assert ".org-preview" in response.text
        assert ".org-preview code.highlight .k" in response.text

    def test_render_fragment(self, client: TestClient) -> None:
        response = client.post("/api/render", json={"text": "* A\n- [X] done"})

        assert response.status_code == 200
        payload = response.json()
        assert payload["html"].startswith("<h1>A</h1>")
        assert "☑ done" in payload["html"]
        assert payload["token_count"] is None

    def test_render_full_page(self, client: TestClient) -> None:
        response = client.post("/api/render", json={"text": "# A", "language_id": "markdown", "fragment": False})

        assert response.status_code == 200
        assert response.json()["html"].startswith("<!DOCTYPE html>")

    def test_render_rejects_unknown_language(self, client: TestClient) -> None:
        response = client.post("/api/render", json={"text": "x", "language_id": "rst"})

        assert response.status_code == 422


class TestChannelEndpoint:
    """Tests for the WebSocket message channel."""

    def test_scan_returns_doc_map(self, client: TestClient) -> None:
        with client.websocket_connect("/ws") as websocket:
            websocket.send_text('{"command": "scanDocFiles"}')
            message = websocket.receive_json()

        assert message["command"] == "docFileMap"
        assert [entry["path"] for entry in message["files"]] == ["README.org", "docs/guide.org"]

    def test_template_request(self, client: TestClient) -> None:
        with client.websocket_connect("/ws") as websocket:
            websocket.send_text('{"command": "getTemplate"}')
            message = websocket.receive_json()

        assert message["command"] == "templateData"
        assert message["raw"].startswith("#+TITLE:")

    def test_copy_is_confirmed(self, client: TestClient) -> None:
        with client.websocket_connect("/ws") as websocket:
            websocket.send_text('{"command": "copyToClipboard", "text": "abc"}')
            message = websocket.receive_json()

        assert message == {"command": "clipboardCopied"}

    def test_invalid_frame_gets_error_and_connection_survives(self, client: TestClient) -> None:
        with client.websocket_connect("/ws") as websocket:
            websocket.send_text('{"command": "docFileMap", "files": []}')
            error = websocket.receive_json()
            websocket.send_text('{"command": "scanDocFiles"}')
            message = websocket.receive_json()

        assert error["command"] == "error"
        assert "Invalid message" in error["detail"]
        assert message["command"] == "docFileMap"

    def test_failing_request_gets_error_and_connection_survives(self, tmp_path: Path) -> None:
        client = TestClient(create_app(tmp_path / "missing"))

        with client.websocket_connect("/ws") as websocket:
            websocket.send_text('{"command": "scanDocFiles"}')
            error = websocket.receive_json()
            websocket.send_text('{"command": "copyToClipboard", "text": "abc"}')
            message = websocket.receive_json()

        assert error["command"] == "error"
        assert "not a directory" in error["detail"]
        assert message == {"command": "clipboardCopied"}


class TestEntryPoint:
    """Tests for ``python -m server``."""

    def test_main_runs_uvicorn_with_configured_address(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[dict[str, Any]] = []
        monkeypatch.setattr(server_main.uvicorn, "run", lambda app, **kwargs: calls.append({"app": app, **kwargs}))

        server_main.main()

        (call,) = calls
        assert call["app"] == "server.main:app"
        assert call["host"] == ORGVIEW_HOST
        assert call["port"] == ORGVIEW_PORT
        assert call["log_config"] is None
