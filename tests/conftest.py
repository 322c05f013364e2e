"""Test setup for orgview."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from orgview.channel import MessageChannel  # noqa: E402
from orgview.enhancer.view import DocumentView  # noqa: E402
from orgview.page import build_page_html  # noqa: E402
from orgview.pipeline import org_to_html  # noqa: E402


@pytest.fixture(autouse=True)
def offline_tokens(monkeypatch: pytest.MonkeyPatch) -> None:
    """Disable tiktoken so token counts never trigger an encoding download."""
    monkeypatch.setattr("orgview.page.tiktoken", None)


@pytest.fixture
def page_for() -> Callable[[str], str]:
    """Render Org text into a full preview page."""

    def _page_for(text: str, **options: Any) -> str:
        options.setdefault("nonce", "test-nonce")
        return build_page_html(org_to_html(text), **options)

    return _page_for


@pytest.fixture
def sent_messages() -> list[dict[str, Any]]:
    return []


@pytest.fixture
def view_channel(sent_messages: list[dict[str, Any]]) -> MessageChannel:
    """A channel whose outbound messages are collected in ``sent_messages``."""
    return MessageChannel(sent_messages.append)


@pytest.fixture
def make_view(page_for: Callable[[str], str]) -> Callable[..., DocumentView]:
    """Build a DocumentView from Org text."""

    def _make_view(text: str, **view_options: Any) -> DocumentView:
        return DocumentView(page_for(text), **view_options)

    return _make_view
