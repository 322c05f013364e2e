"""Assemble a full preview page around a rendered fragment."""

from __future__ import annotations

import secrets

try:
    import tiktoken
except ImportError:  # pragma: no cover - optional dependency
    tiktoken = None

from orgview.config import ORGVIEW_TOKEN_ENCODING
from orgview.render_tree import escape_attribute, escape_text

DEFAULT_STYLESHEET = "/static/preview.css"


def count_tokens(text: str) -> int | None:
    """Estimate the token count of ``text``; ``None`` when unavailable."""
    if not tiktoken:
        return None
    try:
        encoding = tiktoken.get_encoding(ORGVIEW_TOKEN_ENCODING)
        return len(encoding.encode(text, disallowed_special=()))
    except Exception:
        return None


def get_nonce() -> str:
    """Generate a nonce for the page Content-Security-Policy."""
    return secrets.token_hex(16)


def build_page_html(
    body_html: str,
    *,
    token_count: int | None = None,
    doc_uri: str = "",
    current_file: str = "",
    stylesheet_href: str = DEFAULT_STYLESHEET,
    nonce: str | None = None,
    title: str = "Org Preview",
) -> str:
    """Wrap ``body_html`` in the preview page shell."""
    nonce = nonce or get_nonce()
    tokens = "" if token_count is None else str(token_count)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <meta
    http-equiv="Content-Security-Policy"
    content="default-src 'none'; style-src 'self' 'nonce-{nonce}'; script-src 'nonce-{nonce}'; connect-src 'self';"
  />
  <link rel="stylesheet" href="{escape_attribute(stylesheet_href)}" />
  <title>{escape_text(title)}</title>
</head>
<body>
  <article class="org-preview"
    data-token-count="{tokens}"
    data-doc-uri="{escape_attribute(doc_uri)}"
    data-current-file="{escape_attribute(current_file)}">
    {body_html}
  </article>
</body>
</html>"""
