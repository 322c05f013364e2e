"""Local configuration for orgview."""

from __future__ import annotations

import os
from pathlib import Path


DEFAULT_WORKSPACE = "."
DEFAULT_DOC_SCAN_LIMIT = 200
DEFAULT_SCROLL_TOLERANCE_PX = 10.0
DEFAULT_TOKEN_ENCODING = "cl100k_base"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_HIGHLIGHT_STYLE = "default"

# Root directory served by the preview host and scanned for the doc map.
ORGVIEW_WORKSPACE = Path(os.getenv("ORGVIEW_WORKSPACE", DEFAULT_WORKSPACE)).expanduser().resolve()
ORGVIEW_DOC_SCAN_LIMIT = int(os.getenv("ORGVIEW_DOC_SCAN_LIMIT", str(DEFAULT_DOC_SCAN_LIMIT)))
ORGVIEW_SCROLL_TOLERANCE_PX = float(os.getenv("ORGVIEW_SCROLL_TOLERANCE_PX", str(DEFAULT_SCROLL_TOLERANCE_PX)))
ORGVIEW_TOKEN_ENCODING = os.getenv("ORGVIEW_TOKEN_ENCODING", DEFAULT_TOKEN_ENCODING)
ORGVIEW_LOG_LEVEL = os.getenv("ORGVIEW_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
# Pygments style used for highlighted code blocks.
ORGVIEW_HIGHLIGHT_STYLE = os.getenv("ORGVIEW_HIGHLIGHT_STYLE", DEFAULT_HIGHLIGHT_STYLE)

# Preview server bind address; RELOAD restarts on source changes during development.
ORGVIEW_HOST = os.getenv("ORGVIEW_HOST", DEFAULT_HOST)
ORGVIEW_PORT = int(os.getenv("ORGVIEW_PORT", str(DEFAULT_PORT)))
ORGVIEW_RELOAD = os.getenv("ORGVIEW_RELOAD", "false").lower() == "true"
