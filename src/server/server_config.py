"""Configuration for the server."""

APP_TITLE = "orgview"
APP_DESCRIPTION = "Live preview of Org documents."
STYLESHEET_PATH = "/static/preview.css"
MAX_RENDER_SIZE_KB = 2 * 1024  # 2 MB
MARKDOWN_SUFFIXES = frozenset({".md", ".markdown"})
