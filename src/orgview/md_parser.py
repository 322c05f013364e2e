"""Markdown rendering using markdown-it-py.

Configured with:
- CommonMark base with raw HTML allowed
- GFM tables and strikethrough
- Dollar math (``$inline$`` and ``$$display$$``), emitted with the same
  ``math-inline`` / ``math-display`` classes as the Org pipeline
- Task list checkboxes
"""

from __future__ import annotations

from html import escape

from markdown_it import MarkdownIt
from mdit_py_plugins.dollarmath import dollarmath_plugin
from mdit_py_plugins.tasklists import tasklists_plugin


def _math_inline(tokens, idx, options, env):
    return f'<span class="math math-inline">{escape(tokens[idx].content)}</span>'


def _math_display_inline(tokens, idx, options, env):
    return f'<span class="math math-display">{escape(tokens[idx].content.strip())}</span>'


def _math_block(tokens, idx, options, env):
    return f'<div class="math math-display">{escape(tokens[idx].content.strip())}</div>\n'


def create_parser() -> MarkdownIt:
    """Create a configured markdown-it parser."""
    md = MarkdownIt("commonmark", {"html": True}).enable("table").enable("strikethrough")
    md.use(dollarmath_plugin, double_inline=True)
    md.use(tasklists_plugin)
    md.renderer.rules["math_inline"] = _math_inline
    md.renderer.rules["math_inline_double"] = _math_display_inline
    md.renderer.rules["math_block"] = _math_block
    md.renderer.rules["math_block_label"] = _math_block
    return md


# Singleton parser instance
_parser: MarkdownIt | None = None


def get_parser() -> MarkdownIt:
    """Get or create the singleton parser instance."""
    global _parser
    if _parser is None:
        _parser = create_parser()
    return _parser


def render_markdown(text: str) -> str:
    """Render Markdown text to an HTML fragment."""
    return get_parser().render(text)
