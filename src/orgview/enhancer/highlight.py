"""Syntax highlighting for code blocks that declare a language.

Blocks are tokenized with Pygments directly into the live document, so the
code text is unchanged and only gains ``<span class="...">`` wrappers using
Pygments' short token classes (``k``, ``s2``, ``nf`` ...).
"""

from __future__ import annotations

from bs4.element import NavigableString, Tag
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.token import STANDARD_TYPES
from pygments.util import ClassNotFound

from orgview.config import ORGVIEW_HIGHLIGHT_STYLE
from orgview.enhancer.view import DocumentView, add_class, classes_of, has_class
from orgview.utils.logging_config import get_logger

logger = get_logger(__name__)

HIGHLIGHT_CLASS = "highlight"
_LANGUAGE_PREFIX = "language-"


def code_language(code: Tag) -> str | None:
    for name in classes_of(code):
        if name.startswith(_LANGUAGE_PREFIX) and len(name) > len(_LANGUAGE_PREFIX):
            return name[len(_LANGUAGE_PREFIX) :]
    return None


def token_css_class(token_type) -> str:
    """Short class for ``token_type``; plain text maps to ``""``."""
    while token_type not in STANDARD_TYPES:
        token_type = token_type.parent
    return STANDARD_TYPES[token_type]


def highlight_code(view: DocumentView) -> list[Tag]:
    """Highlight every ``pre code.language-*`` block the lexers know."""
    highlighted: list[Tag] = []
    for code in view.soup.select("pre code[class*='language-']"):
        language = code_language(code)
        if language is None or has_class(code, HIGHLIGHT_CLASS):
            continue
        try:
            lexer = get_lexer_by_name(language, stripnl=False, ensurenl=False)
        except ClassNotFound:
            logger.debug("No lexer for code block", extra={"language": language})
            continue

        source = code.get_text()
        code.clear()
        for token_type, value in lexer.get_tokens(source):
            if not value:
                continue
            css_class = token_css_class(token_type)
            if css_class:
                code.append(view.new_tag("span", classes=[css_class], text=value))
            else:
                code.append(NavigableString(value))
        add_class(code, HIGHLIGHT_CLASS)
        highlighted.append(code)
    return highlighted


def highlight_stylesheet(style: str = ORGVIEW_HIGHLIGHT_STYLE) -> str:
    """CSS for highlighted token spans, scoped to the preview article."""
    return HtmlFormatter(style=style).get_style_defs(f".org-preview code.{HIGHLIGHT_CLASS}")
