"""Command-line entry point: render Org or Markdown files to HTML."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from orgview.enhancer import enhance_document
from orgview.enhancer.view import DocumentView
from orgview.page import build_page_html, count_tokens
from orgview.pipeline import SUPPORTED_LANGUAGES, parse_to_html
from orgview.utils.logging_config import configure_logging

_MARKDOWN_SUFFIXES = {".md", ".markdown"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="orgview", description="Render Org documents to HTML previews.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    render = subparsers.add_parser("render", help="Render a document to HTML")
    render.add_argument("file", type=Path, help="Source document (.org, .md)")
    render.add_argument("-o", "--output", type=Path, help="Write HTML here instead of stdout")
    render.add_argument(
        "--language",
        choices=sorted(SUPPORTED_LANGUAGES),
        help="Source language (default: inferred from the file suffix)",
    )
    render.add_argument("--fragment", action="store_true", help="Emit only the rendered fragment, no page shell")
    render.add_argument(
        "--enhance",
        action="store_true",
        help="Apply sections, table of contents and file references to the page",
    )
    render.add_argument("--log-level", help="Logging level (default: ORGVIEW_LOG_LEVEL)")
    return parser


def infer_language(path: Path) -> str:
    return "markdown" if path.suffix.lower() in _MARKDOWN_SUFFIXES else "org"


def render_file(
    path: Path,
    *,
    language: str | None = None,
    fragment: bool = False,
    enhance: bool = False,
) -> str:
    """Render ``path`` to HTML, as a fragment or a full preview page."""
    text = path.read_text(encoding="utf-8")
    body_html = parse_to_html(text, language or infer_language(path))
    if fragment:
        return body_html

    page_html = build_page_html(
        body_html,
        token_count=count_tokens(text),
        doc_uri=path.resolve().as_uri(),
        current_file=path.name,
        title=path.name,
    )
    if not enhance:
        return page_html
    view = DocumentView(page_html)
    enhance_document(view)
    return view.html()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level.upper() if args.log_level else None)

    if args.command == "render":
        if args.fragment and args.enhance:
            parser.error("--fragment and --enhance cannot be combined")
        if not args.file.is_file():
            parser.error(f"File not found: {args.file}")

        html = render_file(args.file, language=args.language, fragment=args.fragment, enhance=args.enhance)
        if args.output:
            args.output.write_text(html, encoding="utf-8")
        else:
            sys.stdout.write(html)
            sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
