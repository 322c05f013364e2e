"""Tests for the structural enhancer."""

from __future__ import annotations

from typing import Any, Callable

from pygments.token import Keyword

from orgview.channel import MessageChannel
from orgview.enhancer import enhance_document
from orgview.enhancer.file_refs import FileKind, classify_extension, find_file_references, linkify_file_references
from orgview.enhancer.highlight import HIGHLIGHT_CLASS, highlight_code, highlight_stylesheet, token_css_class
from orgview.enhancer.panels import render_doc_map
from orgview.enhancer.sections import TOGGLE_COLLAPSED, TOGGLE_EXPANDED, SectionState, build_sections
from orgview.enhancer.sticky import set_sticky_offsets, sticky_top
from orgview.enhancer.toc import build_toc
from orgview.enhancer.view import DocumentView, FlowLayout, FrameScheduler, has_class
from orgview.schemas.messages import DocFileEntry, DocFileMapResponse

ViewFactory = Callable[..., DocumentView]


def _top_level_sections(view: DocumentView):
    return view.article.find_all("div", class_="org-section", recursive=False)


class TestBuildSections:
    """Tests for flat-to-nested section construction."""

    def test_nesting_follows_heading_levels(self, make_view: ViewFactory) -> None:
        """* A / ** B / * C gives two top-level sections, B nested in A."""
        view = make_view("* A\n** B\n* C")

        sections = build_sections(view)

        assert len(sections) == 3
        top = _top_level_sections(view)
        assert len(top) == 2
        first_body = top[0].find("div", class_="section-body", recursive=False)
        nested = first_body.find_all("div", class_="org-section", recursive=False)
        assert len(nested) == 1
        assert nested[0].find("h2") is not None
        assert top[1].find("h1").get_text().endswith("C")

    def test_each_section_holds_heading_and_single_body(self, make_view: ViewFactory) -> None:
        view = make_view("* One\ntext\n** Two\n*** Three\nmore\n** Four\n* Five")

        sections = build_sections(view)

        assert len(sections) == len(view.soup.select(".section-heading")) == 5
        for section in sections:
            children = [child for child in section.wrapper.children if getattr(child, "name", None)]
            assert children == [section.heading, section.body]

    def test_content_lands_in_innermost_open_section(self, make_view: ViewFactory) -> None:
        view = make_view("Intro\n* A\nunder a\n** B\nunder b")

        sections = build_sections(view)

        article_paragraphs = view.article.find_all("p", recursive=False)
        assert [p.get_text() for p in article_paragraphs] == ["Intro"]
        assert sections[0].body.find("p", recursive=False).get_text() == "under a"
        assert sections[1].body.find("p", recursive=False).get_text() == "under b"

    def test_shallower_heading_closes_deeper_sections(self, make_view: ViewFactory) -> None:
        view = make_view("** Deep\n* Shallow")

        build_sections(view)

        assert len(_top_level_sections(view)) == 2

    def test_no_headings(self, make_view: ViewFactory) -> None:
        view = make_view("Just a paragraph.")

        assert build_sections(view) == []
        assert view.article.find("p") is not None


class TestCollapse:
    """Tests for the collapse/expand state machine."""

    def test_heading_click_toggles_body(self, make_view: ViewFactory) -> None:
        view = make_view("* A\nbody")
        (section,) = build_sections(view)

        assert section.state is SectionState.EXPANDED
        assert section.toggle.string == TOGGLE_EXPANDED

        view.click(section.heading)

        assert section.state is SectionState.COLLAPSED
        assert has_class(section.body, "collapsed")
        assert has_class(section.wrapper, "is-collapsed")
        assert section.toggle.string == TOGGLE_COLLAPSED

        view.click(section.heading)

        assert section.state is SectionState.EXPANDED
        assert not has_class(section.body, "collapsed")

    def test_click_only_toggles_own_section(self, make_view: ViewFactory) -> None:
        view = make_view("* A\n** B\nbody")
        outer, inner = build_sections(view)

        view.click(inner.heading)

        assert inner.state is SectionState.COLLAPSED
        assert outer.state is SectionState.EXPANDED

    def test_click_on_link_inside_heading_is_ignored(self, make_view: ViewFactory) -> None:
        view = make_view("* See [[Other][other]]\nbody")
        (section,) = build_sections(view)

        view.click(section.heading.find("a"))

        assert section.state is SectionState.EXPANDED

    def test_collapsed_body_takes_no_space(self, make_view: ViewFactory) -> None:
        view = make_view("* A\nbody text\n* B")
        first, second = build_sections(view)
        before = view.layout.top(second.heading)

        view.click(first.heading)

        assert view.layout.top(second.heading) < before


class TestStickyOffsets:
    """Tests for stacked sticky offsets."""

    def test_top_level_offset_is_zero(self, make_view: ViewFactory) -> None:
        view = make_view("* A\n* B")
        build_sections(view)

        assert set_sticky_offsets(view) == [0.0, 0.0]

    def test_nested_offsets_sum_ancestor_heading_heights(self, make_view: ViewFactory) -> None:
        layout = FlowLayout()
        view = make_view("* A\n** B\n*** C", layout=layout)
        sections = build_sections(view)

        offsets = set_sticky_offsets(view)

        h1, h2 = layout.HEADING_HEIGHTS[1], layout.HEADING_HEIGHTS[2]
        assert offsets == [0.0, h1, h1 + h2]
        assert sticky_top(sections[1].heading) == h1
        assert sections[1].heading["data-toc-id"] == "1"


class TestTableOfContents:
    """Tests for the TOC panel."""

    def test_one_entry_per_heading_in_order(self, make_view: ViewFactory) -> None:
        view = make_view("* Alpha\n** Beta\n* Gamma")
        build_sections(view)
        set_sticky_offsets(view)

        entries = build_toc(view)

        assert [(entry.label, entry.level) for entry in entries] == [("Alpha", 1), ("Beta", 2), ("Gamma", 1)]
        nav = view.soup.select_one("nav.org-toc")
        assert nav is not None
        assert nav.select_one(".toc-header").get_text() == "Contents"
        assert [item["class"] for item in nav.select(".toc-item")][1] == ["toc-item", "toc-level-2"]
        assert has_class(view.body, "has-toc")

    def test_labels_strip_toggle_glyph(self, make_view: ViewFactory) -> None:
        view = make_view("* TODO Write :tag:")
        build_sections(view)
        set_sticky_offsets(view)

        (entry,) = build_toc(view)

        assert TOGGLE_EXPANDED not in entry.label
        assert entry.label == "TODO Write tag"

    def test_entry_click_scrolls_heading_into_view(self, make_view: ViewFactory) -> None:
        view = make_view("* A\n" + "line of text\n" * 5 + "* B")
        build_sections(view)
        set_sticky_offsets(view)
        entries = build_toc(view)

        event = view.click(entries[1].item)

        assert event.default_prevented
        assert view.layout.top(entries[1].heading) == 0

    def test_no_headings_means_no_toc(self, make_view: ViewFactory) -> None:
        view = make_view("Only prose here.")

        result = enhance_document(view)

        assert result.toc == []
        assert result.scroll_spy is None
        assert view.soup.select_one("nav.org-toc") is None
        assert not has_class(view.body, "has-toc")


class TestScrollSpy:
    """Tests for the throttled scroll spy."""

    def _document(self, make_view: ViewFactory) -> tuple[DocumentView, Any]:
        text = "* One\n" + "para\n\n" * 10 + "* Two\n" + "para\n\n" * 10 + "* Three"
        view = make_view(text, scheduler=FrameScheduler())
        return view, enhance_document(view)

    def test_initial_active_entry(self, make_view: ViewFactory) -> None:
        view, result = self._document(make_view)

        active = view.soup.select(".toc-item.active")
        assert [item.get_text() for item in active] == ["One"]
        assert result.scroll_spy.active is result.sections[0].heading

    def test_scroll_events_are_throttled_per_frame(self, make_view: ViewFactory) -> None:
        view, result = self._document(make_view)
        two = result.sections[1].heading

        offset = view.layout.document_offset(two)
        view.scroll_to(offset - 50)
        view.scroll_to(offset - 20)
        view.scroll_to(offset)

        assert view.scheduler.pending == 1
        assert result.scroll_spy.active is result.sections[0].heading

        view.scheduler.run_frame()

        assert result.scroll_spy.active is two
        assert [item.get_text() for item in view.soup.select(".toc-item.active")] == ["Two"]
        assert result.scroll_spy.ticking is False

    def test_last_heading_above_line_wins(self, make_view: ViewFactory) -> None:
        view, result = self._document(make_view)

        view.scroll_to(view.layout.document_offset(result.sections[2].heading))
        view.scheduler.run_frame()

        assert result.scroll_spy.active is result.sections[2].heading
        assert len(view.soup.select(".toc-item.active")) == 1

    def test_active_entry_is_revealed_in_panel(self, make_view: ViewFactory) -> None:
        view, result = self._document(make_view)

        view.scroll_to(view.layout.document_offset(result.sections[1].heading))
        view.scheduler.run_frame()

        revealed = view.layout.panel_reveals[-1]
        assert has_class(revealed, "toc-item")
        assert revealed["data-toc-id"] == "1"


class TestFileReferences:
    """Tests for file reference detection."""

    def test_classification_table(self) -> None:
        assert classify_extension("org") is FileKind.DOC_LINK
        assert classify_extension("MD") is FileKind.DOC_OTHER
        assert classify_extension("ts") is FileKind.CODE
        assert classify_extension("yaml") is FileKind.CONFIG
        assert classify_extension("csv") is FileKind.GENERIC
        assert classify_extension("exe") is None

    def test_finds_paths_with_line_numbers(self) -> None:
        matches = find_file_references("see src/app/main.py:42, then docs/guide.org.")

        refs = [reference for _, _, reference in matches]
        assert [(ref.path, ref.line, ref.kind) for ref in refs] == [
            ("src/app/main.py", 42, FileKind.CODE),
            ("docs/guide.org", None, FileKind.DOC_LINK),
        ]

    def test_urls_and_unknown_extensions_are_ignored(self) -> None:
        assert find_file_references("visit https://example.com/a.html or run app.exe") == []

    def test_code_span_and_doc_link(
        self,
        make_view: ViewFactory,
        view_channel: MessageChannel,
        sent_messages: list[dict[str, Any]],
    ) -> None:
        view = make_view("Edit src/main.ts and README.org today.", channel=view_channel)

        references = linkify_file_references(view)

        assert [ref.path for ref in references] == ["src/main.ts", "README.org"]
        span = view.soup.select_one(".file-ref-code")
        assert span.name == "span"
        assert span.get_text() == "src/main.ts"
        link = view.soup.select_one(".file-ref-doc-link")
        assert link.name == "a"
        assert link["data-path"] == "README.org"
        assert view.article.find("p").get_text() == "Edit src/main.ts and README.org today."

        view.click(span)
        assert sent_messages == []

        event = view.click(link)

        assert event.default_prevented
        assert sent_messages == [{"command": "openFile", "path": "README.org"}]

    def test_code_and_links_are_skipped(self, make_view: ViewFactory) -> None:
        view = make_view("Run ~setup.py~ or read [[https://x.org/a.md][notes.md]] and =conf.yaml=")

        assert linkify_file_references(view) == []

    def test_file_ref_in_heading_does_not_toggle(self, make_view: ViewFactory, view_channel: MessageChannel) -> None:
        view = make_view("* See NOTES.org\nbody", channel=view_channel)
        result = enhance_document(view)

        view.click(view.soup.select_one(".file-ref"))

        assert result.sections[0].state is SectionState.EXPANDED


class TestStaleView:
    """Tests for generation guards on the view."""

    def test_stale_view_ignores_clicks_and_frames(
        self, make_view: ViewFactory, view_channel: MessageChannel, sent_messages: list[dict[str, Any]]
    ) -> None:
        current = {"generation": 1}
        view = make_view(
            "* A\nREADME.org\n* B",
            channel=view_channel,
            generation=1,
            is_current=lambda generation: generation == current["generation"],
        )
        result = enhance_document(view)
        view.scroll_to(1000)

        current["generation"] = 2
        view.scheduler.run_frame()
        view.click(view.soup.select_one(".file-ref-doc-link"))
        view.click(result.sections[0].heading)

        assert result.scroll_spy.active is result.sections[0].heading
        assert sent_messages == []
        assert result.sections[0].state is SectionState.EXPANDED


class TestDocMapPanel:
    """Tests for the doc-map panel."""

    def _render(self, page_for: Callable[..., str], current_file: str) -> DocumentView:
        view = DocumentView(page_for("* A", current_file=current_file))
        files = [
            DocFileEntry(name="README.org", path="README.org", layer="strategic", dir=""),
            DocFileEntry(name="README.org", path="docs/README.org", layer="strategic", dir="docs"),
            DocFileEntry(name="xREADME.org", path="docs/deep/xREADME.org", layer="other", dir="docs/deep"),
        ]
        render_doc_map(view, DocFileMapResponse(files=files))
        return view

    def test_only_the_exact_current_file_is_marked(self, page_for: Callable[..., str]) -> None:
        view = self._render(page_for, "docs/README.org")

        current = view.soup.select(".doc-map-entry.current")

        assert [entry["data-path"] for entry in current] == ["docs/README.org"]

    def test_root_file_is_not_matched_by_suffix(self, page_for: Callable[..., str]) -> None:
        view = self._render(page_for, "README.org")

        current = view.soup.select(".doc-map-entry.current")

        assert [entry["data-path"] for entry in current] == ["README.org"]

    def test_empty_map(self, page_for: Callable[..., str]) -> None:
        view = DocumentView(page_for("* A"))

        render_doc_map(view, DocFileMapResponse(files=[]))

        assert view.soup.select_one(".doc-map-empty") is not None
        assert view.soup.select(".doc-map-entry") == []


class TestHighlightCode:
    """Tests for code block syntax highlighting."""

    def test_src_block_tokens_are_wrapped(self, make_view: ViewFactory) -> None:
        view = make_view("#+BEGIN_SRC python\ndef f():\n    return 1\n#+END_SRC")

        (code,) = highlight_code(view)

        assert has_class(code, HIGHLIGHT_CLASS)
        assert code.select_one("span.k").get_text() == "def"
        assert code.select_one("span.nf").get_text() == "f"
        assert code.get_text() == "def f():\n    return 1"

    def test_unknown_language_is_left_alone(self, make_view: ViewFactory) -> None:
        view = make_view("#+BEGIN_SRC no-such-language\nx = 1\n#+END_SRC")

        assert highlight_code(view) == []
        code = view.soup.select_one("pre code")
        assert code.find("span") is None
        assert not has_class(code, HIGHLIGHT_CLASS)

    def test_blocks_without_language_are_skipped(self, make_view: ViewFactory) -> None:
        view = make_view("#+BEGIN_SRC\nplain\n#+END_SRC\n: fixed width")

        assert highlight_code(view) == []

    def test_enhance_highlights_once(self, make_view: ViewFactory) -> None:
        view = make_view("* Code\n#+BEGIN_SRC sh\necho hi\n#+END_SRC")

        result = enhance_document(view)

        assert len(result.highlighted) == 1
        assert highlight_code(view) == []
        assert token_css_class(Keyword.Reserved) == "kr"

    def test_stylesheet_is_scoped_to_preview(self) -> None:
        css = highlight_stylesheet()

        assert ".org-preview code.highlight .k" in css
