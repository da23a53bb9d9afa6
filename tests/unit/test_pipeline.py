"""End-to-end tests for assemble() and build() over a small site tree."""

from __future__ import annotations

from email.utils import parsedate_to_datetime
from typing import TYPE_CHECKING

import pytest
from selectolax.lexbor import LexborHTMLParser

from piecemeal.config import BuildOptions, PostProcess
from piecemeal.document import parse_document, serialize_document
from piecemeal.pipeline import assemble, build
from piecemeal.substitution import MARKER_ATTRIBUTES

if TYPE_CHECKING:
    from pathlib import Path

    from tests.conftest import MakeSite

_PAGE = """<!DOCTYPE html>
<html>
<head>
<title>Demo</title>
<style data-embed-sass="styles/main.scss"></style>
</head>
<body>
<div id="raw" data-embed="partials/snippet.html"></div>
<div id="intro" data-embed-markdown="content/intro.md"></div>
<p id="stamp">Generated <span data-metadata-generation-date></span></p>
</body>
</html>
"""

_FILES = {
    "docs/page.html": _PAGE,
    "docs/partials/snippet.html": "<b>hi</b>",
    "docs/content/intro.md": "# Title\n\nSee `data-embed-sass` for styles.\n",
    "docs/styles/main.scss": ".a { .b { color: red; } }\n",
}


def _options(root: Path, **kwargs) -> BuildOptions:
    return BuildOptions(
        input_path=root / "docs" / "page.html",
        output_path=root.parent / "out" / "dist" / "index.html",
        **kwargs,
    )


class TestAssemble:
    """assemble() substitutes every marker kind."""

    def test_no_markers_is_round_trip(self, make_site: MakeSite) -> None:
        source = "<html><body><h1>Plain</h1><p>No markers<p>here</body></html>"
        root = make_site({"docs/page.html": source})

        result = assemble(_options(root))

        assert result == serialize_document(parse_document(source))

    def test_no_marker_attributes_remain(self, make_site: MakeSite) -> None:
        result = assemble(_options(make_site(_FILES)))

        tree = LexborHTMLParser(result)
        for attribute in MARKER_ATTRIBUTES:
            assert tree.css(f"[{attribute}]") == []

    def test_raw_embed_verbatim(self, make_site: MakeSite) -> None:
        result = assemble(_options(make_site(_FILES)))
        assert '<div id="raw"><b>hi</b></div>' in result

    def test_markdown_rendered(self, make_site: MakeSite) -> None:
        result = assemble(_options(make_site(_FILES)))

        intro = LexborHTMLParser(result).css_first("#intro")
        assert intro is not None
        heading = intro.css_first("h1")
        assert heading is not None
        assert heading.text() == "Title"

    def test_markdown_marker_text_not_expanded(self, make_site: MakeSite) -> None:
        """A marker name mentioned in rendered Markdown stays literal text."""
        result = assemble(_options(make_site(_FILES)))
        assert "<code>data-embed-sass</code>" in result

    def test_sass_compiled_into_style(self, make_site: MakeSite) -> None:
        result = assemble(_options(make_site(_FILES)))

        style = LexborHTMLParser(result).css_first("style")
        assert style is not None
        css = style.text()
        assert ".a .b {" in css
        assert "color: red;" in css

    def test_generation_date_is_http_date(self, make_site: MakeSite) -> None:
        result = assemble(_options(make_site(_FILES)))

        span = LexborHTMLParser(result).css_first("#stamp span")
        assert span is not None
        stamp = span.text()
        assert stamp.endswith(" GMT")
        assert parsedate_to_datetime(stamp).utcoffset().total_seconds() == 0

    def test_paths_resolve_against_input_directory(
        self, make_site: MakeSite, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        root = make_site(_FILES)
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        monkeypatch.chdir(elsewhere)

        result = assemble(_options(root))

        assert "color: red;" in result

    def test_minify_and_beautify_same_structure(self, make_site: MakeSite) -> None:
        root = make_site(_FILES)

        minified = assemble(_options(root, post_process=PostProcess.MINIFY))
        beautified = assemble(_options(root, post_process=PostProcess.BEAUTIFY))

        def tags(html_content: str) -> list[str]:
            return [node.tag for node in LexborHTMLParser(html_content).css("*")]

        assert len(minified) < len(beautified)
        assert tags(minified) == tags(beautified)


class TestBuild:
    """build() writes the output only after assembly succeeds."""

    def test_writes_output_creating_directories(self, make_site: MakeSite) -> None:
        options = _options(make_site(_FILES))

        written = build(options)

        assert written == options.output_path
        assert "<b>hi</b>" in written.read_text(encoding="utf-8")

    def test_missing_embed_writes_nothing(self, make_site: MakeSite) -> None:
        files = dict(_FILES)
        del files["docs/partials/snippet.html"]
        options = _options(make_site(files))

        with pytest.raises(FileNotFoundError):
            build(options)

        assert not options.output_path.parent.parent.exists()

    def test_missing_input_raises(self, tmp_path: Path) -> None:
        options = BuildOptions(
            input_path=tmp_path / "nope.html", output_path=tmp_path / "out.html"
        )
        with pytest.raises(FileNotFoundError):
            build(options)
        assert not (tmp_path / "out.html").exists()
