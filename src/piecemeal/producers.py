"""Content producers: one callable per marker kind.

File producers take ``(element, path)`` and return the markup to place inside
the element. Metadata producers take ``(element)`` only. The substitution
engine owns the DOM mutation; producers only compute content.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from email.utils import formatdate
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING

import markdown
import sass

from piecemeal.config import MarkdownConfig
from piecemeal.document import read_text_file

if TYPE_CHECKING:
    from lxml.html import HtmlElement

    from piecemeal.config import BuildOptions
    from piecemeal.substitution import FileProducer, MetadataProducer

logger = logging.getLogger(__name__)


class StylesheetCompileError(Exception):
    """Sass compilation failed for an embedded stylesheet."""

    def __init__(self, message: str, path: Path) -> None:
        self.path = path
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.args[0]}\n  Stylesheet: {self.path}"


# ---------------------------------------------------------------------------
# File-based producers
# ---------------------------------------------------------------------------
def embed_raw(element: HtmlElement, path: Path) -> str:
    """Return the file's contents unchanged, to be inserted as markup."""
    return read_text_file(path)


def embed_markdown(
    element: HtmlElement,
    path: Path,
    *,
    config: MarkdownConfig | None = None,
) -> str:
    """Render a Markdown file to HTML.

    Args:
        element: Target element (unused; content only depends on the file).
        path: Markdown source file.
        config: Extensions and output format. Defaults to ``MarkdownConfig()``.

    Returns:
        Rendered HTML markup.
    """
    if config is None:
        config = MarkdownConfig()

    source = read_text_file(path)
    logger.debug("Rendering Markdown %s", path)
    return markdown.markdown(
        source,
        extensions=config.extensions,
        output_format=config.output_format,
    )


def embed_sass(
    element: HtmlElement,
    path: Path,
    *,
    output_style: str = "expanded",
) -> str:
    """Compile a Sass/SCSS file to plain CSS.

    ``@import`` and ``@use`` resolve relative to the stylesheet's directory.
    Files ending in ``.sass`` are compiled with the indented syntax.

    Raises:
        FileNotFoundError: If the stylesheet does not exist.
        StylesheetCompileError: If libsass rejects the source.
    """
    path = Path(path)
    source = read_text_file(path)
    logger.debug("Compiling stylesheet %s", path)
    try:
        return sass.compile(
            string=source,
            include_paths=[str(path.parent)],
            output_style=output_style,
            indented=path.suffix == ".sass",
        )
    except sass.CompileError as exc:
        raise StylesheetCompileError(str(exc).strip(), path) from exc


# ---------------------------------------------------------------------------
# Metadata producers
# ---------------------------------------------------------------------------
def metadata_generation_date(
    element: HtmlElement,
    *,
    clock: Callable[[], float] = time.time,
) -> str:
    """Return the current time as an RFC 7231 HTTP-date.

    Example: ``Wed, 21 Oct 2015 07:28:00 GMT``.
    """
    return formatdate(clock(), usegmt=True)


@dataclass(frozen=True)
class Producers:
    """The producer used for each marker kind."""

    raw: FileProducer
    markdown: FileProducer
    sass: FileProducer
    generation_date: MetadataProducer


def make_producers(options: BuildOptions) -> Producers:
    """Bind producer settings from the build options."""
    return Producers(
        raw=embed_raw,
        markdown=partial(embed_markdown, config=options.markdown),
        sass=partial(embed_sass, output_style=options.sass.output_style),
        generation_date=metadata_generation_date,
    )
