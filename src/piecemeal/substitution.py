"""Marker-attribute substitution over a parsed document.

Elements carrying one of the marker attributes below have their content
replaced by a content producer. Each marker kind is handled by one sweep
over the document, in a fixed order:

1. ``data-embed`` - file embedded verbatim as markup
2. ``data-embed-markdown`` - file rendered from Markdown
3. ``data-embed-sass`` - file compiled from Sass/SCSS
4. ``data-metadata-generation-date`` - generation timestamp

Later sweeps see the tree as mutated by earlier ones. A sweep never
re-scans content it inserted itself.
"""

# Pattern: Functional Core (DOM in, DOM mutated; producers do the I/O)

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from lxml import html as lxml_html

from piecemeal.document import parse_document

if TYPE_CHECKING:
    from lxml.html import HtmlElement

    from piecemeal.producers import Producers

logger = logging.getLogger(__name__)

EMBED_RAW = "data-embed"
EMBED_MARKDOWN = "data-embed-markdown"
EMBED_SASS = "data-embed-sass"
METADATA_GENERATION_DATE = "data-metadata-generation-date"

MARKER_ATTRIBUTES = (
    EMBED_RAW,
    EMBED_MARKDOWN,
    EMBED_SASS,
    METADATA_GENERATION_DATE,
)

# Elements whose content is raw text in HTML; markup is never parsed inside
_RAW_TEXT_TAGS = frozenset(("script", "style"))

# Markup that is a whole document rather than a fragment
_FULL_DOCUMENT = re.compile(r"^\s*<(?:html|!doctype|\?xml)", re.IGNORECASE)

FileProducer = Callable[["HtmlElement", Path], str]
MetadataProducer = Callable[["HtmlElement"], str]


def resolve_embed_path(base_dir: Path, value: str) -> Path:
    """Resolve a marker's file path against the input document's directory.

    Absolute values are taken relative to ``base_dir`` as well, so
    ``/partials/nav.html`` still names a file under the template's directory.
    """
    path = Path(value)
    if path.anchor:
        path = path.relative_to(path.anchor)
    return Path(base_dir) / path


def set_inner_html(element: HtmlElement, markup: str) -> None:
    """Replace an element's inner content with pre-escaped markup.

    The element keeps its own attributes and tail text. Inside ``<style>``
    and ``<script>`` the markup is stored as literal text.

    Args:
        element: Element whose children and text are replaced.
        markup: HTML to insert. Not escaped.
    """
    for child in list(element):
        element.remove(child)
    element.text = None

    if element.tag in _RAW_TEXT_TAGS or not markup.strip():
        element.text = markup or None
        return

    if _FULL_DOCUMENT.match(markup):
        fragments = _document_fragments(markup)
    else:
        fragments = lxml_html.fragments_fromstring(markup)
    if fragments and isinstance(fragments[0], str):
        element.text = fragments.pop(0)
    element.extend(fragments)


def _document_fragments(markup: str) -> list[str | HtmlElement]:
    """Split a whole document into insertable nodes.

    Children of both ``<head>`` and ``<body>`` are kept, in order. The
    doctype and the ``<html>``/``<head>``/``<body>`` wrappers are dropped.
    """
    nodes: list[HtmlElement] = []
    leading = ""
    for section in parse_document(markup):
        if section.tag not in ("head", "body"):
            nodes.append(section)
            continue
        if section.text and section.text.strip():
            if nodes:
                nodes[-1].tail = (nodes[-1].tail or "") + section.text
            else:
                leading += section.text
        nodes.extend(list(section))
    return [leading, *nodes] if leading else list(nodes)


def _marked_elements(root: HtmlElement, attribute: str) -> list[HtmlElement]:
    """Snapshot every element carrying ``attribute``, in document order."""
    return list(root.xpath(f"//*[@{attribute}]"))


def _is_attached(element: HtmlElement, root: HtmlElement) -> bool:
    """True if ``element`` is still inside the document rooted at ``root``."""
    if element is root:
        return True
    return any(ancestor is root for ancestor in element.iterancestors())


def substitute_file(
    root: HtmlElement,
    attribute: str,
    producer: FileProducer,
    base_dir: Path,
) -> int:
    """Replace the content of every element marked with a file-based marker.

    The attribute value is a path relative to ``base_dir``. The attribute is
    removed before the producer runs, so producers never see it.

    Returns:
        Number of elements substituted.
    """
    elements = _marked_elements(root, attribute)
    logger.debug("%s: %d element(s)", attribute, len(elements))

    count = 0
    for element in elements:
        # An earlier element in this sweep may have replaced our ancestor
        if not _is_attached(element, root):
            logger.debug("%s: skipping element removed by an outer embed", attribute)
            continue

        filename = element.get(attribute)
        del element.attrib[attribute]
        path = resolve_embed_path(base_dir, filename)
        set_inner_html(element, producer(element, path))
        count += 1
    return count


def substitute_metadata(
    root: HtmlElement,
    attribute: str,
    producer: MetadataProducer,
) -> int:
    """Replace the content of every element marked with a metadata marker.

    Any attribute value is ignored.

    Returns:
        Number of elements substituted.
    """
    elements = _marked_elements(root, attribute)
    logger.debug("%s: %d element(s)", attribute, len(elements))

    count = 0
    for element in elements:
        if not _is_attached(element, root):
            continue

        del element.attrib[attribute]
        set_inner_html(element, producer(element))
        count += 1
    return count


def substitute_all(root: HtmlElement, base_dir: Path, producers: Producers) -> int:
    """Run every substitution sweep in the fixed marker order.

    Returns:
        Total number of elements substituted.
    """
    total = 0
    total += substitute_file(root, EMBED_RAW, producers.raw, base_dir)
    total += substitute_file(root, EMBED_MARKDOWN, producers.markdown, base_dir)
    total += substitute_file(root, EMBED_SASS, producers.sass, base_dir)
    total += substitute_metadata(
        root, METADATA_GENERATION_DATE, producers.generation_date
    )
    return total
