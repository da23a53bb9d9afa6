"""Document I/O: loading text, parsing and serializing HTML, writing output.

lxml's HTML parser is permissive: unclosed tags are closed, missing
``<html>``/``<head>``/``<body>`` elements are inferred, and malformed markup
never raises. The tree it returns is mutated in place by the substitution
passes and then serialized back to text.
"""

from __future__ import annotations

import logging
from pathlib import Path

from lxml import etree
from lxml import html as lxml_html
from lxml.html import HtmlElement

logger = logging.getLogger(__name__)

_EMPTY_DOCUMENT = "<html><head></head><body></body></html>"

# libxml2 otherwise invents an HTML 4.0 doctype for documents without one
_PARSER = lxml_html.HTMLParser(default_doctype=False, encoding="utf-8")


def read_text_file(path: Path) -> str:
    """Read a whole file as UTF-8 text.

    Raises:
        FileNotFoundError: If the path does not exist.
        OSError: If the path cannot be read (directory, permissions) or is
            not valid UTF-8.
    """
    logger.debug("Reading %s", path)
    try:
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        msg = f"{path} is not valid UTF-8 (byte {exc.start}: {exc.reason})"
        raise OSError(msg) from exc


def parse_document(text: str) -> HtmlElement:
    """Parse HTML text into a mutable document tree.

    Args:
        text: Full HTML document or fragment, possibly malformed.

    Returns:
        The ``<html>`` root element. Fragments are wrapped in the implied
        document structure.
    """
    if not text or not text.strip():
        # lxml refuses empty documents; an empty page is still a page.
        text = _EMPTY_DOCUMENT
    try:
        return _document_fromstring(text)
    except (etree.ParserError, etree.XMLSyntaxError):
        # Only a doctype, comments or processing instructions: no elements.
        # Appending an empty document keeps those as siblings of <html>.
        return _document_fromstring(text + _EMPTY_DOCUMENT)


def _document_fromstring(text: str) -> HtmlElement:
    # Bytes, so an XML prolog with an encoding declaration is accepted
    return lxml_html.document_fromstring(
        text.encode("utf-8"), parser=_PARSER, ensure_head_body=True
    )


def serialize_document(root: HtmlElement) -> str:
    """Serialize the whole document, including any ``<!DOCTYPE>``."""
    return lxml_html.tostring(root.getroottree(), encoding="unicode")


def write_output(path: Path, text: str) -> None:
    """Write the final document, creating missing parent directories.

    Existing files are truncated and overwritten.

    Raises:
        OSError: If the directory cannot be created or the file written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logger.debug("Wrote %d characters to %s", len(text), path)
