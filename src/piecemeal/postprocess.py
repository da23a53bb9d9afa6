"""Optional post-processing of the serialized document.

- beautify: re-indent the HTML with BeautifulSoup
- minify: compress the HTML, including inline CSS and JavaScript, with
  minify-html

Both are lossless with respect to element structure; they differ only in
whitespace, optional tags and quoting.
"""

from __future__ import annotations

import logging

import minify_html
from bs4 import BeautifulSoup

from piecemeal.config import PostProcess

logger = logging.getLogger(__name__)


def beautify(html_content: str) -> str:
    """Pretty-print HTML with one element per line, indented by depth."""
    soup = BeautifulSoup(html_content, "html.parser")
    return soup.prettify()


def minify(html_content: str) -> str:
    """Minify HTML along with embedded ``<style>`` and ``<script>`` content."""
    return minify_html.minify(html_content, minify_css=True, minify_js=True)


def post_process(html_content: str, mode: PostProcess) -> str:
    """Apply the requested post-processing; ``PostProcess.NONE`` passes through."""
    if mode is PostProcess.BEAUTIFY:
        result = beautify(html_content)
    elif mode is PostProcess.MINIFY:
        result = minify(html_content)
    else:
        return html_content

    logger.debug(
        "%s: %d -> %d characters", mode.value, len(html_content), len(result)
    )
    return result
