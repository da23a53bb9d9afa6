"""The assembly pipeline: load, parse, substitute, serialize, post-process, write."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from piecemeal.document import (
    parse_document,
    read_text_file,
    serialize_document,
    write_output,
)
from piecemeal.postprocess import post_process
from piecemeal.producers import make_producers
from piecemeal.substitution import substitute_all

if TYPE_CHECKING:
    from pathlib import Path

    from piecemeal.config import BuildOptions
    from piecemeal.producers import Producers

logger = logging.getLogger(__name__)


def assemble(options: BuildOptions, producers: Producers | None = None) -> str:
    """Assemble the output document in memory.

    Nothing is written; any failure leaves the filesystem untouched.

    Args:
        options: Input path, post-processing mode and producer settings.
        producers: Override the producers built from ``options``.

    Returns:
        The final HTML text.
    """
    if producers is None:
        producers = make_producers(options)

    root = parse_document(read_text_file(options.input_path))
    count = substitute_all(root, options.base_dir, producers)
    logger.debug("Substituted %d element(s)", count)

    return post_process(serialize_document(root), options.post_process)


def build(options: BuildOptions, producers: Producers | None = None) -> Path:
    """Assemble the document and write it to ``options.output_path``.

    Returns:
        The path written.
    """
    logger.info("Building %s -> %s", options.input_path, options.output_path)
    output_html = assemble(options, producers)

    # Only touch the output location once assembly has succeeded
    write_output(options.output_path, output_html)
    return options.output_path
