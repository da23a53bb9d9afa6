"""Piecemeal - Pieces an HTML document together from disparate components.

Elements in a source HTML template carry marker attributes naming files to
embed (raw markup, Markdown, Sass) or metadata to insert. The assembled
document can be beautified or minified before it is written out.
"""

import logging

__version__ = "0.1.0"


def _setup_logging(*, verbose: bool = False) -> None:
    """Configure console logging for a command-line run."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_formatter = logging.Formatter("%(levelname)s: %(message)s")
    console_handler.setFormatter(console_formatter)

    root_logger.addHandler(console_handler)

    logging.debug("Logging configured (verbose=%s)", verbose)
