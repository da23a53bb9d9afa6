"""Command-line entry point.

Usage:
    piecemeal -i src/index.html -o dist/index.html            # assemble
    piecemeal -i src/index.html -o dist/index.html --minify   # and minify
    piecemeal -i src/index.html -o dist/index.html --beautify # and re-indent
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

from piecemeal import __version__, _setup_logging
from piecemeal.config import BuildOptions, PostProcess
from piecemeal.pipeline import build
from piecemeal.producers import StylesheetCompileError

if TYPE_CHECKING:
    from collections.abc import Sequence

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser.

    ``--beautify`` and ``--minify`` share one destination inside a mutually
    exclusive group, so asking for both is a usage error.
    """
    parser = argparse.ArgumentParser(
        prog="piecemeal",
        description=(
            "Piece an HTML file together from a template and the raw, "
            "Markdown and Sass files its elements reference."
        ),
    )
    parser.add_argument(
        "-i",
        "--input",
        required=True,
        type=Path,
        metavar="PATH",
        help="The input file.",
    )
    parser.add_argument(
        "-o",
        "--output",
        required=True,
        type=Path,
        metavar="PATH",
        help="The output file. Missing directories are created.",
    )

    post = parser.add_mutually_exclusive_group()
    post.add_argument(
        "-b",
        "--beautify",
        dest="post_process",
        action="store_const",
        const=PostProcess.BEAUTIFY,
        help="Beautify the resulting source.",
    )
    post.add_argument(
        "-m",
        "--minify",
        dest="post_process",
        action="store_const",
        const=PostProcess.MINIFY,
        help="Minify the resulting source, including inline CSS and JS.",
    )
    parser.set_defaults(post_process=PostProcess.NONE)

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log each substitution pass.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def _options_from_args(args: argparse.Namespace, cwd: Path) -> BuildOptions:
    """Turn parsed arguments into build options with absolute paths."""
    return BuildOptions(
        input_path=cwd / args.input,
        output_path=cwd / args.output,
        post_process=args.post_process,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point for piecemeal."""
    args = _build_parser().parse_args(argv)

    _setup_logging(verbose=args.verbose)
    options = _options_from_args(args, cwd=Path.cwd())

    try:
        output_path = build(options)
    except (StylesheetCompileError, OSError) as exc:
        err_console.print(f"[red]Error:[/] {escape(str(exc))}")
        sys.exit(1)

    console.print(f"[green]Wrote[/] {escape(str(output_path))}")


if __name__ == "__main__":
    main()
