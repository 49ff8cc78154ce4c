#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docbridge/cli.py
"""Command-line interface for docbridge.

Reads a Markdown file, builds the document tree and writes either the tree
as JSON or the Markdown regenerated from it.

Examples
--------
Regenerate Markdown to stdout:
    $ docbridge notes.md

Dump the document tree:
    $ docbridge notes.md --to json -o notes.json

Write regenerated Markdown and its images elsewhere:
    $ docbridge notes.md -o out/notes.md --output-image-dir out/images
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from docbridge.constants import EXIT_ERROR, EXIT_INPUT_ERROR, EXIT_SUCCESS
from docbridge.core.serialization import document_to_json
from docbridge.exceptions import DocBridgeError
from docbridge.logging_utils import configure_logging
from docbridge.resources import disk_image_loader, disk_image_saver
from docbridge.transformer import MarkdownTransformer
from docbridge.utils.io_utils import write_content
from docbridge.utils.packages import get_package_version

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``docbridge`` command."""
    parser = argparse.ArgumentParser(
        prog="docbridge",
        description="Convert Markdown into a document tree and back.",
    )
    parser.add_argument("input", help="Markdown file to read, or '-' for stdin")
    parser.add_argument("-o", "--out", dest="output", help="Output file (default: stdout)")
    parser.add_argument(
        "--to",
        dest="output_format",
        choices=["markdown", "json"],
        default="markdown",
        help="Output format (default: markdown)",
    )
    parser.add_argument(
        "--image-dir",
        help="Directory image references are resolved against (default: the input file's directory)",
    )
    parser.add_argument(
        "--output-image-dir",
        help="Directory regenerated images are written to (default: the output file's directory)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log output to this file")
    parser.add_argument("--trace", action="store_true", help="Debug logging with timestamps and logger names")
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {get_package_version('docbridge') or 'unknown'}",
    )
    return parser


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    # --trace takes precedence over --log-level
    log_level = logging.DEBUG if parsed_args.trace else getattr(logging, parsed_args.log_level)
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def _read_input(input_arg: str) -> bytes:
    if input_arg == "-":
        return sys.stdin.buffer.read()
    return Path(input_arg).read_bytes()


def main(args: Optional[list[str]] = None) -> int:
    """Execute the command line entry point.

    Parameters
    ----------
    args : list of str, optional
        Arguments to parse instead of ``sys.argv[1:]``

    Returns
    -------
    int
        Process exit status

    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    _setup_logging_level(parsed_args)

    try:
        data = _read_input(parsed_args.input)
    except OSError as e:
        print(f"Error: cannot read input {parsed_args.input}: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    if parsed_args.image_dir:
        image_dir = Path(parsed_args.image_dir)
    elif parsed_args.input != "-":
        image_dir = Path(parsed_args.input).parent
    else:
        image_dir = Path(".")

    if parsed_args.output_image_dir:
        output_image_dir = Path(parsed_args.output_image_dir)
    elif parsed_args.output:
        output_image_dir = Path(parsed_args.output).parent
    else:
        output_image_dir = Path(".")

    transformer = MarkdownTransformer()

    try:
        load_image = disk_image_loader(image_dir, max_size_bytes=transformer.parser_options.max_asset_size_bytes)
        document = transformer.parse_with_loader(data, load_image)
        logger.info(f"Built document with {len(document.elements)} top-level element(s)")

        if parsed_args.output_format == "json":
            result: bytes = document_to_json(document, indent=2).encode("utf-8")
        else:
            result = transformer.generate_with_saver(document, disk_image_saver(output_image_dir))
    except DocBridgeError as e:
        logger.debug("Conversion failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    if parsed_args.output:
        try:
            write_content(result, parsed_args.output)
        except OSError as e:
            print(f"Error: cannot write output {parsed_args.output}: {e}", file=sys.stderr)
            return EXIT_ERROR
        logger.info(f"Wrote {parsed_args.output}")
    else:
        sys.stdout.buffer.write(result)
        sys.stdout.buffer.write(b"\n")
        sys.stdout.flush()

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
