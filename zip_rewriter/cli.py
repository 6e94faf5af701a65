"""
Command-line interface for the zip reference rewriter.

    zip-rewriter refs book.zip                 # list references per member
    zip-rewriter unpack book.zip --output out  # extract with references rewritten
"""

import argparse
import logging
import sys
import urllib.parse
import zipfile
from pathlib import Path

from .archive import ZipArchive, relative_token
from .config import DEFAULT_OUTPUT, DEFAULT_PREFIX, LOGGER_NAME
from .logging_setup import _setup_logging
from .utils import resolve

log = logging.getLogger(LOGGER_NAME)


def parse_args(argv=None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="zip-rewriter",
        description="Discover and rewrite archive-relative references in the "
                    "CSS, HTML and XML members of a zip archive.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="The default --prefix can also be set via the ZIP_REWRITER_PREFIX env var.",
    )
    parser.add_argument(
        "--debug", action="store_true",
        help="Enable verbose debug logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    refs = sub.add_parser("refs", help="List the references made by each member")
    refs.add_argument("archive", help="Path to the zip archive")
    refs.add_argument(
        "members", nargs="*",
        help="Members to inspect (default: every member)",
    )

    unpack = sub.add_parser("unpack", help="Extract the archive with references rewritten")
    unpack.add_argument("archive", help="Path to the zip archive")
    unpack.add_argument(
        "--output", default=DEFAULT_OUTPUT,
        help=f"Output directory (default: {DEFAULT_OUTPUT})",
    )
    unpack.add_argument(
        "--prefix", default=DEFAULT_PREFIX,
        help="Rewrite references to PREFIX + archive path instead of "
             "paths relative to each document",
    )
    unpack.add_argument(
        "--no-progress", dest="progress", action="store_false", default=True,
        help="Disable the progress bar",
    )
    return parser.parse_args(argv)


def prefix_token(prefix: str):
    """Token scheme mapping every archive path to ``prefix + quoted path``."""
    def _token(document: str, path: str) -> str:
        return prefix + urllib.parse.quote(path)
    return _token


def _list_references(archive: ZipArchive, members: list) -> None:
    for name in members or archive.names():
        refs = archive.references(name)
        if not refs:
            continue
        print(name)
        for ref in refs:
            print(f"  {ref} -> {resolve(name, ref)}")


def main(argv=None) -> int:
    """
    Main entry point for the CLI.
    """
    args = parse_args(argv)
    _setup_logging(debug=args.debug)

    try:
        with ZipArchive(args.archive) as archive:
            if args.command == "refs":
                _list_references(archive, args.members)
            else:
                token_for = prefix_token(args.prefix) if args.prefix else relative_token
                output_dir = Path(args.output)
                output_dir.mkdir(parents=True, exist_ok=True)
                archive.unpack(output_dir, token_for, progress=args.progress)
    except (zipfile.BadZipFile, KeyError, OSError) as exc:
        log.error("Cannot process %s: %s", args.archive, exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
