"""Command line interface for the DFXML recorder."""

import argparse
from typing import List, Optional

from . import __version__


def get_parser() -> argparse.ArgumentParser:
    """Build the argument parser for ``dfxml-record``."""
    parser = argparse.ArgumentParser(
        prog="dfxml-record",
        description="Record a program run as a Digital Forensics XML document.",
        formatter_class=argparse.RawTextHelpFormatter
    )

    out_group = parser.add_argument_group("Output Options")
    out_group.add_argument("-o", "--output-file", help="Output file (default: stdout)")
    out_group.add_argument(
        "--dtd", action="store_true", help="Inject a DTD declaring every element used"
    )
    out_group.add_argument(
        "--tempfile-template",
        help="Staging file template for --dtd; trailing X's become a unique suffix"
    )
    out_group.add_argument("-v", "--verbose", action="store_true", help="Show detailed processing logs")

    creator_group = parser.add_argument_group("Creator")
    creator_group.add_argument("--program", default="dfxml-record", help="Program name to report")
    creator_group.add_argument(
        "--program-version", default=__version__, help="Program version to report"
    )
    creator_group.add_argument("--commit", default="", help="Source revision to report")

    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="Command to run and record, e.g. -- ls -l"
    )
    return parser


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Arguments to parse; defaults to sys.argv[1:].

    Returns:
        The parsed argparse Namespace.
    """
    return get_parser().parse_args(argv)
