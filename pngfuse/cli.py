#!/usr/bin/env python3
"""Command-line interface for pngfuse.

This module contains the argument parser and main() function for the
pngfuse CLI tool. It decides between fusing, extracting, listing and
cleaning, and reports results and errors to the user.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pngfuse.core import clean, fuse, list_subfiles, sunder
from pngfuse.errors import PNGFuseError
from pngfuse.types import __version__


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the pngfuse CLI."""
    parser = argparse.ArgumentParser(
        prog="pngfuse",
        description="Fuse subfiles into PNG metadata.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Specify multiple files to perform a fusion into the first PNG listed,
or specify a single fused PNG to extract its subfiles (without removing them).

Examples:
  # Fuse two files into a copy of host.png (writes host.fused.png)
  pngfuse host.png notes.txt archive.zip

  # Fuse into host.png itself
  pngfuse -m host.png notes.txt

  # Extract every subfile into the current directory
  pngfuse host.fused.png

  # List subfiles
  pngfuse -l host.fused.png

  # Remove subfiles (writes host.png back out from host.fused.png)
  pngfuse -c host.fused.png
""",
    )

    parser.add_argument(
        "files",
        nargs="*",
        help="fuse-host.png followed by the files to fuse, or fused PNGs to inspect",
    )
    parser.add_argument(
        "-l",
        "--list",
        action="store_true",
        help="List the subfiles present in a fused PNG",
    )
    parser.add_argument(
        "-c",
        "-r",
        "--clean",
        "--remove",
        dest="clean",
        action="store_true",
        help="Remove all subfiles from a fused PNG",
    )
    parser.add_argument(
        "-m",
        "--overwrite",
        "--modify",
        dest="overwrite",
        action="store_true",
        help="Modify the input files when fusing or cleaning instead of creating new ones",
    )
    parser.add_argument(
        "-o",
        "--output",
        metavar="PATH",
        help="Custom output path for the result of a fuse or clean operation",
    )
    parser.add_argument(
        "-d",
        "--directory",
        default=".",
        help="Directory to extract subfiles into (default: current directory)",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=None,
        help="Number of threads used to compress subfiles (default: CPU count)",
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Check that the result still decodes as a PNG before writing it",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the pngfuse CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.overwrite and args.output:
        parser.error("cannot specify both overwrite mode and a custom output path")
    if args.clean and args.output and len(args.files) > 1:
        parser.error("--output can only be used when cleaning a single file")
    if args.output and not args.clean and (args.list or len(args.files) == 1):
        parser.error("--output needs a fuse or clean operation")
    if args.jobs is not None and args.jobs < 1:
        parser.error("--jobs must be at least 1")

    if not args.files:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        if not (args.list or args.clean):
            if len(args.files) == 1:
                for path in sunder(args.files[0], args.directory):
                    print(f"Extracted {path}")
            else:
                out_path = fuse(
                    args.files,
                    overwrite=args.overwrite,
                    output=args.output,
                    jobs=args.jobs,
                    verify=args.verify,
                )
                count = len(args.files) - 1
                print(f"Fused {count} file{'' if count == 1 else 's'} → {out_path}")
        else:
            for file in args.files:
                if len(args.files) > 1:
                    # Say which of several files the following lines are about
                    print(f"{Path(file).name}:")
                if args.list:
                    for subfile in list_subfiles(file):
                        print(f"{subfile.name} : {len(subfile)} bytes")
                if args.clean:
                    removed, _ = clean(
                        file,
                        overwrite=args.overwrite,
                        output=args.output,
                        verify=args.verify,
                    )
                    print(f"{removed} subfile{'' if removed == 1 else 's'} removed.")
        return 0

    except (PNGFuseError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
