"""
__main__.py – CLI entry-point for the binlayout package.

Usage:  python -m binlayout [-v] [-D NAME=value]... LAYOUT OUTPUT

Reads the layout script LAYOUT and assembles the binary image OUTPUT.
OUTPUT is created, or truncated if it already exists.

Layout script
-------------
One statement per line, ``#`` starts a comment:

  <offset> : <name> : <function> [, <arg>]...

  0      : hdr  : file, "header.bin"
  0x100  : body : file, BODY_PATH
  $body.end : _ : crc16, "ibm_sdlc", $body.start, $body.size

Constants
---------
``-D NAME=value`` (NAME uses only A-Z and _) defines a constant that scripts
reference by bare name, as a path/URL/algorithm string or a decimal number.
"""

from __future__ import annotations

import argparse
import re
import sys


_CONST_NAME_RE = re.compile(r"[A-Z_]+", re.ASCII)


def _parse_define(text: str) -> tuple[str, str]:
    """Split a ``NAME=value`` argument, validating NAME."""
    name, sep, value = text.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(
            f"invalid KEY=value: no '=' found in '{text}'")
    if not _CONST_NAME_RE.fullmatch(name):
        raise argparse.ArgumentTypeError(f"Invalid name of key '{name}'")
    return name, value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m binlayout",
        description="A tool to combine binary files according to a layout script.",
    )
    parser.add_argument("layout", metavar="LAYOUT",
                        help="The path to the file to read layout from.")
    parser.add_argument("output", metavar="OUTPUT",
                        help="The path to the file to output.")
    parser.add_argument("-D", dest="defines", action="append", default=[],
                        type=_parse_define, metavar="NAME=value",
                        help="Define a constant (may be repeated).")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Print each statement as it is executed.")
    return parser


def main(argv: list[str] | None = None) -> int:
    from binlayout.errors import LayoutError
    from binlayout.interpreter import assemble_layout

    parser = _build_parser()
    args   = parser.parse_args(argv)
    consts = dict(args.defines)

    try:
        variables = assemble_layout(args.layout, args.output,
                                    consts=consts, verbose=args.verbose)
    except (LayoutError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.verbose:
        for name, start, size, end in variables.regions():
            print(f"{name:<16} start={start:#010x} size={size:<8d} end={end:#010x}")
    print("Successfully written.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
