#!/usr/bin/env python3
"""Disassemble a raw 68000 memory image (ROM/BIOS dump) to stdout."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import List, Optional

from .config import load_dasm_config
from .disassembler import Disassembler
from .listing import iter_listing
from .memory import Memory


def _int(text: str) -> int:
    return int(text, 0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Motorola 68000 disassembler")
    parser.add_argument("image", type=Path, help="Raw binary image to disassemble")
    parser.add_argument(
        "--base",
        type=_int,
        default=None,
        help="Address the image is mapped at (default: $M68K_BASE or 0)",
    )
    parser.add_argument(
        "--start", type=_int, default=None, help="First address to disassemble"
    )
    parser.add_argument(
        "--end", type=_int, default=None, help="Stop before this address"
    )
    parser.add_argument(
        "--count", type=int, default=None, help="Maximum number of lines"
    )
    parser.add_argument(
        "--little-endian",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Read words little-endian (default: $M68K_LITTLE_ENDIAN or big-endian)",
    )
    parser.add_argument(
        "--bytes",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Show instruction words next to each line",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log every decoded instruction"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = load_dasm_config()

    verbose = args.verbose or config.trace
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.image.is_file():
        parser.error(f"image not found: {args.image}")

    base = config.base_address if args.base is None else args.base
    little_endian = (
        config.little_endian if args.little_endian is None else args.little_endian
    )
    memory = Memory.load(args.image, start_address=base, little_endian=little_endian)
    dasm = Disassembler(memory)

    for line in iter_listing(dasm, start=args.start, end=args.end, count=args.count):
        print(line.format(show_words=args.bytes))
    return 0


if __name__ == "__main__":
    sys.exit(main())
