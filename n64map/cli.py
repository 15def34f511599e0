#!/usr/bin/env python3
"""
Describe N64 virtual addresses.

Usage:
    python -m n64map 0x80000000              # Print details about an address
    python -m n64map trace.log               # Annotate an Ares instruction trace
    python -m n64map trace.log --config map.yaml
"""

import argparse
import logging
import re
import sys
from typing import List, Optional

import yaml

from .address import SystemAddressMap, LocationFormatter
from .config import N64MapConfig, load_config, get_default_config
from .trace import TraceAnnotator, TraceParseError

logger = logging.getLogger(__name__)

HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")


def parse_address(text: str) -> int:
    """
    Parse the digits after the 0x prefix as a 32-bit address.

    Raises:
        ValueError: If text is not hexadecimal or does not fit 32 bits.
    """
    if not HEX_DIGITS.fullmatch(text):
        raise ValueError(f"not a hexadecimal number: {text!r}")
    value = int(text, 16)
    if value > 0xFFFFFFFF:
        raise ValueError(f"does not fit 32 bits: {text!r}")
    return value


def describe_address(arg: str, address_map: SystemAddressMap) -> int:
    """Print the detailed location of an 0x-prefixed address argument."""
    try:
        address = parse_address(arg[2:])
    except ValueError:
        print(f"Invalid address: {arg}", file=sys.stderr)
        return 1

    location = address_map.classify(address)
    print(LocationFormatter().to_detail_string(location))
    return 0


def annotate_trace(
    filename: str, address_map: SystemAddressMap, config: N64MapConfig
) -> int:
    """Annotate a trace file to stdout."""
    annotator = TraceAnnotator(
        address_map=address_map,
        config=config.annotation,
    )
    try:
        annotator.annotate_file(filename, sys.stdout)
    except (OSError, UnicodeDecodeError, TraceParseError) as e:
        print(f"Error rewriting lines of file {filename}: {e}", file=sys.stderr)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="n64map",
        description="Describe an N64 virtual address or annotate an instruction trace",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  n64map 0xA4040010
  n64map ares_trace.log > annotated.log
  n64map -- -trace.log                  # file name starting with "-"
"""
    )
    parser.add_argument(
        'target',
        nargs='?',
        help='0x-prefixed 32-bit address, or path of a trace file'
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='YAML file with custom range tables / annotation settings'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging on stderr'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args, extra = parser.parse_known_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.target is None and extra:
        args.target = extra.pop(0)
    if extra:
        logger.warning("ignoring extra arguments: %s", " ".join(extra))

    if args.target is None:
        print("Expected a file name or an address as argument", file=sys.stderr)
        return 1

    if args.config:
        try:
            config = load_config(args.config)
            address_map = SystemAddressMap(config.address_map)
        except (OSError, ValueError, yaml.YAMLError) as e:
            print(f"Error loading config {args.config}: {e}", file=sys.stderr)
            return 1
    else:
        config = get_default_config()
        address_map = SystemAddressMap(config.address_map)

    if args.target.startswith("0x"):
        return describe_address(args.target, address_map)
    return annotate_trace(args.target, address_map, config)


if __name__ == '__main__':
    sys.exit(main())
