#!/usr/bin/env python3
"""
Address Map Dumper.

Prints the range tables and a coverage report (gaps, overlapping
subregions) for the built-in map or a YAML override.

Usage:
    python tools/dump_address_map.py
    python tools/dump_address_map.py --config examples/config/custom_map.yaml
    python tools/dump_address_map.py --save out/default_map.yaml
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from n64map.address import SystemAddressMap, find_gaps, find_overlaps
from n64map.config import load_config, get_default_config


def print_coverage(address_map: SystemAddressMap) -> None:
    """Print gaps and overlaps of each table."""
    config = address_map.config
    print()
    print("Coverage:")
    for name, table, lo, hi in (
        ("segments", config.segments, 0, config.address_max),
        ("regions", config.regions, 0, config.physical_mask),
        ("subregions", config.subregions, 0, config.physical_mask),
    ):
        gaps = find_gaps(table, lo, hi)
        overlaps = find_overlaps(table)
        print(f"  {name:<10} gaps={len(gaps)} overlaps={len(overlaps)}")
        for start, end in gaps:
            print(f"    gap     0x{start:08X}-0x{end:08X}")
        for first, second in overlaps:
            print(f"    overlap {first.short_name} / {second.short_name}")


def main():
    parser = argparse.ArgumentParser(
        description="Print the N64 address map tables"
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='YAML file with custom range tables'
    )
    parser.add_argument(
        '--save',
        type=str,
        default=None,
        help='Write the effective configuration to this YAML file'
    )
    args = parser.parse_args()

    config = load_config(args.config) if args.config else get_default_config()
    address_map = SystemAddressMap(config.address_map, validate=False)
    address_map.print_map()
    print_coverage(address_map)

    if args.save:
        config.save(Path(args.save))
        print(f"\nSaved configuration to {args.save}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
