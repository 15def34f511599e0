"""
Shared pytest fixtures for n64map tests.

This module provides address maps (built-in, overlapping and deliberately
incomplete), formatters, annotators and trace file factories used across
unit and integration tests.
"""

import pytest
from pathlib import Path
from typing import List

from n64map.address import (
    AddressRange,
    AddressMapConfig,
    SystemAddressMap,
    LocationFormatter,
)
from n64map.config import AnnotationConfig
from n64map.trace import TraceAnnotator


# ==============================================================================
# Address Map Fixtures
# ==============================================================================

@pytest.fixture
def default_map() -> SystemAddressMap:
    """Address map with the built-in N64 tables."""
    return SystemAddressMap()


@pytest.fixture
def overlapping_config() -> AddressMapConfig:
    """
    Small map whose subregion table has a broad range covering a specific one.

    Physical layout (mask 0x1FFFFFFF):
        0x00000000-0x0FFFFFFF  LO
        0x10000000-0x1FFFFFFF  HI  (ALL.. catch-all, DEV1 at 0x10000000-0x100000FF)
    """
    return AddressMapConfig(
        segments=(
            AddressRange(0x00000000, 0x7FFFFFFF, "A", "Lower half"),
            AddressRange(0x80000000, 0xFFFFFFFF, "B", "Upper half"),
        ),
        regions=(
            AddressRange(0x00000000, 0x0FFFFFFF, "L", "LO"),
            AddressRange(0x10000000, 0xFFFFFFFF, "H", "HI"),
        ),
        subregions=(
            AddressRange(0x00000000, 0x0FFFFFFF, "LOWR", "Low memory"),
            AddressRange(0x10000000, 0xFFFFFFFF, "ALL", "Catch-all"),
            AddressRange(0x10000000, 0x100000FF, "DEV1", "Device one"),
        ),
    )


@pytest.fixture
def overlapping_map(overlapping_config) -> SystemAddressMap:
    """Address map built from overlapping_config."""
    return SystemAddressMap(overlapping_config)


@pytest.fixture
def incomplete_config() -> AddressMapConfig:
    """Map covering only KSEG0 / first 16 MB of RDRAM."""
    return AddressMapConfig(
        segments=(AddressRange(0x80000000, 0x9FFFFFFF, "0", "KSEG0"),),
        regions=(AddressRange(0x00000000, 0x00FFFFFF, "R", "RDRAM"),),
        subregions=(AddressRange(0x00000000, 0x00FFFFFF, "RDRM", "RDRAM memory-space"),),
    )


@pytest.fixture
def incomplete_map(incomplete_config) -> SystemAddressMap:
    """Address map built from incomplete_config without validation."""
    return SystemAddressMap(incomplete_config, validate=False)


# ==============================================================================
# Formatting / Annotation Fixtures
# ==============================================================================

@pytest.fixture
def formatter() -> LocationFormatter:
    """Formatter with the default placeholder."""
    return LocationFormatter()


@pytest.fixture
def annotator(default_map) -> TraceAnnotator:
    """Annotator with built-in tables and default column layout."""
    return TraceAnnotator(address_map=default_map, config=AnnotationConfig())


@pytest.fixture
def trace_file_factory(tmp_path):
    """Factory writing trace lines to a file and returning its path."""
    def _create(lines: List[str], name: str = "trace.log") -> Path:
        path = tmp_path / name
        path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        return path
    return _create


@pytest.fixture
def examples_dir() -> Path:
    """Repository examples/ directory."""
    return Path(__file__).resolve().parent.parent / "examples"
