"""
Configuration loader for n64map.

Loads YAML files that override the built-in range tables and the trace
annotation settings.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Tuple
from pathlib import Path
import logging

import yaml

from .address.address_map import (
    AddressMapConfig,
    AddressRange,
    SEGMENTS,
    REGIONS,
    SUBREGIONS,
    PHYSICAL_MASK,
)

logger = logging.getLogger(__name__)


@dataclass
class AnnotationConfig:
    """
    Trace annotation settings.

    The defaults reproduce the standard column layout:
        CPU 0R.RDRM       0x00000000 <rest of line>
    """
    column_width: int = 12           # Width of the short-string column
    address_mask: int = 0xFFFFFFFF   # Applied to the 64-bit trace value

    def validate(self) -> None:
        """Validate configuration values."""
        if self.column_width < 1:
            raise ValueError("column_width must be at least 1")
        if not (0 < self.address_mask <= 0xFFFFFFFF):
            raise ValueError("address_mask must be a non-zero 32-bit value")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "column_width": self.column_width,
            "address_mask": self.address_mask,
        }


@dataclass
class N64MapConfig:
    """Top-level configuration: address tables plus annotation settings."""
    address_map: AddressMapConfig = field(default_factory=AddressMapConfig)
    annotation: AnnotationConfig = field(default_factory=AnnotationConfig)

    def validate(self) -> None:
        self.annotation.validate()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for YAML serialization."""
        return {
            "address_map": {
                "physical_mask": self.address_map.physical_mask,
                "segments": _table_to_list(self.address_map.segments),
                "regions": _table_to_list(self.address_map.regions),
                "subregions": _table_to_list(self.address_map.subregions),
            },
            "annotation": self.annotation.to_dict(),
        }

    def save(self, path: Path) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


def _table_to_list(table: Tuple[AddressRange, ...]) -> List[Dict[str, Any]]:
    return [
        {
            "start": entry.start,
            "end": entry.end,
            "short": entry.short_name,
            "name": entry.long_name,
        }
        for entry in table
    ]


def parse_addr(val: Any, default: Optional[int] = None) -> int:
    """Parse address value (int or string like '0x1FC00000')."""
    if val is None:
        if default is None:
            raise ValueError("address value is required")
        return default
    if isinstance(val, bool):
        raise ValueError(f"Invalid address value: {val!r}")
    if isinstance(val, int):
        return val
    if isinstance(val, str):
        return int(val, 0)  # Auto-detect base (0x for hex)
    raise ValueError(f"Invalid address value: {val!r}")


def parse_int(data: Dict[str, Any], key: str, default: int) -> int:
    """
    Parse an integer setting (int or numeric string).

    A missing key gives default; a key present with null, a bool or any
    other non-numeric value is rejected.

    Raises:
        ValueError: If the value is not an integer.
    """
    if key not in data:
        return default
    val = data[key]
    if isinstance(val, int) and not isinstance(val, bool):
        return val
    if isinstance(val, str):
        try:
            return int(val, 0)
        except ValueError:
            pass
    raise ValueError(f"{key} must be an integer, got {val!r}")


def _parse_range(entry: Dict[str, Any], table_name: str) -> AddressRange:
    """Parse one table entry."""
    if not isinstance(entry, dict):
        raise ValueError(f"{table_name}: expected a mapping, got {entry!r}")
    try:
        short = entry["short"]
    except KeyError:
        raise ValueError(f"{table_name}: entry {entry!r} has no 'short' code")
    return AddressRange(
        start=parse_addr(entry.get("start")),
        end=parse_addr(entry.get("end")),
        short_name=str(short),
        long_name=str(entry.get("name", short)),
    )


def _parse_table(
    data: Dict[str, Any], key: str, default: Tuple[AddressRange, ...]
) -> Tuple[AddressRange, ...]:
    if key not in data or data[key] is None:
        return default
    entries = data[key]
    if not isinstance(entries, list):
        raise ValueError(f"{key} must be a list of ranges")
    return tuple(_parse_range(entry, key) for entry in entries)


def _parse_address_map_config(data: Dict[str, Any]) -> AddressMapConfig:
    """Parse YAML data into AddressMapConfig."""
    return AddressMapConfig(
        segments=_parse_table(data, "segments", SEGMENTS),
        regions=_parse_table(data, "regions", REGIONS),
        subregions=_parse_table(data, "subregions", SUBREGIONS),
        physical_mask=parse_addr(data.get("physical_mask"), PHYSICAL_MASK),
    )


def _parse_annotation_config(data: Dict[str, Any]) -> AnnotationConfig:
    """Parse YAML data into AnnotationConfig."""
    config = AnnotationConfig(
        column_width=parse_int(data, "column_width", 12),
        address_mask=parse_addr(data.get("address_mask"), 0xFFFFFFFF),
    )
    config.validate()
    return config


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ValueError(f"{key} must be a mapping")
    return section


def _parse_config(data: Optional[Dict[str, Any]]) -> N64MapConfig:
    data = data or {}
    if not isinstance(data, dict):
        raise ValueError("config root must be a mapping")
    config = N64MapConfig(
        address_map=_parse_address_map_config(_section(data, "address_map")),
        annotation=_parse_annotation_config(_section(data, "annotation")),
    )
    config.validate()
    return config


def load_config(config_path: str | Path) -> N64MapConfig:
    """
    Load configuration from YAML file.

    Example:
        ```yaml
        address_map:
          regions:
            - {start: 0x00000000, end: 0x03FFFFFF, short: R, name: RDRAM}
        annotation:
          column_width: 16
        ```

    Omitted tables keep their built-in values.

    Args:
        config_path: Path to YAML configuration file.

    Returns:
        N64MapConfig instance.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If an entry is malformed.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    config = _parse_config(data)
    logger.debug("loaded config from %s", path)
    return config


def get_default_config() -> N64MapConfig:
    """Get default configuration."""
    return N64MapConfig()
