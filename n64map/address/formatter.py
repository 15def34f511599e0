"""
Text rendering of AddressLocation.

The short form fits a narrow trace column, e.g. ``0R.RDRM`` for
0x80000000 (KSEG0, RDRAM, RDRAM memory-space). The detailed form is a
multi-line dump for single-address queries.
"""

from __future__ import annotations
from typing import Optional

from .address_map import AddressLocation, AddressRange

UNKNOWN_CODE = "?"


class LocationFormatter:
    """Formats AddressLocation instances. Stateless."""

    def __init__(self, unknown: str = UNKNOWN_CODE):
        self.unknown = unknown

    def short_code(self, entry: Optional[AddressRange]) -> str:
        """Short name of entry, or the unknown placeholder."""
        return entry.short_name if entry is not None else self.unknown

    def to_short_string(self, location: AddressLocation) -> str:
        """
        Render ``<segment><region>.<sub>.<sub>...`` in upper case.

        The dot after the region is always present, even without subregions.
        """
        subregions = ".".join(s.short_name for s in location.subregions)
        text = (
            f"{self.short_code(location.segment)}"
            f"{self.short_code(location.region)}"
            f".{subregions}"
        )
        return text.upper()

    def to_detail_string(self, location: AddressLocation) -> str:
        """Render every field of location on its own line."""
        lines = [
            "AddressLocation(",
            f"    virtual_address=0x{location.virtual_address:08X},",
            f"    physical_address=0x{location.physical_address:08X},",
            f"    segment={self._pair(location.segment)},",
            f"    region={self._pair(location.region)},",
        ]
        if location.subregions:
            lines.append("    subregions=[")
            for sub in location.subregions:
                lines.append(f"        {sub.as_pair()!r},")
            lines.append("    ],")
        else:
            lines.append("    subregions=[],")
        lines.append(")")
        return "\n".join(lines)

    @staticmethod
    def _pair(entry: Optional[AddressRange]) -> str:
        return repr(entry.as_pair()) if entry is not None else "None"


_DEFAULT_FORMATTER = LocationFormatter()


def to_short_string(location: AddressLocation) -> str:
    """Short form using the default placeholder."""
    return _DEFAULT_FORMATTER.to_short_string(location)


def to_detail_string(location: AddressLocation) -> str:
    """Detailed form using the default placeholder."""
    return _DEFAULT_FORMATTER.to_detail_string(location)
