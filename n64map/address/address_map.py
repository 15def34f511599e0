"""
System Address Map for the Nintendo 64.

Classifies 32-bit CPU virtual addresses by segment, region and subregion,
following the memory map documented at https://n64brew.dev/wiki/Memory_map.

Address Format (32-bit):
    [31:29] Segment / cache-control bits (stripped for physical lookups)
    [28:0]  Physical address

Segments are matched against the full virtual address so that cached and
uncached mirrors stay distinguishable. Regions and subregions are matched
against the physical (masked) address.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Iterable, List, Tuple
import logging

logger = logging.getLogger(__name__)

ADDRESS_MAX = 0xFFFFFFFF
PHYSICAL_MASK = 0x1FFFFFFF


@dataclass(frozen=True)
class AddressRange:
    """Inclusive address range with a short code and a descriptive name."""
    start: int
    end: int            # Inclusive
    short_name: str     # Fixed-length mnemonic
    long_name: str

    def __post_init__(self) -> None:
        if not (0 <= self.start <= self.end <= ADDRESS_MAX):
            raise ValueError(
                f"Invalid range {self.short_name!r}: "
                f"0x{self.start:X}-0x{self.end:X}"
            )

    def contains(self, address: int) -> bool:
        """Check if address lies within the range (both bounds included)."""
        return self.start <= address <= self.end

    def as_pair(self) -> Tuple[str, str]:
        """Return (short_name, long_name)."""
        return self.short_name, self.long_name

    @property
    def size(self) -> int:
        return self.end - self.start + 1

    def __repr__(self) -> str:
        return (
            f"AddressRange(0x{self.start:08X}-0x{self.end:08X}, "
            f"{self.short_name!r}, {self.long_name!r})"
        )


# =============================================================================
# Built-in tables
# =============================================================================

SEGMENTS: Tuple[AddressRange, ...] = (
    AddressRange(0x00000000, 0x7FFFFFFF, "U", "KUSEG"),
    AddressRange(0x80000000, 0x9FFFFFFF, "0", "KSEG0"),
    AddressRange(0xA0000000, 0xBFFFFFFF, "1", "KSEG1"),
    AddressRange(0xC0000000, 0xDFFFFFFF, "S", "KSSEG"),
    AddressRange(0xE0000000, 0xFFFFFFFF, "3", "KSEG3"),
)

REGIONS: Tuple[AddressRange, ...] = (
    AddressRange(0x00000000, 0x03FFFFFF, "R", "RDRAM"),
    AddressRange(0x04000000, 0x04FFFFFF, "G", "RCP"),
    AddressRange(0x05000000, 0x1FBFFFFF, "P", "PI 1/2"),
    AddressRange(0x1FC00000, 0x1FCFFFFF, "S", "SI"),
    AddressRange(0x1FD00000, 0x7FFFFFFF, "B", "PI 2/2"),
    AddressRange(0x80000000, 0xFFFFFFFF, "U", "Unmapped"),
)

SUBREGIONS: Tuple[AddressRange, ...] = (
    # RDRAM
    AddressRange(0x00000000, 0x03EFFFFF, "RDRM", "RDRAM memory-space"),
    AddressRange(0x03F00000, 0x03F7FFFF, "RDRR", "RDRAM registers"),
    AddressRange(0x03F80000, 0x03FFFFFF, "RDRB", "RDRAM broadcast registers"),

    # RCP (RSP, RDP and the interfaces)
    AddressRange(0x04000000, 0x04000FFF, "RSPD", "RSP Data Memory"),
    AddressRange(0x04001000, 0x04001FFF, "RSPI", "RSP Instruction Memory"),
    AddressRange(0x04002000, 0x0403FFFF, "RSPM", "RSP DMEM/IMEM Mirrors"),
    AddressRange(0x04040000, 0x040BFFFF, "RSPR", "RSP Registers"),
    AddressRange(0x040C0000, 0x040FFFFF, "RCPU", "Unmapped/fatal"),
    AddressRange(0x04100000, 0x041FFFFF, "RDPC", "RDP Command Registers"),
    AddressRange(0x04200000, 0x042FFFFF, "RDPS", "RDP Span Registers"),
    AddressRange(0x04300000, 0x043FFFFF, "InMI", "MIPS Interface"),
    AddressRange(0x04400000, 0x044FFFFF, "InVI", "Video Interface"),
    AddressRange(0x04500000, 0x045FFFFF, "InAI", "Audio Interface"),
    AddressRange(0x04600000, 0x046FFFFF, "InPI", "Peripheral Interface"),
    AddressRange(0x04700000, 0x047FFFFF, "InRI", "RDRAM Interface"),
    AddressRange(0x04800000, 0x048FFFFF, "InSI", "Serial Interface"),
    AddressRange(0x04900000, 0x04FFFFFF, "RCPu", "Unmapped/fatal"),

    # PI
    AddressRange(0x05000000, 0x05FFFFFF, "NDDR", "N64DD Registers"),
    AddressRange(0x06000000, 0x07FFFFFF, "NDDI", "N64DD IPL ROM"),
    AddressRange(0x08000000, 0x0FFFFFFF, "CSRM", "Cartridge SRAM"),
    AddressRange(0x10000000, 0x1FBFFFFF, "CROM", "Cartridge ROM"),

    # SI
    AddressRange(0x1FC00000, 0x1FC007BF, "PIFR", "PIF ROM"),
    AddressRange(0x1FC007C0, 0x1FC007FF, "PIFR", "PIF RAM"),
    AddressRange(0x1FC00800, 0x1FCFFFFF, "RSVD", "Reserved"),

    # PI, second part
    AddressRange(0x1FD00000, 0x1FFFFFFF, "UPB1", "Unused / PI BUS Domain 1"),
    AddressRange(0x20000000, 0x7FFFFFFF, "UCPA",
                 "Unused / PI BUS Domain 1 [CPU Accessible]"),

    # No device
    AddressRange(0x80000000, 0xFFFFFFFF, "UNMP", "Unmapped/fatal"),
)


# =============================================================================
# Table lookups and coverage analysis
# =============================================================================

def find_first(
    table: Iterable[AddressRange], address: int
) -> Optional[AddressRange]:
    """Return the first range in table order containing address, or None."""
    for entry in table:
        if entry.contains(address):
            return entry
    return None


def find_all(
    table: Iterable[AddressRange], address: int
) -> Tuple[AddressRange, ...]:
    """Return every range containing address, in table order."""
    return tuple(entry for entry in table if entry.contains(address))


def merge_ranges(table: Iterable[AddressRange]) -> List[Tuple[int, int]]:
    """Union of the table's ranges as sorted, disjoint (start, end) pairs."""
    merged: List[Tuple[int, int]] = []
    for entry in sorted(table, key=lambda r: (r.start, r.end)):
        if merged and entry.start <= merged[-1][1] + 1:
            last_start, last_end = merged[-1]
            merged[-1] = (last_start, max(last_end, entry.end))
        else:
            merged.append((entry.start, entry.end))
    return merged


def find_gaps(
    table: Iterable[AddressRange], start: int, end: int
) -> List[Tuple[int, int]]:
    """
    Find sub-ranges of [start, end] not covered by any table entry.

    Args:
        table: Ranges to inspect.
        start: First address of the domain.
        end: Last address of the domain (inclusive).

    Returns:
        Sorted list of uncovered (start, end) pairs.
    """
    gaps = []
    cursor = start
    for lo, hi in merge_ranges(table):
        if hi < cursor:
            continue
        if lo > end:
            break
        if lo > cursor:
            gaps.append((cursor, lo - 1))
        cursor = hi + 1
        if cursor > end:
            return gaps
    if cursor <= end:
        gaps.append((cursor, end))
    return gaps


def find_overlaps(
    table: Iterable[AddressRange],
) -> List[Tuple[AddressRange, AddressRange]]:
    """Return every pair of entries whose ranges intersect."""
    entries = list(table)
    overlaps = []
    for i, first in enumerate(entries):
        for second in entries[i + 1:]:
            if first.start <= second.end and second.start <= first.end:
                overlaps.append((first, second))
    return overlaps


def validate_partition(
    table: Iterable[AddressRange],
    start: int,
    end: int,
    name: str = "table",
) -> None:
    """
    Check that table covers [start, end] exactly once.

    Raises:
        ValueError: If the table leaves gaps or has overlapping entries.
    """
    entries = tuple(table)
    gaps = find_gaps(entries, start, end)
    if gaps:
        lo, hi = gaps[0]
        raise ValueError(
            f"{name} does not cover 0x{lo:08X}-0x{hi:08X} "
            f"({len(gaps)} gap(s))"
        )
    overlaps = find_overlaps(entries)
    if overlaps:
        first, second = overlaps[0]
        raise ValueError(
            f"{name} has overlapping entries "
            f"{first.short_name!r} and {second.short_name!r}"
        )


# =============================================================================
# Classification
# =============================================================================

@dataclass
class AddressMapConfig:
    """Configuration for address map."""
    segments: Tuple[AddressRange, ...] = SEGMENTS
    regions: Tuple[AddressRange, ...] = REGIONS
    subregions: Tuple[AddressRange, ...] = SUBREGIONS
    physical_mask: int = PHYSICAL_MASK  # Strips bits 29-31
    address_bits: int = 32

    def __post_init__(self) -> None:
        self.segments = tuple(self.segments)
        self.regions = tuple(self.regions)
        self.subregions = tuple(self.subregions)
        self.validate_mask()

    def validate_mask(self) -> None:
        """
        Check that physical_mask is a contiguous low-bit mask (2**n - 1)
        within the address space.

        Raises:
            ValueError: If the mask is out of range or has holes.
        """
        mask = self.physical_mask
        if isinstance(mask, bool) or not isinstance(mask, int):
            raise ValueError(f"physical_mask must be an integer, got {mask!r}")
        if not (0 < mask <= self.address_max):
            raise ValueError(
                f"physical_mask out of range: {mask:#x} "
                f"(valid range: 0x1-{self.address_max:#x})"
            )
        if mask & (mask + 1):
            raise ValueError(
                f"physical_mask must be of the form 2**n - 1, got {mask:#x}"
            )

    @property
    def address_max(self) -> int:
        return (1 << self.address_bits) - 1


@dataclass(frozen=True)
class AddressLocation:
    """
    Location of a virtual address.

    segment and region are None when no table entry matched; subregions may
    hold zero, one or several entries in table order.
    """
    virtual_address: int
    physical_address: int
    segment: Optional[AddressRange]
    region: Optional[AddressRange]
    subregions: Tuple[AddressRange, ...] = field(default_factory=tuple)


class SystemAddressMap:
    """
    Resolves virtual addresses against the segment, region and subregion
    tables.

    Example:
        0x80000000 → KSEG0 / RDRAM / RDRAM memory-space
        0xA3F00010 → KSEG1 / RDRAM / RDRAM registers
        0x04040100 → KUSEG / RCP / RSP Registers
    """

    def __init__(
        self,
        config: Optional[AddressMapConfig] = None,
        validate: bool = True,
    ):
        """
        Initialize address map.

        Args:
            config: Address map configuration.
            validate: Check table coverage before first use.

        Raises:
            ValueError: If validate is set and the tables are inconsistent.
        """
        self.config = config or AddressMapConfig()
        if validate:
            self.validate()

    def mask_address(self, address: int) -> int:
        """Strip cache-control bits, giving the physical address."""
        return address & self.config.physical_mask

    def classify(self, address: int) -> AddressLocation:
        """
        Classify a virtual address.

        Args:
            address: 32-bit virtual address.

        Returns:
            AddressLocation for the address.

        Raises:
            ValueError: If address does not fit the address space.
        """
        if not (0 <= address <= self.config.address_max):
            raise ValueError(
                f"Address out of range: {address:#x} "
                f"(valid range: 0-{self.config.address_max:#x})"
            )

        physical = self.mask_address(address)
        return AddressLocation(
            virtual_address=address,
            physical_address=physical,
            segment=find_first(self.config.segments, address),
            region=find_first(self.config.regions, physical),
            subregions=find_all(self.config.subregions, physical),
        )

    def validate(self) -> None:
        """
        Validate table consistency.

        The segment table must partition the whole address space, the
        region table must partition the physical address space, and the
        subregion table must cover exactly the addresses the region table
        covers (overlaps are allowed).

        Raises:
            ValueError: On gaps, overlaps or mismatched extents.
        """
        validate_partition(
            self.config.segments, 0, self.config.address_max, "segment table"
        )
        validate_partition(
            self.config.regions, 0, self.config.physical_mask, "region table"
        )

        region_union = merge_ranges(self.config.regions)
        subregion_union = merge_ranges(self.config.subregions)
        if subregion_union != region_union:
            raise ValueError(
                "subregion table does not cover the same addresses as the "
                f"region table: {_describe_union(subregion_union)} vs "
                f"{_describe_union(region_union)}"
            )

        overlaps = find_overlaps(self.config.subregions)
        logger.debug(
            "address map valid: %d segments, %d regions, %d subregions "
            "(%d overlapping pairs)",
            len(self.config.segments),
            len(self.config.regions),
            len(self.config.subregions),
            len(overlaps),
        )

    def __repr__(self) -> str:
        return (
            f"SystemAddressMap("
            f"segments={len(self.config.segments)}, "
            f"regions={len(self.config.regions)}, "
            f"subregions={len(self.config.subregions)})"
        )

    def print_map(self) -> None:
        """Print the address map for debugging."""
        print(f"System Address Map (physical mask 0x{self.config.physical_mask:08X})")
        for title, table in (
            ("Segments (virtual)", self.config.segments),
            ("Regions (physical)", self.config.regions),
            ("Subregions (physical)", self.config.subregions),
        ):
            print()
            print(f"{title}:")
            for entry in table:
                print(
                    f"  0x{entry.start:08X}-0x{entry.end:08X}  "
                    f"{entry.short_name:<4}  {entry.long_name}"
                )


def _describe_union(union: List[Tuple[int, int]]) -> str:
    return ", ".join(f"0x{lo:08X}-0x{hi:08X}" for lo, hi in union) or "nothing"


# =============================================================================
# Convenience functions
# =============================================================================

def create_default_address_map() -> SystemAddressMap:
    """Create address map with the built-in N64 tables."""
    return SystemAddressMap(AddressMapConfig())


def classify_address(address: int) -> AddressLocation:
    """Classify address against the built-in tables."""
    return _DEFAULT_MAP.classify(address)


_DEFAULT_MAP = SystemAddressMap(AddressMapConfig(), validate=False)
