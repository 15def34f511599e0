"""Address classification and formatting."""

from .address_map import (
    AddressRange,
    AddressMapConfig,
    AddressLocation,
    SystemAddressMap,
    SEGMENTS,
    REGIONS,
    SUBREGIONS,
    PHYSICAL_MASK,
    find_first,
    find_all,
    find_gaps,
    find_overlaps,
    merge_ranges,
    validate_partition,
    classify_address,
    create_default_address_map,
)
from .formatter import (
    LocationFormatter,
    UNKNOWN_CODE,
    to_short_string,
    to_detail_string,
)

__all__ = [
    "AddressRange",
    "AddressMapConfig",
    "AddressLocation",
    "SystemAddressMap",
    "SEGMENTS",
    "REGIONS",
    "SUBREGIONS",
    "PHYSICAL_MASK",
    "find_first",
    "find_all",
    "find_gaps",
    "find_overlaps",
    "merge_ranges",
    "validate_partition",
    "classify_address",
    "create_default_address_map",
    "LocationFormatter",
    "UNKNOWN_CODE",
    "to_short_string",
    "to_detail_string",
]
