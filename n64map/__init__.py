"""
n64map: Nintendo 64 address classification.

Classifies 32-bit virtual addresses into segment / region / subregion and
annotates Ares instruction traces with short location codes.
"""

from .address import (
    AddressRange,
    AddressLocation,
    AddressMapConfig,
    SystemAddressMap,
    LocationFormatter,
    classify_address,
    to_short_string,
    to_detail_string,
)
from .config import AnnotationConfig, N64MapConfig, load_config
from .trace import TraceAnnotator, TraceParseError

__version__ = "0.1.0"

__all__ = [
    "AddressRange",
    "AddressLocation",
    "AddressMapConfig",
    "SystemAddressMap",
    "LocationFormatter",
    "classify_address",
    "to_short_string",
    "to_detail_string",
    "AnnotationConfig",
    "N64MapConfig",
    "load_config",
    "TraceAnnotator",
    "TraceParseError",
]
