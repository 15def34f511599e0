"""Trace file annotation."""

from .annotator import (
    TRACE_LINE_PATTERN,
    TraceLine,
    TraceLineMatcher,
    TraceAnnotator,
    TraceParseError,
)

__all__ = [
    "TRACE_LINE_PATTERN",
    "TraceLine",
    "TraceLineMatcher",
    "TraceAnnotator",
    "TraceParseError",
]
