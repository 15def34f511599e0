"""
Trace annotation.

Rewrites lines of an Ares instruction trace so that the address column is
prefixed with the short location code of the address:

    CPU 0000000080000000 extra text
    CPU 0R.RDRM       0x00000000 extra text

Lines that do not look like trace records pass through unchanged.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, TextIO
import logging
import re

from ..address.address_map import SystemAddressMap
from ..address.formatter import LocationFormatter
from ..config import AnnotationConfig

logger = logging.getLogger(__name__)

TRACE_LINE_PATTERN = re.compile(r"^([A-Z]{3})\s*([a-f0-9]{16})\s*(.*)$")

# Between the short-string column and the address column
COLUMN_GAP = "  "


class TraceParseError(ValueError):
    """A trace record whose value could not be parsed."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


@dataclass(frozen=True)
class TraceLine:
    """A recognized trace record."""
    prefix: str     # Three-letter unit name, e.g. CPU
    value: int      # 64-bit value from the hex column
    suffix: str     # Rest of the line


class TraceLineMatcher:
    """Recognizes trace records."""

    def __init__(self, pattern: re.Pattern = TRACE_LINE_PATTERN):
        self.pattern = pattern

    def match(self, line: str) -> Optional[TraceLine]:
        """
        Match a single line.

        Args:
            line: Line text without its line ending.

        Returns:
            TraceLine, or None if the line is not a trace record.

        Raises:
            TraceParseError: If the hex column cannot be parsed.
        """
        m = self.pattern.match(line)
        if m is None:
            return None
        prefix, hex_text, suffix = m.groups()
        # TRACE_LINE_PATTERN only captures hex digits; custom patterns may not
        try:
            value = int(hex_text, 16)
        except ValueError:
            raise TraceParseError(f"invalid hex value {hex_text!r}") from None
        return TraceLine(prefix=prefix, value=value, suffix=suffix)


class TraceAnnotator:
    """
    Annotates trace lines with address locations.

    Each line is handled independently; the annotator keeps no state between
    lines.
    """

    def __init__(
        self,
        address_map: Optional[SystemAddressMap] = None,
        config: Optional[AnnotationConfig] = None,
        formatter: Optional[LocationFormatter] = None,
        matcher: Optional[TraceLineMatcher] = None,
    ):
        self.address_map = address_map or SystemAddressMap()
        self.config = config or AnnotationConfig()
        self.formatter = formatter or LocationFormatter()
        self.matcher = matcher or TraceLineMatcher()

    def format_record(self, record: TraceLine) -> str:
        """Build the annotated form of a recognized record."""
        address = record.value & self.config.address_mask
        location = self.address_map.classify(address)
        short = self.formatter.to_short_string(location).upper()
        width = self.config.column_width
        return (
            f"{record.prefix} {short:<{width}}{COLUMN_GAP}"
            f"0x{address:08x} {record.suffix}"
        )

    def annotate_line(self, line: str, line_number: Optional[int] = None) -> str:
        """
        Annotate one line.

        Args:
            line: Line text without its line ending.
            line_number: Used in error messages only.

        Returns:
            Annotated line, or line unchanged if it is not a trace record.

        Raises:
            TraceParseError: If a trace record's value cannot be parsed.
        """
        try:
            record = self.matcher.match(line)
        except TraceParseError as e:
            raise TraceParseError(str(e), line_number) from None
        if record is None:
            return line
        return self.format_record(record)

    def annotate_lines(self, lines: Iterable[str]) -> Iterator[str]:
        """Annotate lines in order. Line endings are stripped."""
        for number, line in enumerate(lines, start=1):
            yield self.annotate_line(line.rstrip("\r\n"), number)

    def annotate_file(self, path: str | Path, out: TextIO) -> int:
        """
        Stream an annotated copy of a trace file.

        Args:
            path: Trace file to read.
            out: Text stream receiving annotated lines.

        Returns:
            Number of lines written.

        Raises:
            OSError: If the file cannot be opened or read.
            UnicodeDecodeError: If the file is not valid UTF-8.
            TraceParseError: If a trace record cannot be parsed.
        """
        count = 0
        with open(path, 'r', encoding='utf-8', newline='') as f:
            for annotated in self.annotate_lines(f):
                out.write(annotated)
                out.write("\n")
                count += 1
        logger.debug("annotated %d lines from %s", count, path)
        return count
