"""
Catalog Recognizer
==================

One well-known file payload, the 224-byte catalog block, carries text in
a shifted character encoding. It is recognized by fingerprint rather than
by name:

- the entry is file number 0
- the payload is exactly 224 bytes
- the payload CRC-32 matches the known catalog
- the payload starts with '$'

A recognized catalog is decoded by adding 55 to every byte, wrapping
modulo 256, and splitting the result into rows of 32 characters. The
wraparound for stored bytes above 200 has not been checked against a
real catalog sample.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from hvcdisk.fds.checksum import matches_catalog_fingerprint
from hvcdisk.fds.hexdump import UNPRINTABLE
from hvcdisk.fds.records import FileEntry

logger = logging.getLogger(__name__)

CATALOG_SHIFT = 55
CATALOG_ROW_WIDTH = 32


def transform_catalog_bytes(data: bytes) -> bytes:
    """Shift every byte up by 55, wrapping modulo 256."""
    return bytes((b + CATALOG_SHIFT) & 0xFF for b in data)


@dataclass(frozen=True)
class Catalog:
    """
    Decoded catalog text.

    Attributes:
        transformed: The shifted bytes
        file_number: File number of the entry it came from
        header_offset: Dump offset of that entry's file header tag. File
            numbers repeat within a directory; this offset does not.
    """
    transformed: bytes = field(repr=False)
    file_number: int = 0
    header_offset: int = 0

    @property
    def lines(self) -> list[str]:
        """The transformed bytes as rows of 32 characters."""
        text = self.transformed.decode("latin-1")
        return [
            text[i:i + CATALOG_ROW_WIDTH]
            for i in range(0, len(text), CATALOG_ROW_WIDTH)
        ]

    @property
    def text(self) -> str:
        """Rows joined with a line break after each full row."""
        return "".join(
            line + "\n" if len(line) == CATALOG_ROW_WIDTH else line
            for line in self.lines
        )

    @property
    def display_lines(self) -> list[str]:
        """Rows with control and other non-printable characters shown as '`'."""
        return [
            "".join(c if c.isprintable() else UNPRINTABLE for c in line)
            for line in self.lines
        ]


def is_catalog(entry: FileEntry) -> bool:
    """Check whether a file entry is the catalog block."""
    return entry.file_number == 0 and matches_catalog_fingerprint(entry.payload)


def recognize_catalog(entry: FileEntry) -> Optional[Catalog]:
    """
    Decode a file entry as a catalog if it matches the fingerprint.

    Returns:
        A Catalog, or None when the entry is not the catalog block
    """
    if not is_catalog(entry):
        return None
    logger.debug(f"Catalog block found in file {entry.file_number} '{entry.name}'")
    return Catalog(
        transformed=transform_catalog_bytes(entry.payload),
        file_number=entry.file_number,
        header_offset=entry.header_offset,
    )
