"""
HVC Disk System Dump Decoding
=============================

This module recovers files from raw dumps of HVC disk system media.

Overview
--------
A dump may contain any number of disk sides, each starting with a fixed
signature. For every side found, the module decodes:
- **DiskHeader**: maker code, title id, version, side, dates
- **DirectoryListing**: declared file count and the decoded files
- **FileEntry**: one file's header fields and payload
- **Catalog**: the shifted text of the well-known 224-byte catalog block

This module provides:
- **DumpParser**: Scan a dump and decode every disk image in it
- **BlockStreamDecoder**: Walk the tagged blocks of one image
- **FileExtractor**: Write recovered files to the local filesystem
- **format_hex_dump**: Inspect payload bytes

Quick Start
-----------
    >>> from hvcdisk.fds import DumpParser, FileExtractor
    >>> scan = DumpParser.from_file("side_a.bin")
    >>> extractor = FileExtractor("./recovered")
    >>> for image in scan.images:
    ...     extractor.extract_all(image)

Dump Variants
-------------
Some dumps keep the two CRC bytes that follow every block on the medium.
They are not detected automatically; pass ``ScanOptions(crc_variant=True)``.
"""

from hvcdisk.fds.cursor import ByteCursor
from hvcdisk.fds.checksum import (
    CATALOG_CRC,
    CATALOG_SIZE,
    DISK_VENDOR_CRC,
    crc32,
    is_disk_signature,
    matches_catalog_fingerprint,
)
from hvcdisk.fds.records import (
    DEFAULT_YEAR_BASE,
    DISK_HEADER_SIZE,
    LEGACY_YEAR_BASE,
    BlockType,
    DirectoryListing,
    DiskDate,
    DiskHeader,
    DiskImageLocation,
    FileEntry,
    FileType,
    StreamState,
    digit_value,
)
from hvcdisk.fds.scanner import find_disk_images, iter_signature_offsets
from hvcdisk.fds.catalog import (
    Catalog,
    is_catalog,
    recognize_catalog,
    transform_catalog_bytes,
)
from hvcdisk.fds.parser import (
    BlockStreamDecoder,
    DiskImage,
    DumpParser,
    decode_disk_header,
    parse_dump,
    parse_dump_file,
)
from hvcdisk.fds.extractor import (
    ExtractionResult,
    FileExtractor,
    build_directory_name,
    build_file_name,
    sanitize_component,
)
from hvcdisk.fds.hexdump import format_hex_dump
from hvcdisk.fds.listing import (
    format_disk_summary,
    format_entry_row,
    format_listing,
)

# =============================================================================
# Module-level __all__ for explicit exports
# =============================================================================

__all__ = [
    # Cursor
    "ByteCursor",
    # Checksum and signature
    "CATALOG_CRC",
    "CATALOG_SIZE",
    "DISK_VENDOR_CRC",
    "crc32",
    "is_disk_signature",
    "matches_catalog_fingerprint",
    # Data structures
    "DEFAULT_YEAR_BASE",
    "DISK_HEADER_SIZE",
    "LEGACY_YEAR_BASE",
    "BlockType",
    "DirectoryListing",
    "DiskDate",
    "DiskHeader",
    "DiskImageLocation",
    "FileEntry",
    "FileType",
    "StreamState",
    "digit_value",
    # Scanner
    "find_disk_images",
    "iter_signature_offsets",
    # Catalog
    "Catalog",
    "is_catalog",
    "recognize_catalog",
    "transform_catalog_bytes",
    # Parser
    "BlockStreamDecoder",
    "DiskImage",
    "DumpParser",
    "decode_disk_header",
    "parse_dump",
    "parse_dump_file",
    # Extractor
    "ExtractionResult",
    "FileExtractor",
    "build_directory_name",
    "build_file_name",
    "sanitize_component",
    # Rendering
    "format_hex_dump",
    "format_disk_summary",
    "format_entry_row",
    "format_listing",
]
