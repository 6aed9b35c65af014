"""
HVC Disk Recovery - Data Recovery for HVC Disk System Dumps
===========================================================

This package recovers files from raw dumps of the disk system media used
by the HVC home console's disk peripheral.

A dump is scanned for disk signatures; every disk side found is decoded
into its header and directory, and the stored files (programs, character
data and other data blocks) can be listed, inspected as hex, or written
out as local files.

Main Components
---------------
- **fds**: Dump scanning and decoding
    Signature scanner, header and block stream decoders, catalog
    recognizer, file extractor

- **config**: Scan options (CRC variant, year base, output directory)

- **cli**: Command-line tool (hvcscan)

Quick Start
-----------
List a dump:
    >>> from hvcdisk import DumpParser
    >>> scan = DumpParser.from_file("side_a.bin")
    >>> for image in scan.images:
    ...     for entry in image.entries:
    ...         print(entry.name, entry.file_type.get_label(), entry.size)

Or use the command-line tool:
    $ hvcscan side_a.bin
    $ hvcscan --verbose --write -o ./recovered side_a.bin

Version History
---------------
1.0.0 - Initial release: listing, extraction, catalog decoding
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from hvcdisk.errors import (
    HVCDiskError,
    InputError,
    DiskFormatError,
    OutOfRangeError,
    TruncatedHeaderError,
    MalformedBlockError,
    ExtractionError,
    Diagnostic,
    DiagnosticCollector,
    Severity,
)
from hvcdisk.config import ScanOptions
from hvcdisk.fds import (
    DumpParser,
    DiskImage,
    DiskHeader,
    DirectoryListing,
    FileEntry,
    FileType,
    Catalog,
    FileExtractor,
    find_disk_images,
    parse_dump,
    parse_dump_file,
)

__all__ = [
    "__version__",
    # Errors
    "HVCDiskError",
    "InputError",
    "DiskFormatError",
    "OutOfRangeError",
    "TruncatedHeaderError",
    "MalformedBlockError",
    "ExtractionError",
    "Diagnostic",
    "DiagnosticCollector",
    "Severity",
    # Configuration
    "ScanOptions",
    # Decoding
    "DumpParser",
    "DiskImage",
    "DiskHeader",
    "DirectoryListing",
    "FileEntry",
    "FileType",
    "Catalog",
    "FileExtractor",
    "find_disk_images",
    "parse_dump",
    "parse_dump_file",
]
