"""
Disk Record Definitions
=======================

Data structures for the records decoded from an HVC disk system dump.
All records are frozen dataclasses: the decoders build them once and
nothing mutates them afterwards.

Disk Side Layout
----------------
A disk side is a forward-only stream of tagged blocks:

    [1] Disk header      56 bytes, tag included
    [2] File amount      tag + declared file count (1 byte)
    [3] File header      tag + 15 bytes (see FileEntry)
    [4] File data        tag + <size> bytes
    [3] File header
    [4] File data
    ...

There is no end marker: the directory ends at the first tag that is not
a file header. Some dumps keep the two CRC bytes that follow every block
on the physical medium; see ``ScanOptions.crc_variant``.

Disk Header Layout
------------------
    Offset  Size    Description
    ------  ----    -----------
    0       15      Signature (block tag, '*', vendor, '-HVC*')
    15      1       Software maker code
    16      4       Title id
    20      1       Version
    21      1       Disk side
    22      3       Disk numbers
    25      1       Boot (IPL) file id
    26      5       Reserved
    31      3       Completed date (year, month, day)
    34      10      Reserved
    44      3       Created date (year, month, day)
    47      9       Reserved
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional

from hvcdisk.config import DEFAULT_YEAR_BASE, LEGACY_YEAR_BASE
from hvcdisk.errors import Diagnostic


DISK_HEADER_SIZE = 56
FILE_NAME_LENGTH = 8
NAME_PADDING = " \t\n\r\x00\x0b"


# =============================================================================
# Enumeration Types
# =============================================================================

class BlockType(IntEnum):
    """Block tag values that introduce each block in the stream."""
    DISK_HEADER = 1
    DIRECTORY = 2
    FILE_HEADER = 3
    FILE_DATA = 4

    @classmethod
    def from_tag(cls, tag: int) -> Optional["BlockType"]:
        """Return the BlockType for a tag byte, or None if unrecognized."""
        try:
            return cls(tag)
        except ValueError:
            return None


class StreamState(Enum):
    """States of the block stream walk."""
    AWAITING_TAG = "awaiting_tag"
    DIRECTORY = "directory"
    FILE_HEADER = "file_header"
    FILE_DATA = "file_data"
    DONE = "done"
    MALFORMED = "malformed"

    @property
    def is_terminal(self) -> bool:
        return self in (StreamState.DONE, StreamState.MALFORMED)


class FileType(IntEnum):
    """
    File type byte of a file header.

    Values other than 0-2 decode as UNKNOWN; the raw byte is kept on the
    FileEntry.
    """
    PROGRAM = 0
    CHARACTER = 1
    DATA = 2
    UNKNOWN = 0xFF

    @classmethod
    def from_byte(cls, value: int) -> "FileType":
        if value in (0, 1, 2):
            return cls(value)
        return cls.UNKNOWN

    def get_label(self) -> str:
        """Get the short listing label for this file type."""
        labels = {
            FileType.PROGRAM: "PRG",
            FileType.CHARACTER: "CHR",
            FileType.DATA: "VRAM",
        }
        return labels.get(self, "?")


# =============================================================================
# Date Decoding
# =============================================================================

def digit_value(byte: int) -> int:
    """
    Interpret a stored date byte the way the disk system writes it.

    The byte is rendered as hexadecimal digits and the leading decimal
    digits of that rendering are taken as the value. Well-formed bytes
    are BCD, so 0x61 gives 61 and 0x09 gives 9. Out-of-range bytes
    degrade instead of failing: 0x1A gives 1 and 0xFF gives 0.
    """
    digits = ""
    for char in f"{byte:x}":
        if not char.isdigit():
            break
        digits += char
    return int(digits) if digits else 0


@dataclass(frozen=True)
class DiskDate:
    """
    A (year, month, day) date stored as three BCD-like bytes.

    Attributes:
        raw_year, raw_month, raw_day: The bytes as stored
        year_base: Offset added to the decoded year digits
    """
    raw_year: int
    raw_month: int
    raw_day: int
    year_base: int = DEFAULT_YEAR_BASE

    @property
    def year(self) -> int:
        return self.year_base + digit_value(self.raw_year)

    @property
    def month(self) -> int:
        return digit_value(self.raw_month)

    @property
    def day(self) -> int:
        return digit_value(self.raw_day)

    def __str__(self) -> str:
        # Month and day print as their stored hex digits.
        return f"{self.raw_month:x}/{self.raw_day:x}/{self.year}"


# =============================================================================
# Disk Header
# =============================================================================

@dataclass(frozen=True)
class DiskImageLocation:
    """
    Where a disk image starts in the dump.

    Attributes:
        offset: Byte offset of the signature
        index: Position among all images found in this dump (0-based)
    """
    offset: int
    index: int


@dataclass(frozen=True)
class DiskHeader:
    """Decoded disk identification header."""
    signature: bytes
    maker_code: int
    title_id: bytes
    version: int
    disk_side: int
    disk_numbers: bytes
    boot_file_id: int
    completed: DiskDate
    created: DiskDate

    @property
    def format_id(self) -> str:
        """The signature text without its leading block tag."""
        return self.signature[1:].decode("latin-1")

    @property
    def system_name(self) -> str:
        """The three-letter system name inside the signature ('HVC')."""
        return self.signature[11:14].decode("latin-1")

    @property
    def title_text(self) -> str:
        return self.title_id.decode("latin-1")

    @property
    def maker_code_hex(self) -> str:
        return f"{self.maker_code:02X}"


# =============================================================================
# Directory
# =============================================================================

@dataclass(frozen=True)
class FileEntry:
    """
    One file recovered from the directory stream.

    Attributes:
        file_number: Sequence number from the file header
        file_id: Secondary file identifier (compared against the boot id)
        name: File name with padding trimmed
        load_address: Target memory address (stored low byte first)
        size: Declared payload size (stored low byte first)
        type_byte: Raw file type byte
        payload: The file data; shorter than ``size`` when truncated
        header_offset: Dump offset of the file header tag
        data_offset: Dump offset of the first payload byte
    """
    file_number: int
    file_id: int
    name: str
    load_address: int
    size: int
    type_byte: int
    payload: bytes = field(repr=False)
    header_offset: int = 0
    data_offset: int = 0

    @property
    def file_type(self) -> FileType:
        return FileType.from_byte(self.type_byte)

    @property
    def load_span(self) -> int:
        """Last address the payload occupies once loaded."""
        return self.load_address + self.size - 1

    @property
    def truncated(self) -> bool:
        return len(self.payload) < self.size


@dataclass(frozen=True)
class DirectoryListing:
    """
    Result of walking one disk image's block stream.

    Attributes:
        declared_file_count: Count from the directory block, or None when
            the stream carried no directory block at all
        entries: Decoded files in stream order
        diagnostics: Recoverable problems found during the walk
        terminated_by: Terminal state that ended the walk (DONE or MALFORMED)
        end_offset: Dump offset where the walk stopped
    """
    declared_file_count: Optional[int]
    entries: tuple[FileEntry, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()
    terminated_by: StreamState = StreamState.DONE
    end_offset: int = 0

    @property
    def has_directory(self) -> bool:
        return self.declared_file_count is not None

    @property
    def count_matches(self) -> bool:
        return (
            self.declared_file_count is None
            or self.declared_file_count == len(self.entries)
        )

    def get_used_bytes(self) -> int:
        return sum(len(entry.payload) for entry in self.entries)
