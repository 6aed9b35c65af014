"""
Disk Dump Parser
================

This module decodes the disk images found in a raw dump.

Disk Header Decoder
-------------------
``decode_disk_header()`` reads the fixed 56-byte identification block at
a signature match and returns the decoded DiskHeader together with a
cursor positioned at the first block tag.

Block Stream Decoder
--------------------
``BlockStreamDecoder`` walks the tagged blocks that follow the header:

    AWAITING_TAG --2--> DIRECTORY ---------> AWAITING_TAG
    AWAITING_TAG --3--> FILE_HEADER --4----> FILE_DATA --> AWAITING_TAG
                                    --else-> MALFORMED
    AWAITING_TAG --anything else / end of buffer--> DONE

The format has no end marker, so reaching DONE on an unrecognized tag is
the normal way a directory ends. MALFORMED also stops the walk, but the
entries collected so far are kept.

DumpParser
----------
``DumpParser`` ties it together: it scans a dump for signatures and
decodes every image it finds. A failure inside one image is recorded on
that image and never stops the others.

Usage Examples
--------------
    >>> from hvcdisk.fds import DumpParser
    >>> scan = DumpParser.from_file("side_a.bin")
    >>> for image in scan.images:
    ...     for entry in image.entries:
    ...         print(entry.name, entry.size)
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Union
import logging

from hvcdisk.config import ScanOptions
from hvcdisk.errors import (
    Diagnostic,
    DiagnosticCollector,
    InputError,
    MalformedBlockError,
    OutOfRangeError,
    Severity,
    TruncatedHeaderError,
)
from hvcdisk.fds.catalog import Catalog, recognize_catalog
from hvcdisk.fds.checksum import SIGNATURE_LENGTH
from hvcdisk.fds.cursor import ByteCursor
from hvcdisk.fds.records import (
    DEFAULT_YEAR_BASE,
    DISK_HEADER_SIZE,
    FILE_NAME_LENGTH,
    LEGACY_YEAR_BASE,
    NAME_PADDING,
    BlockType,
    DirectoryListing,
    DiskDate,
    DiskHeader,
    DiskImageLocation,
    FileEntry,
    StreamState,
)
from hvcdisk.fds.scanner import find_disk_images

# Logger for this module
logger = logging.getLogger(__name__)

CRC_VARIANT_PREFIX = 2
COUNT_MISMATCH_MESSAGE = "file count wrong"


# =============================================================================
# Disk Header Decoder
# =============================================================================

def _read_date(cursor: ByteCursor, year_base: int) -> DiskDate:
    year = cursor.read_byte()
    month = cursor.read_byte()
    day = cursor.read_byte()
    return DiskDate(raw_year=year, raw_month=month, raw_day=day, year_base=year_base)


def decode_disk_header(
    data: Union[bytes, bytearray],
    location: DiskImageLocation,
    year_base: int = DEFAULT_YEAR_BASE,
) -> tuple[DiskHeader, ByteCursor]:
    """
    Decode the disk header at a located signature.

    Args:
        data: The raw dump
        location: Where the signature was found
        year_base: Offset added to stored year digits

    Returns:
        Tuple of (header, cursor at the first block tag)

    Raises:
        TruncatedHeaderError: If the dump ends inside the header
    """
    cursor = ByteCursor(data, location.offset)
    try:
        signature = bytes(cursor.take(SIGNATURE_LENGTH))
        maker_code = cursor.read_byte()
        title_id = bytes(cursor.take(4))
        version = cursor.read_byte()
        disk_side = cursor.read_byte()
        disk_numbers = bytes(cursor.take(3))
        boot_file_id = cursor.read_byte()
        cursor.skip(5)
        completed = _read_date(cursor, year_base)
        cursor.skip(10)
        created = _read_date(cursor, year_base)
        cursor.skip(9)
    except OutOfRangeError as e:
        raise TruncatedHeaderError(
            location.offset,
            DISK_HEADER_SIZE,
            len(data) - location.offset,
        ) from e

    header = DiskHeader(
        signature=signature,
        maker_code=maker_code,
        title_id=title_id,
        version=version,
        disk_side=disk_side,
        disk_numbers=disk_numbers,
        boot_file_id=boot_file_id,
        completed=completed,
        created=created,
    )
    logger.debug(
        f"Disk header at {location.offset}: maker {header.maker_code_hex} "
        f"title {header.title_text!r} side {disk_side}"
    )
    return header, cursor


# =============================================================================
# Block Stream Decoder
# =============================================================================

@dataclass(frozen=True)
class _FileHeader:
    """File header fields waiting for their data block."""
    offset: int
    file_number: int
    file_id: int
    name: str
    load_address: int
    size: int
    type_byte: int


class BlockStreamDecoder:
    """
    Walks the directory and file blocks that follow a disk header.

    Args:
        crc_variant: Skip two CRC bytes before every block tag

    Example:
        >>> header, cursor = decode_disk_header(data, location)
        >>> listing = BlockStreamDecoder().decode(cursor)
        >>> len(listing.entries) == listing.declared_file_count
        True
    """

    def __init__(self, crc_variant: bool = False):
        self.crc_variant = crc_variant

    def _next_tag(self, cursor: ByteCursor) -> tuple[int, Optional[int]]:
        """
        Read the next block tag.

        Returns:
            Tuple of (offset of the tag, tag byte or None at end of buffer)
        """
        try:
            if self.crc_variant:
                cursor.skip(CRC_VARIANT_PREFIX)
            offset = cursor.position
            return offset, cursor.read_byte()
        except OutOfRangeError:
            return cursor.position, None

    @staticmethod
    def _read_file_header(cursor: ByteCursor, offset: int) -> _FileHeader:
        file_number = cursor.read_byte()
        file_id = cursor.read_byte()
        raw_name = bytes(cursor.take(FILE_NAME_LENGTH))
        load_address = cursor.read_u16le()
        size = cursor.read_u16le()
        type_byte = cursor.read_byte()
        return _FileHeader(
            offset=offset,
            file_number=file_number,
            file_id=file_id,
            name=raw_name.decode("latin-1").strip(NAME_PADDING),
            load_address=load_address,
            size=size,
            type_byte=type_byte,
        )

    def decode(self, cursor: ByteCursor) -> DirectoryListing:
        """
        Walk the block stream from the cursor position.

        Args:
            cursor: Positioned right after the disk header

        Returns:
            The directory listing with any diagnostics found on the way
        """
        diagnostics = DiagnosticCollector()
        entries: list[FileEntry] = []
        declared: Optional[int] = None
        pending: Optional[_FileHeader] = None
        tag_offset = cursor.position
        state = StreamState.AWAITING_TAG

        while not state.is_terminal:
            if state is StreamState.AWAITING_TAG:
                tag_offset, tag = self._next_tag(cursor)
                if tag == BlockType.DIRECTORY and declared is None:
                    state = StreamState.DIRECTORY
                elif tag == BlockType.FILE_HEADER and declared is not None:
                    state = StreamState.FILE_HEADER
                else:
                    logger.debug(f"Block stream ends at {tag_offset} (tag {tag})")
                    state = StreamState.DONE

            elif state is StreamState.DIRECTORY:
                try:
                    declared = cursor.read_byte()
                except OutOfRangeError:
                    diagnostics.warning(
                        "directory block truncated before file count",
                        offset=tag_offset,
                    )
                    state = StreamState.DONE
                    continue
                logger.debug(f"Directory declares {declared} files")
                state = StreamState.AWAITING_TAG

            elif state is StreamState.FILE_HEADER:
                try:
                    pending = self._read_file_header(cursor, tag_offset)
                except OutOfRangeError:
                    diagnostics.warning(
                        "file header block truncated by end of buffer",
                        offset=tag_offset,
                    )
                    state = StreamState.MALFORMED
                    continue
                data_tag_offset, tag = self._next_tag(cursor)
                if tag == BlockType.FILE_DATA:
                    state = StreamState.FILE_DATA
                else:
                    error = MalformedBlockError(data_tag_offset, tag)
                    logger.warning(str(error))
                    diagnostics.warning(
                        str(error),
                        offset=data_tag_offset,
                        file_number=pending.file_number,
                    )
                    state = StreamState.MALFORMED

            elif state is StreamState.FILE_DATA:
                data_offset = cursor.position
                payload = bytes(cursor.take_available(pending.size))
                entry = FileEntry(
                    file_number=pending.file_number,
                    file_id=pending.file_id,
                    name=pending.name,
                    load_address=pending.load_address,
                    size=pending.size,
                    type_byte=pending.type_byte,
                    payload=payload,
                    header_offset=pending.offset,
                    data_offset=data_offset,
                )
                if entry.truncated:
                    logger.warning(
                        f"File '{entry.name}' truncated: "
                        f"{len(payload)} of {entry.size} bytes"
                    )
                    diagnostics.warning(
                        f"payload truncated: {len(payload)} of {entry.size} bytes present",
                        offset=data_offset,
                        file_number=entry.file_number,
                    )
                entries.append(entry)
                pending = None
                state = StreamState.AWAITING_TAG

        if declared is None:
            diagnostics.warning("no directory block follows the disk header", offset=tag_offset)
        elif declared != len(entries):
            logger.warning(f"File count wrong: declared {declared}, found {len(entries)}")
            diagnostics.warning(
                f"{COUNT_MISMATCH_MESSAGE}: directory declares {declared}, "
                f"found {len(entries)}"
            )

        return DirectoryListing(
            declared_file_count=declared,
            entries=tuple(entries),
            diagnostics=diagnostics.snapshot(),
            terminated_by=state,
            end_offset=cursor.position,
        )


# =============================================================================
# Disk Image
# =============================================================================

@dataclass(frozen=True)
class DiskImage:
    """
    Everything decoded for one disk image in a dump.

    Attributes:
        location: Where the image starts
        header: Decoded header, or None if it was truncated
        listing: Directory listing, or None if the header failed
        catalogs: Catalog blocks recognized among the entries
        diagnostics: Image-level diagnostics (listing diagnostics included)
    """
    location: DiskImageLocation
    header: Optional[DiskHeader] = None
    listing: Optional[DirectoryListing] = None
    catalogs: tuple[Catalog, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def index(self) -> int:
        return self.location.index

    @property
    def offset(self) -> int:
        return self.location.offset

    @property
    def is_valid(self) -> bool:
        return self.header is not None

    @property
    def entries(self) -> tuple[FileEntry, ...]:
        return self.listing.entries if self.listing else ()

    def get_catalog(self, entry: FileEntry) -> Optional[Catalog]:
        """Return the catalog decoded from an entry, if it is one."""
        for catalog in self.catalogs:
            if catalog.header_offset == entry.header_offset:
                return catalog
        return None


# =============================================================================
# Dump Parser
# =============================================================================

@dataclass
class DumpParser:
    """
    Parser for raw disk system dumps.

    Scans the dump for disk signatures and decodes every image found.
    Parsing happens on construction.

    Attributes:
        data: The raw dump bytes
        options: Decoding options
        images: Decoded images in discovery order

    Example:
        >>> scan = DumpParser.from_bytes(bytes(1024))
        >>> scan.images
        []
    """
    # Raw dump data (not exposed in repr)
    data: bytes = field(repr=False)

    options: ScanOptions = field(default_factory=ScanOptions)

    images: list[DiskImage] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Parse the dump after initialization."""
        self._parse()

    @classmethod
    def from_file(
        cls, filepath: Union[str, Path], options: Optional[ScanOptions] = None
    ) -> "DumpParser":
        """
        Create a DumpParser from a file path.

        Raises:
            InputError: If the file cannot be read
        """
        filepath = Path(filepath)
        try:
            data = filepath.read_bytes()
        except OSError as e:
            raise InputError(f"couldn't open \"{filepath}\": {e.strerror or e}") from e
        return cls(data=data, options=options or ScanOptions())

    @classmethod
    def from_bytes(
        cls, data: bytes, options: Optional[ScanOptions] = None
    ) -> "DumpParser":
        return cls(data=bytes(data), options=options or ScanOptions())

    def _parse(self) -> None:
        self.images.clear()
        if not self.options.uses_default_year_base:
            logger.info(
                f"Year base {self.options.year_base} in use; listings from "
                f"other revisions used {DEFAULT_YEAR_BASE} or {LEGACY_YEAR_BASE}"
            )
        for location in find_disk_images(self.data):
            self.images.append(self._parse_image(location))

    def _parse_image(self, location: DiskImageLocation) -> DiskImage:
        """Decode one image; header failures are confined to it."""
        try:
            header, cursor = decode_disk_header(
                self.data, location, year_base=self.options.year_base
            )
        except TruncatedHeaderError as e:
            logger.error(f"Disk image {location.index}: {e}")
            return DiskImage(
                location=location,
                diagnostics=(Diagnostic(Severity.ERROR, str(e), offset=location.offset),),
            )

        decoder = BlockStreamDecoder(crc_variant=self.options.crc_variant)
        listing = decoder.decode(cursor)
        catalogs = tuple(
            catalog
            for catalog in (recognize_catalog(entry) for entry in listing.entries)
            if catalog is not None
        )
        return DiskImage(
            location=location,
            header=header,
            listing=listing,
            catalogs=catalogs,
            diagnostics=listing.diagnostics,
        )

    # =========================================================================
    # Public Query Methods
    # =========================================================================

    def iter_entries(self) -> Iterator[tuple[DiskImage, FileEntry]]:
        """Iterate over every decoded file with the image it belongs to."""
        for image in self.images:
            for entry in image.entries:
                yield image, entry

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """All diagnostics from all images, in discovery order."""
        return [d for image in self.images for d in image.diagnostics]

    def get_info(self) -> dict:
        """
        Get summary information about the dump.

        Returns:
            Dictionary with dump information
        """
        return {
            "size": len(self.data),
            "image_count": len(self.images),
            "valid_image_count": sum(1 for image in self.images if image.is_valid),
            "file_count": sum(len(image.entries) for image in self.images),
            "catalog_count": sum(len(image.catalogs) for image in self.images),
            "used_bytes": sum(
                image.listing.get_used_bytes() for image in self.images if image.listing
            ),
            "diagnostic_count": len(self.diagnostics),
        }


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_dump(data: bytes, options: Optional[ScanOptions] = None) -> DumpParser:
    """Parse a dump from bytes."""
    return DumpParser.from_bytes(data, options)


def parse_dump_file(
    filepath: Union[str, Path], options: Optional[ScanOptions] = None
) -> DumpParser:
    """
    Parse a dump from disk.

    Raises:
        InputError: If the file cannot be read
    """
    return DumpParser.from_file(filepath, options)
