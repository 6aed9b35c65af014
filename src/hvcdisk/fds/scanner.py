"""
Signature Scanner
=================

Locates every disk image embedded in an arbitrary dump. A dump may hold
zero, one or many concatenated disk sides, possibly surrounded by
unrelated data, so the scanner checks every offset where the 2-byte
marker occurs rather than assuming fixed side sizes.

Matches may overlap: finding a signature does not skip the bytes it
covers.
"""

import logging
from typing import Iterator, Union

from hvcdisk.fds.checksum import DISK_MARKER, is_disk_signature
from hvcdisk.fds.records import DiskImageLocation

logger = logging.getLogger(__name__)


def iter_signature_offsets(data: Union[bytes, bytearray]) -> Iterator[int]:
    """
    Yield each offset where a complete disk signature begins, ascending.

    Uses ``bytes.find`` to jump between marker candidates; every candidate
    is then checked in full by ``is_disk_signature``.
    """
    position = data.find(DISK_MARKER)
    while position != -1:
        if is_disk_signature(data, position):
            yield position
        position = data.find(DISK_MARKER, position + 1)


def find_disk_images(data: Union[bytes, bytearray]) -> list[DiskImageLocation]:
    """
    Find all disk images in a dump.

    Args:
        data: The raw dump

    Returns:
        Locations in ascending offset order; empty if the dump holds no
        signature, which is not an error.

    Example:
        >>> find_disk_images(bytes(4096))
        []
    """
    locations = [
        DiskImageLocation(offset=offset, index=index)
        for index, offset in enumerate(iter_signature_offsets(data))
    ]
    logger.debug(f"Found {len(locations)} disk image(s) in {len(data)} bytes")
    return locations
