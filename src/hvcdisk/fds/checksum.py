"""
Signature and Checksum Constants
================================

The disk system identifies itself with a fixed 15-byte block at the start
of every disk side:

    Offset  Size    Content
    ------  ----    -------
    0       1       0x01 (disk header block tag)
    1       1       '*'
    2       8       vendor name (matched by CRC-32, not by value)
    10      5       '-HVC*'

A single file payload also has a well-known fingerprint: the 224-byte
catalog block, identified by length, CRC-32 and a leading '$'.

Both fingerprints use the standard CRC-32 (IEEE 802.3, as computed by
zlib), stored here as unsigned 32-bit integers.
"""

import zlib

# Disk header signature
DISK_MARKER = b"\x01*"
DISK_VENDOR_OFFSET = 2
DISK_VENDOR_LENGTH = 8
DISK_VENDOR_CRC = 3571442638
DISK_SYSTEM_TAG = b"-HVC*"
DISK_SYSTEM_TAG_OFFSET = 10
SIGNATURE_LENGTH = 15

# Catalog fingerprint
CATALOG_SIZE = 224
CATALOG_CRC = 798990613
CATALOG_LEAD_BYTE = ord("$")


def crc32(data: bytes) -> int:
    """
    Calculate the unsigned CRC-32 of a byte sequence.

    Example:
        >>> crc32(b"") == 0
        True
    """
    return zlib.crc32(data) & 0xFFFFFFFF


def is_disk_signature(data: bytes, offset: int) -> bool:
    """
    Check whether a disk header signature begins at ``offset``.

    All three conditions must hold: the 2-byte marker, the CRC-32 of the
    8 vendor bytes, and the 5-byte system tag.

    Args:
        data: The raw dump (bytes, bytearray or memoryview)
        offset: Candidate start offset

    Returns:
        True if a complete signature starts at offset
    """
    if offset < 0 or offset + SIGNATURE_LENGTH > len(data):
        return False
    if data[offset:offset + 2] != DISK_MARKER:
        return False
    vendor_start = offset + DISK_VENDOR_OFFSET
    vendor = data[vendor_start:vendor_start + DISK_VENDOR_LENGTH]
    if crc32(vendor) != DISK_VENDOR_CRC:
        return False
    tag_start = offset + DISK_SYSTEM_TAG_OFFSET
    return data[tag_start:tag_start + len(DISK_SYSTEM_TAG)] == DISK_SYSTEM_TAG


def matches_catalog_fingerprint(payload: bytes) -> bool:
    """Check the size, CRC-32 and leading-byte fingerprint of a catalog."""
    return (
        len(payload) == CATALOG_SIZE
        and payload[0] == CATALOG_LEAD_BYTE
        and crc32(payload) == CATALOG_CRC
    )
