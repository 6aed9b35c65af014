"""
Shared fixtures for building synthetic disk dumps.

The builders here produce byte-exact disk sides:

    header (56 bytes)
    [crc] 02 <count>
    [crc] 03 <number> <id> <name 8> <load lo hi> <size lo hi> <type>
    [crc] 04 <payload>
    ...

where [crc] is two filler bytes present only in CRC-variant dumps.
"""

import zlib

import pytest

SIGNATURE = b"\x01*NINTENDO-HVC*"
CRC_FILLER = b"\xAA\xBB"


def build_header(
    maker: int = 0x01,
    title: bytes = b"ZLDA",
    version: int = 0,
    side: int = 0,
    disk_numbers: bytes = b"\x00\x00\x00",
    boot_id: int = 0x0F,
    completed: tuple[int, int, int] = (0x61, 0x02, 0x21),
    created: tuple[int, int, int] = (0x61, 0x11, 0x01),
) -> bytes:
    """Build a 56-byte disk header block."""
    header = bytearray(SIGNATURE)
    header.append(maker)
    header.extend(title)
    header.append(version)
    header.append(side)
    header.extend(disk_numbers)
    header.append(boot_id)
    header.extend(bytes(5))
    header.extend(bytes(completed))
    header.extend(bytes(10))
    header.extend(bytes(created))
    header.extend(bytes(9))
    assert len(header) == 56
    return bytes(header)


def build_file(
    number: int,
    file_id: int,
    name: bytes,
    load: int,
    payload: bytes,
    type_byte: int = 0,
    size: int | None = None,
    crc: bool = False,
) -> bytes:
    """Build a file header block followed by its file data block."""
    if size is None:
        size = len(payload)
    prefix = CRC_FILLER if crc else b""
    block = bytearray(prefix)
    block.append(3)
    block.append(number)
    block.append(file_id)
    block.extend(name.ljust(8, b" ")[:8])
    block.extend(load.to_bytes(2, "little"))
    block.extend(size.to_bytes(2, "little"))
    block.append(type_byte)
    block.extend(prefix)
    block.append(4)
    block.extend(payload)
    return bytes(block)


def build_image(
    files: list[bytes],
    declared: int | None = None,
    crc: bool = False,
    **header_fields,
) -> bytes:
    """Build a complete disk side from pre-built file blocks."""
    if declared is None:
        declared = len(files)
    prefix = CRC_FILLER if crc else b""
    image = bytearray(build_header(**header_fields))
    image.extend(prefix)
    image.extend(bytes([2, declared]))
    for block in files:
        image.extend(block)
    return bytes(image)


def forge_crc32(data: bytes, target: int) -> bytes:
    """
    Overwrite the last 4 bytes of data so its CRC-32 equals target.

    CRC-32 is affine over GF(2), so the effect of each of the 32 patch
    bits is a fixed column vector; solving the 32x32 system gives the
    patch.
    """
    base = bytearray(data[:-4]) + bytearray(4)
    base_crc = zlib.crc32(bytes(base))
    patch_start = len(base) - 4

    basis: dict[int, tuple[int, int]] = {}
    for bit in range(32):
        trial = bytearray(base)
        trial[patch_start + bit // 8] ^= 1 << (bit % 8)
        column = zlib.crc32(bytes(trial)) ^ base_crc
        mask = 1 << bit
        while column:
            top = column.bit_length() - 1
            if top not in basis:
                basis[top] = (column, mask)
                break
            vector, vector_mask = basis[top]
            column ^= vector
            mask ^= vector_mask

    want = target ^ base_crc
    solution = 0
    while want:
        vector, vector_mask = basis[want.bit_length() - 1]
        want ^= vector
        solution ^= vector_mask

    return bytes(base[:patch_start]) + solution.to_bytes(4, "little")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def program_payload() -> bytes:
    """Ten bytes of 6502 code: LDA #$00 / STA $2000 / STA $2001 / RTS."""
    return bytes([0xA9, 0x00, 0x8D, 0x00, 0x20, 0x8D, 0x01, 0x20, 0x60, 0xEA])


@pytest.fixture
def single_file_image(program_payload: bytes) -> bytes:
    """One disk side with one 10-byte program file."""
    return build_image([
        build_file(0, 0x00, b"MAIN", 0x6000, program_payload, type_byte=0),
    ])


@pytest.fixture
def catalog_payload() -> bytes:
    """
    A 224-byte payload matching the catalog fingerprint.

    Starts with '$', contains bytes above 200 to exercise wraparound, and
    ends with 4 bytes forged to hit the catalog CRC-32.
    """
    body = bytearray(b"$")
    body.extend(bytes([0xC9, 0xD0, 0xFF]))
    body.extend(bytes(range(0x10, 0x10 + 216)))
    body.extend(bytes(4))
    assert len(body) == 224
    return forge_crc32(bytes(body), 798990613)
