"""
Diagnostic Hex Dump
===================

Renders a byte range as an annotated hex/ASCII grid for inspecting file
payloads. Contains no decoding logic.

Output format:

    * dump @ byte 0 length 20
    {
             0  1  2  3  4  5  6  7   8  9  A  B  C  D  E  F
     0000:  24 41 42 43 00 01 02 03  04 05 06 07 08 09 0A 0B  $ABC````````````
     0010:  0C 0D 0E 0F                                       ````
    }

Bytes outside the printable ASCII range show as a backquote. A cited
byte is prefixed with ``'`` and marked with ``V`` on a line under the
column header.
"""

from typing import Optional

ROW_WIDTH = 16
GROUP_WIDTH = 8
UNPRINTABLE = "`"
PREFIX_WIDTH = 7


def _printable(byte: int) -> str:
    return chr(byte) if 32 <= byte <= 126 else UNPRINTABLE


def _join_row(cells: list[str]) -> str:
    """Join 3-character cells with an extra space between the two groups."""
    return "".join(cells[:GROUP_WIDTH]) + " " + "".join(cells[GROUP_WIDTH:])


def format_hex_dump(
    data: bytes,
    offset: int = 0,
    length: Optional[int] = None,
    cite: Optional[int] = None,
) -> str:
    """
    Format a hex dump of ``data[offset:offset + length]``.

    Args:
        data: Bytes to dump
        offset: First byte to show
        length: Number of bytes to show (default: to the end of data)
        cite: Index relative to offset of a byte to call out

    Returns:
        The dump as a multi-line string
    """
    if length is None:
        length = max(0, len(data) - offset)

    title = f"* dump @ byte {offset} length {length}"
    if cite is not None:
        title += f" cite {cite}"
    lines = [title, "{"]

    header = PREFIX_WIDTH * " " + _join_row([f"  {i:X}" for i in range(ROW_WIDTH)])
    lines.append(header)
    if cite is not None and 0 <= cite < length:
        column = cite % ROW_WIDTH
        position = PREFIX_WIDTH + column * 3 + (1 if column >= GROUP_WIDTH else 0) + 1
        lines.append(" " * position + "V")

    for row_start in range(0, length, ROW_WIDTH):
        cells = []
        text = ""
        for i in range(row_start, min(row_start + ROW_WIDTH, length)):
            index = offset + i
            if index >= len(data):
                break
            marker = "'" if cite == i else " "
            cells.append(f"{marker}{data[index]:02X}")
            text += _printable(data[index])
        hex_part = _join_row(cells).ljust(ROW_WIDTH * 3 + 1)
        lines.append(f" {offset + row_start:04X}: {hex_part}  {text}".rstrip())

    lines.append("}")
    return "\n".join(lines)
