"""
Byte Cursor
===========

A forward-only read position over an immutable byte buffer. Every decoder
in this package reads through a ByteCursor, so all bounds checking lives
in one place.

Reads never rewind. A new disk image candidate gets a fresh cursor at its
own start offset.
"""

from typing import Union

from hvcdisk.errors import OutOfRangeError


class ByteCursor:
    """
    Bounds-aware read position over a byte buffer.

    The buffer is wrapped in a memoryview, so ``peek`` and ``take`` return
    views into the original dump rather than copies. Callers that keep
    the bytes (file payloads) convert them with ``bytes()``.

    Example:
        >>> cursor = ByteCursor(b"\\x02\\x05rest")
        >>> cursor.read_byte()
        2
        >>> cursor.read_byte()
        5
        >>> bytes(cursor.take(4))
        b'rest'
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview], position: int = 0):
        self._view = memoryview(data)
        if not 0 <= position <= len(self._view):
            raise OutOfRangeError(position, 0)
        self._position = position

    def __repr__(self) -> str:
        return f"ByteCursor(position={self._position}, size={len(self._view)})"

    @property
    def position(self) -> int:
        """Absolute offset of the next byte to be read."""
        return self._position

    @property
    def size(self) -> int:
        return len(self._view)

    @property
    def remaining(self) -> int:
        return len(self._view) - self._position

    @property
    def at_end(self) -> bool:
        return self._position >= len(self._view)

    def peek(self, n: int) -> memoryview:
        """
        Return the next n bytes without advancing.

        Raises:
            OutOfRangeError: If fewer than n bytes remain. The bytes that
                do remain are attached as ``available``.
        """
        end = self._position + n
        if n < 0 or end > len(self._view):
            raise OutOfRangeError(
                self._position, n, bytes(self._view[self._position:])
            )
        return self._view[self._position:end]

    def take(self, n: int) -> memoryview:
        """Return the next n bytes and advance past them."""
        chunk = self.peek(n)
        self._position += n
        return chunk

    def take_available(self, n: int) -> memoryview:
        """
        Return up to n bytes and advance past what was returned.

        Used for payloads whose declared size may exceed what the dump
        actually holds.
        """
        if n < 0:
            raise OutOfRangeError(self._position, n)
        end = min(self._position + n, len(self._view))
        chunk = self._view[self._position:end]
        self._position = end
        return chunk

    def skip(self, n: int) -> None:
        """Advance n bytes without reading them."""
        if n < 0 or self._position + n > len(self._view):
            raise OutOfRangeError(
                self._position, n, bytes(self._view[self._position:])
            )
        self._position += n

    def read_byte(self) -> int:
        return self.take(1)[0]

    def read_u16le(self) -> int:
        """Read a 16-bit integer stored low byte first."""
        low, high = self.take(2)
        return (high << 8) | low
