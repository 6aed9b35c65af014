"""
HVC Disk Error Hierarchy
========================

This module defines the exception hierarchy for the disk recovery tools,
together with the non-fatal diagnostic records that the decoders attach
to their results.

Exception Hierarchy
-------------------
HVCDiskError (base)
├── InputError - the input dump cannot be read at all (fatal)
├── DiskFormatError (decoding)
│   ├── OutOfRangeError - a read ran past the end of the buffer
│   ├── TruncatedHeaderError - disk header cut short by end of buffer
│   └── MalformedBlockError - unexpected block tag inside the directory
└── ExtractionError - a recovered file could not be written

Diagnostics
-----------
Most problems in a damaged dump are recoverable: the decoder keeps what
it has and moves on. Those problems are reported as Diagnostic records
rather than exceptions, so a caller always receives a complete listing
plus the list of things that went wrong while building it.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class HVCDiskError(Exception):
    """
    Base exception for all disk recovery errors.

    Callers can catch every error raised by this package with one clause:

        try:
            scan = DumpParser.from_file("side_a.bin")
        except HVCDiskError as e:
            print(f"Error: {e}")
    """
    pass


class InputError(HVCDiskError):
    """
    The input dump is unreadable or unavailable.

    This is the only fatal condition of a run: nothing can be scanned.
    """
    pass


# =============================================================================
# Decoding Exceptions
# =============================================================================

class DiskFormatError(HVCDiskError):
    """Base exception for disk format decoding errors."""
    pass


class OutOfRangeError(DiskFormatError):
    """
    A cursor read asked for more bytes than remain in the buffer.

    The bytes that were available are kept on the exception so diagnostic
    callers can still show them.

    Attributes:
        offset: Absolute buffer offset of the failed read
        requested: Number of bytes asked for
        available: The bytes that were actually present (possibly empty)
    """

    def __init__(self, offset: int, requested: int, available: bytes = b""):
        self.offset = offset
        self.requested = requested
        self.available = available
        super().__init__(
            f"read of {requested} bytes at offset {offset} "
            f"runs past end of buffer ({len(available)} available)"
        )


class TruncatedHeaderError(DiskFormatError):
    """
    The disk header runs past the end of the buffer.

    Only the affected disk image is abandoned; later images in the same
    dump are still decoded.
    """

    def __init__(self, offset: int, needed: int, available: int):
        self.offset = offset
        self.needed = needed
        self.available = available
        super().__init__(
            f"disk header at offset {offset} truncated: "
            f"need {needed} bytes, {available} available"
        )


class MalformedBlockError(DiskFormatError):
    """
    A file header block was not followed by a file data block.

    Attributes:
        offset: Offset of the unexpected tag (or end of buffer)
        tag: The tag byte found, or None at end of buffer
    """

    def __init__(self, offset: int, tag: Optional[int], message: str = ""):
        self.offset = offset
        self.tag = tag
        if not message:
            found = "end of buffer" if tag is None else f"tag {tag}"
            message = f"missing file data for declared header: {found} at offset {offset}"
        super().__init__(message)


# =============================================================================
# Extraction Exceptions
# =============================================================================

class ExtractionError(HVCDiskError):
    """
    A recovered file could not be written to the local filesystem.

    Raised when:
    - Permission denied
    - Disk full
    - Target path is occupied by a directory
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot write {path}: {reason}")


# =============================================================================
# Diagnostics
# =============================================================================

class Severity(IntEnum):
    """How serious a diagnostic is."""
    INFO = 0
    WARNING = 1
    ERROR = 2

    def get_label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Diagnostic:
    """
    A recoverable problem noticed while decoding or extracting.

    Attributes:
        severity: INFO, WARNING or ERROR
        message: Human-readable description
        offset: Buffer offset the problem relates to (optional)
        file_number: Directory file number the problem relates to (optional)
    """
    severity: Severity
    message: str
    offset: Optional[int] = None
    file_number: Optional[int] = None

    def __str__(self) -> str:
        parts = [f"{self.severity.get_label()}: {self.message}"]
        if self.file_number is not None:
            parts.append(f"(file {self.file_number})")
        if self.offset is not None:
            parts.append(f"[@{self.offset}]")
        return " ".join(parts)


class DiagnosticCollector:
    """
    Accumulates diagnostics while a decoder runs.

    Example:
        collector = DiagnosticCollector()
        collector.warning("file count wrong", offset=57)
        if collector.has_warnings():
            print(collector.report())
    """

    def __init__(self) -> None:
        self.diagnostics: list[Diagnostic] = []

    def add(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def extend(self, diagnostics) -> None:
        self.diagnostics.extend(diagnostics)

    def info(self, message: str, offset: Optional[int] = None,
             file_number: Optional[int] = None) -> None:
        self.add(Diagnostic(Severity.INFO, message, offset, file_number))

    def warning(self, message: str, offset: Optional[int] = None,
                file_number: Optional[int] = None) -> None:
        self.add(Diagnostic(Severity.WARNING, message, offset, file_number))

    def error(self, message: str, offset: Optional[int] = None,
              file_number: Optional[int] = None) -> None:
        self.add(Diagnostic(Severity.ERROR, message, offset, file_number))

    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self.diagnostics)

    def has_warnings(self) -> bool:
        return any(d.severity == Severity.WARNING for d in self.diagnostics)

    def report(self) -> str:
        """Format all collected diagnostics, one per line."""
        return "\n".join(str(d) for d in self.diagnostics)

    def snapshot(self) -> tuple[Diagnostic, ...]:
        """Return the collected diagnostics as an immutable tuple."""
        return tuple(self.diagnostics)

    def clear(self) -> None:
        self.diagnostics.clear()
