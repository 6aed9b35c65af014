"""
File Extractor
==============

Writes recovered files to the local filesystem.

Output Layout
-------------
    <root>/<system>-<maker>-<title>/<image>-<number>-<id>-<name>

    system  three-letter system name from the signature ("HVC")
    maker   software maker code, two uppercase hex digits
    title   title id with trailing whitespace removed
    image   index of the disk image within the dump
    number  file number, decimal
    id      file id, two uppercase hex digits
    name    file name from the directory

Every component comes from the dump itself, so path separators are
stripped from each one before it reaches the filesystem. Existing files
are overwritten, which makes re-running an extraction idempotent.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
import logging

from hvcdisk.errors import Diagnostic, ExtractionError, Severity
from hvcdisk.fds.parser import DiskImage
from hvcdisk.fds.records import DiskHeader, FileEntry

logger = logging.getLogger(__name__)

# Characters removed from every name component
UNSAFE_PATH_CHARS = ("/", "\\", "\x00")


def sanitize_component(text: str) -> str:
    """
    Remove path separator characters from a name component.

    Example:
        >>> sanitize_component("../etc/passwd")
        '..etcpasswd'
    """
    for char in UNSAFE_PATH_CHARS:
        text = text.replace(char, "")
    return text


def build_directory_name(header: DiskHeader) -> str:
    """Build the per-disk directory name from the header fields."""
    parts = (
        header.system_name,
        header.maker_code_hex,
        header.title_text.rstrip(),
    )
    return sanitize_component("-".join(sanitize_component(p) for p in parts))


def build_file_name(image_index: int, entry: FileEntry) -> str:
    """Build the output file name for one directory entry."""
    parts = (
        str(image_index),
        str(entry.file_number),
        f"{entry.file_id:02X}",
        entry.name,
    )
    return sanitize_component("-".join(sanitize_component(p) for p in parts))


@dataclass(frozen=True)
class ExtractionResult:
    """
    Outcome of writing one file.

    Attributes:
        entry: The file entry written
        path: Target path
        bytes_written: Number of bytes written (0 on failure)
        error: Failure description, or None on success
    """
    entry: FileEntry
    path: Path
    bytes_written: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_diagnostic(self) -> Optional[Diagnostic]:
        if self.ok:
            return None
        return Diagnostic(
            Severity.ERROR,
            self.error,
            offset=self.entry.data_offset,
            file_number=self.entry.file_number,
        )


class FileExtractor:
    """
    Writes file payloads under a root directory.

    Args:
        root: Directory the per-disk directories are created in

    Example:
        >>> extractor = FileExtractor("./recovered")
        >>> for result in extractor.extract_all(image):
        ...     print(result.path, result.ok)
    """

    def __init__(self, root: Union[str, Path] = "."):
        self.root = Path(root)

    def target_path(self, image: DiskImage, entry: FileEntry) -> Path:
        """Return where an entry of an image would be written."""
        if image.header is None:
            raise ValueError(f"disk image {image.index} has no decoded header")
        directory = self.root / build_directory_name(image.header)
        return directory / build_file_name(image.index, entry)

    def write(self, path: Path, payload: bytes) -> int:
        """
        Create the parent directory if absent and write the payload.

        Raises:
            ExtractionError: If the filesystem refuses the write
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(payload)
        except OSError as e:
            raise ExtractionError(str(path), e.strerror or str(e)) from e
        return len(payload)

    def extract(self, image: DiskImage, entry: FileEntry) -> ExtractionResult:
        """
        Write one entry's payload.

        Failures are returned in the result rather than raised, so the
        remaining files can still be written.
        """
        path = self.target_path(image, entry)
        try:
            written = self.write(path, entry.payload)
        except ExtractionError as e:
            logger.error(str(e))
            return ExtractionResult(entry=entry, path=path, error=str(e))
        logger.debug(f"Wrote {written} bytes to {path}")
        return ExtractionResult(entry=entry, path=path, bytes_written=written)

    def extract_all(self, image: DiskImage) -> list[ExtractionResult]:
        """Write every entry of a decoded image."""
        if image.header is None:
            return []
        return [self.extract(image, entry) for entry in image.entries]
