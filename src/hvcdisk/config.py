"""
Scan Configuration
==================

Options that change how a dump is decoded or what a run does with the
result. Configuration can come from:
- Default values (defined here)
- Environment variables
- Command-line flags (applied on top by the CLI)
"""

from dataclasses import dataclass, field
from pathlib import Path
import logging
import os

logger = logging.getLogger(__name__)

# Historical offset added to the stored year digits. The first released
# revision of the listing tool added 1925 (giving a four-digit year);
# later revisions add 25 (giving a two-digit year).
DEFAULT_YEAR_BASE = 25
LEGACY_YEAR_BASE = 1925

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class ScanOptions:
    """
    Options for scanning a dump.

    Attributes:
        show_payload: Render a hex dump of every file payload
        write_files: Write recovered files under ``output_dir``
        verbose: Print column headers in the listing
        crc_variant: Skip the 2 CRC bytes kept before every block tag.
            Dumps do not say whether they carry them, so this is never
            guessed.
        year_base: Offset added to stored year digits. 25 by default;
            older listings used 1925.
        output_dir: Root directory for recovered files
    """
    show_payload: bool = False
    write_files: bool = False
    verbose: bool = False
    crc_variant: bool = False
    year_base: int = DEFAULT_YEAR_BASE
    output_dir: Path = field(default_factory=lambda: Path("."))

    @classmethod
    def from_env(cls) -> "ScanOptions":
        """
        Create ScanOptions from environment variables.

        Environment variables (all optional):
            HVCDISK_CRC_VARIANT: "1"/"true"/"yes"/"on" or the negatives
            HVCDISK_YEAR_BASE: Year offset (integer)
            HVCDISK_OUTPUT_DIR: Extraction root directory

        Invalid values are ignored.
        """
        options = cls()

        if crc := os.environ.get("HVCDISK_CRC_VARIANT"):
            if crc.lower() in _TRUE_VALUES:
                options.crc_variant = True
            elif crc.lower() in _FALSE_VALUES:
                options.crc_variant = False
            else:
                logger.debug(f"Ignoring HVCDISK_CRC_VARIANT={crc!r}")

        if year_base := os.environ.get("HVCDISK_YEAR_BASE"):
            try:
                options.year_base = int(year_base)
            except ValueError:
                logger.debug(f"Ignoring HVCDISK_YEAR_BASE={year_base!r}")

        if output_dir := os.environ.get("HVCDISK_OUTPUT_DIR"):
            options.output_dir = Path(output_dir)

        return options

    @property
    def uses_default_year_base(self) -> bool:
        return self.year_base == DEFAULT_YEAR_BASE
