"""
hvcscan - HVC Disk Dump Scanner Command-Line Interface
======================================================

This module implements the command-line interface for listing and
recovering the files stored in raw HVC disk system dumps.

Usage Examples
--------------
List every disk side found in a dump:
    $ hvcscan dump.bin

With column headers:
    $ hvcscan -v dump.bin

Show a hex dump of every file:
    $ hvcscan --show dump.bin

Write recovered files under ./recovered:
    $ hvcscan --write -o ./recovered dump.bin

Dump that keeps the CRC bytes after every block:
    $ hvcscan --crc dump.bin
"""

import logging
from pathlib import Path
from typing import Optional

import click

from hvcdisk import __version__
from hvcdisk.cli.errors import handle_cli_exception
from hvcdisk.config import DEFAULT_YEAR_BASE, LEGACY_YEAR_BASE, ScanOptions
from hvcdisk.errors import Severity
from hvcdisk.fds import (
    DiskImage,
    DumpParser,
    FileExtractor,
    format_disk_summary,
    format_entry_row,
    format_hex_dump,
)
from hvcdisk.fds.listing import FILE_COUNT_WARNING, LISTING_HEADER
from hvcdisk.fds.parser import COUNT_MISMATCH_MESSAGE


def setup_logging(debug: bool) -> None:
    """Configure logging for a run."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.ERROR,
        format="%(levelname)s: %(message)s",
    )


def build_options(
    show: bool,
    write: bool,
    verbose: bool,
    crc_variant: Optional[bool],
    year_base: Optional[int],
    output: Optional[Path],
) -> ScanOptions:
    """Environment defaults with command-line flags applied on top."""
    options = ScanOptions.from_env()
    options.show_payload = show
    options.write_files = write
    options.verbose = verbose
    if crc_variant is not None:
        options.crc_variant = crc_variant
    if year_base is not None:
        options.year_base = year_base
    if output is not None:
        options.output_dir = output
    return options


def _echo_image(image: DiskImage, options: ScanOptions, extractor: FileExtractor) -> None:
    """Print the listing of one image and run the requested extras."""
    click.echo(format_disk_summary(image))
    diagnostics = list(image.diagnostics)

    if image.listing is not None and image.listing.has_directory:
        click.echo()
        if options.verbose:
            click.echo(LISTING_HEADER)
        for entry in image.entries:
            catalog = image.get_catalog(entry)
            click.echo(format_entry_row(entry, is_catalog=catalog is not None))
            if options.show_payload:
                click.echo(format_hex_dump(entry.payload))
            if catalog is not None:
                for catalog_line in catalog.display_lines:
                    click.echo(f"   | {catalog_line}")
        if not image.listing.count_matches:
            click.echo()
            click.echo(FILE_COUNT_WARNING)
            # The banner replaces the count diagnostic
            diagnostics = [
                d for d in diagnostics
                if not d.message.startswith(COUNT_MISMATCH_MESSAGE)
            ]

    if options.write_files and image.is_valid:
        for result in extractor.extract_all(image):
            if not result.ok:
                click.echo(f"  ! {result.error}", err=True)
            elif options.verbose:
                click.echo(f"  -> {result.path} ({result.bytes_written} bytes)")

    for diagnostic in diagnostics:
        marker = "!!" if diagnostic.severity == Severity.ERROR else "!"
        click.echo(f"  {marker} {diagnostic}")


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "-s", "--show",
    is_flag=True,
    help="Show a hex dump of every file's data",
)
@click.option(
    "-w", "--write",
    is_flag=True,
    help="Write recovered files to the output directory",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Print column headers and extraction details",
)
@click.option(
    "-c", "--crc/--no-crc",
    "crc_variant",
    default=None,
    help="Skip the 2 CRC bytes kept before every block tag",
)
@click.option(
    "--year-base",
    type=int,
    default=None,
    help=f"Offset added to stored year digits (default: {DEFAULT_YEAR_BASE}; "
         f"older listings used {LEGACY_YEAR_BASE})",
)
@click.option(
    "-o", "--output",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory for --write (default: current directory)",
)
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug logging",
)
@click.version_option(version=__version__, prog_name="hvcscan")
def main(
    input_file: Path,
    show: bool,
    write: bool,
    verbose: bool,
    crc_variant: Optional[bool],
    year_base: Optional[int],
    output: Optional[Path],
    debug: bool,
) -> None:
    """
    Scan a raw dump for HVC disk system data.

    INPUT_FILE is any byte dump; every disk side found in it is listed.

    \b
    Examples:
      hvcscan dump.bin
      hvcscan -v --show dump.bin
      hvcscan --write -o ./recovered dump.bin
      hvcscan --crc dump.bin
    """
    setup_logging(debug)
    options = build_options(show, write, verbose, crc_variant, year_base, output)

    try:
        scan = DumpParser.from_file(input_file, options)
    except Exception as e:
        handle_cli_exception(e, verbose=debug)

    click.echo()
    click.echo(str(input_file))

    if not scan.images:
        return

    if not options.uses_default_year_base:
        click.echo(
            f"note: year base {options.year_base} in use; listing revisions "
            f"disagree ({LEGACY_YEAR_BASE} vs {DEFAULT_YEAR_BASE})"
        )

    extractor = FileExtractor(options.output_dir)
    for image in scan.images:
        click.echo()
        try:
            _echo_image(image, options, extractor)
        except Exception as e:
            handle_cli_exception(e, verbose=debug)

    click.echo()


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
