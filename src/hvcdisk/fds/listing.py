"""
Directory Listing Rendering
===========================

Text rows for a decoded disk image, in the column layout of the classic
listing tool:

    2A "ZLDA"       v.0 S0 0F  11/1/86 2/21/86  8 files

     n id    name            load    size    span    type
     0,00,   "KYODAKU-"      $2800   224     $28DF   2 VRAM \\
     1,01,   "ZELDAPRG"      $6000   32768   $DFFF   0 PRG
"""

from hvcdisk.fds.parser import DiskImage
from hvcdisk.fds.records import FILE_NAME_LENGTH, DiskHeader, FileEntry

LISTING_HEADER = " n id\t name\t\tload\tsize\tspan\ttype"
FILE_COUNT_WARNING = "** File count wrong. Check file system. **"
CATALOG_MARK = " \\"


def format_header_summary(header: DiskHeader) -> str:
    """One-line summary of a disk header."""
    return (
        f"  {header.maker_code_hex} \"{header.title_text}\"\t"
        f"v.{header.version} S{header.disk_side} {header.boot_file_id:02X}  "
        f"{header.completed} {header.created}  "
    )


def format_disk_summary(image: DiskImage) -> str:
    """Summary line for an image, including the declared file count."""
    if image.header is None:
        return f"  (disk image at byte {image.offset} unreadable)"
    summary = format_header_summary(image.header)
    if image.listing is not None and image.listing.has_directory:
        summary += f"{image.listing.declared_file_count} files"
    return summary.rstrip()


def format_entry_row(entry: FileEntry, is_catalog: bool = False) -> str:
    """One directory row for a file entry."""
    padding = " " * max(0, FILE_NAME_LENGTH - len(entry.name))
    row = (
        f" {entry.file_number},{entry.file_id:02X},\t"
        f"\"{entry.name}\"{padding}\t"
        f"${entry.load_address:04X}\t"
        f"{entry.size}\t"
        f"${entry.load_span & 0xFFFF:04X}\t"
        f"{entry.type_byte} {entry.file_type.get_label()}"
    )
    if is_catalog:
        row += CATALOG_MARK
    return row


def format_listing(image: DiskImage, verbose: bool = False) -> list[str]:
    """All listing lines for one image: summary, header and rows."""
    lines = [format_disk_summary(image)]
    if image.listing is None or not image.listing.has_directory:
        return lines
    lines.append("")
    if verbose:
        lines.append(LISTING_HEADER)
    for entry in image.entries:
        lines.append(format_entry_row(entry, image.get_catalog(entry) is not None))
    if not image.listing.count_matches:
        lines.append("")
        lines.append(FILE_COUNT_WARNING)
    return lines
