"""
Listing, Hex Dump and Options Tests
===================================

Tests for the text rendering of decoded images and for ScanOptions.
"""

from pathlib import Path

import pytest

from hvcdisk.config import DEFAULT_YEAR_BASE, ScanOptions
from hvcdisk.fds import (
    DumpParser,
    format_disk_summary,
    format_entry_row,
    format_hex_dump,
    format_listing,
)
from hvcdisk.fds.listing import CATALOG_MARK, FILE_COUNT_WARNING, LISTING_HEADER

from conftest import SIGNATURE, build_file, build_image


# =============================================================================
# Listing Tests
# =============================================================================

class TestListing:
    """Tests for directory listing rows."""

    def test_disk_summary(self, single_file_image: bytes):
        image = DumpParser.from_bytes(single_file_image).images[0]
        assert format_disk_summary(image) == '  01 "ZLDA"\tv.0 S0 0F  2/21/86 11/1/86  1 files'

    def test_unreadable_summary(self):
        image = DumpParser.from_bytes(bytes(3) + SIGNATURE).images[0]
        assert format_disk_summary(image) == "  (disk image at byte 3 unreadable)"

    def test_entry_row(self, single_file_image: bytes):
        entry = DumpParser.from_bytes(single_file_image).images[0].entries[0]
        row = format_entry_row(entry)
        assert row == ' 0,00,\t"MAIN"    \t$6000\t10\t$6009\t0 PRG'

    def test_catalog_row_is_marked(self, catalog_payload: bytes):
        data = build_image([build_file(0, 0, b"KYODAKU-", 0x2800, catalog_payload, type_byte=2)])
        image = DumpParser.from_bytes(data).images[0]
        lines = format_listing(image)
        assert lines[-1] == ' 0,00,\t"KYODAKU-"\t$2800\t224\t$28DF\t2 VRAM' + CATALOG_MARK

    def test_only_catalog_entry_is_marked(self, catalog_payload: bytes, program_payload: bytes):
        files = [
            build_file(0, 0x00, b"KYODAKU-", 0x2800, catalog_payload, type_byte=2),
            build_file(0, 0x05, b"OTHER", 0x6000, program_payload),
        ]
        lines = format_listing(DumpParser.from_bytes(build_image(files)).images[0])
        assert lines[-2].endswith(CATALOG_MARK)
        assert lines[-1] == ' 0,05,\t"OTHER"   \t$6000\t10\t$6009\t0 PRG'

    def test_span_wraps_at_64k(self):
        data = build_image([build_file(0, 0, b"HIGH", 0xFFF0, bytes(0x20))])
        entry = DumpParser.from_bytes(data).images[0].entries[0]
        assert entry.load_span == 0x1000F
        assert "$000F" in format_entry_row(entry)

    def test_verbose_header(self, single_file_image: bytes):
        image = DumpParser.from_bytes(single_file_image).images[0]
        assert LISTING_HEADER not in format_listing(image)
        assert LISTING_HEADER in format_listing(image, verbose=True)

    def test_count_warning(self, program_payload: bytes):
        data = build_image([build_file(0, 0, b"MAIN", 0x6000, program_payload)], declared=3)
        lines = format_listing(DumpParser.from_bytes(data).images[0])
        assert lines[-1] == FILE_COUNT_WARNING
        assert "3 files" in lines[0]


# =============================================================================
# Hex Dump Tests
# =============================================================================

class TestHexDump:
    """Tests for format_hex_dump."""

    def test_layout(self):
        lines = format_hex_dump(b"$ABC" + bytes(range(16))).split("\n")
        assert lines[0] == "* dump @ byte 0 length 20"
        assert lines[1] == "{"
        assert lines[2].startswith("         0  1  2")
        assert lines[3].startswith(" 0000:  24 41 42 43 00 01 02 03  04 05")
        assert lines[3].endswith("  $ABC````````````")
        assert lines[4].startswith(" 0010:  0C 0D 0E 0F ")
        assert lines[4].endswith("````")
        assert lines[-1] == "}"

    def test_ascii_column_aligned(self):
        lines = format_hex_dump(b"A" * 17).split("\n")
        assert lines[3].index("AAAA") == lines[4].index("A", 7)

    def test_offset_and_length(self):
        dump = format_hex_dump(bytes(range(64)), offset=32, length=4)
        assert "* dump @ byte 32 length 4" in dump
        assert " 0020:  20 21 22 23" in dump

    def test_cite(self):
        lines = format_hex_dump(bytes(range(16)), cite=9).split("\n")
        assert lines[0].endswith("cite 9")
        marker = lines[3]
        assert marker.strip() == "V"
        assert "'09" in lines[4]
        assert marker.index("V") == lines[4].index("'09") + 1

    def test_empty(self):
        assert format_hex_dump(b"").split("\n")[-1] == "}"


# =============================================================================
# Options Tests
# =============================================================================

class TestScanOptions:
    """Tests for ScanOptions defaults and environment overrides."""

    def test_defaults(self):
        options = ScanOptions()
        assert not options.crc_variant
        assert options.year_base == DEFAULT_YEAR_BASE
        assert options.uses_default_year_base
        assert options.output_dir == Path(".")

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HVCDISK_CRC_VARIANT", "yes")
        monkeypatch.setenv("HVCDISK_YEAR_BASE", "1925")
        monkeypatch.setenv("HVCDISK_OUTPUT_DIR", str(tmp_path))
        options = ScanOptions.from_env()
        assert options.crc_variant
        assert options.year_base == 1925
        assert not options.uses_default_year_base
        assert options.output_dir == tmp_path

    @pytest.mark.parametrize("name,value", [
        ("HVCDISK_CRC_VARIANT", "maybe"),
        ("HVCDISK_YEAR_BASE", "nineteen"),
    ])
    def test_invalid_env_ignored(self, monkeypatch, name: str, value: str):
        monkeypatch.setenv(name, value)
        options = ScanOptions.from_env()
        assert not options.crc_variant
        assert options.year_base == DEFAULT_YEAR_BASE
