"""
File Extraction Tests
=====================

Tests for output naming and writing recovered files.
"""

from hvcdisk.fds import (
    DiskHeader,
    DumpParser,
    FileEntry,
    FileExtractor,
    build_directory_name,
    build_file_name,
    sanitize_component,
)

from conftest import SIGNATURE, build_file, build_image


def _entry(name: str, file_number: int = 1, file_id: int = 0x2A) -> FileEntry:
    return FileEntry(
        file_number=file_number,
        file_id=file_id,
        name=name,
        load_address=0,
        size=1,
        type_byte=0,
        payload=b"x",
    )


class TestNaming:
    """Tests for directory and file names."""

    def test_directory_name(self, single_file_image: bytes):
        header = DumpParser.from_bytes(single_file_image).images[0].header
        assert build_directory_name(header) == "HVC-01-ZLDA"

    def test_directory_name_strips_title_padding(self):
        data = build_image([], maker=0xA4, title=b"ZL  ")
        header = DumpParser.from_bytes(data).images[0].header
        assert build_directory_name(header) == "HVC-A4-ZL"

    def test_file_name(self):
        assert build_file_name(3, _entry("MAIN")) == "3-1-2A-MAIN"

    def test_sanitize_component(self):
        assert sanitize_component("../a\\b\x00c") == "..abc"

    def test_title_separators_removed(self):
        data = build_image([], title=b"A/B\\")
        header = DumpParser.from_bytes(data).images[0].header
        assert build_directory_name(header) == "HVC-01-AB"

    def test_system_name_separators_removed(self, single_file_image: bytes):
        header = DumpParser.from_bytes(single_file_image).images[0].header
        forged = DiskHeader(
            signature=b"\x01*NINTENDO-H/C*",
            maker_code=header.maker_code,
            title_id=header.title_id,
            version=header.version,
            disk_side=header.disk_side,
            disk_numbers=header.disk_numbers,
            boot_file_id=header.boot_file_id,
            completed=header.completed,
            created=header.created,
        )
        assert build_directory_name(forged) == "HC-01-ZLDA"

    def test_file_name_separators_removed(self):
        name = build_file_name(0, _entry("..\\X/Y\x00"))
        assert "/" not in name
        assert "\\" not in name
        assert "\x00" not in name
        assert name == "0-1-2A-..XY"


class TestFileExtractor:
    """Tests for FileExtractor writes."""

    def test_round_trip(self, tmp_path, single_file_image: bytes, program_payload: bytes):
        image = DumpParser.from_bytes(single_file_image).images[0]
        results = FileExtractor(tmp_path).extract_all(image)
        assert len(results) == 1
        result = results[0]
        assert result.ok
        assert result.bytes_written == 10
        assert result.path == tmp_path / "HVC-01-ZLDA" / "0-0-00-MAIN"
        assert result.path.read_bytes() == program_payload

    def test_one_file_per_entry(self, tmp_path):
        files = [
            build_file(i, 0x10 + i, f"F{i}".encode(), 0, bytes([i]) * 4)
            for i in range(4)
        ]
        image = DumpParser.from_bytes(build_image(files)).images[0]
        FileExtractor(tmp_path).extract_all(image)
        written = sorted(p.name for p in (tmp_path / "HVC-01-ZLDA").iterdir())
        assert written == ["0-0-10-F0", "0-1-11-F1", "0-2-12-F2", "0-3-13-F3"]

    def test_overwrite(self, tmp_path, single_file_image: bytes, program_payload: bytes):
        image = DumpParser.from_bytes(single_file_image).images[0]
        extractor = FileExtractor(tmp_path)
        target = extractor.target_path(image, image.entries[0])
        target.parent.mkdir(parents=True)
        target.write_bytes(b"stale contents that are longer")
        extractor.extract_all(image)
        assert target.read_bytes() == program_payload

    def test_images_use_their_own_index(self, tmp_path, single_file_image: bytes):
        scan = DumpParser.from_bytes(single_file_image + single_file_image)
        extractor = FileExtractor(tmp_path)
        paths = [extractor.extract(image, entry).path for image, entry in scan.iter_entries()]
        assert [p.name for p in paths] == ["0-0-00-MAIN", "1-0-00-MAIN"]

    def test_write_failure_is_reported(self, tmp_path, single_file_image: bytes):
        """A write failure is returned, not raised."""
        blocker = tmp_path / "blocker"
        blocker.write_bytes(b"")
        image = DumpParser.from_bytes(single_file_image).images[0]
        results = FileExtractor(blocker).extract_all(image)
        assert len(results) == 1
        assert not results[0].ok
        assert results[0].bytes_written == 0
        diagnostic = results[0].to_diagnostic()
        assert diagnostic is not None
        assert diagnostic.file_number == 0

    def test_truncated_payload_written_as_found(self, tmp_path):
        data = build_image([build_file(0, 0, b"CUT", 0, b"abc", size=8)])
        image = DumpParser.from_bytes(data).images[0]
        result = FileExtractor(tmp_path).extract_all(image)[0]
        assert result.path.read_bytes() == b"abc"

    def test_unreadable_image_skipped(self, tmp_path):
        image = DumpParser.from_bytes(SIGNATURE).images[0]
        assert FileExtractor(tmp_path).extract_all(image) == []
