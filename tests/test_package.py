"""Tests for the OdtPackage container wrapper."""

import io
import zipfile
from pathlib import Path

import pytest

from python_odt_merge.errors import ArchiveError, ValidationError
from python_odt_merge.package import OdtPackage

CONTENT = '<?xml version="1.0" encoding="UTF-8"?>\n<office:document-content/>'


def create_test_odt(path: Path, content: str = CONTENT) -> None:
    """Create a minimal OpenDocument container."""
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("styles.xml", "<office:document-styles/>")
        zf.writestr("content.xml", content)
        zf.writestr("mimetype", "application/vnd.oasis.opendocument.text")
        zf.writestr("META-INF/manifest.xml", "<manifest:manifest/>")


class TestOpen:
    """Test unpacking."""

    def test_open_path(self, tmp_path):
        path = tmp_path / "doc.odt"
        create_test_odt(path)
        with OdtPackage.open(path) as pkg:
            assert pkg.source_path == path
            assert pkg.read_content() == CONTENT
            assert pkg.part_exists("META-INF/manifest.xml")

    def test_from_bytes(self, tmp_path):
        path = tmp_path / "doc.odt"
        create_test_odt(path)
        with OdtPackage.from_bytes(path.read_bytes()) as pkg:
            assert pkg.source_path is None
            assert pkg.read_content() == CONTENT

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValidationError, match="not found"):
            OdtPackage.open(tmp_path / "missing.odt")

    def test_not_a_zip(self, tmp_path):
        path = tmp_path / "content.xml"
        path.write_text(CONTENT)
        with pytest.raises(ValidationError, match="ZIP"):
            OdtPackage.open(path)

    def test_missing_content_part(self, tmp_path):
        path = tmp_path / "empty.odt"
        with zipfile.ZipFile(path, "w") as zf:
            zf.writestr("mimetype", "application/vnd.oasis.opendocument.text")
        with OdtPackage.open(path) as pkg:
            with pytest.raises(ValidationError, match="content.xml"):
                pkg.read_content()

    def test_crlf_preserved(self, tmp_path):
        """Content is read byte for byte, line endings included."""
        path = tmp_path / "doc.odt"
        create_test_odt(path, "<a:b>\r\n</a:b>")
        with OdtPackage.open(path) as pkg:
            assert pkg.read_content() == "<a:b>\r\n</a:b>"


class TestFromDirectory:
    """Test packages backed by an unpacked directory."""

    def test_reads_in_place(self, tmp_path):
        (tmp_path / "content.xml").write_text(CONTENT)
        pkg = OdtPackage.from_directory(tmp_path)
        assert pkg.temp_dir == tmp_path
        assert pkg.is_unpacked_source
        assert pkg.read_content() == CONTENT

    def test_not_a_directory(self, tmp_path):
        with pytest.raises(ValidationError, match="Not a directory"):
            OdtPackage.from_directory(tmp_path / "missing")

    def test_close_keeps_directory(self, tmp_path):
        (tmp_path / "content.xml").write_text(CONTENT)
        with OdtPackage.from_directory(tmp_path):
            pass
        assert (tmp_path / "content.xml").exists()

    def test_mimetype(self, tmp_path):
        assert OdtPackage.from_directory(tmp_path).mimetype is None
        (tmp_path / "mimetype").write_text("application/vnd.oasis.opendocument.text\n")
        assert OdtPackage.from_directory(tmp_path).mimetype == (
            "application/vnd.oasis.opendocument.text"
        )


class TestSave:
    """Test repacking."""

    def test_mimetype_first_and_stored(self, tmp_path):
        """The mimetype entry is written first, uncompressed."""
        source = tmp_path / "doc.odt"
        create_test_odt(source)
        output = tmp_path / "out.odt"
        with OdtPackage.open(source) as pkg:
            pkg.save(output)

        with zipfile.ZipFile(output) as zf:
            infos = zf.infolist()
            assert infos[0].filename == "mimetype"
            assert infos[0].compress_type == zipfile.ZIP_STORED
            assert set(zf.namelist()) == {
                "mimetype",
                "styles.xml",
                "content.xml",
                "META-INF/manifest.xml",
            }

    def test_written_content_is_saved(self, tmp_path):
        source = tmp_path / "doc.odt"
        create_test_odt(source)
        with OdtPackage.open(source) as pkg:
            pkg.write_content("<office:document-content>é</office:document-content>")
            data = pkg.save_to_bytes()

        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            assert zf.read("content.xml").decode("utf-8") == (
                "<office:document-content>é</office:document-content>"
            )

    def test_content_override(self, tmp_path):
        """Given content is packed without touching the file on disk."""
        source = tmp_path / "doc.odt"
        create_test_odt(source)
        with OdtPackage.open(source) as pkg:
            data = pkg.save_to_bytes(content="<a:b/>")
            assert pkg.read_content() == CONTENT

        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            assert zf.read("content.xml") == b"<a:b/>"
            assert zf.namelist()[0] == "mimetype"

    def test_save_failure_is_archive_error(self, tmp_path):
        """Writing into a missing directory aborts with ArchiveError."""
        source = tmp_path / "doc.odt"
        create_test_odt(source)
        with OdtPackage.open(source) as pkg:
            with pytest.raises(ArchiveError):
                pkg.save(tmp_path / "missing-dir" / "out.odt")


class TestCleanup:
    """Test temporary directory lifecycle."""

    def test_close_removes_temp_dir(self, tmp_path):
        source = tmp_path / "doc.odt"
        create_test_odt(source)
        pkg = OdtPackage.open(source)
        temp_dir = pkg.temp_dir
        assert temp_dir.exists()
        pkg.close()
        assert not temp_dir.exists()

    def test_context_manager(self, tmp_path):
        source = tmp_path / "doc.odt"
        create_test_odt(source)
        with OdtPackage.open(source) as pkg:
            temp_dir = pkg.temp_dir
        assert not temp_dir.exists()
