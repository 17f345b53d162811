"""
OdtPackage class for managing the OpenDocument ZIP structure.

This module keeps archive handling away from content editing: it unpacks a
container into a temporary directory, exposes content.xml as text, and
repacks the directory into a valid OpenDocument file.
"""

import io
import logging
import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import Any, BinaryIO

from .constants import CONTENT_PART, MIMETYPE_PART, TEMP_DIR_PREFIX
from .errors import ArchiveError, ValidationError

logger = logging.getLogger(__name__)


class OdtPackage:
    """Manages the OpenDocument ZIP package structure.

    This class handles the low-level operations of:
    - Extracting .odt ZIP archives to temporary directories
    - Reading and writing the content.xml stream as text
    - Repacking the directory, with the uncompressed mimetype entry first
    - Cleaning up temporary resources

    Example:
        >>> with OdtPackage.open("letter.odt") as pkg:
        ...     content = pkg.read_content()
        ...     pkg.write_content(content.replace("Dear", "Hello"))
        ...     pkg.save("letter-merged.odt")
    """

    def __init__(
        self, temp_dir: Path, source_path: Path | None = None, owns_dir: bool = True
    ) -> None:
        """Initialize package with an already-extracted directory.

        Use the class methods `open()`, `from_bytes()` or `from_directory()`
        instead of calling this constructor directly.

        Args:
            temp_dir: Path to the extracted package contents
            source_path: Original source file path
            owns_dir: Whether close() removes the directory
        """
        self._temp_dir = temp_dir
        self._source_path = source_path
        self._owns_dir = owns_dir
        self._closed = False

    @classmethod
    def open(cls, source: str | Path | BinaryIO) -> "OdtPackage":
        """Open an OpenDocument package from a file path or file-like object.

        Args:
            source: Path to the .odt file or file-like object containing it

        Returns:
            OdtPackage instance with extracted contents

        Raises:
            ValidationError: If the source path does not exist or is not a ZIP file
            ArchiveError: If extraction fails
        """
        source_path: Path | None = None

        if isinstance(source, str | Path):
            source_path = Path(source)
            if not source_path.exists():
                raise ValidationError(f"Document not found: {source_path}")
            zip_source: Path | BinaryIO = source_path
        else:
            zip_source = source

        if not zipfile.is_zipfile(zip_source):
            raise ValidationError("Source must be a valid OpenDocument (ZIP) file")

        # Reset stream position if it was checked by is_zipfile
        if hasattr(zip_source, "seek"):
            zip_source.seek(0)

        temp_dir = Path(tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX))
        try:
            with zipfile.ZipFile(zip_source, "r") as zip_ref:
                zip_ref.extractall(temp_dir)
        except (zipfile.BadZipFile, OSError) as e:
            shutil.rmtree(temp_dir, ignore_errors=True)
            raise ArchiveError(
                f"Failed to extract document: {e}",
                path=str(source_path) if source_path else None,
            ) from e

        logger.debug("Extracted %s to %s", source_path or "<in-memory document>", temp_dir)
        return cls(temp_dir, source_path)

    @classmethod
    def from_bytes(cls, data: bytes) -> "OdtPackage":
        """Open an OpenDocument package from bytes."""
        return cls.open(io.BytesIO(data))

    @classmethod
    def from_directory(cls, directory: str | Path) -> "OdtPackage":
        """Use an already unpacked container directory in place.

        Edits are written into the directory itself, and close() leaves it
        on disk.

        Raises:
            ValidationError: If `directory` is not a directory
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise ValidationError(f"Not a directory: {directory}")
        return cls(directory, source_path=directory, owns_dir=False)

    @property
    def temp_dir(self) -> Path:
        """Get the temporary directory containing extracted package contents."""
        return self._temp_dir

    @property
    def source_path(self) -> Path | None:
        """Get the original source file path, if available."""
        return self._source_path

    @property
    def is_unpacked_source(self) -> bool:
        """Whether the package is a directory the caller unpacked (see from_directory)."""
        return not self._owns_dir

    @property
    def mimetype(self) -> str | None:
        """Content of the mimetype part, or None if the package has none."""
        mimetype_path = self.get_part_path(MIMETYPE_PART)
        if not mimetype_path.is_file():
            return None
        return mimetype_path.read_bytes().decode("ascii", errors="replace").strip()

    def get_part_path(self, part_name: str) -> Path:
        """Get the filesystem path to a package part.

        Args:
            part_name: Relative path within the package (e.g., "content.xml")
        """
        return self._temp_dir / part_name

    def part_exists(self, part_name: str) -> bool:
        """Check if a package part exists."""
        return self.get_part_path(part_name).exists()

    def read_content(self) -> str:
        """Read content.xml as UTF-8 text.

        Raises:
            ValidationError: If the package has no content.xml
        """
        content_path = self.get_part_path(CONTENT_PART)
        if not content_path.exists():
            raise ValidationError(f"{CONTENT_PART} not found in package")
        return content_path.read_bytes().decode("utf-8")

    def write_content(self, content: str) -> None:
        """Write content.xml back into the extracted package."""
        self.get_part_path(CONTENT_PART).write_bytes(content.encode("utf-8"))

    def _write_zip(self, target: Path | BinaryIO, content: str | None = None) -> None:
        # The mimetype entry must come first and be stored uncompressed
        mimetype = self.get_part_path(MIMETYPE_PART)
        content_path = self.get_part_path(CONTENT_PART)
        with zipfile.ZipFile(target, "w", zipfile.ZIP_DEFLATED) as zip_ref:
            if mimetype.is_file():
                zip_ref.write(mimetype, MIMETYPE_PART, compress_type=zipfile.ZIP_STORED)
            if content is not None and not content_path.is_file():
                zip_ref.writestr(CONTENT_PART, content.encode("utf-8"))
            for file in sorted(self._temp_dir.rglob("*")):
                if not file.is_file() or file == mimetype:
                    continue
                arcname = file.relative_to(self._temp_dir).as_posix()
                if content is not None and file == content_path:
                    zip_ref.writestr(arcname, content.encode("utf-8"))
                else:
                    zip_ref.write(file, arcname)

    def save(self, output_path: str | Path, content: str | None = None) -> None:
        """Save the package to an .odt file.

        Args:
            output_path: Target .odt path
            content: content.xml text to pack instead of the file on disk

        Raises:
            ArchiveError: If the archive cannot be written
        """
        output_path = Path(output_path)
        try:
            self._write_zip(output_path, content)
        except OSError as e:
            raise ArchiveError(f"Failed to write {output_path}: {e}", path=str(output_path)) from e
        logger.debug("Saved package to %s", output_path)

    def save_to_bytes(self, content: str | None = None) -> bytes:
        """Save the package to bytes."""
        buffer = io.BytesIO()
        try:
            self._write_zip(buffer, content)
        except OSError as e:
            raise ArchiveError(f"Failed to pack document: {e}") from e
        return buffer.getvalue()

    def close(self) -> None:
        """Clean up temporary directory."""
        if self._closed:
            return
        self._closed = True
        if self._owns_dir and self._temp_dir.exists():
            shutil.rmtree(self._temp_dir, ignore_errors=True)

    def __enter__(self) -> "OdtPackage":
        """Context manager support."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager cleanup."""
        self.close()

    def __del__(self) -> None:
        """Clean up temporary directory on garbage collection."""
        self.close()
