"""
OpenDocumentText class for injecting values into OpenDocument Text files.

This module provides the document-level API: it loads content.xml from an
.odt container (or a bare content.xml file), locates elements through the
tag scanner, splices generated markup into the content and repacks the
result.
"""

import io
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, BinaryIO

from lxml import etree

from .buffer import ContentBuffer
from .constants import (
    ATTR_STRING_VALUE,
    ATTR_TABLE_NAME,
    ATTR_TEXT_NAME,
    ATTR_VALUE_TYPE,
    ODT_MIMETYPE,
    TABLE_TABLE,
)
from .errors import ValidationError
from .escaping import escape_attribute
from .factory import ElementKind, NodeFactory
from .matcher import Node, NodeQuery, PairingMode
from .operations.batch import BatchOperations
from .package import OdtPackage
from .results import InjectionResult
from .tables import build_table

logger = logging.getLogger(__name__)

VARIABLE_KINDS = (ElementKind.VARIABLE_SET, ElementKind.VARIABLE_GET)


class OpenDocumentText:
    """Main class for filling in OpenDocument Text documents.

    Documents can be loaded from:
    - File paths to .odt containers (str or Path)
    - Directories holding an unpacked container
    - File paths to an unpacked content.xml
    - Raw bytes
    - BytesIO objects or open binary files

    Every edit scans the current content again before splicing, so edits can
    be chained freely.

    Example:
        >>> doc = OpenDocumentText("invoice-template.odt")
        >>> doc.inject_vars({"customer": "ACME & Sons", "total": "1 200 EUR"})
        >>> doc.replace_table("Lines", [["Item", "Price"], ["Bolts", "12"]], header_rows=1)
        >>> doc.save("invoice.odt")

    Attributes:
        path: Path to the document file or directory (None for in-memory documents)
    """

    def __init__(
        self,
        source: str | Path | bytes | BinaryIO,
        pairing: PairingMode = PairingMode.POSITIONAL,
    ) -> None:
        """Initialize a document from an .odt file, a directory, a content.xml file or data.

        Args:
            source: Document source
            pairing: How opening and closing tags are paired when locating
                elements (default: PairingMode.POSITIONAL)

        Raises:
            ValidationError: If the document cannot be loaded
            ArchiveError: If the container cannot be unpacked
        """
        self._package: OdtPackage | None = None
        self.path: Path | None = None

        if isinstance(source, bytes):
            content = self._load_package(OdtPackage.open(io.BytesIO(source)))
        elif hasattr(source, "read"):
            content = self._load_package(OdtPackage.open(source))  # type: ignore[arg-type]
        else:
            self.path = Path(source)
            content = self._load_path(self.path)

        self._buffer = ContentBuffer(content, pairing=pairing)
        self._batch_ops = BatchOperations(self)

    def _load_package(self, package: OdtPackage) -> str:
        self._package = package
        mimetype = package.mimetype
        if mimetype is not None and mimetype != ODT_MIMETYPE:
            logger.warning("Unexpected document type %s, expected %s", mimetype, ODT_MIMETYPE)
        return package.read_content()

    def _load_path(self, path: Path) -> str:
        """Load the content text from a container, a directory or a raw XML file."""
        if path.is_dir():
            logger.debug("Using unpacked container directory %s", path)
            return self._load_package(OdtPackage.from_directory(path))

        try:
            package = OdtPackage.open(path)
        except ValidationError:
            if not path.exists():
                raise
            # Not a ZIP: an already unpacked content.xml
            logger.debug("Loading %s as raw content XML", path)
            return path.read_bytes().decode("utf-8")
        return self._load_package(package)

    @property
    def content(self) -> str:
        """Current content.xml text."""
        return self._buffer.text

    @property
    def buffer(self) -> ContentBuffer:
        """The content buffer, for low-level span edits."""
        return self._buffer

    @property
    def temp_dir(self) -> Path | None:
        """Directory holding the unpacked container (None for raw XML sources)."""
        return self._package.temp_dir if self._package is not None else None

    @property
    def pairing(self) -> PairingMode:
        """Pairing mode used to locate elements."""
        return self._buffer.pairing

    # ------------------------------------------------------------------
    # Locating
    # ------------------------------------------------------------------

    def find_nodes(
        self, node: str, attributes: Mapping[str, str] | None = None, start: int = 0
    ) -> list[Node]:
        """Return every node named `node` whose attributes satisfy the filter."""
        return list(self._buffer.find_nodes(node, attributes, start))

    def find_first_node(
        self, node: str, attributes: Mapping[str, str] | None = None, start: int = 0
    ) -> Node | None:
        """Return the first matching node, or None."""
        return self._buffer.find_first(node, attributes, start)

    def find_last_node(
        self, node: str, attributes: Mapping[str, str] | None = None, start: int = 0
    ) -> Node | None:
        """Return the last matching node starting at or after `start`, or None."""
        return self._buffer.find_last(node, attributes, start)

    # ------------------------------------------------------------------
    # Injection
    # ------------------------------------------------------------------

    def inject_var(self, name: str, value: str) -> int:
        """Set the value of a user variable everywhere it is declared or displayed.

        Every text:variable-set and text:variable-get element whose text:name
        is `name` is rewritten with `value` as its (escaped) content. All of
        them are located in one scan and replaced from the end of the content
        backwards.

        Args:
            name: Variable name (text:name attribute)
            value: New value, plain text

        Returns:
            Number of elements rewritten; 0 when the variable does not exist
        """
        wanted = {ATTR_TEXT_NAME: name}
        replacements = [
            (node, self._variable_markup(kind, node, value))
            for kind in VARIABLE_KINDS
            for node in self._buffer.find_nodes(kind.value, wanted)
        ]
        if not replacements:
            logger.warning('Cannot find variable "%s"', name)
            return 0

        self._buffer.replace_nodes(replacements)
        logger.debug('Injected variable "%s" into %d element(s)', name, len(replacements))
        return len(replacements)

    @staticmethod
    def _variable_markup(kind: ElementKind, node: Node, value: str) -> str:
        attributes: dict[str, str | None] = dict(node.attributes)
        if kind is ElementKind.VARIABLE_SET:
            attributes[ATTR_VALUE_TYPE] = "string"
        if ATTR_STRING_VALUE in attributes:
            attributes[ATTR_STRING_VALUE] = escape_attribute(value)
        return NodeFactory(kind, attributes).new_node(value)

    def inject_vars(self, variables: Mapping[str, str]) -> int:
        """Inject several variables one after the other.

        Returns:
            Total number of elements rewritten
        """
        return sum(self.inject_var(name, value) for name, value in variables.items())

    def inner_xml(
        self,
        first: NodeQuery | Mapping[str, Any],
        inner: str,
        last: NodeQuery | Mapping[str, Any] | None = None,
    ) -> bool:
        """Replace a located element, or a range of elements, with markup.

        The range starts at the first node matching `first`. When `last` is
        given, it ends with the last node matching `last` found after the
        end of the first node; if there is none, only the first node is
        replaced.

        Args:
            first: Locator of the first element
            inner: Replacement markup, inserted as is
            last: Optional locator of the last element

        Returns:
            True if the content was changed, False if `first` was not found

        Example:
            >>> doc.inner_xml(
            ...     {"node": "table:table-row", "attributes": {"table:style-name": "Lines.1"}},
            ...     rows_markup,
            ...     last={"node": "table:table-row"},
            ... )
        """
        first_query = NodeQuery.coerce(first)
        first_node = self._buffer.find_first(
            first_query.node, first_query.attributes, first_query.start
        )
        if first_node is None:
            logger.warning("Node not found: %s", first_query)
            return False

        last_node = None
        if last is not None:
            last_query = NodeQuery.coerce(last)
            last_node = self._buffer.find_last(
                last_query.node, last_query.attributes, first_node.end
            )
            if last_node is None:
                logger.debug("No last node %s, replacing the first node only", last_query)

        self._buffer.replace_range(first_node, last_node, inner)
        return True

    def replace_table(
        self,
        name: str,
        rows: Sequence[Sequence[str]],
        columns: str | None = None,
        header_rows: int = 0,
    ) -> bool:
        """Regenerate the columns and rows of a named table.

        The table element keeps its attributes; its children are replaced by
        the column definitions and rows built from `rows`.

        Args:
            name: Table name (table:name attribute)
            rows: Cell texts, row by row
            columns: Column specification such as "A-D"; defaults to one
                column per cell of the widest row
            header_rows: Number of leading rows marked as header rows

        Returns:
            True if the table was replaced, False if it was not found
        """
        table = self._buffer.find_first(TABLE_TABLE, {ATTR_TABLE_NAME: name})
        if table is None:
            logger.warning('Cannot find table "%s"', name)
            return False

        markup = build_table(name, rows, columns, header_rows, attributes=table.attributes)
        self._buffer.replace_node(table, markup)
        return True

    # ------------------------------------------------------------------
    # Batch operations
    # ------------------------------------------------------------------

    def apply_injections(
        self, injections: list[dict[str, Any]], stop_on_error: bool = False
    ) -> list[InjectionResult]:
        """Apply a list of injections in order. See BatchOperations.apply_injections."""
        return self._batch_ops.apply_injections(injections, stop_on_error)

    def apply_injection_file(
        self, file_path: str | Path, stop_on_error: bool = False
    ) -> list[InjectionResult]:
        """Apply injections read from a YAML or JSON file."""
        return self._batch_ops.apply_injection_file(file_path, stop_on_error)

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------

    def validate(self) -> None:
        """Check that the current content is well-formed XML.

        Raises:
            ValidationError: With the parser's error log if it is not
        """
        parser = etree.XMLParser(resolve_entities=False, huge_tree=True)
        try:
            etree.fromstring(self.content.encode("utf-8"), parser)
        except etree.XMLSyntaxError as e:
            errors = [str(entry) for entry in e.error_log]
            raise ValidationError(f"Content is not well-formed XML: {e}", errors=errors) from e

    def write_content(self, output_path: str | Path | None = None) -> None:
        """Write the current content.xml text to a file.

        Without `output_path` the text goes back where it was read from: the
        content.xml of the container directory (an unpacked source or the
        temporary extraction), or the raw XML file.
        """
        if output_path is None and self._package is not None:
            self._package.write_content(self.content)
            return
        target = output_path if output_path is not None else self.path
        if target is None:
            raise ValueError("output_path is required for in-memory documents")
        Path(target).write_bytes(self.content.encode("utf-8"))

    def save(self, output_path: str | Path | None = None, validate: bool = True) -> None:
        """Save the document.

        Containers are repacked; raw content.xml sources are written back as
        XML. A document opened from an unpacked directory is written back into
        that directory when saved to its own path, and packed into an .odt
        file otherwise.

        Args:
            output_path: Where to save. If None, saves to the original path.
                For in-memory documents output_path is required.
            validate: Check that the content is well-formed before saving

        Raises:
            ValidationError: If validation fails
            ArchiveError: If the container cannot be written
            ValueError: If output_path is missing for an in-memory document
        """
        if output_path is None:
            if self.path is None:
                raise ValueError(
                    "output_path is required for in-memory documents. "
                    "Use doc.save(path) or doc.save_to_bytes() instead."
                )
            output_path = self.path
        output_path = Path(output_path)

        if validate:
            self.validate()

        if self._package is None:
            self.write_content(output_path)
        elif self._package.is_unpacked_source and output_path == self.path:
            self._package.write_content(self.content)
        else:
            self._package.save(output_path, content=self.content)
        logger.debug("Saved document to %s", output_path)

    def save_to_bytes(self, validate: bool = True) -> bytes:
        """Save the document container to bytes.

        Raises:
            ValidationError: If validation fails
            ValueError: If the document was loaded from a raw content.xml
        """
        if self._package is None:
            raise ValueError("save_to_bytes() requires a document loaded from a container")
        if validate:
            self.validate()
        return self._package.save_to_bytes(content=self.content)

    def close(self) -> None:
        """Remove the temporary directory of the unpacked container."""
        if self._package is not None:
            self._package.close()

    def __enter__(self) -> "OpenDocumentText":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
