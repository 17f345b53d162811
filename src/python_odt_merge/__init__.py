"""
python_odt_merge - Fill in OpenDocument Text templates by splicing markup.

This package edits the content.xml of an .odt file without building a DOM:
a single regex scan finds tag boundaries, opening and closing tags are paired
by position, and generated markup is spliced into the text. It is meant for
mail-merge style variables and regenerated tables.

Example:
    >>> from python_odt_merge import OpenDocumentText
    >>> doc = OpenDocumentText("letter-template.odt")
    >>> doc.inject_vars({"recipient": "Jane Doe", "date": "2026-10-18"})
    >>> doc.save("letter.odt")
"""

__version__ = "0.1.0"
__all__ = [
    "OpenDocumentText",
    "OdtPackage",
    "ContentBuffer",
    "OdtMergeError",
    "ValidationError",
    "ArchiveError",
    "StaleNodeError",
    "InjectionResult",
    "TagEvent",
    "next_tag",
    "scan_tags",
    "parse_attributes",
    "Node",
    "NodeQuery",
    "PairingMode",
    "find_nodes",
    "find_first_node",
    "find_last_node",
    "ElementKind",
    "NodeFactory",
    "create_node",
    "escape_libreoffice",
    "expand_columns",
    "build_table",
    "table_columns",
    "table_rows",
]

from .attributes import parse_attributes
from .buffer import ContentBuffer
from .columns import expand_columns
from .document import OpenDocumentText
from .errors import ArchiveError, OdtMergeError, StaleNodeError, ValidationError
from .escaping import escape_libreoffice
from .factory import ElementKind, NodeFactory, create_node
from .matcher import Node, NodeQuery, PairingMode, find_first_node, find_last_node, find_nodes
from .package import OdtPackage
from .results import InjectionResult
from .scanner import TagEvent, next_tag, scan_tags
from .tables import build_table, table_columns, table_rows
