"""
Table markup synthesis.

Builds table:table-column, table:table-row and whole table:table elements
from plain Python rows, using the same naming as LibreOffice for automatic
column styles ("<table name>.<column letter>").
"""

from collections.abc import Mapping, Sequence

from .columns import column_letters, expand_columns
from .constants import ATTR_STYLE_NAME, ATTR_TABLE_NAME, ATTR_VALUE_TYPE
from .factory import ElementKind, NodeFactory

COLUMN = NodeFactory(ElementKind.COLUMN)
ROW = NodeFactory(ElementKind.ROW)
CELL = NodeFactory(ElementKind.CELL, {ATTR_VALUE_TYPE: "string"})
PARAGRAPH = NodeFactory(ElementKind.PARAGRAPH)
HEADER_ROWS = NodeFactory(ElementKind.HEADER_ROWS)
TABLE = NodeFactory(ElementKind.TABLE)


def table_columns(table_name: str, spec: str) -> list[str]:
    """Build one column definition per letter of a column specification.

    Example:
        >>> table_columns("Table1", "A-B")
        ['<table:table-column table:style-name="Table1.A"/>',
         '<table:table-column table:style-name="Table1.B"/>']
    """
    return [
        COLUMN.new_node(attributes={ATTR_STYLE_NAME: f"{table_name}.{letter}"})
        for letter in expand_columns(spec)
    ]


def table_rows(rows: Sequence[Sequence[str]], paragraph: NodeFactory = PARAGRAPH) -> list[str]:
    """Build table rows whose cells each hold one paragraph of text."""
    return [
        ROW.new_node(
            children=[CELL.new_node(children=[paragraph.new_node(str(value))]) for value in row]
        )
        for row in rows
    ]


def build_table(
    name: str,
    rows: Sequence[Sequence[str]],
    columns: str | None = None,
    header_rows: int = 0,
    attributes: Mapping[str, str | None] | None = None,
) -> str:
    """Build a complete table:table element.

    Args:
        name: Table name (table:name attribute and column style prefix)
        rows: Cell texts, row by row
        columns: Column specification such as "A-D"; defaults to one column
            per cell of the widest row
        header_rows: Number of leading rows wrapped in table:table-header-rows
        attributes: Extra attributes of the table element, e.g. the ones
            of the table being replaced

    Returns:
        The table markup
    """
    if columns is None:
        width = max((len(row) for row in rows), default=0)
        columns = "".join(column_letters(width))

    children = table_columns(name, columns) if columns else []
    header, body = rows[:header_rows], rows[header_rows:]
    if header:
        children.append(HEADER_ROWS.new_node(children=table_rows(header)))
    children.extend(table_rows(body))

    return TABLE.new_node(
        attributes={**(attributes or {}), ATTR_TABLE_NAME: name},
        children=children,
    )
