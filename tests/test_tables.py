"""Tests for table markup synthesis."""

from python_odt_merge.matcher import find_nodes
from python_odt_merge.tables import build_table, table_columns, table_rows


class TestTableColumns:
    """Test column definitions built from a column specification."""

    def test_range(self):
        assert table_columns("Items", "A-C") == [
            '<table:table-column table:style-name="Items.A"/>',
            '<table:table-column table:style-name="Items.B"/>',
            '<table:table-column table:style-name="Items.C"/>',
        ]

    def test_duplicates_kept(self):
        """Duplicated letters give duplicated columns."""
        assert len(table_columns("T", "A-BB-E")) == 6


class TestTableRows:
    """Test row generation."""

    def test_cells_hold_escaped_paragraphs(self):
        rows = table_rows([["a & b", "2"]])
        assert rows == [
            "<table:table-row>"
            '<table:table-cell office:value-type="string"><text:p>a &amp; b</text:p></table:table-cell>'
            '<table:table-cell office:value-type="string"><text:p>2</text:p></table:table-cell>'
            "</table:table-row>"
        ]

    def test_empty_cell(self):
        """An empty value gives an empty paragraph."""
        rows = table_rows([[""]])
        assert "<text:p/>" in rows[0]


class TestBuildTable:
    """Test complete tables."""

    def test_default_columns_follow_widest_row(self):
        table = build_table("T", [["a"], ["b", "c", "d"]])
        assert len(list(find_nodes(table, "table:table-column"))) == 3
        assert len(list(find_nodes(table, "table:table-row"))) == 2

    def test_header_rows(self):
        """Leading rows are wrapped in table:table-header-rows."""
        table = build_table("T", [["H1", "H2"], ["a", "b"], ["c", "d"]], header_rows=1)
        header = next(find_nodes(table, "table:table-header-rows"))
        assert "<text:p>H1</text:p>" in header.inner
        assert "<text:p>a</text:p>" not in header.inner
        assert len(list(find_nodes(table, "table:table-row"))) == 3

    def test_attributes_kept_and_name_set(self):
        """Existing attributes are kept; table:name is always the given name."""
        table = build_table(
            "T", [["x"]], attributes={"table:name": "Old", "table:style-name": "T"}
        )
        assert table.startswith('<table:table table:name="T" table:style-name="T">')
        assert table.endswith("</table:table>")

    def test_explicit_columns(self):
        table = build_table("T", [["x"]], columns="A-D")
        assert len(list(find_nodes(table, "table:table-column"))) == 4

    def test_empty_table(self):
        assert build_table("T", []) == '<table:table table:name="T"/>'
