"""Tests for ContentBuffer span replacement."""

import pytest

from python_odt_merge.buffer import ContentBuffer
from python_odt_merge.errors import StaleNodeError
from python_odt_merge.matcher import PairingMode

XML = (
    "<office:text>"
    "<table:table-row>1</table:table-row>"
    "<table:table-row>2</table:table-row>"
    "<table:table-row>3</table:table-row>"
    "</office:text>"
)


class TestFind:
    """Test lookups through the buffer."""

    def test_nodes_are_stamped(self):
        """Nodes carry the generation they were found at."""
        buffer = ContentBuffer(XML)
        assert all(n.generation == 0 for n in buffer.find_nodes("table:table-row"))

    def test_first_and_last(self):
        buffer = ContentBuffer(XML)
        assert buffer.find_first("table:table-row").inner == "<table:table-row>1</table:table-row>"
        assert buffer.find_last("table:table-row").inner == "<table:table-row>3</table:table-row>"
        assert buffer.find_first("text:p") is None
        assert buffer.find_last("text:p") is None

    def test_pairing_mode_is_used(self):
        """The buffer's pairing mode drives its lookups."""
        buffer = ContentBuffer(
            "<text:span>a<text:span>b</text:span></text:span>", PairingMode.NESTED
        )
        assert buffer.find_last("text:span").inner == buffer.text


class TestReplaceNode:
    """Test single-node replacement."""

    def test_replace_and_rescan(self):
        """The new content is found in place after a re-scan."""
        buffer = ContentBuffer(XML)
        node = list(buffer.find_nodes("table:table-row"))[1]
        replacement = "<table:table-row>two</table:table-row>"
        buffer.replace_node(node, replacement)

        rows = [n.inner for n in buffer.find_nodes("table:table-row")]
        assert rows[1] == replacement
        assert len(rows) == 3

    def test_length_adjustment(self):
        """Length changes by len(replacement) minus the span length."""
        buffer = ContentBuffer(XML)
        node = buffer.find_first("table:table-row")
        before = len(buffer)
        buffer.replace_node(node, "<x:y/>")
        assert len(buffer) == before + len("<x:y/>") - (node.end - node.start)

    def test_generation_bumped(self):
        buffer = ContentBuffer(XML)
        buffer.replace_node(buffer.find_first("table:table-row"), "")
        assert buffer.generation == 1

    def test_stale_node_rejected(self):
        """A node found before a mutation cannot be used afterwards."""
        buffer = ContentBuffer(XML)
        first, second = list(buffer.find_nodes("table:table-row"))[:2]
        buffer.replace_node(first, "")
        with pytest.raises(StaleNodeError) as exc_info:
            buffer.replace_node(second, "")
        assert exc_info.value.node_generation == 0
        assert exc_info.value.buffer_generation == 1

    def test_replacement_is_not_escaped(self):
        """Replacement markup is inserted verbatim."""
        buffer = ContentBuffer(XML)
        buffer.replace_node(buffer.find_first("table:table-row"), "a & <b")
        assert "a & <b" in buffer.text


class TestReplaceRange:
    """Test composite span replacement."""

    def test_first_to_last(self):
        """Everything from the first start to the last end is replaced."""
        buffer = ContentBuffer(XML)
        first = buffer.find_first("table:table-row")
        last = buffer.find_last("table:table-row", start=first.end)
        buffer.replace_range(first, last, "<table:table-row>all</table:table-row>")
        assert buffer.text == (
            "<office:text><table:table-row>all</table:table-row></office:text>"
        )

    def test_missing_last_replaces_first_only(self):
        """Without a last node only the first node is replaced."""
        buffer = ContentBuffer(XML)
        first = buffer.find_first("table:table-row")
        buffer.replace_range(first, None, "")
        assert [n.inner for n in buffer.find_nodes("table:table-row")] == [
            "<table:table-row>2</table:table-row>",
            "<table:table-row>3</table:table-row>",
        ]


class TestReplaceSpan:
    """Test raw offset replacement."""

    def test_insert_at_position(self):
        """An empty span inserts text."""
        buffer = ContentBuffer("<a:b></a:b>")
        buffer.replace_span(5, 5, "x")
        assert buffer.text == "<a:b>x</a:b>"

    @pytest.mark.parametrize(("start", "end"), [(-1, 2), (3, 2), (0, 100)])
    def test_invalid_span(self, start, end):
        buffer = ContentBuffer("<a:b></a:b>")
        with pytest.raises(ValueError, match="Invalid span"):
            buffer.replace_span(start, end, "")


class TestReplaceNodes:
    """Test several replacements over one scan."""

    def test_back_to_front(self):
        """All replacements land correctly whatever their order."""
        buffer = ContentBuffer(XML)
        rows = list(buffer.find_nodes("table:table-row"))
        buffer.replace_nodes(
            [
                (rows[0], "<table:table-row>first row</table:table-row>"),
                (rows[2], ""),
                (rows[1], "<table:table-row>b</table:table-row>"),
            ]
        )
        assert buffer.text == (
            "<office:text>"
            "<table:table-row>first row</table:table-row>"
            "<table:table-row>b</table:table-row>"
            "</office:text>"
        )
        assert buffer.generation == 1

    def test_empty_is_noop(self):
        buffer = ContentBuffer(XML)
        buffer.replace_nodes([])
        assert buffer.text == XML
        assert buffer.generation == 0

    def test_overlap_rejected(self):
        """Overlapping spans cannot be applied together."""
        buffer = ContentBuffer("<text:span>a<text:span>b</text:span>c</text:span>")
        outer, inner = list(buffer.find_nodes("text:span"))
        with pytest.raises(ValueError, match="Overlapping"):
            buffer.replace_nodes([(outer, ""), (inner, "")])
        assert buffer.generation == 0

    def test_stale_rejected(self):
        buffer = ContentBuffer(XML)
        rows = list(buffer.find_nodes("table:table-row"))
        buffer.replace_node(rows[0], "")
        with pytest.raises(StaleNodeError):
            buffer.replace_nodes([(rows[1], "")])
