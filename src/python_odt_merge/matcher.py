"""
Node matching on top of the tag scanner.

A node is the span from an opening tag of the requested element through
the closing tag it is paired with, both tags included. Two pairing modes
are available:

- POSITIONAL (default): the k-th accepted opening tag is paired with the
  k-th closing tag that follows it. Nesting depth is ignored, so an element
  that contains another element of the same name is paired with the inner
  closing tag. The element kinds edited in office documents (paragraphs,
  spans, table rows and cells, variables) do not nest inside themselves, and
  callers rely on this simple behavior.
- NESTED: stack-based pairing by depth, for documents where the requested
  element can nest inside itself.

Not finding a node is a normal outcome: the locators return None.
"""

from collections import deque
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .scanner import TagEvent, scan_tags


class PairingMode(Enum):
    """How opening and closing tags are paired into nodes.

    Attributes:
        POSITIONAL: k-th open with the k-th following close, ignoring depth
        NESTED: open with the close at the same nesting depth
    """

    POSITIONAL = "positional"
    NESTED = "nested"


@dataclass(frozen=True)
class Node:
    """A matched element span over a snapshot of the content.

    Offsets are only meaningful for the exact text they were computed from.
    Nodes handed out by a ContentBuffer carry the buffer generation so that
    stale offsets can be rejected.

    Attributes:
        name: Element name, e.g. "text:p"
        attributes: Attributes of the opening tag
        start: Offset of the opening tag's '<'
        end: Offset just past the closing tag's '>'
        source: The text the node was found in
        generation: Buffer generation at scan time (None outside a buffer)
    """

    name: str
    attributes: dict[str, str] = field(compare=False)
    start: int
    end: int
    source: str = field(repr=False, compare=False)
    generation: int | None = None

    @property
    def inner(self) -> str:
        """Markup of the whole node, opening and closing tags included."""
        return self.source[self.start : self.end]


@dataclass(frozen=True)
class NodeQuery:
    """Locator for nodes: element name, attribute filter and start offset.

    Example:
        >>> NodeQuery("table:table", {"table:name": "Invoice"})
        >>> NodeQuery.coerce({"node": "text:p", "attributes": {"text:style-name": "P1"}})
    """

    node: str
    attributes: Mapping[str, str] | None = None
    start: int = 0

    @classmethod
    def coerce(cls, value: "NodeQuery | Mapping[str, Any]") -> "NodeQuery":
        """Build a query from a NodeQuery or a plain mapping (batch files)."""
        if isinstance(value, NodeQuery):
            return value
        if "node" not in value:
            raise ValueError(f"Node locator is missing the 'node' key: {dict(value)!r}")
        return cls(
            node=value["node"],
            attributes=value.get("attributes"),
            start=int(value.get("start", 0)),
        )

    def __str__(self) -> str:
        parts = [self.node]
        if self.attributes:
            parts.extend(f'{k}="{v}"' for k, v in self.attributes.items())
        if self.start:
            parts.append(f"from offset {self.start}")
        return " ".join(parts)


def matches_filter(attributes: Mapping[str, str], wanted: Mapping[str, str] | None) -> bool:
    """Check that every filtered attribute is present with an equal value.

    A missing attribute never matches, whatever the filter value is.
    """
    if wanted is None:
        return True
    return all(key in attributes and attributes[key] == value for key, value in wanted.items())


def _make_node(xml: str, open_event: TagEvent, close_event: TagEvent) -> Node:
    return Node(
        name=open_event.name,
        attributes=open_event.attributes,
        start=open_event.start,
        end=close_event.end,
        source=xml,
    )


def _pair_positional(
    xml: str, events: Iterator[TagEvent], node: str, attributes: Mapping[str, str] | None
) -> Iterator[Node]:
    pending: deque[TagEvent] = deque()
    for event in events:
        if event.name != node:
            continue
        if event.is_open and matches_filter(event.attributes, attributes):
            pending.append(event)
        if event.is_close:
            if pending:
                yield _make_node(xml, pending.popleft(), event)
            # otherwise the close belongs to an element the filter rejected


def _pair_nested(
    xml: str, events: Iterator[TagEvent], node: str, attributes: Mapping[str, str] | None
) -> Iterator[Node]:
    stack: list[tuple[TagEvent, bool]] = []
    for event in events:
        if event.name != node:
            continue
        accepted = event.is_open and matches_filter(event.attributes, attributes)
        if event.is_self_closing:
            if accepted:
                yield _make_node(xml, event, event)
        elif not event.is_close:
            stack.append((event, accepted))
        elif stack:
            open_event, open_accepted = stack.pop()
            if open_accepted:
                yield _make_node(xml, open_event, event)


def find_nodes(
    xml: str,
    node: str,
    attributes: Mapping[str, str] | None = None,
    start: int = 0,
    pairing: PairingMode = PairingMode.POSITIONAL,
) -> Iterator[Node]:
    """Lazily yield the nodes of `xml` named `node` that satisfy `attributes`.

    Args:
        xml: Markup text to search
        node: Literal element name, e.g. "text:variable-set"
        attributes: Optional filter; every key must be present with an equal value
        start: Offset where scanning starts; only tags at or after it are seen
        pairing: Pairing mode (see module docstring)

    Yields:
        Node objects in order of their opening tags (positional mode) or of
        their closing tags (nested mode)

    Example:
        >>> xml = '<text:p text:style-name="P1">a</text:p><text:p>b</text:p>'
        >>> [n.inner for n in find_nodes(xml, "text:p")]
        ['<text:p text:style-name="P1">a</text:p>', '<text:p>b</text:p>']
    """
    events = scan_tags(xml, start)
    if pairing is PairingMode.NESTED:
        return _pair_nested(xml, events, node, attributes)
    return _pair_positional(xml, events, node, attributes)


def find_first_node(
    xml: str,
    node: str,
    attributes: Mapping[str, str] | None = None,
    start: int = 0,
    pairing: PairingMode = PairingMode.POSITIONAL,
) -> Node | None:
    """Return the first matching node, or None if there is none."""
    return next(find_nodes(xml, node, attributes, start, pairing), None)


def find_last_node(
    xml: str,
    node: str,
    attributes: Mapping[str, str] | None = None,
    start: int = 0,
    pairing: PairingMode = PairingMode.POSITIONAL,
) -> Node | None:
    """Return the last matching node starting at or after `start`, or None."""
    last: Node | None = None
    for last in find_nodes(xml, node, attributes, start, pairing):
        pass
    return last
