"""
Serialization of new OpenDocument elements.

NodeFactory is an immutable template: an element kind with default
attributes, text content and children. Each call to `new_node()` applies
per-call overrides to a copy, so nothing leaks from one element into the
next.

Example:
    >>> cell = NodeFactory(ElementKind.CELL, {"office:value-type": "string"})
    >>> paragraph = NodeFactory(ElementKind.PARAGRAPH)
    >>> cell.new_node(children=[paragraph.new_node("42")])
    '<table:table-cell office:value-type="string"><text:p>42</text:p></table:table-cell>'
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from .constants import (
    TABLE_ROW,
    TABLE_TABLE,
    TEXT_PARAGRAPH,
    TEXT_VARIABLE_GET,
    TEXT_VARIABLE_SET,
)
from .escaping import escape_libreoffice


class ElementKind(Enum):
    """Element names the factory knows how to build.

    Attributes:
        PARAGRAPH: text:p
        SPAN: text:span
        TABLE: table:table
        ROW: table:table-row
        CELL: table:table-cell
        COLUMN: table:table-column
        HEADER_ROWS: table:table-header-rows
        COVERED_CELL: table:covered-table-cell
        VARIABLE_SET: text:variable-set
        VARIABLE_GET: text:variable-get
    """

    PARAGRAPH = TEXT_PARAGRAPH
    SPAN = "text:span"
    TABLE = TABLE_TABLE
    ROW = TABLE_ROW
    CELL = "table:table-cell"
    COLUMN = "table:table-column"
    HEADER_ROWS = "table:table-header-rows"
    COVERED_CELL = "table:covered-table-cell"
    VARIABLE_SET = TEXT_VARIABLE_SET
    VARIABLE_GET = TEXT_VARIABLE_GET


Attributes = Mapping[str, str | None]


def _serialize(
    kind: ElementKind, attributes: Attributes, content: str, children: Iterable[str]
) -> str:
    name = kind.value
    attr = " ".join(f'{key}="{value}"' for key, value in attributes.items() if value is not None)
    opening = f"{name} {attr}" if attr else name
    inner = escape_libreoffice(content) + "".join(children)
    if not inner:
        return f"<{opening}/>"
    return f"<{opening}>{inner}</{name}>"


@dataclass(frozen=True)
class NodeFactory:
    """Reusable element template.

    Attribute values are written verbatim: they are expected to be markup
    already (for instance values copied from scanned tags). A value of None
    removes the attribute from the output. Content is escaped with
    `escape_libreoffice()`; children are pre-serialized markup.

    Attributes:
        node: Element kind (an ElementKind or its element name)
        attributes: Default attributes, in output order
        content: Default text content
        children: Default child markup
    """

    node: ElementKind
    attributes: Attributes = field(default_factory=dict)
    content: str = ""
    children: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Private copies so a caller's dict or list cannot change the template
        object.__setattr__(self, "node", ElementKind(self.node))
        object.__setattr__(self, "attributes", dict(self.attributes))
        object.__setattr__(self, "children", tuple(self.children))

    def with_overrides(
        self,
        *,
        node: ElementKind | str | None = None,
        attributes: Attributes | None = None,
        content: str | None = None,
        children: Iterable[str] | None = None,
    ) -> "NodeFactory":
        """Return a new template; attributes are merged, other fields replaced."""
        return NodeFactory(
            node=self.node if node is None else ElementKind(node),
            attributes={**self.attributes, **(attributes or {})},
            content=self.content if content is None else content,
            children=self.children if children is None else tuple(children),
        )

    def new_node(
        self,
        content: str | None = None,
        *,
        node: ElementKind | str | None = None,
        attributes: Attributes | None = None,
        children: Iterable[str] | None = None,
    ) -> str:
        """Serialize one element from the template and per-call overrides.

        Args:
            content: Text content replacing the template's
            node: Element kind replacing the template's
            attributes: Attributes merged over the template's
            children: Child markup replacing the template's

        Returns:
            The element markup; self-closing when it has no content and no children
        """
        template = self.with_overrides(
            node=node, attributes=attributes, content=content, children=children
        )
        return _serialize(template.node, template.attributes, template.content, template.children)


def create_node(
    node: ElementKind | str,
    attributes: Attributes | None = None,
    content: str = "",
    children: Iterable[str] = (),
) -> str:
    """Serialize a single element without keeping a template around."""
    return NodeFactory(node, attributes or {}, content, tuple(children)).new_node()
