"""
Tag scanning over raw markup text.

The scanner is a single regex-driven pass that reports every tag it
recognizes (opening, closing and self-closing) together with its offsets.
Text between tags is never tokenized; it only survives as part of the spans
of the elements that enclose it.

The lexer is driven by an explicit cursor: `next_tag()` takes a position and
returns the next event, and `scan_tags()` simply walks that cursor forward.
Nothing is shared between calls, so independent scans of the same text never
interfere with each other.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from .attributes import ATTRIBUTE_NAME, ATTRIBUTE_VALUE, parse_attributes

# < [/] prefix:local-name (whitespace key="value")* [whitespace] [/] >
TAG_PATTERN = re.compile(
    rf'<(/)?(\w+:[\w-]+)((?:\s+{ATTRIBUTE_NAME}="{ATTRIBUTE_VALUE}")*)\s*(/)?>'
)


@dataclass(frozen=True)
class TagEvent:
    """One lexical tag occurrence.

    Self-closing tags are reported with both `is_close` and
    `is_self_closing` set: they open and close their element at once.

    Attributes:
        is_close: True for closing and self-closing tags
        name: Literal element name, e.g. "text:p" (no namespace resolution)
        attributes: Attributes of the tag, raw values
        start: Offset of the '<'
        end: Offset just past the '>'
        is_self_closing: True for '<x:y .../>'
    """

    is_close: bool
    name: str
    attributes: dict[str, str] = field(compare=False)
    start: int
    end: int
    is_self_closing: bool = False

    @property
    def is_open(self) -> bool:
        """Whether the tag opens an element (plain opening or self-closing)."""
        return not self.is_close or self.is_self_closing


def next_tag(xml: str, pos: int = 0) -> TagEvent | None:
    """Return the first tag starting at or after `pos`.

    Args:
        xml: Markup text to scan
        pos: Offset to resume scanning from

    Returns:
        The next TagEvent, or None when no further tag exists
    """
    match = TAG_PATTERN.search(xml, pos)
    if match is None:
        return None

    slash, name, attribute_text, trailing_slash = match.groups()
    self_closing = trailing_slash is not None
    return TagEvent(
        is_close=slash is not None or self_closing,
        name=name,
        attributes=parse_attributes(attribute_text),
        start=match.start(),
        end=match.end(),
        is_self_closing=self_closing,
    )


def scan_tags(xml: str, start: int = 0) -> Iterator[TagEvent]:
    """Lazily yield every tag of `xml` from left to right.

    Args:
        xml: Markup text to scan
        start: Offset to start scanning from; offsets of the yielded events
            are always absolute positions in `xml`

    Yields:
        TagEvent objects in source order
    """
    pos = start
    while True:
        event = next_tag(xml, pos)
        if event is None:
            return
        yield event
        pos = event.end
