"""
ContentBuffer: the single mutable copy of a document's content.

The buffer hands out nodes stamped with its current generation and splices
replacement markup into its text. Every mutation bumps the generation, which
makes all nodes found before it stale. Editing with a stale node raises
StaleNodeError instead of corrupting the content.

Replacement markup is inserted as given; producing well-formed, escaped
markup is the caller's job (see NodeFactory and escape_libreoffice).
"""

import dataclasses
import logging
from collections.abc import Iterator, Mapping, Sequence

from .errors import StaleNodeError
from .matcher import Node, PairingMode, find_nodes

logger = logging.getLogger(__name__)


class ContentBuffer:
    """Owns the content text and applies span replacements to it.

    Example:
        >>> buffer = ContentBuffer("<text:p>old</text:p>")
        >>> node = buffer.find_first("text:p")
        >>> buffer.replace_node(node, "<text:p>new</text:p>")
        >>> buffer.text
        '<text:p>new</text:p>'
    """

    def __init__(self, text: str, pairing: PairingMode = PairingMode.POSITIONAL) -> None:
        """Initialize the buffer.

        Args:
            text: Initial content
            pairing: Pairing mode used by the find methods
        """
        self._text = text
        self._generation = 0
        self.pairing = pairing

    @property
    def text(self) -> str:
        """Current content."""
        return self._text

    @property
    def generation(self) -> int:
        """Number of mutations applied so far."""
        return self._generation

    def __len__(self) -> int:
        return len(self._text)

    def find_nodes(
        self,
        node: str,
        attributes: Mapping[str, str] | None = None,
        start: int = 0,
    ) -> Iterator[Node]:
        """Yield matching nodes stamped with the current generation."""
        generation = self._generation
        for found in find_nodes(self._text, node, attributes, start, self.pairing):
            yield dataclasses.replace(found, generation=generation)

    def find_first(
        self,
        node: str,
        attributes: Mapping[str, str] | None = None,
        start: int = 0,
    ) -> Node | None:
        """Return the first matching node, or None."""
        return next(self.find_nodes(node, attributes, start), None)

    def find_last(
        self,
        node: str,
        attributes: Mapping[str, str] | None = None,
        start: int = 0,
    ) -> Node | None:
        """Return the last matching node starting at or after `start`, or None."""
        last: Node | None = None
        for last in self.find_nodes(node, attributes, start):
            pass
        return last

    def _check_fresh(self, node: Node) -> None:
        if node.generation is not None and node.generation != self._generation:
            raise StaleNodeError(node.generation, self._generation)

    def _check_span(self, start: int, end: int) -> None:
        if not 0 <= start <= end <= len(self._text):
            raise ValueError(
                f"Invalid span [{start}, {end}) for content of length {len(self._text)}"
            )

    def replace_span(self, start: int, end: int, replacement: str) -> None:
        """Replace the text in `[start, end)` with `replacement`.

        Raises:
            ValueError: If the span is inverted or outside the content
        """
        self._check_span(start, end)
        logger.debug(
            "Replacing [%d, %d) with %d characters (generation %d)",
            start,
            end,
            len(replacement),
            self._generation,
        )
        self._text = self._text[:start] + replacement + self._text[end:]
        self._generation += 1

    def replace_node(self, node: Node, replacement: str) -> None:
        """Replace a node's whole span, both tags included.

        Raises:
            StaleNodeError: If the node was found before the last mutation
        """
        self._check_fresh(node)
        self.replace_span(node.start, node.end, replacement)

    def replace_range(self, first: Node, last: Node | None, replacement: str) -> None:
        """Replace everything from the start of `first` to the end of `last`.

        With `last` set to None only `first` is replaced.

        Raises:
            StaleNodeError: If either node was found before the last mutation
        """
        self._check_fresh(first)
        if last is None:
            self.replace_span(first.start, first.end, replacement)
            return
        self._check_fresh(last)
        self.replace_span(first.start, last.end, replacement)

    def replace_nodes(self, replacements: Sequence[tuple[Node, str]]) -> None:
        """Apply several replacements computed over the same scan.

        The spans are spliced from the last to the first so that earlier
        offsets stay valid, and the generation is bumped once.

        Raises:
            StaleNodeError: If any node was found before the last mutation
            ValueError: If two spans overlap
        """
        if not replacements:
            return
        for node, _ in replacements:
            self._check_fresh(node)

        ordered = sorted(replacements, key=lambda item: item[0].start, reverse=True)
        for (later, _), (earlier, _) in zip(ordered, ordered[1:]):
            if earlier.end > later.start:
                raise ValueError(
                    f"Overlapping spans [{earlier.start}, {earlier.end}) "
                    f"and [{later.start}, {later.end})"
                )

        text = self._text
        for node, replacement in ordered:
            self._check_span(node.start, node.end)
            text = text[: node.start] + replacement + text[node.end :]
        logger.debug(
            "Applied %d replacements (generation %d)", len(ordered), self._generation
        )
        self._text = text
        self._generation += 1
