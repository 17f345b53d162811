"""
Custom exception classes for python_odt_merge package.

A locator that matches nothing is not an error: lookups return None and
injections report a warning and leave the content untouched. Exceptions are
reserved for unusable sources, container I/O failures and misuse of stale
node offsets.
"""


class OdtMergeError(Exception):
    """Base exception for all python_odt_merge errors."""

    pass


class ValidationError(OdtMergeError):
    """Raised when a document cannot be loaded or its content is not well-formed.

    This can occur when:
    - The source file does not exist
    - The container has no content.xml part
    - The edited content is no longer well-formed XML at save time

    Attributes:
        errors: List of specific validation error messages (optional)
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)

    def __str__(self) -> str:
        if not self.errors:
            return super().__str__()

        error_details = "\n  - " + "\n  - ".join(self.errors)
        return f"{super().__str__()}{error_details}"


class ArchiveError(OdtMergeError):
    """Raised when the document container cannot be unpacked or repacked.

    The failing load or save is aborted; nothing is retried.

    Attributes:
        path: The archive being read or written (None for in-memory data)
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        super().__init__(message)


class StaleNodeError(OdtMergeError):
    """Raised when a node found before a mutation is used to edit the content.

    Node offsets are only valid against the buffer they were scanned from.
    Every mutation bumps the buffer generation, so the node has to be looked
    up again.

    Attributes:
        node_generation: Generation the node was scanned at
        buffer_generation: Current generation of the buffer
    """

    def __init__(self, node_generation: int, buffer_generation: int) -> None:
        self.node_generation = node_generation
        self.buffer_generation = buffer_generation
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        return (
            f"Stale node from generation {self.node_generation} "
            f"(content is at generation {self.buffer_generation})"
            "\n\nThe content has changed since the node was found. "
            "Search for the node again before editing."
        )
