"""
Result classes for document operations.

This module provides result types that track the success/failure of
injections applied in batches.
"""

from dataclasses import dataclass


@dataclass
class InjectionResult:
    """Result of applying a single injection.

    Attributes:
        success: Whether the injection changed the content
        injection_type: Type of injection (e.g., "inject_var", "inner_xml")
        message: Human-readable message about the result
        error: Optional exception that occurred during the injection
    """

    success: bool
    injection_type: str
    message: str
    error: Exception | None = None

    def __str__(self) -> str:
        """Get string representation of the result."""
        status = "✓" if self.success else "✗"
        return f"{status} {self.injection_type}: {self.message}"
