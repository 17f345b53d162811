"""
Operations package for OpenDocumentText manipulation.

This package contains classes that handle groups of operations on
documents, kept out of the main OpenDocumentText class.
"""

from .batch import BatchOperations

__all__ = [
    "BatchOperations",
]
