"""Document domain services."""

from .document import DocumentService

__all__ = ["DocumentService"]
