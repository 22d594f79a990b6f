"""Document domain ports."""

from .repository import DocumentRepository

__all__ = ["DocumentRepository"]
