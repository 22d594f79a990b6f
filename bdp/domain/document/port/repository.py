"""Repository port for billing documents."""

from abc import abstractmethod
from typing import Protocol

from bdp.domain.document.model.document import Document
from bdp.domain.document.model.value import DocumentId, DocumentKind
from bdp.domain.shared.authorization.document_filter import Predicate
from bdp.domain.shared.port import Port


class DocumentRepository(Port, Protocol):
    """Document storage. Every read combines the given scoping predicate with
    the soft-delete filter; soft-deleted documents are never returned."""

    @abstractmethod
    async def get(self, document_id: DocumentId) -> Document | None: ...

    @abstractmethod
    async def save(self, document: Document) -> None: ...

    @abstractmethod
    async def find(
        self,
        predicate: Predicate,
        kind: DocumentKind,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Document]:
        """List documents of ``kind`` matching ``predicate``, newest first."""
        ...

    @abstractmethod
    async def count(self, predicate: Predicate, kind: DocumentKind) -> int: ...
