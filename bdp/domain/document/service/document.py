"""Document service: scoped reads over billing documents."""

from bdp.domain.document.model.document import Document
from bdp.domain.document.model.value import DocumentId, DocumentKind
from bdp.domain.document.port.repository import DocumentRepository
from bdp.domain.shared.authorization.document_filter import Predicate
from bdp.domain.shared.service import Service


class DocumentService(Service):
    _document_repo: DocumentRepository

    async def list_documents(
        self,
        predicate: Predicate,
        kind: DocumentKind,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[list[Document], int]:
        documents = await self._document_repo.find(predicate, kind, limit=limit, offset=offset)
        total = await self._document_repo.count(predicate, kind)
        return documents, total

    async def count(self, predicate: Predicate, kind: DocumentKind) -> int:
        return await self._document_repo.count(predicate, kind)

    async def get_visible(self, document_id: DocumentId, predicate: Predicate) -> Document:
        """Fetch one document. Out-of-scope and deleted documents look missing."""
        document = await self._document_repo.get(document_id)
        if document is not None and (document.is_deleted or not predicate.matches(document)):
            document = None
        return self._found(document, "document", document_id)
