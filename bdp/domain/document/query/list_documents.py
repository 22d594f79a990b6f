"""ListDocuments and GetDocument queries and handlers."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel

from bdp.domain.auth.model.principal import Principal
from bdp.domain.company.model.value import CompanyId
from bdp.domain.document.model.document import Document
from bdp.domain.document.model.value import DocumentId, DocumentKind
from bdp.domain.document.service.document import DocumentService
from bdp.domain.shared.authorization.capability import Capability
from bdp.domain.shared.authorization.document_filter import DocumentFilterBuilder
from bdp.domain.shared.authorization.gate import requires
from bdp.domain.shared.authorization.permission import PermissionGate
from bdp.domain.shared.authorization.scope import AccessScopeResolver
from bdp.domain.shared.query import Query, QueryHandler, Result


class DocumentSummary(BaseModel):
    id: DocumentId
    kind: DocumentKind
    company_id: CompanyId
    number: str
    amount: Decimal
    issued_on: date | None
    created_at: datetime

    @classmethod
    def from_document(cls, document: Document) -> "DocumentSummary":
        return cls(
            id=document.id,
            kind=document.kind,
            company_id=document.company_id,
            number=document.number,
            amount=document.amount,
            issued_on=document.issued_on,
            created_at=document.created_at,
        )


class ListDocuments(Query):
    kind: DocumentKind
    limit: int | None = None
    offset: int = 0


class DocumentList(Result):
    items: list[DocumentSummary]
    total: int


class ListDocumentsHandler(QueryHandler[ListDocuments, DocumentList]):
    __auth__ = requires(Capability.DOCUMENTS_VIEW)
    principal: Principal
    permission_gate: PermissionGate
    scope_resolver: AccessScopeResolver
    filter_builder: DocumentFilterBuilder
    document_service: DocumentService

    async def run(self, query: ListDocuments) -> DocumentList:
        self.permission_gate.require(self.principal, query.kind.view_capability)

        predicate = self.filter_builder.build(self.scope_resolver.resolve(self.principal))
        documents, total = await self.document_service.list_documents(
            predicate, query.kind, limit=query.limit, offset=query.offset
        )
        return DocumentList(
            items=[DocumentSummary.from_document(d) for d in documents],
            total=total,
        )


class GetDocument(Query):
    document_id: DocumentId


class DocumentDetail(Result):
    document: DocumentSummary


class GetDocumentHandler(QueryHandler[GetDocument, DocumentDetail]):
    __auth__ = requires(Capability.DOCUMENTS_VIEW)
    principal: Principal
    permission_gate: PermissionGate
    scope_resolver: AccessScopeResolver
    filter_builder: DocumentFilterBuilder
    document_service: DocumentService

    async def run(self, query: GetDocument) -> DocumentDetail:
        predicate = self.filter_builder.build(self.scope_resolver.resolve(self.principal))
        document = await self.document_service.get_visible(query.document_id, predicate)
        self.permission_gate.require(self.principal, document.kind.view_capability)
        return DocumentDetail(document=DocumentSummary.from_document(document))
