"""SQLAlchemy repository for billing documents."""

from uuid import UUID

from sqlalchemy import func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bdp.domain.company.model.value import CompanyId
from bdp.domain.document.model.document import Document
from bdp.domain.document.model.value import DocumentId, DocumentKind
from bdp.domain.document.port.repository import DocumentRepository
from bdp.domain.shared.authorization.document_filter import Predicate
from bdp.infrastructure.persistence.scoping import to_clause
from bdp.infrastructure.persistence.tables import documents_table


def _row_to_document(row: dict) -> Document:
    return Document(
        id=DocumentId(UUID(row["id"])),
        kind=DocumentKind(row["kind"]),
        company_id=CompanyId(UUID(row["company_id"])),
        number=row["number"],
        amount=row["amount"],
        issued_on=row["issued_on"],
        created_at=row["created_at"],
        deleted_at=row["deleted_at"],
    )


def _document_to_dict(document: Document) -> dict:
    return {
        "id": str(document.id),
        "kind": document.kind.value,
        "company_id": str(document.company_id),
        "number": document.number,
        "amount": document.amount,
        "issued_on": document.issued_on,
        "created_at": document.created_at,
        "deleted_at": document.deleted_at,
    }


class PostgresDocumentRepository(DocumentRepository):
    """SQLAlchemy implementation of DocumentRepository (PostgreSQL or SQLite)."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, document_id: DocumentId) -> Document | None:
        stmt = select(documents_table).where(documents_table.c.id == str(document_id))
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return _row_to_document(dict(row)) if row else None

    async def save(self, document: Document) -> None:
        document_dict = _document_to_dict(document)
        existing = await self.get(document.id)

        if existing:
            stmt = (
                update(documents_table)
                .where(documents_table.c.id == str(document.id))
                .values(**document_dict)
            )
        else:
            stmt = insert(documents_table).values(**document_dict)

        await self.session.execute(stmt)
        await self.session.flush()

    def _visible(self, predicate: Predicate, kind: DocumentKind):
        return (
            documents_table.c.kind == kind.value,
            documents_table.c.deleted_at.is_(None),
            to_clause(predicate, documents_table.c.company_id),
        )

    async def find(
        self,
        predicate: Predicate,
        kind: DocumentKind,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Document]:
        stmt = (
            select(documents_table)
            .where(*self._visible(predicate, kind))
            .order_by(documents_table.c.created_at.desc(), documents_table.c.id)
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return [_row_to_document(dict(row)) for row in result.mappings().all()]

    async def count(self, predicate: Predicate, kind: DocumentKind) -> int:
        stmt = (
            select(func.count())
            .select_from(documents_table)
            .where(*self._visible(predicate, kind))
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()
