"""Billing document aggregate (invoice, credit note or statement)."""

from datetime import UTC, date, datetime
from decimal import Decimal

from bdp.domain.company.model.value import CompanyId
from bdp.domain.document.model.value import DocumentId, DocumentKind
from bdp.domain.shared.model.aggregate import Aggregate


class Document(Aggregate):
    """A billing document allocated to one company.

    Documents are soft-deleted: ``deleted_at`` hides them from every listing
    and count, on top of the company scoping applied per principal.
    """

    id: DocumentId
    kind: DocumentKind
    company_id: CompanyId
    number: str
    amount: Decimal = Decimal("0")
    issued_on: date | None = None
    created_at: datetime
    deleted_at: datetime | None = None

    @classmethod
    def create(
        cls,
        kind: DocumentKind,
        company_id: CompanyId,
        number: str,
        amount: Decimal = Decimal("0"),
        issued_on: date | None = None,
    ) -> "Document":
        return cls(
            id=DocumentId.generate(),
            kind=kind,
            company_id=company_id,
            number=number,
            amount=amount,
            issued_on=issued_on,
            created_at=datetime.now(UTC),
        )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self) -> None:
        self.deleted_at = datetime.now(UTC)
