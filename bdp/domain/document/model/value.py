"""Value objects for the document domain."""

from enum import StrEnum

from bdp.domain.shared.authorization.capability import Capability
from bdp.domain.shared.model.value import EntityId


class DocumentId(EntityId):
    """Unique identifier for a billing document."""


class DocumentKind(StrEnum):
    INVOICE = "invoice"
    CREDIT_NOTE = "credit_note"
    STATEMENT = "statement"

    @property
    def view_capability(self) -> Capability:
        """Capability needed to see documents of this kind."""
        return _VIEW_CAPABILITIES[self]


_VIEW_CAPABILITIES: dict[DocumentKind, Capability] = {
    DocumentKind.INVOICE: Capability.INVOICES_VIEW,
    DocumentKind.CREDIT_NOTE: Capability.CREDIT_NOTES_VIEW,
    DocumentKind.STATEMENT: Capability.STATEMENTS_VIEW,
}
