"""Value objects for the company domain."""

from enum import StrEnum

from bdp.domain.shared.model.value import EntityId, ValueObject


class CompanyId(EntityId):
    """Unique identifier for a Company."""


class CompanyType(StrEnum):
    """Structural position of a company in the hierarchy."""

    CORP = "CORP"  # Corporate root, never has a parent
    SUB = "SUB"  # Subsidiary
    BRANCH = "BRANCH"

    @property
    def requires_parent(self) -> bool:
        return self is not CompanyType.CORP


class NotificationPreferences(ValueObject):
    """Which document uploads notify the company's primary contact."""

    send_invoice_email: bool = False
    send_invoice_attachment: bool = False
    send_statement_email: bool = False
    send_statement_attachment: bool = False
    send_email_as_summary: bool = False
    send_bulk_email: bool = False
