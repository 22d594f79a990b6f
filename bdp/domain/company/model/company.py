"""Company aggregate."""

from datetime import UTC, datetime

from bdp.domain.auth.model.value import UserId
from bdp.domain.company.model.value import CompanyId, CompanyType, NotificationPreferences
from bdp.domain.shared.error import ValidationError
from bdp.domain.shared.model.aggregate import Aggregate


class Company(Aggregate):
    """A tenant company in the billing hierarchy.

    Invariants:
    - CORP companies have no parent; SUB and BRANCH companies have exactly one
    - a company is never its own parent (deeper cycles are checked against a
      ``CompanyTree`` snapshot, since a single aggregate cannot see them)
    """

    id: CompanyId
    name: str
    type: CompanyType
    parent_id: CompanyId | None = None
    reference_no: int | None = None
    code: str | None = None
    email: str | None = None
    primary_contact_id: UserId | None = None
    notifications: NotificationPreferences = NotificationPreferences()
    is_active: bool = True
    created_by: UserId | None = None
    created_at: datetime
    updated_at: datetime | None = None

    @classmethod
    def create(
        cls,
        name: str,
        type: CompanyType,
        parent_id: CompanyId | None = None,
        reference_no: int | None = None,
        code: str | None = None,
        email: str | None = None,
        notifications: NotificationPreferences | None = None,
        created_by: UserId | None = None,
    ) -> "Company":
        if not name or not name.strip():
            raise ValidationError("Company name is required", field="name")
        company = cls(
            id=CompanyId.generate(),
            name=name.strip(),
            type=type,
            parent_id=parent_id,
            reference_no=reference_no,
            code=code,
            email=email,
            notifications=notifications or NotificationPreferences(),
            created_by=created_by,
            created_at=datetime.now(UTC),
        )
        company.check_structure()
        return company

    def check_structure(self) -> None:
        """Validate the type/parent invariant for this company alone."""
        if self.type is CompanyType.CORP and self.parent_id is not None:
            raise ValidationError("CORP companies cannot have a parent", field="parent_id")
        if self.type.requires_parent and self.parent_id is None:
            raise ValidationError(
                f"{self.type} companies must have a parent", field="parent_id"
            )
        if self.parent_id is not None and self.parent_id == self.id:
            raise ValidationError("Company cannot be its own parent", field="parent_id")

    def restructure(self, type: CompanyType, parent_id: CompanyId | None) -> None:
        """Change type and parent together. Nothing changes if the invariant would break."""
        self.model_copy(update={"type": type, "parent_id": parent_id}).check_structure()
        self.type = type
        self.parent_id = parent_id
        self.updated_at = datetime.now(UTC)

    def rename(self, name: str) -> None:
        if not name or not name.strip():
            raise ValidationError("Company name is required", field="name")
        self.name = name.strip()
        self.updated_at = datetime.now(UTC)

    def update_details(
        self,
        reference_no: int | None = None,
        code: str | None = None,
        email: str | None = None,
        notifications: NotificationPreferences | None = None,
    ) -> None:
        """Apply the given descriptive fields; None leaves a field unchanged."""
        if reference_no is not None:
            self.reference_no = reference_no
        if code is not None:
            self.code = code
        if email is not None:
            self.email = email
        if notifications is not None:
            self.notifications = notifications
        self.updated_at = datetime.now(UTC)

    def deactivate(self) -> None:
        self.is_active = False
        self.updated_at = datetime.now(UTC)

    def activate(self) -> None:
        self.is_active = True
        self.updated_at = datetime.now(UTC)
