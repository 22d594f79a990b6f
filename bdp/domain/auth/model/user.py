"""User aggregate for the auth domain."""

from datetime import UTC, datetime

from bdp.domain.auth.model.role import Role
from bdp.domain.auth.model.value import UserId
from bdp.domain.company.model.value import CompanyId
from bdp.domain.shared.error import ValidationError
from bdp.domain.shared.model.aggregate import Aggregate


class User(Aggregate):
    """A portal user: internal staff or a customer contact.

    Invariants:
    - `id` and `created_at` are immutable after creation
    - `role` changes only through ``UserService.change_role``, which enforces
      the management rules of the role hierarchy
    - `company_ids` are direct assignments; hierarchy expansion happens at
      request time and is never stored
    """

    id: UserId
    email: str
    name: str
    role: Role
    company_ids: frozenset[CompanyId] = frozenset()
    is_active: bool = True
    created_at: datetime
    updated_at: datetime | None = None

    @classmethod
    def create(
        cls,
        email: str,
        name: str,
        role: Role,
        company_ids: frozenset[CompanyId] = frozenset(),
    ) -> "User":
        """Create a new user."""
        if not email or "@" not in email:
            raise ValidationError("A valid email address is required", field="email")
        if not name or not name.strip():
            raise ValidationError("User name is required", field="name")
        return cls(
            id=UserId.generate(),
            email=email.strip().lower(),
            name=name.strip(),
            role=role,
            company_ids=company_ids,
            created_at=datetime.now(UTC),
        )

    def assign_role(self, role: Role) -> None:
        self.role = role
        self.updated_at = datetime.now(UTC)

    def assign_companies(self, company_ids: frozenset[CompanyId]) -> None:
        self.company_ids = company_ids
        self.updated_at = datetime.now(UTC)

    def set_active(self, is_active: bool) -> None:
        self.is_active = is_active
        self.updated_at = datetime.now(UTC)
