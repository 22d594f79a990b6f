"""Principal: authenticated identity with role and company assignments, resolved per-request."""

from dataclasses import dataclass, field

from bdp.domain.auth.model.identity import Identity
from bdp.domain.auth.model.role import Role
from bdp.domain.auth.model.value import UserId
from bdp.domain.company.model.value import CompanyId


@dataclass(frozen=True)
class Principal(Identity):
    """The authenticated identity of the current requester.

    Supplied by the authentication collaborator and trusted as-is. Immutable
    after creation and never persisted; ``assigned_company_ids`` are the
    companies the user is tied to directly, before any hierarchy expansion.
    """

    user_id: UserId
    role: Role
    assigned_company_ids: frozenset[CompanyId] = field(default_factory=frozenset)
