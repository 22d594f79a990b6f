"""User service: user administration and the role-assignment state machine."""

import logging
from collections.abc import Iterable

from bdp.domain.auth.model.principal import Principal
from bdp.domain.auth.model.role import Role
from bdp.domain.auth.model.user import User
from bdp.domain.auth.model.value import UserId
from bdp.domain.auth.port.repository import UserRepository
from bdp.domain.company.model.value import CompanyId
from bdp.domain.company.port.repository import CompanyReader
from bdp.domain.shared.authorization.document_filter import Predicate
from bdp.domain.shared.authorization.hierarchy import RoleHierarchy
from bdp.domain.shared.error import (
    ConflictError,
    InsufficientRoleError,
    InvalidStateError,
    UnknownCompanyError,
)
from bdp.domain.shared.service import Service

logger = logging.getLogger(__name__)


class UserService(Service):
    """Manages users on behalf of an acting principal.

    Every mutation is gated by ``RoleHierarchy.can_manage``: the actor must
    outrank the role being granted, and for a role change the role being
    replaced as well, so a two-step change can never reach a role the actor
    could not have assigned directly.
    """

    _user_repo: UserRepository
    _company_reader: CompanyReader
    _hierarchy: RoleHierarchy

    async def get(self, user_id: UserId) -> User:
        return self._found(await self._user_repo.get(user_id), "user", user_id)

    async def create_user(
        self,
        actor: Principal,
        email: str,
        name: str,
        role: Role,
        company_ids: Iterable[CompanyId] = (),
    ) -> User:
        """Create a user with a role the actor can manage."""
        self._require_manageable(actor, role)

        existing = await self._user_repo.get_by_email(email.strip().lower())
        if existing is not None:
            raise ConflictError(
                f"A user with email {email} already exists",
                code="email_taken",
            )

        assigned = await self._existing_companies(company_ids)
        user = User.create(email=email, name=name, role=role, company_ids=assigned)
        await self._user_repo.save(user)
        logger.info("User created: id=%s role=%s by=%s", user.id, role, actor.user_id)
        return user

    async def change_role(self, actor: Principal, user_id: UserId, new_role: Role) -> User:
        """Move a user to ``new_role``. Both old and new role must be manageable."""
        user = await self.get(user_id)
        self._require_manageable(actor, user.role)
        self._require_manageable(actor, new_role)

        previous = user.role
        user.assign_role(new_role)
        await self._user_repo.save(user)
        logger.info(
            "User role changed: id=%s %s -> %s by=%s",
            user.id,
            previous,
            new_role,
            actor.user_id,
        )
        return user

    async def assign_companies(
        self,
        actor: Principal,
        user_id: UserId,
        company_ids: Iterable[CompanyId],
    ) -> User:
        """Replace a user's direct company assignments."""
        user = await self.get(user_id)
        self._require_manageable(actor, user.role)

        user.assign_companies(await self._existing_companies(company_ids))
        await self._user_repo.save(user)
        logger.info(
            "User companies assigned: id=%s count=%d by=%s",
            user.id,
            len(user.company_ids),
            actor.user_id,
        )
        return user

    async def set_active(self, actor: Principal, user_id: UserId, is_active: bool) -> User:
        user = await self.get(user_id)
        self._require_manageable(actor, user.role)
        if not is_active and user.id == actor.user_id:
            raise InvalidStateError(
                "You cannot deactivate your own account",
                code="self_deactivation",
            )

        user.set_active(is_active)
        await self._user_repo.save(user)
        return user

    async def delete_user(self, actor: Principal, user_id: UserId) -> None:
        user = await self.get(user_id)
        if user.id == actor.user_id:
            raise InvalidStateError("You cannot delete your own account", code="self_deletion")
        self._require_manageable(actor, user.role)

        await self._user_repo.delete(user_id)
        logger.info("User deleted: id=%s by=%s", user_id, actor.user_id)

    async def list_users(
        self,
        actor: Principal,
        predicate: Predicate,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[User]:
        """Users the actor can manage, restricted to ``predicate``."""
        roles = self._hierarchy.manageable_roles(actor.role)
        return await self._user_repo.find(predicate, roles, limit=limit, offset=offset)

    async def count_users(self, actor: Principal, predicate: Predicate) -> int:
        roles = self._hierarchy.manageable_roles(actor.role)
        return await self._user_repo.count(predicate, roles)

    def _require_manageable(self, actor: Principal, role: Role) -> None:
        if not self._hierarchy.can_manage(actor.role, role):
            logger.info(
                "Role management denied: principal=%s role=%s target=%s",
                actor.user_id,
                actor.role,
                role,
            )
            raise InsufficientRoleError(
                f"Access denied: {actor.role} cannot manage {role}",
            )

    async def _existing_companies(self, company_ids: Iterable[CompanyId]) -> frozenset[CompanyId]:
        assigned = frozenset(company_ids)
        for company_id in sorted(assigned):
            if await self._company_reader.get(company_id) is None:
                logger.error("Assignment to unknown company: %s", company_id)
                raise UnknownCompanyError(f"Unknown company: {company_id}")
        return assigned
