"""ListUsers query and handler."""

from datetime import datetime

from pydantic import BaseModel

from bdp.domain.auth.model.principal import Principal
from bdp.domain.auth.model.role import Role
from bdp.domain.auth.model.value import UserId
from bdp.domain.auth.service.user import UserService
from bdp.domain.company.model.value import CompanyId
from bdp.domain.shared.authorization.capability import Capability
from bdp.domain.shared.authorization.document_filter import DocumentFilterBuilder
from bdp.domain.shared.authorization.gate import requires
from bdp.domain.shared.authorization.permission import PermissionGate
from bdp.domain.shared.authorization.scope import AccessScopeResolver
from bdp.domain.shared.query import Query, QueryHandler, Result


class ListUsers(Query):
    limit: int | None = None
    offset: int = 0


class UserSummary(BaseModel):
    id: UserId
    email: str
    name: str
    role: Role
    role_label: str
    company_ids: list[CompanyId]
    is_active: bool
    created_at: datetime


class UserList(Result):
    items: list[UserSummary]
    total: int


class ListUsersHandler(QueryHandler[ListUsers, UserList]):
    __auth__ = requires(Capability.USERS_VIEW)
    principal: Principal
    permission_gate: PermissionGate
    scope_resolver: AccessScopeResolver
    filter_builder: DocumentFilterBuilder
    user_service: UserService

    async def run(self, query: ListUsers) -> UserList:
        # Only users whose role the principal manages, within the principal's companies
        predicate = self.filter_builder.build(self.scope_resolver.resolve(self.principal))
        users = await self.user_service.list_users(
            self.principal, predicate, limit=query.limit, offset=query.offset
        )
        total = await self.user_service.count_users(self.principal, predicate)
        return UserList(
            items=[
                UserSummary(
                    id=u.id,
                    email=u.email,
                    name=u.name,
                    role=u.role,
                    role_label=u.role.label,
                    company_ids=sorted(u.company_ids),
                    is_active=u.is_active,
                    created_at=u.created_at,
                )
                for u in users
            ],
            total=total,
        )
