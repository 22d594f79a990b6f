"""AssignUserCompanies command and handler."""

import logfire

from bdp.domain.auth.model.principal import Principal
from bdp.domain.auth.model.value import UserId
from bdp.domain.auth.service.user import UserService
from bdp.domain.company.model.value import CompanyId
from bdp.domain.shared.authorization.capability import Capability
from bdp.domain.shared.authorization.gate import requires
from bdp.domain.shared.authorization.permission import PermissionGate
from bdp.domain.shared.command import Command, CommandHandler, Result


class AssignUserCompanies(Command):
    """Replace the companies a user is directly assigned to."""

    user_id: UserId
    company_ids: list[CompanyId]


class UserCompaniesAssigned(Result):
    id: UserId
    company_ids: list[CompanyId]


class AssignUserCompaniesHandler(CommandHandler[AssignUserCompanies, UserCompaniesAssigned]):
    __auth__ = requires(Capability.USERS_MANAGE)
    principal: Principal
    permission_gate: PermissionGate
    user_service: UserService

    async def run(self, cmd: AssignUserCompanies) -> UserCompaniesAssigned:
        with logfire.span("AssignUserCompanies"):
            user = await self.user_service.assign_companies(
                actor=self.principal,
                user_id=cmd.user_id,
                company_ids=cmd.company_ids,
            )
            logfire.info(
                "User companies assigned",
                user_id=str(user.id),
                company_count=len(user.company_ids),
            )
            return UserCompaniesAssigned(id=user.id, company_ids=sorted(user.company_ids))
