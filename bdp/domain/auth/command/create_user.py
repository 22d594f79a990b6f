"""CreateUser command and handler."""

import logfire

from bdp.domain.auth.model.principal import Principal
from bdp.domain.auth.model.role import Role
from bdp.domain.auth.model.value import UserId
from bdp.domain.auth.service.user import UserService
from bdp.domain.company.model.value import CompanyId
from bdp.domain.shared.authorization.capability import Capability
from bdp.domain.shared.authorization.gate import requires
from bdp.domain.shared.authorization.permission import PermissionGate
from bdp.domain.shared.command import Command, CommandHandler, Result


class CreateUser(Command):
    email: str
    name: str
    role: Role
    company_ids: list[CompanyId] = []


class UserCreated(Result):
    id: UserId
    role: Role


class CreateUserHandler(CommandHandler[CreateUser, UserCreated]):
    __auth__ = requires(Capability.USERS_MANAGE)
    principal: Principal
    permission_gate: PermissionGate
    user_service: UserService

    async def run(self, cmd: CreateUser) -> UserCreated:
        with logfire.span("CreateUser"):
            user = await self.user_service.create_user(
                actor=self.principal,
                email=cmd.email,
                name=cmd.name,
                role=cmd.role,
                company_ids=cmd.company_ids,
            )
            logfire.info("User created", user_id=str(user.id), role=str(user.role))
            return UserCreated(id=user.id, role=user.role)
