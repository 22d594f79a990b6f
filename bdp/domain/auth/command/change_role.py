"""ChangeUserRole command and handler."""

import logfire

from bdp.domain.auth.model.principal import Principal
from bdp.domain.auth.model.role import Role
from bdp.domain.auth.model.value import UserId
from bdp.domain.auth.service.user import UserService
from bdp.domain.shared.authorization.capability import Capability
from bdp.domain.shared.authorization.gate import requires
from bdp.domain.shared.authorization.permission import PermissionGate
from bdp.domain.shared.command import Command, CommandHandler, Result


class ChangeUserRole(Command):
    """Command to move a user to another role."""

    user_id: UserId
    role: Role


class UserRoleChanged(Result):
    id: UserId
    role: Role


class ChangeUserRoleHandler(CommandHandler[ChangeUserRole, UserRoleChanged]):
    __auth__ = requires(Capability.USERS_MANAGE)
    principal: Principal
    permission_gate: PermissionGate
    user_service: UserService

    async def run(self, cmd: ChangeUserRole) -> UserRoleChanged:
        with logfire.span("ChangeUserRole"):
            user = await self.user_service.change_role(
                actor=self.principal,
                user_id=cmd.user_id,
                new_role=cmd.role,
            )
            return UserRoleChanged(id=user.id, role=user.role)
