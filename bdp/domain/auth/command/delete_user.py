"""DeleteUser command and handler."""

import logfire

from bdp.domain.auth.model.principal import Principal
from bdp.domain.auth.model.value import UserId
from bdp.domain.auth.service.user import UserService
from bdp.domain.shared.authorization.capability import Capability
from bdp.domain.shared.authorization.gate import requires
from bdp.domain.shared.authorization.permission import PermissionGate
from bdp.domain.shared.command import Command, CommandHandler, Result


class DeleteUser(Command):
    user_id: UserId


class UserDeleted(Result):
    id: UserId


class DeleteUserHandler(CommandHandler[DeleteUser, UserDeleted]):
    __auth__ = requires(Capability.USERS_DELETE)
    principal: Principal
    permission_gate: PermissionGate
    user_service: UserService

    async def run(self, cmd: DeleteUser) -> UserDeleted:
        with logfire.span("DeleteUser"):
            await self.user_service.delete_user(actor=self.principal, user_id=cmd.user_id)
            logfire.info("User deleted", user_id=str(cmd.user_id))
            return UserDeleted(id=cmd.user_id)
