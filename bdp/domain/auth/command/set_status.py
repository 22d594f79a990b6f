"""SetUserStatus command and handler (activate / deactivate)."""

from bdp.domain.auth.model.principal import Principal
from bdp.domain.auth.model.value import UserId
from bdp.domain.auth.service.user import UserService
from bdp.domain.shared.authorization.capability import Capability
from bdp.domain.shared.authorization.gate import requires
from bdp.domain.shared.authorization.permission import PermissionGate
from bdp.domain.shared.command import Command, CommandHandler, Result


class SetUserStatus(Command):
    user_id: UserId
    is_active: bool


class UserStatusSet(Result):
    id: UserId
    is_active: bool


class SetUserStatusHandler(CommandHandler[SetUserStatus, UserStatusSet]):
    __auth__ = requires(Capability.USERS_DEACTIVATE)
    principal: Principal
    permission_gate: PermissionGate
    user_service: UserService

    async def run(self, cmd: SetUserStatus) -> UserStatusSet:
        user = await self.user_service.set_active(
            actor=self.principal,
            user_id=cmd.user_id,
            is_active=cmd.is_active,
        )
        return UserStatusSet(id=user.id, is_active=user.is_active)
