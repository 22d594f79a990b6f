"""Commands: requests that change portal state."""

from abc import abstractmethod
from typing import TYPE_CHECKING, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from bdp.domain.shared.handler import HandlerMeta

if TYPE_CHECKING:
    from bdp.domain.shared.authorization.gate import Gate


class Command(BaseModel): ...


class Result(BaseModel): ...


C = TypeVar("C", bound=Command)
R = TypeVar("R", bound=Result)


class CommandHandler(Generic[C, R], metaclass=HandlerMeta):
    """Base class for command handlers.

    Subclasses are dataclasses. Each declares its gate and the fields the
    gate reads:

        class CreateCompanyHandler(CommandHandler[CreateCompany, CompanyCreated]):
            __auth__ = requires(Capability.COMPANIES_MANAGE)
            principal: Principal
            permission_gate: PermissionGate
            company_service: CompanyService
    """

    __auth__: ClassVar["Gate"]

    @abstractmethod
    async def run(self, cmd: C) -> R: ...
