"""DeleteCompany and DeactivateCompany commands and handlers."""

import logfire

from bdp.domain.auth.model.principal import Principal
from bdp.domain.company.model.value import CompanyId
from bdp.domain.company.service.company import CompanyService
from bdp.domain.shared.authorization.capability import Capability
from bdp.domain.shared.authorization.gate import requires
from bdp.domain.shared.authorization.permission import PermissionGate
from bdp.domain.shared.command import Command, CommandHandler, Result


class DeleteCompany(Command):
    company_id: CompanyId


class CompanyDeleted(Result):
    id: CompanyId


class DeleteCompanyHandler(CommandHandler[DeleteCompany, CompanyDeleted]):
    __auth__ = requires(Capability.COMPANIES_DELETE, Capability.COMPANIES_MANAGE)
    principal: Principal
    permission_gate: PermissionGate
    company_service: CompanyService

    async def run(self, cmd: DeleteCompany) -> CompanyDeleted:
        with logfire.span("DeleteCompany"):
            await self.company_service.delete(cmd.company_id)
            logfire.info("Company deleted", company_id=str(cmd.company_id))
            return CompanyDeleted(id=cmd.company_id)


class DeactivateCompany(Command):
    company_id: CompanyId


class CompanyDeactivated(Result):
    id: CompanyId


class DeactivateCompanyHandler(CommandHandler[DeactivateCompany, CompanyDeactivated]):
    __auth__ = requires(Capability.COMPANIES_DEACTIVATE)
    principal: Principal
    permission_gate: PermissionGate
    company_service: CompanyService

    async def run(self, cmd: DeactivateCompany) -> CompanyDeactivated:
        company = await self.company_service.deactivate(cmd.company_id)
        return CompanyDeactivated(id=company.id)
