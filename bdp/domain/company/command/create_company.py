"""CreateCompany command and handler."""

import logfire

from bdp.domain.auth.model.principal import Principal
from bdp.domain.company.model.value import CompanyId, CompanyType, NotificationPreferences
from bdp.domain.company.service.company import CompanyService
from bdp.domain.shared.authorization.capability import Capability
from bdp.domain.shared.authorization.gate import requires
from bdp.domain.shared.authorization.permission import PermissionGate
from bdp.domain.shared.command import Command, CommandHandler, Result


class CreateCompany(Command):
    name: str
    type: CompanyType
    parent_id: CompanyId | None = None
    reference_no: int | None = None
    code: str | None = None
    email: str | None = None
    notifications: NotificationPreferences | None = None


class CompanyCreated(Result):
    id: CompanyId


class CreateCompanyHandler(CommandHandler[CreateCompany, CompanyCreated]):
    __auth__ = requires(Capability.COMPANIES_MANAGE)
    principal: Principal
    permission_gate: PermissionGate
    company_service: CompanyService

    async def run(self, cmd: CreateCompany) -> CompanyCreated:
        with logfire.span("CreateCompany"):
            company = await self.company_service.create(
                name=cmd.name,
                type=cmd.type,
                parent_id=cmd.parent_id,
                reference_no=cmd.reference_no,
                code=cmd.code,
                email=cmd.email,
                notifications=cmd.notifications,
                created_by=self.principal.user_id,
            )
            logfire.info("Company created", company_id=str(company.id), type=str(company.type))
            return CompanyCreated(id=company.id)
