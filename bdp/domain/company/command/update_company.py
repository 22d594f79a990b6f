"""UpdateCompany command and handler."""

import logfire

from bdp.domain.auth.model.principal import Principal
from bdp.domain.company.model.value import CompanyId, CompanyType, NotificationPreferences
from bdp.domain.company.service.company import CompanyService
from bdp.domain.shared.authorization.capability import Capability
from bdp.domain.shared.authorization.gate import requires
from bdp.domain.shared.authorization.permission import PermissionGate
from bdp.domain.shared.command import Command, CommandHandler, Result


class UpdateCompany(Command):
    """Update a company. Omitted fields are left unchanged.

    Passing ``parent_id`` (``None`` included) or ``type`` re-parents the
    company, which is checked against the current hierarchy for cycles.
    """

    company_id: CompanyId
    name: str | None = None
    type: CompanyType | None = None
    parent_id: CompanyId | None = None
    reference_no: int | None = None
    code: str | None = None
    email: str | None = None
    notifications: NotificationPreferences | None = None


class CompanyUpdated(Result):
    id: CompanyId
    type: CompanyType
    parent_id: CompanyId | None


class UpdateCompanyHandler(CommandHandler[UpdateCompany, CompanyUpdated]):
    __auth__ = requires(Capability.COMPANIES_MANAGE)
    principal: Principal
    permission_gate: PermissionGate
    company_service: CompanyService

    async def run(self, cmd: UpdateCompany) -> CompanyUpdated:
        with logfire.span("UpdateCompany"):
            move = "parent_id" in cmd.model_fields_set
            company = await self.company_service.update(
                company_id=cmd.company_id,
                name=cmd.name,
                reference_no=cmd.reference_no,
                code=cmd.code,
                email=cmd.email,
                notifications=cmd.notifications,
                type=cmd.type,
                parent_id=cmd.parent_id,
                move=move,
            )
            if move or cmd.type is not None:
                logfire.info(
                    "Company restructured",
                    company_id=str(company.id),
                    type=str(company.type),
                    parent_id=str(company.parent_id) if company.parent_id else None,
                )

            return CompanyUpdated(id=company.id, type=company.type, parent_id=company.parent_id)
