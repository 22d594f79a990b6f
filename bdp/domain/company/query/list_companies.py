"""ListCompanies query and handler."""

from datetime import datetime

from pydantic import BaseModel

from bdp.domain.auth.model.principal import Principal
from bdp.domain.company.model.value import CompanyId, CompanyType
from bdp.domain.company.service.company import CompanyService
from bdp.domain.shared.authorization.capability import Capability
from bdp.domain.shared.authorization.document_filter import DocumentFilterBuilder
from bdp.domain.shared.authorization.gate import requires
from bdp.domain.shared.authorization.permission import PermissionGate
from bdp.domain.shared.authorization.scope import AccessScopeResolver
from bdp.domain.shared.query import Query, QueryHandler, Result


class ListCompanies(Query):
    include_inactive: bool = True


class CompanySummary(BaseModel):
    id: CompanyId
    name: str
    type: CompanyType
    parent_id: CompanyId | None
    reference_no: int | None
    is_active: bool
    created_at: datetime


class CompanyList(Result):
    items: list[CompanySummary]
    total: int


class ListCompaniesHandler(QueryHandler[ListCompanies, CompanyList]):
    __auth__ = requires(Capability.COMPANIES_VIEW)
    principal: Principal
    permission_gate: PermissionGate
    scope_resolver: AccessScopeResolver
    filter_builder: DocumentFilterBuilder
    company_service: CompanyService

    async def run(self, query: ListCompanies) -> CompanyList:
        predicate = self.filter_builder.build(self.scope_resolver.resolve(self.principal))
        companies = await self.company_service.list_companies(
            predicate, include_inactive=query.include_inactive
        )
        return CompanyList(
            items=[
                CompanySummary(
                    id=c.id,
                    name=c.name,
                    type=c.type,
                    parent_id=c.parent_id,
                    reference_no=c.reference_no,
                    is_active=c.is_active,
                    created_at=c.created_at,
                )
                for c in companies
            ],
            total=len(companies),
        )
