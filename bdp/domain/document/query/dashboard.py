"""GetDashboardStats query and handler."""

from bdp.domain.auth.model.principal import Principal
from bdp.domain.auth.service.user import UserService
from bdp.domain.company.service.company import CompanyService
from bdp.domain.document.model.value import DocumentKind
from bdp.domain.document.service.document import DocumentService
from bdp.domain.shared.authorization.capability import Capability
from bdp.domain.shared.authorization.document_filter import DocumentFilterBuilder
from bdp.domain.shared.authorization.gate import requires
from bdp.domain.shared.authorization.permission import PermissionGate
from bdp.domain.shared.authorization.scope import AccessScopeResolver
from bdp.domain.shared.query import Query, QueryHandler, Result


class GetDashboardStats(Query):
    pass


class DashboardStats(Result):
    """Per-principal counts. ``None`` means "not permitted", never zero."""

    invoices: int | None = None
    credit_notes: int | None = None
    statements: int | None = None
    users: int | None = None
    companies: int | None = None


class GetDashboardStatsHandler(QueryHandler[GetDashboardStats, DashboardStats]):
    __auth__ = requires(Capability.DOCUMENTS_VIEW)
    principal: Principal
    permission_gate: PermissionGate
    scope_resolver: AccessScopeResolver
    filter_builder: DocumentFilterBuilder
    document_service: DocumentService
    user_service: UserService
    company_service: CompanyService

    async def run(self, query: GetDashboardStats) -> DashboardStats:
        scope = self.scope_resolver.resolve(self.principal)
        predicate = self.filter_builder.build(scope)
        stats = DashboardStats()

        for kind, attr in (
            (DocumentKind.INVOICE, "invoices"),
            (DocumentKind.CREDIT_NOTE, "credit_notes"),
            (DocumentKind.STATEMENT, "statements"),
        ):
            if self.permission_gate.allows(self.principal, kind.view_capability):
                setattr(stats, attr, await self.document_service.count(predicate, kind))

        if self.permission_gate.allows(self.principal, Capability.USERS_VIEW):
            stats.users = await self.user_service.count_users(self.principal, predicate)

        if self.permission_gate.allows(self.principal, Capability.COMPANIES_VIEW):
            stats.companies = await self.company_service.count_accessible(scope)

        return stats
