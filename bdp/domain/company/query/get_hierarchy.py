"""GetCompanyHierarchy query and handler."""

from pydantic import BaseModel

from bdp.domain.auth.model.principal import Principal
from bdp.domain.company.model.tree import CompanyNode
from bdp.domain.company.model.value import CompanyId, CompanyType
from bdp.domain.company.service.company import CompanyService
from bdp.domain.shared.authorization.capability import Capability
from bdp.domain.shared.authorization.gate import requires
from bdp.domain.shared.authorization.permission import PermissionGate
from bdp.domain.shared.authorization.scope import AccessScopeResolver
from bdp.domain.shared.query import Query, QueryHandler, Result


class GetCompanyHierarchy(Query):
    pass


class HierarchyNode(BaseModel):
    id: CompanyId
    name: str
    type: CompanyType
    is_active: bool
    children: list["HierarchyNode"] = []

    @classmethod
    def from_node(cls, node: CompanyNode) -> "HierarchyNode":
        return cls(
            id=node.company.id,
            name=node.company.name,
            type=node.company.type,
            is_active=node.company.is_active,
            children=[cls.from_node(child) for child in node.children],
        )


class CompanyHierarchy(Result):
    roots: list[HierarchyNode]


class GetCompanyHierarchyHandler(QueryHandler[GetCompanyHierarchy, CompanyHierarchy]):
    __auth__ = requires(Capability.COMPANIES_VIEW_HIERARCHY)
    principal: Principal
    permission_gate: PermissionGate
    scope_resolver: AccessScopeResolver
    company_service: CompanyService

    async def run(self, query: GetCompanyHierarchy) -> CompanyHierarchy:
        scope = self.scope_resolver.resolve(self.principal)
        forest = await self.company_service.hierarchy(scope)
        return CompanyHierarchy(roots=[HierarchyNode.from_node(node) for node in forest])
