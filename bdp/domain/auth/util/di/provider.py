"""DI provider for the access-control engine and the auth domain."""

import logging

from dishka import from_context, provide

from bdp.config import Config, build_role_hierarchy
from bdp.domain.auth.command.assign_companies import AssignUserCompaniesHandler
from bdp.domain.auth.command.change_role import ChangeUserRoleHandler
from bdp.domain.auth.command.create_user import CreateUserHandler
from bdp.domain.auth.command.delete_user import DeleteUserHandler
from bdp.domain.auth.command.set_status import SetUserStatusHandler
from bdp.domain.auth.model.identity import Identity
from bdp.domain.auth.model.principal import Principal
from bdp.domain.auth.query.list_users import ListUsersHandler
from bdp.domain.auth.service.user import UserService
from bdp.domain.company.model.tree import CompanyTree
from bdp.domain.company.port.repository import CompanyReader
from bdp.domain.shared.authorization.document_filter import DocumentFilterBuilder
from bdp.domain.shared.authorization.hierarchy import RoleHierarchy
from bdp.domain.shared.authorization.permission import PermissionGate
from bdp.domain.shared.authorization.scope import AccessScopeResolver
from bdp.domain.shared.error import AuthorizationError
from bdp.util.di.base import Provider
from bdp.util.di.scope import Scope

logger = logging.getLogger(__name__)


class AccessProvider(Provider):
    """Role hierarchy, permission gate and per-request access scope."""

    config = from_context(provides=Config, scope=Scope.APP)

    # Supplied by the authentication collaborator for each unit of work
    identity = from_context(provides=Identity, scope=Scope.UOW)

    @provide(scope=Scope.APP)
    def get_role_hierarchy(self, config: Config) -> RoleHierarchy:
        return build_role_hierarchy(config.access)

    @provide(scope=Scope.APP)
    def get_permission_gate(self, hierarchy: RoleHierarchy) -> PermissionGate:
        return PermissionGate(hierarchy)

    @provide(scope=Scope.APP)
    def get_filter_builder(self) -> DocumentFilterBuilder:
        return DocumentFilterBuilder()

    @provide(scope=Scope.UOW)
    def get_principal(self, identity: Identity, hierarchy: RoleHierarchy) -> Principal:
        """Extract Principal from Identity.

        Raises if the request is not authenticated, or if the role may not use
        the portal at all (notification contacts only receive email).
        """
        if not isinstance(identity, Principal):
            raise AuthorizationError("Authentication required", code="missing_token")
        if not hierarchy.has_portal_access(identity.role):
            logger.info(
                "Portal access refused: principal=%s role=%s", identity.user_id, identity.role
            )
            raise AuthorizationError("This account has no portal access", code="no_portal_access")
        return identity

    @provide(scope=Scope.UOW)
    async def get_company_tree(
        self,
        principal: Principal,
        hierarchy: RoleHierarchy,
        reader: CompanyReader,
    ) -> CompanyTree:
        """Snapshot of the principal's assigned companies and everything below them.

        Unrestricted principals never consult the tree, so they get an empty one.
        """
        if hierarchy.is_unrestricted(principal.role):
            return CompanyTree({})
        tree = await CompanyTree.load(reader, principal.assigned_company_ids)
        logger.debug("Loaded company tree for %s: %d companies", principal.user_id, len(tree))
        return tree

    @provide(scope=Scope.UOW)
    def get_scope_resolver(
        self, hierarchy: RoleHierarchy, tree: CompanyTree
    ) -> AccessScopeResolver:
        return AccessScopeResolver(hierarchy, tree)


class AuthProvider(Provider):
    """DI provider for user administration services and handlers."""

    # Command Handlers
    create_user_handler = provide(CreateUserHandler, scope=Scope.UOW)
    change_role_handler = provide(ChangeUserRoleHandler, scope=Scope.UOW)
    assign_companies_handler = provide(AssignUserCompaniesHandler, scope=Scope.UOW)
    set_status_handler = provide(SetUserStatusHandler, scope=Scope.UOW)
    delete_user_handler = provide(DeleteUserHandler, scope=Scope.UOW)

    # Query Handlers
    list_users_handler = provide(ListUsersHandler, scope=Scope.UOW)

    # Services
    user_service = provide(UserService, scope=Scope.UOW)
