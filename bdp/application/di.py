from dishka import AsyncContainer, make_async_container

from bdp.config import Config, build_role_hierarchy, configure_logging
from bdp.domain.auth.command.assign_companies import AssignUserCompaniesHandler
from bdp.domain.auth.command.change_role import ChangeUserRoleHandler
from bdp.domain.auth.command.create_user import CreateUserHandler
from bdp.domain.auth.command.delete_user import DeleteUserHandler
from bdp.domain.auth.command.set_status import SetUserStatusHandler
from bdp.domain.auth.query.list_users import ListUsersHandler
from bdp.domain.auth.util.di import AccessProvider, AuthProvider
from bdp.domain.company.command.create_company import CreateCompanyHandler
from bdp.domain.company.command.delete_company import (
    DeactivateCompanyHandler,
    DeleteCompanyHandler,
)
from bdp.domain.company.command.update_company import UpdateCompanyHandler
from bdp.domain.company.query.get_hierarchy import GetCompanyHierarchyHandler
from bdp.domain.company.query.list_companies import ListCompaniesHandler
from bdp.domain.company.util.di import CompanyProvider
from bdp.domain.document.query.dashboard import GetDashboardStatsHandler
from bdp.domain.document.query.list_documents import GetDocumentHandler, ListDocumentsHandler
from bdp.domain.document.util.di import DocumentProvider
from bdp.domain.shared.authorization.startup import validate_access_model
from bdp.infrastructure.persistence import PersistenceProvider
from bdp.infrastructure.persistence.migrate import run_migrations
from bdp.util.di.scope import Scope

# Every handler the container can build; each must declare a valid __auth__ gate
HANDLERS: tuple[type, ...] = (
    CreateUserHandler,
    ChangeUserRoleHandler,
    AssignUserCompaniesHandler,
    SetUserStatusHandler,
    DeleteUserHandler,
    ListUsersHandler,
    CreateCompanyHandler,
    UpdateCompanyHandler,
    DeleteCompanyHandler,
    DeactivateCompanyHandler,
    ListCompaniesHandler,
    GetCompanyHierarchyHandler,
    ListDocumentsHandler,
    GetDocumentHandler,
    GetDashboardStatsHandler,
)


def create_container(config: Config | None = None) -> AsyncContainer:
    # Pydantic Settings populates from env vars at runtime
    config = config or Config()  # type: ignore[call-arg]

    # Fail at startup, not on the first request, if the access model is broken
    validate_access_model(build_role_hierarchy(config.access), HANDLERS)

    return make_async_container(
        PersistenceProvider(),
        AccessProvider(),
        AuthProvider(),
        CompanyProvider(),
        DocumentProvider(),
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )


def bootstrap(config: Config | None = None) -> AsyncContainer:
    """Configure logging, apply migrations if enabled, and build the container."""
    config = config or Config()  # type: ignore[call-arg]
    configure_logging(config.logging)
    if config.database.auto_migrate:
        run_migrations(config.database.url)
    return create_container(config)
