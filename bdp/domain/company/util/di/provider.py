"""DI provider for the company domain."""

from dishka import provide

from bdp.domain.company.command.create_company import CreateCompanyHandler
from bdp.domain.company.command.delete_company import (
    DeactivateCompanyHandler,
    DeleteCompanyHandler,
)
from bdp.domain.company.command.update_company import UpdateCompanyHandler
from bdp.domain.company.query.get_hierarchy import GetCompanyHierarchyHandler
from bdp.domain.company.query.list_companies import ListCompaniesHandler
from bdp.domain.company.service.company import CompanyService
from bdp.util.di.base import Provider
from bdp.util.di.scope import Scope


class CompanyProvider(Provider):
    # Command Handlers
    create_company_handler = provide(CreateCompanyHandler, scope=Scope.UOW)
    update_company_handler = provide(UpdateCompanyHandler, scope=Scope.UOW)
    delete_company_handler = provide(DeleteCompanyHandler, scope=Scope.UOW)
    deactivate_company_handler = provide(DeactivateCompanyHandler, scope=Scope.UOW)

    # Query Handlers
    list_companies_handler = provide(ListCompaniesHandler, scope=Scope.UOW)
    get_hierarchy_handler = provide(GetCompanyHierarchyHandler, scope=Scope.UOW)

    # Services
    company_service = provide(CompanyService, scope=Scope.UOW)
