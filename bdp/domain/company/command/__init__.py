"""Company domain commands."""

from .create_company import CompanyCreated, CreateCompany, CreateCompanyHandler
from .delete_company import (
    CompanyDeactivated,
    CompanyDeleted,
    DeactivateCompany,
    DeactivateCompanyHandler,
    DeleteCompany,
    DeleteCompanyHandler,
)
from .update_company import CompanyUpdated, UpdateCompany, UpdateCompanyHandler

__all__ = [
    "CompanyCreated",
    "CompanyDeactivated",
    "CompanyDeleted",
    "CompanyUpdated",
    "CreateCompany",
    "CreateCompanyHandler",
    "DeactivateCompany",
    "DeactivateCompanyHandler",
    "DeleteCompany",
    "DeleteCompanyHandler",
    "UpdateCompany",
    "UpdateCompanyHandler",
]
