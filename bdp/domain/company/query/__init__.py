"""Company domain queries."""

from .get_hierarchy import (
    CompanyHierarchy,
    GetCompanyHierarchy,
    GetCompanyHierarchyHandler,
    HierarchyNode,
)
from .list_companies import CompanyList, CompanySummary, ListCompanies, ListCompaniesHandler

__all__ = [
    "CompanyHierarchy",
    "CompanyList",
    "CompanySummary",
    "GetCompanyHierarchy",
    "GetCompanyHierarchyHandler",
    "HierarchyNode",
    "ListCompanies",
    "ListCompaniesHandler",
]
