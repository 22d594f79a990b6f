"""Company domain services."""

from .company import CompanyService

__all__ = ["CompanyService"]
