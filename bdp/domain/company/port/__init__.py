"""Company domain ports."""

from .repository import CompanyReader, CompanyRepository

__all__ = ["CompanyReader", "CompanyRepository"]
