"""Repository ports for Company persistence."""

from abc import abstractmethod
from typing import Protocol

from bdp.domain.company.model.company import Company
from bdp.domain.company.model.value import CompanyId
from bdp.domain.shared.authorization.document_filter import Predicate
from bdp.domain.shared.port import Port


class CompanyReader(Port, Protocol):
    """The two queries a CompanyTree snapshot needs from storage."""

    @abstractmethod
    async def get(self, company_id: CompanyId) -> Company | None:
        """Get a company by id, or None if it does not exist."""
        ...

    @abstractmethod
    async def get_children(self, parent_id: CompanyId) -> list[Company]:
        """Get the direct children of a company."""
        ...


class CompanyRepository(CompanyReader, Protocol):
    """Repository for Company aggregate persistence."""

    @abstractmethod
    async def list_all(self) -> list[Company]:
        """Get every stored company (active or not)."""
        ...

    @abstractmethod
    async def find(self, predicate: Predicate, include_inactive: bool = True) -> list[Company]:
        """List companies whose own id satisfies ``predicate``, ordered by name."""
        ...

    @abstractmethod
    async def count(self) -> int:
        """Count stored companies."""
        ...

    @abstractmethod
    async def get_by_reference_no(self, reference_no: int) -> Company | None:
        """Get a company by its account/reference number."""
        ...

    @abstractmethod
    async def save(self, company: Company) -> None:
        """Insert or update a company."""
        ...

    @abstractmethod
    async def delete(self, company_id: CompanyId) -> bool:
        """Hard-delete a company. Returns True if deleted, False if not found."""
        ...
