"""DocumentFilterBuilder: turns an accessible company set into a scoping predicate.

Predicates are opaque to callers: storage adapters translate them (see
``bdp.infrastructure.persistence.scoping``) and combine them with their own
filters. An empty explicit scope always becomes ``MatchNone``, never a
predicate without a company clause.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from bdp.domain.company.model.value import CompanyId
from bdp.domain.shared.authorization.scope import AccessibleCompanySet, CompanyScope, Unrestricted


class Predicate(ABC):
    """Opaque company-scoping predicate."""

    @abstractmethod
    def matches_company(self, company_id: CompanyId | None) -> bool: ...

    def matches(self, record: Any) -> bool:
        """Evaluate against any object with a ``company_id`` attribute."""
        return self.matches_company(getattr(record, "company_id", None))


@dataclass(frozen=True)
class MatchAll(Predicate):
    """No company restriction."""

    def matches_company(self, company_id: CompanyId | None) -> bool:
        return True


@dataclass(frozen=True)
class MatchNone(Predicate):
    """Matches zero records."""

    def matches_company(self, company_id: CompanyId | None) -> bool:
        return False


@dataclass(frozen=True)
class CompanyIn(Predicate):
    """Record's company is one of ``company_ids``. Records with no company never match."""

    company_ids: frozenset[CompanyId]

    def matches_company(self, company_id: CompanyId | None) -> bool:
        return company_id is not None and company_id in self.company_ids


class DocumentFilterBuilder:
    """Stateless; one instance can be shared across requests."""

    def build(self, scope: AccessibleCompanySet) -> Predicate:
        if isinstance(scope, Unrestricted):
            return MatchAll()
        if isinstance(scope, CompanyScope):
            if scope.is_empty:
                return MatchNone()
            return CompanyIn(company_ids=scope.company_ids)
        # Anything else is a programming error; never widen to MatchAll
        raise TypeError(f"Unsupported access scope: {scope!r}")
