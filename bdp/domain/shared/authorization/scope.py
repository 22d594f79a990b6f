"""Accessible company sets and the resolver that computes them.

The accessible company set is the one value the rest of the system consumes
to scope reads: either ``UNRESTRICTED`` or an explicit, hierarchy-expanded
set of company ids. Role and hierarchy details never leak past it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from bdp.domain.company.model.tree import CompanyTree
from bdp.domain.company.model.value import CompanyId
from bdp.domain.shared.authorization.hierarchy import RoleHierarchy

if TYPE_CHECKING:
    from bdp.domain.auth.model.principal import Principal

logger = logging.getLogger(__name__)


class Unrestricted:
    """Sentinel: read access to every company."""

    _instance: Unrestricted | None = None

    def __new__(cls) -> Unrestricted:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNRESTRICTED"


UNRESTRICTED: Final = Unrestricted()


@dataclass(frozen=True)
class CompanyScope:
    """An explicit set of accessible companies. Empty means nothing is visible."""

    company_ids: frozenset[CompanyId] = field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        return not self.company_ids

    def __len__(self) -> int:
        return len(self.company_ids)


AccessibleCompanySet = Unrestricted | CompanyScope


class AccessScopeResolver:
    """Computes a principal's accessible company set from a tree snapshot.

    Unrestricted roles (internal staff with organisation-wide duties) see
    everything regardless of assignments. Every other role sees its assigned
    companies and all of their descendants, never siblings or ancestors. No
    assignments means no visibility.
    """

    def __init__(self, hierarchy: RoleHierarchy, tree: CompanyTree) -> None:
        self._hierarchy = hierarchy
        self._tree = tree

    def resolve(self, principal: "Principal") -> AccessibleCompanySet:
        if self._hierarchy.is_unrestricted(principal.role):
            return UNRESTRICTED

        if not principal.assigned_company_ids:
            logger.debug("Principal %s has no company assignments", principal.user_id)
            return CompanyScope()

        company_ids = self._tree.expand_to_descendant_ids(principal.assigned_company_ids)
        logger.debug(
            "Resolved scope: principal=%s assigned=%d accessible=%d",
            principal.user_id,
            len(principal.assigned_company_ids),
            len(company_ids),
        )
        return CompanyScope(company_ids=company_ids)
