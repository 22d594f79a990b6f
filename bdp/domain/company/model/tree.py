"""CompanyTree: immutable snapshot of the company forest.

Companies store only a back-pointer to their parent. The snapshot adds an
explicit parent → children index so that descendant queries touch only the
subtree being asked about, never the whole table.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Collection, Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from bdp.domain.company.model.company import Company
from bdp.domain.company.model.value import CompanyId
from bdp.domain.shared.error import (
    CorruptHierarchyError,
    CycleDetectedError,
    UnknownCompanyError,
)

if TYPE_CHECKING:
    from bdp.domain.company.port.repository import CompanyReader

logger = logging.getLogger(__name__)


def _sort_key(company: Company) -> tuple[str, str]:
    return (company.name.casefold(), str(company.id))


@dataclass(frozen=True)
class CompanyNode:
    """One company in a nested hierarchy view."""

    company: Company
    children: tuple[CompanyNode, ...] = ()


class CompanyTree:
    """Read-only view over a fixed set of companies.

    All queries answer against the snapshot taken at construction; writes
    made to storage afterwards are not visible. Returned Company objects
    belong to the snapshot and must be treated as read-only.
    """

    __slots__ = ("_companies", "_children")

    def __init__(
        self,
        companies: Mapping[CompanyId, Company],
        children: Mapping[CompanyId, tuple[CompanyId, ...]] | None = None,
    ) -> None:
        self._companies = dict(companies)
        if children is None:
            index: dict[CompanyId, list[CompanyId]] = {}
            for company in sorted(self._companies.values(), key=_sort_key):
                if company.parent_id is not None:
                    index.setdefault(company.parent_id, []).append(company.id)
            children = {parent_id: tuple(ids) for parent_id, ids in index.items()}
        self._children = dict(children)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_companies(cls, companies: Iterable[Company]) -> CompanyTree:
        """Build a full snapshot from every company in storage."""
        return cls({c.id: c.model_copy() for c in companies})

    @classmethod
    async def load(cls, reader: CompanyReader, company_ids: Iterable[CompanyId]) -> CompanyTree:
        """Build a partial snapshot using only ``get`` and ``get_children``.

        The snapshot holds each requested company, all of its descendants and
        its ancestor chain. Ancestors are present without their other
        children, so descendant queries are only complete for the requested
        companies and the companies below them.

        Raises UnknownCompanyError if a requested company does not exist.
        """
        found: dict[CompanyId, Company] = {}
        for company_id in company_ids:
            if company_id in found:
                continue
            company = await reader.get(company_id)
            if company is None:
                logger.error("Company not found while loading tree: %s", company_id)
                raise UnknownCompanyError(f"Unknown company: {company_id}")
            found[company_id] = company

        queue = deque(found)
        while queue:
            parent_id = queue.popleft()
            for child in await reader.get_children(parent_id):
                if child.id in found:
                    continue
                found[child.id] = child
                queue.append(child.id)

        for company in list(found.values()):
            parent_id = company.parent_id
            while parent_id is not None and parent_id not in found:
                parent = await reader.get(parent_id)
                if parent is None:
                    logger.warning(
                        "Dangling parent reference: company=%s parent=%s",
                        company.id,
                        parent_id,
                    )
                    break
                found[parent.id] = parent
                parent_id = parent.parent_id

        return cls.from_companies(found.values())

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def __contains__(self, company_id: object) -> bool:
        return company_id in self._companies

    def __len__(self) -> int:
        return len(self._companies)

    def __iter__(self) -> Iterator[Company]:
        return iter(sorted(self._companies.values(), key=_sort_key))

    def get(self, company_id: CompanyId) -> Company | None:
        return self._companies.get(company_id)

    def children(self, company_id: CompanyId) -> list[Company]:
        self._require(company_id)
        return [self._companies[i] for i in self._children.get(company_id, ())]

    def roots(self) -> list[Company]:
        return [c for c in self if c.parent_id is None]

    # -------------------------------------------------------------------------
    # Hierarchy queries
    # -------------------------------------------------------------------------

    def ancestors(self, company_id: CompanyId) -> list[Company]:
        """Parent chain of a company, nearest parent first.

        Raises UnknownCompanyError for an unknown id and CorruptHierarchyError if
        the parent pointers loop back on themselves.
        """
        company = self._require(company_id)
        chain: list[Company] = []
        seen = {company_id}
        parent_id = company.parent_id
        while parent_id is not None:
            if parent_id in seen:
                logger.error("Cycle in stored company hierarchy at %s", parent_id)
                raise CorruptHierarchyError(
                    f"Company hierarchy contains a cycle through {parent_id}"
                )
            parent = self._companies.get(parent_id)
            if parent is None:
                logger.warning(
                    "Dangling parent reference: company=%s parent=%s",
                    chain[-1].id if chain else company_id,
                    parent_id,
                )
                break
            chain.append(parent)
            seen.add(parent_id)
            parent_id = parent.parent_id
        return chain

    def descendants(self, company_id: CompanyId) -> list[Company]:
        """Every company below ``company_id``, breadth-first."""
        self._require(company_id)
        return [self._companies[i] for i in self._walk_down(company_id)]

    def expand_to_descendant_ids(self, company_ids: Iterable[CompanyId]) -> frozenset[CompanyId]:
        """Union of each id with all of its descendants' ids."""
        expanded: set[CompanyId] = set()
        for company_id in company_ids:
            if company_id in expanded:
                # Already reached as a descendant; its subtree is included too
                continue
            self._require(company_id)
            expanded.add(company_id)
            expanded.update(self._walk_down(company_id))
        return frozenset(expanded)

    def validate_parent(self, company_id: CompanyId, parent_id: CompanyId | None) -> None:
        """Reject a parent assignment that would make a company its own ancestor.

        ``company_id`` may be a company not yet in the snapshot (a new
        company), in which case only the parent's existence is checked.
        """
        if parent_id is None:
            return
        if parent_id == company_id:
            logger.warning("Rejected self-parenting: company=%s", company_id)
            raise CycleDetectedError("Company cannot be its own parent", field="parent_id")
        self._require(parent_id)
        if company_id in self._companies and parent_id in set(self._walk_down(company_id)):
            logger.warning(
                "Rejected re-parent that would create a cycle: company=%s parent=%s",
                company_id,
                parent_id,
            )
            raise CycleDetectedError(
                "Cannot set a descendant as parent",
                field="parent_id",
            )

    def hierarchy(self, visible_ids: Collection[CompanyId] | None = None) -> list[CompanyNode]:
        """Nested forest of the visible companies.

        ``None`` means every company is visible. A visible company whose parent
        is not visible becomes a root of the view.
        """

        def visible(company_id: CompanyId) -> bool:
            return visible_ids is None or company_id in visible_ids

        def build(company_id: CompanyId) -> CompanyNode:
            return CompanyNode(
                company=self._companies[company_id],
                children=tuple(
                    build(child_id)
                    for child_id in self._children.get(company_id, ())
                    if visible(child_id)
                ),
            )

        return [
            build(company.id)
            for company in self
            if visible(company.id)
            and (
                company.parent_id is None
                or company.parent_id not in self._companies
                or not visible(company.parent_id)
            )
        ]

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require(self, company_id: CompanyId) -> Company:
        company = self._companies.get(company_id)
        if company is None:
            logger.error("Unknown company in hierarchy query: %s", company_id)
            raise UnknownCompanyError(f"Unknown company: {company_id}")
        return company

    def _walk_down(self, root_id: CompanyId) -> list[CompanyId]:
        order: list[CompanyId] = []
        seen = {root_id}
        queue = deque([root_id])
        while queue:
            current = queue.popleft()
            for child_id in self._children.get(current, ()):
                if child_id in seen:
                    logger.error("Cycle in stored company hierarchy at %s", child_id)
                    raise CorruptHierarchyError(
                        f"Company hierarchy contains a cycle through {child_id}"
                    )
                seen.add(child_id)
                order.append(child_id)
                queue.append(child_id)
        return order
