"""Company service: company administration with hierarchy checks."""

import logging

from bdp.domain.auth.model.value import UserId
from bdp.domain.company.model.company import Company
from bdp.domain.company.model.tree import CompanyNode, CompanyTree
from bdp.domain.company.model.value import CompanyId, CompanyType, NotificationPreferences
from bdp.domain.company.port.repository import CompanyRepository
from bdp.domain.shared.authorization.document_filter import Predicate
from bdp.domain.shared.authorization.scope import AccessibleCompanySet, CompanyScope
from bdp.domain.shared.error import (
    ConflictError,
    InvalidStateError,
    UnknownCompanyError,
    ValidationError,
)
from bdp.domain.shared.service import Service

logger = logging.getLogger(__name__)


class CompanyService(Service):
    """Creates, updates, re-parents and deletes companies.

    Parent assignments are validated against a snapshot loaded just before
    the write; a rejected assignment is never saved.
    """

    _company_repo: CompanyRepository

    async def get(self, company_id: CompanyId) -> Company:
        return self._found(await self._company_repo.get(company_id), "company", company_id)

    async def create(
        self,
        name: str,
        type: CompanyType,
        parent_id: CompanyId | None = None,
        reference_no: int | None = None,
        code: str | None = None,
        email: str | None = None,
        notifications: NotificationPreferences | None = None,
        created_by: UserId | None = None,
    ) -> Company:
        company = Company.create(
            name=name,
            type=type,
            parent_id=parent_id,
            reference_no=reference_no,
            code=code,
            email=email,
            notifications=notifications,
            created_by=created_by,
        )
        if parent_id is not None:
            await self._require_parent(parent_id)
        await self._require_unique_reference(reference_no)

        await self._company_repo.save(company)
        logger.info("Company created: id=%s type=%s parent=%s", company.id, type, parent_id)
        return company

    async def update(
        self,
        company_id: CompanyId,
        name: str | None = None,
        reference_no: int | None = None,
        code: str | None = None,
        email: str | None = None,
        notifications: NotificationPreferences | None = None,
        type: CompanyType | None = None,
        parent_id: CompanyId | None = None,
        move: bool = False,
    ) -> Company:
        """Apply every requested change, then save once.

        With ``move`` the company is re-parented to ``parent_id`` (``None`` makes it
        a root). A new ``type`` alone keeps the current parent. Structure is
        validated before any field is written, so a rejected change saves nothing.
        """
        company = await self.get(company_id)
        if move or type is not None:
            await self._restructure(
                company,
                type or company.type,
                parent_id if move else company.parent_id,
            )
        if name is not None:
            company.rename(name)
        if reference_no is not None and reference_no != company.reference_no:
            await self._require_unique_reference(reference_no)
        company.update_details(
            reference_no=reference_no,
            code=code,
            email=email,
            notifications=notifications,
        )

        await self._company_repo.save(company)
        return company

    async def reparent(
        self,
        company_id: CompanyId,
        parent_id: CompanyId | None,
        type: CompanyType | None = None,
    ) -> Company:
        """Move a company under ``parent_id`` (and optionally change its type).

        Raises CycleDetectedError if the new parent is the company itself or
        one of its descendants.
        """
        company = await self.get(company_id)
        await self._restructure(company, type or company.type, parent_id)
        await self._company_repo.save(company)
        logger.info("Company re-parented: id=%s parent=%s", company_id, parent_id)
        return company

    async def deactivate(self, company_id: CompanyId) -> Company:
        company = await self.get(company_id)
        company.deactivate()
        await self._company_repo.save(company)
        return company

    async def delete(self, company_id: CompanyId) -> None:
        """Hard-delete a company. Refused while it still has children."""
        await self.get(company_id)
        children = await self._company_repo.get_children(company_id)
        if children:
            raise InvalidStateError(
                f"Cannot delete a company with {len(children)} child companies; "
                "move or delete them first",
                code="company_has_children",
            )
        await self._company_repo.delete(company_id)
        logger.info("Company deleted: id=%s", company_id)

    async def list_companies(
        self, predicate: Predicate, include_inactive: bool = True
    ) -> list[Company]:
        return await self._company_repo.find(predicate, include_inactive=include_inactive)

    async def count_accessible(self, scope: AccessibleCompanySet) -> int:
        """Number of companies in ``scope``: the stored total when unrestricted."""
        if isinstance(scope, CompanyScope):
            return len(scope)
        return await self._company_repo.count()

    async def hierarchy(self, scope: AccessibleCompanySet) -> list[CompanyNode]:
        """Nested company forest restricted to ``scope``."""
        if isinstance(scope, CompanyScope):
            if scope.is_empty:
                return []
            tree = await CompanyTree.load(self._company_repo, scope.company_ids)
            return tree.hierarchy(scope.company_ids)
        tree = CompanyTree.from_companies(await self._company_repo.list_all())
        return tree.hierarchy()

    async def _require_parent(self, parent_id: CompanyId) -> Company:
        parent = await self._company_repo.get(parent_id)
        if parent is None:
            raise ValidationError(
                f"Parent company not found: {parent_id}",
                code="parent_not_found",
                field="parent_id",
            )
        return parent

    async def _require_unique_reference(self, reference_no: int | None) -> None:
        if reference_no is None:
            return
        existing = await self._company_repo.get_by_reference_no(reference_no)
        if existing is not None:
            raise ConflictError(
                f"Reference number {reference_no} is already in use",
                code="reference_taken",
            )

    async def _restructure(
        self, company: Company, type: CompanyType, parent_id: CompanyId | None
    ) -> None:
        """Check a type/parent change against a fresh snapshot, then apply it in memory."""
        ids = [company.id] if parent_id is None else [company.id, parent_id]
        try:
            tree = await CompanyTree.load(self._company_repo, ids)
        except UnknownCompanyError:
            raise ValidationError(
                f"Parent company not found: {parent_id}",
                code="parent_not_found",
                field="parent_id",
            ) from None
        tree.validate_parent(company.id, parent_id)
        company.restructure(type, parent_id)
