"""Tests for wiring handlers through the DI container against in-memory SQLite."""

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine

from bdp.application.di import create_container
from bdp.config import AccessConfig, Config, DatabaseConfig
from bdp.domain.auth.model.identity import Identity
from bdp.domain.auth.model.principal import Principal
from bdp.domain.auth.model.role import Role
from bdp.domain.auth.model.value import UserId
from bdp.domain.company.command import (
    CreateCompany,
    CreateCompanyHandler,
    UpdateCompany,
    UpdateCompanyHandler,
)
from bdp.domain.company.model.value import CompanyId, CompanyType
from bdp.domain.company.query import ListCompanies, ListCompaniesHandler
from bdp.domain.document.query.dashboard import GetDashboardStats, GetDashboardStatsHandler
from bdp.domain.shared.authorization.hierarchy import RoleHierarchy
from bdp.domain.shared.error import AuthorizationError, ConfigurationError, CycleDetectedError
from bdp.infrastructure.persistence.tables import metadata


def _config(**access) -> Config:
    return Config(
        database=DatabaseConfig(url="sqlite+aiosqlite:///:memory:", auto_migrate=False),
        access=AccessConfig(**access),
    )


def _principal(role: Role, *company_ids: CompanyId) -> Principal:
    return Principal(
        user_id=UserId.generate(),
        role=role,
        assigned_company_ids=frozenset(company_ids),
    )


class TestContainer:
    @pytest.mark.asyncio
    async def test_hierarchy_reflects_config(self) -> None:
        container = create_container(_config(unrestricted_roles=[Role.GLOBAL_ADMIN]))
        try:
            hierarchy = await container.get(RoleHierarchy)
            assert not hierarchy.is_unrestricted(Role.MANAGER)
        finally:
            await container.close()

    @pytest.mark.asyncio
    async def test_create_then_list_in_separate_units_of_work(self) -> None:
        container = create_container(_config())
        try:
            engine = await container.get(AsyncEngine)
            async with engine.begin() as conn:
                await conn.run_sync(metadata.create_all)

            admin = _principal(Role.ADMINISTRATOR)
            async with container(context={Identity: admin}) as uow:
                handler = await uow.get(CreateCompanyHandler)
                acme = await handler.run(CreateCompany(name="Acme", type=CompanyType.CORP))
            async with container(context={Identity: admin}) as uow:
                handler = await uow.get(CreateCompanyHandler)
                await handler.run(
                    CreateCompany(name="Acme UK", type=CompanyType.SUB, parent_id=acme.id)
                )
                await handler.run(CreateCompany(name="Globex", type=CompanyType.CORP))

            controller = _principal(Role.CREDIT_CONTROLLER, acme.id)
            async with container(context={Identity: controller}) as uow:
                listing = await (await uow.get(ListCompaniesHandler)).run(ListCompanies())
                stats = await (await uow.get(GetDashboardStatsHandler)).run(GetDashboardStats())

            assert sorted(item.name for item in listing.items) == ["Acme", "Acme UK"]
            assert stats.companies == 2
            assert stats.users is None
        finally:
            await container.close()


    @pytest.mark.asyncio
    async def test_rejected_reparent_is_not_committed(self) -> None:
        container = create_container(_config())
        try:
            engine = await container.get(AsyncEngine)
            async with engine.begin() as conn:
                await conn.run_sync(metadata.create_all)

            admin = _principal(Role.GLOBAL_ADMIN)
            async with container(context={Identity: admin}) as uow:
                handler = await uow.get(CreateCompanyHandler)
                acme = await handler.run(CreateCompany(name="Acme", type=CompanyType.CORP))
                uk = await handler.run(
                    CreateCompany(name="Acme UK", type=CompanyType.SUB, parent_id=acme.id)
                )

            with pytest.raises(CycleDetectedError):
                async with container(context={Identity: admin}) as uow:
                    handler = await uow.get(UpdateCompanyHandler)
                    await handler.run(
                        UpdateCompany(
                            company_id=acme.id,
                            name="Hijacked",
                            parent_id=uk.id,
                            type=CompanyType.SUB,
                        )
                    )

            async with container(context={Identity: admin}) as uow:
                listing = await (await uow.get(ListCompaniesHandler)).run(ListCompanies())

            assert sorted(item.name for item in listing.items) == ["Acme", "Acme UK"]
        finally:
            await container.close()

    @pytest.mark.asyncio
    async def test_notification_contact_cannot_use_the_portal(self) -> None:
        container = create_container(_config())
        try:
            contact = _principal(Role.NOTIFICATION_CONTACT)
            with pytest.raises(AuthorizationError) as exc_info:
                async with container(context={Identity: contact}) as uow:
                    await uow.get(ListCompaniesHandler)
            assert exc_info.value.code == "no_portal_access"
        finally:
            await container.close()

class TestStartupFailure:
    def test_incomplete_levels_fail_validation(self, monkeypatch: pytest.MonkeyPatch) -> None:
        import bdp.application.di as di

        def broken(_config: AccessConfig) -> RoleHierarchy:
            return RoleHierarchy(levels={Role.GLOBAL_ADMIN: 7})

        monkeypatch.setattr(di, "build_role_hierarchy", broken)

        with pytest.raises(ConfigurationError):
            create_container(_config())
