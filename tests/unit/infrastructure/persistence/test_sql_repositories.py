"""Tests for the SQLAlchemy repositories against an in-memory SQLite database.

These exercise the SQL translation of scoping predicates: an empty scope must
produce a FALSE clause, never an absent one.
"""

from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from bdp.config import DatabaseConfig
from bdp.domain.auth.model.role import Role
from bdp.domain.auth.model.user import User
from bdp.domain.company.model.company import Company
from bdp.domain.company.model.tree import CompanyTree
from bdp.domain.company.model.value import CompanyId, CompanyType, NotificationPreferences
from bdp.domain.document.model.document import Document
from bdp.domain.document.model.value import DocumentKind
from bdp.domain.shared.authorization.document_filter import CompanyIn, MatchAll, MatchNone
from bdp.infrastructure.persistence.database import create_db_engine, create_session_factory
from bdp.infrastructure.persistence.repository.company import PostgresCompanyRepository
from bdp.infrastructure.persistence.repository.document import PostgresDocumentRepository
from bdp.infrastructure.persistence.repository.user import PostgresUserRepository
from bdp.infrastructure.persistence.tables import metadata


@pytest_asyncio.fixture
async def engine():
    """Per-test in-memory SQLite engine with the schema created."""
    engine = create_db_engine(DatabaseConfig(url="sqlite+aiosqlite:///:memory:"))
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine):
    factory = create_session_factory(engine)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def companies(session: AsyncSession) -> dict[str, Company]:
    """A > B > C and an unrelated G, saved to the database."""
    repo = PostgresCompanyRepository(session)
    a = Company.create(name="Acme", type=CompanyType.CORP, reference_no=1)
    b = Company.create(name="Acme UK", type=CompanyType.SUB, parent_id=a.id)
    c = Company.create(name="Acme London", type=CompanyType.BRANCH, parent_id=b.id)
    g = Company.create(name="Globex", type=CompanyType.CORP, reference_no=2)
    for company in (a, b, c, g):
        await repo.save(company)
    return {"A": a, "B": b, "C": c, "G": g}


class TestCompanyRepository:
    @pytest.mark.asyncio
    async def test_round_trip(self, session: AsyncSession) -> None:
        repo = PostgresCompanyRepository(session)
        company = Company.create(
            name="Initech",
            type=CompanyType.CORP,
            reference_no=77,
            code="INI",
            notifications=NotificationPreferences(send_invoice_email=True),
        )
        await repo.save(company)

        loaded = await repo.get(company.id)

        assert loaded is not None
        assert loaded.id == company.id
        assert loaded.reference_no == 77
        assert loaded.notifications.send_invoice_email is True
        assert (await repo.get_by_reference_no(77)).id == company.id  # type: ignore[union-attr]

    @pytest.mark.asyncio
    async def test_get_missing(self, session: AsyncSession) -> None:
        assert await PostgresCompanyRepository(session).get(CompanyId.generate()) is None

    @pytest.mark.asyncio
    async def test_get_children(self, session: AsyncSession, companies) -> None:
        repo = PostgresCompanyRepository(session)
        children = await repo.get_children(companies["A"].id)
        assert [c.id for c in children] == [companies["B"].id]

    @pytest.mark.asyncio
    async def test_tree_load_from_storage(self, session: AsyncSession, companies) -> None:
        tree = await CompanyTree.load(PostgresCompanyRepository(session), [companies["B"].id])

        assert tree.expand_to_descendant_ids({companies["B"].id}) == {
            companies["B"].id,
            companies["C"].id,
        }
        assert [c.id for c in tree.ancestors(companies["C"].id)] == [
            companies["B"].id,
            companies["A"].id,
        ]

    @pytest.mark.asyncio
    async def test_find_with_predicates(self, session: AsyncSession, companies) -> None:
        repo = PostgresCompanyRepository(session)

        assert len(await repo.find(MatchAll())) == 4
        assert await repo.find(MatchNone()) == []
        scoped = await repo.find(CompanyIn(company_ids=frozenset({companies["C"].id})))
        assert [c.name for c in scoped] == ["Acme London"]

    @pytest.mark.asyncio
    async def test_find_active_only(self, session: AsyncSession, companies) -> None:
        repo = PostgresCompanyRepository(session)
        globex = companies["G"]
        globex.deactivate()
        await repo.save(globex)

        names = [c.name for c in await repo.find(MatchAll(), include_inactive=False)]

        assert "Globex" not in names
        assert await repo.count() == 4

    @pytest.mark.asyncio
    async def test_update_parent(self, session: AsyncSession, companies) -> None:
        repo = PostgresCompanyRepository(session)
        b = companies["B"]
        b.restructure(CompanyType.SUB, companies["G"].id)
        await repo.save(b)

        assert [c.id for c in await repo.get_children(companies["G"].id)] == [b.id]
        assert await repo.get_children(companies["A"].id) == []

    @pytest.mark.asyncio
    async def test_delete_removes_assignments(self, session: AsyncSession, companies) -> None:
        company_repo = PostgresCompanyRepository(session)
        user_repo = PostgresUserRepository(session)
        user = User.create(
            email="sam@example.test",
            name="Sam",
            role=Role.EXTERNAL_USER,
            company_ids=frozenset({companies["C"].id, companies["G"].id}),
        )
        await user_repo.save(user)

        assert await company_repo.delete(companies["C"].id) is True
        assert await company_repo.delete(companies["C"].id) is False

        loaded = await user_repo.get(user.id)
        assert loaded is not None
        assert loaded.company_ids == {companies["G"].id}


class TestUserRepository:
    @pytest.mark.asyncio
    async def test_round_trip_with_assignments(self, session: AsyncSession, companies) -> None:
        repo = PostgresUserRepository(session)
        user = User.create(
            email="Sam@Example.test",
            name="Sam",
            role=Role.CREDIT_SENIOR,
            company_ids=frozenset({companies["A"].id, companies["G"].id}),
        )
        await repo.save(user)

        loaded = await repo.get_by_email("sam@example.test")

        assert loaded is not None
        assert loaded.role is Role.CREDIT_SENIOR
        assert loaded.company_ids == {companies["A"].id, companies["G"].id}

    @pytest.mark.asyncio
    async def test_save_replaces_assignments(self, session: AsyncSession, companies) -> None:
        repo = PostgresUserRepository(session)
        user = User.create(
            email="sam@example.test",
            name="Sam",
            role=Role.EXTERNAL_USER,
            company_ids=frozenset({companies["A"].id}),
        )
        await repo.save(user)

        user.assign_companies(frozenset({companies["B"].id}))
        await repo.save(user)

        loaded = await repo.get(user.id)
        assert loaded is not None
        assert loaded.company_ids == {companies["B"].id}

    @pytest.mark.asyncio
    async def test_find_filters_by_role_and_scope(self, session: AsyncSession, companies) -> None:
        repo = PostgresUserRepository(session)
        inside = User.create(
            email="in@example.test",
            name="Inside",
            role=Role.EXTERNAL_USER,
            company_ids=frozenset({companies["C"].id}),
        )
        outside = User.create(
            email="out@example.test",
            name="Outside",
            role=Role.EXTERNAL_USER,
            company_ids=frozenset({companies["G"].id}),
        )
        unassigned = User.create(email="none@example.test", name="None", role=Role.EXTERNAL_USER)
        manager = User.create(
            email="boss@example.test",
            name="Boss",
            role=Role.MANAGER,
            company_ids=frozenset({companies["C"].id}),
        )
        for user in (inside, outside, unassigned, manager):
            await repo.save(user)
        scoped = CompanyIn(company_ids=frozenset({companies["B"].id, companies["C"].id}))
        roles = {Role.EXTERNAL_USER, Role.CREDIT_SENIOR}

        found = await repo.find(scoped, roles)

        assert [u.id for u in found] == [inside.id]
        assert await repo.count(scoped, roles) == 1
        assert await repo.count(MatchAll(), roles) == 3
        assert await repo.count(MatchNone(), roles) == 0
        assert await repo.find(MatchAll(), set()) == []

    @pytest.mark.asyncio
    async def test_pagination(self, session: AsyncSession) -> None:
        repo = PostgresUserRepository(session)
        for i in range(4):
            await repo.save(
                User.create(email=f"u{i}@example.test", name=f"User {i}", role=Role.EXTERNAL_USER)
            )

        page = await repo.find(MatchAll(), {Role.EXTERNAL_USER}, limit=2, offset=2)

        assert [u.name for u in page] == ["User 2", "User 3"]

    @pytest.mark.asyncio
    async def test_delete(self, session: AsyncSession, companies) -> None:
        repo = PostgresUserRepository(session)
        user = User.create(
            email="sam@example.test",
            name="Sam",
            role=Role.EXTERNAL_USER,
            company_ids=frozenset({companies["A"].id}),
        )
        await repo.save(user)

        assert await repo.delete(user.id) is True
        assert await repo.get(user.id) is None
        assert await repo.delete(user.id) is False


class TestDocumentRepository:
    @pytest.mark.asyncio
    async def test_scoping_and_soft_delete(self, session: AsyncSession, companies) -> None:
        repo = PostgresDocumentRepository(session)
        live = Document.create(
            kind=DocumentKind.INVOICE,
            company_id=companies["C"].id,
            number="INV-1",
            amount=Decimal("12.50"),
        )
        deleted = Document.create(
            kind=DocumentKind.INVOICE, company_id=companies["C"].id, number="INV-2"
        )
        deleted.soft_delete()
        elsewhere = Document.create(
            kind=DocumentKind.INVOICE, company_id=companies["G"].id, number="INV-3"
        )
        credit = Document.create(
            kind=DocumentKind.CREDIT_NOTE, company_id=companies["C"].id, number="CN-1"
        )
        for document in (live, deleted, elsewhere, credit):
            await repo.save(document)
        scoped = CompanyIn(company_ids=frozenset({companies["B"].id, companies["C"].id}))

        found = await repo.find(scoped, DocumentKind.INVOICE)

        assert [d.number for d in found] == ["INV-1"]
        assert found[0].amount == Decimal("12.50")
        assert await repo.count(scoped, DocumentKind.INVOICE) == 1
        assert await repo.count(MatchAll(), DocumentKind.INVOICE) == 2
        assert await repo.count(MatchNone(), DocumentKind.INVOICE) == 0
        assert await repo.count(scoped, DocumentKind.CREDIT_NOTE) == 1

    @pytest.mark.asyncio
    async def test_get_returns_soft_deleted_for_service_to_hide(
        self, session: AsyncSession, companies
    ) -> None:
        repo = PostgresDocumentRepository(session)
        document = Document.create(
            kind=DocumentKind.STATEMENT, company_id=companies["A"].id, number="ST-1"
        )
        document.soft_delete()
        await repo.save(document)

        loaded = await repo.get(document.id)

        assert loaded is not None
        assert loaded.is_deleted
