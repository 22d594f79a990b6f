"""SQLAlchemy repository for users and their company assignments."""

from collections import defaultdict
from collections.abc import Collection
from uuid import UUID

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bdp.domain.auth.model.role import Role
from bdp.domain.auth.model.user import User
from bdp.domain.auth.model.value import UserId
from bdp.domain.auth.port.repository import UserRepository
from bdp.domain.company.model.value import CompanyId
from bdp.domain.shared.authorization.document_filter import Predicate
from bdp.infrastructure.persistence.scoping import user_clause
from bdp.infrastructure.persistence.tables import user_companies_table, users_table


def _row_to_user(row: dict, company_ids: frozenset[CompanyId]) -> User:
    """Convert a database row plus its assignment rows to a User model."""
    return User(
        id=UserId(UUID(row["id"])),
        email=row["email"],
        name=row["name"],
        role=Role.parse(row["role"]),
        company_ids=company_ids,
        is_active=row["is_active"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _user_to_dict(user: User) -> dict:
    """Convert a User model to a database row dict (assignments excluded)."""
    return {
        "id": str(user.id),
        "email": user.email,
        "name": user.name,
        "role": user.role.value,
        "is_active": user.is_active,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


class PostgresUserRepository(UserRepository):
    """SQLAlchemy implementation of UserRepository (PostgreSQL or SQLite)."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: UserId) -> User | None:
        stmt = select(users_table).where(users_table.c.id == str(user_id))
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        if not row:
            return None
        assignments = await self._assignments([str(user_id)])
        return _row_to_user(dict(row), assignments[str(user_id)])

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(users_table.c.id).where(users_table.c.email == email.strip().lower())
        result = await self.session.execute(stmt)
        user_id = result.scalar_one_or_none()
        return await self.get(UserId(UUID(user_id))) if user_id else None

    async def save(self, user: User) -> None:
        user_dict = _user_to_dict(user)
        existing = await self.session.execute(
            select(users_table.c.id).where(users_table.c.id == str(user.id))
        )

        if existing.first():
            stmt = update(users_table).where(users_table.c.id == str(user.id)).values(**user_dict)
        else:
            stmt = insert(users_table).values(**user_dict)
        await self.session.execute(stmt)

        await self.session.execute(
            delete(user_companies_table).where(user_companies_table.c.user_id == str(user.id))
        )
        if user.company_ids:
            await self.session.execute(
                insert(user_companies_table),
                [
                    {"user_id": str(user.id), "company_id": str(company_id)}
                    for company_id in sorted(user.company_ids)
                ],
            )
        await self.session.flush()

    async def delete(self, user_id: UserId) -> bool:
        await self.session.execute(
            delete(user_companies_table).where(user_companies_table.c.user_id == str(user_id))
        )
        stmt = delete(users_table).where(users_table.c.id == str(user_id))
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def find(
        self,
        predicate: Predicate,
        roles: Collection[Role],
        limit: int | None = None,
        offset: int = 0,
    ) -> list[User]:
        if not roles:
            return []
        stmt = (
            select(users_table)
            .where(users_table.c.role.in_(sorted(r.value for r in roles)))
            .where(user_clause(predicate))
            .order_by(users_table.c.name, users_table.c.id)
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        rows = [dict(row) for row in result.mappings().all()]
        assignments = await self._assignments([row["id"] for row in rows])
        return [_row_to_user(row, assignments[row["id"]]) for row in rows]

    async def count(self, predicate: Predicate, roles: Collection[Role]) -> int:
        if not roles:
            return 0
        stmt = (
            select(func.count())
            .select_from(users_table)
            .where(users_table.c.role.in_(sorted(r.value for r in roles)))
            .where(user_clause(predicate))
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def _assignments(self, user_ids: list[str]) -> dict[str, frozenset[CompanyId]]:
        by_user: dict[str, set[CompanyId]] = defaultdict(set)
        if user_ids:
            stmt = select(user_companies_table).where(user_companies_table.c.user_id.in_(user_ids))
            result = await self.session.execute(stmt)
            for row in result.mappings().all():
                by_user[row["user_id"]].add(CompanyId(UUID(row["company_id"])))
        return {user_id: frozenset(by_user.get(user_id, ())) for user_id in user_ids}
