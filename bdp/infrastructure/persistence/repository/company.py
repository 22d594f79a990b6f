"""SQLAlchemy repository for companies."""

from uuid import UUID

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bdp.domain.auth.model.value import UserId
from bdp.domain.company.model.company import Company
from bdp.domain.company.model.value import CompanyId, CompanyType, NotificationPreferences
from bdp.domain.company.port.repository import CompanyRepository
from bdp.domain.shared.authorization.document_filter import Predicate
from bdp.infrastructure.persistence.scoping import to_clause
from bdp.infrastructure.persistence.tables import companies_table, user_companies_table


def _row_to_company(row: dict) -> Company:
    """Convert a database row to a Company model."""
    return Company(
        id=CompanyId(UUID(row["id"])),
        name=row["name"],
        type=CompanyType(row["type"]),
        parent_id=CompanyId(UUID(row["parent_id"])) if row["parent_id"] else None,
        reference_no=row["reference_no"],
        code=row["code"],
        email=row["email"],
        primary_contact_id=(
            UserId(UUID(row["primary_contact_id"])) if row["primary_contact_id"] else None
        ),
        notifications=NotificationPreferences.model_validate(row["notifications"] or {}),
        is_active=row["is_active"],
        created_by=UserId(UUID(row["created_by"])) if row["created_by"] else None,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _company_to_dict(company: Company) -> dict:
    """Convert a Company model to a database row dict."""
    return {
        "id": str(company.id),
        "name": company.name,
        "type": company.type.value,
        "parent_id": str(company.parent_id) if company.parent_id else None,
        "reference_no": company.reference_no,
        "code": company.code,
        "email": company.email,
        "primary_contact_id": (
            str(company.primary_contact_id) if company.primary_contact_id else None
        ),
        "notifications": company.notifications.model_dump(),
        "is_active": company.is_active,
        "created_by": str(company.created_by) if company.created_by else None,
        "created_at": company.created_at,
        "updated_at": company.updated_at,
    }


class PostgresCompanyRepository(CompanyRepository):
    """SQLAlchemy implementation of CompanyRepository (PostgreSQL or SQLite)."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, company_id: CompanyId) -> Company | None:
        stmt = select(companies_table).where(companies_table.c.id == str(company_id))
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return _row_to_company(dict(row)) if row else None

    async def get_children(self, parent_id: CompanyId) -> list[Company]:
        stmt = (
            select(companies_table)
            .where(companies_table.c.parent_id == str(parent_id))
            .order_by(companies_table.c.name, companies_table.c.id)
        )
        result = await self.session.execute(stmt)
        return [_row_to_company(dict(row)) for row in result.mappings().all()]

    async def list_all(self) -> list[Company]:
        stmt = select(companies_table).order_by(companies_table.c.name, companies_table.c.id)
        result = await self.session.execute(stmt)
        return [_row_to_company(dict(row)) for row in result.mappings().all()]

    async def find(self, predicate: Predicate, include_inactive: bool = True) -> list[Company]:
        stmt = select(companies_table).where(to_clause(predicate, companies_table.c.id))
        if not include_inactive:
            stmt = stmt.where(companies_table.c.is_active.is_(True))
        stmt = stmt.order_by(companies_table.c.name, companies_table.c.id)
        result = await self.session.execute(stmt)
        return [_row_to_company(dict(row)) for row in result.mappings().all()]

    async def count(self) -> int:
        stmt = select(func.count()).select_from(companies_table)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def get_by_reference_no(self, reference_no: int) -> Company | None:
        stmt = select(companies_table).where(companies_table.c.reference_no == reference_no)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return _row_to_company(dict(row)) if row else None

    async def save(self, company: Company) -> None:
        company_dict = _company_to_dict(company)
        existing = await self.session.execute(
            select(companies_table.c.id).where(companies_table.c.id == str(company.id))
        )

        if existing.first():
            stmt = (
                update(companies_table)
                .where(companies_table.c.id == str(company.id))
                .values(**company_dict)
            )
        else:
            stmt = insert(companies_table).values(**company_dict)

        await self.session.execute(stmt)
        await self.session.flush()

    async def delete(self, company_id: CompanyId) -> bool:
        # Assignment rows go with the company, foreign keys enforced or not
        await self.session.execute(
            delete(user_companies_table).where(
                user_companies_table.c.company_id == str(company_id)
            )
        )
        stmt = delete(companies_table).where(companies_table.c.id == str(company_id))
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0
