import logging
from typing import AsyncIterable

from dishka import provide
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from bdp.config import Config
from bdp.domain.auth.port.repository import UserRepository
from bdp.domain.company.port.repository import CompanyReader, CompanyRepository
from bdp.domain.document.port.repository import DocumentRepository
from bdp.domain.shared.error import InfrastructureError
from bdp.infrastructure.persistence.database import create_db_engine, create_session_factory
from bdp.infrastructure.persistence.repository.company import PostgresCompanyRepository
from bdp.infrastructure.persistence.repository.document import PostgresDocumentRepository
from bdp.infrastructure.persistence.repository.user import PostgresUserRepository
from bdp.util.di.base import Provider
from bdp.util.di.scope import Scope

logger = logging.getLogger(__name__)


class PersistenceProvider(Provider):
    @provide(scope=Scope.APP)
    async def get_engine(self, config: Config) -> AsyncIterable[AsyncEngine]:
        engine = create_db_engine(config.database)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(self, engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    @provide(scope=Scope.UOW)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterable[AsyncSession]:
        """One session per unit of work, committed when the unit of work closes."""
        async with session_factory() as session:
            yield session
            try:
                await session.commit()
            except SQLAlchemyError as e:
                logger.error("Commit failed: %s", e)
                raise InfrastructureError("Could not save changes") from e

    # UOW-scoped repositories
    company_repo = provide(
        PostgresCompanyRepository,
        scope=Scope.UOW,
        provides=CompanyRepository,
    )
    user_repo = provide(PostgresUserRepository, scope=Scope.UOW, provides=UserRepository)
    document_repo = provide(
        PostgresDocumentRepository,
        scope=Scope.UOW,
        provides=DocumentRepository,
    )

    @provide(scope=Scope.UOW)
    def get_company_reader(self, company_repo: CompanyRepository) -> CompanyReader:
        return company_repo
