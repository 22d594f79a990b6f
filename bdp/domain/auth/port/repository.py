"""Repository port for User persistence."""

from abc import abstractmethod
from collections.abc import Collection
from typing import Protocol

from bdp.domain.auth.model.role import Role
from bdp.domain.auth.model.user import User
from bdp.domain.auth.model.value import UserId
from bdp.domain.shared.authorization.document_filter import Predicate
from bdp.domain.shared.port import Port


class UserRepository(Port, Protocol):
    """Repository for User aggregate persistence."""

    @abstractmethod
    async def get(self, user_id: UserId) -> User | None:
        """Get a user by id, or None if it does not exist."""
        ...

    @abstractmethod
    async def get_by_email(self, email: str) -> User | None:
        """Get a user by (normalised) email address."""
        ...

    @abstractmethod
    async def save(self, user: User) -> None:
        """Insert or update a user and replace its company assignments."""
        ...

    @abstractmethod
    async def delete(self, user_id: UserId) -> bool:
        """Hard-delete a user. Returns True if deleted, False if not found."""
        ...

    @abstractmethod
    async def find(
        self,
        predicate: Predicate,
        roles: Collection[Role],
        limit: int | None = None,
        offset: int = 0,
    ) -> list[User]:
        """List users holding one of ``roles`` whose assignments satisfy ``predicate``.

        A user matches a company predicate when any assigned company matches.
        Results are ordered by name, then id.
        """
        ...

    @abstractmethod
    async def count(self, predicate: Predicate, roles: Collection[Role]) -> int:
        """Count users under the same rules as ``find``."""
        ...
