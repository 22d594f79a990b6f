"""Queries: read-only requests, scoped to what the principal may see."""

from abc import abstractmethod
from typing import TYPE_CHECKING, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from bdp.domain.shared.handler import HandlerMeta

if TYPE_CHECKING:
    from bdp.domain.shared.authorization.gate import Gate


class Query(BaseModel): ...


class Result(BaseModel): ...


Q = TypeVar("Q", bound=Query)
R = TypeVar("R", bound=Result)


class QueryHandler(Generic[Q, R], metaclass=HandlerMeta):
    """Base class for query handlers. Subclasses are dataclasses gated by ``__auth__``."""

    __auth__: ClassVar["Gate"]

    @abstractmethod
    async def run(self, query: Q) -> R: ...
