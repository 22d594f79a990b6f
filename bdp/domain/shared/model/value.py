from typing import Generic, TypeVar
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, RootModel

T = TypeVar("T")


class ValueObject(BaseModel):
    model_config = ConfigDict(frozen=True)


class RootValueObject(RootModel[T], Generic[T]):
    model_config = ConfigDict(frozen=True)


class EntityId(RootValueObject[UUID]):
    """Base for UUID identifiers. Hashable so ids can live in sets and dict keys."""

    @classmethod
    def generate(cls):
        return cls(uuid4())

    @classmethod
    def parse(cls, value: str):
        return cls(UUID(value))

    def __str__(self) -> str:
        return str(self.root)

    def __hash__(self) -> int:
        return hash(self.root)

    def __lt__(self, other: "EntityId") -> bool:
        return self.root < other.root
