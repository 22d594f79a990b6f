from dataclasses import dataclass
from typing import Any, TypeVar, dataclass_transform

from bdp.domain.shared.error import NotFoundError

T = TypeVar("T")


@dataclass_transform()
class _ServiceMeta(type):
    def __new__(mcs, name: str, bases: tuple[type, ...], namespace: dict[str, Any]):
        cls = super().__new__(mcs, name, bases, namespace)
        if any(isinstance(b, mcs) for b in bases):
            return dataclass(cls)
        return cls


class Service(metaclass=_ServiceMeta):
    """Base class for domain services.

    Subclasses are dataclasses whose fields are the ports they read and
    write, so the container builds them from type hints alone.
    """

    @staticmethod
    def _found(entity: T | None, kind: str, key: object) -> T:
        """Return ``entity``, or raise NotFoundError coded ``<kind>_not_found``."""
        if entity is None:
            raise NotFoundError(f"{kind.capitalize()} not found: {key}", code=f"{kind}_not_found")
        return entity
