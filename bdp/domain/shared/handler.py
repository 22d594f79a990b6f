"""Shared metaclass for command and query handlers.

Concrete handlers are dataclasses whose fields are their dependencies, and
their ``run`` coroutine evaluates the class's ``__auth__`` gate before any
work is done.
"""

from abc import ABCMeta
from dataclasses import dataclass
from typing import Any, dataclass_transform

from bdp.domain.shared.authorization.gate import gated


@dataclass_transform()
class HandlerMeta(ABCMeta):
    def __new__(mcs, name: str, bases: tuple[type, ...], namespace: dict[str, Any]):
        cls = super().__new__(mcs, name, bases, namespace)
        # The abstract bases themselves stay plain classes
        if not any(isinstance(b, mcs) for b in bases):
            return cls

        cls = dataclass(cls)
        run = cls.__dict__.get("run")
        if run is not None:
            cls.run = gated(run)
        return cls
