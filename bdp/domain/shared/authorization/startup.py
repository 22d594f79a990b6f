"""Startup validation for the role hierarchy and handler authorization declarations."""

import logging
from collections.abc import Iterable

from bdp.domain.shared.authorization.capability import Capability
from bdp.domain.shared.authorization.gate import Gate, Requires
from bdp.domain.shared.authorization.hierarchy import RoleHierarchy
from bdp.domain.shared.command import CommandHandler
from bdp.domain.shared.error import ConfigurationError
from bdp.domain.shared.query import QueryHandler

logger = logging.getLogger(__name__)


def _all_subclasses(cls: type) -> list[type]:
    found: list[type] = []
    for sub in cls.__subclasses__():
        found.append(sub)
        found.extend(_all_subclasses(sub))
    return found


def _check_handler_class(handler_cls: type, hierarchy: RoleHierarchy) -> None:
    """Check a single handler class for a usable __auth__ declaration.

    Raises ConfigurationError if the gate is missing or names a capability
    the hierarchy has no rule for.
    """
    gate = getattr(handler_cls, "__auth__", None)
    if not isinstance(gate, Gate):
        raise ConfigurationError(f"Handler {handler_cls.__name__} has no __auth__ declaration")

    if isinstance(gate, Requires):
        for capability in gate.capabilities:
            if not isinstance(capability, Capability) or capability not in hierarchy.capabilities:
                raise ConfigurationError(
                    f"Handler {handler_cls.__name__} requires unknown capability {capability!r}"
                )


def validate_all_handlers(
    hierarchy: RoleHierarchy, handlers: Iterable[type] | None = None
) -> None:
    """Check every handler class, or every registered subclass when none are given.

    Raises ConfigurationError listing every handler with a missing or broken
    __auth__ declaration.
    """
    violations: list[str] = []

    if handlers is None:
        handlers = _all_subclasses(CommandHandler) + _all_subclasses(QueryHandler)

    for handler_cls in handlers:
        try:
            _check_handler_class(handler_cls, hierarchy)
        except ConfigurationError as e:
            violations.append(str(e))

    if violations:
        raise ConfigurationError(
            f"Authorization validation failed for {len(violations)} handler(s):\n"
            + "\n".join(f"  - {v}" for v in violations)
        )

    logger.info("Authorization startup validation passed for all handlers")


def validate_access_model(
    hierarchy: RoleHierarchy, handlers: Iterable[type] | None = None
) -> None:
    """Validate the role hierarchy and every handler gate against it."""
    hierarchy.validate()
    validate_all_handlers(hierarchy, handlers)
