"""Handler-level authorization gates: public() and requires(*capabilities)."""

from __future__ import annotations

import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from functools import wraps
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from bdp.domain.shared.authorization.capability import Capability

logger = logging.getLogger("bdp.authz")

_Run = Callable[..., Coroutine[Any, Any, Any]]


class Gate:
    """Base for handler-level authorization gates.

    Every CommandHandler/QueryHandler must declare ``__auth__: ClassVar[Gate]``.
    Subclasses define specific gate behaviors (public access, capability checks).
    """


@dataclass(frozen=True)
class Public(Gate):
    """No authentication required."""


@dataclass(frozen=True)
class Requires(Gate):
    """Gate that requires the principal's role to grant every listed capability."""

    capabilities: tuple["Capability", ...]


_PUBLIC = Public()


def public() -> Public:
    """Mark a handler as publicly accessible (no auth required)."""
    return _PUBLIC


def requires(*capabilities: "Capability") -> Requires:
    """Mark a handler as requiring all of the given capabilities."""
    if not capabilities:
        raise ValueError("requires() needs at least one capability")
    return Requires(capabilities=tuple(capabilities))


def enforce_gate(handler: object) -> None:
    """Evaluate a handler instance's ``__auth__`` gate.

    The handler must expose ``principal`` and ``permission_gate`` fields
    unless its gate is ``Public``.
    """
    from bdp.domain.auth.model.principal import Principal
    from bdp.domain.shared.error import AuthorizationError, ConfigurationError

    name = type(handler).__name__
    auth_gate = getattr(type(handler), "__auth__", None)

    if not isinstance(auth_gate, Gate):
        raise ConfigurationError(f"Handler {name} has no __auth__ declaration")

    if isinstance(auth_gate, Public):
        return

    if isinstance(auth_gate, Requires):
        principal = getattr(handler, "principal", None)
        if not isinstance(principal, Principal):
            raise AuthorizationError("Authentication required", code="missing_token")

        permission_gate = getattr(handler, "permission_gate", None)
        if permission_gate is None:
            raise ConfigurationError(f"Handler {name} has no permission_gate to evaluate __auth__")

        logger.debug(
            "Auth check: handler=%s, required=%s, role=%s, user_id=%s",
            name,
            ",".join(auth_gate.capabilities),
            principal.role,
            principal.user_id,
        )
        for capability in auth_gate.capabilities:
            permission_gate.require(principal, capability)
        return

    raise ConfigurationError(  # pragma: no cover
        f"Handler {name} has unhandled __auth__ type: {type(auth_gate).__name__}"
    )


def gated(run: _Run) -> _Run:
    """Wrap a handler's ``run`` so its class gate is evaluated before any work."""

    @wraps(run)
    async def gated_run(self: Any, request: Any) -> Any:
        enforce_gate(self)
        return await run(self, request)

    return gated_run
