"""PermissionGate: request-time capability decisions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from bdp.domain.shared.authorization.capability import Capability
from bdp.domain.shared.authorization.hierarchy import RoleHierarchy
from bdp.domain.shared.error import (
    InsufficientRoleError,
    UnknownCapabilityError,
)

if TYPE_CHECKING:
    from bdp.domain.auth.model.principal import Principal

logger = logging.getLogger(__name__)


class DenyReason(StrEnum):
    INSUFFICIENT_ROLE = "insufficient_role"
    UNKNOWN_CAPABILITY = "unknown_capability"


@dataclass(frozen=True)
class Allow:
    capability: Capability

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Deny:
    capability: str
    reason: DenyReason

    def __bool__(self) -> bool:
        return False


Decision = Allow | Deny


class PermissionGate:
    """Decides whether a principal's role grants a capability.

    ``check`` returns a decision value and does not raise for a recognised
    role. ``require`` is the raising form used by handlers and services.
    """

    def __init__(self, hierarchy: RoleHierarchy) -> None:
        self._hierarchy = hierarchy

    @property
    def hierarchy(self) -> RoleHierarchy:
        return self._hierarchy

    def check(self, principal: "Principal", capability: Capability | str) -> Decision:
        try:
            allowed = self._hierarchy.has_capability(principal.role, capability)
        except UnknownCapabilityError:
            logger.error(
                "Unknown capability requested: principal=%s capability=%s",
                principal.user_id,
                capability,
            )
            return Deny(capability=str(capability), reason=DenyReason.UNKNOWN_CAPABILITY)

        parsed = Capability.parse(capability)
        if allowed:
            logger.debug(
                "Capability allowed: principal=%s role=%s capability=%s",
                principal.user_id,
                principal.role,
                parsed,
            )
            return Allow(capability=parsed)

        logger.info(
            "Capability denied: principal=%s role=%s capability=%s",
            principal.user_id,
            principal.role,
            parsed,
        )
        return Deny(capability=str(parsed), reason=DenyReason.INSUFFICIENT_ROLE)

    def allows(self, principal: "Principal", capability: Capability | str) -> bool:
        return bool(self.check(principal, capability))

    def require(self, principal: "Principal", capability: Capability | str) -> None:
        """Raise unless the principal holds ``capability``.

        Raises:
            InsufficientRoleError: the role does not grant the capability.
            UnknownCapabilityError: the capability has no rule (never treated as allowed).
        """
        decision = self.check(principal, capability)
        if isinstance(decision, Allow):
            return
        if decision.reason is DenyReason.UNKNOWN_CAPABILITY:
            raise UnknownCapabilityError(f"Unknown capability: {capability!r}")
        raise InsufficientRoleError(
            f"Access denied: {principal.role} lacks {decision.capability}",
        )
