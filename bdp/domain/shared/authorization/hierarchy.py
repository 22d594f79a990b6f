"""RoleHierarchy: total order over roles and the predicates derived from it.

The hierarchy is an immutable value built once at startup and passed into
every component that needs it, so tests can substitute an alternate one
without touching process-wide state.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from bdp.domain.auth.model.role import Role, default_level
from bdp.domain.shared.authorization.capability import (
    DEFAULT_CAPABILITIES,
    Capability,
    CapabilityTable,
)
from bdp.domain.shared.error import ConfigurationError, UnknownRoleError


@dataclass(frozen=True)
class RoleHierarchy:
    """Role levels, capability table and the role groups the engine relies on.

    Attributes:
        levels: Integer level per role; higher manages lower.
        capabilities: Static capability table.
        superuser: Role that manages every role, including its own peers.
        unrestricted_roles: Roles whose principals see every company.
        portal_roles: Roles allowed to sign in to the portal at all.
    """

    levels: Mapping[Role, int]
    capabilities: CapabilityTable = DEFAULT_CAPABILITIES
    superuser: Role = Role.GLOBAL_ADMIN
    unrestricted_roles: frozenset[Role] = field(
        default=frozenset({Role.GLOBAL_ADMIN, Role.ADMINISTRATOR, Role.MANAGER})
    )
    portal_roles: frozenset[Role] = field(
        default=frozenset(set(Role) - {Role.NOTIFICATION_CONTACT})
    )

    def __post_init__(self) -> None:
        # Freeze the mapping so the hierarchy stays immutable after construction
        object.__setattr__(self, "levels", MappingProxyType(dict(self.levels)))

    @classmethod
    def default(cls) -> RoleHierarchy:
        return cls(levels={role: default_level(role) for role in Role})

    # -------------------------------------------------------------------------
    # Levels
    # -------------------------------------------------------------------------

    def level(self, role: Role | str) -> int:
        """Integer level of a role. Raises UnknownRoleError for anything unknown."""
        parsed = Role.parse(role)
        try:
            return self.levels[parsed]
        except KeyError:
            raise UnknownRoleError(f"Role {parsed} has no level in this hierarchy") from None

    def is_at_least(self, role: Role | str, minimum: Role | str) -> bool:
        return self.level(role) >= self.level(minimum)

    # -------------------------------------------------------------------------
    # Management
    # -------------------------------------------------------------------------

    def can_manage(self, acting: Role | str, target: Role | str) -> bool:
        """Whether ``acting`` may create, edit or delete users holding ``target``.

        Strictly greater level is required; the superuser is the one exception
        and manages everyone, other superusers included.
        """
        acting_level = self.level(acting)
        target_level = self.level(target)
        if Role.parse(acting) == self.superuser:
            return True
        return acting_level > target_level

    def manageable_roles(self, acting: Role | str) -> frozenset[Role]:
        acting_level = self.level(acting)
        if Role.parse(acting) == self.superuser:
            return frozenset(self.levels)
        return frozenset(r for r, lvl in self.levels.items() if lvl < acting_level)

    # -------------------------------------------------------------------------
    # Capabilities and role groups
    # -------------------------------------------------------------------------

    def has_capability(self, role: Role | str, capability: Capability | str) -> bool:
        """Evaluate the capability table for a role.

        Raises UnknownCapabilityError for a capability with no rule and
        UnknownRoleError for an unknown role.
        """
        rule = self.capabilities.rule_for(capability)
        self.level(role)
        if rule.roles is not None:
            return Role.parse(role) in rule.roles
        if rule.min_role is None:
            raise ConfigurationError(f"Capability {rule.capability} has no allowed roles")
        return self.is_at_least(role, rule.min_role)

    def is_unrestricted(self, role: Role | str) -> bool:
        self.level(role)
        return Role.parse(role) in self.unrestricted_roles

    def has_portal_access(self, role: Role | str) -> bool:
        """Whether principals holding ``role`` may sign in and use the portal at all."""
        self.level(role)
        return Role.parse(role) in self.portal_roles

    def label(self, role: Role | str) -> str:
        return Role.parse(role).label

    # -------------------------------------------------------------------------
    # Startup validation
    # -------------------------------------------------------------------------

    def validate(self) -> None:
        """Check the hierarchy is a total order over every role and the table is complete."""
        missing = set(Role) - set(self.levels)
        if missing:
            raise ConfigurationError(f"Roles without a level: {sorted(missing)}")
        if len(set(self.levels.values())) != len(self.levels):
            raise ConfigurationError("Role levels must be distinct to form a total order")
        for group_name in ("unrestricted_roles", "portal_roles"):
            unknown = set(getattr(self, group_name)) - set(self.levels)
            if unknown:
                raise ConfigurationError(f"{group_name} contains roles without a level: {unknown}")
        self.capabilities.validate_coverage()

    def with_options(
        self,
        unrestricted_roles: Iterable[Role] | None = None,
        capability_overrides: Mapping[Capability, Iterable[Role]] | None = None,
    ) -> RoleHierarchy:
        """Copy of this hierarchy with configured role groups or capability allow-lists."""
        return RoleHierarchy(
            levels=self.levels,
            capabilities=(
                self.capabilities.with_overrides(capability_overrides)
                if capability_overrides
                else self.capabilities
            ),
            superuser=self.superuser,
            unrestricted_roles=(
                frozenset(unrestricted_roles)
                if unrestricted_roles is not None
                else self.unrestricted_roles
            ),
            portal_roles=self.portal_roles,
        )


DEFAULT_HIERARCHY = RoleHierarchy.default()
