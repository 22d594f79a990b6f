"""Capabilities and the static capability table.

A capability is a named permission checked against a principal's role.
Each capability maps either to a minimum role (hierarchy comparison) or to
an explicit allow-list of roles. The table is configuration, not derived
data: it is built once and never mutated.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType

from bdp.domain.auth.model.role import Role
from bdp.domain.shared.error import ConfigurationError, UnknownCapabilityError


class Capability(StrEnum):
    """Fixed vocabulary of permission tokens."""

    # Settings & system
    SETTINGS_VIEW = "SETTINGS_VIEW"
    SETTINGS_EDIT = "SETTINGS_EDIT"
    IMPORT_DATA_VIEW = "IMPORT_DATA_VIEW"
    IMPORT_DATA_MANAGE = "IMPORT_DATA_MANAGE"
    TEMPLATES_VIEW = "TEMPLATES_VIEW"
    TEMPLATES_EDIT = "TEMPLATES_EDIT"
    FTP_CONFIGURE = "FTP_CONFIGURE"

    # Profile
    PROFILE_VIEW_OWN = "PROFILE_VIEW_OWN"
    PROFILE_EDIT_OWN = "PROFILE_EDIT_OWN"

    # Documents (portal-wide)
    DOCUMENTS_VIEW = "DOCUMENTS_VIEW"

    # Invoices
    INVOICES_VIEW = "INVOICES_VIEW"
    INVOICES_IMPORT = "INVOICES_IMPORT"
    INVOICES_EDIT = "INVOICES_EDIT"
    INVOICES_DELETE = "INVOICES_DELETE"
    INVOICES_DOWNLOAD = "INVOICES_DOWNLOAD"

    # Credit notes
    CREDIT_NOTES_VIEW = "CREDIT_NOTES_VIEW"
    CREDIT_NOTES_IMPORT = "CREDIT_NOTES_IMPORT"
    CREDIT_NOTES_EDIT = "CREDIT_NOTES_EDIT"
    CREDIT_NOTES_DELETE = "CREDIT_NOTES_DELETE"
    CREDIT_NOTES_DOWNLOAD = "CREDIT_NOTES_DOWNLOAD"

    # Statements
    STATEMENTS_VIEW = "STATEMENTS_VIEW"
    STATEMENTS_IMPORT = "STATEMENTS_IMPORT"
    STATEMENTS_EDIT = "STATEMENTS_EDIT"
    STATEMENTS_DELETE = "STATEMENTS_DELETE"
    STATEMENTS_DOWNLOAD = "STATEMENTS_DOWNLOAD"

    # Unallocated documents
    UNALLOCATED_VIEW = "UNALLOCATED_VIEW"
    UNALLOCATED_EDIT = "UNALLOCATED_EDIT"
    UNALLOCATED_DELETE = "UNALLOCATED_DELETE"
    UNALLOCATED_REALLOCATE = "UNALLOCATED_REALLOCATE"
    UNALLOCATED_DOWNLOAD = "UNALLOCATED_DOWNLOAD"

    # Failed imports
    FAILED_VIEW = "FAILED_VIEW"
    FAILED_DELETE = "FAILED_DELETE"
    FAILED_DOWNLOAD = "FAILED_DOWNLOAD"
    FAILED_REQUEUE = "FAILED_REQUEUE"

    # Companies
    COMPANIES_VIEW = "COMPANIES_VIEW"
    COMPANIES_CREATE = "COMPANIES_CREATE"
    COMPANIES_EDIT = "COMPANIES_EDIT"
    COMPANIES_MANAGE = "COMPANIES_MANAGE"
    COMPANIES_DELETE = "COMPANIES_DELETE"
    COMPANIES_DEACTIVATE = "COMPANIES_DEACTIVATE"
    COMPANIES_VIEW_HIERARCHY = "COMPANIES_VIEW_HIERARCHY"

    # Users
    USERS_VIEW = "USERS_VIEW"
    USERS_CREATE = "USERS_CREATE"
    USERS_EDIT = "USERS_EDIT"
    USERS_MANAGE = "USERS_MANAGE"
    USERS_DELETE = "USERS_DELETE"
    USERS_DEACTIVATE = "USERS_DEACTIVATE"
    USERS_IMPORT = "USERS_IMPORT"

    # Activity logs
    ACTIVITY_LOGS_VIEW = "ACTIVITY_LOGS_VIEW"
    ACTIVITY_LOGS_DELETE = "ACTIVITY_LOGS_DELETE"

    # Document queries
    QUERIES_VIEW = "QUERIES_VIEW"
    QUERIES_CREATE = "QUERIES_CREATE"
    QUERIES_RESPOND = "QUERIES_RESPOND"
    QUERIES_RESOLVE = "QUERIES_RESOLVE"

    # Reports & files
    REPORTS_VIEW = "REPORTS_VIEW"
    FILES_VIEW = "FILES_VIEW"
    FILES_DELETE = "FILES_DELETE"

    @classmethod
    def parse(cls, value: Capability | str) -> Capability:
        """Strictly parse a capability name. Raises UnknownCapabilityError otherwise."""
        if isinstance(value, Capability):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownCapabilityError(f"Unknown capability: {value!r}") from None


@dataclass(frozen=True)
class CapabilityRule:
    """Grants a capability to an allow-list of roles or to a minimum role and above."""

    capability: Capability
    min_role: Role | None = None
    roles: frozenset[Role] | None = None

    def __post_init__(self) -> None:
        if (self.min_role is None) == (self.roles is None):
            raise ConfigurationError(
                f"Rule for {self.capability} needs exactly one of min_role or roles"
            )


def at_least(capability: Capability, role: Role) -> CapabilityRule:
    """Rule granting ``capability`` to ``role`` and every role above it."""
    return CapabilityRule(capability=capability, min_role=role)


def only(capability: Capability, *roles: Role) -> CapabilityRule:
    """Rule granting ``capability`` to exactly the listed roles."""
    return CapabilityRule(capability=capability, roles=frozenset(roles))


class CapabilityTable:
    """Immutable capability → rule mapping. One rule per capability."""

    def __init__(self, rules: Iterable[CapabilityRule]) -> None:
        by_capability: dict[Capability, CapabilityRule] = {}
        for rule in rules:
            if rule.capability in by_capability:
                raise ConfigurationError(f"Duplicate rule for capability {rule.capability}")
            by_capability[rule.capability] = rule
        self._rules: Mapping[Capability, CapabilityRule] = MappingProxyType(by_capability)

    def rule_for(self, capability: Capability | str) -> CapabilityRule:
        """Look up the rule for a capability. Raises UnknownCapabilityError if absent."""
        parsed = Capability.parse(capability)
        rule = self._rules.get(parsed)
        if rule is None:
            raise UnknownCapabilityError(f"No rule configured for capability {parsed}")
        return rule

    def __contains__(self, capability: object) -> bool:
        return capability in self._rules

    def __iter__(self):
        return iter(self._rules.values())

    def with_overrides(self, overrides: Mapping[Capability, Iterable[Role]]) -> CapabilityTable:
        """Return a new table where the given capabilities use explicit allow-lists."""
        rules = dict(self._rules)
        for capability, roles in overrides.items():
            rules[capability] = only(capability, *roles)
        return CapabilityTable(rules.values())

    def validate_coverage(self) -> None:
        """Startup check: every Capability member must have a rule."""
        missing = set(Capability) - set(self._rules)
        if missing:
            raise ConfigurationError(
                f"Capabilities without rules: {sorted(str(c) for c in missing)}"
            )


_STAFF = Role.CREDIT_CONTROLLER  # lowest internal role
_PORTAL = Role.EXTERNAL_USER  # lowest role with portal access

DEFAULT_CAPABILITIES = CapabilityTable(
    [
        # Settings & system (global admin only)
        only(Capability.SETTINGS_VIEW, Role.GLOBAL_ADMIN),
        only(Capability.SETTINGS_EDIT, Role.GLOBAL_ADMIN),
        only(Capability.IMPORT_DATA_VIEW, Role.GLOBAL_ADMIN),
        only(Capability.IMPORT_DATA_MANAGE, Role.GLOBAL_ADMIN),
        only(Capability.TEMPLATES_VIEW, Role.GLOBAL_ADMIN),
        only(Capability.TEMPLATES_EDIT, Role.GLOBAL_ADMIN),
        only(Capability.FTP_CONFIGURE, Role.GLOBAL_ADMIN),
        # Profile
        at_least(Capability.PROFILE_VIEW_OWN, _PORTAL),
        at_least(Capability.PROFILE_EDIT_OWN, _PORTAL),
        # Documents
        at_least(Capability.DOCUMENTS_VIEW, _PORTAL),
        at_least(Capability.INVOICES_VIEW, _PORTAL),
        only(Capability.INVOICES_IMPORT, Role.GLOBAL_ADMIN, Role.ADMINISTRATOR),
        only(Capability.INVOICES_EDIT, Role.GLOBAL_ADMIN, Role.ADMINISTRATOR),
        only(Capability.INVOICES_DELETE, Role.GLOBAL_ADMIN, Role.ADMINISTRATOR),
        at_least(Capability.INVOICES_DOWNLOAD, _PORTAL),
        at_least(Capability.CREDIT_NOTES_VIEW, _PORTAL),
        only(Capability.CREDIT_NOTES_IMPORT, Role.GLOBAL_ADMIN, Role.ADMINISTRATOR),
        only(Capability.CREDIT_NOTES_EDIT, Role.GLOBAL_ADMIN, Role.ADMINISTRATOR),
        only(Capability.CREDIT_NOTES_DELETE, Role.GLOBAL_ADMIN, Role.ADMINISTRATOR),
        at_least(Capability.CREDIT_NOTES_DOWNLOAD, _PORTAL),
        only(Capability.STATEMENTS_VIEW, Role.GLOBAL_ADMIN),
        only(Capability.STATEMENTS_IMPORT, Role.GLOBAL_ADMIN),
        only(Capability.STATEMENTS_EDIT, Role.GLOBAL_ADMIN),
        only(Capability.STATEMENTS_DELETE, Role.GLOBAL_ADMIN),
        only(Capability.STATEMENTS_DOWNLOAD, Role.GLOBAL_ADMIN),
        # Unallocated documents
        at_least(Capability.UNALLOCATED_VIEW, Role.MANAGER),
        only(Capability.UNALLOCATED_EDIT, Role.GLOBAL_ADMIN, Role.ADMINISTRATOR),
        at_least(Capability.UNALLOCATED_DELETE, Role.MANAGER),
        at_least(Capability.UNALLOCATED_REALLOCATE, Role.CREDIT_SENIOR),
        at_least(Capability.UNALLOCATED_DOWNLOAD, _STAFF),
        # Failed imports
        at_least(Capability.FAILED_VIEW, Role.MANAGER),
        at_least(Capability.FAILED_DELETE, Role.MANAGER),
        at_least(Capability.FAILED_DOWNLOAD, _STAFF),
        at_least(Capability.FAILED_REQUEUE, Role.CREDIT_SENIOR),
        # Companies
        at_least(Capability.COMPANIES_VIEW, _STAFF),
        at_least(Capability.COMPANIES_CREATE, _STAFF),
        at_least(Capability.COMPANIES_EDIT, _STAFF),
        at_least(Capability.COMPANIES_MANAGE, Role.ADMINISTRATOR),
        at_least(Capability.COMPANIES_DELETE, Role.MANAGER),
        at_least(Capability.COMPANIES_DEACTIVATE, Role.MANAGER),
        at_least(Capability.COMPANIES_VIEW_HIERARCHY, _STAFF),
        # Users
        only(Capability.USERS_VIEW, Role.GLOBAL_ADMIN, Role.ADMINISTRATOR, Role.MANAGER),
        only(Capability.USERS_CREATE, Role.GLOBAL_ADMIN, Role.ADMINISTRATOR, Role.MANAGER),
        only(Capability.USERS_EDIT, Role.GLOBAL_ADMIN, Role.ADMINISTRATOR, Role.MANAGER),
        only(Capability.USERS_MANAGE, Role.GLOBAL_ADMIN, Role.ADMINISTRATOR, Role.MANAGER),
        only(Capability.USERS_DELETE, Role.GLOBAL_ADMIN, Role.ADMINISTRATOR),
        only(Capability.USERS_DEACTIVATE, Role.GLOBAL_ADMIN, Role.ADMINISTRATOR),
        only(Capability.USERS_IMPORT, Role.GLOBAL_ADMIN),
        # Activity logs
        only(Capability.ACTIVITY_LOGS_VIEW, Role.GLOBAL_ADMIN, Role.ADMINISTRATOR),
        only(Capability.ACTIVITY_LOGS_DELETE, Role.GLOBAL_ADMIN, Role.ADMINISTRATOR),
        # Document queries
        only(Capability.QUERIES_VIEW, Role.GLOBAL_ADMIN),
        only(Capability.QUERIES_CREATE, Role.GLOBAL_ADMIN),
        only(Capability.QUERIES_RESPOND, Role.GLOBAL_ADMIN),
        only(Capability.QUERIES_RESOLVE, Role.GLOBAL_ADMIN),
        # Reports & files
        only(Capability.REPORTS_VIEW, Role.GLOBAL_ADMIN),
        only(Capability.FILES_VIEW, Role.GLOBAL_ADMIN),
        only(Capability.FILES_DELETE, Role.GLOBAL_ADMIN),
    ]
)
