"""Role enumeration for the portal.

Seven roles, highest to lowest. The numeric levels live in
``RoleHierarchy``; ``default_level`` is the built-in assignment.
"""

from enum import StrEnum
from typing import assert_never

from bdp.domain.shared.error import UnknownRoleError


class Role(StrEnum):
    GLOBAL_ADMIN = "global_admin"
    ADMINISTRATOR = "administrator"
    MANAGER = "manager"
    CREDIT_SENIOR = "credit_senior"
    CREDIT_CONTROLLER = "credit_controller"
    EXTERNAL_USER = "external_user"
    NOTIFICATION_CONTACT = "notification_contact"

    @classmethod
    def parse(cls, value: "Role | str") -> "Role":
        """Strictly parse a role identifier. Raises UnknownRoleError otherwise."""
        if isinstance(value, Role):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownRoleError(f"Unknown role: {value!r}") from None

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS: dict[Role, str] = {
    Role.GLOBAL_ADMIN: "Global Administrator",
    Role.ADMINISTRATOR: "Administrator",
    Role.MANAGER: "Manager",
    Role.CREDIT_SENIOR: "Credit Senior",
    Role.CREDIT_CONTROLLER: "Credit Controller",
    Role.EXTERNAL_USER: "External User",
    Role.NOTIFICATION_CONTACT: "Notification Contact",
}


def default_level(role: Role) -> int:
    """Built-in level of each role (7 = highest)."""
    match role:
        case Role.GLOBAL_ADMIN:
            return 7
        case Role.ADMINISTRATOR:
            return 6
        case Role.MANAGER:
            return 5
        case Role.CREDIT_SENIOR:
            return 4
        case Role.CREDIT_CONTROLLER:
            return 3
        case Role.EXTERNAL_USER:
            return 2
        case Role.NOTIFICATION_CONTACT:
            return 1
        case _:
            assert_never(role)
