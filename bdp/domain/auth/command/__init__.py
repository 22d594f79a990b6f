"""Auth domain commands."""

from .assign_companies import (
    AssignUserCompanies,
    AssignUserCompaniesHandler,
    UserCompaniesAssigned,
)
from .change_role import ChangeUserRole, ChangeUserRoleHandler, UserRoleChanged
from .create_user import CreateUser, CreateUserHandler, UserCreated
from .delete_user import DeleteUser, DeleteUserHandler, UserDeleted
from .set_status import SetUserStatus, SetUserStatusHandler, UserStatusSet

__all__ = [
    "AssignUserCompanies",
    "AssignUserCompaniesHandler",
    "ChangeUserRole",
    "ChangeUserRoleHandler",
    "CreateUser",
    "CreateUserHandler",
    "DeleteUser",
    "DeleteUserHandler",
    "SetUserStatus",
    "SetUserStatusHandler",
    "UserCompaniesAssigned",
    "UserCreated",
    "UserDeleted",
    "UserRoleChanged",
    "UserStatusSet",
]
