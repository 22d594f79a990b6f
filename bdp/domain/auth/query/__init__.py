"""Auth domain queries."""

from .list_users import ListUsers, ListUsersHandler, UserList, UserSummary

__all__ = ["ListUsers", "ListUsersHandler", "UserList", "UserSummary"]
