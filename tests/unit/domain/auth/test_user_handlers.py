"""Tests for the user administration command and query handlers."""

import pytest

from bdp.domain.auth.command import (
    AssignUserCompanies,
    AssignUserCompaniesHandler,
    ChangeUserRole,
    ChangeUserRoleHandler,
    CreateUser,
    CreateUserHandler,
    DeleteUser,
    DeleteUserHandler,
    SetUserStatus,
    SetUserStatusHandler,
)
from bdp.domain.auth.model.principal import Principal
from bdp.domain.auth.model.role import Role
from bdp.domain.auth.model.user import User
from bdp.domain.auth.model.value import UserId
from bdp.domain.auth.query.list_users import ListUsers, ListUsersHandler
from bdp.domain.auth.service.user import UserService
from bdp.domain.company.model.company import Company
from bdp.domain.company.model.tree import CompanyTree
from bdp.domain.shared.authorization.document_filter import DocumentFilterBuilder
from bdp.domain.shared.authorization.hierarchy import DEFAULT_HIERARCHY
from bdp.domain.shared.authorization.permission import PermissionGate
from bdp.domain.shared.authorization.scope import AccessScopeResolver
from bdp.domain.shared.error import InsufficientRoleError


def _make_principal(role: Role, *companies: Company) -> Principal:
    return Principal(
        user_id=UserId.generate(),
        role=role,
        assigned_company_ids=frozenset(c.id for c in companies),
    )


@pytest.fixture
def gate() -> PermissionGate:
    return PermissionGate(DEFAULT_HIERARCHY)


@pytest.fixture
def user_service(user_repo, company_repo) -> UserService:
    return UserService(
        _user_repo=user_repo,
        _company_reader=company_repo,
        _hierarchy=DEFAULT_HIERARCHY,
    )


class TestCreateUserHandler:
    @pytest.mark.asyncio
    async def test_manager_creates_user(
        self, gate: PermissionGate, user_service: UserService, user_repo
    ) -> None:
        handler = CreateUserHandler(
            principal=_make_principal(Role.MANAGER),
            permission_gate=gate,
            user_service=user_service,
        )

        result = await handler.run(
            CreateUser(email="new@example.test", name="New", role=Role.EXTERNAL_USER)
        )

        assert result.role is Role.EXTERNAL_USER
        assert result.id in user_repo.users

    @pytest.mark.asyncio
    async def test_credit_controller_is_denied_before_any_write(
        self, gate: PermissionGate, user_service: UserService, user_repo
    ) -> None:
        handler = CreateUserHandler(
            principal=_make_principal(Role.CREDIT_CONTROLLER),
            permission_gate=gate,
            user_service=user_service,
        )

        with pytest.raises(InsufficientRoleError):
            await handler.run(
                CreateUser(email="new@example.test", name="New", role=Role.NOTIFICATION_CONTACT)
            )
        assert user_repo.users == {}


class TestChangeUserRoleHandler:
    @pytest.mark.asyncio
    async def test_two_step_escalation_is_blocked(
        self, gate: PermissionGate, user_service: UserService, user_repo
    ) -> None:
        target = User.create(email="boss@example.test", name="Boss", role=Role.ADMINISTRATOR)
        await user_repo.save(target)
        handler = ChangeUserRoleHandler(
            principal=_make_principal(Role.MANAGER),
            permission_gate=gate,
            user_service=user_service,
        )

        with pytest.raises(InsufficientRoleError):
            await handler.run(ChangeUserRole(user_id=target.id, role=Role.CREDIT_SENIOR))

    @pytest.mark.asyncio
    async def test_role_change(
        self, gate: PermissionGate, user_service: UserService, user_repo
    ) -> None:
        target = User.create(email="sam@example.test", name="Sam", role=Role.EXTERNAL_USER)
        await user_repo.save(target)
        handler = ChangeUserRoleHandler(
            principal=_make_principal(Role.ADMINISTRATOR),
            permission_gate=gate,
            user_service=user_service,
        )

        result = await handler.run(ChangeUserRole(user_id=target.id, role=Role.MANAGER))

        assert result.role is Role.MANAGER


class TestAssignUserCompaniesHandler:
    @pytest.mark.asyncio
    async def test_assignments_are_returned_sorted(
        self,
        gate: PermissionGate,
        user_service: UserService,
        user_repo,
        acme: dict[str, Company],
    ) -> None:
        target = User.create(email="sam@example.test", name="Sam", role=Role.EXTERNAL_USER)
        await user_repo.save(target)
        handler = AssignUserCompaniesHandler(
            principal=_make_principal(Role.MANAGER),
            permission_gate=gate,
            user_service=user_service,
        )

        result = await handler.run(
            AssignUserCompanies(user_id=target.id, company_ids=[acme["G"].id, acme["A"].id])
        )

        assert result.company_ids == sorted([acme["G"].id, acme["A"].id])


class TestStatusAndDeleteHandlers:
    @pytest.mark.asyncio
    async def test_manager_cannot_deactivate(
        self, gate: PermissionGate, user_service: UserService, user_repo
    ) -> None:
        target = User.create(email="sam@example.test", name="Sam", role=Role.EXTERNAL_USER)
        await user_repo.save(target)
        handler = SetUserStatusHandler(
            principal=_make_principal(Role.MANAGER),
            permission_gate=gate,
            user_service=user_service,
        )

        with pytest.raises(InsufficientRoleError):
            await handler.run(SetUserStatus(user_id=target.id, is_active=False))

    @pytest.mark.asyncio
    async def test_administrator_deactivates(
        self, gate: PermissionGate, user_service: UserService, user_repo
    ) -> None:
        target = User.create(email="sam@example.test", name="Sam", role=Role.EXTERNAL_USER)
        await user_repo.save(target)
        handler = SetUserStatusHandler(
            principal=_make_principal(Role.ADMINISTRATOR),
            permission_gate=gate,
            user_service=user_service,
        )

        result = await handler.run(SetUserStatus(user_id=target.id, is_active=False))

        assert result.is_active is False

    @pytest.mark.asyncio
    async def test_administrator_deletes(
        self, gate: PermissionGate, user_service: UserService, user_repo
    ) -> None:
        target = User.create(email="sam@example.test", name="Sam", role=Role.CREDIT_SENIOR)
        await user_repo.save(target)
        handler = DeleteUserHandler(
            principal=_make_principal(Role.ADMINISTRATOR),
            permission_gate=gate,
            user_service=user_service,
        )

        result = await handler.run(DeleteUser(user_id=target.id))

        assert result.id == target.id
        assert target.id not in user_repo.users


class TestListUsersHandler:
    def _handler(
        self,
        principal: Principal,
        user_service: UserService,
        acme: dict[str, Company],
    ) -> ListUsersHandler:
        return ListUsersHandler(
            principal=principal,
            permission_gate=PermissionGate(DEFAULT_HIERARCHY),
            scope_resolver=AccessScopeResolver(
                DEFAULT_HIERARCHY, CompanyTree.from_companies(acme.values())
            ),
            filter_builder=DocumentFilterBuilder(),
            user_service=user_service,
        )

    @pytest.mark.asyncio
    async def test_manager_sees_manageable_users(
        self, user_service: UserService, user_repo, acme: dict[str, Company]
    ) -> None:
        for role in Role:
            await user_repo.save(
                User.create(email=f"{role.value}@example.test", name=role.label, role=role)
            )
        handler = self._handler(_make_principal(Role.MANAGER), user_service, acme)

        result = await handler.run(ListUsers())

        assert result.total == 4
        assert {item.role for item in result.items} == DEFAULT_HIERARCHY.manageable_roles(
            Role.MANAGER
        )
        assert all(item.role_label == item.role.label for item in result.items)

    @pytest.mark.asyncio
    async def test_pagination(
        self, user_service: UserService, user_repo, acme: dict[str, Company]
    ) -> None:
        for i in range(3):
            await user_repo.save(
                User.create(email=f"u{i}@example.test", name=f"User {i}", role=Role.EXTERNAL_USER)
            )
        handler = self._handler(_make_principal(Role.ADMINISTRATOR), user_service, acme)

        result = await handler.run(ListUsers(limit=2, offset=1))

        assert [item.name for item in result.items] == ["User 1", "User 2"]
        assert result.total == 3

    @pytest.mark.asyncio
    async def test_scoped_role_is_denied(
        self, user_service: UserService, acme: dict[str, Company]
    ) -> None:
        handler = self._handler(_make_principal(Role.CREDIT_SENIOR, acme["A"]), user_service, acme)

        with pytest.raises(InsufficientRoleError):
            await handler.run(ListUsers())
