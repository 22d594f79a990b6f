"""Tests for mapping portal errors to HTTP responses."""

import logging

import pytest

from bdp.application.api.v1.errors import map_portal_error
from bdp.domain.shared.error import (
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    CorruptHierarchyError,
    CycleDetectedError,
    InfrastructureError,
    InsufficientRoleError,
    InvalidStateError,
    NotFoundError,
    UnknownCapabilityError,
    UnknownCompanyError,
    UnknownRoleError,
    ValidationError,
)


class TestDomainErrors:
    @pytest.mark.parametrize(
        "error,status",
        [
            (NotFoundError("missing"), 404),
            (ValidationError("bad"), 422),
            (InvalidStateError("nope"), 409),
            (ConflictError("taken"), 409),
            (AuthorizationError("denied"), 403),
            (InsufficientRoleError("denied"), 403),
        ],
    )
    def test_status_codes(self, error, status: int) -> None:
        assert map_portal_error(error).status_code == status

    def test_cycle_is_a_bad_request_with_field(self) -> None:
        exc = map_portal_error(CycleDetectedError("loop", field="parent_id"))

        assert exc.status_code == 400
        assert exc.detail == {"code": "cycle_detected", "message": "loop", "field": "parent_id"}

    def test_missing_token_is_unauthenticated(self) -> None:
        exc = map_portal_error(AuthorizationError("Authentication required", code="missing_token"))

        assert exc.status_code == 401
        assert exc.headers == {"WWW-Authenticate": "Bearer"}

    def test_insufficient_role_detail(self) -> None:
        exc = map_portal_error(InsufficientRoleError("Access denied"))
        assert exc.detail == {"code": "insufficient_role", "message": "Access denied"}


class TestDataIntegrityErrors:
    @pytest.mark.parametrize(
        "error",
        [
            UnknownRoleError("Unknown role: 'root'"),
            UnknownCapabilityError("Unknown capability: 'X'"),
            UnknownCompanyError("Unknown company: 123"),
            CorruptHierarchyError("Company hierarchy contains a cycle through 123"),
        ],
    )
    def test_fatal_and_opaque(self, error) -> None:
        exc = map_portal_error(error)

        assert exc.status_code == 500
        assert exc.detail["message"] == "Internal server error"
        assert error.message not in str(exc.detail)

    def test_logged_as_error(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR):
            map_portal_error(UnknownCompanyError("Unknown company: 123"))
        assert "Unknown company: 123" in caplog.text


class TestOperationalErrors:
    def test_infrastructure_is_unavailable(self) -> None:
        assert map_portal_error(InfrastructureError("db down")).status_code == 503

    def test_configuration_is_server_error(self) -> None:
        assert map_portal_error(ConfigurationError("broken")).status_code == 500
