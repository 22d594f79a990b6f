"""Error hierarchy for the portal.

Every error carries a human-readable ``message`` and a machine-readable
``code``. The API layer maps them to HTTP responses (see
``bdp.application.api.v1.errors``).
"""


class PortalError(Exception):
    """Base for all portal errors."""

    default_code = "error"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


# =============================================================================
# Domain errors (expected, caller-facing)
# =============================================================================


class DomainError(PortalError):
    """An expected failure of a domain rule."""

    default_code = "domain_error"


class NotFoundError(DomainError):
    default_code = "not_found"


class ValidationError(DomainError):
    """Input failed validation. ``field`` names the offending attribute, if any."""

    default_code = "validation_error"

    def __init__(self, message: str, code: str | None = None, field: str | None = None) -> None:
        super().__init__(message, code)
        self.field = field


class CycleDetectedError(ValidationError):
    """A parent assignment would make a company its own ancestor."""

    default_code = "cycle_detected"


class InvalidStateError(DomainError):
    default_code = "invalid_state"


class ConflictError(DomainError):
    default_code = "conflict"


class AuthorizationError(DomainError):
    default_code = "access_denied"


class InsufficientRoleError(AuthorizationError):
    """The principal's role does not grant the requested capability or target role."""

    default_code = "insufficient_role"


# =============================================================================
# Data-integrity errors (programmer or upstream data faults, never defaulted)
# =============================================================================


class DataIntegrityError(PortalError):
    default_code = "data_integrity"


class UnknownRoleError(DataIntegrityError):
    default_code = "unknown_role"


class UnknownCapabilityError(DataIntegrityError):
    default_code = "unknown_capability"


class UnknownCompanyError(DataIntegrityError):
    default_code = "unknown_company"


class CorruptHierarchyError(DataIntegrityError):
    """Stored parent pointers loop back on themselves."""

    default_code = "corrupt_hierarchy"


# =============================================================================
# Operational errors
# =============================================================================


class ConfigurationError(PortalError):
    default_code = "configuration_error"


class InfrastructureError(PortalError):
    default_code = "infrastructure_error"
