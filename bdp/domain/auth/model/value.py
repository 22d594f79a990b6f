"""Value objects for the auth domain."""

from bdp.domain.shared.model.value import EntityId


class UserId(EntityId):
    """Unique identifier for a User."""
