"""Custom Dishka scopes for the portal."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """Dependency injection scopes.

    Hierarchy: APP -> UOW

    - APP: Application lifetime (singletons such as the role hierarchy)
    - UOW: Unit of Work (one request by one principal)
    """

    APP = new_scope("APP")
    UOW = new_scope("UOW")
