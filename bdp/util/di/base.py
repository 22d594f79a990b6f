from dishka import Provider as DishkaProvider

from bdp.util.di.scope import Scope


class Provider(DishkaProvider):
    """Base for all DI providers. Unscoped factories default to UOW."""

    scope = Scope.UOW
