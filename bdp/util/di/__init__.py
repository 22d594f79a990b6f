from bdp.util.di.base import Provider
from bdp.util.di.scope import Scope

__all__ = ["Provider", "Scope"]
