from bdp.domain.auth.util.di.provider import AccessProvider, AuthProvider

__all__ = ["AccessProvider", "AuthProvider"]
