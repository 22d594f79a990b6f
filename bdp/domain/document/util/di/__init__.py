from bdp.domain.document.util.di.provider import DocumentProvider

__all__ = ["DocumentProvider"]
