"""Document domain queries."""

from .dashboard import DashboardStats, GetDashboardStats, GetDashboardStatsHandler
from .list_documents import (
    DocumentDetail,
    DocumentList,
    DocumentSummary,
    GetDocument,
    GetDocumentHandler,
    ListDocuments,
    ListDocumentsHandler,
)

__all__ = [
    "DashboardStats",
    "DocumentDetail",
    "DocumentList",
    "DocumentSummary",
    "GetDashboardStats",
    "GetDashboardStatsHandler",
    "GetDocument",
    "GetDocumentHandler",
    "ListDocuments",
    "ListDocumentsHandler",
]
