"""DI provider for the document domain."""

from dishka import provide

from bdp.domain.document.query.dashboard import GetDashboardStatsHandler
from bdp.domain.document.query.list_documents import GetDocumentHandler, ListDocumentsHandler
from bdp.domain.document.service.document import DocumentService
from bdp.util.di.base import Provider
from bdp.util.di.scope import Scope


class DocumentProvider(Provider):
    # Query Handlers
    list_documents_handler = provide(ListDocumentsHandler, scope=Scope.UOW)
    get_document_handler = provide(GetDocumentHandler, scope=Scope.UOW)
    dashboard_handler = provide(GetDashboardStatsHandler, scope=Scope.UOW)

    # Services
    document_service = provide(DocumentService, scope=Scope.UOW)
