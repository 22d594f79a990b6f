"""In-memory repositories and builders shared by the unit tests."""

from collections.abc import Collection

import pytest

from bdp.domain.auth.model.role import Role
from bdp.domain.auth.model.user import User
from bdp.domain.auth.model.value import UserId
from bdp.domain.company.model.company import Company
from bdp.domain.company.model.value import CompanyId, CompanyType
from bdp.domain.document.model.document import Document
from bdp.domain.document.model.value import DocumentId, DocumentKind
from bdp.domain.shared.authorization.document_filter import MatchAll, Predicate


class InMemoryCompanyRepository:
    """CompanyRepository backed by a dict. Returns copies, like a real store."""

    def __init__(self, companies: Collection[Company] = ()) -> None:
        self.companies: dict[CompanyId, Company] = {c.id: c for c in companies}
        self.get_calls: list[CompanyId] = []
        self.children_calls: list[CompanyId] = []

    def _sorted(self) -> list[Company]:
        return sorted(self.companies.values(), key=lambda c: (c.name, str(c.id)))

    async def get(self, company_id: CompanyId) -> Company | None:
        self.get_calls.append(company_id)
        company = self.companies.get(company_id)
        return company.model_copy(deep=True) if company else None

    async def get_children(self, parent_id: CompanyId) -> list[Company]:
        self.children_calls.append(parent_id)
        return [c.model_copy(deep=True) for c in self._sorted() if c.parent_id == parent_id]

    async def list_all(self) -> list[Company]:
        return [c.model_copy(deep=True) for c in self._sorted()]

    async def find(self, predicate: Predicate, include_inactive: bool = True) -> list[Company]:
        return [
            c.model_copy(deep=True)
            for c in self._sorted()
            if predicate.matches_company(c.id) and (include_inactive or c.is_active)
        ]

    async def count(self) -> int:
        return len(self.companies)

    async def get_by_reference_no(self, reference_no: int) -> Company | None:
        for company in self.companies.values():
            if company.reference_no == reference_no:
                return company.model_copy(deep=True)
        return None

    async def save(self, company: Company) -> None:
        self.companies[company.id] = company.model_copy(deep=True)

    async def delete(self, company_id: CompanyId) -> bool:
        return self.companies.pop(company_id, None) is not None


class InMemoryUserRepository:
    def __init__(self, users: Collection[User] = ()) -> None:
        self.users: dict[UserId, User] = {u.id: u for u in users}

    async def get(self, user_id: UserId) -> User | None:
        user = self.users.get(user_id)
        return user.model_copy(deep=True) if user else None

    async def get_by_email(self, email: str) -> User | None:
        for user in self.users.values():
            if user.email == email:
                return user.model_copy(deep=True)
        return None

    async def save(self, user: User) -> None:
        self.users[user.id] = user.model_copy(deep=True)

    async def delete(self, user_id: UserId) -> bool:
        return self.users.pop(user_id, None) is not None

    def _matching(self, predicate: Predicate, roles: Collection[Role]) -> list[User]:
        # Mirrors the SQL EXISTS over user_companies: unassigned users match only MatchAll
        return sorted(
            (
                u
                for u in self.users.values()
                if u.role in roles
                and (
                    isinstance(predicate, MatchAll)
                    or any(predicate.matches_company(c) for c in u.company_ids)
                )
            ),
            key=lambda u: (u.name, str(u.id)),
        )

    async def find(
        self,
        predicate: Predicate,
        roles: Collection[Role],
        limit: int | None = None,
        offset: int = 0,
    ) -> list[User]:
        matching = self._matching(predicate, roles)[offset:]
        if limit is not None:
            matching = matching[:limit]
        return [u.model_copy(deep=True) for u in matching]

    async def count(self, predicate: Predicate, roles: Collection[Role]) -> int:
        return len(self._matching(predicate, roles))


class InMemoryDocumentRepository:
    def __init__(self, documents: Collection[Document] = ()) -> None:
        self.documents: dict[DocumentId, Document] = {d.id: d for d in documents}

    async def get(self, document_id: DocumentId) -> Document | None:
        return self.documents.get(document_id)

    async def save(self, document: Document) -> None:
        self.documents[document.id] = document

    def _visible(self, predicate: Predicate, kind: DocumentKind) -> list[Document]:
        return sorted(
            (
                d
                for d in self.documents.values()
                if d.kind is kind and not d.is_deleted and predicate.matches(d)
            ),
            key=lambda d: d.created_at,
            reverse=True,
        )

    async def find(
        self,
        predicate: Predicate,
        kind: DocumentKind,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Document]:
        visible = self._visible(predicate, kind)[offset:]
        return visible[:limit] if limit is not None else visible

    async def count(self, predicate: Predicate, kind: DocumentKind) -> int:
        return len(self._visible(predicate, kind))


def _company(
    name: str,
    parent: Company | None = None,
    type: CompanyType | None = None,
    reference_no: int | None = None,
) -> Company:
    """Build a company; the type defaults to CORP for roots and SUB otherwise."""
    if type is None:
        type = CompanyType.CORP if parent is None else CompanyType.SUB
    return Company.create(
        name=name,
        type=type,
        parent_id=parent.id if parent else None,
        reference_no=reference_no,
    )


@pytest.fixture
def acme() -> dict[str, Company]:
    """Acme (A) > Acme UK (B) > Acme London (C); Acme France (D) under A; Globex (G) alone."""
    a = _company("Acme")
    b = _company("Acme UK", parent=a)
    c = _company("Acme London", parent=b, type=CompanyType.BRANCH)
    d = _company("Acme France", parent=a)
    g = _company("Globex")
    return {"A": a, "B": b, "C": c, "D": d, "G": g}


@pytest.fixture
def company_repo(acme: dict[str, Company]) -> InMemoryCompanyRepository:
    return InMemoryCompanyRepository(acme.values())


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def document_repo() -> InMemoryDocumentRepository:
    return InMemoryDocumentRepository()
