"""Tests for DocumentFilterBuilder and the scoping predicates."""

from types import SimpleNamespace

import pytest

from bdp.domain.company.model.value import CompanyId
from bdp.domain.shared.authorization.document_filter import (
    CompanyIn,
    DocumentFilterBuilder,
    MatchAll,
    MatchNone,
)
from bdp.domain.shared.authorization.scope import UNRESTRICTED, CompanyScope


def _record(company_id: CompanyId | None) -> SimpleNamespace:
    return SimpleNamespace(company_id=company_id)


@pytest.fixture
def builder() -> DocumentFilterBuilder:
    return DocumentFilterBuilder()


class TestBuild:
    def test_unrestricted_matches_everything(self, builder: DocumentFilterBuilder) -> None:
        predicate = builder.build(UNRESTRICTED)

        assert isinstance(predicate, MatchAll)
        assert predicate.matches(_record(CompanyId.generate()))

    def test_empty_scope_matches_nothing(self, builder: DocumentFilterBuilder) -> None:
        predicate = builder.build(CompanyScope())

        assert isinstance(predicate, MatchNone)
        records = [_record(CompanyId.generate()) for _ in range(5)]
        assert [r for r in records if predicate.matches(r)] == []

    def test_explicit_scope_matches_members_only(self, builder: DocumentFilterBuilder) -> None:
        inside, outside = CompanyId.generate(), CompanyId.generate()
        predicate = builder.build(CompanyScope(frozenset({inside})))

        assert predicate == CompanyIn(company_ids=frozenset({inside}))
        assert predicate.matches(_record(inside))
        assert not predicate.matches(_record(outside))

    def test_unsupported_scope_is_rejected(self, builder: DocumentFilterBuilder) -> None:
        with pytest.raises(TypeError):
            builder.build(None)  # type: ignore[arg-type]


class TestPredicates:
    def test_record_without_company_never_matches_scoped_predicate(self) -> None:
        predicate = CompanyIn(company_ids=frozenset({CompanyId.generate()}))
        assert not predicate.matches(_record(None))
        assert not predicate.matches(object())

    def test_match_all_includes_records_without_companies(self) -> None:
        assert MatchAll().matches(_record(None))

    def test_match_none_excludes_everything(self) -> None:
        assert not MatchNone().matches(_record(CompanyId.generate()))
