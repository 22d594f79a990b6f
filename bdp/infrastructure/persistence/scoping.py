"""Translate opaque scoping predicates into SQL clauses.

Repositories AND the clause into their own filters (soft delete, kind,
role). The translation mirrors ``Predicate.matches``: an empty scope is a
FALSE clause, never an absent one.
"""

from sqlalchemy import ColumnElement, exists, false, select, true

from bdp.domain.shared.authorization.document_filter import (
    CompanyIn,
    MatchAll,
    MatchNone,
    Predicate,
)
from bdp.infrastructure.persistence.tables import user_companies_table, users_table


def to_clause(predicate: Predicate, company_column: ColumnElement) -> ColumnElement[bool]:
    """SQL clause restricting ``company_column`` according to ``predicate``."""
    if isinstance(predicate, MatchAll):
        return true()
    if isinstance(predicate, MatchNone):
        return false()
    if isinstance(predicate, CompanyIn):
        if not predicate.company_ids:
            return false()
        return company_column.in_(sorted(str(c) for c in predicate.company_ids))
    raise TypeError(f"Unsupported predicate: {predicate!r}")


def user_clause(predicate: Predicate) -> ColumnElement[bool]:
    """Clause matching users with at least one assigned company in scope."""
    if isinstance(predicate, MatchAll):
        return true()
    assigned = (
        select(user_companies_table.c.user_id)
        .where(user_companies_table.c.user_id == users_table.c.id)
        .where(to_clause(predicate, user_companies_table.c.company_id))
    )
    return exists(assigned)
