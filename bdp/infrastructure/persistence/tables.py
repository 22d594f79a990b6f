"""SQLAlchemy table definitions - dialect-agnostic (works with SQLite and PostgreSQL)."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    UniqueConstraint,
)

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# COMPANIES TABLE
# ============================================================================
companies_table = Table(
    "companies",
    metadata,
    Column("id", String, primary_key=True),  # UUID as string
    Column("name", String(255), nullable=False),
    Column("type", String(16), nullable=False),  # CompanyType as string
    # Back-pointer only; no FK so a deleted parent never cascades into children
    Column("parent_id", String, nullable=True),
    Column("reference_no", Integer, nullable=True, unique=True),
    Column("code", String(64), nullable=True),
    Column("email", String(255), nullable=True),
    Column("primary_contact_id", String, nullable=True),
    Column("notifications", JSON, nullable=False),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_by", String, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=True),
)

# Children lookups drive every descendant query
Index("idx_companies_parent_id", companies_table.c.parent_id)


# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", String, primary_key=True),  # UUID as string
    Column("email", String(255), nullable=False, unique=True),
    Column("name", String(255), nullable=False),
    Column("role", String(32), nullable=False),  # Role value as string
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=True),
)

Index("idx_users_role", users_table.c.role)


# ============================================================================
# USER COMPANIES TABLE (direct assignments, many-to-many)
# ============================================================================
user_companies_table = Table(
    "user_companies",
    metadata,
    Column("user_id", String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column(
        "company_id",
        String,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
    ),
    UniqueConstraint("user_id", "company_id", name="uq_user_company"),
)

Index("idx_user_companies_company_id", user_companies_table.c.company_id)


# ============================================================================
# DOCUMENTS TABLE (invoices, credit notes, statements)
# ============================================================================
documents_table = Table(
    "documents",
    metadata,
    Column("id", String, primary_key=True),  # UUID as string
    Column("kind", String(16), nullable=False),  # DocumentKind as string
    Column("company_id", String, ForeignKey("companies.id"), nullable=False),
    Column("number", String(64), nullable=False),
    Column("amount", Numeric(14, 2), nullable=False),
    Column("issued_on", Date, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("deleted_at", DateTime(timezone=True), nullable=True),
)

Index("idx_documents_kind_company", documents_table.c.kind, documents_table.c.company_id)
Index("idx_documents_deleted_at", documents_table.c.deleted_at)
