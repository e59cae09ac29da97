"""SQLAlchemy table definitions for bizops.

Repositories use SQLAlchemy Core against these tables and map rows to
domain models by hand. They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Index,
    MetaData,
    String,
    Table,
    Text,
    text,
)
from sqlalchemy.dialects import postgresql
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# IDENTITIES TABLE (accounts and their credentials)
# ============================================================================
identities_table = Table(
    "identities",
    metadata,
    Column("id", UUID, primary_key=True, server_default=text("gen_random_uuid()")),
    Column("email", String(254), nullable=False, unique=True),  # Lower-cased
    Column("name", String(255), nullable=True),
    Column("profession", String(255), nullable=True),
    Column("mobile_number", String(32), nullable=True, unique=True),
    Column("avatar_url", Text, nullable=True),
    Column("password_hash", String(255), nullable=True),  # bcrypt
    Column("google_subject_id", String(255), nullable=True, unique=True),
    Column("is_email_verified", Boolean, nullable=False, server_default=text("false")),
    Column("role", String(20), nullable=False, server_default="user"),
    Column("status", String(20), nullable=False, server_default="active"),
    Column(
        "permissions",
        postgresql.ARRAY(String(64)),
        nullable=False,
        server_default="{}",
    ),
    Column("refresh_token_fingerprint", String(64), nullable=True),  # sha256 hex
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("now()")
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("now()")
    ),
    CheckConstraint("role IN ('admin', 'member', 'user')", name="valid_role"),
    CheckConstraint("status IN ('active', 'inactive')", name="valid_status"),
    CheckConstraint(
        "(password_hash IS NOT NULL OR google_subject_id IS NOT NULL)",
        name="password_or_google_required",
    ),
)

Index("idx_identities_role", identities_table.c.role)

# ============================================================================
# VERIFICATION CODES TABLE (one live code per email)
# ============================================================================
verification_codes_table = Table(
    "verification_codes",
    metadata,
    Column("email", String(254), primary_key=True),
    Column("code", String(12), nullable=False),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
)

Index("idx_verification_codes_expires_at", verification_codes_table.c.expires_at)
