"""initial_schema

Create the identity and access schema:
- Identities (accounts, credentials, role, status, permissions)
- Verification codes (one live one-time code per email)

Revision ID: 3f1c2a9d7b64
Revises:
Create Date: 2026-10-19 09:12:44.518203

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b64"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # gen_random_uuid() is built in from PostgreSQL 13; pgcrypto covers older servers
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')

    op.create_table(
        "identities",
        sa.Column(
            "id",
            postgresql.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("email", sa.String(length=254), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("profession", sa.String(length=255), nullable=True),
        sa.Column("mobile_number", sa.String(length=32), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column("google_subject_id", sa.String(length=255), nullable=True),
        sa.Column(
            "is_email_verified",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
        ),
        sa.Column("role", sa.String(length=20), server_default="user", nullable=False),
        sa.Column(
            "status", sa.String(length=20), server_default="active", nullable=False
        ),
        sa.Column(
            "permissions",
            postgresql.ARRAY(sa.String(length=64)),
            server_default="{}",
            nullable=False,
        ),
        sa.Column("refresh_token_fingerprint", sa.String(length=64), nullable=True),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint("role IN ('admin', 'member', 'user')", name="valid_role"),
        sa.CheckConstraint("status IN ('active', 'inactive')", name="valid_status"),
        sa.CheckConstraint(
            "(password_hash IS NOT NULL OR google_subject_id IS NOT NULL)",
            name="password_or_google_required",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="identities_email_key"),
        sa.UniqueConstraint("mobile_number", name="identities_mobile_number_key"),
        sa.UniqueConstraint(
            "google_subject_id", name="identities_google_subject_id_key"
        ),
    )
    op.create_index("idx_identities_role", "identities", ["role"])

    op.create_table(
        "verification_codes",
        sa.Column("email", sa.String(length=254), nullable=False),
        sa.Column("code", sa.String(length=12), nullable=False),
        sa.Column("expires_at", postgresql.TIMESTAMP(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("email"),
    )
    op.create_index(
        "idx_verification_codes_expires_at", "verification_codes", ["expires_at"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_verification_codes_expires_at", table_name="verification_codes")
    op.drop_table("verification_codes")
    op.drop_index("idx_identities_role", table_name="identities")
    op.drop_table("identities")
