"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from bizops.domain.model import Identity, VerificationCode
from bizops.domain.value import (
    AccountStatus,
    EmailAddress,
    IdentityId,
    Permission,
    Role,
)


def row_to_identity(row: Dict[str, Any]) -> Identity:
    """Convert database row to Identity domain model.

    Args:
        row: Database row as dict

    Returns:
        Identity domain model
    """
    return Identity(
        id=IdentityId(UUID(row["id"]) if isinstance(row["id"], str) else row["id"]),
        email=EmailAddress(row["email"]),
        name=row.get("name"),
        profession=row.get("profession"),
        mobile_number=row.get("mobile_number"),
        avatar_url=row.get("avatar_url"),
        password_hash=row.get("password_hash"),
        google_subject_id=row.get("google_subject_id"),
        is_email_verified=row["is_email_verified"],
        role=Role(row["role"]),
        status=AccountStatus(row["status"]),
        permissions=tuple(Permission(p) for p in row.get("permissions") or ()),
        refresh_token_fingerprint=row.get("refresh_token_fingerprint"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def identity_to_dict(identity: Identity) -> Dict[str, Any]:
    """Convert Identity domain model to database dict.

    Args:
        identity: Identity domain model

    Returns:
        Dict suitable for database insertion
    """
    data = identity.model_dump(mode="python")
    data["email"] = identity.email.root
    data["role"] = identity.role.value
    data["status"] = identity.status.value
    data["permissions"] = [p.value for p in identity.permissions]
    return data


def row_to_verification_code(row: Dict[str, Any]) -> VerificationCode:
    """Convert database row to VerificationCode domain model."""
    return VerificationCode(
        email=EmailAddress(row["email"]),
        code=row["code"],
        expires_at=row["expires_at"],
    )


def verification_code_to_dict(code: VerificationCode) -> Dict[str, Any]:
    """Convert VerificationCode domain model to database dict."""
    return {
        "email": code.email.root,
        "code": code.code,
        "expires_at": code.expires_at,
    }
