"""Identity aggregate root.

An identity is a registered account. It authenticates with a password, a
Google account, or both, and carries the role that governs what it may do.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field, model_validator

from bizops.domain.model.common import DomainModel
from bizops.domain.value import (
    AccountStatus,
    EmailAddress,
    IdentityId,
    Permission,
    Role,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Identity(DomainModel):
    """Registered account, including its credentials.

    Never returned to clients directly; see ``PublicIdentity``.
    """

    id: IdentityId
    email: EmailAddress
    name: Optional[str] = None
    profession: Optional[str] = None
    mobile_number: Optional[str] = None
    avatar_url: Optional[str] = None
    password_hash: Optional[str] = None
    google_subject_id: Optional[str] = None
    is_email_verified: bool = False
    role: Role = Role.USER
    status: AccountStatus = AccountStatus.ACTIVE
    permissions: tuple[Permission, ...] = ()
    refresh_token_fingerprint: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def require_authentication_path(self) -> "Identity":
        """A stored identity must be able to authenticate somehow."""
        if self.password_hash is None and self.google_subject_id is None:
            raise ValueError("Identity needs a password hash or a Google subject ID")
        return self

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE

    @property
    def has_password(self) -> bool:
        return self.password_hash is not None


class PublicIdentity(DomainModel):
    """Client-safe projection of an identity.

    Built only through ``from_identity`` so credential fields are never
    copied into a response by accident.
    """

    id: IdentityId
    email: EmailAddress
    name: Optional[str] = None
    profession: Optional[str] = None
    mobile_number: Optional[str] = None
    avatar_url: Optional[str] = None
    is_email_verified: bool
    is_google_signup: bool
    role: Role
    status: AccountStatus
    permissions: tuple[Permission, ...] = ()
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_identity(cls, identity: Identity) -> "PublicIdentity":
        """Project an identity onto its public fields."""
        return cls(
            id=identity.id,
            email=identity.email,
            name=identity.name,
            profession=identity.profession,
            mobile_number=identity.mobile_number,
            avatar_url=identity.avatar_url,
            is_email_verified=identity.is_email_verified,
            is_google_signup=identity.google_subject_id is not None,
            role=identity.role,
            status=identity.status,
            permissions=identity.permissions,
            created_at=identity.created_at,
            updated_at=identity.updated_at,
        )
