"""Response bodies shared by the API routes."""

from datetime import datetime
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from bizops.domain.model import PublicIdentity
from bizops.domain.service import IssuedSession
from bizops.domain.value import AccountStatus, Permission, Role

T = TypeVar("T")


class ApiModel(BaseModel):
    """Base for response bodies: camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(ApiModel, Generic[T]):
    """Success envelope."""

    success: bool = True
    message: str
    data: T | None = None


class IdentityBody(ApiModel):
    """Public view of an identity."""

    id: UUID
    email: str
    name: str | None
    profession: str | None
    mobile_number: str | None
    avatar_url: str | None
    is_email_verified: bool
    is_google_signup: bool
    role: Role
    status: AccountStatus
    permissions: list[Permission]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_identity(cls, identity: PublicIdentity) -> "IdentityBody":
        return cls(
            id=identity.id,
            email=identity.email.root,
            name=identity.name,
            profession=identity.profession,
            mobile_number=identity.mobile_number,
            avatar_url=identity.avatar_url,
            is_email_verified=identity.is_email_verified,
            is_google_signup=identity.is_google_signup,
            role=identity.role,
            status=identity.status,
            permissions=list(identity.permissions),
            created_at=identity.created_at,
            updated_at=identity.updated_at,
        )


class SessionBody(ApiModel):
    """Identity plus the access token of a freshly opened session.

    The refresh token is only ever sent as an HttpOnly cookie.
    """

    user: IdentityBody
    access_token: str

    @classmethod
    def from_session(cls, session: IssuedSession) -> "SessionBody":
        return cls(
            user=IdentityBody.from_identity(session.identity),
            access_token=session.access_token,
        )
