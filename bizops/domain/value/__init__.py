"""Domain value objects for bizops."""

from bizops.domain.value.identifiers import IdentityId
from bizops.domain.value.types import (
    AccountStatus,
    AuthenticatedIdentity,
    EmailAddress,
    MobileNumber,
    NormalizedIdentityClaim,
    Permission,
    Role,
    TokenKind,
)

__all__ = [
    # Identifiers
    "IdentityId",
    # Types
    "AccountStatus",
    "AuthenticatedIdentity",
    "EmailAddress",
    "MobileNumber",
    "NormalizedIdentityClaim",
    "Permission",
    "Role",
    "TokenKind",
]
