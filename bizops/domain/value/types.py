"""Domain value objects for bizops.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules such as email normalization.
"""

import re
from enum import Enum

from email_validator import EmailNotValidError, validate_email
from pydantic import field_validator

from bizops.domain.value.common import RootValueObject, ValueObject
from bizops.domain.value.identifiers import IdentityId


class Role(str, Enum):
    """Closed set of roles an identity can hold."""

    ADMIN = "admin"
    MEMBER = "member"
    USER = "user"


class AccountStatus(str, Enum):
    """Whether an identity may sign in."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class TokenKind(str, Enum):
    """Kind of session token, stored in the ``typ`` claim."""

    ACCESS = "access"
    REFRESH = "refresh"


class Permission(str, Enum):
    """Catalogue of feature permissions grantable to team members."""

    ALL_ACCESS = "All Access"
    CLIENT_DASHBOARD = "Client Dashboard"
    DASHBOARD = "Dashboard"
    CLIENTS = "Clients"
    INBOX = "Inbox"
    CHAT = "Chat"
    TEAMS = "Teams"
    PROJECTS = "Projects"
    PROPOSALS = "Proposals"
    PAYMENT = "Payment"
    REPORTS = "Reports"


class EmailAddress(RootValueObject[str]):
    """Case-normalized email address.

    Surrounding whitespace is stripped and the whole address lower-cased,
    so two spellings of the same mailbox always compare equal.
    """

    @field_validator("root")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Validate syntax and normalize case."""
        candidate = v.strip().lower()
        if len(candidate) > 254:
            raise ValueError("Email must be at most 254 characters")
        try:
            validate_email(candidate, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(str(e)) from e
        return candidate


_MOBILE_SEPARATORS = re.compile(r"[\s().-]")


class MobileNumber(RootValueObject[str]):
    """Mobile phone number in compact international form.

    Spaces, dots, dashes and parentheses are removed; the remainder must be
    7-15 digits with an optional leading '+'.
    """

    @field_validator("root")
    @classmethod
    def normalize_number(cls, v: str) -> str:
        """Strip separators and validate digits."""
        compact = _MOBILE_SEPARATORS.sub("", v)
        if not re.fullmatch(r"\+?[0-9]{7,15}", compact):
            raise ValueError("Mobile number must be 7-15 digits")
        return compact


class NormalizedIdentityClaim(ValueObject):
    """Identity asserted by a third-party identity provider.

    Transient: consumed to create or match an identity, never stored as is.
    """

    subject_id: str  # Stable provider-side user ID ("sub")
    email: str
    email_verified: bool = False
    name: str | None = None
    avatar_url: str | None = None


class AuthenticatedIdentity(ValueObject):
    """Identity resolved from a verified access token for one request."""

    id: IdentityId
    email: str
    role: Role
