"""Login use case."""

from typing import Annotated, Any, Union

import logfire
from pydantic import BaseModel, Discriminator, Field, Tag

from bizops.application.usecase.base import RequestModel, has_field, parse_email
from bizops.domain.error import (
    AccountInactiveError,
    AccountNotLinkedError,
    EmailUnverifiedError,
    InvalidCredentialsError,
)
from bizops.domain.model import Identity
from bizops.domain.service import (
    IdentityService,
    IdentityVerifier,
    IssuedSession,
    PasswordService,
    SessionService,
)
from bizops.util.logging import redact_email


class PasswordLogin(RequestModel):
    """Login with email and password."""

    email: str
    password: str


class IdentityTokenLogin(RequestModel):
    """Login with a Google ID token."""

    identity_token: str = Field(min_length=1)


def _login_variant(value: Any) -> str | None:
    if isinstance(value, BaseModel):
        return type(value).__name__
    if not isinstance(value, dict):
        return None
    if has_field(value, "identity_token"):
        return "IdentityTokenLogin"
    if has_field(value, "email") or has_field(value, "password"):
        return "PasswordLogin"
    return None


LoginRequest = Annotated[
    Union[
        Annotated[PasswordLogin, Tag("PasswordLogin")],
        Annotated[IdentityTokenLogin, Tag("IdentityTokenLogin")],
    ],
    Discriminator(_login_variant),
]


class LoginResponse(BaseModel):
    """Login response."""

    message: str
    session: IssuedSession


class LoginUseCase:
    """Use case for password or Google login."""

    def __init__(
        self,
        identity_service: IdentityService,
        password_service: PasswordService,
        session_service: SessionService,
        identity_verifier: IdentityVerifier,
    ) -> None:
        """Initialize login use case.

        Args:
            identity_service: Identity domain service
            password_service: Password verification
            session_service: Session issuance
            identity_verifier: Third-party identity token verifier
        """
        self.identity_service = identity_service
        self.password_service = password_service
        self.session_service = session_service
        self.identity_verifier = identity_verifier

    async def execute(
        self, request: PasswordLogin | IdentityTokenLogin
    ) -> LoginResponse:
        """Execute login.

        An unknown email and a wrong password are indistinguishable to the
        caller.

        Args:
            request: One of the login request shapes

        Returns:
            Login response with a fresh session

        Raises:
            InvalidEmailError: If the email is malformed
            InvalidCredentialsError: If the email/password pair does not match
            InvalidIdentityTokenError: If the identity token does not verify
            EmailUnverifiedError: If the provider has not verified the email
            AccountNotLinkedError: If no account uses the Google identity
            AccountInactiveError: If the account is deactivated
        """
        if isinstance(request, IdentityTokenLogin):
            identity = await self._authenticate_identity_token(request)
        else:
            identity = await self._authenticate_password(request)

        if not identity.is_active:
            logfire.warn("Login refused for inactive account", identity_id=str(identity.id))
            raise AccountInactiveError()

        session = await self.session_service.open_session(identity)
        logfire.info("Login successful", identity_id=str(identity.id))
        return LoginResponse(message="Login successful.", session=session)

    async def _authenticate_password(self, request: PasswordLogin) -> Identity:
        email = parse_email(request.email)
        with logfire.span("login_with_password", email=redact_email(email.root)):
            identity = await self.identity_service.find_by_email(email)
            # Unknown emails still pay for a bcrypt comparison
            password_hash = identity.password_hash if identity is not None else None
            if (
                not await self.password_service.verify(request.password, password_hash)
                or identity is None
            ):
                logfire.warn("Invalid login attempt", email=redact_email(email.root))
                raise InvalidCredentialsError()
            return identity

    async def _authenticate_identity_token(
        self, request: IdentityTokenLogin
    ) -> Identity:
        claim = await self.identity_verifier.verify(request.identity_token)
        with logfire.span("login_with_identity_token", subject_id=claim.subject_id):
            if not claim.email_verified:
                logfire.warn("Identity token email not verified")
                raise EmailUnverifiedError()

            identity = await self.identity_service.find_by_subject_id(claim.subject_id)
            if identity is None:
                raise AccountNotLinkedError(claim.subject_id)
            return identity
