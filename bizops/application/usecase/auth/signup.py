"""Signup use case."""

from typing import Annotated, Any, Union
from uuid import uuid4

import logfire
from pydantic import BaseModel, Discriminator, Field, Tag

from bizops.application.usecase.base import (
    RequestModel,
    has_field,
    parse_email,
    parse_mobile_number,
)
from bizops.domain.error import EmailUnverifiedError
from bizops.domain.model import Identity
from bizops.domain.service import (
    IdentityService,
    IdentityVerifier,
    IssuedSession,
    OneTimeCodeService,
    PasswordService,
    SessionService,
)
from bizops.domain.value import IdentityId, Role
from bizops.util.logging import redact_email


class _SignupProfile(RequestModel):
    """Optional profile fields shared by every signup shape."""

    name: str | None = Field(default=None, max_length=255)
    profession: str | None = Field(default=None, max_length=255)
    mobile_number: str | None = None


class PasswordSignupStart(_SignupProfile):
    """First step of password signup: request a code by email."""

    email: str
    password: str


class PasswordSignupComplete(_SignupProfile):
    """Second step of password signup: present the emailed code."""

    email: str
    password: str
    otp: str = Field(min_length=1)


class IdentityTokenSignup(_SignupProfile):
    """Signup with a Google ID token.

    An ``email`` sent alongside is accepted but ignored; the address always
    comes from the verified token.
    """

    identity_token: str = Field(min_length=1)
    email: str | None = None


def _signup_variant(value: Any) -> str | None:
    if isinstance(value, BaseModel):
        return type(value).__name__
    if not isinstance(value, dict):
        return None
    if has_field(value, "identity_token"):
        return "IdentityTokenSignup"
    if has_field(value, "otp"):
        return "PasswordSignupComplete"
    if has_field(value, "email") or has_field(value, "password"):
        return "PasswordSignupStart"
    return None


SignupRequest = Annotated[
    Union[
        Annotated[PasswordSignupStart, Tag("PasswordSignupStart")],
        Annotated[PasswordSignupComplete, Tag("PasswordSignupComplete")],
        Annotated[IdentityTokenSignup, Tag("IdentityTokenSignup")],
    ],
    Discriminator(_signup_variant),
]


class SignupResponse(BaseModel):
    """Signup response.

    ``session`` is set only when an identity was created.
    """

    created: bool
    message: str
    session: IssuedSession | None = None


class SignupUseCase:
    """Use case for self-service account creation."""

    def __init__(
        self,
        identity_service: IdentityService,
        otp_service: OneTimeCodeService,
        password_service: PasswordService,
        session_service: SessionService,
        identity_verifier: IdentityVerifier,
    ) -> None:
        """Initialize signup use case.

        Args:
            identity_service: Identity domain service
            otp_service: One-time code service
            password_service: Password hashing and policy
            session_service: Session issuance
            identity_verifier: Third-party identity token verifier
        """
        self.identity_service = identity_service
        self.otp_service = otp_service
        self.password_service = password_service
        self.session_service = session_service
        self.identity_verifier = identity_verifier

    async def execute(
        self,
        request: PasswordSignupStart | PasswordSignupComplete | IdentityTokenSignup,
    ) -> SignupResponse:
        """Execute signup.

        Every input check runs before anything is written, so a rejected
        request never leaves a code or an identity behind.

        Args:
            request: One of the signup request shapes

        Returns:
            Signup response (code sent, or identity created with a session)

        Raises:
            InvalidEmailError: If the email is malformed
            WeakPasswordError: If the password fails the strength policy
            InvalidMobileNumberError: If the mobile number is malformed
            CodeNotFoundError, CodeExpiredError, CodeMismatchError: On a bad code
            InvalidIdentityTokenError: If the identity token does not verify
            EmailUnverifiedError: If the provider has not verified the email
            ConflictError: If the account already exists
        """
        if isinstance(request, IdentityTokenSignup):
            return await self._signup_with_identity_token(request)
        return await self._signup_with_password(request)

    async def _signup_with_password(
        self, request: PasswordSignupStart | PasswordSignupComplete
    ) -> SignupResponse:
        email = parse_email(request.email)
        self.password_service.ensure_strong(request.password)
        mobile_number = parse_mobile_number(request.mobile_number)

        if isinstance(request, PasswordSignupStart):
            await self.otp_service.issue(email)
            logfire.info("Signup code sent", email=redact_email(email.root))
            return SignupResponse(
                created=False, message="Verification code sent to your email."
            )

        with logfire.span("signup_with_password", email=redact_email(email.root)):
            await self.otp_service.verify(email, request.otp)
            await self.identity_service.ensure_available(
                email, mobile_number=mobile_number
            )

            password_hash = await self.password_service.hash(request.password)
            identity = await self.identity_service.create(
                Identity(
                    id=IdentityId(uuid4()),
                    email=email,
                    name=request.name,
                    profession=request.profession,
                    mobile_number=mobile_number,
                    password_hash=password_hash,
                    is_email_verified=True,
                    role=Role.USER,
                )
            )

            session = await self.session_service.open_session(identity)
            return SignupResponse(
                created=True, message="Account created successfully.", session=session
            )

    async def _signup_with_identity_token(
        self, request: IdentityTokenSignup
    ) -> SignupResponse:
        mobile_number = parse_mobile_number(request.mobile_number)
        claim = await self.identity_verifier.verify(request.identity_token)

        with logfire.span("signup_with_identity_token", subject_id=claim.subject_id):
            if not claim.email_verified:
                logfire.warn("Identity token email not verified")
                raise EmailUnverifiedError()

            email = parse_email(claim.email)
            await self.identity_service.ensure_available(
                email, subject_id=claim.subject_id, mobile_number=mobile_number
            )

            identity = await self.identity_service.create(
                Identity(
                    id=IdentityId(uuid4()),
                    email=email,
                    name=claim.name or request.name,
                    profession=request.profession,
                    mobile_number=mobile_number,
                    avatar_url=claim.avatar_url,
                    google_subject_id=claim.subject_id,
                    is_email_verified=True,
                    role=Role.USER,
                )
            )

            session = await self.session_service.open_session(identity)
            return SignupResponse(
                created=True, message="Account created successfully.", session=session
            )
