"""Forgot password use case."""

from typing import Annotated, Any, Union

import logfire
from pydantic import BaseModel, Discriminator, Field, Tag

from bizops.application.usecase.base import RequestModel, has_field, parse_email
from bizops.domain.error import CodeNotFoundError
from bizops.domain.service import (
    IdentityService,
    OneTimeCodeService,
    PasswordService,
    SessionService,
)
from bizops.util.logging import redact_email

RESET_CODE_SENT_MESSAGE = (
    "If an account exists for this email, a verification code has been sent."
)


class ForgotPasswordStart(RequestModel):
    """Request a password reset code."""

    email: str


class ForgotPasswordComplete(RequestModel):
    """Set a new password using the emailed code."""

    email: str
    otp: str = Field(min_length=1)
    new_password: str


def _forgot_password_variant(value: Any) -> str | None:
    if isinstance(value, BaseModel):
        return type(value).__name__
    if not isinstance(value, dict):
        return None
    if has_field(value, "otp") or has_field(value, "new_password"):
        return "ForgotPasswordComplete"
    if has_field(value, "email"):
        return "ForgotPasswordStart"
    return None


ForgotPasswordRequest = Annotated[
    Union[
        Annotated[ForgotPasswordStart, Tag("ForgotPasswordStart")],
        Annotated[ForgotPasswordComplete, Tag("ForgotPasswordComplete")],
    ],
    Discriminator(_forgot_password_variant),
]


class ForgotPasswordResponse(BaseModel):
    """Forgot password response."""

    message: str


class ForgotPasswordUseCase:
    """Use case for resetting a forgotten password by email code.

    Neither step reveals whether an account exists for the email. A
    successful reset revokes the outstanding refresh token.
    """

    def __init__(
        self,
        identity_service: IdentityService,
        otp_service: OneTimeCodeService,
        password_service: PasswordService,
        session_service: SessionService,
    ) -> None:
        """Initialize forgot password use case.

        Args:
            identity_service: Identity domain service
            otp_service: One-time code service
            password_service: Password hashing and policy
            session_service: Session service, to revoke the old session
        """
        self.identity_service = identity_service
        self.otp_service = otp_service
        self.password_service = password_service
        self.session_service = session_service

    async def execute(
        self, request: ForgotPasswordStart | ForgotPasswordComplete
    ) -> ForgotPasswordResponse:
        """Execute either step of the reset.

        Raises:
            InvalidEmailError: If the email is malformed
            WeakPasswordError: If the new password fails the strength policy
            CodeNotFoundError, CodeExpiredError, CodeMismatchError: On a bad code
        """
        email = parse_email(request.email)

        if isinstance(request, ForgotPasswordStart):
            with logfire.span("forgot_password_start", email=redact_email(email.root)):
                identity = await self.identity_service.find_by_email(email)
                if identity is not None:
                    await self.otp_service.issue(email)
                else:
                    logfire.info(
                        "Password reset requested for unknown email",
                        email=redact_email(email.root),
                    )
                return ForgotPasswordResponse(message=RESET_CODE_SENT_MESSAGE)

        self.password_service.ensure_strong(request.new_password)

        with logfire.span("forgot_password_complete", email=redact_email(email.root)):
            # Code first: a bad code fails identically whether or not the account exists
            await self.otp_service.verify(email, request.otp)

            identity = await self.identity_service.find_by_email(email)
            if identity is None:
                logfire.info(
                    "Password reset completed for unknown email",
                    email=redact_email(email.root),
                )
                raise CodeNotFoundError(email.root)

            password_hash = await self.password_service.hash(request.new_password)
            await self.identity_service.set_password_hash(identity.id, password_hash)
            await self.session_service.close_session(identity.id)

            return ForgotPasswordResponse(message="Password reset successful.")
