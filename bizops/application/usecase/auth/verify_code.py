"""Verify email code use case."""

import logfire
from pydantic import BaseModel, Field

from bizops.application.usecase.base import RequestModel, parse_email
from bizops.domain.service import IdentityService, OneTimeCodeService
from bizops.util.logging import redact_email


class VerifyCodeRequest(RequestModel):
    """Verify code request."""

    email: str
    otp: str = Field(min_length=1)


class VerifyCodeResponse(BaseModel):
    """Verify code response."""

    message: str


class VerifyCodeUseCase:
    """Use case for confirming control of an email address."""

    def __init__(
        self, identity_service: IdentityService, otp_service: OneTimeCodeService
    ) -> None:
        """Initialize verify code use case.

        Args:
            identity_service: Identity domain service
            otp_service: One-time code service
        """
        self.identity_service = identity_service
        self.otp_service = otp_service

    async def execute(self, request: VerifyCodeRequest) -> VerifyCodeResponse:
        """Consume the code and mark the owning identity's email verified.

        Raises:
            InvalidEmailError: If the email is malformed
            CodeNotFoundError, CodeExpiredError, CodeMismatchError: On a bad code
        """
        email = parse_email(request.email)
        await self.otp_service.verify(email, request.otp)

        marked = await self.identity_service.mark_email_verified(email)
        logfire.info(
            "Email verified", email=redact_email(email.root), identity_found=marked
        )
        return VerifyCodeResponse(message="Verification code verified successfully.")
