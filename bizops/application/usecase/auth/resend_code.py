"""Resend verification code use case."""

from pydantic import BaseModel

from bizops.application.usecase.base import RequestModel, parse_email
from bizops.domain.service import OneTimeCodeService


class ResendCodeRequest(RequestModel):
    """Resend code request."""

    email: str


class ResendCodeResponse(BaseModel):
    """Resend code response."""

    message: str


class ResendCodeUseCase:
    """Use case for issuing a fresh code for any well-formed email.

    Account existence is not checked: signup needs codes for addresses that
    have no account yet.
    """

    def __init__(self, otp_service: OneTimeCodeService) -> None:
        """Initialize resend code use case.

        Args:
            otp_service: One-time code service
        """
        self.otp_service = otp_service

    async def execute(self, request: ResendCodeRequest) -> ResendCodeResponse:
        """Issue a new code, replacing any live one.

        Raises:
            InvalidEmailError: If the email is malformed
            EmailDeliveryError: If the code could not be sent
        """
        email = parse_email(request.email)
        await self.otp_service.issue(email)
        return ResendCodeResponse(message="Verification code resent successfully.")
