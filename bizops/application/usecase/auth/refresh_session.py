"""Refresh session use case."""

from pydantic import BaseModel

from bizops.application.usecase.base import RequestModel
from bizops.domain.error import MissingTokenError
from bizops.domain.service import IssuedSession, SessionService


class RefreshSessionBody(RequestModel):
    """Refresh request body; the cookie is used when the body has no token."""

    refresh_token: str | None = None


class RefreshSessionRequest(BaseModel):
    """Refresh session request."""

    refresh_token: str | None


class RefreshSessionResponse(BaseModel):
    """Refresh session response."""

    message: str
    session: IssuedSession


class RefreshSessionUseCase:
    """Use case for exchanging a refresh token for a new token pair."""

    def __init__(self, session_service: SessionService) -> None:
        """Initialize refresh session use case.

        Args:
            session_service: Session issuance
        """
        self.session_service = session_service

    async def execute(self, request: RefreshSessionRequest) -> RefreshSessionResponse:
        """Rotate the session.

        Raises:
            MissingTokenError: If no refresh token was presented
            TokenExpiredError: If the refresh token has expired
            TokenMalformedError: If the refresh token is invalid
            UnauthorizedError: If the token is no longer the current one
            AccountInactiveError: If the account is deactivated
        """
        if not request.refresh_token:
            raise MissingTokenError("Refresh token is missing.")
        session = await self.session_service.rotate(request.refresh_token)
        return RefreshSessionResponse(message="Session refreshed.", session=session)
