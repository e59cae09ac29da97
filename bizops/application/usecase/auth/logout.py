"""Logout use case."""

from pydantic import BaseModel

from bizops.domain.service import SessionService
from bizops.domain.value import IdentityId


class LogoutRequest(BaseModel):
    """Logout request."""

    identity_id: IdentityId  # From authenticated identity


class LogoutResponse(BaseModel):
    """Logout response."""

    message: str


class LogoutUseCase:
    """Use case for ending the current session."""

    def __init__(self, session_service: SessionService) -> None:
        self.session_service = session_service

    async def execute(self, request: LogoutRequest) -> LogoutResponse:
        """Forget the refresh fingerprint; outstanding refresh tokens stop working."""
        await self.session_service.close_session(request.identity_id)
        return LogoutResponse(message="Logged out successfully.")
