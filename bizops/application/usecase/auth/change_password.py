"""Change password use case."""

import logfire
from pydantic import BaseModel

from bizops.application.usecase.base import RequestModel
from bizops.domain.error import UnauthorizedError, ValidationError
from bizops.domain.service import IdentityService, PasswordService, SessionService
from bizops.domain.value import IdentityId


class ChangePasswordBody(RequestModel):
    """Change password request body."""

    current_password: str
    new_password: str


class ChangePasswordRequest(BaseModel):
    """Change password request."""

    identity_id: IdentityId  # From authenticated identity
    current_password: str
    new_password: str


class ChangePasswordResponse(BaseModel):
    """Change password response."""

    message: str


class ChangePasswordUseCase:
    """Use case for changing the password of the signed-in identity."""

    def __init__(
        self,
        identity_service: IdentityService,
        password_service: PasswordService,
        session_service: SessionService,
    ) -> None:
        """Initialize change password use case.

        Args:
            identity_service: Identity domain service
            password_service: Password hashing and policy
            session_service: Session service, to revoke the old refresh token
        """
        self.identity_service = identity_service
        self.password_service = password_service
        self.session_service = session_service

    async def execute(self, request: ChangePasswordRequest) -> ChangePasswordResponse:
        """Execute change password flow.

        Steps:
        1. Load the identity
        2. Check the current password (identities without one always fail)
        3. Require a different new password of at least 8 characters
        4. Store the new hash and revoke the outstanding refresh token

        Raises:
            NotFoundError: If the identity no longer exists
            UnauthorizedError: If the current password is wrong
            ValidationError: If the new password equals the current one
            WeakPasswordError: If the new password is too short
        """
        with logfire.span("change_password", identity_id=str(request.identity_id)):
            identity = await self.identity_service.get_by_id(request.identity_id)

            if not identity.has_password:
                logfire.warn(
                    "Change password on identity without a password",
                    identity_id=str(identity.id),
                )
                raise UnauthorizedError("Current password is incorrect.")

            if not await self.password_service.verify(
                request.current_password, identity.password_hash
            ):
                logfire.warn(
                    "Change password with wrong current password",
                    identity_id=str(identity.id),
                )
                raise UnauthorizedError("Current password is incorrect.")

            if request.new_password == request.current_password:
                raise ValidationError("New password must be different.")
            self.password_service.ensure_min_length(request.new_password)

            password_hash = await self.password_service.hash(request.new_password)
            await self.identity_service.set_password_hash(identity.id, password_hash)
            await self.session_service.close_session(identity.id)

            return ChangePasswordResponse(message="Password changed successfully.")
