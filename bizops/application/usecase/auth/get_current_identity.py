"""Get current identity use case."""

from pydantic import BaseModel

from bizops.domain.model import PublicIdentity
from bizops.domain.service import IdentityService
from bizops.domain.value import IdentityId


class GetCurrentIdentityRequest(BaseModel):
    """Get current identity request."""

    identity_id: IdentityId  # From authenticated identity


class GetCurrentIdentityUseCase:
    """Use case for loading the signed-in identity's public view."""

    def __init__(self, identity_service: IdentityService) -> None:
        """Initialize get current identity use case.

        Args:
            identity_service: Identity domain service
        """
        self.identity_service = identity_service

    async def execute(self, request: GetCurrentIdentityRequest) -> PublicIdentity:
        """Load the identity.

        Raises:
            NotFoundError: If the identity no longer exists
        """
        identity = await self.identity_service.get_by_id(request.identity_id)
        return PublicIdentity.from_identity(identity)
