"""Session issuance domain service."""

import hmac
from uuid import UUID

import logfire

from bizops.domain.error import AccountInactiveError, NotFoundError, UnauthorizedError
from bizops.domain.model.identity import Identity, PublicIdentity
from bizops.domain.value import IdentityId
from bizops.domain.value.common import ValueObject

from .base import Service
from .identity_service import IdentityService
from .token_service import TokenService

SUPERSEDED_MESSAGE = "Refresh token is no longer valid."


class IssuedSession(ValueObject):
    """A freshly issued token pair for an identity."""

    identity: PublicIdentity
    access_token: str
    refresh_token: str


class SessionService(Service):
    """Opens, rotates and closes sessions.

    The fingerprint of the latest refresh token is mirrored onto the
    identity; only that token can be used to refresh, so each identity has
    a single active session.
    """

    def __init__(
        self, token_service: TokenService, identity_service: IdentityService
    ) -> None:
        """Initialize session service.

        Args:
            token_service: Token issuer
            identity_service: Identity domain service
        """
        self.token_service = token_service
        self.identity_service = identity_service

    def _issue(self, identity: Identity) -> tuple[str, str, str]:
        """Mint an access/refresh pair and the refresh token's fingerprint."""
        access_token = self.token_service.issue_access_token(
            identity.id, identity.email.root, identity.role
        )
        refresh_token = self.token_service.issue_refresh_token(
            identity.id, identity.email.root
        )
        return access_token, refresh_token, self.token_service.fingerprint(refresh_token)

    @staticmethod
    def _session(
        identity: Identity, access_token: str, refresh_token: str, fingerprint: str
    ) -> IssuedSession:
        refreshed = identity.model_copy(update={"refresh_token_fingerprint": fingerprint})
        return IssuedSession(
            identity=PublicIdentity.from_identity(refreshed),
            access_token=access_token,
            refresh_token=refresh_token,
        )

    async def open_session(self, identity: Identity) -> IssuedSession:
        """Issue a new token pair and record the refresh fingerprint.

        Args:
            identity: Authenticated identity

        Returns:
            The issued session
        """
        with logfire.span("session_service.open_session", identity_id=str(identity.id)):
            access_token, refresh_token, fingerprint = self._issue(identity)
            await self.identity_service.set_refresh_fingerprint(identity.id, fingerprint)
            logfire.info("Session opened", identity_id=str(identity.id))
            return self._session(identity, access_token, refresh_token, fingerprint)

    async def rotate(self, refresh_token: str) -> IssuedSession:
        """Exchange a refresh token for a new token pair.

        The stored fingerprint is swapped with a compare-and-set, so a
        refresh token can be rotated once even when presented concurrently.

        Args:
            refresh_token: The refresh token last issued to the identity

        Returns:
            The new session

        Raises:
            TokenExpiredError: If the refresh token has expired
            TokenMalformedError: If the refresh token is invalid
            UnauthorizedError: If the token is not the identity's current one
            AccountInactiveError: If the identity has been deactivated
        """
        with logfire.span("session_service.rotate"):
            claims = self.token_service.verify_refresh_token(refresh_token)

            try:
                identity = await self.identity_service.get_by_id(
                    IdentityId(UUID(claims.sub))
                )
            except (ValueError, NotFoundError):
                logfire.warn("Refresh token subject unknown", subject=claims.sub)
                raise UnauthorizedError()

            presented = self.token_service.fingerprint(refresh_token)
            stored = identity.refresh_token_fingerprint
            if stored is None or not hmac.compare_digest(presented, stored):
                logfire.warn(
                    "Refresh token superseded or revoked", identity_id=str(identity.id)
                )
                raise UnauthorizedError(SUPERSEDED_MESSAGE)

            if not identity.is_active:
                raise AccountInactiveError()

            access_token, new_refresh_token, fingerprint = self._issue(identity)
            if not await self.identity_service.replace_refresh_fingerprint(
                identity.id, presented, fingerprint
            ):
                logfire.warn(
                    "Refresh token rotated concurrently", identity_id=str(identity.id)
                )
                raise UnauthorizedError(SUPERSEDED_MESSAGE)

            logfire.info("Session rotated", identity_id=str(identity.id))
            return self._session(identity, access_token, new_refresh_token, fingerprint)

    async def close_session(self, identity_id: IdentityId) -> None:
        """Forget the refresh fingerprint so no refresh token remains usable."""
        with logfire.span("session_service.close_session", identity_id=str(identity_id)):
            await self.identity_service.set_refresh_fingerprint(identity_id, None)
            logfire.info("Session closed", identity_id=str(identity_id))
