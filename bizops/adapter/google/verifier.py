"""Google ID token verification.

Validates ID tokens obtained by the client through Google Sign-In and
turns them into a provider-neutral identity claim.
"""

import asyncio
import secrets
from typing import Any

import logfire
from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from bizops.adapter.error import IdentityProviderUnavailableError
from bizops.domain.error import InvalidIdentityTokenError
from bizops.domain.service.identity_verifier import IdentityVerifier
from bizops.domain.value import NormalizedIdentityClaim

GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")


class GoogleIdentityVerifier(IdentityVerifier):
    """Verifies Google ID tokens against Google's published signing keys."""

    def __init__(self, client_id: str) -> None:
        """Initialize verifier.

        Args:
            client_id: OAuth client ID the tokens must be issued for
        """
        self.client_id = client_id
        self._request = google_requests.Request()

    async def verify(self, identity_token: str) -> NormalizedIdentityClaim:
        """Verify signature, audience, issuer and expiry of a Google ID token.

        Args:
            identity_token: Encoded Google ID token

        Returns:
            Normalized identity claim

        Raises:
            InvalidIdentityTokenError: If the token does not verify
            IdentityProviderUnavailableError: If Google's keys cannot be fetched
        """
        with logfire.span("google.verify_id_token"):
            try:
                # Key fetching and RSA verification block, keep them off the loop
                info = await asyncio.to_thread(
                    id_token.verify_oauth2_token,
                    identity_token,
                    self._request,
                    self.client_id,
                )
            except google_exceptions.TransportError as e:
                logfire.error("Google certificate fetch failed", error=str(e))
                raise IdentityProviderUnavailableError(str(e)) from e
            except (ValueError, google_exceptions.GoogleAuthError) as e:
                logfire.warn("Google ID token rejected", error=str(e))
                raise InvalidIdentityTokenError() from e

            if info.get("iss") not in GOOGLE_ISSUERS:
                logfire.warn("Google ID token has wrong issuer", issuer=info.get("iss"))
                raise InvalidIdentityTokenError()

            return self._to_claim(info)

    @staticmethod
    def _to_claim(info: dict[str, Any]) -> NormalizedIdentityClaim:
        subject_id = info.get("sub")
        email = info.get("email")
        if not subject_id or not email:
            logfire.warn("Google ID token lacks subject or email")
            raise InvalidIdentityTokenError()

        # Google has sent this as both a bool and the string "true"
        verified = info.get("email_verified", False)
        if isinstance(verified, str):
            verified = verified.lower() == "true"

        return NormalizedIdentityClaim(
            subject_id=str(subject_id),
            email=email,
            email_verified=bool(verified),
            name=info.get("name"),
            avatar_url=info.get("picture"),
        )


class MockGoogleIdentityVerifier(IdentityVerifier):
    """Mock verifier for testing.

    Tokens are opaque strings handed out by ``issue``; anything else is
    rejected as invalid.
    """

    def __init__(self) -> None:
        """Initialize mock verifier without Google configuration."""
        self._claims: dict[str, NormalizedIdentityClaim] = {}

    def issue(
        self,
        subject_id: str,
        email: str,
        verified: bool = True,
        name: str | None = None,
        avatar_url: str | None = None,
    ) -> str:
        """Register a claim and return a token that verifies to it."""
        token = f"mock-google-{secrets.token_hex(8)}"
        self._claims[token] = NormalizedIdentityClaim(
            subject_id=subject_id,
            email=email,
            email_verified=verified,
            name=name,
            avatar_url=avatar_url,
        )
        return token

    async def verify(self, identity_token: str) -> NormalizedIdentityClaim:
        """Return the registered claim for a mock token."""
        claim = self._claims.get(identity_token)
        if claim is None:
            raise InvalidIdentityTokenError()
        return claim
