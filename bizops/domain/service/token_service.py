"""Session token domain service."""

import hashlib
from datetime import timedelta
from typing import Literal, overload
from uuid import uuid4

import logfire
from pydantic import ValidationError as PydanticValidationError

from bizops.config import AuthSettings
from bizops.domain.error import TokenExpiredError, TokenMalformedError
from bizops.domain.value import IdentityId, Role, TokenKind
from bizops.util.clock import Clock
from bizops.util.jwt import (
    AccessTokenClaims,
    ExpiredTokenError,
    InvalidTokenError,
    RefreshTokenClaims,
    decode_token,
    encode_token,
)

from .base import Service


class TokenService(Service):
    """Mints and verifies access and refresh tokens.

    Tokens are never mutated after issuance: a login, signup or refresh
    always produces a brand-new pair.
    """

    def __init__(self, auth_settings: AuthSettings, clock: Clock) -> None:
        """Initialize token service.

        Args:
            auth_settings: Authentication settings
            clock: Time source for issuance and expiry
        """
        self.auth_settings = auth_settings
        self.clock = clock

    def issue_access_token(self, identity_id: IdentityId, email: str, role: Role) -> str:
        """Create a short-lived access token.

        Args:
            identity_id: Identity ID
            email: Identity email
            role: Identity role

        Returns:
            Signed JWT
        """
        with logfire.span("token_service.issue_access_token", identity_id=str(identity_id)):
            claims = self._base_claims(
                identity_id,
                email,
                TokenKind.ACCESS,
                timedelta(minutes=self.auth_settings.access_token_expiry_minutes),
            )
            claims["role"] = role.value
            return encode_token(
                claims,
                self.auth_settings.access_token_secret,
                self.auth_settings.jwt_algorithm,
            )

    def issue_refresh_token(self, identity_id: IdentityId, email: str) -> str:
        """Create a longer-lived refresh token.

        Args:
            identity_id: Identity ID
            email: Identity email

        Returns:
            Signed JWT
        """
        with logfire.span("token_service.issue_refresh_token", identity_id=str(identity_id)):
            claims = self._base_claims(
                identity_id,
                email,
                TokenKind.REFRESH,
                timedelta(days=self.auth_settings.refresh_token_expiry_days),
            )
            return encode_token(
                claims,
                self.auth_settings.refresh_token_secret,
                self.auth_settings.jwt_algorithm,
            )

    @overload
    def verify(
        self, token: str, expected_kind: Literal[TokenKind.ACCESS]
    ) -> AccessTokenClaims: ...

    @overload
    def verify(
        self, token: str, expected_kind: Literal[TokenKind.REFRESH]
    ) -> RefreshTokenClaims: ...

    def verify(
        self, token: str, expected_kind: TokenKind
    ) -> AccessTokenClaims | RefreshTokenClaims:
        """Verify a token of the expected kind and return its claims.

        Each kind is checked against its own secret and must carry the
        matching ``typ`` claim, so a refresh token is never accepted where
        an access token is expected and vice versa.

        Args:
            token: Encoded JWT
            expected_kind: Kind the caller requires

        Returns:
            Decoded claims

        Raises:
            TokenExpiredError: If the token is past its expiry
            TokenMalformedError: If signature, structure or kind is wrong
        """
        secret = (
            self.auth_settings.access_token_secret
            if expected_kind == TokenKind.ACCESS
            else self.auth_settings.refresh_token_secret
        )
        claims_model = (
            AccessTokenClaims if expected_kind == TokenKind.ACCESS else RefreshTokenClaims
        )

        try:
            payload = decode_token(
                token, secret, self.auth_settings.jwt_algorithm, self.clock.now()
            )
        except ExpiredTokenError:
            logfire.info("Token expired", kind=expected_kind.value)
            raise TokenExpiredError()
        except InvalidTokenError as e:
            logfire.warn("Token rejected", kind=expected_kind.value, error=str(e))
            raise TokenMalformedError()

        if payload.get("typ") != expected_kind.value:
            logfire.warn(
                "Token kind mismatch",
                expected=expected_kind.value,
                actual=str(payload.get("typ")),
            )
            raise TokenMalformedError()

        try:
            return claims_model.model_validate(payload)
        except PydanticValidationError:
            logfire.warn("Token claims invalid", kind=expected_kind.value)
            raise TokenMalformedError()

    def verify_access_token(self, token: str) -> AccessTokenClaims:
        """Verify an access token."""
        return self.verify(token, TokenKind.ACCESS)

    def verify_refresh_token(self, token: str) -> RefreshTokenClaims:
        """Verify a refresh token."""
        return self.verify(token, TokenKind.REFRESH)

    @staticmethod
    def fingerprint(token: str) -> str:
        """Opaque fingerprint of a token, safe to store."""
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    def _base_claims(
        self, identity_id: IdentityId, email: str, kind: TokenKind, lifetime: timedelta
    ) -> dict:
        issued_at = self.clock.now()
        return {
            "sub": str(identity_id),
            "email": email,
            "typ": kind.value,
            "iat": issued_at,
            "exp": issued_at + lifetime,
            "jti": uuid4().hex,
        }
