"""Request authentication and role authorization."""

from collections.abc import Collection
from uuid import UUID

import logfire
from pydantic import BaseModel

from bizops.domain.error import (
    ForbiddenError,
    MissingTokenError,
    TokenExpiredError,
    TokenMalformedError,
    UnauthorizedError,
)
from bizops.domain.service import TokenService
from bizops.domain.value import AuthenticatedIdentity, IdentityId, Role

BEARER_SCHEME = "bearer"


class AuthenticateRequest(BaseModel):
    """Credentials carried by an incoming request."""

    cookie_token: str | None = None  # accessToken cookie
    authorization: str | None = None  # Authorization header


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME or not token.strip():
        return None
    return token.strip()


class AuthenticateRequestUseCase:
    """Resolves the caller of a protected request from its access token.

    The ``accessToken`` cookie wins over the Authorization header. Every
    failure other than a missing or expired token is reported as the same
    generic unauthorized error.
    """

    def __init__(self, token_service: TokenService) -> None:
        """Initialize authenticate request use case.

        Args:
            token_service: Token issuer/verifier
        """
        self.token_service = token_service

    def execute(self, request: AuthenticateRequest) -> AuthenticatedIdentity:
        """Verify the presented access token.

        No storage lookup happens: the result reflects the token's claims.

        Args:
            request: Cookie and header values

        Returns:
            The authenticated identity

        Raises:
            MissingTokenError: If neither source carries a token
            TokenExpiredError: If the access token has expired
            UnauthorizedError: For any other verification failure
        """
        token = request.cookie_token or bearer_token(request.authorization)
        if not token:
            raise MissingTokenError()

        try:
            claims = self.token_service.verify_access_token(token)
        except TokenExpiredError:
            raise TokenExpiredError("Access token has expired.")
        except TokenMalformedError:
            raise UnauthorizedError()

        try:
            identity_id = IdentityId(UUID(claims.sub))
        except ValueError:
            logfire.warn("Access token subject is not an identity ID")
            raise UnauthorizedError()

        return AuthenticatedIdentity(id=identity_id, email=claims.email, role=claims.role)


def authorize_roles(
    identity: AuthenticatedIdentity, allowed_roles: Collection[Role]
) -> AuthenticatedIdentity:
    """Allow the request only if the identity holds one of ``allowed_roles``.

    Raises:
        ForbiddenError: If the role is not allowed
    """
    if identity.role not in allowed_roles:
        logfire.warn(
            "Role not authorized",
            identity_id=str(identity.id),
            role=identity.role.value,
            allowed=[role.value for role in allowed_roles],
        )
        raise ForbiddenError()
    return identity
