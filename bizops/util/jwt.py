"""JWT token utilities."""

from datetime import datetime
from typing import Any

import jwt
from pydantic import BaseModel

from bizops.domain.value import Role, TokenKind


class RefreshTokenClaims(BaseModel):
    """Refresh token payload."""

    sub: str  # Identity ID
    email: str
    typ: TokenKind
    iat: datetime
    exp: datetime
    jti: str


class AccessTokenClaims(RefreshTokenClaims):
    """Access token payload."""

    role: Role


class JWTError(Exception):
    """JWT-related error."""

    pass


class ExpiredTokenError(JWTError):
    """Token signature is valid but the token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Token is malformed or its signature does not verify."""

    pass


REQUIRED_CLAIMS = ["sub", "typ", "iat", "exp", "jti"]


def encode_token(claims: dict[str, Any], secret: str, algorithm: str) -> str:
    """Sign a claim set.

    Args:
        claims: Payload; datetimes in ``iat``/``exp`` are converted by PyJWT
        secret: Signing secret
        algorithm: JWT algorithm (e.g. HS256)

    Returns:
        Encoded JWT token
    """
    return jwt.encode(claims, secret, algorithm=algorithm)


def decode_token(
    token: str, secret: str, algorithm: str, now: datetime
) -> dict[str, Any]:
    """Verify a token's signature and expiry and return its payload.

    Expiry is judged against ``now`` rather than the wall clock; a token
    is expired from the instant ``exp`` is reached.

    Args:
        token: JWT token to verify
        secret: Signing secret the token must have been signed with
        algorithm: Only algorithm accepted
        now: Current time

    Returns:
        Decoded payload

    Raises:
        ExpiredTokenError: If the token has expired
        InvalidTokenError: If the token is malformed or wrongly signed
    """
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={
                "require": REQUIRED_CLAIMS,
                "verify_exp": False,
                "verify_iat": False,
            },
        )
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError(f"Invalid token: {e}")

    expires_at = payload["exp"]
    if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
        raise InvalidTokenError("Invalid token: exp must be a number")
    if expires_at <= now.timestamp():
        raise ExpiredTokenError("Token has expired")
    return payload
