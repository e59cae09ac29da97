"""Session cookie helpers."""

from fastapi import Response

from bizops.config import AuthSettings
from bizops.domain.service import IssuedSession

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"


def set_session_cookies(
    response: Response, session: IssuedSession, auth_settings: AuthSettings
) -> None:
    """Attach both session tokens as HttpOnly cookies."""
    for name, value in (
        (ACCESS_TOKEN_COOKIE, session.access_token),
        (REFRESH_TOKEN_COOKIE, session.refresh_token),
    ):
        response.set_cookie(
            key=name,
            value=value,
            max_age=auth_settings.cookie_max_age,
            path="/",
            domain=auth_settings.cookie_domain,
            secure=auth_settings.cookie_secure,
            httponly=True,
            samesite=auth_settings.cookie_samesite,
        )


def clear_session_cookies(response: Response, auth_settings: AuthSettings) -> None:
    """Expire both session cookies."""
    for name in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
        response.delete_cookie(
            key=name,
            path="/",
            domain=auth_settings.cookie_domain,
            secure=auth_settings.cookie_secure,
            httponly=True,
            samesite=auth_settings.cookie_samesite,
        )
