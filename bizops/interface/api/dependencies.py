"""FastAPI dependencies for authentication and authorization."""

from typing import Annotated

from dishka import AsyncContainer
from fastapi import Cookie, Depends, Header, Request

from bizops.application.usecase.auth import AuthenticateRequestUseCase, authorize_roles
from bizops.application.usecase.auth.authenticate_request import AuthenticateRequest
from bizops.domain.value import AuthenticatedIdentity, Role
from bizops.interface.api.cookies import ACCESS_TOKEN_COOKIE


async def current_identity(
    request: Request,
    access_token: Annotated[str | None, Cookie(alias=ACCESS_TOKEN_COOKIE)] = None,
    authorization: Annotated[str | None, Header()] = None,
) -> AuthenticatedIdentity:
    """Authenticate the request from its cookie or bearer token.

    Raises:
        MissingTokenError: If no access token is presented
        TokenExpiredError: If the access token has expired
        UnauthorizedError: On any other failure
    """
    container: AsyncContainer = request.state.dishka_container
    use_case = await container.get(AuthenticateRequestUseCase)
    return use_case.execute(
        AuthenticateRequest(cookie_token=access_token, authorization=authorization)
    )


CurrentIdentity = Annotated[AuthenticatedIdentity, Depends(current_identity)]


def require_roles(*roles: Role):
    """Dependency factory admitting only identities with one of ``roles``.

    Authentication always runs first, so an anonymous caller gets 401 and
    never 403.

    Usage:
        @router.post("/members")
        async def create_member(
            admin: Annotated[AuthenticatedIdentity, Depends(require_roles(Role.ADMIN))],
        ): ...
    """
    allowed = frozenset(roles)

    async def _require_roles(identity: CurrentIdentity) -> AuthenticatedIdentity:
        return authorize_roles(identity, allowed)

    return _require_roles
