"""Authentication routes."""

from typing import Annotated

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Response, status

from bizops.application.usecase.auth import (
    ChangePasswordUseCase,
    ForgotPasswordUseCase,
    GetCurrentIdentityUseCase,
    LoginUseCase,
    LogoutUseCase,
    RefreshSessionUseCase,
    ResendCodeUseCase,
    SignupUseCase,
    VerifyCodeUseCase,
)
from bizops.application.usecase.auth.change_password import (
    ChangePasswordBody,
    ChangePasswordRequest,
)
from bizops.application.usecase.auth.forgot_password import ForgotPasswordRequest
from bizops.application.usecase.auth.get_current_identity import (
    GetCurrentIdentityRequest,
)
from bizops.application.usecase.auth.login import LoginRequest
from bizops.application.usecase.auth.logout import LogoutRequest
from bizops.application.usecase.auth.refresh_session import (
    RefreshSessionBody,
    RefreshSessionRequest,
)
from bizops.application.usecase.auth.resend_code import ResendCodeRequest
from bizops.application.usecase.auth.signup import SignupRequest
from bizops.application.usecase.auth.verify_code import VerifyCodeRequest
from bizops.config import AuthSettings
from bizops.interface.api.cookies import (
    REFRESH_TOKEN_COOKIE,
    clear_session_cookies,
    set_session_cookies,
)
from bizops.interface.api.dependencies import CurrentIdentity
from bizops.interface.api.schemas import ApiResponse, IdentityBody, SessionBody
from bizops.util.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"], route_class=DishkaRoute)


@router.post("/signup", response_model=ApiResponse[SessionBody])
async def signup(
    body: SignupRequest,
    response: Response,
    signup_use_case: FromDishka[SignupUseCase],
    auth_settings: FromDishka[AuthSettings],
) -> ApiResponse[SessionBody]:
    """Create an account.

    Password signup is two requests: without ``otp`` a code is emailed
    (200); with ``otp`` the account is created. Google signup takes an
    ``identityToken`` and creates the account at once.

    Example:
        POST /api/v1/auth/signup
        {"email": "alice@example.com", "password": "S3cure!pass"}

        POST /api/v1/auth/signup
        {"email": "alice@example.com", "password": "S3cure!pass", "otp": "042137"}

        Response (201, sets accessToken and refreshToken cookies):
        {"success": true, "message": "Account created successfully.",
         "data": {"user": {...}, "accessToken": "..."}}
    """
    result = await signup_use_case.execute(body)
    if result.session is None:
        return ApiResponse(message=result.message)

    set_session_cookies(response, result.session, auth_settings)
    response.status_code = status.HTTP_201_CREATED
    logger.info(f"Signup opened session for identity {result.session.identity.id}")
    return ApiResponse(
        message=result.message, data=SessionBody.from_session(result.session)
    )


@router.post("/login", response_model=ApiResponse[SessionBody])
async def login(
    body: LoginRequest,
    response: Response,
    login_use_case: FromDishka[LoginUseCase],
    auth_settings: FromDishka[AuthSettings],
) -> ApiResponse[SessionBody]:
    """Log in with email and password, or with a Google ``identityToken``."""
    result = await login_use_case.execute(body)
    set_session_cookies(response, result.session, auth_settings)
    return ApiResponse(
        message=result.message, data=SessionBody.from_session(result.session)
    )


@router.post("/forgot-password", response_model=ApiResponse[None])
async def forgot_password(
    body: ForgotPasswordRequest,
    forgot_password_use_case: FromDishka[ForgotPasswordUseCase],
) -> ApiResponse[None]:
    """Request a reset code (``email``) or reset (``email``, ``otp``, ``newPassword``)."""
    result = await forgot_password_use_case.execute(body)
    return ApiResponse(message=result.message)


@router.post("/resend-otp", response_model=ApiResponse[None])
async def resend_otp(
    body: ResendCodeRequest,
    resend_code_use_case: FromDishka[ResendCodeUseCase],
) -> ApiResponse[None]:
    """Email a fresh verification code, replacing any live one."""
    result = await resend_code_use_case.execute(body)
    return ApiResponse(message=result.message)


@router.post("/verify-otp", response_model=ApiResponse[None])
async def verify_otp(
    body: VerifyCodeRequest,
    verify_code_use_case: FromDishka[VerifyCodeUseCase],
) -> ApiResponse[None]:
    """Consume a verification code and mark the email verified."""
    result = await verify_code_use_case.execute(body)
    return ApiResponse(message=result.message)


@router.post("/change-password", response_model=ApiResponse[None])
async def change_password(
    body: ChangePasswordBody,
    identity: CurrentIdentity,
    change_password_use_case: FromDishka[ChangePasswordUseCase],
) -> ApiResponse[None]:
    """Change the signed-in identity's password."""
    result = await change_password_use_case.execute(
        ChangePasswordRequest(
            identity_id=identity.id,
            current_password=body.current_password,
            new_password=body.new_password,
        )
    )
    return ApiResponse(message=result.message)


@router.post("/refresh", response_model=ApiResponse[SessionBody])
async def refresh(
    response: Response,
    refresh_session_use_case: FromDishka[RefreshSessionUseCase],
    auth_settings: FromDishka[AuthSettings],
    body: RefreshSessionBody | None = None,
    refresh_token: Annotated[str | None, Cookie(alias=REFRESH_TOKEN_COOKIE)] = None,
) -> ApiResponse[SessionBody]:
    """Rotate the session using the refresh token (body first, then cookie)."""
    presented = (body.refresh_token if body else None) or refresh_token
    result = await refresh_session_use_case.execute(
        RefreshSessionRequest(refresh_token=presented)
    )
    set_session_cookies(response, result.session, auth_settings)
    return ApiResponse(
        message=result.message, data=SessionBody.from_session(result.session)
    )


@router.post("/logout", response_model=ApiResponse[None])
async def logout(
    response: Response,
    identity: CurrentIdentity,
    logout_use_case: FromDishka[LogoutUseCase],
    auth_settings: FromDishka[AuthSettings],
) -> ApiResponse[None]:
    """End the session and clear the session cookies."""
    result = await logout_use_case.execute(LogoutRequest(identity_id=identity.id))
    clear_session_cookies(response, auth_settings)
    logger.info(f"Cleared session cookies for identity {identity.id}")
    return ApiResponse(message=result.message)


@router.get("/me", response_model=ApiResponse[IdentityBody])
async def me(
    identity: CurrentIdentity,
    get_current_identity_use_case: FromDishka[GetCurrentIdentityUseCase],
) -> ApiResponse[IdentityBody]:
    """Get the signed-in identity."""
    public = await get_current_identity_use_case.execute(
        GetCurrentIdentityRequest(identity_id=identity.id)
    )
    return ApiResponse(message="Current identity.", data=IdentityBody.from_identity(public))
