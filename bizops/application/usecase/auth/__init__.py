"""Authentication use cases."""

from .authenticate_request import AuthenticateRequestUseCase, authorize_roles
from .change_password import ChangePasswordUseCase
from .forgot_password import ForgotPasswordUseCase
from .get_current_identity import GetCurrentIdentityUseCase
from .login import LoginUseCase
from .logout import LogoutUseCase
from .refresh_session import RefreshSessionUseCase
from .resend_code import ResendCodeUseCase
from .signup import SignupUseCase
from .verify_code import VerifyCodeUseCase

__all__ = [
    "AuthenticateRequestUseCase",
    "ChangePasswordUseCase",
    "ForgotPasswordUseCase",
    "GetCurrentIdentityUseCase",
    "LoginUseCase",
    "LogoutUseCase",
    "RefreshSessionUseCase",
    "ResendCodeUseCase",
    "SignupUseCase",
    "VerifyCodeUseCase",
    "authorize_roles",
]
