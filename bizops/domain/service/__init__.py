"""Domain services."""

from .base import Service
from .email_sender import EmailSender
from .identity_service import IdentityService
from .identity_verifier import IdentityVerifier
from .otp_service import OneTimeCodeService
from .password_service import PasswordService
from .session_service import IssuedSession, SessionService
from .token_service import TokenService

__all__ = [
    "EmailSender",
    "IdentityService",
    "IdentityVerifier",
    "IssuedSession",
    "OneTimeCodeService",
    "PasswordService",
    "Service",
    "SessionService",
    "TokenService",
]
