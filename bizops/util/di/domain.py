"""Domain layer DI providers."""

from dishka import Scope, provide

from bizops.config import AuthSettings, VerificationSettings
from bizops.domain.repository import CredentialStore, VerificationCodeRepository
from bizops.domain.service import (
    EmailSender,
    IdentityService,
    OneTimeCodeService,
    PasswordService,
    SessionService,
    TokenService,
)
from bizops.util.clock import Clock
from bizops.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_token_service(self, auth_settings: AuthSettings, clock: Clock) -> TokenService:
        """Provide token issuer."""
        return TokenService(auth_settings=auth_settings, clock=clock)

    @provide
    def get_password_service(self, auth_settings: AuthSettings) -> PasswordService:
        """Provide password hashing service."""
        return PasswordService(auth_settings=auth_settings)

    @provide
    def get_identity_service(self, credential_store: CredentialStore) -> IdentityService:
        """Provide identity domain service."""
        return IdentityService(credential_store=credential_store)

    @provide
    def get_otp_service(
        self,
        verification_code_repository: VerificationCodeRepository,
        email_sender: EmailSender,
        settings: VerificationSettings,
        clock: Clock,
    ) -> OneTimeCodeService:
        """Provide one-time code service."""
        return OneTimeCodeService(
            verification_code_repository=verification_code_repository,
            email_sender=email_sender,
            settings=settings,
            clock=clock,
        )

    @provide
    def get_session_service(
        self, token_service: TokenService, identity_service: IdentityService
    ) -> SessionService:
        """Provide session issuance service."""
        return SessionService(
            token_service=token_service, identity_service=identity_service
        )
