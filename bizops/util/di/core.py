"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from bizops.config import AuthSettings, EmailSettings, Settings, VerificationSettings
from bizops.util.clock import Clock
from bizops.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_verification_settings(self, settings: Settings) -> VerificationSettings:
        """Provide one-time code settings."""
        return settings.verification

    @provide(scope=Scope.APP)
    def provide_email_settings(self, settings: Settings) -> EmailSettings:
        """Provide SMTP settings."""
        return settings.email

    @provide(scope=Scope.APP)
    def provide_clock(self) -> Clock:
        """Provide wall clock."""
        return Clock()
