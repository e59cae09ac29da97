"""Third-party identity provider infrastructure providers."""

from dishka import Scope, provide

from bizops.adapter.google import GoogleIdentityVerifier
from bizops.config import AuthSettings
from bizops.domain.service import IdentityVerifier
from bizops.util.di.base import ProviderBase


class IdentityProviderProvider(ProviderBase):
    """Identity provider component base."""

    __mock_component__ = "identity_provider"


class ProdIdentityProviderProvider(IdentityProviderProvider):
    """Production identity provider verifying Google ID tokens."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_identity_verifier(self, auth_settings: AuthSettings) -> IdentityVerifier:
        """Provide Google ID token verifier."""
        return GoogleIdentityVerifier(client_id=auth_settings.google.client_id)
