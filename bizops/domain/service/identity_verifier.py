"""Third-party identity verification port."""

from bizops.domain.value import NormalizedIdentityClaim


class IdentityVerifier:
    """Validates externally issued identity tokens (federated sign-in)."""

    async def verify(self, identity_token: str) -> NormalizedIdentityClaim:
        """Validate an identity token and extract the asserted identity.

        Implementations check signature, issuer and audience against the
        trusted provider. An unverified email is reported through
        ``email_verified`` rather than rejected here.

        Args:
            identity_token: Token obtained by the client from the provider

        Returns:
            Normalized identity claim

        Raises:
            InvalidIdentityTokenError: On any cryptographic or structural failure
        """
        raise NotImplementedError
