"""Infrastructure layer errors."""


class AdapterError(Exception):
    """Base infrastructure error."""

    pass


class ProviderError(AdapterError):
    """External provider error."""

    pass


class IdentityProviderUnavailableError(ProviderError):
    """The identity provider (or its signing keys) could not be reached."""

    pass


class EmailDeliveryError(ProviderError):
    """An outbound email could not be handed to the mail server."""

    pass
