"""Infrastructure providers."""

# Import bases
from .email import EmailProvider
from .identity_provider import IdentityProviderProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .email import ProdEmailProvider  # noqa: F401
from .identity_provider import ProdIdentityProviderProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "EmailProvider",
    "IdentityProviderProvider",
    "PersistenceProvider",
    "ProdEmailProvider",
    "ProdIdentityProviderProvider",
    "ProdPersistenceProvider",
]
