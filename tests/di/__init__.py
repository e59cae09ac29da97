"""Mock providers for testing."""

from .email import MockEmailProvider
from .identity_provider import MockIdentityProviderProvider
from .persistence import MockPersistenceProvider
from .clock import FrozenClock, FrozenClockProvider
from .container import build_test_container

__all__ = [
    "FrozenClock",
    "FrozenClockProvider",
    "MockEmailProvider",
    "MockIdentityProviderProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
