"""In-memory repository implementations for testing."""

from .identity import InMemoryCredentialStore
from .verification_code import InMemoryVerificationCodeRepository

__all__ = [
    "InMemoryCredentialStore",
    "InMemoryVerificationCodeRepository",
]
