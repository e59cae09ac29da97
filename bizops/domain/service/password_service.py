"""Password hashing and policy domain service."""

import asyncio
import functools
import string

import bcrypt
import logfire

from bizops.config import AuthSettings
from bizops.domain.error import WeakPasswordError

from .base import Service

MIN_PASSWORD_LENGTH = 8

# bcrypt only looks at the first 72 bytes of its input
_BCRYPT_MAX_BYTES = 72


@functools.lru_cache(maxsize=None)
def _placeholder_hash(rounds: int) -> bytes:
    """Hash compared against when there is no stored hash, at the configured cost."""
    return bcrypt.hashpw(b"bizops-placeholder", bcrypt.gensalt(rounds=rounds))


class PasswordService(Service):
    """Hashes, verifies and checks the strength of passwords.

    Hashing is CPU-bound, so it runs in a worker thread to keep the event
    loop responsive.
    """

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize password service.

        Args:
            auth_settings: Authentication settings (bcrypt cost)
        """
        self.auth_settings = auth_settings

    def ensure_strong(self, password: str) -> None:
        """Require length >= 8 with lower, upper, digit and symbol.

        Args:
            password: Candidate password

        Raises:
            WeakPasswordError: If any rule fails
        """
        if (
            len(password) < MIN_PASSWORD_LENGTH
            or not any(c.islower() for c in password)
            or not any(c.isupper() for c in password)
            or not any(c.isdigit() for c in password)
            or not any(c in string.punctuation or c.isspace() for c in password)
        ):
            raise WeakPasswordError()

    def ensure_min_length(self, password: str) -> None:
        """Require only the minimum length (password change policy).

        Raises:
            WeakPasswordError: If the password is too short
        """
        if len(password) < MIN_PASSWORD_LENGTH:
            raise WeakPasswordError(
                f"New password must be at least {MIN_PASSWORD_LENGTH} characters long."
            )

    async def hash(self, password: str) -> str:
        """Hash a password with bcrypt.

        Args:
            password: Plain-text password

        Returns:
            bcrypt hash as text
        """
        with logfire.span("password_service.hash"):
            return await asyncio.to_thread(self._hash_sync, password)

    async def verify(self, password: str, password_hash: str | None) -> bool:
        """Check a password against a stored hash.

        Args:
            password: Plain-text password
            password_hash: Stored hash; None always fails, after the same
                bcrypt work as a real comparison

        Returns:
            True if the password matches
        """
        with logfire.span("password_service.verify"):
            if password_hash is None:
                await asyncio.to_thread(self._verify_placeholder, password)
                return False
            return await asyncio.to_thread(self._verify_sync, password, password_hash)

    def _hash_sync(self, password: str) -> str:
        password_bytes = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
        salt = bcrypt.gensalt(rounds=self.auth_settings.bcrypt_rounds)
        return bcrypt.hashpw(password_bytes, salt).decode("utf-8")

    def _verify_placeholder(self, password: str) -> None:
        password_bytes = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
        bcrypt.checkpw(password_bytes, _placeholder_hash(self.auth_settings.bcrypt_rounds))

    @staticmethod
    def _verify_sync(password: str, password_hash: str) -> bool:
        password_bytes = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
        try:
            return bcrypt.checkpw(password_bytes, password_hash.encode("utf-8"))
        except ValueError:
            # Corrupt or foreign hash format
            logfire.warn("Stored password hash could not be parsed")
            return False
