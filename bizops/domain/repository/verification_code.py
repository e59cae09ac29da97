"""Verification code repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from bizops.domain.model.verification_code import VerificationCode
from bizops.domain.value import EmailAddress


class VerificationCodeRepository(ABC):
    """Repository for one-time email codes, keyed by email."""

    @abstractmethod
    async def upsert(self, code: VerificationCode) -> None:
        """Store a code, replacing any existing code for the same email.

        Must be a single write so a concurrent issue never leaves two codes.

        Args:
            code: The code to store
        """
        pass

    @abstractmethod
    async def consume(self, email: EmailAddress, code: str, now: datetime) -> bool:
        """Atomically delete the code if it matches and is unexpired.

        The match check and the delete are one conditional operation: of
        several concurrent callers presenting the same valid code, exactly
        one gets True.

        Args:
            email: Email the code was issued for
            code: Submitted code (exact match)
            now: Current time

        Returns:
            True if the code was consumed, False otherwise
        """
        pass

    @abstractmethod
    async def find(self, email: EmailAddress) -> Optional[VerificationCode]:
        """Get the current code for an email.

        Args:
            email: Email address

        Returns:
            The stored code if any, None otherwise
        """
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Remove every code whose expiry has passed.

        Args:
            now: Current time

        Returns:
            Number of codes removed
        """
        pass
