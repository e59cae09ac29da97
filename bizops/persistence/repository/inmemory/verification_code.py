"""In-memory verification code repository for testing."""

from datetime import datetime
from typing import Optional

from bizops.domain.model.verification_code import VerificationCode
from bizops.domain.repository.verification_code import VerificationCodeRepository
from bizops.domain.value import EmailAddress


class InMemoryVerificationCodeRepository(VerificationCodeRepository):
    """In-memory implementation of VerificationCodeRepository for testing.

    Method bodies never await, so each call runs to completion on the event
    loop and ``consume`` is atomic with respect to other coroutines.
    """

    def __init__(self) -> None:
        self._codes: dict[str, VerificationCode] = {}

    async def upsert(self, code: VerificationCode) -> None:
        """Store a code, replacing any existing one for the email."""
        self._codes[code.email.root] = code

    async def consume(self, email: EmailAddress, code: str, now: datetime) -> bool:
        """Delete the code if it matches and is unexpired."""
        stored = self._codes.get(email.root)
        if stored is None or stored.code != code or stored.is_expired(now):
            return False
        del self._codes[email.root]
        return True

    async def find(self, email: EmailAddress) -> Optional[VerificationCode]:
        """Get the current code for an email."""
        return self._codes.get(email.root)

    async def delete_expired(self, now: datetime) -> int:
        """Remove every expired code."""
        expired = [key for key, code in self._codes.items() if code.is_expired(now)]
        for key in expired:
            del self._codes[key]
        return len(expired)
