"""One-time email verification code."""

from datetime import datetime

from bizops.domain.model.common import DomainModel
from bizops.domain.value import EmailAddress


class VerificationCode(DomainModel):
    """Short-lived numeric code bound to an email address.

    At most one live code exists per email; issuing a new one replaces it.
    """

    email: EmailAddress
    code: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """A code is usable only strictly before its expiry."""
        return now >= self.expires_at
