"""Credential store interface."""

from abc import ABC, abstractmethod
from typing import Optional

from bizops.domain.model.identity import Identity
from bizops.domain.value import EmailAddress, IdentityId


class CredentialStore(ABC):
    """Repository for the Identity aggregate.

    Lookups go through unique indexes on email, Google subject ID and
    mobile number. Implementations live in the persistence layer.
    """

    @abstractmethod
    async def find_by_id(self, identity_id: IdentityId) -> Optional[Identity]:
        """Find an identity by ID.

        Args:
            identity_id: The identity's unique identifier

        Returns:
            The identity if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: EmailAddress) -> Optional[Identity]:
        """Find an identity by its (normalized) email.

        Args:
            email: Email address

        Returns:
            The identity if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_subject_id(self, subject_id: str) -> Optional[Identity]:
        """Find an identity by its Google subject ID.

        Args:
            subject_id: Subject ("sub") from a verified Google ID token

        Returns:
            The identity if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_mobile_number(self, mobile_number: str) -> Optional[Identity]:
        """Find an identity by its mobile number.

        Args:
            mobile_number: Normalized mobile number

        Returns:
            The identity if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, identity: Identity) -> Identity:
        """Insert a new identity.

        Args:
            identity: The identity to create

        Returns:
            The created identity

        Raises:
            ConflictError: If the email, subject ID or mobile number is taken
        """
        pass

    @abstractmethod
    async def update_refresh_fingerprint(
        self, identity_id: IdentityId, fingerprint: Optional[str]
    ) -> None:
        """Overwrite (or clear) the stored refresh-token fingerprint.

        Args:
            identity_id: Identity to update
            fingerprint: New fingerprint, or None to clear it
        """
        pass

    @abstractmethod
    async def replace_refresh_fingerprint(
        self, identity_id: IdentityId, expected: str, fingerprint: str
    ) -> bool:
        """Swap the fingerprint only if it still equals ``expected``.

        The comparison and the write are one atomic step, so of several
        concurrent rotations of the same refresh token exactly one wins.

        Args:
            identity_id: Identity to update
            expected: Fingerprint of the refresh token being rotated
            fingerprint: Fingerprint of the newly issued refresh token

        Returns:
            True if the swap happened, False if the stored value differed
        """
        pass

    @abstractmethod
    async def update_password_hash(
        self, identity_id: IdentityId, password_hash: str
    ) -> None:
        """Replace the stored password hash.

        Args:
            identity_id: Identity to update
            password_hash: New bcrypt hash
        """
        pass

    @abstractmethod
    async def mark_email_verified(self, email: EmailAddress) -> bool:
        """Flag the identity owning ``email`` as verified.

        Args:
            email: Email address

        Returns:
            True if an identity was updated, False if none exists
        """
        pass
