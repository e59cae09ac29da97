"""In-memory credential store for testing."""

from datetime import datetime, timezone
from typing import Optional

from bizops.domain.error import ConflictError
from bizops.domain.model.identity import Identity
from bizops.domain.repository.identity import CredentialStore
from bizops.domain.value import EmailAddress, IdentityId


class InMemoryCredentialStore(CredentialStore):
    """In-memory implementation of CredentialStore for testing.

    Enforces the same uniqueness rules as the database indexes.
    """

    def __init__(self) -> None:
        self._identities: dict[IdentityId, Identity] = {}

    async def find_by_id(self, identity_id: IdentityId) -> Optional[Identity]:
        """Find an identity by ID."""
        return self._identities.get(identity_id)

    async def find_by_email(self, email: EmailAddress) -> Optional[Identity]:
        """Find an identity by its normalized email."""
        for identity in self._identities.values():
            if identity.email == email:
                return identity
        return None

    async def find_by_subject_id(self, subject_id: str) -> Optional[Identity]:
        """Find an identity by its Google subject ID."""
        for identity in self._identities.values():
            if identity.google_subject_id == subject_id:
                return identity
        return None

    async def find_by_mobile_number(self, mobile_number: str) -> Optional[Identity]:
        """Find an identity by its mobile number."""
        for identity in self._identities.values():
            if identity.mobile_number == mobile_number:
                return identity
        return None

    async def create(self, identity: Identity) -> Identity:
        """Insert a new identity, rejecting duplicates."""
        for existing in self._identities.values():
            if (
                existing.id == identity.id
                or existing.email == identity.email
                or (
                    identity.google_subject_id is not None
                    and existing.google_subject_id == identity.google_subject_id
                )
                or (
                    identity.mobile_number is not None
                    and existing.mobile_number == identity.mobile_number
                )
            ):
                raise ConflictError()
        self._identities[identity.id] = identity
        return identity

    def _update(self, identity_id: IdentityId, **changes) -> None:
        identity = self._identities.get(identity_id)
        if identity:
            changes["updated_at"] = datetime.now(timezone.utc)
            self._identities[identity_id] = identity.model_copy(update=changes)

    async def update_refresh_fingerprint(
        self, identity_id: IdentityId, fingerprint: Optional[str]
    ) -> None:
        """Overwrite (or clear) the refresh-token fingerprint."""
        self._update(identity_id, refresh_token_fingerprint=fingerprint)

    async def replace_refresh_fingerprint(
        self, identity_id: IdentityId, expected: str, fingerprint: str
    ) -> bool:
        """Swap the fingerprint only if it still equals ``expected``."""
        identity = self._identities.get(identity_id)
        if identity is None or identity.refresh_token_fingerprint != expected:
            return False
        self._update(identity_id, refresh_token_fingerprint=fingerprint)
        return True

    async def update_password_hash(
        self, identity_id: IdentityId, password_hash: str
    ) -> None:
        """Replace the password hash."""
        self._update(identity_id, password_hash=password_hash)

    async def mark_email_verified(self, email: EmailAddress) -> bool:
        """Flag the identity owning ``email`` as verified."""
        identity = await self.find_by_email(email)
        if identity is None:
            return False
        self._update(identity.id, is_email_verified=True)
        return True
