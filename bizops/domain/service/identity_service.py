"""Identity domain service."""

from typing import Optional

import logfire

from bizops.domain.error import ConflictError, NotFoundError
from bizops.domain.model.identity import Identity
from bizops.domain.repository import CredentialStore
from bizops.domain.value import EmailAddress, IdentityId
from bizops.util.logging import redact_email

from .base import Service


class IdentityService(Service):
    """Domain service for identity lookups and credential updates."""

    def __init__(self, credential_store: CredentialStore) -> None:
        """Initialize identity service.

        Args:
            credential_store: Identity repository
        """
        self.credential_store = credential_store

    async def get_by_id(self, identity_id: IdentityId) -> Identity:
        """Get identity by ID.

        Args:
            identity_id: Identity ID

        Returns:
            The identity

        Raises:
            NotFoundError: If no identity has this ID
        """
        with logfire.span("identity_service.get_by_id", identity_id=str(identity_id)):
            identity = await self.credential_store.find_by_id(identity_id)
            if identity is None:
                logfire.warn("Identity not found", identity_id=str(identity_id))
                raise NotFoundError("Identity", str(identity_id), "Account not found.")
            return identity

    async def find_by_email(self, email: EmailAddress) -> Optional[Identity]:
        """Find identity by email.

        Args:
            email: Normalized email

        Returns:
            Identity if found, None otherwise
        """
        with logfire.span(
            "identity_service.find_by_email", email=redact_email(email.root)
        ):
            return await self.credential_store.find_by_email(email)

    async def find_by_subject_id(self, subject_id: str) -> Optional[Identity]:
        """Find identity by Google subject ID.

        Args:
            subject_id: Google subject ID

        Returns:
            Identity if found, None otherwise
        """
        with logfire.span("identity_service.find_by_subject_id"):
            return await self.credential_store.find_by_subject_id(subject_id)

    async def ensure_available(
        self,
        email: EmailAddress,
        subject_id: str | None = None,
        mobile_number: str | None = None,
    ) -> None:
        """Check that no identity already holds any of the unique values.

        This early check gives a clean error in the common case; the store's
        unique indexes still reject a concurrent duplicate in ``create``.

        Args:
            email: Email to claim
            subject_id: Google subject ID to claim, if any
            mobile_number: Mobile number to claim, if any

        Raises:
            ConflictError: If any value is taken (the field is not disclosed)
        """
        with logfire.span(
            "identity_service.ensure_available", email=redact_email(email.root)
        ):
            taken = await self.credential_store.find_by_email(email) is not None
            if not taken and subject_id:
                taken = await self.credential_store.find_by_subject_id(subject_id) is not None
            if not taken and mobile_number:
                taken = (
                    await self.credential_store.find_by_mobile_number(mobile_number)
                    is not None
                )
            if taken:
                logfire.warn("Identity already exists", email=redact_email(email.root))
                raise ConflictError()

    async def create(self, identity: Identity) -> Identity:
        """Persist a new identity.

        Args:
            identity: Identity to create

        Returns:
            Created identity

        Raises:
            ConflictError: If a unique value is already taken
        """
        with logfire.span(
            "identity_service.create",
            identity_id=str(identity.id),
            role=identity.role.value,
        ):
            created = await self.credential_store.create(identity)
            logfire.info(
                "Identity created",
                identity_id=str(created.id),
                role=created.role.value,
                google=created.google_subject_id is not None,
            )
            return created

    async def set_refresh_fingerprint(
        self, identity_id: IdentityId, fingerprint: str | None
    ) -> None:
        """Store (or clear) the fingerprint of the current refresh token."""
        with logfire.span(
            "identity_service.set_refresh_fingerprint",
            identity_id=str(identity_id),
            cleared=fingerprint is None,
        ):
            await self.credential_store.update_refresh_fingerprint(
                identity_id, fingerprint
            )

    async def replace_refresh_fingerprint(
        self, identity_id: IdentityId, expected: str, fingerprint: str
    ) -> bool:
        """Move the session to a new refresh token if ``expected`` is still current.

        Returns:
            True if the stored fingerprint was ``expected`` and is now replaced
        """
        with logfire.span(
            "identity_service.replace_refresh_fingerprint", identity_id=str(identity_id)
        ):
            return await self.credential_store.replace_refresh_fingerprint(
                identity_id, expected, fingerprint
            )

    async def set_password_hash(self, identity_id: IdentityId, password_hash: str) -> None:
        """Replace an identity's password hash."""
        with logfire.span(
            "identity_service.set_password_hash", identity_id=str(identity_id)
        ):
            await self.credential_store.update_password_hash(identity_id, password_hash)
            logfire.info("Password updated", identity_id=str(identity_id))

    async def mark_email_verified(self, email: EmailAddress) -> bool:
        """Flag the identity owning ``email`` as verified, if there is one.

        Returns:
            True if an identity was updated
        """
        with logfire.span(
            "identity_service.mark_email_verified", email=redact_email(email.root)
        ):
            return await self.credential_store.mark_email_verified(email)
