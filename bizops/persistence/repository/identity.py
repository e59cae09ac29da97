"""PostgreSQL implementation of the credential store."""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bizops.domain.error import ConflictError
from bizops.domain.model import Identity
from bizops.domain.repository import CredentialStore
from bizops.domain.value import EmailAddress, IdentityId
from bizops.persistence.mappers import identity_to_dict, row_to_identity
from bizops.persistence.tables import identities_table


class PostgresCredentialStore(CredentialStore):
    """PostgreSQL implementation of CredentialStore."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def _find_one(self, *conditions) -> Optional[Identity]:
        stmt = select(identities_table).where(*conditions)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_identity(dict(row)) if row else None

    async def find_by_id(self, identity_id: IdentityId) -> Optional[Identity]:
        """Find an identity by ID."""
        return await self._find_one(identities_table.c.id == identity_id)

    async def find_by_email(self, email: EmailAddress) -> Optional[Identity]:
        """Find an identity by its normalized email."""
        return await self._find_one(identities_table.c.email == email.root)

    async def find_by_subject_id(self, subject_id: str) -> Optional[Identity]:
        """Find an identity by its Google subject ID."""
        return await self._find_one(identities_table.c.google_subject_id == subject_id)

    async def find_by_mobile_number(self, mobile_number: str) -> Optional[Identity]:
        """Find an identity by its mobile number."""
        return await self._find_one(identities_table.c.mobile_number == mobile_number)

    async def create(self, identity: Identity) -> Identity:
        """Insert a new identity.

        The insert runs in a savepoint so a unique violation leaves the
        surrounding request transaction usable.

        Raises:
            ConflictError: If a unique column already holds the value
        """
        stmt = identities_table.insert().values(**identity_to_dict(identity))
        try:
            async with self.session.begin_nested():
                await self.session.execute(stmt)
        except IntegrityError as e:
            raise ConflictError() from e
        return identity

    async def update_refresh_fingerprint(
        self, identity_id: IdentityId, fingerprint: Optional[str]
    ) -> None:
        """Overwrite (or clear) the refresh-token fingerprint."""
        stmt = (
            identities_table.update()
            .where(identities_table.c.id == identity_id)
            .values(refresh_token_fingerprint=fingerprint, updated_at=func.now())
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def replace_refresh_fingerprint(
        self, identity_id: IdentityId, expected: str, fingerprint: str
    ) -> bool:
        """Compare-and-set the fingerprint in a single conditional UPDATE.

        A concurrent rotation blocks on the row lock and then re-evaluates
        the WHERE clause against the committed value, so it matches nothing.
        """
        stmt = (
            identities_table.update()
            .where(
                identities_table.c.id == identity_id,
                identities_table.c.refresh_token_fingerprint == expected,
            )
            .values(refresh_token_fingerprint=fingerprint, updated_at=func.now())
            .returning(identities_table.c.id)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def update_password_hash(
        self, identity_id: IdentityId, password_hash: str
    ) -> None:
        """Replace the password hash."""
        stmt = (
            identities_table.update()
            .where(identities_table.c.id == identity_id)
            .values(password_hash=password_hash, updated_at=func.now())
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def mark_email_verified(self, email: EmailAddress) -> bool:
        """Flag the identity owning ``email`` as verified."""
        stmt = (
            identities_table.update()
            .where(identities_table.c.email == email.root)
            .values(is_email_verified=True, updated_at=func.now())
            .returning(identities_table.c.id)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None
