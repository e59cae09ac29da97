"""PostgreSQL implementation of VerificationCode repository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from bizops.domain.model import VerificationCode
from bizops.domain.repository import VerificationCodeRepository
from bizops.domain.value import EmailAddress
from bizops.persistence.mappers import (
    row_to_verification_code,
    verification_code_to_dict,
)
from bizops.persistence.tables import verification_codes_table


class PostgresVerificationCodeRepository(VerificationCodeRepository):
    """PostgreSQL implementation of VerificationCodeRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def upsert(self, code: VerificationCode) -> None:
        """Store a code, replacing any existing one for the email."""
        values = verification_code_to_dict(code)
        stmt = (
            insert(verification_codes_table)
            .values(**values)
            .on_conflict_do_update(
                index_elements=[verification_codes_table.c.email],
                set_={"code": values["code"], "expires_at": values["expires_at"]},
            )
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def consume(self, email: EmailAddress, code: str, now: datetime) -> bool:
        """Delete the code if it matches and is unexpired, in one statement.

        Row locking makes concurrent deletes of the same row serialize; only
        the first one returns it.
        """
        stmt = (
            delete(verification_codes_table)
            .where(verification_codes_table.c.email == email.root)
            .where(verification_codes_table.c.code == code)
            .where(verification_codes_table.c.expires_at > now)
            .returning(verification_codes_table.c.email)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def find(self, email: EmailAddress) -> Optional[VerificationCode]:
        """Get the current code for an email."""
        stmt = select(verification_codes_table).where(
            verification_codes_table.c.email == email.root
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_verification_code(dict(row)) if row else None

    async def delete_expired(self, now: datetime) -> int:
        """Remove every expired code."""
        stmt = delete(verification_codes_table).where(
            verification_codes_table.c.expires_at <= now
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0
