"""PostgreSQL repository implementations."""

from bizops.persistence.repository.identity import PostgresCredentialStore
from bizops.persistence.repository.verification_code import (
    PostgresVerificationCodeRepository,
)

__all__ = [
    "PostgresCredentialStore",
    "PostgresVerificationCodeRepository",
]
