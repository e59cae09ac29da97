"""Repository interfaces for bizops domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from bizops.domain.repository.identity import CredentialStore
from bizops.domain.repository.verification_code import VerificationCodeRepository

__all__ = [
    "CredentialStore",
    "VerificationCodeRepository",
]
