"""Domain model entities for bizops."""

from bizops.domain.model.identity import Identity, PublicIdentity
from bizops.domain.model.verification_code import VerificationCode

__all__ = [
    "Identity",
    "PublicIdentity",
    "VerificationCode",
]
