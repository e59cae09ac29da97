"""Strongly typed identifiers for bizops domain entities.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting.
"""

from typing import NewType
from uuid import UUID

IdentityId = NewType("IdentityId", UUID)
