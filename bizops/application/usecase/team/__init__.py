"""Team management use cases."""

from .create_member import CreateMemberUseCase

__all__ = ["CreateMemberUseCase"]
