"""Create team member use case."""

from uuid import uuid4

import logfire
from pydantic import BaseModel, Field

from bizops.application.usecase.base import RequestModel, parse_email
from bizops.domain.error import ValidationError
from bizops.domain.model import Identity, PublicIdentity
from bizops.domain.service import IdentityService, PasswordService
from bizops.domain.value import AccountStatus, IdentityId, Permission, Role
from bizops.util.logging import redact_email

# Admins cannot mint other admins through the API
ASSIGNABLE_ROLES = (Role.USER, Role.MEMBER)


class CreateMemberRequest(RequestModel):
    """Create team member request."""

    name: str = Field(min_length=1, max_length=255)
    email: str
    password: str
    role: str
    status: str
    permissions: list[str] = Field(default_factory=list)


class CreateMemberResponse(BaseModel):
    """Create team member response."""

    message: str
    identity: PublicIdentity


class CreateMemberUseCase:
    """Use case for an admin adding a user or member to the team.

    Created accounts have a pre-verified email. No session is opened; the
    admin's own session is unaffected.
    """

    def __init__(
        self, identity_service: IdentityService, password_service: PasswordService
    ) -> None:
        """Initialize create member use case.

        Args:
            identity_service: Identity domain service
            password_service: Password hashing and policy
        """
        self.identity_service = identity_service
        self.password_service = password_service

    async def execute(self, request: CreateMemberRequest) -> CreateMemberResponse:
        """Execute create member flow.

        Steps:
        1. Validate email, password strength, role and status
        2. Validate permissions against the catalogue (members only)
        3. Check uniqueness, hash and create

        Raises:
            InvalidEmailError: If the email is malformed
            WeakPasswordError: If the password fails the strength policy
            ValidationError: If role, status or a permission is unknown
            ConflictError: If the email is taken
        """
        name = request.name.strip()
        if not name:
            raise ValidationError("All fields are required.")
        email = parse_email(request.email)
        self.password_service.ensure_strong(request.password)
        role = self._parse_role(request.role)
        status = self._parse_status(request.status)

        permissions: tuple[Permission, ...] = ()
        if role == Role.MEMBER:
            permissions = self._parse_permissions(request.permissions)

        with logfire.span(
            "create_member", email=redact_email(email.root), role=role.value
        ):
            await self.identity_service.ensure_available(email)
            password_hash = await self.password_service.hash(request.password)
            identity = await self.identity_service.create(
                Identity(
                    id=IdentityId(uuid4()),
                    email=email,
                    name=name,
                    password_hash=password_hash,
                    is_email_verified=True,
                    role=role,
                    status=status,
                    permissions=permissions,
                )
            )

            return CreateMemberResponse(
                message="Team member created successfully.",
                identity=PublicIdentity.from_identity(identity),
            )

    @staticmethod
    def _parse_role(raw: str) -> Role:
        value = raw.strip().lower()
        for role in ASSIGNABLE_ROLES:
            if role.value == value:
                return role
        raise ValidationError("Invalid role specified.")

    @staticmethod
    def _parse_status(raw: str) -> AccountStatus:
        try:
            return AccountStatus(raw.strip().lower())
        except ValueError:
            raise ValidationError("Invalid status specified.")

    @staticmethod
    def _parse_permissions(raw: list[str]) -> tuple[Permission, ...]:
        try:
            # Duplicates collapse; order of first appearance is kept
            return tuple(dict.fromkeys(Permission(name) for name in raw))
        except ValueError:
            raise ValidationError("Some permissions are invalid.")
