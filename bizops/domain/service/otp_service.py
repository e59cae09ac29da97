"""One-time email code domain service."""

import secrets
from datetime import timedelta

import logfire

from bizops.config import VerificationSettings
from bizops.domain.error import CodeExpiredError, CodeMismatchError, CodeNotFoundError
from bizops.domain.model.verification_code import VerificationCode
from bizops.domain.repository import VerificationCodeRepository
from bizops.domain.value import EmailAddress
from bizops.util.clock import Clock
from bizops.util.logging import redact_email

from .base import Service
from .email_sender import EmailSender


class OneTimeCodeService(Service):
    """Issues and verifies short-lived, single-use numeric codes.

    Knows nothing about accounts: the same codes back signup verification,
    password reset and the standalone verify endpoint.
    """

    def __init__(
        self,
        verification_code_repository: VerificationCodeRepository,
        email_sender: EmailSender,
        settings: VerificationSettings,
        clock: Clock,
    ) -> None:
        """Initialize one-time code service.

        Args:
            verification_code_repository: Code storage
            email_sender: Outbound email collaborator
            settings: Code length and lifetime
            clock: Time source
        """
        self.verification_code_repository = verification_code_repository
        self.email_sender = email_sender
        self.settings = settings
        self.clock = clock

    def generate_code(self) -> str:
        """Draw a code uniformly from the fixed-width numeric space."""
        width = self.settings.code_length
        return f"{secrets.randbelow(10**width):0{width}d}"

    async def issue(self, email: EmailAddress) -> None:
        """Issue a fresh code for ``email`` and mail it.

        Any live code for the same email is replaced. The code itself is
        never returned to the caller.

        Args:
            email: Recipient address

        Raises:
            EmailDeliveryError: If the code could not be sent
        """
        with logfire.span("otp_service.issue", email=redact_email(email.root)):
            expires_at = self.clock.now() + timedelta(
                minutes=self.settings.expiry_minutes
            )
            code = VerificationCode(
                email=email, code=self.generate_code(), expires_at=expires_at
            )
            await self.verification_code_repository.upsert(code)

            await self.email_sender.send(
                to=email.root,
                subject="Your verification code",
                body=(
                    f"Your verification code is {code.code}. "
                    f"It expires in {self.settings.expiry_minutes} minutes."
                ),
            )
            logfire.info(
                "Verification code issued",
                email=redact_email(email.root),
                expires_at=expires_at.isoformat(),
            )

    async def verify(self, email: EmailAddress, submitted_code: str) -> None:
        """Verify and consume a code.

        Success and deletion happen in one store operation; a replay of the
        same code afterwards finds nothing.

        Args:
            email: Email the code was issued for
            submitted_code: Code supplied by the user

        Raises:
            CodeNotFoundError: If no code exists for the email
            CodeExpiredError: If the code is at or past its expiry
            CodeMismatchError: If the code differs from the stored one
        """
        with logfire.span("otp_service.verify", email=redact_email(email.root)):
            now = self.clock.now()
            if await self.verification_code_repository.consume(
                email, submitted_code, now
            ):
                logfire.info("Verification code consumed", email=redact_email(email.root))
                return

            # Nothing consumed: classify the failure. This read does not
            # decide success, so racing with another caller is harmless.
            stored = await self.verification_code_repository.find(email)
            if stored is None:
                logfire.warn("Verification code not found", email=redact_email(email.root))
                raise CodeNotFoundError(email.root)
            if stored.is_expired(now):
                logfire.warn("Verification code expired", email=redact_email(email.root))
                raise CodeExpiredError()
            logfire.warn("Verification code mismatch", email=redact_email(email.root))
            raise CodeMismatchError()

    async def purge_expired(self) -> int:
        """Delete expired codes (storage hygiene only).

        Returns:
            Number of codes removed
        """
        with logfire.span("otp_service.purge_expired"):
            removed = await self.verification_code_repository.delete_expired(
                self.clock.now()
            )
            logfire.info("Expired verification codes purged", count=removed)
            return removed
