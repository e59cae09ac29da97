"""SMTP email sender implementation."""

from dataclasses import dataclass
from email.message import EmailMessage

import aiosmtplib
import logfire

from bizops.adapter.error import EmailDeliveryError
from bizops.config import EmailSettings
from bizops.domain.service.email_sender import EmailSender
from bizops.util.logging import redact_email


class SmtpEmailSender(EmailSender):
    """Sends email through an SMTP relay using aiosmtplib."""

    def __init__(self, settings: EmailSettings) -> None:
        """Initialize SMTP sender.

        Args:
            settings: SMTP connection and sender identity
        """
        self.settings = settings

    async def send(self, to: str, subject: str, body: str) -> None:
        """Send a plain-text message.

        Raises:
            EmailDeliveryError: If SMTP is not configured or the relay refuses
        """
        if not self.settings.smtp_host or not self.settings.from_email:
            logfire.error("SMTP is not configured", to=redact_email(to))
            raise EmailDeliveryError("SMTP is not configured")

        message = EmailMessage()
        message["From"] = f"{self.settings.from_name} <{self.settings.from_email}>"
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)

        with logfire.span("smtp.send", to=redact_email(to), subject=subject):
            try:
                await aiosmtplib.send(
                    message,
                    hostname=self.settings.smtp_host,
                    port=self.settings.smtp_port,
                    username=self.settings.smtp_user,
                    password=self.settings.smtp_password,
                    start_tls=self.settings.use_tls,
                    timeout=self.settings.timeout_seconds,
                )
            except (aiosmtplib.SMTPException, OSError) as e:
                logfire.error("Email delivery failed", to=redact_email(to), error=str(e))
                raise EmailDeliveryError(f"Failed to send email: {e}") from e

            logfire.info("Email sent", to=redact_email(to), subject=subject)


@dataclass(frozen=True)
class SentEmail:
    """A message captured by ``MockEmailSender``."""

    to: str
    subject: str
    body: str


class MockEmailSender(EmailSender):
    """Mock email sender for testing.

    Captures messages in ``outbox`` instead of sending them. Set ``fail``
    to simulate a relay outage.
    """

    def __init__(self) -> None:
        """Initialize with an empty outbox."""
        self.outbox: list[SentEmail] = []
        self.fail = False

    async def send(self, to: str, subject: str, body: str) -> None:
        """Record the message, or raise if ``fail`` is set."""
        if self.fail:
            raise EmailDeliveryError("Mock email delivery failure")
        self.outbox.append(SentEmail(to=to, subject=subject, body=body))

    def last_to(self, to: str) -> SentEmail | None:
        """Most recent message sent to ``to``, if any."""
        for message in reversed(self.outbox):
            if message.to == to:
                return message
        return None

    def last_code_for(self, to: str) -> str | None:
        """Extract the numeric code from the latest message to ``to``."""
        message = self.last_to(to)
        if message is None:
            return None
        for word in message.body.replace(".", " ").split():
            if word.isdigit():
                return word
        return None
