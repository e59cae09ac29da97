"""Email infrastructure providers."""

from dishka import Scope, provide

from bizops.adapter.smtp import SmtpEmailSender
from bizops.config import EmailSettings
from bizops.domain.service import EmailSender
from bizops.util.di.base import ProviderBase


class EmailProvider(ProviderBase):
    """Email component base."""

    __mock_component__ = "email"


class ProdEmailProvider(EmailProvider):
    """Production email provider sending through SMTP."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_email_sender(self, settings: EmailSettings) -> EmailSender:
        """Provide SMTP email sender."""
        return SmtpEmailSender(settings)
