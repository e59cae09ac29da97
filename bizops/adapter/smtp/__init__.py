"""SMTP email adapter."""

from .sender import MockEmailSender, SentEmail, SmtpEmailSender

__all__ = ["MockEmailSender", "SentEmail", "SmtpEmailSender"]
