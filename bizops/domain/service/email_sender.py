"""Outbound email port."""


class EmailSender:
    """Sends plain-text transactional email."""

    async def send(self, to: str, subject: str, body: str) -> None:
        """Send a single message.

        Args:
            to: Recipient address
            subject: Subject line
            body: Plain-text body

        Raises:
            EmailDeliveryError: If the message could not be handed off
        """
        raise NotImplementedError
