# ============================================================================
# SMTP MAILER
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Infrastructure - Artifact delivery
# PURPOSE: Send the export archive as an email attachment
# CREATED: 19 OCT 2026
# ============================================================================
"""
SMTP delivery for export archives.

``SmtpMailer.send`` raises DeliveryError; callers that treat delivery as
best-effort catch it. ``try_send`` is the boolean convenience wrapper.
"""

import mimetypes
import smtplib
from dataclasses import dataclass, field
from email.message import EmailMessage
from pathlib import Path
from typing import List

from core.config.options import EmailOptions
from core.errors import DeliveryError
from core.logging import ComponentType, get_logger

logger = get_logger(__name__, ComponentType.INFRASTRUCTURE)


@dataclass
class MailMessage:
    """One outgoing message with file attachments."""
    from_address: str
    to_address: str
    subject: str
    body: str
    attachments: List[Path] = field(default_factory=list)

    def to_email(self) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.from_address
        msg["To"] = self.to_address
        msg["Subject"] = self.subject
        msg.set_content(self.body)

        for path in self.attachments:
            path = Path(path)
            ctype, _ = mimetypes.guess_type(path.name)
            maintype, subtype = (ctype or "application/octet-stream").split("/", 1)
            msg.add_attachment(
                path.read_bytes(),
                maintype=maintype,
                subtype=subtype,
                filename=path.name,
            )
        return msg


class SmtpMailer:
    """
    Delivery collaborator backed by smtplib.

    Args:
        options: SMTP host, port, credentials and TLS flag
        timeout: Socket timeout in seconds
    """

    def __init__(self, options: EmailOptions, timeout: float = 60.0):
        self.options = options
        self.timeout = timeout

    def send(self, message: MailMessage) -> None:
        """
        Send ``message``.

        Raises:
            DeliveryError: Attachment unreadable or SMTP failure
        """
        try:
            email = message.to_email()
            with smtplib.SMTP(self.options.host, self.options.port, timeout=self.timeout) as smtp:
                if self.options.use_tls:
                    smtp.starttls()
                smtp.login(self.options.username, self.options.password)
                smtp.send_message(email)
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryError(
                f"Failed to send mail to {message.to_address}: {e}",
                operation="send mail",
                object_name=message.to_address,
            ) from e

        logger.info(f"Mail sent to {message.to_address} with {len(message.attachments)} attachment(s)")

    def try_send(self, message: MailMessage) -> bool:
        """Send and report success instead of raising."""
        try:
            self.send(message)
            return True
        except DeliveryError as e:
            logger.error(str(e))
            return False


__all__ = ["MailMessage", "SmtpMailer"]
