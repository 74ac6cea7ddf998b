"""SMTP email notification sink.

Sends HTML reports to the configured operator addresses using the
standard library SMTP client, with STARTTLS or implicit TLS.
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import make_msgid
from html.parser import HTMLParser

from recsweep.core.config import EmailSettings
from recsweep.errors import NotifyError
from recsweep.notify.base import DeliveryReceipt, NotificationSink

logger = logging.getLogger(__name__)


class _TextExtractor(HTMLParser):
    """Collects the text content of an HTML fragment."""

    def __init__(self) -> None:
        super().__init__()
        self._parts: list[str] = []

    def handle_data(self, data: str) -> None:
        if data.strip():
            self._parts.append(data.strip())

    def text(self) -> str:
        return "\n".join(self._parts)


def html_to_text(html_body: str) -> str:
    """Derive a plain-text fallback from an HTML body."""
    parser = _TextExtractor()
    parser.feed(html_body)
    return parser.text()


class EmailNotifier(NotificationSink):
    """Delivers notifications as multipart (text + HTML) email.

    Args:
        settings: Sender, recipients and SMTP transport settings.
    """

    def __init__(self, settings: EmailSettings) -> None:
        self._settings = settings

    def build_message(self, subject: str, html_body: str) -> EmailMessage:
        """Assemble the email for a notification."""
        settings = self._settings
        msg = EmailMessage()
        prefix = settings.subject_prefix
        msg["Subject"] = f"{prefix} {subject}" if prefix else subject
        msg["From"] = settings.from_address
        msg["To"] = ", ".join(settings.to)
        msg["Message-ID"] = make_msgid(domain=settings.from_address.rpartition("@")[2] or None)
        msg.set_content(html_to_text(html_body))
        msg.add_alternative(html_body, subtype="html")
        return msg

    def send(self, subject: str, html_body: str) -> DeliveryReceipt:
        """Send the notification over SMTP.

        Raises:
            NotifyError: On an unencodable header, or on connection,
                authentication or delivery failure.
        """
        try:
            msg = self.build_message(subject, html_body)
        except ValueError as e:
            raise NotifyError(f"Cannot build email '{subject}': {e}") from e
        smtp = self._settings.smtp

        try:
            if smtp.use_ssl:
                client: smtplib.SMTP = smtplib.SMTP_SSL(
                    smtp.host,
                    smtp.port,
                    timeout=smtp.timeout_seconds,
                    context=ssl.create_default_context(),
                )
            else:
                client = smtplib.SMTP(smtp.host, smtp.port, timeout=smtp.timeout_seconds)

            with client:
                if smtp.starttls and not smtp.use_ssl:
                    client.starttls(context=ssl.create_default_context())
                if smtp.username:
                    client.login(smtp.username, smtp.password)
                client.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise NotifyError(f"SMTP delivery to {smtp.host}:{smtp.port} failed: {e}") from e

        message_id = str(msg["Message-ID"])
        logger.info("Email sent: %s (%s)", subject, message_id)
        return DeliveryReceipt(message_id=message_id, recipients=tuple(self._settings.to))
