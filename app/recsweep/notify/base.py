"""Abstract base class for notification sinks.

This module defines the NotificationSink interface the evaluation cycle
and deletion scheduler report through, plus a sink that only logs.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass

from recsweep.errors import NotifyError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeliveryReceipt:
    """Proof of a delivered notification.

    Attributes:
        message_id: Identifier assigned to the message.
        recipients: Addresses the message was delivered to.
    """

    message_id: str
    recipients: tuple[str, ...] = ()


class NotificationSink(ABC):
    """Abstract base class for all notification sinks.

    Sinks deliver an HTML report under a subject line. Delivery failures
    are raised as NotifyError; use safe_send() where no failure may
    interrupt the caller.
    """

    @abstractmethod
    def send(self, subject: str, html_body: str) -> DeliveryReceipt:
        """Deliver a notification.

        Args:
            subject: Subject line.
            html_body: HTML-formatted report.

        Returns:
            DeliveryReceipt for the delivered message.

        Raises:
            NotifyError: If the message cannot be delivered.
        """

    def safe_send(self, subject: str, html_body: str) -> DeliveryReceipt | None:
        """Deliver a notification, logging instead of raising on failure.

        Returns:
            DeliveryReceipt, or None if delivery failed.
        """
        try:
            return self.send(subject, html_body)
        except NotifyError as e:
            logger.error("Notification '%s' not delivered: %s", subject, e)
        except Exception:
            logger.exception("Notification '%s' failed unexpectedly", subject)
        return None


class LogNotifier(NotificationSink):
    """Sink that writes notifications to the log instead of sending them."""

    def send(self, subject: str, html_body: str) -> DeliveryReceipt:
        message_id = uuid.uuid4().hex[:12]
        logger.info("Notification %s: %s (%d bytes)", message_id, subject, len(html_body))
        return DeliveryReceipt(message_id=message_id)
