"""Operator notifications.

Provides the notification sink interface, the SMTP email sink, a
log-only sink and the HTML report templates.
"""

from recsweep.core.config import SweepConfig
from recsweep.notify.base import DeliveryReceipt, LogNotifier, NotificationSink
from recsweep.notify.mailer import EmailNotifier


def create_notifier(config: SweepConfig) -> NotificationSink:
    """Pick the notification sink for a configuration.

    Email is used when enabled with at least one recipient; otherwise
    notifications only go to the log.
    """
    if config.email.enabled and config.email.to:
        return EmailNotifier(config.email)
    return LogNotifier()


__all__ = [
    "DeliveryReceipt",
    "EmailNotifier",
    "LogNotifier",
    "NotificationSink",
    "create_notifier",
]
