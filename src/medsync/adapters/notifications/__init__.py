"""Notification adapters for different channels."""

from medsync.adapters.notifications.email import EmailConfig, EmailNotifier
from medsync.adapters.notifications.sms import SmsConfig, SmsNotifier

__all__ = [
    "EmailNotifier",
    "EmailConfig",
    "SmsNotifier",
    "SmsConfig",
]
