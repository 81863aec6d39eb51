"""
Notification channels and dispatcher
"""
from .base import NotificationChannelBase
from .console import ConsoleNotifier
from .http_sender import HttpNotifier
from .dispatcher import NotificationDispatcher

__all__ = [
    "NotificationChannelBase",
    "ConsoleNotifier",
    "HttpNotifier",
    "NotificationDispatcher",
]
