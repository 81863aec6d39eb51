"""
Notification channel base class
"""
from abc import ABC, abstractmethod

from ..models.alert import Notification


class NotificationChannelBase(ABC):
    """Abstract base class for one delivery channel"""

    @abstractmethod
    async def send(self, notification: Notification) -> bool:
        """
        Deliver a notification

        Args:
            notification: the alert to deliver

        Returns:
            True when delivered, False otherwise
        """
        pass
