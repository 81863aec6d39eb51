"""
Console notifier for audio and vibration alerts
"""
import logging

from .base import NotificationChannelBase
from ..models.alert import Channel, Notification

logger = logging.getLogger(__name__)


class ConsoleNotifier(NotificationChannelBase):
    """Prints alerts to the console in place of a speaker or vibration motor"""

    def __init__(self, channel: Channel = Channel.AUDIO, verbose: bool = False):
        """
        Args:
            channel: channel this notifier stands in for
            verbose: also print the notification payload
        """
        self.channel = channel
        self.verbose = verbose

    def set_verbose(self, verbose: bool):
        self.verbose = verbose

    def format_notification(self, notification: Notification) -> str:
        timestamp_str = notification.created_at.strftime("%Y-%m-%d %H:%M:%S")
        if self.channel is Channel.AUDIO:
            prefix = f"[{timestamp_str}] ALARM (volume {notification.alert_volume}%)"
        elif self.channel is Channel.VIBRATION:
            prefix = f"[{timestamp_str}] VIBRATE"
        else:
            prefix = f"[{timestamp_str}] {self.channel.value.upper()}"

        formatted = f"{prefix}: {notification.message()}"
        if self.verbose:
            formatted += f", Payload: {notification.to_dict()}"
        return formatted

    async def send(self, notification: Notification) -> bool:
        try:
            formatted_output = self.format_notification(notification)
            print(formatted_output)
            logger.debug(f"Console notification: {formatted_output}")
            return True
        except Exception as e:
            logger.error(f"Console notification error: {e}")
            return False
