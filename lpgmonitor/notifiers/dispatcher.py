"""
Fans a notification out to its enabled channels
"""
import asyncio
import logging
from typing import Dict, Optional

from .base import NotificationChannelBase
from ..models.alert import Channel, DispatchReport, Notification

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Routes each channel of a notification to its registered handler.

    Channels are delivered concurrently; a missing handler or an exception
    counts as a failed channel. No retries happen here, handlers own that.
    """

    def __init__(self, channels: Optional[Dict[Channel, NotificationChannelBase]] = None):
        self.channels: Dict[Channel, NotificationChannelBase] = dict(channels or {})

    def register(self, channel: Channel, handler: NotificationChannelBase):
        self.channels[channel] = handler

    async def _send_one(self, channel: Channel, notification: Notification):
        handler = self.channels.get(channel)
        if handler is None:
            raise LookupError(f"No handler registered for {channel.value}")
        return await handler.send(notification)

    async def dispatch(self, notification: Notification) -> DispatchReport:
        report = DispatchReport(notification=notification)
        channels = sorted(notification.channels, key=lambda c: c.value)
        outcomes = await asyncio.gather(
            *(self._send_one(channel, notification) for channel in channels),
            return_exceptions=True,
        )

        for channel, outcome in zip(channels, outcomes):
            if isinstance(outcome, BaseException):
                report.results[channel] = False
                report.errors[channel] = str(outcome) or type(outcome).__name__
            elif outcome:
                report.results[channel] = True
            else:
                report.results[channel] = False
                report.errors[channel] = "channel reported failure"

        if report.succeeded:
            logger.debug(f"Dispatched {notification.tier.value} alert for {notification.device_id}")
        else:
            logger.warning(
                f"Dispatch for {notification.device_id} failed on "
                f"{sorted(channel.value for channel in report.failed_channels)}"
            )
        return report
