"""
HTTP gateway notifier for email and SMS
"""
import asyncio
import json
import logging
from typing import Any, Dict

import aiohttp

from .base import NotificationChannelBase
from ..models.alert import Channel, Notification

logger = logging.getLogger(__name__)


class HttpNotifier(NotificationChannelBase):
    """Posts alerts to an email/SMS gateway webhook"""

    def __init__(self, url: str, channel: Channel = Channel.EMAIL,
                 timeout: float = 10.0, max_retries: int = 3):
        """
        Args:
            url: gateway endpoint
            channel: EMAIL or SMS, selects the recipient field
            timeout: request timeout in seconds
            max_retries: retries after the first attempt
        """
        self.url = url
        self.channel = channel
        self.timeout = timeout
        self.max_retries = max_retries
        self.headers = {
            "Content-Type": "application/json",
            "User-Agent": "lpgmonitor/1.0"
        }

    def set_authentication(self, auth_type: str, token: str):
        """
        Args:
            auth_type: e.g. "Bearer" or "Basic"
            token: credential
        """
        self.headers["Authorization"] = f"{auth_type} {token}"

    def add_headers(self, custom_headers: Dict[str, str]):
        self.headers.update(custom_headers)

    def build_payload(self, notification: Notification) -> Dict[str, Any]:
        payload = notification.to_dict()
        payload["channel"] = self.channel.value
        if self.channel is Channel.SMS:
            payload["recipient"] = notification.phone_number
        else:
            payload["recipient"] = notification.email_address
        return payload

    async def _post(self, payload: Dict[str, Any]) -> bool:
        for attempt in range(self.max_retries + 1):
            try:
                timeout = aiohttp.ClientTimeout(total=self.timeout)
                async with aiohttp.ClientSession(timeout=timeout) as session:
                    async with session.post(
                        self.url,
                        data=json.dumps(payload),
                        headers=self.headers
                    ) as response:
                        if response.status in (200, 201, 202):
                            logger.info(f"{self.channel.value} notification sent: {self.url}")
                            return True
                        error_text = await response.text()
                        logger.warning(
                            f"{self.channel.value} send failed (attempt {attempt + 1}/{self.max_retries + 1}): "
                            f"status={response.status}, response={error_text}"
                        )
            except Exception as e:
                logger.error(
                    f"{self.channel.value} send error (attempt {attempt + 1}/{self.max_retries + 1}): {e}"
                )

            if attempt < self.max_retries:
                # Exponential backoff
                await asyncio.sleep((2 ** attempt) * 1.0)

        logger.error(f"Giving up on {self.channel.value} notification after {self.max_retries + 1} attempts")
        return False

    async def send(self, notification: Notification) -> bool:
        try:
            return await self._post(self.build_payload(notification))
        except Exception as e:
            logger.error(f"{self.channel.value} notification error: {e}")
            return False
