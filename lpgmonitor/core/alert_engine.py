"""
Per-device alert state machine with snooze and channel gating
"""
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Set

from ..errors import DispatchError
from ..models.alert import (
    AlertConfig,
    DeviceAlertState,
    DispatchReport,
    Notification,
    RiskTier,
)

logger = logging.getLogger(__name__)

ReportCallback = Callable[[DispatchReport], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AlertEngine:
    """Decides when a device's classification turns into a notification.

    A worsening tier fires once, then the device is snoozed for
    ``snooze_time_minutes``. During the snooze nothing re-fires, not even a
    warning -> danger escalation. Returning to safe clears the snooze.
    """

    def __init__(self, dispatcher=None, config: Optional[AlertConfig] = None,
                 clock: Callable[[], datetime] = _utcnow):
        """
        Args:
            dispatcher: object with ``async dispatch(notification) -> DispatchReport``;
                None disables delivery
            config: initial configuration, factory defaults if omitted
            clock: returns the current time (timezone aware)
        """
        self.dispatcher = dispatcher
        self._config = config or AlertConfig.defaults()
        self._clock = clock
        self._states: Dict[str, DeviceAlertState] = {}
        self._pending: Set[asyncio.Task] = set()
        self._report_callbacks: List[ReportCallback] = []

    @property
    def config(self) -> AlertConfig:
        return self._config

    def replace_config(self, config: AlertConfig):
        """Swap in an already validated configuration"""
        self._config = config
        logger.info(
            f"Alert config updated: warning={config.warning_threshold} "
            f"danger={config.danger_threshold} snooze={config.snooze_time_minutes}min"
        )

    def add_report_callback(self, callback: ReportCallback):
        self._report_callbacks.append(callback)

    def state(self, device_id: str) -> Optional[DeviceAlertState]:
        state = self._states.get(device_id)
        if state is None:
            return None
        return DeviceAlertState(state.device_id, state.current_tier, state.snoozed_until)

    def states(self) -> List[DeviceAlertState]:
        return [self.state(device_id) for device_id in self._states]

    def forget(self, device_id: str):
        self._states.pop(device_id, None)

    def evaluate(self, device_id: str, tier: RiskTier,
                 config: Optional[AlertConfig] = None,
                 now: Optional[datetime] = None) -> Optional[Notification]:
        """Advance the device's alert state with a new classification.

        Returns the notification that was fired, or None.
        """
        # Read the config reference once so the whole evaluation sees one value
        config = config or self._config
        now = now or self._clock()

        state = self._states.get(device_id)
        if state is None:
            state = self._states[device_id] = DeviceAlertState(device_id)

        previous = state.current_tier
        state.current_tier = tier

        if tier is RiskTier.SAFE:
            if state.snoozed_until is not None:
                logger.info(f"Device {device_id} back to safe, alerts re-armed")
            state.snoozed_until = None
            return None

        if not tier.is_worse_than(previous):
            return None

        if state.is_snoozed(now):
            logger.debug(
                f"Suppressed {tier.value} alert for {device_id} "
                f"(snoozed until {state.snoozed_until.isoformat()})"
            )
            return None

        notification = Notification(
            device_id=device_id,
            tier=tier,
            channels=config.enabled_channels(),
            is_evacuation_advisory=tier is RiskTier.DANGER and config.auto_evacuation_alert,
            created_at=now,
            email_address=config.email_address,
            phone_number=config.phone_number,
            alert_volume=config.alert_volume,
        )
        state.snoozed_until = now + timedelta(minutes=config.snooze_time_minutes)
        logger.info(
            f"{tier.value.upper()} alert for {device_id} via "
            f"{sorted(channel.value for channel in notification.channels)}"
            f"{' (evacuation advisory)' if notification.is_evacuation_advisory else ''}"
        )
        self._dispatch(notification)
        return notification

    def _dispatch(self, notification: Notification):
        if self.dispatcher is None or not notification.channels:
            return
        try:
            task = asyncio.get_running_loop().create_task(self._deliver(notification))
        except RuntimeError:
            logger.warning(f"No running event loop, notification for {notification.device_id} not sent")
            return
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, notification: Notification) -> Optional[DispatchReport]:
        try:
            report = await self.dispatcher.dispatch(notification)
        except Exception as e:
            error = DispatchError("dispatcher", str(e), notification.device_id)
            logger.error(f"Dispatch failed for {notification.device_id}: {error}")
            return None

        for channel in report.failed_channels:
            error = DispatchError(channel.value, report.errors.get(channel, "unknown error"),
                                  notification.device_id)
            logger.warning(str(error))

        for callback in self._report_callbacks:
            try:
                callback(report)
            except Exception as e:
                logger.error(f"Report callback failed: {e}")
        return report

    async def drain(self):
        """Wait for in-flight dispatches to finish"""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
