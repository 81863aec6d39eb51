"""
GasMonitor: the surface the presentation layer talks to
"""
import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, Sequence

from . import config as settings
from .core.alert_engine import AlertEngine
from .core.classifier import ThresholdClassifier
from .core.config_validator import AlertConfigValidator, ValidationResult
from .core.device_registry import DeviceRegistry
from .core.history import HistoricalAggregator
from .core.ingestion import IngestionLoop
from .models.alert import AlertConfig, DeviceAlertState
from .models.device import Device
from .models.history import Bucket, Metric, TimeRange
from .models.reading import GasReading

logger = logging.getLogger(__name__)


class GasMonitor:
    """Wires registry, history, alerts and ingestion together"""

    def __init__(self, source, dispatcher=None, exporters: Optional[Sequence] = None,
                 config: Optional[AlertConfig] = None,
                 poll_interval: float = settings.POLL_INTERVAL_SECONDS,
                 sweep_interval: float = settings.SWEEP_INTERVAL_SECONDS,
                 heartbeat_timeout: float = settings.HEARTBEAT_TIMEOUT_SECONDS,
                 clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self.registry = DeviceRegistry(heartbeat_timeout=heartbeat_timeout, clock=clock)
        self.aggregator = HistoricalAggregator(clock=clock)
        self.engine = AlertEngine(dispatcher=dispatcher, config=config, clock=clock)
        self.validator = AlertConfigValidator(self.engine)
        self.loop = IngestionLoop(
            source, self.registry, self.aggregator, self.engine,
            poll_interval=poll_interval, sweep_interval=sweep_interval, exporters=exporters,
        )
        self.registry.add_removal_listener(self.engine.forget)
        self.registry.add_removal_listener(self.aggregator.forget)

    # lifecycle

    def start(self):
        self.loop.start()
        logger.info(f"Monitoring {len(self.registry)} devices")

    async def stop(self):
        await self.loop.stop()
        await self.engine.drain()

    # devices

    def add_device(self, name: str, location: str, ip_address: str) -> Device:
        device = self.registry.register(name, location, ip_address)
        self.loop.resume_device(device.id)
        return device

    async def remove_device(self, device_id: str):
        self.registry.remove(device_id)
        await self.loop.stop_device(device_id, removed=True)

    def list_devices(self) -> List[Device]:
        return self.registry.list_devices()

    def restore(self, devices: Iterable[Device], readings: Iterable[GasReading]) -> int:
        """Reload saved devices, then replay readings for those devices only"""
        self.registry.restore(devices)
        return self.aggregator.restore(readings, is_known=self.registry.__contains__)

    def alert_state(self, device_id: str) -> Optional[DeviceAlertState]:
        return self.engine.state(device_id)

    # history

    def history(self, metric: Metric = Metric.GAS_LEVEL, time_range: Optional[TimeRange] = None,
                device_id: Optional[str] = None) -> List[Bucket]:
        return self.aggregator.query(metric, time_range, device_id)

    def select_range(self, time_range: TimeRange):
        if time_range is not self.aggregator.selected_range:
            self.aggregator.set_range(time_range)

    # configuration

    @property
    def config(self) -> AlertConfig:
        return self.engine.config

    def submit_config(self, draft: AlertConfig) -> ValidationResult:
        """Validate and commit a settings edit, then re-classify every device"""
        result = self.validator.submit(draft)
        if result.ok:
            self._reclassify(result.config)
        return result

    def reset_config(self) -> ValidationResult:
        return self.submit_config(AlertConfig.defaults())

    def _reclassify(self, config: AlertConfig):
        # Thresholds may move a device to another tier without a new reading
        for device in self.registry.list_devices():
            tier = ThresholdClassifier.classify(device.last_gas_level, config)
            if tier is self.registry.tier_of(device.id):
                continue
            self.registry.refresh_tier(device.id, tier)
            if self.engine.state(device.id) is not None:
                # Same time base as ingestion, which snoozes on reading time
                self.engine.evaluate(device.id, tier, config, now=device.last_seen_at)
