"""
Polling and liveness loops that feed readings through the pipeline
"""
import asyncio
import logging
from typing import Dict, List, Optional, Sequence, Set

from .alert_engine import AlertEngine
from .classifier import ThresholdClassifier
from .device_registry import DeviceRegistry
from .history import HistoricalAggregator
from .locks import KeyedLocks
from .scheduler import PeriodicTask
from ..models.alert import RiskTier
from ..models.device import Device
from ..models.reading import SensorSample

logger = logging.getLogger(__name__)


class IngestionLoop:
    """Drives the poll cycle and the liveness sweep.

    Each device is polled under its own lock, and every reading goes through
    classify -> registry -> history -> alerts in that order. A failure for
    one device is logged and never stops the others.
    """

    def __init__(self, source, registry: DeviceRegistry, aggregator: HistoricalAggregator,
                 engine: AlertEngine, poll_interval: float = 2.0, sweep_interval: float = 10.0,
                 exporters: Optional[Sequence] = None, locks: Optional[KeyedLocks] = None):
        """
        Args:
            source: a ReadingSourceBase implementation
            registry: device registry
            aggregator: history windows
            engine: alert engine (owns the active AlertConfig)
            poll_interval: seconds between poll cycles
            sweep_interval: seconds between liveness sweeps
            exporters: DataExporterBase instances fed with every processed reading
            locks: per-device locks shared with other writers
        """
        self.source = source
        self.registry = registry
        self.aggregator = aggregator
        self.engine = engine
        self.exporters = list(exporters or [])
        self.locks = locks or KeyedLocks()
        self._poll_task = PeriodicTask("lpg-poll", poll_interval, self.poll_once)
        self._sweep_task = PeriodicTask("lpg-sweep", sweep_interval, self.sweep_once)
        self._paused: Set[str] = set()
        self._inflight: Dict[str, asyncio.Task] = {}
        self.failures = 0

    @property
    def is_running(self) -> bool:
        return self._poll_task.is_running or self._sweep_task.is_running

    def start(self):
        self._poll_task.start()
        self._sweep_task.start()

    async def stop(self):
        await self._poll_task.stop()
        await self._sweep_task.stop()
        for task in list(self._inflight.values()):
            task.cancel()
        if self._inflight:
            await asyncio.gather(*self._inflight.values(), return_exceptions=True)
        self._inflight.clear()

    async def stop_device(self, device_id: str, removed: bool = False):
        """Stop polling one device and cancel its in-flight poll.

        With ``removed`` the device is gone from the registry, so no pause
        marker is kept once the in-flight poll has finished.
        """
        self._paused.add(device_id)
        task = self._inflight.get(device_id)
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self.locks.discard(device_id)
        if removed:
            self._paused.discard(device_id)
        logger.info(f"Stopped monitoring {device_id}")

    def resume_device(self, device_id: str):
        self._paused.discard(device_id)

    def is_paused(self, device_id: str) -> bool:
        return device_id in self._paused

    async def poll_once(self):
        """Poll every active device once, concurrently"""
        devices = [d for d in self.registry.list_devices() if d.id not in self._paused]
        tasks = {}
        for device in devices:
            task = asyncio.create_task(self._poll_device(device), name=f"poll-{device.id}")
            tasks[device.id] = task
            self._inflight[device.id] = task

        results = await asyncio.gather(*tasks.values(), return_exceptions=True)
        for device_id, result in zip(tasks, results):
            if self._inflight.get(device_id) is tasks[device_id]:
                del self._inflight[device_id]
            if isinstance(result, asyncio.CancelledError):
                logger.debug(f"Poll for {device_id} cancelled")
            elif isinstance(result, Exception):
                self.failures += 1
                logger.error(f"Processing failed for {device_id}: {result}")

    async def _poll_device(self, device: Device):
        async with self.locks.lock(device.id):
            sample = await self.source.read(device)
            if sample is None:
                # No reading this cycle is not a connectivity failure
                return
            await self.process_sample(sample)

    async def process_sample(self, sample: SensorSample) -> Optional[RiskTier]:
        """Run one sample through the pipeline.

        Returns the tier, or None when the device is no longer registered.
        """
        reading = sample.reading
        config = self.engine.config
        tier = ThresholdClassifier.classify(reading.gas_level, config)

        device = self.registry.record_heartbeat(reading.device_id, reading, sample.battery_level, tier)
        if device is None:
            return None

        self.aggregator.append(reading)
        self.engine.evaluate(reading.device_id, tier, config, now=reading.timestamp)
        logger.debug(f"{reading.device_id}: {reading.gas_level} ppm -> {tier.value}")

        for exporter in self.exporters:
            try:
                await exporter.export(reading)
            except Exception as e:
                logger.error(f"Exporter {type(exporter).__name__} failed: {e}")
        return tier

    async def sweep_once(self) -> List[str]:
        return self.registry.sweep()
