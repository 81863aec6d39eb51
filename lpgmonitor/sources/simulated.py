"""
Random reading source for demos and tests
"""
import logging
import random
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from .base import ReadingSourceBase
from ..models.device import Device
from ..models.reading import GasReading, SensorSample

logger = logging.getLogger(__name__)


class SimulatedReadingSource(ReadingSourceBase):
    """Generates household LPG readings with occasional leaks and dropouts"""

    def __init__(self, spike_chance: float = 0.1, dropout_chance: float = 0.1,
                 battery_drain: float = 0.05, rng: Optional[random.Random] = None,
                 clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        """
        Args:
            spike_chance: probability of a gas spike on a poll
            dropout_chance: probability that a device sends nothing
            battery_drain: battery percent lost per sample
            rng: random generator, seeded ones give repeatable runs
            clock: timestamp source for generated readings
        """
        self.spike_chance = spike_chance
        self.dropout_chance = dropout_chance
        self.battery_drain = battery_drain
        self.rng = rng or random.Random()
        self._clock = clock
        self._battery: Dict[str, float] = {}

    def generate_reading(self, device: Device) -> GasReading:
        base_level = self.rng.random() * 500
        spike = self.rng.random() * 3000 if self.rng.random() < self.spike_chance else 0
        return GasReading(
            id=uuid.uuid4().hex,
            device_id=device.id,
            gas_level=round(base_level + spike),
            temperature=round(20 + self.rng.random() * 15, 1),
            humidity=round(40 + self.rng.random() * 30, 1),
            timestamp=self._clock(),
            location=device.location,
        )

    async def read(self, device: Device) -> Optional[SensorSample]:
        if self.rng.random() < self.dropout_chance:
            logger.debug(f"Simulated dropout for {device.id}")
            return None

        battery = self._battery.get(device.id, float(device.battery_level))
        battery = max(0.0, battery - self.battery_drain)
        self._battery[device.id] = battery
        return SensorSample(reading=self.generate_reading(device), battery_level=int(battery))
