"""
Shared fixtures
"""
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from lpgmonitor.models.reading import GasReading, SensorSample

T0 = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock for time dependent tests"""

    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_reading(clock):
    """Build a GasReading, timestamped at the clock unless given"""
    def _make(device_id="lpg-001", gas_level=300, temperature=24.0, humidity=55.0,
              timestamp=None, location="Kitchen Area"):
        return GasReading(
            id=uuid.uuid4().hex,
            device_id=device_id,
            gas_level=gas_level,
            temperature=temperature,
            humidity=humidity,
            timestamp=timestamp or clock.now,
            location=location,
        )
    return _make


@pytest.fixture
def make_sample(make_reading):
    def _make(battery_level=None, **kwargs):
        return SensorSample(reading=make_reading(**kwargs), battery_level=battery_level)
    return _make
