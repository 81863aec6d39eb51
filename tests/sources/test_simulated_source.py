"""
Tests for the simulated reading source
"""
import random

import pytest

from lpgmonitor.models.device import Device
from lpgmonitor.sources.base import ReadingSourceBase
from lpgmonitor.sources.simulated import SimulatedReadingSource


@pytest.fixture
def device():
    return Device("lpg-001", "Kitchen Sensor", "Kitchen Area", "192.168.1.101", battery_level=85)


class TestSimulatedReadingSource:
    """Test cases for SimulatedReadingSource"""

    def test_base_source_is_abstract(self):
        with pytest.raises(TypeError):
            ReadingSourceBase()

    @pytest.mark.asyncio
    async def test_generates_plausible_readings(self, device, clock):
        source = SimulatedReadingSource(spike_chance=0.0, dropout_chance=0.0,
                                        rng=random.Random(42), clock=clock)

        for _ in range(50):
            sample = await source.read(device)
            reading = sample.reading
            assert 0 <= reading.gas_level <= 500
            assert 20.0 <= reading.temperature <= 35.0
            assert 40.0 <= reading.humidity <= 70.0
            assert reading.device_id == "lpg-001"
            assert reading.location == "Kitchen Area"
            assert reading.timestamp == clock.now

    @pytest.mark.asyncio
    async def test_spikes_raise_gas_level(self, device):
        source = SimulatedReadingSource(spike_chance=1.0, dropout_chance=0.0, rng=random.Random(7))
        levels = [(await source.read(device)).reading.gas_level for _ in range(50)]
        assert max(levels) > 500

    @pytest.mark.asyncio
    async def test_dropout_returns_nothing(self, device):
        source = SimulatedReadingSource(dropout_chance=1.0)
        assert await source.read(device) is None

    @pytest.mark.asyncio
    async def test_battery_drains(self, device):
        source = SimulatedReadingSource(dropout_chance=0.0, battery_drain=1.0, rng=random.Random(1))

        first = await source.read(device)
        second = await source.read(device)

        assert first.battery_level == 84
        assert second.battery_level == 83
