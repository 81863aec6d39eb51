"""
Reading source interface
"""
from abc import ABC, abstractmethod
from typing import Optional

from ..models.device import Device
from ..models.reading import SensorSample


class ReadingSourceBase(ABC):
    """Supplies the next sample for a device on each poll"""

    @abstractmethod
    async def read(self, device: Device) -> Optional[SensorSample]:
        """
        Fetch the latest sample for a device

        Args:
            device: registry snapshot of the device being polled

        Returns:
            The sample, or None when the device had nothing new this cycle
        """
        pass
