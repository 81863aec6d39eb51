"""
Reading exporter interface
"""
from abc import ABC, abstractmethod
from typing import List, Union

from ..models.reading import GasReading


class DataExporterBase(ABC):
    """Sink for processed readings.

    The ingestion loop hands over one reading at a time; restore tooling and
    tests may pass a batch. Subclasses only deal with batches.
    """

    async def export(self, data: Union[GasReading, List[GasReading]]) -> bool:
        readings = list(data) if isinstance(data, list) else [data]
        if not readings:
            return True
        return await self.write_batch(readings)

    @abstractmethod
    async def write_batch(self, readings: List[GasReading]) -> bool:
        """Write a non-empty batch; True on success"""
