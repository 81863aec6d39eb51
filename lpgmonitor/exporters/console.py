"""
Console reading exporter
"""
import logging
from typing import Callable, List, Optional

from .base import DataExporterBase
from ..core.classifier import ThresholdClassifier
from ..models.alert import AlertConfig
from ..models.reading import GasReading

logger = logging.getLogger(__name__)


class ConsoleExporter(DataExporterBase):
    """Prints each reading with its risk tier"""

    def __init__(self, verbose: bool = False,
                 config_provider: Optional[Callable[[], AlertConfig]] = None):
        """
        Args:
            verbose: also print the reading id and gauge percentage
            config_provider: returns the thresholds used for the tier column
        """
        self.verbose = verbose
        self.config_provider = config_provider or AlertConfig.defaults

    def set_verbose(self, verbose: bool):
        self.verbose = verbose

    def format_data(self, data: GasReading) -> str:
        timestamp_str = data.timestamp.strftime("%Y-%m-%d %H:%M:%S")
        tier = ThresholdClassifier.classify(data.gas_level, self.config_provider())
        formatted = (
            f"[{timestamp_str}] "
            f"{tier.value.upper():<7} "
            f"Gas: {data.gas_level} ppm, "
            f"Temp: {data.temperature}°C, "
            f"Humidity: {data.humidity}%, "
            f"Device: {data.device_id}"
        )
        if data.location:
            formatted += f" ({data.location})"

        if self.verbose:
            percentage = ThresholdClassifier.gas_level_percentage(data.gas_level)
            formatted += f", Gauge: {percentage:.0f}%, Reading: {data.id}"
        return formatted

    async def write_batch(self, readings: List[GasReading]) -> bool:
        try:
            for reading in readings:
                formatted_output = self.format_data(reading)
                print(formatted_output)
                logger.debug(f"Console output: {formatted_output}")
            return True
        except Exception as e:
            logger.error(f"Console output error: {e}")
            return False
