"""
Historical series models
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional


class Metric(str, Enum):
    GAS_LEVEL = "gas_level"
    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"

    @property
    def display_name(self) -> str:
        return _METRIC_NAMES[self][0]

    @property
    def unit(self) -> str:
        return _METRIC_NAMES[self][1]


_METRIC_NAMES = {
    Metric.GAS_LEVEL: ("Gas Level", "PPM"),
    Metric.TEMPERATURE: ("Temperature", "°C"),
    Metric.HUMIDITY: ("Humidity", "%"),
}


class TimeRange(str, Enum):
    ONE_HOUR = "1h"
    ONE_DAY = "24h"
    ONE_WEEK = "7d"

    @property
    def bucket_count(self) -> int:
        return _RANGE_LAYOUT[self][0]

    @property
    def interval(self) -> timedelta:
        return timedelta(minutes=_RANGE_LAYOUT[self][1])

    @property
    def span(self) -> timedelta:
        return self.interval * self.bucket_count

    def label_for(self, start: datetime) -> str:
        if self is TimeRange.ONE_WEEK:
            return f"{start:%b} {start.day}"
        return f"{start:%H:%M}"


_RANGE_LAYOUT = {
    TimeRange.ONE_HOUR: (60, 1),
    TimeRange.ONE_DAY: (24, 60),
    TimeRange.ONE_WEEK: (7, 1440),
}


@dataclass(frozen=True)
class Bucket:
    """One time slot of a historical series.

    ``aggregated_value`` is None until a reading lands in the slot.
    """
    label: str
    start: datetime
    aggregated_value: Optional[float] = None
    count: int = 0

    @property
    def has_data(self) -> bool:
        return self.aggregated_value is not None
