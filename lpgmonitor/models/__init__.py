"""
Models package for the LPG monitor
"""
from .reading import GasReading, SensorSample
from .device import Device, DeviceStatus
from .alert import (
    AlertConfig,
    Channel,
    DeviceAlertState,
    DispatchReport,
    Notification,
    RiskTier,
)
from .history import Bucket, Metric, TimeRange

__all__ = [
    "GasReading",
    "SensorSample",
    "Device",
    "DeviceStatus",
    "AlertConfig",
    "Channel",
    "DeviceAlertState",
    "DispatchReport",
    "Notification",
    "RiskTier",
    "Bucket",
    "Metric",
    "TimeRange",
]
