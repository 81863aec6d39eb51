"""
LPG gas leak monitoring and alerting
"""
from .errors import DispatchError, MonitorError, NotFoundError, ValidationError
from .models import (
    AlertConfig,
    Bucket,
    Channel,
    Device,
    DeviceAlertState,
    DeviceStatus,
    DispatchReport,
    GasReading,
    Metric,
    Notification,
    RiskTier,
    SensorSample,
    TimeRange,
)
from .core import (
    AlertConfigValidator,
    AlertEngine,
    DeviceRegistry,
    HistoricalAggregator,
    IngestionLoop,
    ThresholdClassifier,
)
from .sources import ReadingSourceBase, SimulatedReadingSource
from .notifiers import ConsoleNotifier, HttpNotifier, NotificationDispatcher
from .exporters import ConsoleExporter, DataExporterBase, JsonFileExporter
from .monitor import GasMonitor

__version__ = "0.1.0"
__all__ = [
    "DispatchError",
    "MonitorError",
    "NotFoundError",
    "ValidationError",
    "AlertConfig",
    "Bucket",
    "Channel",
    "Device",
    "DeviceAlertState",
    "DeviceStatus",
    "DispatchReport",
    "GasReading",
    "Metric",
    "Notification",
    "RiskTier",
    "SensorSample",
    "TimeRange",
    "AlertConfigValidator",
    "AlertEngine",
    "DeviceRegistry",
    "HistoricalAggregator",
    "IngestionLoop",
    "ThresholdClassifier",
    "ReadingSourceBase",
    "SimulatedReadingSource",
    "ConsoleNotifier",
    "HttpNotifier",
    "NotificationDispatcher",
    "ConsoleExporter",
    "DataExporterBase",
    "JsonFileExporter",
    "GasMonitor",
]
