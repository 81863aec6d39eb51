"""
Core monitoring and alerting engine
"""
from .classifier import ThresholdClassifier, classify
from .device_registry import DeviceRegistry
from .history import HistoricalAggregator
from .alert_engine import AlertEngine
from .config_validator import AlertConfigValidator, ValidationResult
from .ingestion import IngestionLoop
from .locks import KeyedLocks
from .scheduler import PeriodicTask

__all__ = [
    "ThresholdClassifier",
    "classify",
    "DeviceRegistry",
    "HistoricalAggregator",
    "AlertEngine",
    "AlertConfigValidator",
    "ValidationResult",
    "IngestionLoop",
    "KeyedLocks",
    "PeriodicTask",
]
