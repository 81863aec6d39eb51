"""
Reading exporters
"""
from .base import DataExporterBase
from .console import ConsoleExporter
from .json_file import JsonFileExporter

__all__ = [
    "DataExporterBase",
    "ConsoleExporter",
    "JsonFileExporter",
]
