"""
JSON file reading exporter
"""
import json
import logging
import os
from typing import Any, Dict, List

from .base import DataExporterBase
from ..models.reading import GasReading

logger = logging.getLogger(__name__)


class JsonFileExporter(DataExporterBase):
    """Writes readings to a JSON array file.

    In append mode the file doubles as the reading history that
    ``HistoricalAggregator.restore`` replays after a restart.
    """

    def __init__(self, file_path: str, append_mode: bool = False, max_records: int = 0):
        """
        Args:
            file_path: output file path
            append_mode: keep existing records and add to them
            max_records: keep only the newest N records (0 = unlimited)
        """
        self.file_path = file_path
        self.append_mode = append_mode
        self.max_records = max_records

    def _load_existing_data(self) -> List[Dict[str, Any]]:
        if not os.path.exists(self.file_path):
            return []

        try:
            with open(self.file_path, 'r', encoding='utf-8') as file:
                content = file.read().strip()
                if not content:
                    return []
                return json.loads(content)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Could not read existing file: {e}")
            return []

    def load(self) -> List[GasReading]:
        """Read back exported readings, skipping malformed records"""
        readings = []
        for record in self._load_existing_data():
            try:
                readings.append(GasReading.from_dict(record))
            except (TypeError, ValueError, KeyError) as e:
                logger.warning(f"Skipping malformed reading record: {e}")
        return readings

    async def write_batch(self, readings: List[GasReading]) -> bool:
        try:
            new_data_list = [reading.to_dict() for reading in readings]

            if self.append_mode:
                all_data = self._load_existing_data() + new_data_list
            else:
                all_data = new_data_list
            if self.max_records > 0:
                all_data = all_data[-self.max_records:]

            directory = os.path.dirname(self.file_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            with open(self.file_path, 'w', encoding='utf-8') as file:
                json.dump(all_data, file, indent=2, ensure_ascii=False)

            logger.info(f"Wrote {len(new_data_list)} readings to {self.file_path}")
            return True

        except (IOError, OSError) as e:
            logger.error(f"JSON file output error: {e}")
            raise
        except Exception as e:
            logger.error(f"Unexpected export error: {e}")
            return False
