"""
Gas reading models
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class GasReading:
    """One LPG sensor sample with temperature and humidity"""
    id: str
    device_id: str
    gas_level: int
    temperature: float
    humidity: float
    timestamp: datetime
    location: str = ""

    def __post_init__(self):
        """Validate reading data after initialization"""
        if self.gas_level < 0:
            raise ValueError("Gas level cannot be negative")
        if self.humidity < 0.0 or self.humidity > 100.0:
            raise ValueError("Humidity must be between 0 and 100")

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return {
            "id": self.id,
            "device_id": self.device_id,
            "gas_level": self.gas_level,
            "temperature": self.temperature,
            "humidity": self.humidity,
            "timestamp": self.timestamp.isoformat(),
            "location": self.location,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GasReading":
        """Create instance from dictionary"""
        data_copy = data.copy()
        if "timestamp" in data_copy:
            data_copy["timestamp"] = datetime.fromisoformat(data_copy["timestamp"])
        return cls(**data_copy)

    def __str__(self) -> str:
        return (f"Gas: {self.gas_level} ppm, Temp: {self.temperature:.1f}°C, "
                f"Humidity: {self.humidity:.1f}% at {self.timestamp.strftime('%H:%M:%S')} "
                f"({self.device_id})")


@dataclass(frozen=True)
class SensorSample:
    """What a reading source hands back for one device on one poll.

    ``battery_level`` is None when the source does not report battery state,
    in which case the device keeps its previous level.
    """
    reading: GasReading
    battery_level: Optional[int] = None
