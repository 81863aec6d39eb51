"""
Device model
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class DeviceStatus(str, Enum):
    ONLINE = "online"
    WARNING = "warning"
    OFFLINE = "offline"


LOW_BATTERY_LEVEL = 30


@dataclass
class Device:
    """A registered LPG sensor"""
    id: str
    name: str
    location: str
    ip_address: str
    status: DeviceStatus = DeviceStatus.ONLINE
    battery_level: int = 100
    last_seen_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_gas_level: int = 0

    @property
    def is_online(self) -> bool:
        return self.status is not DeviceStatus.OFFLINE

    @property
    def has_low_battery(self) -> bool:
        return self.battery_level < LOW_BATTERY_LEVEL

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return {
            "id": self.id,
            "name": self.name,
            "location": self.location,
            "ip_address": self.ip_address,
            "status": self.status.value,
            "battery_level": self.battery_level,
            "last_seen_at": self.last_seen_at.isoformat(),
            "last_gas_level": self.last_gas_level,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Device":
        """Create instance from dictionary"""
        data_copy = data.copy()
        if "status" in data_copy:
            data_copy["status"] = DeviceStatus(data_copy["status"])
        if "last_seen_at" in data_copy:
            data_copy["last_seen_at"] = datetime.fromisoformat(data_copy["last_seen_at"])
        return cls(**data_copy)

    def __str__(self) -> str:
        return (f"{self.name} [{self.id}] @ {self.location} ({self.ip_address}): "
                f"{self.status.value}, battery {self.battery_level}%")
