"""
Alert configuration, per-device alert state and notification models
"""
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, FrozenSet, Optional


class RiskTier(str, Enum):
    SAFE = "safe"
    WARNING = "warning"
    DANGER = "danger"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    def is_worse_than(self, other: "RiskTier") -> bool:
        return self.severity > other.severity


_SEVERITY = {RiskTier.SAFE: 0, RiskTier.WARNING: 1, RiskTier.DANGER: 2}


class Channel(str, Enum):
    AUDIO = "audio"
    VIBRATION = "vibration"
    EMAIL = "email"
    SMS = "sms"


SNOOZE_CHOICES = (1, 5, 10, 15, 30)


@dataclass(frozen=True)
class AlertConfig:
    """User alert settings.

    Instances are never edited in place: an edit is a new value that goes
    through ``AlertConfigValidator`` before replacing the active one.
    """
    warning_threshold: int = 1000
    danger_threshold: int = 2500
    enable_audio_alerts: bool = True
    enable_vibration: bool = True
    enable_email_notifications: bool = False
    email_address: str = ""
    enable_sms_notifications: bool = False
    phone_number: str = ""
    alert_volume: int = 80
    snooze_time_minutes: int = 5
    auto_evacuation_alert: bool = True

    @classmethod
    def defaults(cls) -> "AlertConfig":
        """Factory settings"""
        return cls()

    def enabled_channels(self) -> FrozenSet[Channel]:
        flags = {
            Channel.AUDIO: self.enable_audio_alerts,
            Channel.VIBRATION: self.enable_vibration,
            Channel.EMAIL: self.enable_email_notifications,
            Channel.SMS: self.enable_sms_notifications,
        }
        return frozenset(channel for channel, enabled in flags.items() if enabled)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict) -> "AlertConfig":
        """Create instance from dictionary, ignoring unknown keys"""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})


@dataclass
class DeviceAlertState:
    """Alert state machine data for one device"""
    device_id: str
    current_tier: RiskTier = RiskTier.SAFE
    snoozed_until: Optional[datetime] = None

    def is_snoozed(self, now: datetime) -> bool:
        return self.snoozed_until is not None and now < self.snoozed_until


@dataclass(frozen=True)
class Notification:
    """Request handed to the notification dispatcher"""
    device_id: str
    tier: RiskTier
    channels: FrozenSet[Channel]
    is_evacuation_advisory: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    email_address: str = ""
    phone_number: str = ""
    alert_volume: int = 80

    def message(self) -> str:
        if self.is_evacuation_advisory:
            return (f"DANGER: LPG leak detected by {self.device_id}. "
                    f"Evacuate immediately and call emergency services.")
        if self.tier is RiskTier.DANGER:
            return f"DANGER: critical LPG level detected by {self.device_id}"
        return f"WARNING: elevated LPG level detected by {self.device_id}"

    def to_dict(self) -> dict:
        return {
            "device_id": self.device_id,
            "tier": self.tier.value,
            "channels": sorted(channel.value for channel in self.channels),
            "is_evacuation_advisory": self.is_evacuation_advisory,
            "created_at": self.created_at.isoformat(),
            "message": self.message(),
        }


@dataclass
class DispatchReport:
    """Per-channel outcome of one dispatch"""
    notification: Notification
    results: Dict[Channel, bool] = field(default_factory=dict)
    errors: Dict[Channel, str] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return all(self.results.values())

    @property
    def failed_channels(self) -> FrozenSet[Channel]:
        return frozenset(channel for channel, ok in self.results.items() if not ok)
