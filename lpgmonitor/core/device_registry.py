"""
Device registry and connectivity state machine
"""
import dataclasses
import ipaddress
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, List, Optional

from ..errors import NotFoundError, ValidationError
from ..models.alert import RiskTier
from ..models.device import Device, DeviceStatus
from ..models.reading import GasReading

logger = logging.getLogger(__name__)

RemovalListener = Callable[[str], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DeviceRegistry:
    """Owns the known devices and their online/warning/offline status.

    Devices only go offline through ``sweep``, and only come back through a
    fresh heartbeat.
    """

    ID_PREFIX = "lpg-"

    def __init__(self, heartbeat_timeout: float = 60.0,
                 clock: Callable[[], datetime] = _utcnow):
        """
        Args:
            heartbeat_timeout: seconds without a heartbeat before a device is
                considered offline
            clock: returns the current time (timezone aware)
        """
        self.heartbeat_timeout = timedelta(seconds=heartbeat_timeout)
        self._clock = clock
        self._devices: Dict[str, Device] = {}
        self._tiers: Dict[str, RiskTier] = {}
        self._next_number = 1
        self._removal_listeners: List[RemovalListener] = []

    def add_removal_listener(self, listener: RemovalListener):
        """Call ``listener(device_id)`` whenever a device is removed"""
        self._removal_listeners.append(listener)

    def _next_id(self) -> str:
        device_id = f"{self.ID_PREFIX}{self._next_number:03d}"
        self._next_number += 1
        return device_id

    @staticmethod
    def validate_fields(name: str, location: str, ip_address: str) -> List[ValidationError]:
        errors = []
        if not name or not name.strip():
            errors.append(ValidationError("name", "Device name is required"))
        if not location or not location.strip():
            errors.append(ValidationError("location", "Location is required"))
        if not ip_address or not ip_address.strip():
            errors.append(ValidationError("ip_address", "IP address is required"))
        else:
            try:
                ipaddress.ip_address(ip_address.strip())
            except ValueError:
                errors.append(ValidationError("ip_address", f"Invalid IP address: {ip_address}"))
        return errors

    def register(self, name: str, location: str, ip_address: str) -> Device:
        """Add a device.

        Raises:
            ValidationError: for the first invalid field; all problems are
                listed in its ``errors`` attribute
        """
        errors = self.validate_fields(name, location, ip_address)
        if errors:
            raise ValidationError.combine(errors)

        device = Device(
            id=self._next_id(),
            name=name.strip(),
            location=location.strip(),
            ip_address=ip_address.strip(),
            status=DeviceStatus.ONLINE,
            battery_level=100,
            last_seen_at=self._clock(),
        )
        self._devices[device.id] = device
        self._tiers[device.id] = RiskTier.SAFE
        logger.info(f"Registered device {device.id}: {device.name} @ {device.location}")
        return dataclasses.replace(device)

    def restore(self, devices: Iterable[Device]):
        """Re-seed the registry with previously exported devices"""
        for device in devices:
            self._devices[device.id] = dataclasses.replace(device)
            self._tiers.setdefault(device.id, RiskTier.SAFE)
            number = device.id[len(self.ID_PREFIX):]
            if device.id.startswith(self.ID_PREFIX) and number.isdigit():
                self._next_number = max(self._next_number, int(number) + 1)
        logger.info(f"Restored {len(self._devices)} devices")

    def remove(self, device_id: str):
        """Remove a device; unknown ids are ignored"""
        device = self._devices.pop(device_id, None)
        self._tiers.pop(device_id, None)
        if device is None:
            logger.debug(f"Remove ignored for unknown device {device_id}")
            return

        logger.info(f"Removed device {device_id}")
        for listener in self._removal_listeners:
            try:
                listener(device_id)
            except Exception as e:
                logger.error(f"Removal listener failed for {device_id}: {e}")

    def get(self, device_id: str) -> Device:
        device = self._devices.get(device_id)
        if device is None:
            raise NotFoundError(device_id)
        return dataclasses.replace(device)

    def list_devices(self) -> List[Device]:
        """Snapshot of all devices in registration order"""
        return [dataclasses.replace(device) for device in self._devices.values()]

    def tier_of(self, device_id: str) -> Optional[RiskTier]:
        return self._tiers.get(device_id)

    def __len__(self) -> int:
        return len(self._devices)

    def __contains__(self, device_id: str) -> bool:
        return device_id in self._devices

    def _status_for(self, device: Device, tier: RiskTier) -> DeviceStatus:
        if device.has_low_battery or tier is not RiskTier.SAFE:
            return DeviceStatus.WARNING
        return DeviceStatus.ONLINE

    def record_heartbeat(self, device_id: str, reading: GasReading,
                         battery_level: Optional[int] = None,
                         tier: Optional[RiskTier] = None) -> Optional[Device]:
        """Apply a fresh reading to a device.

        Returns the updated device, or None when the device is unknown
        (removed while its reading was in flight).
        """
        device = self._devices.get(device_id)
        if device is None:
            logger.warning(f"Heartbeat for unknown device {device_id} ignored")
            return None

        if reading.timestamp > device.last_seen_at:
            device.last_seen_at = reading.timestamp
        device.last_gas_level = reading.gas_level
        if battery_level is not None:
            device.battery_level = max(0, min(100, battery_level))
        if tier is not None:
            self._tiers[device_id] = tier

        previous = device.status
        device.status = self._status_for(device, self._tiers[device_id])
        if previous is not device.status:
            logger.info(f"Device {device_id}: {previous.value} -> {device.status.value}")
        return dataclasses.replace(device)

    def refresh_tier(self, device_id: str, tier: RiskTier) -> Optional[Device]:
        """Recompute status after a threshold change; offline devices stay offline"""
        device = self._devices.get(device_id)
        if device is None:
            return None
        self._tiers[device_id] = tier
        if device.status is not DeviceStatus.OFFLINE:
            device.status = self._status_for(device, tier)
        return dataclasses.replace(device)

    def is_stale(self, device: Device, snapshot: datetime) -> bool:
        return snapshot - device.last_seen_at > self.heartbeat_timeout

    def sweep(self, now: Optional[datetime] = None) -> List[str]:
        """Demote devices whose last heartbeat is older than the timeout.

        ``now`` is taken once at the start; a heartbeat newer than
        ``now - timeout`` always keeps its device online.
        """
        snapshot = now or self._clock()
        demoted = []
        for device in list(self._devices.values()):
            if device.status is DeviceStatus.OFFLINE:
                continue
            if self.is_stale(device, snapshot):
                device.status = DeviceStatus.OFFLINE
                demoted.append(device.id)
                logger.info(f"Device {device.id} went offline (last seen {device.last_seen_at.isoformat()})")
        return demoted
