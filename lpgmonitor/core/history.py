"""
Time-windowed aggregation of readings into fixed-count buckets
"""
import logging
from collections import deque
from datetime import datetime, timezone
from typing import Callable, Deque, Dict, Iterable, List, Optional

from ..models.history import Bucket, Metric, TimeRange
from ..models.reading import GasReading

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _Slot:
    """Mutable running mean for one bucket and one metric set"""

    __slots__ = ("start", "count", "means")

    def __init__(self, start: datetime):
        self.start = start
        self.count = 0
        self.means: Dict[Metric, float] = {}

    def add(self, reading: GasReading):
        self.count += 1
        for metric in Metric:
            value = float(getattr(reading, metric.value))
            mean = self.means.get(metric, 0.0)
            self.means[metric] = mean + (value - mean) / self.count


class _Window:
    """Sliding window of slots for one device and one range"""

    def __init__(self, time_range: TimeRange, now: datetime):
        self.time_range = time_range
        interval = time_range.interval
        count = time_range.bucket_count
        self.slots: Deque[_Slot] = deque(
            (_Slot(now - interval * (count - 1 - i)) for i in range(count)),
            maxlen=count,
        )

    @property
    def oldest_start(self) -> datetime:
        return self.slots[0].start

    @property
    def end(self) -> datetime:
        return self.slots[-1].start + self.time_range.interval

    def _slide_to(self, timestamp: datetime):
        interval = self.time_range.interval
        steps = (timestamp - self.end) // interval + 1
        if steps >= len(self.slots):
            # Gap longer than the whole window; rebuild around the reading
            newest = self.slots[-1].start + interval * steps
            self.slots.clear()
            count = self.time_range.bucket_count
            self.slots.extend(_Slot(newest - interval * (count - 1 - i)) for i in range(count))
            return
        for _ in range(steps):
            self.slots.append(_Slot(self.slots[-1].start + interval))

    def advance(self, now: datetime):
        """Slide forward so the newest slot covers ``now``"""
        if now >= self.end:
            self._slide_to(now)

    def add(self, reading: GasReading) -> bool:
        if reading.timestamp < self.oldest_start:
            return False
        if reading.timestamp >= self.end:
            self._slide_to(reading.timestamp)
        index = (reading.timestamp - self.oldest_start) // self.time_range.interval
        self.slots[index].add(reading)
        return True

    def buckets(self, metric: Metric) -> List[Bucket]:
        return [
            Bucket(
                label=self.time_range.label_for(slot.start),
                start=slot.start,
                aggregated_value=slot.means.get(metric) if slot.count else None,
                count=slot.count,
            )
            for slot in self.slots
        ]


class HistoricalAggregator:
    """Keeps the 1h/24h/7d windows for every device.

    Only the buckets of the active windows are retained, never the raw
    readings.
    """

    def __init__(self, selected_range: TimeRange = TimeRange.ONE_DAY,
                 clock: Callable[[], datetime] = _utcnow):
        self._clock = clock
        self.selected_range = selected_range
        self._windows: Dict[str, Dict[TimeRange, _Window]] = {}
        self._anchors: Dict[TimeRange, datetime] = {}
        now = clock()
        for time_range in TimeRange:
            self._anchors[time_range] = now
        self.dropped_readings = 0

    def _windows_for(self, device_id: str) -> Dict[TimeRange, _Window]:
        windows = self._windows.get(device_id)
        if windows is None:
            windows = {
                time_range: _Window(time_range, self._anchor_for(time_range))
                for time_range in TimeRange
            }
            self._windows[device_id] = windows
        return windows

    def _anchor_for(self, time_range: TimeRange) -> datetime:
        """Newest bucket start that lines up with the range's last rebuild"""
        anchor = self._anchors[time_range]
        now = self._clock()
        if now > anchor:
            anchor += time_range.interval * ((now - anchor) // time_range.interval)
        return anchor

    def append(self, reading: GasReading) -> bool:
        """Place a reading in every range window.

        Returns False when the reading is older than some window and was
        dropped from it.
        """
        accepted = True
        now = self._clock()
        for time_range, window in self._windows_for(reading.device_id).items():
            window.advance(now)
            if not window.add(reading):
                accepted = False
                self.dropped_readings += 1
                logger.debug(f"Dropped out-of-window reading {reading.id} for {time_range.value}")
        return accepted

    def query(self, metric: Metric, time_range: Optional[TimeRange] = None,
              device_id: Optional[str] = None) -> List[Bucket]:
        """Full bucket list for a metric.

        Without ``device_id`` the buckets of all devices are merged using a
        count-weighted mean.
        """
        time_range = time_range or self.selected_range
        now = self._clock()
        if device_id is not None:
            windows = self._windows.get(device_id)
            if windows is None:
                return _Window(time_range, self._anchor_for(time_range)).buckets(metric)
            windows[time_range].advance(now)
            return windows[time_range].buckets(metric)

        windows = [device_windows[time_range] for device_windows in self._windows.values()]
        for window in windows:
            window.advance(now)
        if not windows:
            return _Window(time_range, self._anchor_for(time_range)).buckets(metric)

        # All windows of a range sit on the same grid, so buckets line up by start
        by_start: Dict[datetime, List[Bucket]] = {}
        for window in windows:
            for bucket in window.buckets(metric):
                by_start.setdefault(bucket.start, []).append(bucket)
        newest = max(windows, key=lambda w: w.end)
        return [self._merge(bucket, by_start[bucket.start]) for bucket in newest.buckets(metric)]

    @staticmethod
    def _merge(reference: Bucket, column: List[Bucket]) -> Bucket:
        total = sum(bucket.count for bucket in column)
        if not total:
            return Bucket(label=reference.label, start=reference.start)
        value = sum(bucket.aggregated_value * bucket.count for bucket in column if bucket.count) / total
        return Bucket(label=reference.label, start=reference.start, aggregated_value=value, count=total)

    def set_range(self, time_range: TimeRange):
        """Select a range and rebuild its windows relative to now"""
        self.selected_range = time_range
        now = self._clock()
        self._anchors[time_range] = now
        for windows in self._windows.values():
            windows[time_range] = _Window(time_range, now)
        logger.info(f"Rebuilt {time_range.value} history windows for {len(self._windows)} devices")

    def forget(self, device_id: str):
        self._windows.pop(device_id, None)

    def restore(self, readings: Iterable[GasReading],
                is_known: Optional[Callable[[str], bool]] = None) -> int:
        """Replay exported readings in timestamp order; returns how many were kept.

        Readings whose device fails ``is_known`` are skipped, so no series is
        created for a device that is not registered.
        """
        kept = 0
        skipped = 0
        for reading in sorted(readings, key=lambda r: r.timestamp):
            if is_known is not None and not is_known(reading.device_id):
                skipped += 1
                continue
            if self.append(reading):
                kept += 1
        if skipped:
            logger.info(f"Skipped {skipped} readings from unregistered devices")
        logger.info(f"Restored {kept} readings into history windows")
        return kept

    def devices(self) -> List[str]:
        return list(self._windows)
