"""
Time-bounded buffer of recent position samples, fed by live location updates.
"""

from collections import deque
from datetime import datetime, timedelta
from typing import Iterator, NamedTuple, Optional, Tuple, Union
import logging

from .geometry import GeodesyPoint

logger = logging.getLogger(__name__)


class PositionSample(NamedTuple):
    """A location reported at a point in time."""

    location: GeodesyPoint
    timestamp: datetime


class PositionWindow:
    """
    Keeps the position samples of the last `interval`.

    Appending a sample drops samples from the front that are older than the
    newest timestamp minus the interval. The newest sample is always kept.
    Not synchronized; meant to be fed by a single stream of updates.
    """

    def __init__(self, interval: Union[timedelta, float]):
        """
        Args:
            interval: Window length, as timedelta or in seconds

        Raises:
            ValueError: If interval is negative
        """
        if not isinstance(interval, timedelta):
            interval = timedelta(seconds=interval)

        if interval < timedelta(0):
            raise ValueError(f"Window interval must not be negative, got {interval}")

        self.interval = interval
        self._samples: deque = deque()

    def add(self, sample: PositionSample) -> None:
        """Append a sample and trim samples that fell out of the window."""
        self._samples.append(sample)

        cutoff = sample.timestamp - self.interval
        removed = 0
        while len(self._samples) > 1 and self._samples[0].timestamp < cutoff:
            self._samples.popleft()
            removed += 1

        if removed:
            logger.debug(
                f"Trimmed {removed} samples older than {cutoff.isoformat()}, "
                f"{len(self._samples)} remaining"
            )

    def add_position(self, location: GeodesyPoint, timestamp: datetime) -> None:
        """Convenience wrapper around add()."""
        self.add(PositionSample(location=location, timestamp=timestamp))

    @property
    def samples(self) -> Tuple[PositionSample, ...]:
        """Current samples, oldest first."""
        return tuple(self._samples)

    @property
    def newest(self) -> Optional[PositionSample]:
        """Most recently added sample, or None when empty."""
        return self._samples[-1] if self._samples else None

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[PositionSample]:
        return iter(tuple(self._samples))

    def __repr__(self) -> str:
        return f"PositionWindow(interval={self.interval!r}, samples={len(self)})"
