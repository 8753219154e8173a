"""
Rush Intensity Model

Maps a wall-clock time to a load multiplier in [0, 1] using fixed
time-of-day rush windows. Only the hour and minute the caller's
datetime already encodes are used; date and timezone are ignored.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional

from canteen.schemas import RushWindow

logger = logging.getLogger(__name__)


class RushIntensityModel:
    """
    Time-of-day congestion model.

    Windows are checked in declaration order; the first window whose
    half-open range ``[start, end)`` contains the time wins.

    Example:
        >>> model = RushIntensityModel(
        ...     [RushWindow(start=12, end=13.5, intensity=1.0)], baseline=0.2
        ... )
        >>> model.intensity_at(datetime(2025, 1, 6, 12, 45))
        1.0
    """

    def __init__(self, windows: Iterable[RushWindow], baseline: float = 0.2):
        self.windows: tuple[RushWindow, ...] = tuple(windows)
        self.baseline = baseline

    @staticmethod
    def hour_value(time: datetime) -> float:
        """Fractional hour of day, e.g. 13:30 -> 13.5."""
        return time.hour + time.minute / 60

    def window_at(self, time: datetime) -> Optional[RushWindow]:
        value = self.hour_value(time)
        for window in self.windows:
            if window.contains(value):
                return window
        return None

    def intensity_at(self, time: datetime) -> float:
        """Rush intensity at ``time``; the baseline outside every window."""
        window = self.window_at(time)
        if window is None:
            return self.baseline
        return window.intensity
