"""Fixed-capacity rolling window of accepted points."""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional, Tuple


@dataclass(frozen=True)
class DetectedPoint:
    """One accepted point per processed frame.

    Attributes:
        x: Rounded horizontal pixel coordinate.
        y: Rounded vertical pixel coordinate.
        ydiff: ``previous.y - y`` at insertion time; 0 for the first point.
    """

    x: int
    y: int
    ydiff: int = 0


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class PointHistory:
    """Oldest-first buffer of :class:`DetectedPoint` bounded to ``max_points``."""

    def __init__(self, max_points: int = 10) -> None:
        if max_points < 1:
            raise ValueError("max_points must be positive")
        self.max_points = max_points
        self._points: Deque[DetectedPoint] = deque()

    def __len__(self) -> int:
        return len(self._points)

    @property
    def is_full(self) -> bool:
        return len(self._points) >= self.max_points

    @property
    def last(self) -> Optional[DetectedPoint]:
        return self._points[-1] if self._points else None

    @property
    def points(self) -> Tuple[DetectedPoint, ...]:
        return tuple(self._points)

    @property
    def ys(self) -> Tuple[int, ...]:
        return tuple(point.y for point in self._points)

    def add_point(self, raw_x: float, raw_y: float) -> DetectedPoint:
        """Round, diff against the last point, evict if full and append."""
        x = round_half_away(raw_x)
        y = round_half_away(raw_y)
        previous = self.last
        point = DetectedPoint(x=x, y=y, ydiff=previous.y - y if previous else 0)

        if len(self._points) >= self.max_points:
            self._points.popleft()
        self._points.append(point)
        return point

    def clear(self) -> None:
        self._points.clear()
