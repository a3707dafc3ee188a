"""Direction-reversal detection over a short window of ``y`` values."""

from __future__ import annotations

import logging
from typing import Sequence

from repcore.config import Direction
from repcore.signals.trend import trend

logger = logging.getLogger(__name__)


class TurningPointDetector:
    """Compare first and second half trends of consecutive windows.

    The window is split around its middle element, which is left out of both
    halves. A turning point needs the current second-half trend to flip sign
    relative to the previous call, the two halves to disagree in sign by more
    than ``min_reversal`` and the reversal to go in ``direction``.

    ``previous_second_half_trend`` is the only state carried between calls.
    """

    def __init__(
        self,
        window_size: int = 9,
        min_reversal: float = 10.0,
        direction: Direction = Direction.RISING,
    ) -> None:
        self.window_size = window_size
        self.min_reversal = min_reversal
        self.direction = direction
        self.previous_second_half_trend = 0.0

    def reset(self) -> None:
        self.previous_second_half_trend = 0.0

    def _reverses_in_direction(self, first: float, second: float) -> bool:
        if self.direction is Direction.RISING:
            return first < second
        return first > second

    def is_turning_point(self, window: Sequence[int]) -> bool:
        if len(window) != self.window_size:
            raise ValueError(f"window must hold {self.window_size} values, got {len(window)}")

        middle = len(window) // 2
        first = trend(window[:middle])
        second = trend(window[middle + 1 :])
        previous = self.previous_second_half_trend

        turned = (
            previous != 0
            and second * previous < 0
            and first * second < 0
            and abs(first - second) > self.min_reversal
            and self._reverses_in_direction(first, second)
        )
        logger.debug("trend first=%.3f second=%.3f previous=%.3f turned=%s", first, second, previous, turned)

        self.previous_second_half_trend = second
        return turned
