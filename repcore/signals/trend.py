"""Trend and spread statistics over buffered ``y`` values."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from repcore.signals.history import PointHistory


def trend(values: Sequence[int]) -> float:
    """Return the least-squares slope of ``values`` against their 0-based index.

    ``slope = (n*Sxy - Sx*Sy) / (n*Sxx - Sx**2)``. Sums are accumulated as
    integers so the only rounding happens in the final division.
    """

    n = len(values)
    if n < 2:
        raise ValueError("trend needs at least two values")

    sum_x = n * (n - 1) // 2
    sum_y = sum(values)
    sum_xy = sum(i * v for i, v in enumerate(values))
    sum_x2 = sum(i * i for i in range(n))

    return (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)


def buffer_deviation(history: PointHistory, sentinel: float = 100.0) -> float:
    """Sample standard deviation of the buffered ``y`` values.

    Returns ``sentinel`` until the history is full, so stillness cannot be
    declared on a partial window.
    """

    if not history.is_full:
        return sentinel
    ys = history.ys
    if len(ys) < 2:
        return 0.0
    return float(np.std(np.asarray(ys, dtype=np.float64), ddof=1))
