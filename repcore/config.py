"""Shared configuration and data models used across the counting pipeline."""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

STATE_FILE_ENV = "REPCORE_STATE_FILE"
DEFAULT_STATE_FILE = Path.home() / ".repcore" / "rep_count.json"


class Direction(str, Enum):
    """Which reversal of the tracked coordinate closes a repetition.

    RISING matches a falling-then-rising trend (first half slope below the
    second half slope); FALLING is the mirror image.
    """

    RISING = "rising"
    FALLING = "falling"


@dataclass(frozen=True)
class DetectionConfig:
    """Parameters for turning raw model output into one point per frame.

    Attributes:
        num_classes: Number of class score rows following the 4 box rows.
        confidence_threshold: Minimum (exclusive) best-class score.
        clustering_threshold: Euclidean distance, in model space, below which
            two detections belong to the same cluster.
        model_size: Square model input size in pixels; the source space for
            :class:`repcore.io.normalization.ViewTransform`.
    """

    num_classes: int = 1
    confidence_threshold: float = 0.8
    clustering_threshold: float = 50.0
    model_size: int = 640

    def __post_init__(self) -> None:
        if self.num_classes < 1:
            raise ValueError("num_classes must be at least 1")
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise ValueError("confidence_threshold must be within [0, 1]")
        if self.clustering_threshold <= 0:
            raise ValueError("clustering_threshold must be positive")
        if self.model_size <= 0:
            raise ValueError("model_size must be positive")


@dataclass(frozen=True)
class CounterConfig:
    """Tuning constants for stillness gating and turning-point detection."""

    max_points: int = 10
    stillness_deviation: float = 5.0
    stillness_frames: int = 10
    deviation_sentinel: float = 100.0
    miss_limit: int = 7
    window_size: int = 9
    min_reversal: float = 10.0
    direction: Direction = Direction.RISING

    def __post_init__(self) -> None:
        if self.max_points < 2:
            raise ValueError("max_points must be at least 2")
        if self.window_size < 5:
            raise ValueError("window_size must be at least 5 to fit two trend halves")
        if self.window_size > self.max_points:
            raise ValueError("window_size cannot exceed max_points")
        if self.stillness_frames < 0 or self.miss_limit < 0:
            raise ValueError("frame limits must be non-negative")

    def describe(self) -> str:
        """Return a compact summary used in CLI output and logs."""
        return (
            f"pts{self.max_points}"
            f"-win{self.window_size}"
            f"-std{self.stillness_deviation:g}"
            f"-rev{self.min_reversal:g}"
            f"-{self.direction.value}"
        )


def default_state_file(env: Optional[dict] = None) -> Path:
    """Resolve the counter file location, honouring ``$REPCORE_STATE_FILE``."""
    source = os.environ if env is None else env
    override = source.get(STATE_FILE_ENV)
    return Path(override).expanduser() if override else DEFAULT_STATE_FILE
