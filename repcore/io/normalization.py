"""Coordinate scaling between model input space and view space.

Detections arrive in the square model input space (``model_size`` pixels per
side). Points that enter the history and the overlay are expressed in view
space, so the counting thresholds operate on the same pixels the overlay is
drawn on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from repcore.config import DetectionConfig


@dataclass(frozen=True)
class ViewTransform:
    """Axis-aligned scale from model coordinates to view coordinates.

    ``width`` and ``height`` are the view dimensions; ``None`` keeps the
    model space unchanged on that axis.
    """

    model_size: int = 640
    width: Optional[float] = None
    height: Optional[float] = None

    @classmethod
    def from_config(
        cls, config: DetectionConfig, width: Optional[float] = None, height: Optional[float] = None
    ) -> "ViewTransform":
        return cls(model_size=config.model_size, width=width, height=height)

    @property
    def scale(self) -> Tuple[float, float]:
        """Return (scale_x, scale_y)."""
        if self.model_size <= 0:
            raise ValueError(f"model_size must be positive, got {self.model_size}")
        scale_x = self.width / self.model_size if self.width is not None else 1.0
        scale_y = self.height / self.model_size if self.height is not None else 1.0
        return (scale_x, scale_y)

    def to_view(self, point: Tuple[float, float]) -> Tuple[float, float]:
        scale_x, scale_y = self.scale
        x, y = point
        return (x * scale_x, y * scale_y)
