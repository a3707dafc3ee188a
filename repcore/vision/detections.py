"""Raw detections and their reduction to one representative point per frame.

The upstream detector emits many overlapping candidates for the same tracked
object. :func:`cluster_detections` collapses spatial neighbours and
:func:`select_representative` picks the single point that feeds the history.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence

import numpy as np

from repcore.config import DetectionConfig


class ModelOutputError(RuntimeError):
    """Raised when a model output tensor does not have the expected layout."""


@dataclass(frozen=True)
class Detection:
    """Single candidate position with its confidence score."""

    score: float
    x: float
    y: float

    def distance_to(self, other: "Detection") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


def decode_model_output(output: Any, config: Optional[DetectionConfig] = None) -> List[Detection]:
    """Convert a YOLO-style output tensor into filtered detections.

    Args:
        output: Array-like of shape ``(1, 4 + num_classes, num_boxes)`` or
            ``(4 + num_classes, num_boxes)``. Rows 0 and 1 hold the box centre;
            rows 4.. hold per-class scores.
        config: Detection parameters; defaults to :class:`DetectionConfig`.

    Returns:
        Detections whose best class is class 0 with a score strictly above the
        confidence threshold, in box order.

    Raises:
        ModelOutputError: if the tensor shape does not match ``num_classes``.
    """

    cfg = config or DetectionConfig()
    array = np.asarray(output, dtype=np.float64)
    if array.ndim == 3:
        if array.shape[0] != 1:
            raise ModelOutputError(f"Expected a batch of one, got shape {array.shape}")
        array = array[0]
    if array.ndim != 2 or array.shape[0] != 4 + cfg.num_classes:
        raise ModelOutputError(
            f"Expected {4 + cfg.num_classes} rows for {cfg.num_classes} classes, got shape {array.shape}"
        )

    class_scores = array[4:, :]
    best_class = np.argmax(class_scores, axis=0)
    best_score = class_scores[best_class, np.arange(class_scores.shape[1])]
    keep = np.flatnonzero((best_score > cfg.confidence_threshold) & (best_class == 0))

    return [
        Detection(score=float(best_score[i]), x=float(array[0, i]), y=float(array[1, i]))
        for i in keep
    ]


def _highest_score(members: Sequence[Detection]) -> Detection:
    best = members[0]
    for candidate in members[1:]:
        if candidate.score > best.score:
            best = candidate
    return best


def cluster_detections(detections: Iterable[Detection], threshold: float = 50.0) -> List[Detection]:
    """Greedy single-link clustering, one highest-score member per cluster.

    Detections are visited in input order; each joins the first existing
    cluster holding any member closer than ``threshold``, otherwise it starts
    a new cluster. The result is order dependent. Ties on score keep the first
    encountered member.
    """

    clusters: List[List[Detection]] = []
    for detection in detections:
        for cluster in clusters:
            if any(member.distance_to(detection) < threshold for member in cluster):
                cluster.append(detection)
                break
        else:
            clusters.append([detection])

    return [_highest_score(cluster) for cluster in clusters]


def select_representative(clusters: Sequence[Detection]) -> Optional[Detection]:
    """Return the cluster representative that becomes this frame's point."""
    if not clusters:
        return None
    return _highest_score(clusters)
