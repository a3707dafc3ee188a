"""Per-session orchestration: one call per processed frame.

:class:`RepSession` glues the pieces together in frame order: cluster the
raw detections, update the loss monitor, push the representative point into
the history, advance the state machine and persist any counted repetition.
Calls must be serialized by the caller; the session performs no locking.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Protocol, Tuple

from repcore.config import CounterConfig, DetectionConfig
from repcore.io.counter_store import CounterStoreError
from repcore.io.normalization import ViewTransform
from repcore.repdetect.machine import AlgoState, CounterContext, Event, RepIncremented, advance
from repcore.signals.history import DetectedPoint
from repcore.vision.detections import (
    Detection,
    cluster_detections,
    decode_model_output,
    select_representative,
)

logger = logging.getLogger(__name__)


class CountStore(Protocol):
    def read(self) -> int: ...

    def increment(self) -> int: ...


@dataclass(frozen=True)
class FrameResult:
    """What one processed frame produced.

    Attributes:
        events: State changes and counted repetitions, in emission order.
        clusters: Every cluster representative in view space, for overlays.
        point: The point appended to the history this frame, if any.
        state: State after the frame.
    """

    events: List[Event] = field(default_factory=list)
    clusters: List[Detection] = field(default_factory=list)
    point: Optional[DetectedPoint] = None
    state: AlgoState = AlgoState.IDLE

    @property
    def reps(self) -> List[RepIncremented]:
        return [event for event in self.events if isinstance(event, RepIncremented)]


class RepSession:
    """Counting session over one capture."""

    def __init__(
        self,
        store: CountStore,
        *,
        counter_config: Optional[CounterConfig] = None,
        detection_config: Optional[DetectionConfig] = None,
        transform: Optional[ViewTransform] = None,
    ) -> None:
        self.store = store
        self.detection_config = detection_config or DetectionConfig()
        self.transform = transform or ViewTransform.from_config(self.detection_config)
        self.context = CounterContext.create(counter_config, count=store.read())

    @property
    def state(self) -> AlgoState:
        return self.context.state

    @property
    def count(self) -> int:
        return self.context.count

    def _to_view(self, detection: Detection) -> Detection:
        x, y = self.transform.to_view((detection.x, detection.y))
        return Detection(score=detection.score, x=x, y=y)

    def process_frame(self, detections: Iterable[Detection]) -> FrameResult:
        """Run the full per-frame pipeline on already filtered detections."""
        context = self.context
        clusters = cluster_detections(detections, self.detection_config.clustering_threshold)
        view_clusters = [self._to_view(det) for det in clusters]

        events: List[Event] = []
        point: Optional[DetectedPoint] = None
        if context.loss.observe(len(clusters), len(context.history)):
            events.extend(context.reset_to_idle())
        else:
            representative = select_representative(view_clusters)
            if representative is not None:
                point = context.history.add_point(representative.x, representative.y)

        events.extend(advance(context))

        for event in events:
            if isinstance(event, RepIncremented):
                try:
                    stored = self.store.increment()
                except CounterStoreError:
                    context.count -= 1
                    raise
                if stored != event.count:
                    logger.warning("Stored count %d differs from session count %d", stored, event.count)

        return FrameResult(events=events, clusters=view_clusters, point=point, state=context.state)

    def process_model_output(self, output: Any) -> FrameResult:
        """Decode a raw model output tensor and process it as one frame."""
        return self.process_frame(decode_model_output(output, self.detection_config))

    def replay(self, frames: Iterable[Iterable[Detection]]) -> Tuple[FrameResult, ...]:
        return tuple(self.process_frame(dets) for dets in frames)
