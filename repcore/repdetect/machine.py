"""Rep-counting state machine.

IDLE waits for a still, full history; STATIC is a one-frame hand-off; MOVE
counts repetitions through :class:`TurningPointDetector`. All mutable state
lives in :class:`CounterContext`, which :func:`advance` updates once per
processed frame after the history has been updated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from repcore.config import CounterConfig
from repcore.quality.failures import LossMonitor
from repcore.repdetect.turning import TurningPointDetector
from repcore.signals.history import PointHistory
from repcore.signals.trend import buffer_deviation

logger = logging.getLogger(__name__)


class AlgoState(str, Enum):
    IDLE = "idle"
    STATIC = "static"
    MOVE = "move"


@dataclass(frozen=True)
class StateChanged:
    """Emitted on every state transition; ``STATIC`` doubles as "ready"."""

    previous: AlgoState
    state: AlgoState


@dataclass(frozen=True)
class RepIncremented:
    """Emitted once per counted repetition with the new cumulative count."""

    count: int


Event = Union[StateChanged, RepIncremented]


@dataclass
class CounterContext:
    """Everything the state machine owns for one capture session."""

    config: CounterConfig
    history: PointHistory
    detector: TurningPointDetector
    loss: LossMonitor
    state: AlgoState = AlgoState.IDLE
    stillness: int = 0
    count: int = 0
    last_deviation: Optional[float] = field(default=None, compare=False)

    @classmethod
    def create(cls, config: Optional[CounterConfig] = None, *, count: int = 0) -> "CounterContext":
        cfg = config or CounterConfig()
        return cls(
            config=cfg,
            history=PointHistory(cfg.max_points),
            detector=TurningPointDetector(
                window_size=cfg.window_size,
                min_reversal=cfg.min_reversal,
                direction=cfg.direction,
            ),
            loss=LossMonitor(cfg.miss_limit),
            count=count,
        )

    def transition(self, state: AlgoState) -> List[Event]:
        if state is self.state:
            return []
        previous, self.state = self.state, state
        logger.info("State %s -> %s", previous.value, state.value)
        return [StateChanged(previous=previous, state=state)]

    def reset_to_idle(self) -> List[Event]:
        """Drop the history and every counter that depends on it."""
        self.history.clear()
        self.stillness = 0
        self.detector.reset()
        self.loss.reset()
        return self.transition(AlgoState.IDLE)


def _step_idle(context: CounterContext) -> List[Event]:
    cfg = context.config
    deviation = buffer_deviation(context.history, sentinel=cfg.deviation_sentinel)
    context.last_deviation = deviation
    if deviation < cfg.stillness_deviation:
        context.stillness += 1
    else:
        context.stillness = 0

    if context.stillness > cfg.stillness_frames:
        context.stillness = 0
        return context.transition(AlgoState.STATIC)
    return []


def _step_static(context: CounterContext) -> List[Event]:
    context.detector.reset()
    return context.transition(AlgoState.MOVE)


def _step_move(context: CounterContext) -> List[Event]:
    window_size = context.config.window_size
    if len(context.history) < window_size:
        return []

    window = context.history.ys[-window_size:]
    if not context.detector.is_turning_point(window):
        return []

    context.count += 1
    logger.info("Repetition counted, total=%d", context.count)
    return [RepIncremented(count=context.count)]


_HANDLERS = {
    AlgoState.IDLE: _step_idle,
    AlgoState.STATIC: _step_static,
    AlgoState.MOVE: _step_move,
}


def advance(context: CounterContext) -> List[Event]:
    """Run the current state's rule once and return the events it produced."""
    return _HANDLERS[context.state](context)
