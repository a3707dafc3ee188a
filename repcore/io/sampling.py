"""Frame subsampling for the capture side.

Only every ``stride``-th delivered frame reaches inference and the counter. The
frame counter wraps once it passes ``wrap_after`` so it never grows without
bound during long sessions.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Tuple, TypeVar

T = TypeVar("T")


class FrameSampler:
    """Decide per delivered frame whether it should be processed."""

    def __init__(self, stride: int = 5, wrap_after: int = 1000) -> None:
        if stride < 1:
            raise ValueError("stride must be at least 1")
        if wrap_after < stride:
            raise ValueError("wrap_after must be at least stride")
        self.stride = stride
        self.wrap_after = wrap_after
        self.counter = 0

    def should_process(self) -> bool:
        if self.counter > self.wrap_after:
            self.counter = 0
        self.counter += 1
        return self.counter % self.stride == 0


def iter_sampled(frames: Iterable[T], sampler: FrameSampler | None = None) -> Iterator[Tuple[int, T]]:
    """Yield ``(delivered_index, frame)`` for the frames the sampler keeps."""

    active = sampler or FrameSampler()
    for idx, frame in enumerate(frames):
        if active.should_process():
            yield idx, frame
