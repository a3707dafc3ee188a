"""Detection-loss tracking.

A frame with no clusters while the history still holds points counts as a
miss. Any other frame resets the streak. Once the streak exceeds the limit the
caller drops its history and waits for stillness again.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class LossMonitor:
    """Consecutive-miss counter gating the forced reset to IDLE."""

    def __init__(self, miss_limit: int = 7) -> None:
        self.miss_limit = miss_limit
        self.misses = 0

    def observe(self, cluster_count: int, history_size: int) -> bool:
        """Record one frame and return True when tracking counts as lost."""
        if cluster_count == 0 and history_size > 0:
            self.misses += 1
            if self.misses > self.miss_limit:
                logger.warning("Tracking lost after %d consecutive empty frames", self.misses)
                return True
            return False
        self.misses = 0
        return False

    def reset(self) -> None:
        self.misses = 0
