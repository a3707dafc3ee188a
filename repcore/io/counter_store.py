"""Durable cumulative repetition counter.

The count is the only state that survives a session. It is stored as a small
JSON document and rewritten through a temporary file plus ``os.replace`` so a
crash never leaves a half-written file behind.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional

from repcore.config import default_state_file


class CounterStoreError(RuntimeError):
    """Raised when the counter file cannot be read or written."""


class InMemoryCounterStore:
    """Process-local store for tests and throwaway sessions."""

    def __init__(self, initial: int = 0) -> None:
        self._value = initial
        self._lock = threading.Lock()

    def read(self) -> int:
        with self._lock:
            return self._value

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value


class CounterStore:
    """JSON-file backed counter; a missing file reads as zero."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else default_state_file()
        self._lock = threading.Lock()

    def _load(self) -> int:
        if not self.path.exists():
            return 0
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise CounterStoreError(f"Unreadable counter file {self.path}: {exc}") from exc

        count = payload.get("rep_count") if isinstance(payload, dict) else None
        if not isinstance(count, int) or isinstance(count, bool) or count < 0:
            raise CounterStoreError(f"Invalid rep_count in {self.path}: {count!r}")
        return count

    def _write(self, count: int) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".rep_count", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump({"rep_count": count}, fh)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            raise CounterStoreError(f"Failed to write counter file {self.path}: {exc}") from exc

    def read(self) -> int:
        with self._lock:
            return self._load()

    def increment(self) -> int:
        """Add one to the stored count and return the new value."""
        with self._lock:
            count = self._load() + 1
            self._write(count)
            return count
