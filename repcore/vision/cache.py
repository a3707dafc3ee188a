"""On-disk recordings of per-frame detections.

A recording is a JSONL file with one processed frame per line, so a capture
can be replayed through the counter offline (see ``repcore replay``). Frames
with no detections are kept as empty lists; they drive the loss monitor.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List

from repcore.vision.detections import Detection


class DetectionCacheError(RuntimeError):
    """Raised when a recording line cannot be parsed."""


@dataclass(frozen=True)
class DetectionFrame:
    """Detections for a single processed frame."""

    frame_index: int
    detections: List[Detection] = field(default_factory=list)


def _frame_to_json(frame: DetectionFrame) -> str:
    payload = {
        "frame_index": frame.frame_index,
        "detections": [asdict(det) for det in frame.detections],
    }
    return json.dumps(payload)


def _frame_from_obj(obj: dict) -> DetectionFrame:
    detections = [
        Detection(score=float(det["score"]), x=float(det["x"]), y=float(det["y"]))
        for det in obj.get("detections", [])
    ]
    return DetectionFrame(frame_index=int(obj["frame_index"]), detections=detections)


def save_detection_frames(
    recording: Path, frames: Iterable[DetectionFrame], *, overwrite: bool = True
) -> Path:
    """Write detection frames to a JSONL recording.

    Args:
        recording: Destination path for the JSONL file.
        frames: Iterable of DetectionFrame instances.
        overwrite: Whether to overwrite an existing file.
    """

    recording.parent.mkdir(parents=True, exist_ok=True)
    if recording.exists() and not overwrite:
        raise FileExistsError(f"Recording already exists: {recording}")

    with recording.open("w", encoding="utf-8") as fh:
        for frame in frames:
            fh.write(_frame_to_json(frame))
            fh.write("\n")
    return recording


def load_detection_frames(recording: Path) -> Iterator[DetectionFrame]:
    """Read detection frames from a JSONL recording, skipping blank lines."""
    with recording.open("r", encoding="utf-8") as fh:
        for line_no, line in enumerate(fh, start=1):
            if not line.strip():
                continue
            try:
                yield _frame_from_obj(json.loads(line))
            except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
                raise DetectionCacheError(f"{recording}:{line_no}: invalid frame ({exc})") from exc
