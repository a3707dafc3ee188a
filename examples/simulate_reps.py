"""Quick check for the counting pipeline.

Builds a synthetic recording (a still phase followed by three noisy squats with
some duplicate detections and a short dropout), then replays it through the
CLI in memory and prints the emitted events.
"""

import random
from pathlib import Path

from repcore import cli
from repcore.vision.cache import DetectionFrame, save_detection_frames
from repcore.vision.detections import Detection


def synthetic_trace(reps: int = 3) -> list:
    trace = [300.0] * 25
    for _ in range(reps):
        trace += [300.0 - 15 * i for i in range(1, 9)]
        trace += [180.0 + 15 * i for i in range(1, 9)]
        trace += [300.0] * 10
    return trace


def main() -> None:
    rng = random.Random(7)
    frames = []
    for idx, y in enumerate(synthetic_trace()):
        if 30 <= idx < 33:
            frames.append(DetectionFrame(frame_index=idx, detections=[]))
            continue
        detections = [
            Detection(score=0.8 + rng.random() * 0.2, x=320 + rng.gauss(0, 1), y=y + rng.gauss(0, 1))
            for _ in range(rng.randint(1, 3))
        ]
        frames.append(DetectionFrame(frame_index=idx, detections=detections))

    recording = Path("examples/_tmp_reps.jsonl")
    save_detection_frames(recording, frames)
    print("recording:", recording, "frames:", len(frames))
    raise SystemExit(cli.main(["replay", str(recording), "--no-persist"]))


if __name__ == "__main__":
    main()
