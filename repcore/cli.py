"""Command-line interface for the counting pipeline.

``repcore replay recording.jsonl`` feeds a recorded detection stream through a
fresh session and prints every emitted event, followed by the final count.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from repcore.config import CounterConfig, DetectionConfig, Direction, default_state_file
from repcore.io.counter_store import CounterStore, CounterStoreError, InMemoryCounterStore
from repcore.repdetect.machine import RepIncremented, StateChanged
from repcore.repdetect.session import RepSession
from repcore.vision.cache import DetectionCacheError, load_detection_frames


def eprint(*args: object) -> None:
    print(*args, file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="repcore", description="Repetition counter for tracked point streams.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    replay = subparsers.add_parser("replay", help="Replay a JSONL detection recording.")
    replay.add_argument("recording", type=Path, help="JSONL file with one frame of detections per line.")
    store_group = replay.add_mutually_exclusive_group()
    store_group.add_argument(
        "--state-file",
        type=Path,
        default=None,
        help=f"Counter file (default: $REPCORE_STATE_FILE or {default_state_file()}).",
    )
    store_group.add_argument("--no-persist", action="store_true", help="Count in memory starting from zero.")
    replay.add_argument(
        "--direction",
        choices=[d.value for d in Direction],
        default=Direction.RISING.value,
        help="Reversal direction that closes a repetition.",
    )
    replay.add_argument(
        "--clustering-threshold",
        type=float,
        default=DetectionConfig.clustering_threshold,
        help="Distance below which detections merge (model space).",
    )
    replay.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def _replay(args: argparse.Namespace) -> int:
    store = InMemoryCounterStore() if args.no_persist else CounterStore(args.state_file)
    counter_config = CounterConfig(direction=Direction(args.direction))
    try:
        session = RepSession(
            store,
            counter_config=counter_config,
            detection_config=DetectionConfig(clustering_threshold=args.clustering_threshold),
        )
        start = session.count
        for frame in load_detection_frames(args.recording):
            result = session.process_frame(frame.detections)
            for event in result.events:
                if isinstance(event, StateChanged):
                    print(f"frame {frame.frame_index}: state {event.previous.value} -> {event.state.value}")
                elif isinstance(event, RepIncremented):
                    print(f"frame {frame.frame_index}: rep +1 (total {event.count})")
    except (CounterStoreError, DetectionCacheError, OSError) as exc:
        eprint(f"Error: {exc}")
        return 1

    print(f"Done. {session.count - start} reps counted, total {session.count} ({counter_config.describe()}).")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.command == "replay":
        return _replay(args)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
