"""repcore: repetition counting from tracked 2-D point detections.

The package clusters per-frame detections into one point, keeps a short
rolling history, and runs a small state machine (idle, static, move) that
counts direction reversals as repetitions.
"""

__all__ = [
    "cli",
    "config",
]

__version__ = "0.1.0"
