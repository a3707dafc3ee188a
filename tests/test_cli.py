import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from repcore import cli
from repcore.vision.cache import DetectionFrame, save_detection_frames
from repcore.vision.detections import Detection

TRACE = [100] * 21 + [90, 80, 70, 60, 50, 40, 30, 40, 50, 60, 70, 80, 90, 100]


class ReplayCommandTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)
        self.recording = self.dir / "squats.jsonl"
        frames = [
            DetectionFrame(frame_index=5 * (i + 1), detections=[Detection(score=0.9, x=320.0, y=float(y))])
            for i, y in enumerate(TRACE)
        ]
        save_detection_frames(self.recording, frames)

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def _run(self, *argv: str):
        with mock.patch("sys.stdout", new_callable=io.StringIO) as out, mock.patch(
            "sys.stderr", new_callable=io.StringIO
        ) as err:
            code = cli.main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_replay_prints_events_without_persisting(self) -> None:
        code, out, _ = self._run("replay", str(self.recording), "--no-persist")

        self.assertEqual(code, 0)
        self.assertIn("frame 100: state idle -> static", out)
        self.assertIn("frame 105: state static -> move", out)
        self.assertIn("rep +1 (total 1)", out)
        self.assertIn("Done. 1 reps counted, total 1", out)

    def test_replay_accumulates_in_state_file(self) -> None:
        state_file = self.dir / "count.json"
        self._run("replay", str(self.recording), "--state-file", str(state_file))
        code, out, _ = self._run("replay", str(self.recording), "--state-file", str(state_file))

        self.assertEqual(code, 0)
        self.assertIn("Done. 1 reps counted, total 2", out)
        self.assertEqual(json.loads(state_file.read_text()), {"rep_count": 2})

    def test_missing_recording_reports_error(self) -> None:
        code, _, err = self._run("replay", str(self.dir / "missing.jsonl"), "--no-persist")
        self.assertEqual(code, 1)
        self.assertIn("Error:", err)

    def test_falling_direction_ignores_rising_reversal(self) -> None:
        code, out, _ = self._run("replay", str(self.recording), "--no-persist", "--direction", "falling")
        self.assertEqual(code, 0)
        self.assertNotIn("rep +1", out)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
