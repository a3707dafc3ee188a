import json
import tempfile
import unittest
from pathlib import Path

from repcore.config import STATE_FILE_ENV, default_state_file
from repcore.io.counter_store import CounterStore, CounterStoreError, InMemoryCounterStore


class CounterStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "nested" / "rep_count.json"

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_missing_file_reads_as_zero(self) -> None:
        self.assertEqual(CounterStore(self.path).read(), 0)

    def test_increment_persists_across_instances(self) -> None:
        store = CounterStore(self.path)
        self.assertEqual(store.increment(), 1)
        self.assertEqual(store.increment(), 2)

        self.assertEqual(json.loads(self.path.read_text()), {"rep_count": 2})
        self.assertEqual(CounterStore(self.path).read(), 2)
        self.assertEqual(list(self.path.parent.glob("*.tmp")), [])

    def test_corrupt_file_raises(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{not json")
        with self.assertRaises(CounterStoreError):
            CounterStore(self.path).read()

    def test_invalid_count_raises(self) -> None:
        self.path.parent.mkdir(parents=True)
        for payload in ({"rep_count": -1}, {"rep_count": "3"}, {"other": 1}, [1]):
            self.path.write_text(json.dumps(payload))
            with self.assertRaises(CounterStoreError):
                CounterStore(self.path).increment()

    def test_default_location_honours_environment(self) -> None:
        self.assertEqual(default_state_file({STATE_FILE_ENV: str(self.path)}), self.path)
        self.assertEqual(default_state_file({}).name, "rep_count.json")


class InMemoryCounterStoreTests(unittest.TestCase):
    def test_starts_from_initial_value(self) -> None:
        store = InMemoryCounterStore(initial=3)
        self.assertEqual(store.read(), 3)
        self.assertEqual(store.increment(), 4)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
