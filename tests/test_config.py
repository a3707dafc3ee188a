import unittest

from repcore.config import CounterConfig, DetectionConfig, Direction


class ConfigTests(unittest.TestCase):
    def test_defaults_match_reference_constants(self) -> None:
        detection = DetectionConfig()
        self.assertEqual(
            (detection.num_classes, detection.confidence_threshold, detection.clustering_threshold),
            (1, 0.8, 50.0),
        )
        counter = CounterConfig()
        self.assertEqual((counter.max_points, counter.window_size, counter.miss_limit), (10, 9, 7))
        self.assertEqual(counter.direction, Direction.RISING)

    def test_describe_is_compact(self) -> None:
        self.assertEqual(CounterConfig().describe(), "pts10-win9-std5-rev10-rising")

    def test_invalid_values_raise(self) -> None:
        with self.assertRaises(ValueError):
            DetectionConfig(confidence_threshold=1.5)
        with self.assertRaises(ValueError):
            DetectionConfig(clustering_threshold=0.0)
        with self.assertRaises(ValueError):
            CounterConfig(window_size=12)
        with self.assertRaises(ValueError):
            CounterConfig(max_points=10, window_size=4)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
