import unittest

from repcore.signals.history import DetectedPoint, PointHistory, round_half_away


class PointHistoryTests(unittest.TestCase):
    def test_first_point_has_zero_ydiff_and_later_points_diff_previous(self) -> None:
        history = PointHistory(max_points=10)
        first = history.add_point(10.2, 100.4)
        second = history.add_point(11.0, 94.0)
        third = history.add_point(11.0, 97.0)

        self.assertEqual(first, DetectedPoint(x=10, y=100, ydiff=0))
        self.assertEqual(second.ydiff, 6)
        self.assertEqual(third.ydiff, -3)

    def test_coordinates_round_half_away_from_zero(self) -> None:
        self.assertEqual(round_half_away(2.5), 3)
        self.assertEqual(round_half_away(3.5), 4)
        self.assertEqual(round_half_away(-2.5), -3)
        self.assertEqual(round_half_away(2.49), 2)

        point = PointHistory().add_point(0.5, 1.5)
        self.assertEqual((point.x, point.y), (1, 2))

    def test_eviction_keeps_most_recent_points_in_order(self) -> None:
        history = PointHistory(max_points=10)
        for y in range(13):
            history.add_point(0, y)

        self.assertEqual(len(history), 10)
        self.assertTrue(history.is_full)
        self.assertEqual(history.ys, tuple(range(3, 13)))
        self.assertEqual(history.last.y, 12)

    def test_ydiff_is_fixed_at_insertion(self) -> None:
        history = PointHistory(max_points=2)
        history.add_point(0, 5)
        history.add_point(0, 8)
        history.add_point(0, 4)
        self.assertEqual([p.ydiff for p in history.points], [-3, 4])

    def test_clear_empties_buffer(self) -> None:
        history = PointHistory(max_points=3)
        history.add_point(1, 1)
        history.clear()
        self.assertEqual(len(history), 0)
        self.assertIsNone(history.last)
        self.assertEqual(history.add_point(0, 7).ydiff, 0)

    def test_invalid_capacity_raises(self) -> None:
        with self.assertRaises(ValueError):
            PointHistory(max_points=0)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
