import unittest

import numpy as np

from hexmaze.core.topology import HexGridTopology
from hexmaze.core.walls import shuffle_walls


def _as_set(walls: np.ndarray) -> set:
    return {tuple(pair) for pair in walls.tolist()}


class ShuffleWallsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.walls = HexGridTopology(9, 7).enumerate_walls()

    def test_uniform_shuffle_is_a_permutation(self) -> None:
        shuffled = shuffle_walls(self.walls, np.random.default_rng(3))
        self.assertEqual(shuffled.shape, self.walls.shape)
        self.assertEqual(_as_set(shuffled), _as_set(self.walls))
        self.assertFalse(np.array_equal(shuffled, self.walls))

    def test_bucket_shuffle_is_a_permutation(self) -> None:
        shuffled = shuffle_walls(self.walls, np.random.default_rng(3), "bucket")
        self.assertEqual(len(shuffled), len(self.walls))
        self.assertEqual(_as_set(shuffled), _as_set(self.walls))
        self.assertFalse(np.array_equal(shuffled, self.walls))

    def test_same_seed_same_order(self) -> None:
        for strategy in ("uniform", "bucket"):
            with self.subTest(strategy=strategy):
                first = shuffle_walls(self.walls, np.random.default_rng(99), strategy)
                second = shuffle_walls(self.walls, np.random.default_rng(99), strategy)
                np.testing.assert_array_equal(first, second)

    def test_input_is_not_modified(self) -> None:
        original = self.walls.copy()
        shuffle_walls(self.walls, np.random.default_rng(1))
        np.testing.assert_array_equal(self.walls, original)

    def test_uniform_shuffle_has_no_positional_bias(self) -> None:
        # Each wall should lead the order about equally often.
        walls = HexGridTopology(2, 2).enumerate_walls()
        rng = np.random.default_rng(2024)
        counts = {tuple(pair): 0 for pair in walls.tolist()}
        trials = 5000
        for _ in range(trials):
            counts[tuple(shuffle_walls(walls, rng)[0].tolist())] += 1
        expected = trials / len(walls)
        for count in counts.values():
            self.assertLess(abs(count - expected), expected * 0.15)

    def test_unknown_strategy_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            shuffle_walls(self.walls, np.random.default_rng(0), "radix")


if __name__ == "__main__":
    unittest.main()
