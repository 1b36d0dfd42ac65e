import unittest
from unittest import mock

import numpy as np

from hexmaze.core import pipeline
from hexmaze.core.pipeline import PhaseTimer, derive_seed, generate_maze
from hexmaze.core.topology import LEFT_DOWN, LEFT_LEVEL, OPPOSITE


class GenerateMazeTests(unittest.TestCase):
    def assertValidMaze(self, maze) -> None:
        cell_count = maze.columns * maze.rows
        self.assertEqual(maze.exits.shape, (cell_count,))
        self.assertEqual(maze.exits.dtype, np.uint8)
        bit_total = sum(bin(int(bits)).count("1") for bits in maze.exits)
        self.assertEqual(bit_total, 2 * (cell_count - 1))
        for cell in range(cell_count):
            for neighbor in maze.open_neighbors(cell):
                self.assertIn(cell, list(maze.open_neighbors(neighbor)))
        self.assertTrue(0 <= maze.start < cell_count)
        self.assertTrue(0 <= maze.end < cell_count)
        self.assertNotEqual(maze.start, maze.end)
        self.assertEqual(sum(len(kids) for kids in maze.children), cell_count - 1)

    def test_same_seed_is_deterministic(self) -> None:
        first = generate_maze(3, 3, 42)
        second = generate_maze(3, 3, 42)
        self.assertEqual(first.exits.tobytes(), second.exits.tobytes())
        self.assertEqual((first.start, first.end), (second.start, second.end))
        self.assertEqual(first.path_length, second.path_length)

    def test_changing_seed_changes_maze(self) -> None:
        reference = generate_maze(3, 3, 42).exits.tobytes()
        others = [generate_maze(3, 3, seed).exits.tobytes() for seed in range(43, 53)]
        self.assertTrue(any(other != reference for other in others))

    def test_bucket_shuffle_is_deterministic_too(self) -> None:
        first = generate_maze(8, 5, 7, shuffle="bucket")
        second = generate_maze(8, 5, 7, shuffle="bucket")
        self.assertEqual(first.exits.tobytes(), second.exits.tobytes())
        self.assertEqual(first.shuffle, "bucket")
        self.assertValidMaze(first)

    def test_smallest_grid(self) -> None:
        for seed in range(20):
            with self.subTest(seed=seed):
                maze = generate_maze(2, 2, seed)
                self.assertValidMaze(maze)
                self.assertEqual(len(maze.kept_walls), 2)

    def test_various_sizes_are_spanning_trees(self) -> None:
        for columns, rows in [(2, 7), (7, 2), (5, 5), (16, 9)]:
            with self.subTest(columns=columns, rows=rows):
                self.assertValidMaze(generate_maze(columns, rows, 1234))

    def test_solution_path_joins_endpoints(self) -> None:
        maze = generate_maze(10, 10, 5)
        path = maze.solution_path()
        self.assertEqual(path[0], maze.start)
        self.assertEqual(path[-1], maze.end)
        self.assertEqual(len(path), len(set(path)))
        for a, b in zip(path, path[1:]):
            self.assertIn(b, list(maze.open_neighbors(a)))

    def test_lone_child_step_decides_endpoints(self) -> None:
        # With the lone-child step counted, the path runs back to the root cell.
        maze = generate_maze(3, 3, 14)
        self.assertEqual((maze.start, maze.end), (5, 0))

    def test_open_neighbors_stay_on_the_grid(self) -> None:
        maze = generate_maze(2, 2, 3)
        maze.exits[0] |= LEFT_DOWN | LEFT_LEVEL
        neighbors = list(maze.open_neighbors(0))
        self.assertTrue(all(0 <= cell < maze.cell_count for cell in neighbors))
        self.assertLessEqual(set(neighbors), {cell for _, cell in maze.topology.neighbors(0)})

    def test_exit_grid_uses_column_major_layout(self) -> None:
        maze = generate_maze(4, 3, 9)
        grid = maze.exit_grid
        self.assertEqual(grid.shape, (4, 3))
        self.assertEqual(int(grid[2, 1]), int(maze.exits[maze.cell_index(2, 1)]))
        self.assertEqual(maze.cell_position(maze.cell_index(3, 2)), (3, 2))

    def test_missing_seed_is_derived_and_reported(self) -> None:
        with mock.patch.object(pipeline, "derive_seed", return_value=31337):
            maze = generate_maze(4, 4)
        self.assertEqual(maze.seed, 31337)
        again = generate_maze(4, 4, maze.seed)
        self.assertEqual(maze.exits.tobytes(), again.exits.tobytes())

    def test_seed_is_masked_to_31_bits(self) -> None:
        maze = generate_maze(3, 3, (1 << 40) + 5)
        self.assertEqual(maze.seed, 5)

    def test_invalid_configuration_is_rejected_early(self) -> None:
        with mock.patch.object(pipeline, "DisjointSetForest") as forest:
            for columns, rows in [(1, 4), (4, 1), (1001, 3), (3, 1001)]:
                with self.subTest(columns=columns, rows=rows):
                    with self.assertRaises(ValueError):
                        generate_maze(columns, rows, 1)
            with self.assertRaises(ValueError):
                generate_maze(4, 4, 1, shuffle="radix")
            forest.assert_not_called()

    def test_phases_are_logged(self) -> None:
        with self.assertLogs(level="INFO") as captured:
            generate_maze(3, 4, 2)
        output = "\n".join(captured.output)
        for phase in ("Shuffling walls", "Creating maze", "Building tree", "Analysing tree"):
            self.assertIn(phase, output)

    def test_largest_grid_completes(self) -> None:
        maze = generate_maze(1000, 1000, 1)
        self.assertEqual(len(maze.exits), 1000000)
        bit_total = int(np.unpackbits(maze.exits).sum())
        self.assertEqual(bit_total, 2 * (1000000 - 1))


class SeedAndTimerTests(unittest.TestCase):
    def test_derived_seed_fits_31_bits(self) -> None:
        seed = derive_seed()
        self.assertGreaterEqual(seed, 0)
        self.assertLessEqual(seed, 0x7FFFFFFF)

    def test_timer_records_each_phase(self) -> None:
        timer = PhaseTimer()
        with self.assertLogs(level="INFO"):
            with timer.phase("First"):
                pass
            with timer.phase("Second"):
                pass
        self.assertEqual(list(timer.timings), ["First", "Second"])
        self.assertTrue(all(value >= 0 for value in timer.timings.values()))

    def test_opposite_bits_are_symmetric(self) -> None:
        for bit, other in OPPOSITE.items():
            self.assertEqual(OPPOSITE[other], bit)


if __name__ == "__main__":
    unittest.main()
