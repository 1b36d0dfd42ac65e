import random
import unittest
from typing import Dict, List, Set

from hexmaze.core.disjoint_set import DisjointSetForest
from hexmaze.core.topology import HexGridTopology


def _reference_components(size: int, edges: List[tuple]) -> List[Set[int]]:
    adjacency: Dict[int, Set[int]] = {cell: set() for cell in range(size)}
    for a, b in edges:
        adjacency[a].add(b)
        adjacency[b].add(a)
    seen: Set[int] = set()
    components: List[Set[int]] = []
    for cell in range(size):
        if cell in seen:
            continue
        component = {cell}
        stack = [cell]
        while stack:
            current = stack.pop()
            for other in adjacency[current]:
                if other not in component:
                    component.add(other)
                    stack.append(other)
        seen |= component
        components.append(component)
    return components


class DisjointSetForestTests(unittest.TestCase):
    def test_new_forest_has_singleton_components(self) -> None:
        forest = DisjointSetForest(5)
        self.assertEqual(forest.components, 5)
        for cell in range(5):
            self.assertEqual(forest.find(cell), cell)
            self.assertEqual(forest.component_size(cell), 1)

    def test_union_by_size_keeps_larger_root(self) -> None:
        forest = DisjointSetForest(6)
        big = forest.union(forest.find(0), forest.find(1))
        big = forest.union(big, forest.find(2))
        root = forest.union(forest.find(5), big)
        self.assertEqual(root, big)
        self.assertEqual(forest.component_size(5), 4)
        self.assertEqual(forest.components, 3)

    def test_tie_links_first_root_under_second(self) -> None:
        forest = DisjointSetForest(2)
        self.assertEqual(forest.union(0, 1), 1)
        self.assertEqual(forest.parent[0], 1)
        self.assertIsNone(forest.parent[1])

    def test_find_compresses_paths(self) -> None:
        forest = DisjointSetForest(4)
        # Build the chain 0 -> 1 -> 2 -> 3 by hand.
        forest.parent[0] = 1
        forest.parent[1] = 2
        forest.parent[2] = 3
        self.assertEqual(forest.find(0), 3)
        self.assertEqual(forest.parent[0], 3)
        self.assertEqual(forest.parent[1], 3)
        self.assertEqual(forest.parent[2], 3)

    def test_union_rejects_unresolved_cells(self) -> None:
        forest = DisjointSetForest(3)
        forest.union(0, 1)
        with self.assertRaises(ValueError):
            forest.union(0, 2)
        with self.assertRaises(ValueError):
            forest.union(1, 1)

    def test_matches_reference_connectivity_on_small_grid(self) -> None:
        topology = HexGridTopology(4, 4)
        walls = [tuple(pair) for pair in topology.enumerate_walls().tolist()]
        rng = random.Random(7)
        for _ in range(20):
            forest = DisjointSetForest(topology.cell_count)
            rng.shuffle(walls)
            joined = walls[: rng.randint(0, len(walls))]
            for a, b in joined:
                root_a, root_b = forest.find(a), forest.find(b)
                if root_a != root_b:
                    forest.union(root_a, root_b)
            components = _reference_components(topology.cell_count, joined)
            self.assertEqual(forest.components, len(components))
            for component in components:
                for a in component:
                    for b in range(topology.cell_count):
                        self.assertEqual(forest.connected(a, b), b in component)
                    self.assertEqual(forest.component_size(a), len(component))

    def test_rejects_empty_forest(self) -> None:
        with self.assertRaises(ValueError):
            DisjointSetForest(0)


if __name__ == "__main__":
    unittest.main()
