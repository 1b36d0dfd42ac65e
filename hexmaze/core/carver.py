"""Randomized Kruskal carving over a shuffled wall list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from hexmaze.core.disjoint_set import DisjointSetForest
from hexmaze.core.topology import HexGridTopology


@dataclass
class CarveResult:
    """Exit bitmaps after carving plus the walls that stayed standing."""

    exits: List[int]
    kept_walls: np.ndarray

    @property
    def removed_count(self) -> int:
        return sum(bin(bits).count("1") for bits in self.exits) // 2


def carve_maze(
    topology: HexGridTopology,
    walls: np.ndarray,
    forest: Optional[DisjointSetForest] = None,
) -> CarveResult:
    """Knock down every wall whose cells are not yet connected.

    ``walls`` is consumed in the given order. A wall between two components is
    removed: both cells get the matching exit bit and the components merge. A
    wall inside a single component is kept, since removing it would close a
    cycle.
    """

    if forest is None:
        forest = DisjointSetForest(topology.cell_count)
    elif len(forest) != topology.cell_count:
        raise ValueError("forest size does not match the grid")

    exits = [0] * topology.cell_count
    kept = bytearray(len(walls))
    find = forest.find
    union = forest.union
    exit_bits = topology.exit_bits
    removed = 0

    for position, (lower, higher) in enumerate(walls.tolist()):
        root_lower = find(lower)
        root_higher = find(higher)
        if root_lower == root_higher:
            kept[position] = 1
            continue
        union(root_lower, root_higher)
        lower_bit, higher_bit = exit_bits(lower, higher)
        exits[lower] |= lower_bit
        exits[higher] |= higher_bit
        removed += 1

    if forest.components != 1:
        raise RuntimeError(f"Carving left {forest.components} components; the wall list does not span the grid")
    if removed != topology.cell_count - 1:
        raise RuntimeError(f"Removed {removed} walls, a spanning tree needs {topology.cell_count - 1}")

    mask = np.frombuffer(bytes(kept), dtype=np.bool_)
    return CarveResult(exits=exits, kept_walls=walls[mask])


__all__ = ["CarveResult", "carve_maze"]
