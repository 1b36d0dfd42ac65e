"""Rooted-tree view of a carved maze and its branch-weighted diameter.

The carved exits form a spanning tree. :func:`build_tree` hangs it from a
root cell and :func:`analyze_tree` finds, for every subtree, the longest path
under a metric where the edge from a node to each of its children weighs as
much as the node's child count. Paths that pass many junctions therefore beat
paths that are merely long, which makes for a harder maze.

Both walks use explicit stacks: a degenerate maze can be a single corridor
through a million cells.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from hexmaze.core.topology import HexGridTopology


def build_tree(topology: HexGridTopology, exits: Sequence[int], root: int = 0) -> List[List[int]]:
    """Return the ordered children of every cell, walking open exits from ``root``."""

    count = topology.cell_count
    if not 0 <= root < count:
        raise ValueError(f"root {root} is outside the grid")
    if len(exits) != count:
        raise ValueError("exits must hold one bitmap per cell")

    children: List[List[int]] = [[] for _ in range(count)]
    visited = [False] * count
    visited[root] = True
    reached = 1
    stack = [root]
    probe_order = topology.probe_order
    allowed = topology.exit_masks().tolist()
    while stack:
        cell = stack.pop()
        bits = int(exits[cell])
        if not bits:
            continue
        if bits & ~allowed[cell]:
            raise ValueError(f"cell {cell} has exits {bits & ~allowed[cell]:#x} leading off the grid")
        kids = children[cell]
        for bit, offset in probe_order:
            if bits & bit:
                neighbor = cell + offset
                if not visited[neighbor]:
                    visited[neighbor] = True
                    kids.append(neighbor)
                    stack.append(neighbor)
                    reached += 1

    if reached != count:
        raise RuntimeError(f"Only {reached} of {count} cells are reachable from cell {root}")
    return children


@dataclass
class TreeAnalysis:
    """Per-node results of :func:`analyze_tree`, indexed by cell.

    ``distance[n]`` is the weighted depth of the deepest leaf below ``n`` and
    ``furthest[n]`` that leaf. ``length[n]`` is the longest weighted path
    inside the subtree of ``n``, running from ``first[n]`` to ``second[n]``.
    """

    root: int
    distance: List[int]
    furthest: List[int]
    length: List[int]
    first: List[int]
    second: List[int]

    @property
    def endpoints(self) -> Tuple[int, int]:
        return self.first[self.root], self.second[self.root]

    @property
    def diameter(self) -> int:
        return self.length[self.root]


def _preorder(children: Sequence[Sequence[int]], root: int) -> List[int]:
    order: List[int] = []
    stack = [root]
    while stack:
        node = stack.pop()
        order.append(node)
        stack.extend(children[node])
    return order


def analyze_tree(children: Sequence[Sequence[int]], root: int = 0) -> TreeAnalysis:
    """Compute the weighted longest path of every subtree in one post-order pass."""

    count = len(children)
    if not 0 <= root < count:
        raise ValueError(f"root {root} is outside the tree")

    distance = [0] * count
    length = [0] * count
    furthest = list(range(count))
    first = list(range(count))
    second = list(range(count))

    for node in reversed(_preorder(children, root)):
        kids = children[node]
        if not kids:
            continue
        weight = len(kids)
        best = runner_up = longest = -1
        for kid in reversed(kids):
            if longest < 0 or length[kid] >= length[longest]:
                longest = kid
            if best < 0 or distance[kid] >= distance[best]:
                runner_up = best
                best = kid
            elif runner_up < 0 or distance[kid] >= distance[runner_up]:
                runner_up = kid

        d1 = distance[best] + weight
        # A lone child pairs with the node itself, one weighted step away.
        d2 = (distance[runner_up] if runner_up >= 0 else 0) + weight
        l1 = length[longest]

        distance[node] = d1
        furthest[node] = furthest[best]
        if d1 + d2 > l1:
            length[node] = d1 + d2
            first[node] = furthest[best]
            second[node] = furthest[runner_up] if runner_up >= 0 else node
        else:
            length[node] = l1
            first[node] = first[longest]
            second[node] = second[longest]

    return TreeAnalysis(
        root=root,
        distance=distance,
        furthest=furthest,
        length=length,
        first=first,
        second=second,
    )


__all__ = ["TreeAnalysis", "analyze_tree", "build_tree"]
