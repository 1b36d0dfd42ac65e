"""Disjoint-set forest tracking which cells are already joined by open passages."""

from __future__ import annotations

from typing import List, Optional


class DisjointSetForest:
    """Union-find over cell indices with path compression and union by size.

    ``parent[cell]`` is ``None`` for a component root and otherwise links to
    another cell of the same component. Component sizes are only meaningful
    on roots.
    """

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise ValueError("size must be positive")
        self.parent: List[Optional[int]] = [None] * size
        self._size: List[int] = [1] * size
        self.components = size

    def __len__(self) -> int:
        return len(self.parent)

    def find(self, cell: int) -> int:
        parent = self.parent
        root = cell
        link = parent[root]
        while link is not None:
            root = link
            link = parent[root]
        # Path compression.
        link = parent[cell]
        while link is not None:
            parent[cell] = root
            cell = link
            link = parent[cell]
        return root

    def union(self, root_a: int, root_b: int) -> int:
        """Merge two component roots and return the surviving root.

        Both arguments must already be resolved with :meth:`find`; the smaller
        component is attached under the larger one (``root_a`` goes under
        ``root_b`` on a tie).
        """

        parent = self.parent
        if parent[root_a] is not None or parent[root_b] is not None:
            raise ValueError("union() expects component roots, resolve cells with find() first")
        if root_a == root_b:
            raise ValueError("cannot merge a component with itself")
        size = self._size
        if size[root_a] > size[root_b]:
            root_a, root_b = root_b, root_a
        parent[root_a] = root_b
        size[root_b] += size[root_a]
        self.components -= 1
        return root_b

    def connected(self, a: int, b: int) -> bool:
        return self.find(a) == self.find(b)

    def component_size(self, cell: int) -> int:
        return self._size[self.find(cell)]


__all__ = ["DisjointSetForest"]
