"""Hexagonal grid topology: cell numbering, direction bits and candidate walls.

Columns are numbered left to right and each column holds ``rows`` cells
numbered bottom to top. Even columns sit half a cell lower than odd ones, so
cell ``(k, l)`` touches ``(k, l +- 1)`` above and below, ``(k +- 1, l)`` on
both sides, and ``(k +- 1, l - 1)`` when ``k`` is even or ``(k +- 1, l + 1)``
when ``k`` is odd. Cell ``(k, l)`` has index ``k * rows + l``.
"""

from __future__ import annotations

from typing import Dict, Iterator, Tuple

import numpy as np

# Exit bits, named after where the neighbour lies relative to the cell.
UP = 1  # (k, l+1)
DOWN = 2  # (k, l-1)
LEFT_DOWN = 4  # (k-1, l-1)
RIGHT_DOWN = 8  # (k+1, l-1)
LEFT_LEVEL = 16  # (k-1, l)
RIGHT_LEVEL = 32  # (k+1, l)
LEFT_UP = 64  # (k-1, l+1)
RIGHT_UP = 128  # (k+1, l+1)

DIRECTION_NAMES: Dict[int, str] = {
    UP: "up",
    DOWN: "down",
    LEFT_DOWN: "left-down",
    RIGHT_DOWN: "right-down",
    LEFT_LEVEL: "left-level",
    RIGHT_LEVEL: "right-level",
    LEFT_UP: "left-up",
    RIGHT_UP: "right-up",
}

EVEN_COLUMN_DIRECTIONS: Tuple[int, ...] = (UP, DOWN, LEFT_DOWN, LEFT_LEVEL, RIGHT_DOWN, RIGHT_LEVEL)
ODD_COLUMN_DIRECTIONS: Tuple[int, ...] = (UP, DOWN, LEFT_LEVEL, LEFT_UP, RIGHT_LEVEL, RIGHT_UP)

OPPOSITE: Dict[int, int] = {
    UP: DOWN,
    DOWN: UP,
    LEFT_DOWN: RIGHT_UP,
    RIGHT_UP: LEFT_DOWN,
    LEFT_LEVEL: RIGHT_LEVEL,
    RIGHT_LEVEL: LEFT_LEVEL,
    LEFT_UP: RIGHT_DOWN,
    RIGHT_DOWN: LEFT_UP,
}

# (column delta, row delta) for each bit
STEPS: Dict[int, Tuple[int, int]] = {
    UP: (0, 1),
    DOWN: (0, -1),
    LEFT_DOWN: (-1, -1),
    RIGHT_DOWN: (1, -1),
    LEFT_LEVEL: (-1, 0),
    RIGHT_LEVEL: (1, 0),
    LEFT_UP: (-1, 1),
    RIGHT_UP: (1, 1),
}

Wall = Tuple[int, int]


def expected_wall_count(columns: int, rows: int) -> int:
    """Number of interior walls in a ``columns x rows`` hex grid."""

    return (columns - 1) * (2 * rows - 1) + columns * (rows - 1)


class HexGridTopology:
    """Fixed-shape hex grid with even columns offset half a row downwards."""

    MIN_DIMENSION = 2
    MAX_DIMENSION = 1000

    def __init__(self, columns: int, rows: int) -> None:
        for name, value in (("columns", columns), ("rows", rows)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if not self.MIN_DIMENSION <= value <= self.MAX_DIMENSION:
                raise ValueError(
                    f"{name} must be in the range {self.MIN_DIMENSION}..{self.MAX_DIMENSION}, got {value}"
                )
        self.columns = int(columns)
        self.rows = int(rows)
        self.cell_count = self.columns * self.rows
        self.wall_count = expected_wall_count(self.columns, self.rows)

        n = self.rows
        # Probe order used when walking exits; every bit maps to a fixed index delta.
        self.probe_order: Tuple[Tuple[int, int], ...] = (
            (LEFT_DOWN, -n - 1),
            (LEFT_LEVEL, -n),
            (LEFT_UP, -n + 1),
            (DOWN, -1),
            (UP, 1),
            (RIGHT_DOWN, n - 1),
            (RIGHT_LEVEL, n),
            (RIGHT_UP, n + 1),
        )
        self.offsets: Dict[int, int] = dict(self.probe_order)

        # Signed delta (higher - lower) -> (bit on lower, bit on higher).
        # With two rows the right-down delta equals +1, which only ever
        # belongs to a vertical wall, so UP is written last and wins.
        self._exit_table: Dict[int, Tuple[int, int]] = {
            n - 1: (RIGHT_DOWN, LEFT_UP),
            n: (RIGHT_LEVEL, LEFT_LEVEL),
            n + 1: (RIGHT_UP, LEFT_DOWN),
            -n - 1: (LEFT_DOWN, RIGHT_UP),
            -n: (LEFT_LEVEL, RIGHT_LEVEL),
            -n + 1: (LEFT_UP, RIGHT_DOWN),
            1: (UP, DOWN),
        }

    def __repr__(self) -> str:
        return f"HexGridTopology(columns={self.columns}, rows={self.rows})"

    # ------------------------------------------------------------------
    # Cell addressing

    def cell_index(self, column: int, row: int) -> int:
        if not (0 <= column < self.columns and 0 <= row < self.rows):
            raise ValueError(f"cell ({column}, {row}) is outside the grid")
        return column * self.rows + row

    def cell_position(self, index: int) -> Tuple[int, int]:
        if not 0 <= index < self.cell_count:
            raise ValueError(f"cell index {index} is outside the grid")
        column, row = divmod(index, self.rows)
        return column, row

    @staticmethod
    def directions(column: int) -> Tuple[int, ...]:
        """The six direction bits that are meaningful for cells in ``column``."""

        return ODD_COLUMN_DIRECTIONS if column & 1 else EVEN_COLUMN_DIRECTIONS

    def neighbors(self, index: int) -> Iterator[Tuple[int, int]]:
        """Yield ``(bit, neighbour_index)`` for every neighbour inside the grid."""

        column, row = self.cell_position(index)
        for bit in self.directions(column):
            d_column, d_row = STEPS[bit]
            other_column = column + d_column
            other_row = row + d_row
            if 0 <= other_column < self.columns and 0 <= other_row < self.rows:
                yield bit, other_column * self.rows + other_row

    def exit_masks(self) -> np.ndarray:
        """Bitmap of the exits each cell may carry, one ``uint8`` per cell."""

        m, n = self.columns, self.rows
        masks = np.zeros((m, n), dtype=np.uint8)
        rows = np.arange(n)
        for column in range(m):
            for bit in self.directions(column):
                d_column, d_row = STEPS[bit]
                if not 0 <= column + d_column < m:
                    continue
                inside = (rows + d_row >= 0) & (rows + d_row < n)
                masks[column, inside] |= bit
        return masks.reshape(-1)

    # ------------------------------------------------------------------
    # Walls

    def enumerate_walls(self) -> np.ndarray:
        """Return every adjacent cell pair once as an ``(W, 2)`` array.

        Each cell contributes its north-west, north and north-east walls. The
        north-west/north-east walls of odd columns are skipped on the top row,
        where the diagonal neighbour would be above the grid.
        """

        m, n = self.columns, self.rows
        rows = np.arange(n, dtype=np.int64)
        parts = []
        for column in range(m):
            odd = column & 1
            this = column * n + rows
            diagonal = this[:-1] if odd else this
            if column > 0:
                parts.append(np.stack((diagonal, diagonal - n + odd), axis=1))
            parts.append(np.stack((this[:-1], this[:-1] + 1), axis=1))
            if column < m - 1:
                parts.append(np.stack((diagonal, diagonal + n + odd), axis=1))
        walls = np.concatenate(parts, axis=0)
        if len(walls) != self.wall_count:
            raise RuntimeError(
                f"Enumerated {len(walls)} walls but a {m}x{n} grid must have {self.wall_count}"
            )
        return walls

    def exit_bits(self, lower: int, higher: int) -> Tuple[int, int]:
        """Direction bits opened on ``lower`` and ``higher`` when their wall goes.

        The wall's cells are ordered as enumerated, so ``higher`` may carry the
        smaller index; the sign of the delta picks the side.
        """

        try:
            return self._exit_table[higher - lower]
        except KeyError:
            raise ValueError(f"cells {lower} and {higher} are not adjacent") from None


__all__ = [
    "UP",
    "DOWN",
    "LEFT_DOWN",
    "RIGHT_DOWN",
    "LEFT_LEVEL",
    "RIGHT_LEVEL",
    "LEFT_UP",
    "RIGHT_UP",
    "DIRECTION_NAMES",
    "EVEN_COLUMN_DIRECTIONS",
    "ODD_COLUMN_DIRECTIONS",
    "OPPOSITE",
    "STEPS",
    "HexGridTopology",
    "Wall",
    "expected_wall_count",
]
