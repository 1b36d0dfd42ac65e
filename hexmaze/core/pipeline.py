"""End-to-end maze generation: shuffle, carve, build and analyze.

Each run owns a :class:`GenerationContext` holding every array the phases
touch. Phases run strictly in order and each one is timed and logged.
"""

from __future__ import annotations

import logging
import os
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterator, List, Optional, Tuple

import numpy as np

from hexmaze.core.carver import carve_maze
from hexmaze.core.disjoint_set import DisjointSetForest
from hexmaze.core.topology import HexGridTopology
from hexmaze.core.tree import TreeAnalysis, analyze_tree, build_tree
from hexmaze.core.walls import SHUFFLE_STRATEGIES, shuffle_walls

SEED_MASK = 0x7FFFFFFF


def derive_seed() -> int:
    """Seed from the clock and process id, for runs that were not given one."""

    now = time.time()
    seconds = int(now)
    millis = int((now - seconds) * 1000)
    return ((seconds << 8) + millis + (os.getpid() << 16)) & SEED_MASK


class PhaseTimer:
    """Logs CPU and wall-clock time per phase and since the timer started."""

    def __init__(self) -> None:
        self._cpu_start = self._cpu_last = time.process_time()
        self._real_start = self._real_last = time.perf_counter()
        self.timings: Dict[str, float] = {}

    def phase(self, name: str) -> "_Phase":
        return _Phase(self, name)

    def _report(self, name: str) -> None:
        cpu = time.process_time()
        real = time.perf_counter()
        self.timings[name] = real - self._real_last
        logging.info(
            f"{name:<22} cpu={cpu - self._cpu_last:.3f} (total {cpu - self._cpu_start:.3f})  "
            f"real={real - self._real_last:.3f} (total {real - self._real_start:.3f})"
        )
        self._cpu_last = cpu
        self._real_last = real


class _Phase:
    def __init__(self, timer: PhaseTimer, name: str) -> None:
        self.timer = timer
        self.name = name

    def __enter__(self) -> "_Phase":
        logging.debug(f"{self.name}...")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.timer._report(self.name)


@dataclass
class GenerationContext:
    """Arrays owned by a single generation run, sized once from the topology."""

    topology: HexGridTopology
    seed: int
    shuffle: str = "uniform"
    forest: DisjointSetForest = field(init=False)
    rng: np.random.Generator = field(init=False, repr=False)
    walls: Optional[np.ndarray] = None
    kept_walls: Optional[np.ndarray] = None
    exits: List[int] = field(default_factory=list)
    children: List[List[int]] = field(default_factory=list)
    analysis: Optional[TreeAnalysis] = None

    def __post_init__(self) -> None:
        self.forest = DisjointSetForest(self.topology.cell_count)
        self.rng = np.random.default_rng(self.seed)


@dataclass
class HexMaze:
    """A finished maze: exit bitmaps for every cell plus the chosen endpoints."""

    columns: int
    rows: int
    seed: int
    exits: np.ndarray
    start: int
    end: int
    path_length: int
    kept_walls: np.ndarray
    topology: HexGridTopology = field(repr=False)
    children: List[List[int]] = field(repr=False, default_factory=list)
    shuffle: str = "uniform"

    @property
    def cell_count(self) -> int:
        return self.columns * self.rows

    @property
    def exit_grid(self) -> np.ndarray:
        """Exit bitmaps as a ``(columns, rows)`` array."""

        return self.exits.reshape(self.columns, self.rows)

    def cell_index(self, column: int, row: int) -> int:
        return self.topology.cell_index(column, row)

    def cell_position(self, index: int) -> Tuple[int, int]:
        return self.topology.cell_position(int(index))

    def open_neighbors(self, index: int) -> Iterator[int]:
        bits = int(self.exits[index])
        for bit, neighbor in self.topology.neighbors(index):
            if bits & bit:
                yield neighbor

    def solution_path(self) -> List[int]:
        """Cells from ``start`` to ``end`` along open exits."""

        queue: Deque[int] = deque([self.start])
        parents: Dict[int, Optional[int]] = {self.start: None}
        while queue:
            current = queue.popleft()
            if current == self.end:
                break
            for neighbor in self.open_neighbors(current):
                if neighbor not in parents:
                    parents[neighbor] = current
                    queue.append(neighbor)
        if self.end not in parents:
            raise RuntimeError("Maze endpoints are not connected")
        path: List[int] = []
        step: Optional[int] = self.end
        while step is not None:
            path.append(step)
            step = parents[step]
        path.reverse()
        return path


def generate_maze(
    columns: int,
    rows: int,
    seed: Optional[int] = None,
    *,
    shuffle: str = "uniform",
) -> HexMaze:
    """Generate a perfect hex maze and pick its start and end cells.

    Dimensions are validated before anything is allocated. Without a seed one
    is derived from the clock and process id; either way the seed used is
    stored on the result so the maze can be regenerated.
    """

    if shuffle not in SHUFFLE_STRATEGIES:
        raise ValueError(f"Unknown shuffle strategy {shuffle!r}; expected one of {', '.join(SHUFFLE_STRATEGIES)}")
    topology = HexGridTopology(columns, rows)
    if seed is None:
        seed = derive_seed()
        logging.info(f"No seed given, using {seed}")
    seed = int(seed) & SEED_MASK

    timer = PhaseTimer()
    with timer.phase("Initialising"):
        context = GenerationContext(topology=topology, seed=seed, shuffle=shuffle)
        context.walls = topology.enumerate_walls()
    with timer.phase("Shuffling walls"):
        context.walls = shuffle_walls(context.walls, context.rng, shuffle)
    with timer.phase("Creating maze"):
        carved = carve_maze(topology, context.walls, context.forest)
        context.exits = carved.exits
        context.kept_walls = carved.kept_walls
    with timer.phase("Building tree"):
        context.children = build_tree(topology, context.exits, root=0)
    with timer.phase("Analysing tree"):
        context.analysis = analyze_tree(context.children, root=0)

    start, end = context.analysis.endpoints
    logging.info(
        f"Maze {columns}x{rows} seed={seed}: start={start} end={end} "
        f"weighted length={context.analysis.diameter}"
    )
    return HexMaze(
        columns=topology.columns,
        rows=topology.rows,
        seed=seed,
        exits=np.asarray(context.exits, dtype=np.uint8),
        start=start,
        end=end,
        path_length=context.analysis.diameter,
        kept_walls=context.kept_walls,
        topology=topology,
        children=context.children,
        shuffle=shuffle,
    )


__all__ = [
    "GenerationContext",
    "HexMaze",
    "PhaseTimer",
    "SEED_MASK",
    "derive_seed",
    "generate_maze",
]
