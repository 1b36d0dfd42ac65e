"""Maze generation core: topology, carving and tree analysis."""

from .carver import CarveResult, carve_maze
from .disjoint_set import DisjointSetForest
from .pipeline import GenerationContext, HexMaze, PhaseTimer, derive_seed, generate_maze
from .topology import HexGridTopology, expected_wall_count
from .tree import TreeAnalysis, analyze_tree, build_tree
from .walls import SHUFFLE_STRATEGIES, shuffle_walls

__all__ = [
    "CarveResult",
    "DisjointSetForest",
    "GenerationContext",
    "HexGridTopology",
    "HexMaze",
    "PhaseTimer",
    "SHUFFLE_STRATEGIES",
    "TreeAnalysis",
    "analyze_tree",
    "build_tree",
    "carve_maze",
    "derive_seed",
    "expected_wall_count",
    "generate_maze",
    "shuffle_walls",
]
