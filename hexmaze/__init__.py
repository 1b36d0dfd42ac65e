"""Perfect hexagonal maze generation toolkit."""

__all__ = [
    "AbstractMazeGenerator",
    "DisjointSetForest",
    "HexGridTopology",
    "HexMaze",
    "HexMazeGenerator",
    "HexMazeRecord",
    "TreeAnalysis",
    "analyze_tree",
    "build_tree",
    "carve_maze",
    "generate_maze",
    "render_postscript",
    "shuffle_walls",
    "write_postscript",
]

from .base import AbstractMazeGenerator
from .core import (
    DisjointSetForest,
    HexGridTopology,
    HexMaze,
    TreeAnalysis,
    analyze_tree,
    build_tree,
    carve_maze,
    generate_maze,
    shuffle_walls,
)
from .generator import HexMazeGenerator, HexMazeRecord
from .postscript import render_postscript, write_postscript
