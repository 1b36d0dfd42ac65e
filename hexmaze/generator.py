"""Hexagonal maze generator rendering carved mazes to images and PostScript."""

from __future__ import annotations

import argparse
import logging
import math
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from PIL import Image, ImageDraw, ImageFont

from hexmaze.base import AbstractMazeGenerator, PathLike
from hexmaze.core.pipeline import SEED_MASK, HexMaze, derive_seed, generate_maze
from hexmaze.core.topology import (
    DOWN,
    LEFT_DOWN,
    LEFT_LEVEL,
    LEFT_UP,
    RIGHT_DOWN,
    RIGHT_LEVEL,
    RIGHT_UP,
    UP,
    HexGridTopology,
)
from hexmaze.core.walls import SHUFFLE_STRATEGIES
from hexmaze.postscript import write_postscript

# Rendering palette
PATH_COLOR = (240, 240, 240)
WALL_COLOR = (0, 0, 0)
START_COLOR = (220, 30, 30)
GOAL_COLOR = START_COLOR
LINE_COLOR = (220, 0, 0)
BACKGROUND_COLOR = (16, 16, 16)
TEXT_COLOR = (0, 0, 255)

# Corner pairs of a flat-topped hexagon (corners at 0, 60, ... degrees, y down)
# bounding the edge shared with the neighbour in each direction.
EVEN_COLUMN_EDGES: Dict[int, Tuple[int, int]] = {
    UP: (4, 5),
    RIGHT_LEVEL: (5, 0),
    RIGHT_DOWN: (0, 1),
    DOWN: (1, 2),
    LEFT_DOWN: (2, 3),
    LEFT_LEVEL: (3, 4),
}
ODD_COLUMN_EDGES: Dict[int, Tuple[int, int]] = {
    UP: (4, 5),
    RIGHT_UP: (5, 0),
    RIGHT_LEVEL: (0, 1),
    DOWN: (1, 2),
    LEFT_LEVEL: (2, 3),
    LEFT_UP: (3, 4),
}

SQRT_THREE = math.sqrt(3.0)


def draw_path_line(
    image: Image.Image,
    points: List[Tuple[float, float]],
    color: Tuple[int, int, int],
    thickness: int,
) -> None:
    """Draws a path (solution line) on the given image."""
    draw = ImageDraw.Draw(image)
    if len(points) >= 2:
        draw.line(points, fill=color, width=thickness, joint="curve")
    elif len(points) == 1:
        x, y = points[0]
        r = thickness / 2
        draw.ellipse((x - r, y - r, x + r, y + r), fill=color)


@dataclass
class HexMazeRecord:
    """Serializable metadata for one generated maze and its files."""

    id: str
    prompt: str
    seed: int
    columns: int
    rows: int
    shuffle: str
    canvas_dimensions: Tuple[int, int]
    start_cell: int
    goal_cell: int
    start_point: Tuple[float, float]
    goal_point: Tuple[float, float]
    path_length: int
    solution_path_cell_ids: List[int]
    image: str
    solution_image_path: str
    postscript_path: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "prompt": self.prompt,
            "seed": int(self.seed),
            "columns": int(self.columns),
            "rows": int(self.rows),
            "shuffle": self.shuffle,
            "canvas_dimensions": [int(self.canvas_dimensions[0]), int(self.canvas_dimensions[1])],
            "start_cell": int(self.start_cell),
            "goal_cell": int(self.goal_cell),
            "start_point": [float(self.start_point[0]), float(self.start_point[1])],
            "goal_point": [float(self.goal_point[0]), float(self.goal_point[1])],
            "path_length": int(self.path_length),
            "solution_path_cell_ids": [int(cell) for cell in self.solution_path_cell_ids],
            "image": self.image,
            "solution_image_path": self.solution_image_path,
            "postscript_path": self.postscript_path,
        }
        for key, value in self.extra.items():
            if key not in payload:
                payload[key] = value
        return payload


class HexMazeGenerator(AbstractMazeGenerator[HexMazeRecord]):
    """Generate perfect mazes on an offset-column hex grid.

    Every record gets its own seed: an explicit ``seed`` is used for the first
    maze and incremented for each following one, so any single maze of a batch
    can be regenerated from its record.
    """

    DEFAULT_OUTPUT_DIR = "data/hexmaze"
    DEFAULT_PROMPT = "Draw a red path connecting the two red dots without touching the black walls."

    DEFAULT_COLUMNS = 12
    DEFAULT_ROWS = 12
    DEFAULT_CELL_RADIUS = 16
    MIN_CELL_RADIUS = 4

    def __init__(
        self,
        output_dir: Optional[PathLike] = None,
        *,
        columns: int = DEFAULT_COLUMNS,
        rows: int = DEFAULT_ROWS,
        cell_radius: int = DEFAULT_CELL_RADIUS,
        wall_thickness: Optional[int] = None,
        seed: Optional[int] = None,
        shuffle: str = "uniform",
        prompt: Optional[str] = None,
        postscript: bool = False,
        show_cell_id: bool = False,
    ) -> None:
        # Fails fast on bad dimensions before any directory is created.
        self.topology = HexGridTopology(columns, rows)
        if shuffle not in SHUFFLE_STRATEGIES:
            raise ValueError(f"shuffle must be one of {', '.join(SHUFFLE_STRATEGIES)}")
        if cell_radius < self.MIN_CELL_RADIUS:
            raise ValueError(f"cell_radius must be at least {self.MIN_CELL_RADIUS} pixels to preserve visible walls")
        self.cell_radius = int(cell_radius)
        self.wall_thickness = int(wall_thickness if wall_thickness is not None else max(2, self.cell_radius // 6))
        if self.wall_thickness <= 0:
            raise ValueError("wall_thickness must be positive")
        if self.wall_thickness >= self.cell_radius:
            raise ValueError("wall_thickness must be smaller than cell_radius")

        resolved_output = output_dir if output_dir is not None else self.DEFAULT_OUTPUT_DIR
        super().__init__(resolved_output)

        self.columns = self.topology.columns
        self.rows = self.topology.rows
        self.shuffle = shuffle
        self.prompt = prompt if prompt is not None else self.DEFAULT_PROMPT
        self.postscript = postscript
        self.show_cell_id = show_cell_id
        self.seed = (int(seed) if seed is not None else derive_seed()) & SEED_MASK
        self._issued = 0

        self.outer_margin = self.wall_thickness * 2 + 4
        self.canvas_width_px = int(math.ceil(self.cell_radius * (1.5 * (self.columns - 1) + 2.0) + 2 * self.outer_margin))
        self.canvas_height_px = int(math.ceil(self.cell_radius * SQRT_THREE * (self.rows + 0.5) + 2 * self.outer_margin))
        self.canvas_dimensions: Tuple[int, int] = (self.canvas_width_px, self.canvas_height_px)

        root = Path(self.output_dir)
        self.puzzle_dir = root / "puzzles"
        self.solution_dir = root / "solutions"
        self.puzzle_dir.mkdir(parents=True, exist_ok=True)
        self.solution_dir.mkdir(parents=True, exist_ok=True)
        self.postscript_dir = root / "postscript"
        if self.postscript:
            self.postscript_dir.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Public API

    def next_id(self) -> str:
        return str(uuid.uuid4())

    def next_seed(self) -> int:
        seed = (self.seed + self._issued) & SEED_MASK
        self._issued += 1
        return seed

    def create_puzzle(self, *, puzzle_id: Optional[str] = None, seed: Optional[int] = None) -> HexMazeRecord:
        maze_seed = seed if seed is not None else self.next_seed()
        maze = generate_maze(self.columns, self.rows, maze_seed, shuffle=self.shuffle)
        solution = maze.solution_path()
        if not solution:
            raise RuntimeError("Failed to compute a connecting path in the hex maze")

        puzzle_image = self.render(maze, path=None)
        solution_image = self.render(maze, path=solution)

        record_id = puzzle_id or self.next_id()
        puzzle_path, solution_path = self.save_images(record_id, puzzle_image, solution_image)
        postscript_path = self.save_postscript(record_id, maze) if self.postscript else None

        return HexMazeRecord(
            id=record_id,
            prompt=self.prompt,
            seed=maze.seed,
            columns=maze.columns,
            rows=maze.rows,
            shuffle=maze.shuffle,
            canvas_dimensions=self.canvas_dimensions,
            start_cell=maze.start,
            goal_cell=maze.end,
            start_point=self._cell_center(maze.start),
            goal_point=self._cell_center(maze.end),
            path_length=maze.path_length,
            solution_path_cell_ids=solution,
            image=self.relativize_path(puzzle_path),
            solution_image_path=self.relativize_path(solution_path),
            postscript_path=self.relativize_path(postscript_path) if postscript_path is not None else None,
            extra={
                "cell_radius": self.cell_radius,
                "wall_thickness": self.wall_thickness,
                "start_position": list(maze.cell_position(maze.start)),
                "goal_position": list(maze.cell_position(maze.end)),
                "kept_wall_count": int(len(maze.kept_walls)),
            },
        )

    def save_images(
        self,
        record_id: str,
        puzzle_image: Image.Image,
        solution_image: Image.Image,
    ) -> Tuple[Path, Path]:
        puzzle_path = self.puzzle_dir / f"{record_id}_puzzle.png"
        solution_path = self.solution_dir / f"{record_id}_solution.png"
        puzzle_image.save(puzzle_path)
        solution_image.save(solution_path)
        return puzzle_path, solution_path

    def save_postscript(self, record_id: str, maze: HexMaze) -> Path:
        self.postscript_dir.mkdir(parents=True, exist_ok=True)
        path = self.postscript_dir / f"{record_id}.ps"
        with path.open("w", encoding="ascii") as handle:
            write_postscript(maze, handle)
        return path

    # ------------------------------------------------------------------
    # Rendering

    def render(self, maze: HexMaze, *, path: Optional[Sequence[int]] = None) -> Image.Image:
        """Draw ``maze``; the solution line is added when ``path`` is given."""

        if (maze.columns, maze.rows) != (self.columns, self.rows):
            raise ValueError("maze dimensions do not match the generator")
        canvas = Image.new("RGB", self.canvas_dimensions, BACKGROUND_COLOR)
        draw = ImageDraw.Draw(canvas)

        for cell in range(maze.cell_count):
            corners = self._hex_corners(self._cell_center(cell), self.cell_radius)
            draw.polygon(corners, fill=PATH_COLOR)

        grid = maze.exit_grid
        for column in range(self.columns):
            for row in range(self.rows):
                self._draw_cell_walls(draw, column, row, int(grid[column, row]))

        self._draw_marker(draw, maze.start, START_COLOR)
        self._draw_marker(draw, maze.end, GOAL_COLOR)
        if path:
            self._draw_solution(canvas, path)

        if self.show_cell_id:
            self._draw_cell_ids(draw)

        return canvas

    def _draw_cell_walls(self, draw: ImageDraw.ImageDraw, column: int, row: int, exits: int) -> None:
        center = self._cell_center(column * self.rows + row)
        outer_corners = self._hex_corners(center, self.cell_radius)
        edges = ODD_COLUMN_EDGES if column & 1 else EVEN_COLUMN_EDGES
        for bit, (a_idx, b_idx) in edges.items():
            if exits & bit:
                continue
            draw.line([outer_corners[a_idx], outer_corners[b_idx]], fill=WALL_COLOR, width=self.wall_thickness)

    def _draw_marker(self, draw: ImageDraw.ImageDraw, cell: int, color: Tuple[int, int, int]) -> None:
        x, y = self._cell_center(cell)
        radius = max(2, int(self.cell_radius * 0.45))
        bbox = (x - radius, y - radius, x + radius, y + radius)
        draw.ellipse(bbox, fill=color)

    def _draw_solution(self, image: Image.Image, path: Sequence[int]) -> None:
        if len(path) < 2:
            return
        points = [self._cell_center(cell) for cell in path]
        thickness = max(2, int(self.cell_radius * 0.35))
        draw_path_line(image, points, LINE_COLOR, thickness)

    def _draw_cell_ids(self, draw: ImageDraw.ImageDraw) -> None:
        font_size = max(8, int(self.cell_radius * 0.4))
        try:
            font = ImageFont.truetype("DejaVuSans-Bold.ttf", font_size)
        except OSError:
            font = ImageFont.load_default()

        for cell in range(self.topology.cell_count):
            cx, cy = self._cell_center(cell)
            draw.text((cx, cy), str(cell), fill=TEXT_COLOR, anchor="mm", font=font)

    # ------------------------------------------------------------------
    # Geometry helpers

    def _cell_center(self, cell_id: int) -> Tuple[float, float]:
        column, row = divmod(int(cell_id), self.rows)
        # Odd columns sit half a cell higher; image y grows downwards.
        height = row + (0.5 if column & 1 else 0.0)
        x = self.outer_margin + self.cell_radius * (1.0 + 1.5 * column)
        y = self.outer_margin + self.cell_radius * SQRT_THREE * (self.rows - height)
        return x, y

    def _hex_corners(self, center: Tuple[float, float], radius: float) -> List[Tuple[float, float]]:
        cx, cy = center
        corners: List[Tuple[float, float]] = []
        for i in range(6):
            angle = math.radians(60 * i)
            corners.append((cx + radius * math.cos(angle), cy + radius * math.sin(angle)))
        return corners

    # ------------------------------------------------------------------
    # CLI integration

    @classmethod
    def _parse_args(cls, argv: Optional[List[str]] = None) -> argparse.Namespace:
        parser = argparse.ArgumentParser(description="Generate perfect hexagonal mazes")
        parser.add_argument("columns", type=_dimension, help="Number of cell columns (2..1000)")
        parser.add_argument("rows", type=_dimension, help="Number of cells per column (2..1000)")
        parser.add_argument("seed", type=int, nargs="?", default=None, help="Random seed; derived from the clock when omitted")
        parser.add_argument("--count", type=int, default=1, help="Number of mazes to generate")
        parser.add_argument("--output-dir", type=Path, default=None)
        parser.add_argument("--cell-radius", type=int, default=cls.DEFAULT_CELL_RADIUS, help="Pixel radius of each hex cell")
        parser.add_argument("--wall-thickness", type=int, default=None, help="Thickness of wall lines in pixels")
        parser.add_argument("--shuffle", choices=SHUFFLE_STRATEGIES, default="uniform", help="Wall ordering strategy")
        parser.add_argument("--postscript", action="store_true", help="Also write a PostScript page per maze")
        parser.add_argument("--prompt", type=str, default=None)
        parser.add_argument("--show-cell-id", action="store_true", help="Draw cell IDs on the maze")
        parser.add_argument("--verbose", action="store_true", help="Log debug output")
        namespace = parser.parse_args(argv)
        if namespace.count < 1:
            parser.error("--count must be at least 1")
        return namespace

    @classmethod
    def main(cls, argv: Optional[List[str]] = None) -> None:
        args = cls._parse_args(argv)
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.INFO,
            format='%(asctime)s - %(levelname)s - %(message)s',
        )
        generator = cls(
            output_dir=args.output_dir,
            columns=args.columns,
            rows=args.rows,
            cell_radius=args.cell_radius,
            wall_thickness=args.wall_thickness,
            seed=args.seed,
            shuffle=args.shuffle,
            prompt=args.prompt,
            postscript=args.postscript,
            show_cell_id=args.show_cell_id,
        )
        logging.info(f"Generating {args.count} maze(s) of {args.columns}x{args.rows}, base seed {generator.seed}")
        metadata_path = generator.output_dir / "data.json"
        generator.generate_dataset(args.count, metadata_path=metadata_path)
        logging.info(f"Saved metadata to {metadata_path}")


def _dimension(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer") from None
    if not HexGridTopology.MIN_DIMENSION <= number <= HexGridTopology.MAX_DIMENSION:
        raise argparse.ArgumentTypeError(
            f"dimensions must be in the range {HexGridTopology.MIN_DIMENSION}..{HexGridTopology.MAX_DIMENSION}"
        )
    return number


__all__ = ["HexMazeGenerator", "HexMazeRecord", "draw_path_line"]


def main(argv: Optional[List[str]] = None) -> None:
    HexMazeGenerator.main(argv)


if __name__ == "__main__":
    HexMazeGenerator.main()
