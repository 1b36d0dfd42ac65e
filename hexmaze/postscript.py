"""PostScript page output in the layout of the classic make-maze tool.

The page defines a handful of operators: ``M`` moves to a cell given as
``<row> <column>``, ``N``/``NW``/``NE`` fill the north, north-west and
north-east wall of the current cell, ``A`` steps one cell up the column, and
``B``..``H`` combine a set of north walls with ``A``. Every cell is then one
letter: ``A`` plus 1 for a north wall, 2 for a north-west wall and 4 for a
north-east wall.
"""

from __future__ import annotations

import io
from typing import List, TextIO

from hexmaze.core.pipeline import HexMaze
from hexmaze.core.topology import LEFT_LEVEL, LEFT_UP, RIGHT_LEVEL, RIGHT_UP, UP

SQRT_THREE = 1.73205080756888
# Page units per column when fitting the grid into the 500x700 point box.
COLUMN_PITCH = 1.36602540378444

LINE_LIMIT = 70
WALL_TOKEN_WIDTH = 10
CELL_TOKEN_WIDTH = 2

_OPERATORS = (
    "/M { dup 1 and 0 ne { exch .5 add exch } if",
    "     1.5 mul exch",
    "     1.73205080756888 mul",
    "     newpath moveto } bind def",
    "/N { gsave -.6 0.866025403784439 rmoveto",
    "     .15 .0866025403784439 rlineto",
    "     .9 0 rlineto",
    "     .15 -.0866025403784439 rlineto",
    "     -.15 -.0866025403784439 rlineto",
    "     -.9 0 rlineto",
    "     closepath fill grestore } bind def",
    "/NW{ gsave -.45 .952627944162883 rmoveto",
    "     0 -.173205080756888 rlineto",
    "     -.45 -.779422863405995 rlineto",
    "     -.15 -.0866025403784439 rlineto",
    "     0 .173205080756888 rlineto",
    "     .45 .779422863405995 rlineto",
    "     closepath fill grestore } bind def",
    "/NE{ gsave .45 .952627944162883 rmoveto",
    "     0 -.173205080756888 rlineto",
    "     .45 -.779422863405995 rlineto",
    "     .15 -.0866025403784439 rlineto",
    "     0 .173205080756888 rlineto",
    "     -.45 .779422863405995 rlineto",
    "     closepath fill grestore } bind def",
    "/A { 0 1.73205080756888 rmoveto",
    "     currentpoint newpath moveto } bind def",
    "/B { N A } bind def",
    "/C { NW A } bind def",
    "/D { NW N A } bind def",
    "/E { NE A } bind def",
    "/F { N NE A } bind def",
    "/G { NW NE A } bind def",
    "/H { NW N NE A } bind def",
)


class _TokenWriter:
    """Writes space-separated tokens, breaking lines by an estimated width."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream
        self.used = 0

    def token(self, text: str, width: int) -> None:
        self.stream.write(text)
        self.used += width
        if self.used >= LINE_LIMIT:
            self.stream.write("\n")
            self.used = 0
        else:
            self.stream.write(" ")

    def finish_line(self) -> None:
        if self.used:
            self.stream.write("\n")
            self.used = 0


def cell_letter(exits: int, column: int) -> str:
    """Letter drawing the closed north, north-west and north-east walls of a cell."""

    if column & 1:
        north_west, north_east = LEFT_UP, RIGHT_UP
    else:
        north_west, north_east = LEFT_LEVEL, RIGHT_LEVEL
    code = (0 if exits & UP else 1) | (0 if exits & north_west else 2) | (0 if exits & north_east else 4)
    return chr(ord("A") + code)


def _outer_walls(columns: int, rows: int) -> List[str]:
    tokens: List[str] = []
    for first, repeat in (
        ("-1 -1 M NE", "A NE"),
        ("0 0 M NW", "A NW"),
        (f"0 {columns - 1} M NE", "A NE"),
        (f"{-(columns & 1)} {columns} M NW", "A NW"),
    ):
        tokens.append(first)
        tokens.extend([repeat] * (rows - 1))
    for column in range(columns):
        tokens.append(f"-1 {column} M N")
        tokens.append(f"{rows - 1} {column} M N")
        if column & 1:
            tokens.append(f"-1 {column} M NW")
            if column < columns - 1:
                tokens.append(f"-1 {column} M NE")
            tokens.append(f"{rows - 1} {column} M NW")
            tokens.append(f"{rows - 1} {column} M NE")
    return tokens


def write_postscript(maze: HexMaze, stream: TextIO, *, program: str = "hexmaze") -> None:
    """Write ``maze`` as a single PostScript page to ``stream``."""

    columns, rows = maze.columns, maze.rows
    scale = min(500 / ((columns + 1) * COLUMN_PITCH), 700 / ((rows + 1) * SQRT_THREE))

    write = stream.write
    write("%!PS\n")
    write("/Times-Roman findfont 10 scalefont setfont\n")
    write("30 770 moveto (Maze produced by ) show\n")
    write("/Times-Italic findfont 10 scalefont setfont\n")
    write(f"({program} ) show\n")
    write("/Times-Roman findfont 10 scalefont setfont\n")
    write(f"30 755 moveto (Parameters: {columns}x{rows}, seed={maze.seed}) show\n")
    write("\n30 40 translate\n")
    write(f"{scale:g} {scale:g} scale\n")
    write("1 1 translate\n\n")
    for line in _OPERATORS:
        write(line + "\n")

    writer = _TokenWriter(stream)
    write("\n% Outer walls:\n")
    for token in _outer_walls(columns, rows):
        writer.token(token, WALL_TOKEN_WIDTH)
    writer.finish_line()

    write("\n% Inner walls:\n")
    grid = maze.exit_grid
    for column in range(columns):
        writer.token(f"0 {column} M", WALL_TOKEN_WIDTH)
        for row in range(rows):
            writer.token(cell_letter(int(grid[column, row]), column), CELL_TOKEN_WIDTH)
    writer.finish_line()

    write("\n% Start and end of path:\n")
    for cell in (maze.start, maze.end):
        column, row = maze.cell_position(cell)
        write(f"{row} {column} M currentpoint 0.3 0 360 arc fill\n")
    write("\nshowpage\n")


def render_postscript(maze: HexMaze, *, program: str = "hexmaze") -> str:
    buffer = io.StringIO()
    write_postscript(maze, buffer, program=program)
    return buffer.getvalue()


__all__ = ["cell_letter", "render_postscript", "write_postscript"]
