# gridnav/scenario.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional
import random, os

from .types import Coord
from .grid import NavGrid


def _parse_row(row: str, y: int, grid: NavGrid) -> None:
    if len(row) != grid.width:
        raise ValueError(f"row {y} has {len(row)} cells, expected {grid.width}")
    for x, ch in enumerate(row):
        if ch == "0":
            continue
        if ch == "1":
            grid.set_blocked(x, y, True)
        elif ch.isdigit():
            grid.set_cell_cost(x, y, float(ch))
        else:
            raise ValueError(f"unexpected cell {ch!r} at ({x}, {y})")


def _digit_cost(cost: float) -> bool:
    return cost in (2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0)


def _format_cell(grid: NavGrid, x: int, y: int) -> str:
    if not grid.is_walkable(x, y):
        return "1"
    cost = grid.get_cell_cost(x, y)
    return str(int(cost)) if _digit_cost(cost) else "0"


def _extra_cost(grid: NavGrid, x: int, y: int) -> Optional[float]:
    # costs the row characters cannot carry
    cost = grid.get_cell_cost(x, y)
    if cost == 1.0 or (grid.is_walkable(x, y) and _digit_cost(cost)):
        return None
    return cost


def _parse_cost_line(line: str, grid: NavGrid) -> None:
    parts = line.split()
    if len(parts) != 4 or parts[0] != "COST":
        raise ValueError(f"unexpected line after grid rows: {line!r}")
    x, y, cost = int(parts[1]), int(parts[2]), float(parts[3])
    if not grid.is_valid(x, y):
        raise ValueError(f"cost entry outside the grid: {line!r}")
    grid.set_cell_cost(x, y, cost)


@dataclass
class Scenario:
    """A grid plus the start and goal to search between."""

    grid: NavGrid
    start: Coord
    goal: Coord

    @staticmethod
    def random(width: int = 51, height: Optional[int] = None, p_blocked: float = 0.30,
               seed: Optional[int] = None) -> "Scenario":
        height = width if height is None else height
        rng = random.Random(seed)
        grid = NavGrid(width, height)
        for y in range(height):
            for x in range(width):
                if rng.random() < p_blocked:
                    grid.set_blocked(x, y, True)
        start, goal = (0, 0), (width - 1, height - 1)
        grid.set_blocked(*start, False)
        grid.set_blocked(*goal, False)
        return Scenario(grid, start, goal)

    @staticmethod
    def load(path: str) -> "Scenario":
        """
        Read a scenario file.

        Format: a header line ``GRID w h sx sy gx gy`` followed by h rows of
        w characters: 0 open, 1 blocked, 2-9 open with that cost. Any
        other cost follows the rows as a ``COST x y value`` line. Files
        without a header are plain 0/1 rows with start (0, 0) and goal at
        the far corner.
        """
        with open(path, "r") as f:
            lines = [line.strip() for line in f if line.strip()]
        if not lines:
            raise ValueError(f"empty scenario file: {path}")

        header = lines[0].split()
        if header and header[0] == "GRID":
            if len(header) != 7:
                raise ValueError(f"malformed header in {path}: {lines[0]!r}")
            w, h, sx, sy, gx, gy = map(int, header[1:])
            rows = [line for line in lines[1:] if not line.startswith("COST")]
            if len(rows) != h:
                raise ValueError(f"{path}: expected {h} rows, found {len(rows)}")
            if lines[1:h + 1] != rows:
                raise ValueError(f"{path}: COST lines must follow the grid rows")
            grid = NavGrid(w, h)
            for y, row in enumerate(rows):
                _parse_row(row, y, grid)
            for line in lines[h + 1:]:
                _parse_cost_line(line, grid)
            return Scenario(grid, (sx, sy), (gx, gy))

        # legacy flat format
        grid = NavGrid(len(lines[0]), len(lines))
        for y, row in enumerate(lines):
            _parse_row(row, y, grid)
        return Scenario(grid, (0, 0), (grid.width - 1, grid.height - 1))

    def save(self, path: str) -> None:
        folder = os.path.dirname(path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        g = self.grid
        with open(path, "w") as f:
            f.write(f"GRID {g.width} {g.height} {self.start[0]} {self.start[1]} "
                    f"{self.goal[0]} {self.goal[1]}\n")
            for y in range(g.height):
                f.write("".join(_format_cell(g, x, y) for x in range(g.width)) + "\n")
            for y in range(g.height):
                for x in range(g.width):
                    cost = _extra_cost(g, x, y)
                    if cost is not None:
                        f.write(f"COST {x} {y} {cost!r}\n")

    def rows(self) -> List[str]:
        g = self.grid
        return ["".join(_format_cell(g, x, y) for x in range(g.width)) for y in range(g.height)]
