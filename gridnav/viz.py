# gridnav/viz.py
from __future__ import annotations
from typing import Iterable, Optional, Tuple
import os

from PIL import Image, ImageDraw

from .types import Coord
from .grid import NavGrid

FLOOR = (240, 240, 240)
WALL = (0, 0, 0)
EXPANDED = (255, 200, 200)
PATH = (160, 190, 255)
START = (100, 220, 120)
GOAL = (255, 170, 80)


def _floor_color(cost: float, max_cost: float) -> Tuple[int, int, int]:
    # costlier terrain is drawn darker
    if max_cost <= 1.0 or cost <= 1.0:
        return FLOOR
    shade = int(240 - 120 * (cost - 1.0) / (max_cost - 1.0))
    return (shade, shade, shade - 10)


def render_grid(grid: NavGrid,
                path: Optional[Iterable[Coord]] = None,
                expanded: Optional[Iterable[Coord]] = None,
                start: Optional[Coord] = None,
                goal: Optional[Coord] = None,
                cell: int = 10) -> Image.Image:
    w, h = grid.width * cell, grid.height * cell
    img = Image.new("RGB", (w, h), (255, 255, 255))
    drw = ImageDraw.Draw(img)

    def box(x: int, y: int, color: Tuple[int, int, int]) -> None:
        x0, y0 = x * cell, y * cell
        drw.rectangle((x0, y0, x0 + cell - 1, y0 + cell - 1), fill=color)

    max_cost = max((c.cost for c in grid.iter_cells() if c.is_walkable()), default=1.0)
    for c in grid.iter_cells():
        box(c.x, c.y, WALL if not c.is_walkable() else _floor_color(c.cost, max_cost))

    if expanded:
        for (x, y) in expanded:
            box(x, y, EXPANDED)

    if path:
        pts = list(path)
        for (x, y) in pts:
            box(x, y, PATH)
        # smoothed paths skip cells, so also connect the waypoints
        if len(pts) > 1:
            centers = [(x * cell + cell // 2, y * cell + cell // 2) for x, y in pts]
            drw.line(centers, fill=(60, 90, 200), width=max(1, cell // 5))

    if start is not None:
        box(start[0], start[1], START)
    if goal is not None:
        box(goal[0], goal[1], GOAL)
    return img


def draw_grid_png(grid: NavGrid,
                  path: Optional[Iterable[Coord]],
                  expanded: Optional[Iterable[Coord]],
                  out_png: str,
                  start: Optional[Coord] = None,
                  goal: Optional[Coord] = None,
                  cell: int = 10) -> None:
    img = render_grid(grid, path, expanded, start, goal, cell)
    folder = os.path.dirname(out_png)
    if folder:
        os.makedirs(folder, exist_ok=True)
    img.save(out_png)
