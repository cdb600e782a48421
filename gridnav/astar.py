# gridnav/astar.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple
import heapq, logging, math

from .types import Coord, GridPolicy, Heuristic
from .path import Path
from .heuristics import manhattan
from .errors import (
    NoGridError, InvalidStartError, InvalidGoalError, NoPathError, PathfindingError,
)

logger = logging.getLogger(__name__)

DIAGONAL_COST = math.sqrt(2.0)


class SmoothingMode(Enum):
    NONE = "none"
    SIMPLE = "simple"


@dataclass(eq=False)
class _Node:
    x: int
    y: int
    g: float
    h: float
    f: float
    parent: Optional["_Node"] = None
    closed: bool = False
    seq: int = 0  # insertion stamp of the node's live heap entry


def smooth_path_simple(path: Path) -> None:
    """
    Drop waypoints in the middle of straight runs, in place.

    A point is kept when the step direction changes at it; the first
    and last points are always kept.
    """
    n = len(path)
    if n <= 2:
        return
    pts = path.points
    keep = [pts[0]]
    prev_d = (0, 0)
    for i in range(1, n):
        d = (pts[i][0] - pts[i - 1][0], pts[i][1] - pts[i - 1][1])
        if d != prev_d:
            if i > 1:
                keep.append(pts[i - 1])
            prev_d = d
    keep.append(pts[-1])
    if len(keep) < n:
        cost = path.total_cost
        path.clear()
        for x, y in keep:
            path.append(x, y)
        path.total_cost = cost


class Pathfinder:
    """
    A* search over a navigation grid.

    The result is optimal only when the heuristic is admissible for the
    grid's movement rules (octile for 8-directional, manhattan for
    4-directional). Nothing is kept between calls except configuration
    and the last_nodes_explored / last_expanded diagnostics.
    """

    def __init__(self, grid: Optional[GridPolicy] = None, heuristic: Optional[Heuristic] = None,
                 smoothing: SmoothingMode = SmoothingMode.NONE, max_iterations: int = 0):
        self.grid = grid
        self.heuristic = heuristic
        self.smoothing = smoothing
        self.max_iterations = max_iterations
        self._last_nodes_explored = 0
        self._last_expanded: Tuple[Coord, ...] = ()

    @property
    def heuristic(self) -> Heuristic:
        return self._heuristic

    @heuristic.setter
    def heuristic(self, fn: Optional[Heuristic]) -> None:
        self._heuristic = fn if fn is not None else manhattan

    @property
    def smoothing(self) -> SmoothingMode:
        return self._smoothing

    @smoothing.setter
    def smoothing(self, mode: SmoothingMode) -> None:
        self._smoothing = SmoothingMode(mode)

    @property
    def max_iterations(self) -> int:
        return self._max_iterations

    @max_iterations.setter
    def max_iterations(self, n: int) -> None:
        if n < 0:
            raise ValueError(f"max_iterations must be >= 0, got {n}")
        self._max_iterations = int(n)

    @property
    def last_nodes_explored(self) -> int:
        return self._last_nodes_explored

    @property
    def last_expanded(self) -> Tuple[Coord, ...]:
        return self._last_expanded

    # ------------------------------------------------------------------

    def find_path(self, start_x: int, start_y: int, goal_x: int, goal_y: int) -> Path:
        """
        Search from (start_x, start_y) to (goal_x, goal_y).

        Raises NoGridError, InvalidStartError, InvalidGoalError or
        NoPathError. Hitting max_iterations is reported as NoPathError.
        """
        self._last_nodes_explored = 0
        self._last_expanded = ()

        grid = self.grid
        if grid is None:
            raise NoGridError()
        if not grid.is_valid(start_x, start_y):
            raise InvalidStartError(start_x, start_y, "out_of_bounds")
        if not grid.is_valid(goal_x, goal_y):
            raise InvalidGoalError(goal_x, goal_y, "out_of_bounds")
        if not grid.is_walkable(start_x, start_y):
            raise InvalidStartError(start_x, start_y, "not_walkable")
        if not grid.is_walkable(goal_x, goal_y):
            raise InvalidGoalError(goal_x, goal_y, "not_walkable")

        if start_x == goal_x and start_y == goal_y:
            return Path([(start_x, start_y)], 0.0)

        h = self._heuristic
        h0 = h(start_x, start_y, goal_x, goal_y)
        start = _Node(start_x, start_y, 0.0, h0, h0)
        nodes: Dict[Coord, _Node] = {(start_x, start_y): start}
        openh: List[Tuple[float, int, _Node]] = [(start.f, 0, start)]
        counter = 1
        iterations = 0
        expanded: List[Coord] = []
        found: Optional[_Node] = None

        while openh:
            _, seq, cur = heapq.heappop(openh)
            if cur.closed or seq != cur.seq:
                continue  # stale entry left behind by a relaxation

            iterations += 1
            if self._max_iterations > 0 and iterations > self._max_iterations:
                logger.debug("Pathfinding exceeded max iterations (%d)", self._max_iterations)
                break

            cur.closed = True
            self._last_nodes_explored += 1
            expanded.append((cur.x, cur.y))

            if cur.x == goal_x and cur.y == goal_y:
                found = cur
                break

            for cell in grid.get_neighbors(cur.x, cur.y):
                nx, ny = cell.x, cell.y
                move = cell.cost
                if nx != cur.x and ny != cur.y:
                    move *= DIAGONAL_COST
                new_g = cur.g + move

                nb = nodes.get((nx, ny))
                if nb is None:
                    hn = h(nx, ny, goal_x, goal_y)
                    nb = _Node(nx, ny, new_g, hn, new_g + hn, parent=cur, seq=counter)
                    nodes[(nx, ny)] = nb
                    heapq.heappush(openh, (nb.f, counter, nb))
                    counter += 1
                elif not nb.closed and new_g < nb.g:
                    nb.g = new_g
                    nb.f = new_g + nb.h
                    nb.parent = cur
                    nb.seq = counter
                    heapq.heappush(openh, (nb.f, counter, nb))
                    counter += 1

        self._last_expanded = tuple(expanded)

        if found is None:
            raise NoPathError((start_x, start_y), (goal_x, goal_y))

        path = Path()
        node: Optional[_Node] = found
        while node is not None:
            path.append(node.x, node.y)
            node = node.parent
        path.reverse()
        path.total_cost = found.g

        if self._smoothing is SmoothingMode.SIMPLE:
            smooth_path_simple(path)

        logger.debug("Found path with %d points, cost %.2f, explored %d nodes",
                     len(path), path.total_cost, self._last_nodes_explored)
        return path

    def is_reachable(self, start_x: int, start_y: int, goal_x: int, goal_y: int) -> bool:
        try:
            self.find_path(start_x, start_y, goal_x, goal_y)
        except PathfindingError:
            return False
        return True
