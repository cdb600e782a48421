# gridnav/grid.py
from __future__ import annotations
from typing import Callable, Iterator, List, Optional, Tuple
import logging, math

from .cell import CellFlags, NavCell

logger = logging.getLogger(__name__)

# N, E, S, W, NE, SE, SW, NW
_DIRS: Tuple[Tuple[int, int], ...] = (
    (0, -1), (1, 0), (0, 1), (-1, 0),
    (1, -1), (1, 1), (-1, 1), (-1, -1),
)


def walkable_offsets(x: int, y: int, allow_diagonal: bool, cut_corners: bool,
                     is_walkable: Callable[[int, int], bool]) -> Iterator[Tuple[int, int]]:
    """
    Yield the neighbor coordinates of (x, y) that a walker may step to.

    Without corner cutting a diagonal step needs both cardinal cells
    it squeezes past to be walkable.
    """
    dirs = _DIRS if allow_diagonal else _DIRS[:4]
    for dx, dy in dirs:
        nx, ny = x + dx, y + dy
        if not is_walkable(nx, ny):
            continue
        if dx and dy and not cut_corners:
            if not (is_walkable(x + dx, y) and is_walkable(x, y + dy)):
                continue
        yield nx, ny


class NavGrid:
    """
    Fixed-size 2D array of NavCell, stored row-major.

    get_cell_cost / is_walkable / get_neighbors are the policy the
    pathfinder consumes; see GridOverlay for substituting them.
    """

    def __init__(self, width: int, height: int, allow_diagonal: bool = True, cut_corners: bool = False):
        if width <= 0 or height <= 0:
            raise ValueError(f"grid dimensions must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        self.allow_diagonal = allow_diagonal
        self.cut_corners = cut_corners
        self._cells: List[NavCell] = [
            NavCell(i % width, i // width, 1.0, CellFlags.NONE) for i in range(width * height)
        ]
        logger.debug("Created navigation grid %dx%d", width, height)

    def __repr__(self) -> str:
        return (f"NavGrid({self._width}x{self._height}, allow_diagonal={self.allow_diagonal}, "
                f"cut_corners={self.cut_corners})")

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    # ---- queries ----

    def is_valid(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def get_cell(self, x: int, y: int) -> Optional[NavCell]:
        if not self.is_valid(x, y):
            return None
        return self._cells[y * self._width + x]

    def get_cell_cost(self, x: int, y: int) -> float:
        cell = self.get_cell(x, y)
        if cell is None:
            return math.inf
        return cell.cost

    def get_cell_flags(self, x: int, y: int) -> CellFlags:
        cell = self.get_cell(x, y)
        if cell is None:
            return CellFlags.NONE
        return cell.flags

    def is_walkable(self, x: int, y: int) -> bool:
        cell = self.get_cell(x, y)
        return cell is not None and cell.is_walkable()

    def get_neighbors(self, x: int, y: int) -> List[NavCell]:
        return [
            self._cells[ny * self._width + nx].copy()
            for nx, ny in walkable_offsets(x, y, self.allow_diagonal, self.cut_corners, self.is_walkable)
        ]

    def iter_cells(self) -> Iterator[NavCell]:
        return iter(self._cells)

    def blocked_count(self) -> int:
        return sum(1 for c in self._cells if not c.is_walkable())

    # ---- mutators ----

    def set_cell_cost(self, x: int, y: int, cost: float) -> None:
        cell = self.get_cell(x, y)
        if cell is not None:
            cell.cost = cost

    def set_cell_flags(self, x: int, y: int, flags: CellFlags) -> None:
        cell = self.get_cell(x, y)
        if cell is not None:
            cell.flags = flags

    def set_blocked(self, x: int, y: int, blocked: bool) -> None:
        cell = self.get_cell(x, y)
        if cell is None:
            return
        if blocked:
            cell.flags = cell.flags | CellFlags.BLOCKED
        else:
            cell.flags = cell.flags & ~CellFlags.BLOCKED

    def fill_rect(self, x: int, y: int, width: int, height: int,
                  flags: CellFlags, cost: float = 1.0) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"rect size must be >= 0, got {width}x{height}")
        if not cost >= 0:
            raise ValueError(f"cell cost must be >= 0, got {cost}")
        x0, x1 = max(0, x), min(self._width, x + width)
        y0, y1 = max(0, y), min(self._height, y + height)
        for cy in range(y0, y1):
            for cx in range(x0, x1):
                cell = self._cells[cy * self._width + cx]
                cell.flags = flags
                cell.cost = cost

    def clear(self) -> None:
        for cell in self._cells:
            cell.cost = 1.0
            cell.flags = CellFlags.NONE
        logger.debug("Cleared navigation grid")


CostFn = Callable[[NavGrid, int, int], float]
WalkableFn = Callable[[NavGrid, int, int], bool]


class GridOverlay:
    """
    Alternate cost/walkability policy over a base NavGrid.

    cost_fn(base, x, y) and walkable_fn(base, x, y) replace the base
    grid's answers for in-range cells; the base grid is never mutated.
    Diagonal and corner-cutting settings come from the base grid.
    """

    def __init__(self, base: NavGrid, cost_fn: Optional[CostFn] = None,
                 walkable_fn: Optional[WalkableFn] = None):
        self.base = base
        self.cost_fn = cost_fn
        self.walkable_fn = walkable_fn

    @property
    def width(self) -> int:
        return self.base.width

    @property
    def height(self) -> int:
        return self.base.height

    def is_valid(self, x: int, y: int) -> bool:
        return self.base.is_valid(x, y)

    def get_cell(self, x: int, y: int) -> Optional[NavCell]:
        return self.base.get_cell(x, y)

    def get_cell_cost(self, x: int, y: int) -> float:
        if not self.base.is_valid(x, y):
            return math.inf
        if self.cost_fn is None:
            return self.base.get_cell_cost(x, y)
        cost = self.cost_fn(self.base, x, y)
        if not cost >= 0:
            raise ValueError(f"overlay cost for ({x}, {y}) must be >= 0, got {cost}")
        return cost

    def is_walkable(self, x: int, y: int) -> bool:
        if not self.base.is_valid(x, y):
            return False
        if self.walkable_fn is None:
            return self.base.is_walkable(x, y)
        return bool(self.walkable_fn(self.base, x, y))

    def get_neighbors(self, x: int, y: int) -> List[NavCell]:
        out: List[NavCell] = []
        for nx, ny in walkable_offsets(x, y, self.base.allow_diagonal, self.base.cut_corners, self.is_walkable):
            snap = self.base.get_cell(nx, ny).copy()
            snap.cost = self.get_cell_cost(nx, ny)
            out.append(snap)
        return out
