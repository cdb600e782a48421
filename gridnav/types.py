# gridnav/types.py
from __future__ import annotations
from typing import Callable, List, Protocol, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .cell import NavCell

Coord = Tuple[int, int]  # (x, y)

# heuristic(x1, y1, x2, y2) -> estimated remaining cost
Heuristic = Callable[[int, int, int, int], float]


class GridPolicy(Protocol):
    """The queries the search needs from a grid."""

    def is_valid(self, x: int, y: int) -> bool: ...

    def is_walkable(self, x: int, y: int) -> bool: ...

    def get_cell_cost(self, x: int, y: int) -> float: ...

    def get_neighbors(self, x: int, y: int) -> List["NavCell"]: ...
