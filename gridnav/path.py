# gridnav/path.py
from __future__ import annotations
from typing import Callable, Iterator, List, Optional, Tuple

from .types import Coord


class Path:
    """
    Ordered waypoints plus the accumulated traversal cost.

    One point means "already at the goal"; no points means cleared.
    """

    def __init__(self, points: Optional[List[Coord]] = None, total_cost: float = 0.0):
        self._points: List[Coord] = [(int(x), int(y)) for x, y in (points or [])]
        self.total_cost = total_cost

    def __repr__(self) -> str:
        return f"Path({self._points!r}, total_cost={self.total_cost:.3f})"

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Coord]:
        return iter(tuple(self._points))

    def __getitem__(self, i: int) -> Coord:
        return self._points[i]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self._points == other._points and self.total_cost == other.total_cost

    @property
    def points(self) -> Tuple[Coord, ...]:
        return tuple(self._points)

    @property
    def total_cost(self) -> float:
        return self._total_cost

    @total_cost.setter
    def total_cost(self, value: float) -> None:
        self._total_cost = float(value)

    def is_empty(self) -> bool:
        return not self._points

    def append(self, x: int, y: int) -> None:
        self._points.append((x, y))

    def prepend(self, x: int, y: int) -> None:
        self._points.insert(0, (x, y))

    def get_point(self, i: int) -> Optional[Coord]:
        if 0 <= i < len(self._points):
            return self._points[i]
        return None

    def get_start(self) -> Optional[Coord]:
        return self._points[0] if self._points else None

    def get_end(self) -> Optional[Coord]:
        return self._points[-1] if self._points else None

    def reverse(self) -> None:
        self._points.reverse()

    def clear(self) -> None:
        self._points.clear()
        self.total_cost = 0.0

    def copy(self) -> "Path":
        return Path(list(self._points), self.total_cost)

    def foreach(self, visitor: Callable[[int, int], None]) -> None:
        for x, y in tuple(self._points):
            visitor(x, y)
