# gridnav/heuristics.py
from __future__ import annotations
from typing import Dict
import math

from .types import Heuristic

SQRT2 = math.sqrt(2.0)


def manhattan(x1: int, y1: int, x2: int, y2: int) -> float:
    # only admissible for 4-directional movement, but stays the default
    return float(abs(x2 - x1) + abs(y2 - y1))


def euclidean(x1: int, y1: int, x2: int, y2: int) -> float:
    dx, dy = x2 - x1, y2 - y1
    return math.sqrt(dx * dx + dy * dy)


def chebyshev(x1: int, y1: int, x2: int, y2: int) -> float:
    return float(max(abs(x2 - x1), abs(y2 - y1)))


def octile(x1: int, y1: int, x2: int, y2: int) -> float:
    """Exact for unit cells with sqrt(2) diagonals; pair with 8-directional search."""
    dx, dy = abs(x2 - x1), abs(y2 - y1)
    return max(dx, dy) + (SQRT2 - 1.0) * min(dx, dy)


HEURISTICS: Dict[str, Heuristic] = {
    "manhattan": manhattan,
    "euclidean": euclidean,
    "chebyshev": chebyshev,
    "octile": octile,
}


def get_heuristic(name: str) -> Heuristic:
    try:
        return HEURISTICS[name.lower()]
    except KeyError:
        raise ValueError(
            f"unknown heuristic {name!r}; expected one of {', '.join(HEURISTICS)}"
        ) from None
