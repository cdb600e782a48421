# gridnav/__init__.py
from .types import Coord, GridPolicy, Heuristic
from .cell import CellFlags, NavCell
from .grid import NavGrid, GridOverlay
from .path import Path
from .heuristics import manhattan, euclidean, chebyshev, octile, HEURISTICS, get_heuristic
from .errors import (
    PathfindingError, PathfindingErrorKind,
    NoGridError, InvalidStartError, InvalidGoalError, NoPathError,
)
from .astar import Pathfinder, SmoothingMode, smooth_path_simple, DIAGONAL_COST
from .config import NavConfig, load_config
from .scenario import Scenario

__all__ = [
    "Coord", "GridPolicy", "Heuristic",
    "CellFlags", "NavCell", "NavGrid", "GridOverlay", "Path",
    "manhattan", "euclidean", "chebyshev", "octile", "HEURISTICS", "get_heuristic",
    "PathfindingError", "PathfindingErrorKind",
    "NoGridError", "InvalidStartError", "InvalidGoalError", "NoPathError",
    "Pathfinder", "SmoothingMode", "smooth_path_simple", "DIAGONAL_COST",
    "NavConfig", "load_config",
    "Scenario",
]
