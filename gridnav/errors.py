# gridnav/errors.py
from __future__ import annotations
from enum import Enum

from .types import Coord


class PathfindingErrorKind(Enum):
    NO_GRID = "no_grid"
    INVALID_START = "invalid_start"
    INVALID_GOAL = "invalid_goal"
    NO_PATH = "no_path"


class PathfindingError(Exception):
    """Base class for everything find_path can raise."""

    kind: PathfindingErrorKind


class NoGridError(PathfindingError):
    kind = PathfindingErrorKind.NO_GRID

    def __init__(self) -> None:
        super().__init__("No navigation grid set")


class _EndpointError(PathfindingError):
    label = "endpoint"

    def __init__(self, x: int, y: int, reason: str):
        self.x = x
        self.y = y
        self.reason = reason
        if reason == "out_of_bounds":
            msg = f"Invalid {self.label} position ({x}, {y})"
        else:
            msg = f"{self.label.capitalize()} position ({x}, {y}) is not walkable"
        super().__init__(msg)


class InvalidStartError(_EndpointError):
    kind = PathfindingErrorKind.INVALID_START
    label = "start"


class InvalidGoalError(_EndpointError):
    kind = PathfindingErrorKind.INVALID_GOAL
    label = "goal"


class NoPathError(PathfindingError):
    # raised both when the open set runs dry and when max_iterations is hit
    kind = PathfindingErrorKind.NO_PATH

    def __init__(self, start: Coord, goal: Coord):
        self.start = start
        self.goal = goal
        super().__init__(
            f"No path found from ({start[0]}, {start[1]}) to ({goal[0]}, {goal[1]})"
        )
