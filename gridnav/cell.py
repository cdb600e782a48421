# gridnav/cell.py
from __future__ import annotations
from enum import IntFlag
from typing import Any, Callable, Optional


class CellFlags(IntFlag):
    NONE = 0
    WALKABLE = 1 << 0
    BLOCKED = 1 << 1


DestroyFn = Callable[[Any], None]


class NavCell:
    """
    A single grid tile.

    Position is fixed at construction; cost, flags and the optional
    user payload are mutable. Copies are read-only snapshots and never
    carry the payload.
    """

    __slots__ = ("_x", "_y", "_cost", "_flags", "_user_data", "_user_destroy")

    def __init__(self, x: int, y: int, cost: float = 1.0, flags: CellFlags = CellFlags.NONE):
        if not cost >= 0:
            raise ValueError(f"cell cost must be >= 0, got {cost}")
        self._x = x
        self._y = y
        self._cost = float(cost)
        self._flags = CellFlags(flags)
        self._user_data: Any = None
        self._user_destroy: Optional[DestroyFn] = None

    def __repr__(self) -> str:
        return f"NavCell(x={self._x}, y={self._y}, cost={self._cost}, flags={self._flags!r})"

    @property
    def x(self) -> int:
        return self._x

    @property
    def y(self) -> int:
        return self._y

    @property
    def cost(self) -> float:
        return self._cost

    @cost.setter
    def cost(self, value: float) -> None:
        if not value >= 0:
            raise ValueError(f"cell cost must be >= 0, got {value}")
        self._cost = float(value)

    @property
    def flags(self) -> CellFlags:
        return self._flags

    @flags.setter
    def flags(self, value: CellFlags) -> None:
        self._flags = CellFlags(value)

    def has_flag(self, flag: CellFlags) -> bool:
        return bool(self._flags & flag)

    def is_walkable(self) -> bool:
        return not (self._flags & CellFlags.BLOCKED)

    def copy(self) -> "NavCell":
        return NavCell(self._x, self._y, self._cost, self._flags)

    # ---- user payload ----

    @property
    def user_data(self) -> Any:
        return self._user_data

    def set_user_data(self, value: Any, destroy: Optional[DestroyFn] = None) -> None:
        """Store a payload, releasing the previous one through its destructor first."""
        self.clear_user_data()
        self._user_data = value
        self._user_destroy = destroy

    def clear_user_data(self) -> None:
        old, destroy = self._user_data, self._user_destroy
        self._user_data = None
        self._user_destroy = None
        if destroy is not None and old is not None:
            destroy(old)
