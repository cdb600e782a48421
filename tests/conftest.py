# tests/conftest.py

from __future__ import annotations

import logging

import pytest

from gridnav import NavGrid, Pathfinder, Scenario


@pytest.fixture(autouse=True)
def _restore_root_logger():
    # cli.main reconfigures the root logger
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def open_grid() -> NavGrid:
    """10x10, all walkable, defaults (diagonal on, corners kept)."""
    return NavGrid(10, 10)


@pytest.fixture
def pathfinder(open_grid: NavGrid) -> Pathfinder:
    return Pathfinder(open_grid)


@pytest.fixture
def wall_scenario() -> Scenario:
    """
    7x5 grid with a vertical wall at x=3 and a gap at the bottom row.

        0001000
        0001000
        0001000
        0001000
        0000000
    """
    grid = NavGrid(7, 5)
    for y in range(4):
        grid.set_blocked(3, y, True)
    return Scenario(grid, (0, 0), (6, 0))
