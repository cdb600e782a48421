# gridnav/config.py
"""
Pathfinder / grid settings loaded from YAML.

Example::

    pathfinder:
      heuristic: octile
      smoothing: simple
      max_iterations: 0
    grid:
      allow_diagonal: true
      cut_corners: false
"""
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path as FsPath
from typing import Any, Dict, Optional
import logging

import yaml

from .astar import Pathfinder, SmoothingMode
from .grid import NavGrid
from .heuristics import HEURISTICS, get_heuristic
from .types import GridPolicy

logger = logging.getLogger(__name__)


@dataclass
class NavConfig:
    heuristic: str = "manhattan"
    smoothing: str = "none"
    max_iterations: int = 0
    allow_diagonal: bool = True
    cut_corners: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.heuristic, str) or self.heuristic.lower() not in HEURISTICS:
            raise ValueError(f"unknown heuristic: {self.heuristic!r}")
        self.heuristic = self.heuristic.lower()
        try:
            SmoothingMode(str(self.smoothing).lower())
        except ValueError:
            raise ValueError(f"unknown smoothing mode: {self.smoothing!r}") from None
        self.smoothing = str(self.smoothing).lower()
        if not isinstance(self.max_iterations, int) or self.max_iterations < 0:
            raise ValueError(f"max_iterations must be a non-negative int, got {self.max_iterations!r}")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "NavConfig":
        data = data or {}
        pf = data.get("pathfinder") or {}
        gr = data.get("grid") or {}
        if not isinstance(pf, dict) or not isinstance(gr, dict):
            raise ValueError("'pathfinder' and 'grid' sections must be mappings")

        kwargs: Dict[str, Any] = {}
        for key in ("heuristic", "smoothing", "max_iterations"):
            if key in pf:
                kwargs[key] = pf[key]
        for key in ("allow_diagonal", "cut_corners"):
            if key in gr:
                kwargs[key] = bool(gr[key])

        unknown = (set(pf) - {"heuristic", "smoothing", "max_iterations"}) | \
                  (set(gr) - {"allow_diagonal", "cut_corners"})
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(sorted(unknown)))
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pathfinder": {
                "heuristic": self.heuristic,
                "smoothing": self.smoothing,
                "max_iterations": self.max_iterations,
            },
            "grid": {
                "allow_diagonal": self.allow_diagonal,
                "cut_corners": self.cut_corners,
            },
        }

    def apply_to_grid(self, grid: NavGrid) -> None:
        grid.allow_diagonal = self.allow_diagonal
        grid.cut_corners = self.cut_corners

    def build_pathfinder(self, grid: Optional[GridPolicy] = None) -> Pathfinder:
        return Pathfinder(
            grid,
            heuristic=get_heuristic(self.heuristic),
            smoothing=SmoothingMode(self.smoothing),
            max_iterations=self.max_iterations,
        )


def load_config(path: str) -> NavConfig:
    config_file = FsPath(path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    with open(config_file, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is not None and not isinstance(data, dict):
        raise ValueError(f"{config_file}: top level must be a mapping")
    return NavConfig.from_dict(data)


def save_config(config: NavConfig, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config.to_dict(), f, sort_keys=False)
