# gridnav/pygame_viewer.py (interactive grid editor + path view)
from __future__ import annotations
import argparse
from dataclasses import dataclass
from typing import List, Optional, Tuple
import logging, os

import pygame

from .types import Coord
from .astar import Pathfinder, SmoothingMode
from .config import NavConfig, load_config
from .errors import PathfindingError
from .heuristics import HEURISTICS
from .log_config import setup_logging
from .scenario import Scenario

logger = logging.getLogger(__name__)

HEURISTIC_NAMES: List[str] = list(HEURISTICS)


@dataclass
class Colors:
    BG = (18, 18, 22)
    WALL = (35, 35, 44)
    FLOOR = (230, 230, 240)
    AGENT = (220, 90, 90)
    START = (100, 200, 120)
    GOAL = (90, 160, 220)
    PATH = (70, 170, 110)
    EXPANDED = (160, 200, 160)
    GRID = (60, 60, 70)


class Viewer:
    def __init__(self, scenario: Scenario, config: Optional[NavConfig] = None,
                 cell_size: int = 28, fps: int = 60, fullscreen: bool = False,
                 speed: float = 6.0, env_dir: str | None = None):
        self.scenario = scenario
        self.config = config or NavConfig()
        self.cell = cell_size
        self.fps = fps
        self.speed_tiles_per_sec = speed
        self.env_dir = env_dir
        self.env_files: List[str] = []
        self.env_index = -1

        self.config.apply_to_grid(scenario.grid)
        self.pathfinder: Pathfinder = self.config.build_pathfinder(scenario.grid)
        self.heuristic_index = HEURISTIC_NAMES.index(self.config.heuristic)

        self.agent: Coord = scenario.start
        self.path: List[Coord] = []
        self.path_index = 0
        self.expanded_last: Tuple[Coord, ...] = ()
        self.status = ""

        self.autopilot = False
        self._step_timer = 0.0
        self.show_grid = False

        self.fullscreen = fullscreen
        self._recreate_display()
        self.clock = pygame.time.Clock()

        self._recalculate_step_interval()
        self.replan()

        if self.env_dir:
            self._find_env_files()

    # ----------------- display -----------------
    def _recreate_display(self) -> None:
        g = self.scenario.grid
        flags = pygame.FULLSCREEN if self.fullscreen else 0
        self.screen = pygame.display.set_mode((g.width * self.cell, g.height * self.cell), flags)

    def toggle_fullscreen(self) -> None:
        self.fullscreen = not self.fullscreen
        self._recreate_display()

    def _recalculate_step_interval(self) -> None:
        self._step_interval = 1.0 / self.speed_tiles_per_sec

    def _update_caption(self) -> None:
        g = self.scenario.grid
        pygame.display.set_caption(
            f"gridnav | h={HEURISTIC_NAMES[self.heuristic_index]} "
            f"diag={'on' if g.allow_diagonal else 'off'} "
            f"corners={'cut' if g.cut_corners else 'kept'} "
            f"smooth={self.pathfinder.smoothing.value} | {self.status}"
        )

    # ----------------- scenarios -----------------
    def set_scenario(self, scenario: Scenario) -> None:
        self.scenario = scenario
        self.config.apply_to_grid(scenario.grid)
        self.pathfinder.grid = scenario.grid
        self.agent = scenario.start
        self._recreate_display()
        self.replan()

    def _find_env_files(self) -> None:
        if self.env_dir and os.path.isdir(self.env_dir):
            self.env_files = sorted([f for f in os.listdir(self.env_dir) if f.endswith(".txt")])

    def _load_env_by_index(self, index: int) -> None:
        if not self.env_files or not (0 <= index < len(self.env_files)):
            return
        self.env_index = index
        filepath = os.path.join(self.env_dir, self.env_files[self.env_index])
        logger.info("Loading %s", filepath)
        self.set_scenario(Scenario.load(filepath))

    # ----------------- planning -----------------
    def replan(self) -> None:
        gx, gy = self.scenario.goal
        try:
            path = self.pathfinder.find_path(self.agent[0], self.agent[1], gx, gy)
        except PathfindingError as e:
            self.path = []
            self.status = str(e)
        else:
            self.path = list(path)
            self.status = f"cost {path.total_cost:.2f}, explored {self.pathfinder.last_nodes_explored}"
        self.path_index = 1
        self.expanded_last = self.pathfinder.last_expanded
        self._update_caption()

    def _step_along_plan(self) -> None:
        if self.path_index >= len(self.path):
            self.autopilot = False
            return
        nxt = self.path[self.path_index]
        if not self.scenario.grid.is_walkable(*nxt):
            self.replan()
            return
        # smoothed paths skip cells; walk one cell toward the next waypoint
        dx = (nxt[0] > self.agent[0]) - (nxt[0] < self.agent[0])
        dy = (nxt[1] > self.agent[1]) - (nxt[1] < self.agent[1])
        self.agent = (self.agent[0] + dx, self.agent[1] + dy)
        if self.agent == nxt:
            self.path_index += 1

    # ----------------- editing -----------------
    def cell_at(self, px: int, py: int) -> Optional[Coord]:
        x, y = px // self.cell, py // self.cell
        return (x, y) if self.scenario.grid.is_valid(x, y) else None

    def toggle_wall(self, c: Coord) -> None:
        if c in (self.agent, self.scenario.start, self.scenario.goal):
            return
        g = self.scenario.grid
        g.set_blocked(c[0], c[1], g.is_walkable(*c))
        self.replan()

    def set_goal(self, c: Coord) -> None:
        if self.scenario.grid.is_walkable(*c):
            self.scenario.goal = c
            self.replan()

    def set_start(self, c: Coord) -> None:
        if self.scenario.grid.is_walkable(*c):
            self.scenario.start = c
            self.agent = c
            self.replan()

    def cycle_heuristic(self) -> None:
        self.heuristic_index = (self.heuristic_index + 1) % len(HEURISTIC_NAMES)
        self.pathfinder.heuristic = HEURISTICS[HEURISTIC_NAMES[self.heuristic_index]]
        self.replan()

    def toggle_smoothing(self) -> None:
        sm = self.pathfinder.smoothing
        self.pathfinder.smoothing = SmoothingMode.NONE if sm is SmoothingMode.SIMPLE else SmoothingMode.SIMPLE
        self.replan()

    # ----------------- draw -----------------
    def draw(self) -> None:
        g, cell = self.scenario.grid, self.cell
        scr = self.screen
        scr.fill(Colors.BG)

        for c in g.iter_cells():
            rect = pygame.Rect(c.x * cell, c.y * cell, cell, cell)
            scr.fill(Colors.FLOOR if c.is_walkable() else Colors.WALL, rect)

        for (x, y) in self.expanded_last:
            s = pygame.Surface((cell, cell), pygame.SRCALPHA)
            s.fill((*Colors.EXPANDED, 90))
            scr.blit(s, (x * cell, y * cell))

        if len(self.path) > 1:
            centers = [(x * cell + cell // 2, y * cell + cell // 2) for x, y in self.path]
            pygame.draw.lines(scr, Colors.PATH, False, centers, max(2, cell // 6))
        for (x, y) in self.path:
            rect = pygame.Rect(x * cell + cell // 3, y * cell + cell // 3, cell // 3, cell // 3)
            pygame.draw.rect(scr, Colors.PATH, rect, border_radius=3)

        sx, sy = self.scenario.start
        pygame.draw.rect(scr, Colors.START, pygame.Rect(sx * cell + 4, sy * cell + 4, cell - 8, cell - 8), 2)
        gx, gy = self.scenario.goal
        pygame.draw.rect(scr, Colors.GOAL, pygame.Rect(gx * cell + 4, gy * cell + 4, cell - 8, cell - 8),
                         border_radius=6)
        ax, ay = self.agent
        pygame.draw.rect(scr, Colors.AGENT, pygame.Rect(ax * cell + 6, ay * cell + 6, cell - 12, cell - 12),
                         border_radius=8)

        if self.show_grid:
            for i in range(g.width + 1):
                pygame.draw.line(scr, Colors.GRID, (i * cell, 0), (i * cell, g.height * cell))
            for i in range(g.height + 1):
                pygame.draw.line(scr, Colors.GRID, (0, i * cell), (g.width * cell, i * cell))

        pygame.display.flip()

    # ----------------- loop -----------------
    def handle_key(self, key: int, mod: int = 0) -> bool:
        """Apply one key press; returns False when the viewer should quit."""
        g = self.scenario.grid
        if key == pygame.K_ESCAPE:
            return False
        elif key == pygame.K_SPACE:
            self.autopilot = not self.autopilot
        elif key == pygame.K_r:
            self.agent = self.scenario.start
            self.replan()
        elif key == pygame.K_g:
            self.set_scenario(Scenario.random(g.width, g.height, p_blocked=0.30))
        elif key == pygame.K_x:
            g.clear()
            self.replan()
        elif key == pygame.K_d:
            g.allow_diagonal = not g.allow_diagonal
            self.config.allow_diagonal = g.allow_diagonal
            self.replan()
        elif key == pygame.K_c:
            g.cut_corners = not g.cut_corners
            self.config.cut_corners = g.cut_corners
            self.replan()
        elif key == pygame.K_h:
            self.cycle_heuristic()
        elif key == pygame.K_m:
            self.toggle_smoothing()
        elif key == pygame.K_l:
            self.show_grid = not self.show_grid
        elif key == pygame.K_s:
            c = self.cell_at(*pygame.mouse.get_pos())
            if c is not None:
                self.set_start(c)
        elif key == pygame.K_LEFTBRACKET and self.env_files:
            self._load_env_by_index((self.env_index - 1 + len(self.env_files)) % len(self.env_files))
        elif key == pygame.K_RIGHTBRACKET and self.env_files:
            self._load_env_by_index((self.env_index + 1) % len(self.env_files))
        elif key == pygame.K_PAGEUP:
            self.speed_tiles_per_sec = min(self.speed_tiles_per_sec + 1, 60)
            self._recalculate_step_interval()
        elif key == pygame.K_PAGEDOWN:
            self.speed_tiles_per_sec = max(self.speed_tiles_per_sec - 1, 1)
            self._recalculate_step_interval()
        elif key == pygame.K_F11 or (key == pygame.K_RETURN and (mod & pygame.KMOD_ALT)):
            self.toggle_fullscreen()
        return True

    def handle_click(self, pos: Tuple[int, int], button: int) -> None:
        c = self.cell_at(*pos)
        if c is None:
            return
        if button == 1:
            self.toggle_wall(c)
        elif button == 2:
            self.set_start(c)
        elif button == 3:
            self.set_goal(c)

    def run(self) -> None:
        running = True
        while running:
            dt = self.clock.tick(self.fps) / 1000.0
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    running = self.handle_key(event.key, event.mod)
                elif event.type == pygame.MOUSEBUTTONDOWN:
                    self.handle_click(event.pos, event.button)

            if self.autopilot and self.agent != self.scenario.goal:
                self._step_timer += dt
                while self._step_timer >= self._step_interval and self.autopilot:
                    self._step_along_plan()
                    self._step_timer -= self._step_interval

            self.draw()


def main():
    parser = argparse.ArgumentParser(description="gridnav viewer: edit a grid and watch A* replan")
    parser.add_argument("--n", type=int, default=31, help="Grid size when generating random maps")
    parser.add_argument("--p", type=float, default=0.30, help="Block probability for random maps")
    parser.add_argument("--load", type=str, default=None, help="Load a saved scenario (.txt)")
    parser.add_argument("--config", type=str, default=None, help="YAML settings file")
    parser.add_argument("--cell", type=int, default=28, help="Cell size in pixels")
    parser.add_argument("--envdir", type=str, default="envs", help="Directory of scenarios to cycle with [ and ]")
    parser.add_argument("--fps", type=int, default=60, help="Frames per second")
    parser.add_argument("--speed", type=float, default=6.0, help="Autopilot speed in tiles/sec")
    parser.add_argument("--fullscreen", action="store_true", help="Start in fullscreen (toggle Alt+Enter / F11)")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    config = load_config(args.config) if args.config else NavConfig()

    if args.load:
        scenario = Scenario.load(args.load)
    elif os.path.isdir(args.envdir) and any(f.endswith(".txt") for f in os.listdir(args.envdir)):
        first_env = sorted([f for f in os.listdir(args.envdir) if f.endswith(".txt")])[0]
        scenario = Scenario.load(os.path.join(args.envdir, first_env))
    else:
        scenario = Scenario.random(args.n, p_blocked=args.p)

    pygame.init()
    try:
        Viewer(scenario, config, cell_size=args.cell, fps=args.fps, fullscreen=args.fullscreen,
               speed=args.speed, env_dir=args.envdir).run()
    finally:
        pygame.quit()


if __name__ == "__main__":
    main()
