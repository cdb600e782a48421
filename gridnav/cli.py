# gridnav/cli.py
from __future__ import annotations
import argparse, csv, logging, os, os.path, time
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .astar import Pathfinder, SmoothingMode
from .config import NavConfig, load_config
from .errors import PathfindingError
from .heuristics import HEURISTICS
from .log_config import setup_logging
from .path import Path
from .scenario import Scenario
from .viz import draw_grid_png

logger = logging.getLogger(__name__)


@dataclass
class RunStats:
    heuristic: str
    reached: bool
    waypoints: int
    cost: float
    explored: int
    elapsed_sec: float
    path: Optional[Path] = None
    error: str = ""


def format_stats(s: RunStats) -> str:
    cost = f"{s.cost:8.3f}" if s.reached else "       -"
    return (f"{s.heuristic:10s} | reached={s.reached!s:5s} | waypoints={s.waypoints:4d} | "
            f"cost={cost} | explored={s.explored:6d} | time={s.elapsed_sec*1000:7.1f} ms")


def run_once(scn: Scenario, pf: Pathfinder, name: str) -> RunStats:
    t0 = time.perf_counter()
    try:
        path = pf.find_path(scn.start[0], scn.start[1], scn.goal[0], scn.goal[1])
    except PathfindingError as e:
        return RunStats(name, False, 0, 0.0, pf.last_nodes_explored, time.perf_counter() - t0, None, str(e))
    return RunStats(name, True, len(path), path.total_cost, pf.last_nodes_explored,
                    time.perf_counter() - t0, path)


def run_all_heuristics(scn: Scenario, cfg: NavConfig, out_dir: str | None = None,
                       base_tag: str = "run") -> List[RunStats]:
    cfg.apply_to_grid(scn.grid)
    pf = cfg.build_pathfinder(scn.grid)
    results: List[RunStats] = []
    for name, fn in HEURISTICS.items():
        pf.heuristic = fn
        st = run_once(scn, pf, name)
        results.append(st)
        if out_dir:
            draw_grid_png(scn.grid, st.path, pf.last_expanded,
                          os.path.join(out_dir, f"{base_tag}_{name}.png"), scn.start, scn.goal)
    return results


def _config_from_args(args: argparse.Namespace) -> NavConfig:
    cfg = load_config(args.config) if args.config else NavConfig()
    overrides = {}
    if getattr(args, "heuristic", None):
        overrides["heuristic"] = args.heuristic
    if getattr(args, "smoothing", None):
        overrides["smoothing"] = args.smoothing
    if getattr(args, "max_iterations", None) is not None:
        overrides["max_iterations"] = args.max_iterations
    if getattr(args, "no_diagonal", False):
        overrides["allow_diagonal"] = False
    if getattr(args, "cut_corners", False):
        overrides["cut_corners"] = True
    if overrides:
        merged = cfg.to_dict()
        for key, val in overrides.items():
            section = "grid" if key in ("allow_diagonal", "cut_corners") else "pathfinder"
            merged[section][key] = val
        cfg = NavConfig.from_dict(merged)
    return cfg

# -------- subcommands --------

def cmd_gen(args: argparse.Namespace) -> int:
    os.makedirs(args.out, exist_ok=True)
    for i in range(args.count):
        scn = Scenario.random(width=args.size, height=args.height, p_blocked=args.p,
                              seed=(args.seed + i) if args.seed is not None else None)
        path = os.path.join(args.out, f"grid_{i:03d}.txt")
        scn.save(path)
        print("wrote", path)
    return 0


def cmd_find(args: argparse.Namespace) -> int:
    scn = Scenario.load(args.env)
    if args.start:
        scn.start = tuple(args.start)
    if args.goal:
        scn.goal = tuple(args.goal)
    cfg = _config_from_args(args)
    cfg.apply_to_grid(scn.grid)
    pf = cfg.build_pathfinder(scn.grid)

    st = run_once(scn, pf, cfg.heuristic)
    print(format_stats(st))
    if not st.reached:
        print("error:", st.error)
        return 1
    print("path:", " ".join(f"({x},{y})" for x, y in st.path))
    if args.png:
        draw_grid_png(scn.grid, st.path, pf.last_expanded, args.png, scn.start, scn.goal, cell=args.cell)
        print("wrote", args.png)
    return 0


def cmd_bench(args: argparse.Namespace) -> int:
    envs = sorted(p for p in os.listdir(args.envdir) if p.endswith(".txt"))
    if not envs:
        logger.warning("No .txt scenarios in %s", args.envdir)
        return 1
    cfg = _config_from_args(args)
    if args.out:
        os.makedirs(args.out, exist_ok=True)
    rows = []
    for fname in envs:
        scn = Scenario.load(os.path.join(args.envdir, fname))
        base = os.path.splitext(fname)[0]
        for st in run_all_heuristics(scn, cfg, out_dir=args.out or None, base_tag=base):
            print(f"{fname} :: {format_stats(st)}")
            rows.append({
                "env": fname,
                "heuristic": st.heuristic,
                "reached": st.reached,
                "waypoints": st.waypoints,
                "cost": round(st.cost, 6),
                "explored": st.explored,
                "time_sec": round(st.elapsed_sec, 6),
            })
    if args.csv:
        with open(args.csv, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
            writer.writeheader()
            writer.writerows(rows)
        print("wrote CSV:", args.csv)
    return 0


def _add_search_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--heuristic", choices=sorted(HEURISTICS), default=None)
    p.add_argument("--smoothing", choices=[m.value for m in SmoothingMode], default=None)
    p.add_argument("--max-iterations", type=int, default=None)
    p.add_argument("--no-diagonal", action="store_true", help="4-directional movement only")
    p.add_argument("--cut-corners", action="store_true", help="allow diagonals past blocked corners")


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Grid navigation with A*")
    p.add_argument("--config", type=str, default=None, help="YAML settings file")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    p.add_argument("--log-file", type=str, default=None)
    sub = p.add_subparsers(dest="cmd", required=True)

    g = sub.add_parser("gen", help="generate random scenario files")
    g.add_argument("--count", type=int, default=30)
    g.add_argument("--size", type=int, default=51)
    g.add_argument("--height", type=int, default=None, help="defaults to --size")
    g.add_argument("--p", type=float, default=0.30)
    g.add_argument("--out", type=str, default="envs")
    g.add_argument("--seed", type=int, default=None)
    g.set_defaults(func=cmd_gen)

    f = sub.add_parser("find", help="search one scenario and print the path")
    f.add_argument("--env", type=str, required=True)
    f.add_argument("--start", type=int, nargs=2, metavar=("X", "Y"), default=None)
    f.add_argument("--goal", type=int, nargs=2, metavar=("X", "Y"), default=None)
    f.add_argument("--png", type=str, default="")
    f.add_argument("--cell", type=int, default=10)
    _add_search_options(f)
    f.set_defaults(func=cmd_find)

    b = sub.add_parser("bench", help="run every heuristic on every .txt in a folder")
    b.add_argument("--envdir", type=str, required=True)
    b.add_argument("--out", type=str, default="", help="folder for PNGs")
    b.add_argument("--csv", type=str, default="")
    _add_search_options(b)
    b.set_defaults(func=cmd_bench)

    return p


def main(argv: Sequence[str] | None = None) -> int:
    ap = build_argparser()
    args = ap.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)
    try:
        return args.func(args)
    except (OSError, ValueError) as e:
        logger.error("%s", e)
        return 2
