#!/usr/bin/env python3
"""
Command-line driver for the terrain walk.

Usage:
    # Click at pixel (212, 97) and walk there:
    python walk_cli.py --click 212 97

    # Several clicks on a small board, with a snapshot image:
    python walk_cli.py --preset small --click 60 40 --click 5 90 --plot walk.png

    # Fixed terrain and search debug output:
    python walk_cli.py --seed 7 --click 390 390 --debug
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

import time
import argparse
import logging

from tqdm import tqdm


class TimedStep:
    """Context manager for timing individual steps"""
    def __init__(self, description):
        self.description = description
        self.start_time = None

    def __enter__(self):
        print(f"\n📍 {self.description}...")
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.time() - self.start_time
        if exc_type is None:
            print(f"   ✓ Completed in {format_time(duration)}")
        else:
            print(f"   ✗ Failed after {format_time(duration)}")


def format_time(seconds):
    """Format time in human-readable way"""
    if seconds < 1:
        return f"{seconds*1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        minutes = int(seconds / 60)
        secs = seconds % 60
        return f"{minutes}m {secs:.0f}s"


def build_parser():
    parser = argparse.ArgumentParser(
        description="Walk an agent across procedural terrain along least-cost paths",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--preset', default='default', help='Board preset: default, small, rugged, flat')
    parser.add_argument('--seed', type=int, help='Terrain seed (overrides the preset)')
    parser.add_argument('--click', type=int, nargs=2, action='append', metavar=('PX', 'PY'), default=[],
                        help='Pointer click in canvas pixels; may be repeated')
    parser.add_argument('--ticks', type=int, default=None,
                        help='Maximum frames to run after each click (default: until the target is reached)')
    parser.add_argument('--plot', metavar='FILE', help='Save a PNG snapshot after the last click')
    parser.add_argument('--debug', action='store_true', help='Collect and summarise search debug data')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    from terrain_walk.services.walk_config import WalkPresets
    from terrain_walk.services.walk_session import WalkSession

    try:
        config = WalkPresets.by_name(args.preset)
    except ValueError as e:
        parser.error(str(e))
    if args.seed is not None:
        config.seed = args.seed
    config.debug_mode = args.debug

    print("🥾 Terrain Walk")
    print("=" * 50)
    print(f"Preset: {args.preset}, seed: {config.seed}")
    print(f"Canvas: {config.canvas_width}x{config.canvas_height} px, cell size {config.resolution} px")

    with TimedStep("Generating terrain and navigation grid"):
        session = WalkSession(config)
        elevations = session.grid.elevations
        print(f"   Grid: {session.grid.cols}x{session.grid.rows} cells")
        print(f"   Elevation: min={elevations.min():.1f}, max={elevations.max():.1f}, mean={elevations.mean():.1f}")

    if not args.click:
        print("\nNo clicks given, nothing to walk. Use --click PX PY.")
        return 0

    exit_code = 0
    for px, py in args.click:
        with TimedStep(f"Click at pixel ({px}, {py})"):
            target = session.pixel_to_grid(px, py)
            path = session.click(px, py)
            if path is None:
                print(f"   Target {target} is outside the grid, click ignored")
                continue
            if not path:
                print(f"   ✗ No path found to {target}")
                exit_code = 1
                continue

            response = session.path_response()
            stats = response.stats
            print(f"   Target cell: {target}")
            print(f"   Path: {len(path)} cells, {stats.steps} steps")
            print(f"   Cost: {stats.total_cost:.1f} (gain {stats.elevation_gain:.1f}, loss {stats.elevation_loss:.1f})")
            print(f"   Nodes explored: {stats.nodes_explored}")

            if args.debug:
                debug_data = session.pathfinder.get_debug_data()
                if debug_data:
                    print(f"   Debug: {debug_data['total_explored']} explored nodes recorded")

        max_ticks = args.ticks if args.ticks is not None else len(path)
        with TimedStep("Walking"):
            for _ in tqdm(range(max_ticks), desc="   ticks", leave=False):
                if session.agent.is_idle:
                    break
                session.tick()
            snapshot = session.snapshot()
            print(f"   Agent at ({snapshot.agent.x}, {snapshot.agent.y}), state: {snapshot.state.value}")

    if args.plot:
        with TimedStep(f"Saving snapshot to {args.plot}"):
            from terrain_walk.services.visualization import plot_walk
            last_path = session.last_result.cells if session.last_result else []
            plot_walk(session.grid, last_path, session.agent.position, args.plot)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
