#!/usr/bin/env python3

from __future__ import annotations

import argparse
import logging
import random

from dungeon_config import FloorConfig
from dungeon_constants import RANDOM_SEED
from floor_state import FloorState
from grid_renderer import describe_graph, render_floor


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate floors and print them as ASCII.")
    parser.add_argument("--seed", type=int, default=RANDOM_SEED, help="Random seed (default: random)")
    parser.add_argument("--floors", type=int, default=1, help="Number of descents to run (default: 1)")
    parser.add_argument("--dmap", action="store_true", help="Overlay the distance field to the spawn point")
    parser.add_argument("--path", action="store_true", help="Overlay the BFS path from spawn to the stairs down")
    parser.add_argument("--fov", action="store_true", help="Only draw what is visible from the spawn point")
    parser.add_argument("--graph", action="store_true", help="Print the room graph below each map")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    if args.floors <= 0:
        raise SystemExit("Number of floors must be a positive integer")
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    seed = args.seed
    if seed is None:
        # Pick a seed randomly and print it, so a floor can be reproduced with --seed.
        seed = random.randint(0, 1000000)
    print(f"Using random seed {seed}")

    state = FloorState(FloorConfig(random_seed=seed))
    for _ in range(args.floors):
        spawn = state.descend()
        stairs_down = state.floor.stairs_down

        distance_field = state.recompute_distance_field(spawn) if args.dmap else None
        path = None
        if args.path:
            found = state.find_path(spawn, stairs_down)
            print(f"Path to stairs down: {found}")
            path = found.steps[:-1]
        if args.fov:
            state.update_visibility(spawn)

        print(f"Depth {state.depth}:")
        print(
            render_floor(
                state.grid,
                show_all=not args.fov,
                distance_field=distance_field,
                path=path,
                player=spawn,
            )
        )
        if args.graph:
            print("\n".join(describe_graph(state.graph)))


if __name__ == "__main__":
    main()
