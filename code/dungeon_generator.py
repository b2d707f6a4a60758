"""FloorGenerator orchestrates the room-graph steps and the map builder."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from time import perf_counter
from typing import Callable, Optional, Tuple, TypeVar

from dungeon_config import FloorConfig
from dungeon_geometry import Coord
from dungeon_layout import Grid
from map_builder import MapBuilder
from metrics import GenerationMetrics
from room_graph import RoomGraph

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class GeneratedFloor:
    """Everything produced by one descent."""

    grid: Grid
    graph: RoomGraph
    stairs_up: Coord
    stairs_down: Coord

    @property
    def spawn_point(self) -> Coord:
        return self.stairs_up


class FloorGenerator:
    """Manages the overall process of generating a floor."""

    def __init__(self, config: FloorConfig, rng: Optional[random.Random] = None) -> None:
        self.config = config
        self.rng = rng if rng is not None else config.rng()
        self.metrics = GenerationMetrics() if config.collect_metrics else None
        self.graph = RoomGraph(config, self.rng)
        self.grid = Grid(config)

    def _run_step(self, name: str, func: Callable[..., T], *args, **kwargs) -> T:
        if self.metrics is None:
            return func(*args, **kwargs)

        corridors_before = len(self.graph.corridors)
        rooms_before = len(self.graph.connected_rooms())
        start = perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            duration = perf_counter() - start
            self.metrics.record_step_run(
                name,
                duration,
                len(self.graph.corridors) - corridors_before,
                len(self.graph.connected_rooms()) - rooms_before,
            )

    def generate(self) -> GeneratedFloor:
        """Build a fresh graph and grid for a new floor."""
        self.graph = RoomGraph(self.config, self.rng)
        self.grid = Grid(self.config)
        graph = self.graph

        # Step 1: a random room rectangle inside each of the nine cell areas.
        self._run_step("place_rooms", graph.place_random_rooms)

        # Step 2: one guaranteed edge, then span the rest of the cells onto it.
        self._run_step("connect", graph.connect_random_pair)
        self._run_step("span", graph.span)

        # Step 3: a couple of loops so the floor is not a strict tree.
        self._run_step("extra_corridors", graph.add_extra_corridors)

        # Step 4: drop cells for irregularity and prune corridors left dangling.
        self._run_step("drop_rooms", graph.drop_random_rooms)

        if not graph.is_connected():
            logger.warning(
                "Generated floor has %d corridor components",
                graph.components().total_components(),
            )

        builder = MapBuilder(self.grid, graph, self.rng)
        stairs_up, stairs_down = self._run_step("build_map", builder.build)
        return GeneratedFloor(self.grid, graph, stairs_up, stairs_down)


def generate_floor(
    config: Optional[FloorConfig] = None,
    rng: Optional[random.Random] = None,
) -> Tuple[Grid, Coord]:
    """Generate a floor and return its grid and the player's spawn point (stairs up)."""
    floor = FloorGenerator(config if config is not None else FloorConfig(), rng).generate()
    return floor.grid, floor.spawn_point
