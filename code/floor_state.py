"""The live floor owned by a game session.

The turn loop keeps one FloorState and passes it to whatever needs the grid,
the room graph or the distance field. Only one floor is live at a time:
``descend`` throws the old one away and builds the next.
"""

from __future__ import annotations

import logging
import random
from typing import Optional

from dungeon_config import FloorConfig
from dungeon_generator import FloorGenerator, GeneratedFloor
from dungeon_geometry import Coord
from dungeon_layout import Grid, RoomFilter
from dungeon_models import TileType
from pathfinding import DistanceField, Path, build_distance_field, find_path
from room_graph import RoomGraph
from visibility import update_visibility

logger = logging.getLogger(__name__)


class FloorState:
    def __init__(self, config: Optional[FloorConfig] = None, rng: Optional[random.Random] = None) -> None:
        self.config = config if config is not None else FloorConfig()
        self.rng = rng if rng is not None else self.config.rng()
        self.generator = FloorGenerator(self.config, self.rng)
        self.depth = 0
        self._floor: Optional[GeneratedFloor] = None
        self.distance_field: Optional[DistanceField] = None

    @property
    def floor(self) -> GeneratedFloor:
        if self._floor is None:
            raise RuntimeError("No floor generated yet; call descend() first")
        return self._floor

    @property
    def grid(self) -> Grid:
        return self.floor.grid

    @property
    def graph(self) -> RoomGraph:
        return self.floor.graph

    @property
    def spawn_point(self) -> Coord:
        return self.floor.spawn_point

    def descend(self) -> Coord:
        """Replace the current floor with a new one; returns where the player starts."""
        self._floor = self.generator.generate()
        self.depth += 1
        self.distance_field = None
        logger.info("Descended to depth %d; spawn at %s", self.depth, self.spawn_point.to_tuple())
        return self.spawn_point

    # ------------------------------------------------------------------
    # Per-turn services
    # ------------------------------------------------------------------
    def update_visibility(self, actor_pos: Coord) -> None:
        update_visibility(self.grid, actor_pos)

    def recompute_distance_field(self, *targets: Coord) -> DistanceField:
        """Rebuild the chase field; called whenever the target (usually the player) moves."""
        self.distance_field = build_distance_field(self.grid, targets)
        return self.distance_field

    def next_step(self, pos: Coord) -> Optional[Coord]:
        if self.distance_field is None:
            return None
        return self.distance_field.next_step(pos)

    def find_path(self, start: Coord, end: Coord) -> Path:
        return find_path(self.grid, start, end)

    def is_walkable(self, from_pos: Coord, to_pos: Coord) -> bool:
        return self.grid.is_walkable(from_pos, to_pos)

    def tile_type_at(self, pos: Coord) -> TileType:
        return self.grid.tile_type_at(pos)

    def random_point_in_room(self, room_filter: Optional[RoomFilter] = None) -> Optional[Coord]:
        return self.grid.random_point_in_room(room_filter, self.rng)

    def is_on_stairs_down(self, pos: Coord) -> bool:
        return self.grid.in_bounds(pos) and self.tile_type_at(pos) is TileType.STAIRS_DOWN

    def is_on_stairs_up(self, pos: Coord) -> bool:
        return self.grid.in_bounds(pos) and self.tile_type_at(pos) is TileType.STAIRS_UP
