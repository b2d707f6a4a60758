"""Rasterise a finished room graph into walled rooms, L-shaped corridors and stairs."""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Tuple

from dungeon_constants import GRID_COLS
from dungeon_geometry import Coord, Direction
from dungeon_layout import Grid
from dungeon_models import Corridor, Room, TileType, convert_for_corridor
from room_graph import RoomGraph

logger = logging.getLogger(__name__)

# Share of the leading axis covered before the corridor turns.
CORRIDOR_BEND_FRACTION = 0.5
MAX_STAIR_REROLLS = 10


class MapBuilder:
    """Carves a RoomGraph into a Grid."""

    def __init__(
        self,
        grid: Grid,
        graph: RoomGraph,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.grid = grid
        self.graph = graph
        self.rng = rng if rng is not None else graph.rng

    def build(self) -> Tuple[Coord, Coord]:
        """Rebuild the grid from the graph; returns the (stairs up, stairs down) tiles."""
        self.grid.clear()
        rooms = self.graph.connected_rooms()
        for room in rooms:
            self.carve_room(room)
        self.grid.rooms = list(rooms)

        for corridor in self.graph.live_corridors():
            start, end, start_dir = self.corridor_endpoints(corridor)
            self.connect_points(start, end, start_dir)

        stairs = self.place_stairs()
        logger.debug(
            "Built floor: %d rooms, %d corridors, stairs up %s, stairs down %s",
            len(rooms),
            len(self.graph.live_corridors()),
            stairs[0].to_tuple(),
            stairs[1].to_tuple(),
        )
        return stairs

    # ------------------------------------------------------------------
    # Rooms
    # ------------------------------------------------------------------
    def carve_room(self, room: Room) -> None:
        x1, y1 = room.x, room.y
        x2, y2 = room.x + room.w - 1, room.y + room.h - 1

        for x in range(x1, x2):
            self.grid.set_tile(Coord(x, y1), TileType.WALL_H)
            self.grid.set_tile(Coord(x, y2), TileType.WALL_H)
        for y in range(y1, y2):
            self.grid.set_tile(Coord(x1, y), TileType.WALL_V)
            self.grid.set_tile(Coord(x2, y), TileType.WALL_V)
        for pos in room.get_bounds().interior():
            self.grid.set_tile(pos, TileType.FLOOR)

        self.grid.set_tile(Coord(x1, y1), TileType.WALL_UL)
        self.grid.set_tile(Coord(x2, y1), TileType.WALL_UR)
        self.grid.set_tile(Coord(x1, y2), TileType.WALL_LL)
        self.grid.set_tile(Coord(x2, y2), TileType.WALL_LR)

    def wall_point(self, room: Room, facing: Direction) -> Coord:
        """Random non-corner tile on the wall of ``room`` that faces ``facing``."""
        if facing is Direction.EAST:
            return Coord(room.x + room.w - 1, room.y + 1 + self.rng.randrange(room.h - 2))
        if facing is Direction.WEST:
            return Coord(room.x, room.y + 1 + self.rng.randrange(room.h - 2))
        if facing is Direction.SOUTH:
            return Coord(room.x + 1 + self.rng.randrange(room.w - 2), room.y + room.h - 1)
        return Coord(room.x + 1 + self.rng.randrange(room.w - 2), room.y)

    # ------------------------------------------------------------------
    # Corridors
    # ------------------------------------------------------------------
    def corridor_endpoints(self, corridor: Corridor) -> Tuple[Coord, Coord, Direction]:
        """Start tile, end tile and starting direction for a corridor.

        Cells in the same row are joined east to west, cells in the same column
        north to south. A dropped cell contributes the centre of its planned
        rectangle instead of a wall tile.
        """
        origin = self.graph.rooms[corridor.origin]
        dest = self.graph.rooms[corridor.dest]
        if corridor.dest - corridor.origin == 1 and corridor.origin // GRID_COLS == corridor.dest // GRID_COLS:
            facing = Direction.EAST
        elif corridor.dest - corridor.origin == GRID_COLS:
            facing = Direction.SOUTH
        else:
            raise ValueError(f"Corridor {corridor.endpoints} does not join adjacent cells")

        start = self._endpoint(origin, facing)
        end = self._endpoint(dest, facing.opposite())
        return start, end, facing

    def _endpoint(self, room: Room, facing: Direction) -> Coord:
        if room.is_dropped:
            return room.center()
        return self.wall_point(room, facing)

    def connect_points(self, start: Coord, end: Coord, start_dir: Direction) -> List[Coord]:
        """Lay an L-shaped corridor from ``start`` to ``end``, both ends included.

        The leading axis is split around the bend: a first run along
        ``start_dir``, the full cross-axis run, then the rest of the leading
        axis. Returns every tile stepped on, in order.
        """
        dx = end.x - start.x
        dy = end.y - start.y
        h_dir = Direction.EAST if dx >= 0 else Direction.WEST
        v_dir = Direction.SOUTH if dy >= 0 else Direction.NORTH

        if start_dir.is_vertical:
            lead_dir, lead_len, cross_dir, cross_len = v_dir, abs(dy), h_dir, abs(dx)
        else:
            lead_dir, lead_len, cross_dir, cross_len = h_dir, abs(dx), v_dir, abs(dy)
        first_len = int(lead_len * CORRIDOR_BEND_FRACTION)

        stepped: List[Coord] = []
        pos = self.lay_run(start, lead_dir, first_len, stepped)
        pos = self.lay_run(pos, cross_dir, cross_len, stepped)
        pos = self.lay_run(pos, lead_dir, lead_len - first_len, stepped)
        self.step_corridor(pos)
        stepped.append(pos)
        return stepped

    def lay_run(
        self,
        start: Coord,
        direction: Direction,
        length: int,
        stepped: Optional[List[Coord]] = None,
    ) -> Coord:
        """Step ``length`` tiles from ``start``; returns the tile after the last one laid."""
        pos = start
        for _ in range(abs(length)):
            self.step_corridor(pos)
            if stepped is not None:
                stepped.append(pos)
            pos = pos + direction.delta
        return pos

    def step_corridor(self, pos: Coord) -> None:
        current = self.grid.tile_type_at(pos)
        converted = convert_for_corridor(current)
        if converted is not current:
            self.grid.set_tile(pos, converted)

    # ------------------------------------------------------------------
    # Stairs
    # ------------------------------------------------------------------
    def place_stairs(self) -> Tuple[Coord, Coord]:
        rooms = self.grid.rooms
        if not rooms:
            raise ValueError("Cannot place stairs on a floor without connected rooms")
        stairs_up = self.rng.choice(rooms).get_bounds().random_point(self.rng)
        stairs_down = self.rng.choice(rooms).get_bounds().random_point(self.rng)
        rerolls = 0
        while stairs_down == stairs_up and rerolls < MAX_STAIR_REROLLS:
            stairs_down = self.rng.choice(rooms).get_bounds().random_point(self.rng)
            rerolls += 1
        self.grid.set_tile(stairs_up, TileType.STAIRS_UP)
        self.grid.set_tile(stairs_down, TileType.STAIRS_DOWN)
        return stairs_up, stairs_down
