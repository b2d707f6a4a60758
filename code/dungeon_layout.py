"""Data container for the tile grid of the current floor."""

from __future__ import annotations

import random
from typing import Callable, List, Optional

from dungeon_config import FloorConfig
from dungeon_constants import FLOOD_ORDER
from dungeon_geometry import Coord
from dungeon_models import Room, Tile, TileType

RoomFilter = Callable[[Room], bool]


class Grid:
    """Stores the mutable tile state for a single floor."""

    def __init__(self, config: FloorConfig) -> None:
        self.config = config
        self.width = config.width
        self.height = config.height
        self.tiles: List[List[Tile]] = [
            [Tile() for _ in range(self.width)] for _ in range(self.height)
        ]
        self.rooms: List[Room] = []

    def clear(self) -> None:
        for row in self.tiles:
            for x in range(self.width):
                row[x] = Tile()
        self.rooms = []

    # ------------------------------------------------------------------
    # Tile access
    # ------------------------------------------------------------------
    def in_bounds(self, pos: Coord) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def is_out_of_bounds(self, pos: Coord) -> bool:
        return not self.in_bounds(pos)

    def tile_at(self, pos: Coord) -> Tile:
        if not self.in_bounds(pos):
            raise IndexError(f"Tile {pos.to_tuple()} is outside the {self.width}x{self.height} grid")
        return self.tiles[pos.y][pos.x]

    def tile_type_at(self, pos: Coord) -> TileType:
        return self.tile_at(pos).type

    def set_tile(self, pos: Coord, tile_type: TileType) -> None:
        """Replace the tile type; visibility flags are reset like a freshly built tile."""
        if not self.in_bounds(pos):
            raise IndexError(f"Tile {pos.to_tuple()} is outside the {self.width}x{self.height} grid")
        self.tiles[pos.y][pos.x] = Tile(tile_type)

    def find_tiles(self, tile_type: TileType) -> List[Coord]:
        return [
            Coord(x, y)
            for y, row in enumerate(self.tiles)
            for x, tile in enumerate(row)
            if tile.type is tile_type
        ]

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------
    def blocks_diagonal(self, from_pos: Coord, to_pos: Coord) -> bool:
        """True when a diagonal step touches a corridor or door tile at either end."""
        if not from_pos.is_diagonal_to(to_pos):
            return False
        for pos in (from_pos, to_pos):
            if self.in_bounds(pos) and self.tile_type_at(pos).is_passage:
                return True
        return False

    def is_walkable(self, from_pos: Coord, to_pos: Coord) -> bool:
        """Whether an actor standing on ``from_pos`` may step onto ``to_pos``."""
        if not self.in_bounds(to_pos):
            return False
        if not self.tile_type_at(to_pos).is_walkable:
            return False
        return not self.blocks_diagonal(from_pos, to_pos)

    def walkable_neighbours(self, pos: Coord) -> List[Coord]:
        return [pos + delta for delta in FLOOD_ORDER if self.is_walkable(pos, pos + delta)]

    def random_direction(self, pos: Coord, rng: Optional[random.Random] = None) -> Coord:
        """A random legal step from ``pos``; ``Coord(0, 0)`` when boxed in."""
        generator = rng if rng is not None else random
        deltas = [delta for delta in FLOOD_ORDER if self.is_walkable(pos, pos + delta)]
        if not deltas:
            return Coord(0, 0)
        return generator.choice(deltas)

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------
    def set_visible(self, top_left: Coord, width: int, height: int, visible: bool) -> None:
        """Set the visible flag over a rectangle, clipped to the grid."""
        for y in range(max(0, top_left.y), min(self.height, top_left.y + height)):
            row = self.tiles[y]
            for x in range(max(0, top_left.x), min(self.width, top_left.x + width)):
                row[x].set_visible(visible)

    def clear_visibility(self) -> None:
        self.set_visible(Coord(0, 0), self.width, self.height, False)

    def can_see(self, pos: Coord) -> bool:
        return self.in_bounds(pos) and self.tile_at(pos).visible

    # ------------------------------------------------------------------
    # Rooms
    # ------------------------------------------------------------------
    def room_at(self, pos: Coord) -> Optional[Room]:
        for room in self.rooms:
            if room.in_room(pos):
                return room
        return None

    def floor_tiles_in(self, room: Room) -> List[Coord]:
        return [
            pos
            for pos in room.get_bounds().interior()
            if self.in_bounds(pos) and self.tile_type_at(pos) is TileType.FLOOR
        ]

    def random_point_in_room(
        self,
        room_filter: Optional[RoomFilter] = None,
        rng: Optional[random.Random] = None,
    ) -> Optional[Coord]:
        """Random open floor tile inside a random room accepted by ``room_filter``.

        Returns ``None`` when no accepted room has any floor left.
        """
        generator = rng if rng is not None else random
        candidates = [
            floor
            for floor in (
                self.floor_tiles_in(room)
                for room in self.rooms
                if room_filter is None or room_filter(room)
            )
            if floor
        ]
        if not candidates:
            return None
        return generator.choice(generator.choice(candidates))
