"""Core dataclasses used by the floor generator and the tile grid."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Tuple

from dungeon_geometry import Coord, Rect


class TileType(Enum):
    """Every kind of tile that can appear on a floor."""

    EMPTY = 0
    WALL_H = 1
    WALL_V = 2
    WALL_UL = 3
    WALL_UR = 4
    WALL_LL = 5
    WALL_LR = 6
    FLOOR = 7
    CORRIDOR = 8
    DOOR = 9
    STAIRS_DOWN = 10
    STAIRS_UP = 11

    @property
    def is_wall(self) -> bool:
        return self in WALL_TILES

    @property
    def is_walkable(self) -> bool:
        return self in WALKABLE_TILES

    @property
    def is_passage(self) -> bool:
        """Corridor and door tiles forbid diagonal movement in or out."""
        return self is TileType.CORRIDOR or self is TileType.DOOR


WALL_TILES = frozenset(
    (
        TileType.WALL_H,
        TileType.WALL_V,
        TileType.WALL_UL,
        TileType.WALL_UR,
        TileType.WALL_LL,
        TileType.WALL_LR,
    )
)
WALKABLE_TILES = frozenset(
    (
        TileType.FLOOR,
        TileType.CORRIDOR,
        TileType.DOOR,
        TileType.STAIRS_DOWN,
        TileType.STAIRS_UP,
    )
)


def convert_for_corridor(current: TileType) -> TileType:
    """Tile a corridor leaves behind when it is laid over ``current``.

    Floor is never downgraded, a wall becomes a door where the corridor pierces
    it, and anything else becomes corridor. Applying the rule twice gives the
    same tile as applying it once.
    """
    if current is TileType.FLOOR:
        return current
    if current.is_wall or current is TileType.DOOR:
        return TileType.DOOR
    return TileType.CORRIDOR


@dataclass
class Tile:
    """A single grid square. ``visible`` implies ``visited``."""

    type: TileType = TileType.EMPTY
    visible: bool = False
    visited: bool = False

    @property
    def is_walkable(self) -> bool:
        return self.type.is_walkable

    def set_visible(self, visible: bool) -> None:
        self.visible = visible
        if visible:
            self.visited = True


class RoomMark(IntEnum):
    """Connection state of a graph cell."""

    UNCONNECTED = 0
    CONNECTED = 1
    DROPPED = -1


class CorridorMark(IntEnum):
    NORMAL = 0
    DROPPED = -1


@dataclass
class Room:
    """Planned rectangle for one graph cell; carved into the grid once connected."""

    x: int
    y: int
    w: int
    h: int
    mark: RoomMark = RoomMark.UNCONNECTED
    index: int = -1

    def get_bounds(self) -> Rect:
        return Rect(self.x, self.y, self.w, self.h)

    @property
    def is_connected(self) -> bool:
        return self.mark == RoomMark.CONNECTED

    @property
    def is_dropped(self) -> bool:
        return self.mark == RoomMark.DROPPED

    @property
    def top_left(self) -> Coord:
        return Coord(self.x, self.y)

    def center(self) -> Coord:
        return self.get_bounds().center()

    def contains(self, pos: Coord, margin: int = 0) -> bool:
        return self.get_bounds().contains(pos, margin)

    def in_room(self, pos: Coord) -> bool:
        """True when ``pos`` is within one tile of the room, including the step outside each door."""
        return self.get_bounds().contains(pos, margin=1)


@dataclass
class Corridor:
    """Graph edge between two adjacent cells; ``origin`` is always the lower cell id."""

    origin: int
    dest: int
    mark: CorridorMark = CorridorMark.NORMAL

    def __post_init__(self) -> None:
        if self.origin == self.dest:
            raise ValueError("Corridor endpoints must differ")
        if self.origin > self.dest:
            self.origin, self.dest = self.dest, self.origin

    @property
    def endpoints(self) -> Tuple[int, int]:
        return self.origin, self.dest

    @property
    def is_dropped(self) -> bool:
        return self.mark == CorridorMark.DROPPED

    def touches(self, cell_id: int) -> bool:
        return cell_id == self.origin or cell_id == self.dest

    def other_end(self, cell_id: int) -> Optional[int]:
        if cell_id == self.origin:
            return self.dest
        if cell_id == self.dest:
            return self.origin
        return None
