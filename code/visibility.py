"""Radius-one field of view plus whole-room lighting.

This is not line of sight. Each turn every tile is first dimmed, then the
tiles around the actor are lit and, if the actor stands inside a room's
rectangle or one step outside it, the whole room is lit. Lit tiles are
remembered as visited.
"""

from __future__ import annotations

import logging

from dungeon_geometry import Coord
from dungeon_layout import Grid
from dungeon_models import TileType

logger = logging.getLogger(__name__)

HALLWAY_VISIBLE_TILES = frozenset((TileType.CORRIDOR, TileType.DOOR, TileType.FLOOR))


def light_surroundings(grid: Grid, pos: Coord) -> int:
    """Light the actor's tile and its eight neighbours; returns how many were lit.

    From a corridor or door tile only corridor, door and floor neighbours are
    lit, so walls around a hallway mouth stay dark.
    """
    in_hallway = grid.in_bounds(pos) and grid.tile_type_at(pos).is_passage
    lit = 0
    for target in (pos, *pos.neighbours()):
        if not grid.in_bounds(target):
            continue
        tile = grid.tile_at(target)
        if in_hallway and tile.type not in HALLWAY_VISIBLE_TILES:
            continue
        tile.set_visible(True)
        lit += 1
    return lit


def light_rooms(grid: Grid, pos: Coord) -> int:
    """Light every room whose rectangle contains ``pos``; returns the number of rooms lit."""
    lit = 0
    for room in grid.rooms:
        if room.in_room(pos):
            grid.set_visible(room.top_left, room.w, room.h, True)
            lit += 1
    return lit


def update_visibility(grid: Grid, actor_pos: Coord) -> None:
    grid.clear_visibility()
    light_surroundings(grid, actor_pos)
    rooms = light_rooms(grid, actor_pos)
    logger.debug("Visibility updated at %s (rooms lit: %d)", actor_pos.to_tuple(), rooms)
