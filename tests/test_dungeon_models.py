import pytest

from dungeon_geometry import Coord
from dungeon_models import (
    WALL_TILES,
    Corridor,
    CorridorMark,
    Room,
    RoomMark,
    Tile,
    TileType,
    convert_for_corridor,
)


def test_floor_is_never_downgraded_by_a_corridor():
    assert convert_for_corridor(TileType.FLOOR) is TileType.FLOOR


@pytest.mark.parametrize("wall", sorted(WALL_TILES, key=lambda tile: tile.value))
def test_walls_become_doors(wall):
    assert convert_for_corridor(wall) is TileType.DOOR


@pytest.mark.parametrize("tile_type", list(TileType))
def test_corridor_conversion_is_idempotent(tile_type):
    once = convert_for_corridor(tile_type)

    assert convert_for_corridor(once) is once


def test_empty_becomes_corridor():
    assert convert_for_corridor(TileType.EMPTY) is TileType.CORRIDOR
    assert convert_for_corridor(TileType.CORRIDOR) is TileType.CORRIDOR


def test_walkable_tile_types():
    walkable = {tile_type for tile_type in TileType if tile_type.is_walkable}

    assert walkable == {
        TileType.FLOOR,
        TileType.CORRIDOR,
        TileType.DOOR,
        TileType.STAIRS_DOWN,
        TileType.STAIRS_UP,
    }
    assert not any(wall.is_walkable for wall in WALL_TILES)


def test_visible_tile_is_remembered_as_visited():
    tile = Tile(TileType.FLOOR)

    tile.set_visible(True)
    tile.set_visible(False)

    assert not tile.visible
    assert tile.visited


def test_room_bounds_and_in_room_margin():
    room = Room(10, 5, 8, 4, index=3)

    assert room.get_bounds().to_tuple() == (10, 5, 8, 4)
    assert room.in_room(Coord(10, 5))
    assert room.in_room(Coord(17, 8))
    assert room.in_room(Coord(18, 9))
    assert room.in_room(Coord(9, 4))
    assert not room.in_room(Coord(19, 8))
    assert not room.in_room(Coord(14, 10))
    assert room.contains(Coord(18, 9), margin=1)
    assert room.center() == Coord(14, 7)


def test_room_marks_compare_by_value():
    room = Room(0, 0, 8, 4)

    assert not room.is_connected
    room.mark = RoomMark.CONNECTED
    assert room.is_connected
    room.mark = RoomMark.DROPPED
    assert room.is_dropped
    assert int(RoomMark.DROPPED) == -1


def test_corridor_orders_endpoints_and_finds_other_end():
    corridor = Corridor(4, 1)

    assert corridor.endpoints == (1, 4)
    assert corridor.touches(4)
    assert not corridor.touches(2)
    assert corridor.other_end(1) == 4
    assert corridor.other_end(7) is None
    assert not corridor.is_dropped
    corridor.mark = CorridorMark.DROPPED
    assert corridor.is_dropped


def test_corridor_rejects_self_loop():
    with pytest.raises(ValueError):
        Corridor(3, 3)
