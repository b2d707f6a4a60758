import pytest

from dungeon_geometry import Coord, Direction
from dungeon_layout import Grid
from dungeon_models import TileType
from map_builder import MapBuilder
from visibility import light_rooms, light_surroundings, update_visibility


@pytest.fixture
def lit_grid(floor_config, make_room, rng) -> Grid:
    """One carved room with a corridor leaving its east wall through a door."""
    grid = Grid(floor_config)
    room = make_room(10, 5, 10, 5)
    builder = MapBuilder(grid, graph=None, rng=rng)
    builder.carve_room(room)
    grid.rooms = [room]
    builder.connect_points(Coord(19, 7), Coord(30, 7), Direction.EAST)
    return grid


def test_standing_in_a_room_lights_the_whole_room(lit_grid):
    update_visibility(lit_grid, Coord(12, 7))

    room = lit_grid.rooms[0]
    assert all(lit_grid.can_see(pos) for pos in room.get_bounds().tiles())
    assert not lit_grid.can_see(Coord(25, 7))
    assert not lit_grid.can_see(Coord(9, 7))


def test_standing_in_a_doorway_lights_the_room(lit_grid):
    assert lit_grid.tile_type_at(Coord(19, 7)) is TileType.DOOR

    update_visibility(lit_grid, Coord(19, 7))

    assert lit_grid.can_see(Coord(11, 6))
    assert lit_grid.can_see(Coord(20, 7))


def test_corridor_step_outside_the_door_lights_the_room(lit_grid):
    assert lit_grid.tile_type_at(Coord(20, 7)) is TileType.CORRIDOR

    update_visibility(lit_grid, Coord(20, 7))
    assert lit_grid.can_see(Coord(11, 6))

    update_visibility(lit_grid, Coord(21, 7))
    assert not lit_grid.can_see(Coord(11, 6))


def test_corridor_lights_only_passable_neighbours(lit_grid):
    pos = Coord(25, 7)

    update_visibility(lit_grid, pos)

    assert lit_grid.can_see(pos)
    assert lit_grid.can_see(Coord(24, 7))
    assert lit_grid.can_see(Coord(26, 7))
    assert not lit_grid.can_see(Coord(25, 6))
    assert not lit_grid.can_see(Coord(24, 8))


def test_room_floor_lights_walls_around_actor(lit_grid):
    assert light_surroundings(lit_grid, Coord(11, 6)) == 9
    assert lit_grid.can_see(Coord(10, 5))


def test_light_surroundings_clips_at_map_edge(open_grid):
    assert light_surroundings(open_grid, Coord(0, 0)) == 4


def test_light_rooms_counts_rooms_containing_position(lit_grid):
    assert light_rooms(lit_grid, Coord(10, 5)) == 1
    assert light_rooms(lit_grid, Coord(40, 15)) == 0


def test_moving_on_dims_old_tiles_but_remembers_them(lit_grid):
    update_visibility(lit_grid, Coord(12, 7))
    update_visibility(lit_grid, Coord(28, 7))

    assert not lit_grid.can_see(Coord(12, 7))
    assert lit_grid.tile_at(Coord(12, 7)).visited
    assert lit_grid.can_see(Coord(29, 7))
    for row in lit_grid.tiles:
        for tile in row:
            assert tile.visited or not tile.visible
