import pytest

from dungeon_config import FloorConfig
from dungeon_geometry import Coord, Direction
from dungeon_layout import Grid
from dungeon_models import Corridor, RoomMark, TileType
from map_builder import MapBuilder
from pathfinding import find_path
from room_graph import RoomGraph


@pytest.fixture
def graph(floor_config) -> RoomGraph:
    graph = RoomGraph(floor_config)
    graph.place_random_rooms()
    return graph


@pytest.fixture
def builder(empty_grid, graph, rng) -> MapBuilder:
    return MapBuilder(empty_grid, graph, rng)


def test_carve_room_lays_walls_corners_and_floor(builder, make_room):
    room = make_room(2, 2, 8, 5)

    builder.carve_room(room)
    grid = builder.grid

    assert grid.tile_type_at(Coord(2, 2)) is TileType.WALL_UL
    assert grid.tile_type_at(Coord(9, 2)) is TileType.WALL_UR
    assert grid.tile_type_at(Coord(2, 6)) is TileType.WALL_LL
    assert grid.tile_type_at(Coord(9, 6)) is TileType.WALL_LR
    assert grid.tile_type_at(Coord(5, 2)) is TileType.WALL_H
    assert grid.tile_type_at(Coord(5, 6)) is TileType.WALL_H
    assert grid.tile_type_at(Coord(2, 4)) is TileType.WALL_V
    assert grid.tile_type_at(Coord(9, 4)) is TileType.WALL_V
    assert len(grid.find_tiles(TileType.FLOOR)) == 6 * 3
    assert grid.tile_type_at(Coord(10, 4)) is TileType.EMPTY


def test_straight_corridor_keeps_floor_and_pierces_wall(builder):
    grid = builder.grid
    grid.set_tile(Coord(7, 5), TileType.FLOOR)
    grid.set_tile(Coord(10, 5), TileType.WALL_V)

    stepped = builder.connect_points(Coord(5, 5), Coord(10, 5), Direction.EAST)

    assert stepped == [Coord(x, 5) for x in range(5, 11)]
    assert grid.tile_type_at(Coord(7, 5)) is TileType.FLOOR
    assert grid.tile_type_at(Coord(10, 5)) is TileType.DOOR
    assert grid.tile_type_at(Coord(6, 5)) is TileType.CORRIDOR


def test_l_shaped_corridor_bends_halfway(builder):
    stepped = builder.connect_points(Coord(0, 0), Coord(4, 3), Direction.EAST)

    assert stepped == [
        Coord(0, 0),
        Coord(1, 0),
        Coord(2, 0),
        Coord(2, 1),
        Coord(2, 2),
        Coord(2, 3),
        Coord(3, 3),
        Coord(4, 3),
    ]
    for a, b in zip(stepped, stepped[1:]):
        assert a.chebyshev(b) == 1 and not a.is_diagonal_to(b)


def test_vertical_corridor_leads_along_y(builder):
    stepped = builder.connect_points(Coord(10, 2), Coord(6, 8), Direction.SOUTH)

    assert stepped[0] == Coord(10, 2)
    assert stepped[-1] == Coord(6, 8)
    assert stepped[1] == Coord(10, 3)
    assert len(stepped) == 4 + 6 + 1


def test_corridor_over_existing_door_stays_door(builder):
    builder.grid.set_tile(Coord(3, 3), TileType.DOOR)

    builder.lay_run(Coord(1, 3), Direction.EAST, 4)

    assert builder.grid.tile_type_at(Coord(3, 3)) is TileType.DOOR
    assert builder.grid.tile_type_at(Coord(4, 3)) is TileType.CORRIDOR
    assert builder.grid.tile_type_at(Coord(5, 3)) is TileType.EMPTY


def test_corridor_endpoints_face_each_other(builder, graph):
    start, end, facing = builder.corridor_endpoints(Corridor(0, 1))
    origin, dest = graph.rooms[0], graph.rooms[1]

    assert facing is Direction.EAST
    assert start.x == origin.x + origin.w - 1
    assert origin.y < start.y < origin.y + origin.h - 1
    assert end.x == dest.x
    assert dest.y < end.y < dest.y + dest.h - 1

    start, end, facing = builder.corridor_endpoints(Corridor(1, 4))
    assert facing is Direction.SOUTH
    assert start.y == graph.rooms[1].y + graph.rooms[1].h - 1
    assert end.y == graph.rooms[4].y


def test_dropped_cell_uses_center_of_its_rectangle(builder, graph):
    graph.rooms[4].mark = RoomMark.DROPPED

    _, end, _ = builder.corridor_endpoints(Corridor(3, 4))

    assert end == graph.rooms[4].center()


@pytest.mark.parametrize("cells", [(0, 4), (2, 3), (5, 6)])
def test_corridor_endpoints_reject_non_adjacent_cells(builder, cells):
    with pytest.raises(ValueError):
        builder.corridor_endpoints(Corridor(*cells))


def test_place_stairs_requires_rooms(builder):
    with pytest.raises(ValueError):
        builder.place_stairs()


@pytest.mark.parametrize("seed", range(15))
def test_built_floor_places_stairs_in_rooms_and_links_them(seed):
    config = FloorConfig(random_seed=seed)
    graph = RoomGraph(config).generate()
    grid = Grid(config)

    stairs_up, stairs_down = MapBuilder(grid, graph).build()

    assert stairs_up != stairs_down
    assert grid.tile_type_at(stairs_up) is TileType.STAIRS_UP
    assert grid.tile_type_at(stairs_down) is TileType.STAIRS_DOWN
    interiors = [set(room.get_bounds().interior()) for room in grid.rooms]
    assert any(stairs_up in interior for interior in interiors)
    assert any(stairs_down in interior for interior in interiors)
    assert len(find_path(grid, stairs_up, stairs_down)) > 0


def test_built_floor_carves_only_kept_rooms(generated_floor):
    grid, graph = generated_floor.grid, generated_floor.graph

    assert grid.rooms == graph.connected_rooms()
    assert not any(room.is_dropped for room in grid.rooms)
    assert len(grid.find_tiles(TileType.WALL_UL)) == len(grid.rooms)
    assert grid.find_tiles(TileType.DOOR)
