import logging

from dungeon_config import FloorConfig
from dungeon_generator import FloorGenerator, generate_floor
from dungeon_models import TileType
from room_graph import RoomGraph


def tile_types(grid):
    return [[tile.type for tile in row] for row in grid.tiles]


def test_same_seed_builds_the_same_floor():
    first = FloorGenerator(FloorConfig(random_seed=5)).generate()
    second = FloorGenerator(FloorConfig(random_seed=5)).generate()

    assert tile_types(first.grid) == tile_types(second.grid)
    assert first.stairs_up == second.stairs_up
    assert first.stairs_down == second.stairs_down
    assert first.graph.edges(include_dropped=True) == second.graph.edges(include_dropped=True)


def test_different_seeds_build_different_floors():
    first = FloorGenerator(FloorConfig(random_seed=5)).generate()
    second = FloorGenerator(FloorConfig(random_seed=6)).generate()

    assert tile_types(first.grid) != tile_types(second.grid)


def test_spawn_point_is_the_stairs_up(generated_floor):
    assert generated_floor.spawn_point == generated_floor.stairs_up
    assert generated_floor.grid.tile_type_at(generated_floor.spawn_point) is TileType.STAIRS_UP


def test_generate_floor_returns_grid_and_spawn():
    grid, spawn = generate_floor(FloorConfig(random_seed=11))

    assert grid.tile_type_at(spawn) is TileType.STAIRS_UP
    assert len(grid.find_tiles(TileType.STAIRS_DOWN)) == 1


def test_each_generate_call_builds_a_fresh_floor(floor_config):
    generator = FloorGenerator(floor_config)

    first = generator.generate()
    second = generator.generate()

    assert first.grid is not second.grid
    assert first.graph is not second.graph
    assert len(second.grid.find_tiles(TileType.STAIRS_UP)) == 1


def test_metrics_record_every_step():
    generator = FloorGenerator(FloorConfig(random_seed=3, collect_metrics=True))

    generator.generate()
    snapshot = generator.metrics.snapshot()

    assert set(snapshot) == {
        "place_rooms",
        "connect",
        "span",
        "extra_corridors",
        "drop_rooms",
        "build_map",
    }
    assert snapshot["connect"]["total_corridors_added"] == 1
    assert snapshot["place_rooms"]["total_corridors_added"] == 0
    assert all(step["invocations"] == 1 for step in snapshot.values())


def test_metrics_are_off_by_default(floor_config):
    assert FloorGenerator(floor_config).metrics is None


def test_disconnected_graph_is_logged(monkeypatch, caplog, floor_config):
    monkeypatch.setattr(RoomGraph, "is_connected", lambda self: False)

    with caplog.at_level(logging.WARNING, logger="dungeon_generator"):
        FloorGenerator(floor_config).generate()

    assert "corridor components" in caplog.text
