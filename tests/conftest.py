import random
import sys
from pathlib import Path
from typing import Callable

import pytest

ROOT_DIR = Path(__file__).resolve().parent.parent
CODE_DIR = ROOT_DIR / "code"
if str(CODE_DIR) not in sys.path:
    sys.path.insert(0, str(CODE_DIR))

from dungeon_config import FloorConfig
from dungeon_generator import FloorGenerator, GeneratedFloor
from dungeon_geometry import Coord
from dungeon_layout import Grid
from dungeon_models import Room, RoomMark, TileType


@pytest.fixture
def floor_config() -> FloorConfig:
    return FloorConfig(random_seed=1234)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def empty_grid(floor_config: FloorConfig) -> Grid:
    return Grid(floor_config)


@pytest.fixture
def open_grid(floor_config: FloorConfig) -> Grid:
    """Grid where every tile is floor, with no walls or rooms."""
    grid = Grid(floor_config)
    for y in range(grid.height):
        for x in range(grid.width):
            grid.set_tile(Coord(x, y), TileType.FLOOR)
    return grid


@pytest.fixture
def make_room() -> Callable[..., Room]:
    def _make_room(x: int, y: int, w: int, h: int, index: int = 0) -> Room:
        return Room(x, y, w, h, mark=RoomMark.CONNECTED, index=index)

    return _make_room


@pytest.fixture
def generated_floor(floor_config: FloorConfig) -> GeneratedFloor:
    return FloorGenerator(floor_config).generate()
