"""Shared constants for floor generation and navigation."""

from __future__ import annotations

from typing import Dict, Tuple

from dungeon_geometry import Coord

MAP_WIDTH, MAP_HEIGHT = 80, 23
RANDOM_SEED = None  # Set to a number for reproducible floors (for debugging); None gives a new floor every run.

GRID_ROWS = GRID_COLS = 3
CELL_COUNT = GRID_ROWS * GRID_COLS

# Fixed 3x3 adjacency, cells numbered row-major:
#   0 1 2
#   3 4 5
#   6 7 8
CELL_NEIGHBOURS: Dict[int, Tuple[int, ...]] = {
    0: (1, 3),
    1: (0, 2, 4),
    2: (1, 5),
    3: (0, 4, 6),
    4: (1, 3, 5, 7),
    5: (2, 4, 8),
    6: (3, 7),
    7: (4, 6, 8),
    8: (5, 7),
}

CONNECT_RETRY_LIMIT = 20
ROOMS_TO_DROP = 2
PRUNE_DEPTH = 2
EXTRA_CORRIDORS = (1, 2)

# Neighbour order for floods and downhill steps: orthogonal before diagonal.
FLOOD_ORDER: Tuple[Coord, ...] = (
    Coord(-1, 0),
    Coord(0, 1),
    Coord(1, 0),
    Coord(0, -1),
    Coord(-1, -1),
    Coord(-1, 1),
    Coord(1, -1),
    Coord(1, 1),
)
