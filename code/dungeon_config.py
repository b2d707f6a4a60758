"""Configuration container for floor generation."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional, Tuple

from dungeon_constants import (
    CELL_COUNT,
    GRID_COLS,
    GRID_ROWS,
    CONNECT_RETRY_LIMIT,
    EXTRA_CORRIDORS,
    MAP_HEIGHT,
    MAP_WIDTH,
    PRUNE_DEPTH,
    ROOMS_TO_DROP,
)
from dungeon_geometry import Rect

MIN_ROOM_SIDE = 3


@dataclass(frozen=True)
class RoomSizeRange:
    """Inclusive bounds for one side of a randomly sized room."""

    min_size: int
    max_size: int

    def __post_init__(self) -> None:
        min_size = int(self.min_size)
        max_size = int(self.max_size)
        if min_size < MIN_ROOM_SIDE:
            raise ValueError(f"Room min_size must be at least {MIN_ROOM_SIDE}")
        if max_size < min_size:
            raise ValueError("Room max_size must be >= min_size")
        object.__setattr__(self, "min_size", min_size)
        object.__setattr__(self, "max_size", max_size)

    def sample(self, rng: Optional[random.Random] = None) -> int:
        generator = rng if rng is not None else random
        return generator.randint(self.min_size, self.max_size)


@dataclass
class FloorConfig:
    """Aggregates all tunable parameters for floor generation."""

    width: int = MAP_WIDTH
    height: int = MAP_HEIGHT
    room_width: RoomSizeRange = field(default_factory=lambda: RoomSizeRange(8, 19))
    room_height: RoomSizeRange = field(default_factory=lambda: RoomSizeRange(4, 6))

    # Failed picks allowed while spanning the graph before giving up with what we have.
    connect_retry_limit: int = CONNECT_RETRY_LIMIT
    # Inclusive range for the number of loop-forming corridors added after spanning.
    extra_corridors: Tuple[int, int] = EXTRA_CORRIDORS
    rooms_to_drop: int = ROOMS_TO_DROP
    # How far a dead-end prune may cascade through dropped cells.
    prune_depth: int = PRUNE_DEPTH

    random_seed: int | None = None
    collect_metrics: bool = False
    _area_width: int = field(init=False, repr=False)
    _area_height: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("FloorConfig width and height must be positive")
        self._area_width = (self.width - 2) // GRID_COLS
        self._area_height = (self.height - 2) // GRID_ROWS
        if self.room_width.max_size >= self._area_width:
            raise ValueError(
                f"FloorConfig room_width max_size must be below the cell width {self._area_width}"
            )
        if self.room_height.max_size >= self._area_height:
            raise ValueError(
                f"FloorConfig room_height max_size must be below the cell height {self._area_height}"
            )
        if self.connect_retry_limit < 0:
            raise ValueError("FloorConfig connect_retry_limit cannot be negative")
        low, high = (int(value) for value in self.extra_corridors)
        if low < 0 or high < low:
            raise ValueError("FloorConfig extra_corridors must be a non-negative (low, high) range")
        self.extra_corridors = (low, high)
        if not (0 <= self.rooms_to_drop < CELL_COUNT):
            raise ValueError("FloorConfig rooms_to_drop must be below the cell count")
        if self.prune_depth < 0:
            raise ValueError("FloorConfig prune_depth cannot be negative")

    @property
    def area_width(self) -> int:
        return self._area_width

    @property
    def area_height(self) -> int:
        return self._area_height

    def cell_area(self, cell_id: int) -> Rect:
        """Boundary rectangle of a cell in the row-major 3x3 partition."""
        if not (0 <= cell_id < CELL_COUNT):
            raise ValueError(f"Cell id {cell_id} out of range")
        row, col = divmod(cell_id, GRID_COLS)
        return Rect(
            (self._area_width + 1) * col,
            (self._area_height + 1) * row,
            self._area_width,
            self._area_height,
        )

    def rng(self) -> random.Random:
        return random.Random(self.random_seed)
