"""Geometry helpers for working with tile coordinates, directions, and rectangles."""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple


@dataclass(frozen=True, order=True)
class Coord:
    """Integer tile coordinate."""

    x: int
    y: int

    def __iter__(self):
        yield self.x
        yield self.y

    def __add__(self, other: Coord) -> Coord:
        return Coord(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Coord) -> Coord:
        return Coord(self.x - other.x, self.y - other.y)

    def chebyshev(self, other: Coord) -> int:
        """Number of 8-way steps between two tiles on an empty grid."""
        return max(abs(self.x - other.x), abs(self.y - other.y))

    def is_diagonal_to(self, other: Coord) -> bool:
        return self.x != other.x and self.y != other.y

    def neighbours(self) -> Iterator[Coord]:
        """The eight surrounding tiles, orthogonal ones first."""
        for dx, dy in _NEIGHBOUR_DELTAS:
            yield Coord(self.x + dx, self.y + dy)

    def direction_to(self, other: Coord) -> Coord:
        """Unit step (each axis clamped to -1..1) that moves toward ``other``."""
        delta = other - self
        return Coord(_sign(delta.x), _sign(delta.y))

    def to_tuple(self) -> Tuple[int, int]:
        return self.x, self.y

    @classmethod
    def from_tuple(cls, value: Tuple[int, int]) -> Coord:
        return cls(*value)


_NEIGHBOUR_DELTAS = ((0, -1), (1, 0), (0, 1), (-1, 0), (-1, -1), (1, -1), (-1, 1), (1, 1))


def _sign(value: int) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


class Direction(Enum):
    """Cardinal directions with unit vectors on the tile grid."""

    NORTH = (0, -1)
    EAST = (1, 0)
    SOUTH = (0, 1)
    WEST = (-1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def delta(self) -> Coord:
        return Coord(*self.value)

    @property
    def is_vertical(self) -> bool:
        return self.dx == 0

    def opposite(self) -> Direction:
        return Direction.from_tuple((-self.dx, -self.dy))

    @classmethod
    def from_tuple(cls, value: Tuple[int, int]) -> Direction:
        try:
            return cls(value)
        except ValueError as exc:
            raise ValueError(f"Unsupported direction {value}") from exc

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Rect:
    """Immutable axis-aligned rectangle using integer tile coordinates."""

    x: int
    y: int
    width: int
    height: int

    @property
    def max_x(self) -> int:
        """Right edge (exclusive)."""
        return self.x + self.width

    @property
    def max_y(self) -> int:
        """Bottom edge (exclusive)."""
        return self.y + self.height

    @property
    def top_left(self) -> Coord:
        return Coord(self.x, self.y)

    def center(self) -> Coord:
        return Coord(self.x + self.width // 2, self.y + self.height // 2)

    def contains(self, point: Coord, margin: int = 0) -> bool:
        """Return True if the tile lies inside this rect grown by ``margin``."""
        return (
            self.x - margin <= point.x < self.max_x + margin
            and self.y - margin <= point.y < self.max_y + margin
        )

    def tiles(self) -> Iterator[Coord]:
        for ty in range(self.y, self.max_y):
            for tx in range(self.x, self.max_x):
                yield Coord(tx, ty)

    def interior(self) -> Iterator[Coord]:
        """Tiles inside the one-tile border."""
        for ty in range(self.y + 1, self.max_y - 1):
            for tx in range(self.x + 1, self.max_x - 1):
                yield Coord(tx, ty)

    def random_point(self, rng: Optional[random.Random] = None) -> Coord:
        """Uniform random tile strictly inside the border."""
        generator = rng if rng is not None else random
        return Coord(
            self.x + generator.randrange(self.width - 2) + 1,
            self.y + generator.randrange(self.height - 2) + 1,
        )

    def to_tuple(self) -> Tuple[int, int, int, int]:
        """Return the rect as an ``(x, y, width, height)`` tuple."""
        return self.x, self.y, self.width, self.height
