"""Breadth-first paths and distance fields ("Dijkstra maps") over the tile grid.

Every step costs one, so a breadth-first flood already yields shortest
distances. The distance field is flooded once per target move and then
answers "where next?" for any number of chasers by looking at neighbours.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterable, List, Optional, Set

from dungeon_constants import FLOOD_ORDER
from dungeon_geometry import Coord
from dungeon_layout import Grid

logger = logging.getLogger(__name__)


@dataclass
class Path:
    """Steps from (not including) the start to the destination."""

    steps: List[Coord] = field(default_factory=list)
    algorithm: str = ""
    iterations: int = 0

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)

    def __str__(self) -> str:
        return f"len={len(self.steps)}, algo={self.algorithm}, iter={self.iterations}"


def find_path(grid: Grid, start: Coord, end: Coord) -> Path:
    """Breadth-first search from ``start`` to ``end``.

    Returns an empty path when the two coincide or ``end`` cannot be reached.
    """
    came_from: Dict[Coord, Coord] = {start: start}
    frontier: Deque[Coord] = deque([start])
    iterations = 0

    while frontier and end not in came_from:
        current = frontier.popleft()
        for neighbour in grid.walkable_neighbours(current):
            if neighbour not in came_from:
                came_from[neighbour] = current
                frontier.append(neighbour)
        iterations += 1

    path = Path(algorithm="bfs", iterations=iterations)
    if end not in came_from:
        logger.debug("No path from %s to %s", start.to_tuple(), end.to_tuple())
        return path

    current = end
    while current != start:
        path.steps.append(current)
        current = came_from[current]
    path.steps.reverse()
    return path


class DistanceField:
    """Step counts from every reachable tile to its nearest target."""

    def __init__(self, grid: Grid, targets: Iterable[Coord] = ()) -> None:
        self.grid = grid
        self.targets: Set[Coord] = set()
        self.distance: Dict[Coord, int] = {}
        self.iterations = 0
        self.add_targets(*targets)

    def add_targets(self, *targets: Coord) -> None:
        self.targets.update(targets)

    def clear(self) -> None:
        self.targets = set()
        self.distance = {}
        self.iterations = 0

    def reset(self, *targets: Coord) -> None:
        """Replace the targets and recompute."""
        self.clear()
        self.add_targets(*targets)
        self.calculate()

    def calculate(self) -> None:
        self.distance = {}
        # Sorted seeding keeps floods reproducible for a given target set.
        frontier: Deque[Coord] = deque(sorted(self.targets))
        for target in frontier:
            self.distance[target] = 0

        iterations = 0
        while frontier:
            current = frontier.popleft()
            next_distance = self.distance[current] + 1
            for delta in FLOOD_ORDER:
                neighbour = current + delta
                if neighbour in self.distance:
                    continue
                if self.grid.is_walkable(current, neighbour):
                    self.distance[neighbour] = next_distance
                    frontier.append(neighbour)
            iterations += 1
        self.iterations = iterations
        logger.debug(
            "Distance field flooded %d tiles from %d targets",
            len(self.distance),
            len(self.targets),
        )

    def distance_at(self, pos: Coord) -> Optional[int]:
        return self.distance.get(pos)

    def _can_step(self, from_pos: Coord, to_pos: Coord) -> bool:
        if self.grid.blocks_diagonal(from_pos, to_pos):
            return False
        # Targets may sit on tiles an actor cannot enter (e.g. the player's own tile).
        return to_pos in self.targets or self.grid.is_walkable(from_pos, to_pos)

    def next_step(self, pos: Coord) -> Optional[Coord]:
        """Neighbour exactly one step closer to a target, or ``None`` if there is none.

        Neighbours are scanned in flood order, so orthogonal steps win ties
        and chase paths stay straight.
        """
        current = self.distance.get(pos)
        if current is None or current == 0:
            return None
        wanted = current - 1
        for delta in FLOOD_ORDER:
            candidate = pos + delta
            if self.distance.get(candidate) == wanted and self._can_step(pos, candidate):
                return candidate
        return None

    def path_from(self, pos: Coord) -> Path:
        """Follow ``next_step`` from ``pos`` until a target is reached."""
        path = Path(algorithm="dmap")
        current: Optional[Coord] = pos
        while current is not None and self.distance.get(current, 0) != 0:
            current = self.next_step(current)
            if current is not None:
                path.steps.append(current)
            path.iterations += 1
        return path


def build_distance_field(grid: Grid, targets: Iterable[Coord]) -> DistanceField:
    field_ = DistanceField(grid, targets)
    field_.calculate()
    return field_
