"""Randomised 3x3 room graph: connection, spanning, loops, drops and dead-end pruning."""

from __future__ import annotations

import logging
import random
from typing import Iterable, List, Optional, Tuple

from component_manager import ComponentManager
from dungeon_config import FloorConfig
from dungeon_constants import CELL_COUNT, CELL_NEIGHBOURS
from dungeon_geometry import Rect
from dungeon_models import Corridor, CorridorMark, Room, RoomMark

logger = logging.getLogger(__name__)


class RoomGraph:
    """Nine cells in a fixed 3x3 adjacency plus the corridors joining them.

    Cells are indexed row-major, so ``rooms[i]`` and ``areas[i]`` describe the
    same cell. Selection helpers return ``None`` instead of a cell id when no
    candidate is eligible; callers treat that as "skip this step".
    """

    def __init__(self, config: FloorConfig, rng: Optional[random.Random] = None) -> None:
        self.config = config
        self.rng = rng if rng is not None else config.rng()
        self.areas: List[Rect] = [config.cell_area(cell) for cell in range(CELL_COUNT)]
        self.rooms: List[Room] = []
        self.corridors: List[Corridor] = []

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @staticmethod
    def neighbours(cell: int) -> Tuple[int, ...]:
        try:
            return CELL_NEIGHBOURS[cell]
        except KeyError as exc:
            raise ValueError(f"Cell id {cell} out of range") from exc

    def are_adjacent(self, cell_a: int, cell_b: int) -> bool:
        return cell_b in self.neighbours(cell_a)

    def are_connected(self, cell_a: int, cell_b: int) -> bool:
        """True when a live corridor joins the two cells directly."""
        return any(
            corridor.touches(cell_a) and corridor.touches(cell_b)
            for corridor in self.live_corridors()
        )

    def live_corridors(self) -> List[Corridor]:
        return [corridor for corridor in self.corridors if not corridor.is_dropped]

    def live_corridors_at(self, cell: int) -> List[Corridor]:
        return [corridor for corridor in self.live_corridors() if corridor.touches(cell)]

    def cells_with_mark(self, mark: RoomMark) -> List[int]:
        return [room.index for room in self.rooms if room.mark == mark]

    def connected_rooms(self) -> List[Room]:
        return [room for room in self.rooms if room.is_connected]

    def random_cell(self, mark: RoomMark) -> Optional[int]:
        candidates = self.cells_with_mark(mark)
        if not candidates:
            return None
        return self.rng.choice(candidates)

    def dead_end_cells(self) -> List[int]:
        """Dropped cells still holding exactly one live corridor."""
        return [
            cell
            for cell in self.cells_with_mark(RoomMark.DROPPED)
            if len(self.live_corridors_at(cell)) == 1
        ]

    def components(self) -> ComponentManager:
        """Components over connected cells and dropped cells that still route corridors."""
        cells = [
            room.index
            for room in self.rooms
            if room.is_connected or (room.is_dropped and self.live_corridors_at(room.index))
        ]
        edges = [corridor.endpoints for corridor in self.live_corridors()]
        return ComponentManager.from_edges(cells, edges)

    def is_connected(self) -> bool:
        return self.components().has_single_component()

    # ------------------------------------------------------------------
    # Generation steps
    # ------------------------------------------------------------------
    def place_random_rooms(self) -> None:
        """Pick a randomly sized and positioned room rectangle inside each cell area."""
        self.rooms = []
        self.corridors = []
        for cell, area in enumerate(self.areas):
            width = self.config.room_width.sample(self.rng)
            height = self.config.room_height.sample(self.rng)
            dx = self.rng.randrange(area.width - width)
            dy = self.rng.randrange(area.height - height)
            self.rooms.append(Room(area.x + dx, area.y + dy, width, height, index=cell))

    def connect(self, cell_a: int, cell_b: int) -> Corridor:
        if not self.are_adjacent(cell_a, cell_b):
            raise ValueError(f"Cells {cell_a} and {cell_b} are not adjacent")
        corridor = Corridor(cell_a, cell_b)
        self.corridors.append(corridor)
        self.rooms[cell_a].mark = RoomMark.CONNECTED
        self.rooms[cell_b].mark = RoomMark.CONNECTED
        logger.debug("Connected cells %d and %d", corridor.origin, corridor.dest)
        return corridor

    def connect_random_pair(self) -> Optional[int]:
        """Join a random unconnected cell to any neighbour; returns the chosen cell."""
        cell = self.random_cell(RoomMark.UNCONNECTED)
        if cell is None:
            return None
        self.connect(cell, self.rng.choice(self.neighbours(cell)))
        return cell

    def connect_to_graph(self, cell: int) -> Optional[int]:
        """Join ``cell`` to one of its already-connected neighbours; returns that neighbour."""
        candidates = [
            neighbour
            for neighbour in self.neighbours(cell)
            if self.rooms[neighbour].is_connected
        ]
        if not candidates:
            return None
        neighbour = self.rng.choice(candidates)
        self.connect(cell, neighbour)
        return neighbour

    def span(self) -> int:
        """Attach unconnected cells to the graph until none remain or the retry ceiling is hit."""
        connections = 0
        failures = 0
        while True:
            cell = self.random_cell(RoomMark.UNCONNECTED)
            if cell is None:
                break
            if self.connect_to_graph(cell) is not None:
                connections += 1
                continue
            failures += 1
            if failures >= self.config.connect_retry_limit:
                logger.warning(
                    "Spanning stopped after %d failed picks; cells left unconnected: %s",
                    failures,
                    self.cells_with_mark(RoomMark.UNCONNECTED),
                )
                break
        return connections

    def add_extra_corridors(self) -> int:
        """Add loop-forming corridors between connected neighbours not yet joined."""
        candidates = [
            (cell, neighbour)
            for cell in self.cells_with_mark(RoomMark.CONNECTED)
            for neighbour in self.neighbours(cell)
            if cell < neighbour
            and self.rooms[neighbour].is_connected
            and not self.are_connected(cell, neighbour)
        ]
        low, high = self.config.extra_corridors
        wanted = self.rng.randint(low, high)
        chosen = self.rng.sample(candidates, min(wanted, len(candidates)))
        for cell_a, cell_b in chosen:
            self.connect(cell_a, cell_b)
        return len(chosen)

    def drop_random_rooms(self) -> List[int]:
        """Mark random connected cells dropped, then prune corridors they leave dangling.

        At least one connected room always survives so the floor keeps somewhere
        to put its stairs.
        """
        connected = self.cells_with_mark(RoomMark.CONNECTED)
        count = min(self.config.rooms_to_drop, len(connected) - 1)
        if count <= 0:
            return []
        dropped = self.rng.sample(connected, count)
        for cell in dropped:
            self.rooms[cell].mark = RoomMark.DROPPED
            logger.debug("Dropped cell %d", cell)
        for cell in dropped:
            self.prune_dead_end(cell)
        return dropped

    def prune_dead_end(self, cell: int, depth: int = 0) -> int:
        """Drop the lone live corridor of a dropped cell and follow it to the next cell.

        Returns the number of corridors dropped. The cascade stops once ``depth``
        exceeds the configured prune depth.
        """
        if depth > self.config.prune_depth:
            return 0
        if not self.rooms[cell].is_dropped:
            return 0
        live = self.live_corridors_at(cell)
        if len(live) != 1:
            return 0
        corridor = live[0]
        corridor.mark = CorridorMark.DROPPED
        logger.debug("Pruned dead-end corridor %d-%d", corridor.origin, corridor.dest)
        other = corridor.other_end(cell)
        assert other is not None
        return 1 + self.prune_dead_end(other, depth + 1)

    # ------------------------------------------------------------------
    # Convenience
    # ------------------------------------------------------------------
    def generate(self) -> "RoomGraph":
        """Run every step in order on a fresh set of rooms."""
        self.place_random_rooms()
        self.connect_random_pair()
        self.span()
        self.add_extra_corridors()
        self.drop_random_rooms()
        return self

    def edges(self, *, include_dropped: bool = False) -> Iterable[Tuple[int, int]]:
        corridors = self.corridors if include_dropped else self.live_corridors()
        return [corridor.endpoints for corridor in corridors]
