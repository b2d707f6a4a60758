"""Render the floor state to an ASCII grid."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from dungeon_constants import CELL_COUNT, GRID_COLS, GRID_ROWS
from dungeon_geometry import Coord
from dungeon_layout import Grid
from dungeon_models import TileType
from pathfinding import DistanceField
from room_graph import RoomGraph

TILE_GLYPHS: Dict[TileType, str] = {
    TileType.EMPTY: " ",
    TileType.WALL_H: "-",
    TileType.WALL_V: "|",
    TileType.WALL_UL: "-",
    TileType.WALL_UR: "-",
    TileType.WALL_LL: "-",
    TileType.WALL_LR: "-",
    TileType.FLOOR: ".",
    TileType.CORRIDOR: "#",
    TileType.DOOR: "+",
    TileType.STAIRS_UP: "<",
    TileType.STAIRS_DOWN: ">",
}


class GridRenderer:
    """Provides drawing helpers for visualizing the current floor."""

    def __init__(self, grid: Grid) -> None:
        self.grid = grid
        self.canvas: List[List[str]] = [[" "] * grid.width for _ in range(grid.height)]

    def _clear_canvas(self) -> None:
        for row in self.canvas:
            for x in range(self.grid.width):
                row[x] = " "

    def draw_tiles(self, show_all: bool = True) -> None:
        """Draw tile glyphs; without ``show_all`` only what the player knows about is drawn.

        Remembered floor that is out of sight is left blank, everything else the
        player has visited stays on screen.
        """
        self._clear_canvas()
        for y, row in enumerate(self.grid.tiles):
            for x, tile in enumerate(row):
                if show_all or tile.visible or (tile.visited and tile.type is not TileType.FLOOR):
                    self.canvas[y][x] = TILE_GLYPHS[tile.type]

    def draw_distance_field(self, distance_field: DistanceField) -> None:
        """Overlay the last digit of every non-zero distance."""
        for pos, distance in distance_field.distance.items():
            if distance != 0:
                self.canvas[pos.y][pos.x] = str(distance % 10)

    def draw_path(self, steps: Iterable[Coord], glyph: str = "*") -> None:
        for pos in steps:
            self.canvas[pos.y][pos.x] = glyph

    def draw_marker(self, pos: Coord, glyph: str = "@") -> None:
        self.canvas[pos.y][pos.x] = glyph

    def render(self, horizontal_sep: str = "") -> str:
        return "\n".join(horizontal_sep.join(row) for row in self.canvas)

    def print_grid(self, horizontal_sep: str = "") -> None:
        """Prints the ASCII grid to the console."""
        print(self.render(horizontal_sep))


def describe_graph(graph: RoomGraph) -> List[str]:
    """Text dump of cells, neighbours and corridors plus a 3x3 connection diagram."""
    lines: List[str] = []
    for room in graph.rooms:
        lines.append(
            f"{room.index}: x={room.x} y={room.y} w={room.w} h={room.h} "
            f"mark={room.mark.name.lower()} neighbours={list(graph.neighbours(room.index))}"
        )
    for corridor in graph.corridors:
        state = "dropped" if corridor.is_dropped else "normal"
        lines.append(f"corridor {corridor.origin}-{corridor.dest} ({state})")

    lines.append("")
    for row in range(GRID_ROWS):
        cell_line = ""
        link_line = ""
        for col in range(GRID_COLS):
            cell = row * GRID_COLS + col
            cell_line += "x" if graph.rooms[cell].is_dropped else str(cell)
            if col < GRID_COLS - 1:
                cell_line += " - " if graph.are_connected(cell, cell + 1) else "   "
            below = cell + GRID_COLS
            link_line += "|" if below < CELL_COUNT and graph.are_connected(cell, below) else " "
            if col < GRID_COLS - 1:
                link_line += "   "
        lines.append(cell_line)
        if row < GRID_ROWS - 1:
            lines.append(link_line.rstrip())
    return lines


def render_floor(
    grid: Grid,
    *,
    show_all: bool = True,
    distance_field: Optional[DistanceField] = None,
    path: Optional[Iterable[Coord]] = None,
    player: Optional[Coord] = None,
) -> str:
    renderer = GridRenderer(grid)
    renderer.draw_tiles(show_all=show_all)
    if distance_field is not None:
        renderer.draw_distance_field(distance_field)
    if path is not None:
        renderer.draw_path(path)
    if player is not None:
        renderer.draw_marker(player)
    return renderer.render()
