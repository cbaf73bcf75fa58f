"""Connected-component extraction turning raw floor regions into rooms."""
from __future__ import annotations

import random

from modules.dungeon.geometry import GridPos, Rect
from modules.dungeon.gen.rooms import determine_room_type
from modules.dungeon.layout import WALL, IntGrid, LayoutBuilder, RoomShape


_CARDINALS: tuple[tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))


def flood_fill(grid: IntGrid, start: GridPos, visited: list[list[bool]]) -> list[GridPos]:
    """Collect the open cells 4-connected to ``start``.

    Uses an explicit stack so large caves cannot exhaust the interpreter's
    recursion limit.  ``visited`` is updated in place.
    """

    height = len(grid)
    width = len(grid[0]) if height else 0
    cells: list[GridPos] = []
    stack = [(start.x, start.y)]
    while stack:
        x, y = stack.pop()
        if not (0 <= x < width and 0 <= y < height):
            continue
        if visited[y][x] or grid[y][x] == WALL:
            continue
        visited[y][x] = True
        cells.append(GridPos(x, y))
        for dx, dy in _CARDINALS:
            stack.append((x + dx, y + dy))
    return cells


def find_regions(grid: IntGrid) -> list[list[GridPos]]:
    """Return every open region, scanning columns left to right."""

    height = len(grid)
    width = len(grid[0]) if height else 0
    visited = [[False for _ in range(width)] for _ in range(height)]
    regions: list[list[GridPos]] = []
    for x in range(width):
        for y in range(height):
            if grid[y][x] != WALL and not visited[y][x]:
                regions.append(flood_fill(grid, GridPos(x, y), visited))
    return regions


def region_anchor(cells: list[GridPos], bounds: Rect) -> GridPos:
    """Return the region cell closest to the middle of ``bounds``.

    Ties are broken by row, then column.
    """

    mid_x = (bounds.x + bounds.x2) / 2
    mid_y = (bounds.y + bounds.y2) / 2
    return min(cells, key=lambda pos: ((pos.x - mid_x) ** 2 + (pos.y - mid_y) ** 2, pos.y, pos.x))


def extract_rooms(builder: LayoutBuilder, rng: random.Random) -> int:
    """Register every sufficiently large region as an irregular room.

    A region qualifies when it covers at least ``min_room_size`` cells in
    area and its bounding box is no narrower than ``min_room_size`` on either
    axis.  Returns the number of rooms created.
    """

    min_w, min_h = builder.params.min_room_size
    threshold = min_w * min_h
    created = 0
    for cells in find_regions(builder.grid):
        if len(cells) < threshold:
            continue
        builder.requested_rooms += 1
        bounds = Rect.bounding(cells)
        if bounds.width < min_w or bounds.height < min_h:
            continue
        center = region_anchor(cells, bounds)
        builder.add_room(
            bounds,
            determine_room_type(rng, builder.params),
            shape=RoomShape.IRREGULAR,
            cells=frozenset(cells),
            center=center,
        )
        created += 1
    builder.placed_rooms += created
    return created


__all__ = ["flood_fill", "find_regions", "region_anchor", "extract_rooms"]
