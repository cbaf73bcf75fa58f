from __future__ import annotations

from modules.dungeon.gen.floodfill import extract_rooms, find_regions, flood_fill, region_anchor
from modules.dungeon.gen.random import get_rng
from modules.dungeon.geometry import GridPos, Rect
from modules.dungeon.layout import DOOR, FLOOR, WALL, RoomShape


def _grid(rows: list[str]) -> list[list[int]]:
    return [[FLOOR if char == "." else WALL for char in row] for row in rows]


def test_flood_fill_uses_cardinal_neighbours_only() -> None:
    grid = _grid(
        [
            "..#",
            "#.#",
            "##.",
        ]
    )
    visited = [[False] * 3 for _ in range(3)]
    cells = flood_fill(grid, GridPos(0, 0), visited)
    assert set(cells) == {GridPos(0, 0), GridPos(1, 0), GridPos(1, 1)}
    assert visited[1][1] and not visited[2][2]


def test_flood_fill_handles_large_regions_without_recursion() -> None:
    grid = [[FLOOR] * 300 for _ in range(300)]
    visited = [[False] * 300 for _ in range(300)]
    assert len(flood_fill(grid, GridPos(0, 0), visited)) == 300 * 300


def test_doors_count_as_open_cells() -> None:
    grid = _grid([".."])
    grid[0][1] = DOOR
    regions = find_regions(grid)
    assert len(regions) == 1 and len(regions[0]) == 2


def test_find_regions_scans_columns_first() -> None:
    grid = _grid(
        [
            "#.",
            "##",
            ".#",
        ]
    )
    regions = find_regions(grid)
    assert regions == [[GridPos(0, 2)], [GridPos(1, 0)]]


def test_extract_rooms_applies_area_and_extent_thresholds(builder_factory) -> None:
    builder = builder_factory(map_bounds=(20, 12), min_room_size=(3, 3), max_room_size=(8, 8))
    builder.carve_rect(Rect(1, 1, 4, 4))  # qualifies
    builder.carve_rect(Rect(8, 1, 10, 1))  # large enough area but only one row tall
    builder.carve_rect(Rect(8, 5, 2, 2))  # too small
    created = extract_rooms(builder, get_rng(0))

    assert created == 1
    assert builder.requested_rooms == 2
    assert builder.placed_rooms == 1
    room = builder.live_rooms()[0]
    assert room.shape is RoomShape.IRREGULAR
    assert room.bounds == Rect(1, 1, 4, 4)
    assert room.center == GridPos(2, 2)
    assert room.cells == frozenset(Rect(1, 1, 4, 4).cells())


def test_irregular_room_center_is_one_of_its_cells(builder_factory) -> None:
    builder = builder_factory(map_bounds=(10, 10), min_room_size=(3, 3), max_room_size=(8, 8))
    builder.carve_rect(Rect(1, 1, 5, 5))
    builder.carve_rect(Rect(2, 2, 3, 3), WALL)
    assert extract_rooms(builder, get_rng(0)) == 1

    room = builder.live_rooms()[0]
    assert room.bounds.center() not in room.cells
    assert room.center == GridPos(3, 1)
    assert room.center in room.cells


def test_region_anchor_prefers_the_upper_left_on_ties() -> None:
    cells = [GridPos(2, 0), GridPos(0, 2), GridPos(2, 4), GridPos(4, 2)]
    assert region_anchor(cells, Rect.bounding(cells)) == GridPos(2, 0)
