from __future__ import annotations

from dataclasses import replace

import pytest

from modules.dungeon.gen.params import GenerationParameters
from modules.dungeon.gen.validate import floor_density, is_valid, layout_statistics, validate_layout
from modules.dungeon.generator import generate_dungeon
from modules.dungeon.geometry import Rect
from modules.dungeon.layout import WALL


@pytest.fixture
def layout():
    return generate_dungeon(GenerationParameters(map_bounds=(50, 40), min_rooms=1, seed=21))


def test_generated_layout_is_valid(layout) -> None:
    assert validate_layout(layout) == []
    assert is_valid(layout)


def test_validation_is_pure(layout) -> None:
    before = layout.grid_map
    assert validate_layout(layout) == validate_layout(layout)
    assert layout.grid_map is before


def test_empty_room_list_short_circuits(layout) -> None:
    empty = replace(layout, rooms=())
    assert validate_layout(empty) == ["No rooms in layout"]


def test_missing_references_are_reported(layout) -> None:
    broken = replace(layout, start_room_id=999, boss_room_id=998)
    issues = validate_layout(broken)
    assert "No start room defined" in issues
    assert "No boss room defined" in issues
    assert "Layout is not fully connected" in issues


def test_disconnection_is_reported(layout) -> None:
    if len(layout.rooms) < 2:
        pytest.skip("needs at least two rooms")
    isolated = [replace(room, connected_rooms=frozenset()) for room in layout.rooms]
    assert "Layout is not fully connected" in validate_layout(replace(layout, rooms=tuple(isolated)))


def test_undersized_rooms_and_bare_grids(layout) -> None:
    first = replace(layout.rooms[0], bounds=Rect(1, 1, 2, 5))
    walls = tuple(tuple(WALL for _ in row) for row in layout.grid_map)
    issues = validate_layout(replace(layout, rooms=(first,) + layout.rooms[1:], grid_map=walls))
    assert f"Room {first.id} is too small" in issues
    assert "No floor tiles in grid map" in issues
    assert "Grid map is null" in validate_layout(replace(layout, grid_map=()))


def test_below_minimum_room_count_is_flagged(layout) -> None:
    params = replace(layout.parameters, min_rooms=len(layout.rooms) + 1, max_rooms=len(layout.rooms) + 5)
    issues = validate_layout(replace(layout, parameters=params))
    assert f"Generated only {len(layout.rooms)} rooms, minimum is {len(layout.rooms) + 1}" in issues


def test_statistics_summary(layout) -> None:
    text = layout_statistics(layout)
    assert f"Total Rooms: {len(layout.rooms)}" in text
    assert f"Total Corridors: {len(layout.corridors)}" in text
    assert "Map Size: 50x40" in text
    assert f"Boss Room: {layout.boss_room_id}" in text
    assert "  boss: 1" in text
    assert f"Floor Density: {floor_density(layout):.1%}" in text
    assert 0.0 < floor_density(layout) < 1.0
