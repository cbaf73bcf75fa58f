from __future__ import annotations

import pytest

from modules.dungeon.gen.connect import create_corridor
from modules.dungeon.geometry import GridPos, Rect
from modules.dungeon.layout import FLOOR, WALL, RoomShape, RoomType, corridor_band


def test_rect_overlap_ignores_touching_edges() -> None:
    a = Rect(0, 0, 4, 4)
    assert a.overlaps(Rect(3, 3, 2, 2))
    assert not a.overlaps(Rect(4, 0, 2, 2))
    assert not a.overlaps(Rect(0, 4, 4, 1))


def test_rect_helpers() -> None:
    rect = Rect(2, 3, 4, 2)
    assert (rect.x2, rect.y2, rect.area) == (5, 4, 8)
    assert rect.center() == GridPos(4, 4)
    assert rect.contains(GridPos(5, 4))
    assert not rect.contains(GridPos(6, 4))
    assert list(rect.cells())[:2] == [GridPos(2, 3), GridPos(3, 3)]
    assert Rect.bounding([GridPos(1, 5), GridPos(4, 2)]) == Rect(1, 2, 4, 4)


@pytest.mark.parametrize(
    ("width", "expected"),
    [(1, (5, 5)), (2, (5, 6)), (3, (4, 6)), (4, (4, 7))],
)
def test_corridor_band(width: int, expected: tuple[int, int]) -> None:
    assert corridor_band(5, width) == expected


def test_add_room_assigns_sequential_ids(builder_factory) -> None:
    builder = builder_factory()
    first = builder.add_room(Rect(1, 1, 4, 4), RoomType.COMBAT)
    second = builder.add_room(Rect(10, 1, 4, 4), RoomType.EMPTY)
    assert (first.id, second.id) == (0, 1)
    assert first.center == GridPos(3, 3)
    assert first.shape is RoomShape.RECTANGLE


def test_carve_rect_is_clipped_to_grid(builder_factory) -> None:
    builder = builder_factory(map_bounds=(5, 5))
    builder.carve_rect(Rect(3, 3, 10, 10))
    assert builder.get_cell(4, 4) == FLOOR
    assert builder.get_cell(2, 2) == WALL


def test_link_is_symmetric_and_ignores_self(builder_factory) -> None:
    builder = builder_factory()
    a = builder.add_room(Rect(1, 1, 3, 3), RoomType.STANDARD)
    b = builder.add_room(Rect(10, 1, 3, 3), RoomType.STANDARD)
    builder.link(a, b)
    builder.link(b, a)
    builder.link(a, a)
    assert a.connected == [b.id]
    assert b.connected == [a.id]


def test_remove_room_keeps_ids_and_restamps_survivors(builder_factory) -> None:
    builder = builder_factory(map_bounds=(30, 10))
    left = builder.add_room(Rect(1, 1, 4, 4), RoomType.STANDARD)
    middle = builder.add_room(Rect(12, 1, 4, 4), RoomType.STANDARD)
    right = builder.add_room(Rect(24, 1, 4, 4), RoomType.STANDARD)
    for room in (left, middle, right):
        builder.carve_room(room)
    create_corridor(builder, left, right)
    create_corridor(builder, middle, right)

    builder.remove_room(middle.id)

    assert [room.id for room in builder.live_rooms()] == [0, 2]
    assert builder.rooms[1].removed
    assert middle.id not in right.connected
    assert [corridor.id for corridor in builder.live_corridors()] == [0]
    assert builder.removed_rooms == 1
    # The left-right corridor ran through the removed room and must survive.
    for pos in builder.corridors[0].path:
        assert builder.get_cell(pos.x, pos.y) == FLOOR
    for pos in left.footprint():
        assert builder.get_cell(pos.x, pos.y) == FLOOR
    with pytest.raises(KeyError):
        builder.room(middle.id)


def test_build_freezes_only_live_state(builder_factory) -> None:
    builder = builder_factory()
    a = builder.add_room(Rect(1, 1, 4, 4), RoomType.STANDARD)
    b = builder.add_room(Rect(10, 1, 4, 4), RoomType.TRAP)
    builder.carve_room(a)
    builder.carve_room(b)
    create_corridor(builder, a, b)
    builder.phases.append("primary")

    layout = builder.build()

    assert layout.size == (30, 20)
    assert len(layout.grid_map) == 20 and len(layout.grid_map[0]) == 30
    assert layout.room(1).connected_rooms == frozenset({0})
    assert layout.room(7) is None
    assert layout.corridor(0).path[0] == a.center
    assert layout.rooms_of_type(RoomType.TRAP)[0].id == 1
    assert layout.report.phases == ("primary",)
    assert layout.cell(a.center.x, a.center.y) == FLOOR
