from __future__ import annotations

from itertools import combinations

from modules.dungeon.gen.bsp import BSPTree, generate_bsp, partition
from modules.dungeon.gen.connect import is_connected
from modules.dungeon.gen.random import get_rng
from modules.dungeon.geometry import Rect
from modules.dungeon.layout import FLOOR


def test_partition_respects_depth_and_minimum_size() -> None:
    tree = BSPTree(Rect(0, 0, 80, 60))
    partition(tree, get_rng(3), (4, 4))

    assert len(tree.nodes) > 1
    for node in tree.nodes:
        assert node.depth <= 5
        assert node.rect.width >= 4 and node.rect.height >= 4
        if not node.is_leaf():
            left, right = tree.nodes[node.left], tree.nodes[node.right]
            assert left.parent == right.parent
            assert left.rect.area + right.rect.area == node.rect.area


def test_leaves_tile_the_root_rectangle() -> None:
    tree = BSPTree(Rect(0, 0, 64, 48))
    partition(tree, get_rng(11), (5, 5))
    assert sum(tree.nodes[index].rect.area for index in tree.leaves()) == 64 * 48


def test_wide_rectangles_split_vertically() -> None:
    tree = BSPTree(Rect(0, 0, 40, 10))
    assert tree.split(0, get_rng(0), (4, 4))
    left = tree.nodes[tree.nodes[0].left]
    assert left.rect.height == 10
    assert 4 <= left.rect.width <= 36


def test_small_rectangles_are_not_split() -> None:
    tree = BSPTree(Rect(0, 0, 7, 20))
    assert not tree.split(0, get_rng(0), (4, 4))
    assert tree.nodes[0].is_leaf()


def test_generate_bsp_places_disjoint_connected_rooms(builder_factory) -> None:
    builder = builder_factory(map_bounds=(60, 40), min_room_size=(4, 4), max_room_size=(10, 10))
    tree = generate_bsp(builder, get_rng(1234))

    rooms = builder.live_rooms()
    assert rooms
    assert builder.requested_rooms == len(tree.leaves())
    assert builder.placed_rooms == len(rooms)
    for a, b in combinations(rooms, 2):
        assert not a.bounds.overlaps(b.bounds)
    for room in rooms:
        assert 4 <= room.bounds.width <= 10
        assert all(builder.get_cell(pos.x, pos.y) == FLOOR for pos in room.footprint())
    assert is_connected(builder)


def test_generate_bsp_is_deterministic(builder_factory) -> None:
    first = builder_factory(map_bounds=(50, 50))
    second = builder_factory(map_bounds=(50, 50))
    generate_bsp(first, get_rng(77))
    generate_bsp(second, get_rng(77))
    assert first.grid == second.grid
    assert [room.bounds for room in first.rooms] == [room.bounds for room in second.rooms]
