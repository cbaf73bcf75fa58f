"""Binary space partitioning layout generator.

The tree is stored as a flat node array; children and parents reference each
other by index, which keeps ownership trivial and the tree easy to dump while
debugging.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional

from modules.dungeon.geometry import Rect
from modules.dungeon.gen.connect import create_corridor
from modules.dungeon.gen.random import rand_int
from modules.dungeon.gen.rooms import create_room_in_rect
from modules.dungeon.layout import LayoutBuilder


logger = logging.getLogger(__name__)

# Tunable constants defining the BSP behaviour.
_MAX_DEPTH = 5
_ASPECT_LIMIT = 1.25

_NO_NODE = -1


@dataclass(slots=True)
class BSPNode:
    """Node representing a partition in the BSP tree."""

    rect: Rect
    depth: int
    parent: int = _NO_NODE
    left: int = _NO_NODE
    right: int = _NO_NODE
    room_id: int = _NO_NODE

    def is_leaf(self) -> bool:
        return self.left == _NO_NODE and self.right == _NO_NODE


class BSPTree:
    """Arena of :class:`BSPNode` entries rooted at index ``0``."""

    def __init__(self, root: Rect) -> None:
        self.nodes: list[BSPNode] = [BSPNode(root, depth=0)]

    def _add(self, rect: Rect, parent: int) -> int:
        self.nodes.append(BSPNode(rect, depth=self.nodes[parent].depth + 1, parent=parent))
        return len(self.nodes) - 1

    def can_split(self, index: int, min_size: tuple[int, int]) -> bool:
        node = self.nodes[index]
        min_w, min_h = min_size
        return (
            node.depth < _MAX_DEPTH
            and node.rect.width >= 2 * min_w
            and node.rect.height >= 2 * min_h
        )

    def split(self, index: int, rng: random.Random, min_size: tuple[int, int]) -> bool:
        """Bisect node ``index``; returns ``False`` when it must stay a leaf."""

        if not self.can_split(index, min_size):
            return False

        rect = self.nodes[index].rect
        min_w, min_h = min_size
        split_horizontal = rng.random() > 0.5
        if rect.width > rect.height * _ASPECT_LIMIT:
            split_horizontal = False
        elif rect.height > rect.width * _ASPECT_LIMIT:
            split_horizontal = True

        if split_horizontal:
            split = rand_int(rng, rect.y + min_h, rect.y + rect.height - min_h)
            first = Rect(rect.x, rect.y, rect.width, split - rect.y)
            second = Rect(rect.x, split, rect.width, rect.y + rect.height - split)
        else:
            split = rand_int(rng, rect.x + min_w, rect.x + rect.width - min_w)
            first = Rect(rect.x, rect.y, split - rect.x, rect.height)
            second = Rect(split, rect.y, rect.x + rect.width - split, rect.height)

        left = self._add(first, index)
        right = self._add(second, index)
        node = self.nodes[index]
        node.left = left
        node.right = right
        return True

    def preorder(self) -> list[int]:
        order: list[int] = []
        stack = [0]
        while stack:
            index = stack.pop()
            order.append(index)
            node = self.nodes[index]
            if not node.is_leaf():
                stack.append(node.right)
                stack.append(node.left)
        return order

    def leaves(self) -> list[int]:
        """Return leaf indices ordered left to right."""

        return [index for index in self.preorder() if self.nodes[index].is_leaf()]

    def subtree_rooms(self, index: int) -> list[int]:
        rooms: list[int] = []
        stack = [index]
        while stack:
            node = self.nodes[stack.pop()]
            if node.is_leaf():
                if node.room_id != _NO_NODE:
                    rooms.append(node.room_id)
            else:
                stack.append(node.right)
                stack.append(node.left)
        return rooms

    def random_room(self, index: int, rng: random.Random) -> Optional[int]:
        """Descend randomly from ``index`` towards a leaf that hosts a room."""

        node = self.nodes[index]
        while not node.is_leaf():
            options = [child for child in (node.left, node.right) if self.subtree_rooms(child)]
            if not options:
                return None
            go_left = rng.random() > 0.5
            if len(options) == 2:
                node = self.nodes[options[0] if go_left else options[1]]
            else:
                node = self.nodes[options[0]]
        return node.room_id if node.room_id != _NO_NODE else None


def partition(tree: BSPTree, rng: random.Random, min_size: tuple[int, int]) -> None:
    """Split the tree depth-first, left subtree before right subtree."""

    stack = [0]
    while stack:
        index = stack.pop()
        if tree.split(index, rng, min_size):
            node = tree.nodes[index]
            stack.append(node.right)
            stack.append(node.left)


def populate_rooms(tree: BSPTree, builder: LayoutBuilder, rng: random.Random) -> int:
    """Create one room per leaf; returns the number of leaves visited."""

    leaves = tree.leaves()
    for index in leaves:
        node = tree.nodes[index]
        room = create_room_in_rect(builder, node.rect, rng)
        if room is None:
            logger.debug("BSP leaf %s too small for a room: %s", index, node.rect)
            continue
        node.room_id = room.id
    return len(leaves)


def connect_tree(tree: BSPTree, builder: LayoutBuilder, rng: random.Random) -> None:
    """Link sibling subtrees through one randomly chosen room on each side."""

    for index in tree.preorder():
        node = tree.nodes[index]
        if node.is_leaf():
            continue
        left_room = tree.random_room(node.left, rng)
        right_room = tree.random_room(node.right, rng)
        if left_room is None or right_room is None:
            continue
        create_corridor(builder, builder.rooms[left_room], builder.rooms[right_room])


def generate_bsp(builder: LayoutBuilder, rng: random.Random) -> BSPTree:
    """Partition the whole map, seed rooms in the leaves and connect them."""

    tree = BSPTree(Rect(0, 0, builder.width, builder.height))
    partition(tree, rng, builder.params.min_room_size)
    leaves = populate_rooms(tree, builder, rng)
    placed = sum(1 for index in tree.leaves() if tree.nodes[index].room_id != _NO_NODE)
    builder.requested_rooms += leaves
    builder.placed_rooms += placed
    connect_tree(tree, builder, rng)
    return tree


__all__ = [
    "BSPNode",
    "BSPTree",
    "partition",
    "populate_rooms",
    "connect_tree",
    "generate_bsp",
]
