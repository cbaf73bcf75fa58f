"""Room graph connection: corridors, MST-style union and reachability repair."""
from __future__ import annotations

import logging
from collections import deque
from typing import Iterable

from modules.dungeon.geometry import GridPos
from modules.dungeon.layout import CorridorDraft, LayoutBuilder, RoomDraft


logger = logging.getLogger(__name__)


class _DisjointSet:
    """Union-find over ``size`` dense indices with path halving."""

    __slots__ = ("_parent", "count")

    def __init__(self, size: int) -> None:
        self._parent = list(range(size))
        self.count = size

    def find(self, item: int) -> int:
        parent = self._parent
        while parent[item] != item:
            parent[item] = parent[parent[item]]
            item = parent[item]
        return item

    def union(self, a: int, b: int) -> bool:
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return False
        self._parent[root_b] = root_a
        self.count -= 1
        return True


def l_shaped_path(start: GridPos, end: GridPos) -> list[GridPos]:
    """Return a horizontal run along ``start.y`` followed by a vertical run
    along ``end.x``, ordered from ``start`` to ``end``."""

    path: list[GridPos] = []
    step = 1 if end.x >= start.x else -1
    for x in range(start.x, end.x + step, step):
        path.append(GridPos(x, start.y))
    step = 1 if end.y >= start.y else -1
    for y in range(start.y + step, end.y + step, step):
        path.append(GridPos(end.x, y))
    return path


def create_corridor(builder: LayoutBuilder, start: RoomDraft, end: RoomDraft) -> CorridorDraft:
    """Draw an L-shaped corridor between two room centers and link the rooms."""

    width = builder.params.corridor_width
    path = l_shaped_path(start.center, end.center)
    builder.carve_path(path, width)
    return builder.add_corridor(start, end, path, width)


def bfs_distances(builder: LayoutBuilder, start_id: int) -> dict[int, int]:
    """Return hop counts from ``start_id`` for every reachable live room.

    The mapping preserves discovery order.
    """

    distances = {start_id: 0}
    queue = deque([start_id])
    while queue:
        current = queue.popleft()
        for neighbour in builder.rooms[current].connected:
            if neighbour not in distances:
                distances[neighbour] = distances[current] + 1
                queue.append(neighbour)
    return distances


def _nearest(room: RoomDraft, candidates: Iterable[RoomDraft]) -> RoomDraft:
    return min(candidates, key=lambda other: (room.center.distance_to(other.center), other.id))


def connect_all_rooms(builder: LayoutBuilder) -> int:
    """Join every live room into one connected graph, shortest edges first.

    Existing adjacencies are honoured: an edge is only drawn when it merges two
    distinct components.  Returns the number of corridors created.
    """

    rooms = builder.live_rooms()
    if len(rooms) < 2:
        return 0

    index = {room.id: position for position, room in enumerate(rooms)}
    components = _DisjointSet(len(rooms))
    for room in rooms:
        for neighbour in room.connected:
            if neighbour in index:
                components.union(index[room.id], index[neighbour])

    if components.count == 1:
        return 0

    edges = sorted(
        (rooms[i].center.distance_to(rooms[j].center), i, j)
        for i in range(len(rooms))
        for j in range(i + 1, len(rooms))
    )

    created = 0
    for _distance, i, j in edges:
        if components.union(i, j):
            create_corridor(builder, rooms[i], rooms[j])
            created += 1
            if components.count == 1:
                break
    return created


def ensure_connectivity(builder: LayoutBuilder) -> int:
    """Attach every room unreachable from the start room to its nearest
    reachable room.  Returns the number of forced corridors."""

    rooms = builder.live_rooms()
    if not rooms:
        return 0

    start_id = builder.start_room_id
    reached = bfs_distances(builder, start_id)
    repairs = 0
    for room in rooms:
        if room.id in reached:
            continue
        nearest = _nearest(room, (builder.rooms[room_id] for room_id in reached))
        logger.debug("Reconnecting room %s to room %s", room.id, nearest.id)
        create_corridor(builder, room, nearest)
        repairs += 1
        reached = bfs_distances(builder, start_id)
    return repairs


def is_connected(builder: LayoutBuilder) -> bool:
    rooms = builder.live_rooms()
    if not rooms:
        return True
    return len(bfs_distances(builder, builder.start_room_id)) == len(rooms)


__all__ = [
    "l_shaped_path",
    "create_corridor",
    "bfs_distances",
    "connect_all_rooms",
    "ensure_connectivity",
    "is_connected",
]
