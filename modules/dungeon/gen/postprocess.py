"""Post-generation graph processing.

The steps are order dependent and run after every primary algorithm:

1. special rooms (start and boss),
2. critical path (BFS distances and the start to boss shortest path),
3. dead-end removal (optional),
4. loop injection (optional),
5. connectivity re-verification,
6. door marking (optional).
"""
from __future__ import annotations

import logging
import random
from collections import deque

from modules.dungeon.gen.connect import bfs_distances, create_corridor, ensure_connectivity
from modules.dungeon.gen.random import rand_choice
from modules.dungeon.geometry import GridPos
from modules.dungeon.layout import DOOR, FLOOR, LayoutBuilder, RoomDraft, RoomType, corridor_band


logger = logging.getLogger(__name__)

LOOP_RADIUS = 20.0

_PROTECTED_TYPES = frozenset({RoomType.BOSS, RoomType.TREASURE})


def assign_special_rooms(builder: LayoutBuilder) -> None:
    """The first room becomes the start; the farthest room the boss."""

    rooms = builder.live_rooms()
    if not rooms:
        return
    start = rooms[0]
    builder.start_room_id = start.id
    start.room_type = RoomType.STANDARD

    boss = start
    max_distance = 0.0
    for room in rooms:
        distance = start.center.distance_to(room.center)
        if distance > max_distance:
            max_distance = distance
            boss = room
    builder.boss_room_id = boss.id
    boss.room_type = RoomType.BOSS


def shortest_path(builder: LayoutBuilder, start_id: int, end_id: int) -> list[int]:
    """Return room ids of a shortest path, or an empty list if unreachable.

    Ties are broken by BFS discovery order.
    """

    parents: dict[int, int | None] = {start_id: None}
    queue = deque([start_id])
    while queue:
        current = queue.popleft()
        if current == end_id:
            break
        for neighbour in builder.rooms[current].connected:
            if neighbour not in parents:
                parents[neighbour] = current
                queue.append(neighbour)

    if end_id not in parents:
        return []
    path: list[int] = []
    node: int | None = end_id
    while node is not None:
        path.append(node)
        node = parents[node]
    path.reverse()
    return path


def compute_critical_path(builder: LayoutBuilder) -> list[int]:
    """Assign ``distance_from_start`` and flag the start to boss path."""

    if not builder.live_rooms():
        return []
    distances = bfs_distances(builder, builder.start_room_id)
    for room in builder.live_rooms():
        room.distance_from_start = distances.get(room.id, -1)
        room.is_main_path = False

    path = shortest_path(builder, builder.start_room_id, builder.boss_room_id)
    for room_id in path:
        builder.rooms[room_id].is_main_path = True
    return path


def _is_protected(builder: LayoutBuilder, room: RoomDraft) -> bool:
    return (
        room.is_main_path
        or room.room_type in _PROTECTED_TYPES
        or room.id in (builder.start_room_id, builder.boss_room_id)
    )


def remove_dead_ends(builder: LayoutBuilder) -> int:
    """Repeatedly drop unprotected rooms with at most one connection.

    Each pass scans rooms from the highest id down; passes repeat until one
    completes without a removal.  Returns the number of rooms removed.
    """

    removed = 0
    changed = True
    while changed:
        changed = False
        for room in reversed(builder.live_rooms()):
            if room.removed or _is_protected(builder, room):
                continue
            if room.degree <= 1:
                logger.debug("Removing dead-end room %s", room.id)
                builder.remove_room(room.id)
                removed += 1
                changed = True
    return removed


def inject_loops(builder: LayoutBuilder, rng: random.Random) -> int:
    """Add ``round(room_count * branching)`` attempts at extra nearby edges."""

    rooms = builder.live_rooms()
    if len(rooms) < 2:
        return 0
    attempts = round(len(rooms) * builder.params.branching)
    added = 0
    for _ in range(attempts):
        first = rand_choice(rng, rooms)
        candidates = [
            room
            for room in rooms
            if room.id != first.id
            and room.id not in first.connected
            and first.center.distance_to(room.center) < LOOP_RADIUS
        ]
        if not candidates:
            continue
        create_corridor(builder, first, rand_choice(rng, candidates))
        added += 1
    return added


def _fill_missing_distances(builder: LayoutBuilder) -> None:
    """Give rooms reached only through repair corridors a hop count.

    Distances already assigned are kept so the critical path ordering stays
    intact.
    """

    known = sorted(
        (room for room in builder.live_rooms() if room.distance_from_start >= 0),
        key=lambda room: (room.distance_from_start, room.id),
    )
    queue = deque(room.id for room in known)
    while queue:
        current = builder.rooms[queue.popleft()]
        for neighbour_id in current.connected:
            neighbour = builder.rooms[neighbour_id]
            if neighbour.distance_from_start < 0:
                neighbour.distance_from_start = current.distance_from_start + 1
                queue.append(neighbour_id)


def reverify_connectivity(builder: LayoutBuilder) -> int:
    """Connect any room still unreachable from the start room."""

    repairs = ensure_connectivity(builder)
    if repairs:
        logger.warning("Dungeon layout was not fully connected; added %s corridor(s)", repairs)
        _fill_missing_distances(builder)
    return repairs


def _door_cells(previous: GridPos, pos: GridPos, width: int) -> list[GridPos]:
    """Cells of the corridor band crossing at ``pos``, across the direction of travel."""

    if previous.y == pos.y:
        y0, y1 = corridor_band(pos.y, width)
        return [GridPos(pos.x, y) for y in range(y0, y1 + 1)]
    x0, x1 = corridor_band(pos.x, width)
    return [GridPos(x, pos.y) for x in range(x0, x1 + 1)]


def mark_doors(builder: LayoutBuilder) -> int:
    """Mark where each corridor leaves its endpoint rooms with door cells.

    The whole width of the corridor band is marked at the crossing.  Returns
    the number of cells turned into doors.
    """

    footprints = {room.id: frozenset(room.footprint()) for room in builder.live_rooms()}
    room_cells: set[GridPos] = set().union(*footprints.values()) if footprints else set()
    doors = 0
    for corridor in builder.live_corridors():
        for room_id, path in (
            (corridor.start_room_id, corridor.path),
            (corridor.end_room_id, list(reversed(corridor.path))),
        ):
            inside = footprints.get(room_id, frozenset())
            previous = None
            for pos in path:
                if pos in inside:
                    previous = pos
                    continue
                if previous is not None and pos not in room_cells:
                    for cell in _door_cells(previous, pos, corridor.width):
                        if not builder.in_bounds(cell.x, cell.y) or cell in room_cells:
                            continue
                        if builder.get_cell(cell.x, cell.y) == FLOOR:
                            builder.set_cell(cell.x, cell.y, DOOR)
                            doors += 1
                break
    return doors


def warn_soft_limits(builder: LayoutBuilder) -> None:
    """Log advisory findings about room count and critical path length."""

    params = builder.params
    room_count = len(builder.live_rooms())
    if room_count < params.min_rooms:
        logger.warning("Generated only %s rooms, minimum is %s", room_count, params.min_rooms)
    path_length = sum(1 for room in builder.live_rooms() if room.is_main_path)
    if path_length < params.critical_path_length:
        logger.warning(
            "Critical path length %s is shorter than required %s",
            path_length,
            params.critical_path_length,
        )


__all__ = [
    "LOOP_RADIUS",
    "assign_special_rooms",
    "shortest_path",
    "compute_critical_path",
    "remove_dead_ends",
    "inject_loops",
    "reverify_connectivity",
    "mark_doors",
    "warn_soft_limits",
]
