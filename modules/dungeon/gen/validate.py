"""Advisory checks and statistics for finished dungeon layouts."""
from __future__ import annotations

from collections import Counter, deque
from typing import List

from modules.dungeon.layout import PASSABLE, DungeonLayout, RoomType


MIN_ROOM_DIMENSION = 3


def _reachable_rooms(layout: DungeonLayout) -> set[int]:
    room_ids = {room.id for room in layout.rooms}
    if layout.start_room_id not in room_ids:
        return set()
    neighbours = {room.id: room.connected_rooms for room in layout.rooms}
    seen = {layout.start_room_id}
    queue: deque[int] = deque([layout.start_room_id])
    while queue:
        current = queue.popleft()
        for neighbour in neighbours.get(current, ()):
            if neighbour in room_ids and neighbour not in seen:
                seen.add(neighbour)
                queue.append(neighbour)
    return seen


def _has_floor(layout: DungeonLayout) -> bool:
    return any(cell in PASSABLE for row in layout.grid_map for cell in row)


def validate_layout(layout: DungeonLayout) -> List[str]:
    """Return human readable findings about ``layout``.

    The check never raises and never mutates its argument; an empty list
    means nothing was found.
    """

    issues: List[str] = []
    if not layout.rooms:
        issues.append("No rooms in layout")
        return issues

    room_ids = {room.id for room in layout.rooms}
    if len(_reachable_rooms(layout)) != len(layout.rooms):
        issues.append("Layout is not fully connected")
    if layout.start_room_id not in room_ids:
        issues.append("No start room defined")
    if layout.boss_room_id not in room_ids:
        issues.append("No boss room defined")

    for room in layout.rooms:
        if room.bounds.width < MIN_ROOM_DIMENSION or room.bounds.height < MIN_ROOM_DIMENSION:
            issues.append(f"Room {room.id} is too small")

    min_rooms = layout.parameters.min_rooms
    if len(layout.rooms) < min_rooms:
        issues.append(f"Generated only {len(layout.rooms)} rooms, minimum is {min_rooms}")

    if not layout.grid_map or not layout.grid_map[0]:
        issues.append("Grid map is null")
    elif not _has_floor(layout):
        issues.append("No floor tiles in grid map")
    return issues


def is_valid(layout: DungeonLayout) -> bool:
    return not validate_layout(layout)


def floor_density(layout: DungeonLayout) -> float:
    """Return the fraction of passable cells on the map."""

    area = layout.width * layout.height
    if area == 0:
        return 0.0
    passable = sum(1 for row in layout.grid_map for cell in row if cell in PASSABLE)
    return passable / area


def layout_statistics(layout: DungeonLayout) -> str:
    """Summarise ``layout`` as a multi-line text block."""

    lines = [
        "=== Dungeon Statistics ===",
        f"Total Rooms: {len(layout.rooms)}",
        f"Total Corridors: {len(layout.corridors)}",
        f"Map Size: {layout.width}x{layout.height}",
        f"Start Room: {layout.start_room_id}",
        f"Boss Room: {layout.boss_room_id}",
        "",
        "Room Types:",
    ]
    counts = Counter(room.room_type for room in layout.rooms)
    for room_type in RoomType:
        if counts[room_type]:
            lines.append(f"  {room_type.value}: {counts[room_type]}")
    lines.append("")
    lines.append(f"Critical Path Rooms: {sum(1 for room in layout.rooms if room.is_main_path)}")
    lines.append(f"Floor Density: {floor_density(layout):.1%}")
    return "\n".join(lines)


__all__ = [
    "MIN_ROOM_DIMENSION",
    "validate_layout",
    "is_valid",
    "floor_density",
    "layout_statistics",
]
