"""ASCII rendering of dungeon layouts for debugging."""
from __future__ import annotations

from modules.dungeon.layout import DOOR, FLOOR, DungeonLayout


WALL_CHAR = "#"
FLOOR_CHAR = "."
DOOR_CHAR = "+"
START_CHAR = "S"
BOSS_CHAR = "B"

_CELL_CHARS = {FLOOR: FLOOR_CHAR, DOOR: DOOR_CHAR}


def render_ascii(layout: DungeonLayout) -> str:
    """Return one text line per grid row.

    The start and boss room centers are drawn on top of the cell codes; the
    boss wins when both share a center.
    """

    rows = [[_CELL_CHARS.get(cell, WALL_CHAR) for cell in row] for row in layout.grid_map]
    for room_id, char in ((layout.start_room_id, START_CHAR), (layout.boss_room_id, BOSS_CHAR)):
        room = layout.room(room_id)
        if room is None:
            continue
        x, y = room.center.as_tuple()
        if 0 <= y < len(rows) and 0 <= x < len(rows[y]):
            rows[y][x] = char
    return "\n".join("".join(row) for row in rows)


__all__ = ["render_ascii"]
