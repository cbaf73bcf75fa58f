"""Room-first placement by rejection sampling."""
from __future__ import annotations

import logging
import random
from typing import Optional

from modules.dungeon.geometry import Rect
from modules.dungeon.gen.connect import connect_all_rooms
from modules.dungeon.gen.random import rand_int
from modules.dungeon.gen.rooms import place_room
from modules.dungeon.layout import LayoutBuilder, RoomDraft


logger = logging.getLogger(__name__)

MAX_PLACEMENT_ATTEMPTS = 100


def _overlaps_existing(builder: LayoutBuilder, candidate: Rect) -> bool:
    return any(candidate.overlaps(room.bounds) for room in builder.live_rooms())


def place_random_room(builder: LayoutBuilder, rng: random.Random) -> Optional[RoomDraft]:
    """Try up to :data:`MAX_PLACEMENT_ATTEMPTS` random rectangles.

    Candidates keep a one cell border to the map edge and may not overlap any
    placed room.  Returns ``None`` when every attempt was rejected.
    """

    params = builder.params
    min_w, min_h = params.min_room_size
    max_w, max_h = params.max_room_size
    for _ in range(MAX_PLACEMENT_ATTEMPTS):
        width = rand_int(rng, min_w, max_w)
        height = rand_int(rng, min_h, max_h)
        max_x = builder.width - width - 1
        max_y = builder.height - height - 1
        if max_x < 1 or max_y < 1:
            continue
        candidate = Rect(rand_int(rng, 1, max_x), rand_int(rng, 1, max_y), width, height)
        if _overlaps_existing(builder, candidate):
            continue
        return place_room(builder, candidate, rng)
    return None


def generate_room_first(builder: LayoutBuilder, rng: random.Random) -> None:
    """Scatter rooms, then join them with shortest-edge-first corridors."""

    params = builder.params
    target = rand_int(rng, params.min_rooms, params.max_rooms)
    builder.requested_rooms += target
    for attempt in range(target):
        if place_random_room(builder, rng) is None:
            logger.debug("Room %s of %s skipped after %s attempts", attempt + 1, target, MAX_PLACEMENT_ATTEMPTS)
            continue
        builder.placed_rooms += 1
    connect_all_rooms(builder)


__all__ = ["MAX_PLACEMENT_ATTEMPTS", "place_random_room", "generate_room_first"]
