"""Room creation helpers shared by the layout algorithms."""
from __future__ import annotations

import random
from typing import Optional

from modules.dungeon.geometry import Rect
from modules.dungeon.gen.params import GenerationParameters
from modules.dungeon.gen.random import chance, rand_choice, rand_int
from modules.dungeon.layout import LayoutBuilder, RoomDraft, RoomType


_SPECIAL_TYPES = (RoomType.TREASURE, RoomType.SECRET, RoomType.PUZZLE, RoomType.TRAP)
_NORMAL_TYPES = (RoomType.STANDARD, RoomType.COMBAT, RoomType.EMPTY)

# Cells kept free between a room and the border of the area hosting it.
_ROOM_MARGIN = 1


def determine_room_type(rng: random.Random, params: GenerationParameters) -> RoomType:
    """Roll the type of a freshly created room."""

    if chance(rng, params.special_room_ratio):
        return rand_choice(rng, _SPECIAL_TYPES)
    return rand_choice(rng, _NORMAL_TYPES)


def create_room_in_rect(
    builder: LayoutBuilder,
    area: Rect,
    rng: random.Random,
) -> Optional[RoomDraft]:
    """Carve a rectangular room inside ``area`` keeping a one cell margin.

    Returns ``None`` without touching the RNG when ``area`` cannot host the
    minimum room size.
    """

    params = builder.params
    min_w, min_h = params.min_room_size
    max_w = min(params.max_room_size[0], area.width - 2 * _ROOM_MARGIN)
    max_h = min(params.max_room_size[1], area.height - 2 * _ROOM_MARGIN)
    if max_w < min_w or max_h < min_h:
        return None

    room_w = rand_int(rng, min_w, max_w)
    room_h = rand_int(rng, min_h, max_h)
    room_x = rand_int(rng, area.x + _ROOM_MARGIN, area.x + area.width - room_w - _ROOM_MARGIN)
    room_y = rand_int(rng, area.y + _ROOM_MARGIN, area.y + area.height - room_h - _ROOM_MARGIN)

    return place_room(builder, Rect(room_x, room_y, room_w, room_h), rng)


def place_room(builder: LayoutBuilder, bounds: Rect, rng: random.Random) -> RoomDraft:
    """Register a rectangular room at ``bounds`` and carve it as floor."""

    room = builder.add_room(bounds, determine_room_type(rng, builder.params))
    builder.carve_room(room)
    return room


__all__ = ["determine_room_type", "create_room_in_rect", "place_room"]
