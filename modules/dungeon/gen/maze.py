"""Corridor-first generation: a sparse lattice maze whose wide regions become rooms."""
from __future__ import annotations

import random

from modules.dungeon.gen.floodfill import extract_rooms
from modules.dungeon.gen.random import chance
from modules.dungeon.layout import FLOOR, LayoutBuilder


EXTEND_CHANCE = 0.5


def carve_lattice(builder: LayoutBuilder, rng: random.Random) -> None:
    """Open every odd coordinate and randomly extend it right and down.

    Both extension rolls are drawn for every lattice point; an extension is
    only carved when the next lattice point is still on the map.
    """

    grid = builder.grid
    for x in range(1, builder.width, 2):
        for y in range(1, builder.height, 2):
            grid[y][x] = FLOOR
            if chance(rng, EXTEND_CHANCE) and x + 2 < builder.width:
                grid[y][x + 1] = FLOOR
            if chance(rng, EXTEND_CHANCE) and y + 2 < builder.height:
                grid[y + 1][x] = FLOOR


def generate_maze(builder: LayoutBuilder, rng: random.Random) -> None:
    carve_lattice(builder, rng)
    extract_rooms(builder, rng)


__all__ = ["EXTEND_CHANCE", "carve_lattice", "generate_maze"]
