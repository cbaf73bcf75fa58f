"""Cellular automata cave generation and smoothing."""
from __future__ import annotations

import random

import numpy as np

from modules.dungeon.gen.floodfill import extract_rooms
from modules.dungeon.layout import FLOOR, WALL, IntGrid, LayoutBuilder


INITIAL_FLOOR_CHANCE = 0.45
CAVE_ITERATIONS = 5
WALL_THRESHOLD = 5

_NEIGHBOUR_OFFSETS = tuple(
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)
)


def seed_noise(builder: LayoutBuilder, rng: random.Random, floor_chance: float = INITIAL_FLOOR_CHANCE) -> None:
    """Mark every cell floor with probability ``floor_chance``.

    Cells are drawn column by column so the RNG stream is consumed in a fixed
    order.
    """

    grid = builder.grid
    for x in range(builder.width):
        for y in range(builder.height):
            grid[y][x] = FLOOR if rng.random() < floor_chance else WALL


def count_wall_neighbours(cells: np.ndarray) -> np.ndarray:
    """Return, per cell, how many of its eight neighbours are wall.

    Neighbours outside the grid always count as wall.
    """

    height, width = cells.shape
    walls = np.pad(cells == WALL, 1, mode="constant", constant_values=True).astype(np.int8)
    counts = np.zeros((height, width), dtype=np.int8)
    for dx, dy in _NEIGHBOUR_OFFSETS:
        counts += walls[1 + dy : 1 + dy + height, 1 + dx : 1 + dx + width]
    return counts


def smooth(grid: IntGrid, iterations: int) -> IntGrid:
    """Apply the majority rule ``iterations`` times and return a new grid.

    A cell becomes wall when at least five of its neighbours are wall and
    floor otherwise.
    """

    if not grid or not grid[0]:
        return [row[:] for row in grid]
    cells = np.asarray(grid, dtype=np.int8)
    for _ in range(iterations):
        counts = count_wall_neighbours(cells)
        cells = np.where(counts >= WALL_THRESHOLD, WALL, FLOOR).astype(np.int8)
    return cells.tolist()


def apply_smoothing(builder: LayoutBuilder, iterations: int) -> None:
    builder.grid = smooth(builder.grid, iterations)


def generate_cellular(builder: LayoutBuilder, rng: random.Random) -> None:
    """Grow an organic cave and turn its large open regions into rooms."""

    seed_noise(builder, rng)
    apply_smoothing(builder, CAVE_ITERATIONS)
    extract_rooms(builder, rng)


__all__ = [
    "INITIAL_FLOOR_CHANCE",
    "CAVE_ITERATIONS",
    "seed_noise",
    "count_wall_neighbours",
    "smooth",
    "apply_smoothing",
    "generate_cellular",
]
