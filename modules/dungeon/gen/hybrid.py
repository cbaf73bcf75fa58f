"""Hybrid generation: BSP structure roughened by cellular automata."""
from __future__ import annotations

import random

from modules.dungeon.gen.bsp import generate_bsp
from modules.dungeon.gen.cellular import apply_smoothing
from modules.dungeon.gen.connect import ensure_connectivity
from modules.dungeon.layout import LayoutBuilder


HYBRID_SMOOTHING_ITERATIONS = 2


def generate_hybrid(builder: LayoutBuilder, rng: random.Random) -> None:
    """Run BSP, smooth the result, then repair what smoothing eroded.

    Smoothing rounds off room corners and closes thin corridors, so room
    footprints and corridor bands are carved again before the room graph is
    checked for reachability.
    """

    generate_bsp(builder, rng)
    apply_smoothing(builder, HYBRID_SMOOTHING_ITERATIONS)
    builder.restamp()
    builder.connectivity_repairs += ensure_connectivity(builder)


__all__ = ["HYBRID_SMOOTHING_ITERATIONS", "generate_hybrid"]
