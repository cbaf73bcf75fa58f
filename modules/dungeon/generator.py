"""Orchestration of a full dungeon generation run.

A run is a fixed sequence of phases sharing one seeded RNG and one
:class:`~modules.dungeon.layout.LayoutBuilder`.  :func:`iter_generation`
yields after each phase so hosts can interleave generation with other work or
cancel between phases; :func:`generate_dungeon` simply drains it.
"""
from __future__ import annotations

import logging
import random
from typing import Callable, Generator, Iterator, Optional

from modules.dungeon.gen.bsp import generate_bsp
from modules.dungeon.gen.cellular import generate_cellular
from modules.dungeon.gen.connect import connect_all_rooms
from modules.dungeon.gen.hybrid import generate_hybrid
from modules.dungeon.gen.maze import generate_maze
from modules.dungeon.gen.params import AlgorithmType, GenerationParameters
from modules.dungeon.gen.postprocess import (
    assign_special_rooms,
    compute_critical_path,
    inject_loops,
    mark_doors,
    remove_dead_ends,
    reverify_connectivity,
    warn_soft_limits,
)
from modules.dungeon.gen.random import get_rng
from modules.dungeon.gen.room_first import generate_room_first
from modules.dungeon.gen.validate import validate_layout
from modules.dungeon.layout import DungeonLayout, LayoutBuilder
from utils.logger import log_calls


logger = logging.getLogger(__name__)


class DungeonGenerationError(RuntimeError):
    """Base class for failures that abort a generation run."""


class EmptyLayoutError(DungeonGenerationError):
    """Raised when the primary algorithm produced no room at all."""


class GenerationCancelled(DungeonGenerationError):
    """Raised when a run is cancelled between two phases."""


PrimaryAlgorithm = Callable[[LayoutBuilder, random.Random], object]

ALGORITHMS: dict[AlgorithmType, PrimaryAlgorithm] = {
    AlgorithmType.BSP: generate_bsp,
    AlgorithmType.CELLULAR_AUTOMATA: generate_cellular,
    AlgorithmType.ROOM_FIRST_GROWTH: generate_room_first,
    AlgorithmType.CORRIDOR_FIRST_MAZE: generate_maze,
    AlgorithmType.HYBRID_APPROACH: generate_hybrid,
}

PHASE_PRIMARY = "primary"
PHASE_CONNECTION = "connection"
PHASE_SPECIAL_ROOMS = "special_rooms"
PHASE_CRITICAL_PATH = "critical_path"
PHASE_DEAD_ENDS = "dead_ends"
PHASE_LOOPS = "loops"
PHASE_CONNECTIVITY = "connectivity"
PHASE_DOORS = "doors"
PHASE_VALIDATION = "validation"

PHASES = (
    PHASE_PRIMARY,
    PHASE_CONNECTION,
    PHASE_SPECIAL_ROOMS,
    PHASE_CRITICAL_PATH,
    PHASE_DEAD_ENDS,
    PHASE_LOOPS,
    PHASE_CONNECTIVITY,
    PHASE_DOORS,
    PHASE_VALIDATION,
)


def _run_primary(builder: LayoutBuilder, rng: random.Random) -> None:
    params = builder.params
    ALGORITHMS[params.algorithm](builder, rng)
    if not builder.live_rooms():
        raise EmptyLayoutError(
            f"{params.algorithm.value} produced no rooms for map {params.width}x{params.height} (seed={params.seed})"
        )
    logger.debug(
        "Primary %s phase placed %s of %s requested rooms",
        params.algorithm.value,
        builder.placed_rooms,
        builder.requested_rooms,
    )


def _run_connection(builder: LayoutBuilder, rng: random.Random) -> None:
    created = connect_all_rooms(builder)
    if created:
        logger.debug("Joined disconnected room groups with %s corridor(s)", created)


def _run_special_rooms(builder: LayoutBuilder, rng: random.Random) -> None:
    assign_special_rooms(builder)


def _run_critical_path(builder: LayoutBuilder, rng: random.Random) -> None:
    compute_critical_path(builder)


def _run_dead_ends(builder: LayoutBuilder, rng: random.Random) -> None:
    if builder.params.remove_dead_ends:
        remove_dead_ends(builder)


def _run_loops(builder: LayoutBuilder, rng: random.Random) -> None:
    if builder.params.allow_loops:
        builder.loops_added += inject_loops(builder, rng)


def _run_connectivity(builder: LayoutBuilder, rng: random.Random) -> None:
    builder.connectivity_repairs += reverify_connectivity(builder)
    warn_soft_limits(builder)


def _run_doors(builder: LayoutBuilder, rng: random.Random) -> None:
    if builder.params.mark_doors:
        mark_doors(builder)


_BUILD_STEPS: tuple[tuple[str, Callable[[LayoutBuilder, random.Random], None]], ...] = (
    (PHASE_PRIMARY, _run_primary),
    (PHASE_CONNECTION, _run_connection),
    (PHASE_SPECIAL_ROOMS, _run_special_rooms),
    (PHASE_CRITICAL_PATH, _run_critical_path),
    (PHASE_DEAD_ENDS, _run_dead_ends),
    (PHASE_LOOPS, _run_loops),
    (PHASE_CONNECTIVITY, _run_connectivity),
    (PHASE_DOORS, _run_doors),
)


def _check_cancel(should_cancel: Optional[Callable[[], bool]], phase: str) -> None:
    if should_cancel is not None and should_cancel():
        logger.info("Dungeon generation cancelled before phase '%s'", phase)
        raise GenerationCancelled(f"generation cancelled before phase '{phase}'")


def iter_generation(
    params: GenerationParameters,
    *,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> Generator[str, None, DungeonLayout]:
    """Run the generation phases one at a time.

    Yields the name of every completed phase and returns the finished layout
    as the generator's return value.  ``should_cancel`` is polled before each
    phase; a truthy result raises :class:`GenerationCancelled`.
    """

    rng = get_rng(params.seed)
    builder = LayoutBuilder(params)
    for phase, step in _BUILD_STEPS:
        _check_cancel(should_cancel, phase)
        step(builder, rng)
        builder.phases.append(phase)
        yield phase

    _check_cancel(should_cancel, PHASE_VALIDATION)
    builder.phases.append(PHASE_VALIDATION)
    layout = builder.build()
    for issue in validate_layout(layout):
        logger.warning("Dungeon validation: %s", issue)
    yield PHASE_VALIDATION
    return layout


class DungeonGenerator:
    """Step-wise wrapper around :func:`iter_generation`.

    Iterate :meth:`steps` to drive the run; :attr:`layout` is populated once
    the final phase completes.
    """

    def __init__(
        self,
        params: GenerationParameters,
        *,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> None:
        self.params = params
        self.should_cancel = should_cancel
        self.layout: Optional[DungeonLayout] = None
        self.completed: list[str] = []

    def steps(self) -> Iterator[str]:
        self.layout = None
        self.completed = []
        layout = yield from self._track(iter_generation(self.params, should_cancel=self.should_cancel))
        self.layout = layout

    def _track(self, phases: Generator[str, None, DungeonLayout]) -> Generator[str, None, DungeonLayout]:
        while True:
            try:
                phase = next(phases)
            except StopIteration as stop:
                return stop.value
            self.completed.append(phase)
            yield phase

    def run(self) -> DungeonLayout:
        for _ in self.steps():
            pass
        if self.layout is None:
            raise DungeonGenerationError("generation finished without producing a layout")
        return self.layout


@log_calls
def generate_dungeon(params: GenerationParameters) -> DungeonLayout:
    """Generate a complete :class:`DungeonLayout` for ``params``."""

    return DungeonGenerator(params).run()


__all__ = [
    "ALGORITHMS",
    "PHASES",
    "DungeonGenerationError",
    "EmptyLayoutError",
    "GenerationCancelled",
    "DungeonGenerator",
    "iter_generation",
    "generate_dungeon",
]
