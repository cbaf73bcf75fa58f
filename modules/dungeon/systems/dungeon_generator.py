from __future__ import annotations

import logging
from typing import Callable, Mapping, Protocol

from core.event_bus import Topic
from modules.dungeon.events import DungeonGenerated, GenerateDungeon
from modules.dungeon.gen.params import GenerationParameters
from modules.dungeon.gen.validate import validate_layout
from modules.dungeon.generator import generate_dungeon
from modules.dungeon.layout import DungeonLayout


logger = logging.getLogger(__name__)


class _EventBus(Protocol):
    def subscribe(self, event_type: Topic, callback: Callable[..., None]) -> None:
        ...

    def publish(
        self, event_type: Topic, payload: Mapping[str, object] | None = None, /, **kwargs: object
    ) -> object:
        ...


def generate_validated_dungeon(params: GenerationParameters) -> tuple[DungeonLayout, list[str]]:
    """Generate a layout and return it with the validator findings."""

    layout = generate_dungeon(params)
    return layout, validate_layout(layout)


class DungeonGeneratorSystem:
    """Listen for :class:`GenerateDungeon` events and publish :class:`DungeonGenerated`."""

    def __init__(self, *, event_bus: _EventBus) -> None:
        self._bus = event_bus
        self._bus.subscribe(GenerateDungeon.topic, self._on_generate_requested)

    def _on_generate_requested(self, *, params: GenerationParameters, **_: object) -> None:
        try:
            layout, diagnostics = generate_validated_dungeon(params)
        except Exception:
            logger.exception(
                "Dungeon generation failed for params: bounds=%s algorithm=%s seed=%s",
                params.map_bounds,
                params.algorithm.value,
                params.seed,
            )
            raise
        for issue in diagnostics:
            logger.info("Dungeon diagnostics (seed=%s): %s", params.seed, issue)
        DungeonGenerated(layout=layout, diagnostics=tuple(diagnostics)).publish(self._bus)


__all__ = ["DungeonGeneratorSystem", "generate_validated_dungeon"]
