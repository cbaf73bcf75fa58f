"""Event definitions for procedural dungeon generation."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Protocol, runtime_checkable

from core.events.topics import EventTopic
from modules.dungeon.gen.params import GenerationParameters
from modules.dungeon.layout import DungeonLayout


GENERATE_DUNGEON = EventTopic.GENERATE_DUNGEON
"""Event topic requesting a procedural dungeon to be generated."""

DUNGEON_GENERATED = EventTopic.DUNGEON_GENERATED
"""Event topic emitted once a :class:`DungeonLayout` is available."""


@runtime_checkable
class _PublishesEvents(Protocol):
    """Protocol capturing the subset of the event bus used here."""

    def publish(self, event_type: str, **payload: object) -> None:
        """Publish an event to all subscribers."""


@dataclass(frozen=True, slots=True)
class GenerateDungeon:
    """Request procedural dungeon generation using ``params``."""

    params: GenerationParameters

    topic: ClassVar[str] = GENERATE_DUNGEON

    def publish(self, bus: _PublishesEvents) -> None:
        """Convenience helper mirroring ``EventBus.publish``."""

        bus.publish(self.topic, params=self.params)


@dataclass(frozen=True, slots=True)
class DungeonGenerated:
    """Notification containing the freshly generated layout."""

    layout: DungeonLayout
    diagnostics: tuple[str, ...] = field(default=())

    topic: ClassVar[str] = DUNGEON_GENERATED

    def publish(self, bus: _PublishesEvents) -> None:
        bus.publish(self.topic, layout=self.layout, diagnostics=list(self.diagnostics))


__all__ = [
    "GenerateDungeon",
    "DungeonGenerated",
    "GENERATE_DUNGEON",
    "DUNGEON_GENERATED",
]
