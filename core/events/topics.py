"""Canonical registry of event bus topics used by the dungeon systems.

Each entry is declared as a :class:`~enum.Enum` member and documents the
producer, the intended consumers and the payload guarantees for the associated
event.  Importing modules should rely on the enum members (e.g.
``topics.EventTopic.DUNGEON_GENERATED``) to avoid drifting topic names.
"""

from __future__ import annotations

from enum import Enum

__all__ = ["EventTopic"]


class EventTopic(str, Enum):
    """Enumeration of every topic published on the event bus."""

    GENERATE_DUNGEON = "GenerateDungeon"
    """Published by hosts (level loaders, tools) to request a new dungeon.

    Subscribers: :class:`modules.dungeon.systems.dungeon_generator.DungeonGeneratorSystem`.
    Guarantees: provides ``params`` as a ``GenerationParameters`` instance.
    """

    DUNGEON_GENERATED = "DungeonGenerated"
    """Published by the dungeon generator system once a layout is ready.

    Subscribers: tile renderers, trap and light placers, diagnostics sinks.
    Guarantees: carries the immutable ``layout`` and the validator
    ``diagnostics`` list (empty when nothing was found).
    """
