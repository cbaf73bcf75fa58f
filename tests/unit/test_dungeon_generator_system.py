from __future__ import annotations

from collections import defaultdict

import pytest

from core.event_bus import EventBus
from core.events.topics import EventTopic
from modules.dungeon.events import DungeonGenerated, GenerateDungeon
from modules.dungeon.gen.params import AlgorithmType, GenerationParameters
from modules.dungeon.generator import EmptyLayoutError
from modules.dungeon.layout import DungeonLayout
from modules.dungeon.systems.dungeon_generator import DungeonGeneratorSystem


class _DummyBus:
    def __init__(self) -> None:
        self.subscribers = defaultdict(list)
        self.published: list[tuple[str, dict[str, object]]] = []

    def subscribe(self, event_type: str, callback) -> None:
        self.subscribers[event_type].append(callback)

    def publish(self, event_type: str, **payload: object) -> None:
        self.published.append((event_type, payload))
        for callback in self.subscribers.get(event_type, []):
            callback(**payload)


def test_dungeon_generator_system_emits_dungeon_generated_event():
    bus = _DummyBus()
    DungeonGeneratorSystem(event_bus=bus)

    params = GenerationParameters(map_bounds=(40, 30), min_rooms=1, seed=7)
    for callback in bus.subscribers[GenerateDungeon.topic]:
        callback(params=params)

    generated_events = [payload for event, payload in bus.published if event == DungeonGenerated.topic]
    assert generated_events, "Expected a DungeonGenerated event"
    layout = generated_events[-1]["layout"]
    assert isinstance(layout, DungeonLayout)
    assert layout.parameters == params
    assert generated_events[-1]["diagnostics"] == []


def test_system_works_with_the_real_event_bus():
    bus = EventBus()
    DungeonGeneratorSystem(event_bus=bus)
    received = []
    bus.subscribe(EventTopic.DUNGEON_GENERATED, lambda **payload: received.append(payload))

    GenerateDungeon(params=GenerationParameters(map_bounds=(30, 30), seed=3)).publish(bus)

    assert len(received) == 1
    assert isinstance(received[0]["layout"], DungeonLayout)
    assert isinstance(received[0]["diagnostics"], list)


def test_generation_failures_are_logged_and_reraised(caplog):
    bus = _DummyBus()
    DungeonGeneratorSystem(event_bus=bus)
    params = GenerationParameters(
        map_bounds=(6, 6),
        min_rooms=1,
        min_room_size=(5, 5),
        max_room_size=(5, 5),
        algorithm=AlgorithmType.ROOM_FIRST_GROWTH,
    )
    with pytest.raises(EmptyLayoutError):
        GenerateDungeon(params=params).publish(bus)
    assert "Dungeon generation failed" in caplog.text
    assert not [event for event, _ in bus.published if event == DungeonGenerated.topic]


def test_event_bus_subscription_management():
    bus = EventBus()
    calls = []

    def handler(**payload):
        calls.append(payload)

    bus.subscribe("custom", handler)
    bus.subscribe("custom", handler)
    assert bus.get_subscribers("custom") == (handler,)
    assert bus.publish("custom", {"a": 1}, a=2, b=3) == 1
    assert calls == [{"a": 2, "b": 3}]
    bus.unsubscribe("custom", handler)
    bus.unsubscribe("custom", handler)
    assert bus.get_subscribers("custom") == ()


def test_event_bus_lets_callbacks_unsubscribe_while_notified():
    bus = EventBus()
    calls = []

    def once(**payload):
        calls.append("once")
        bus.unsubscribe(EventTopic.DUNGEON_GENERATED, once)

    def always(**payload):
        calls.append("always")

    bus.subscribe(EventTopic.DUNGEON_GENERATED, once)
    bus.subscribe("DungeonGenerated", always)
    assert bus.publish(EventTopic.DUNGEON_GENERATED) == 2
    assert bus.publish("DungeonGenerated") == 1
    assert calls == ["once", "always", "always"]
