"""Synchronous topic dispatcher linking generation requests to layout consumers."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Sequence

from core.events.topics import EventTopic

__all__ = ["EventBus", "Subscriber", "Topic"]

logger = logging.getLogger(__name__)

Topic = str | EventTopic
Subscriber = Callable[..., None]


def topic_key(topic: Topic) -> str:
    """Map an :class:`EventTopic` member or a raw string onto its wire name."""

    if isinstance(topic, EventTopic):
        return topic.value
    return str(topic)


class EventBus:
    """Dispatch keyword payloads to the callbacks registered for a topic.

    ``publish(topic, payload, **extra)`` merges ``extra`` over ``payload``.
    Callbacks run in subscription order on the caller's thread; an exception
    raised by one of them propagates to the publisher.
    """

    def __init__(self) -> None:
        self._routes: Dict[str, list[Subscriber]] = {}

    def subscribe(self, topic: Topic, callback: Subscriber) -> None:
        """Add ``callback`` to ``topic``; subscribing twice is a no-op."""

        route = self._routes.setdefault(topic_key(topic), [])
        if callback not in route:
            route.append(callback)

    def unsubscribe(self, topic: Topic, callback: Subscriber) -> None:
        key = topic_key(topic)
        route = self._routes.get(key, [])
        if callback in route:
            route.remove(callback)
        if not route:
            self._routes.pop(key, None)

    def publish(
        self,
        topic: Topic,
        payload: Mapping[str, Any] | None = None,
        /,
        **extra: Any,
    ) -> int:
        """Deliver the merged payload and return how many callbacks received it."""

        key = topic_key(topic)
        message: Dict[str, Any] = {**(payload or {}), **extra}
        # Copy so callbacks may unsubscribe while being notified.
        route = tuple(self._routes.get(key, ()))
        logger.debug("Publishing %s to %d subscriber(s)", key, len(route))
        for callback in route:
            callback(**message)
        return len(route)

    def get_subscribers(self, topic: Topic) -> Sequence[Subscriber]:
        return tuple(self._routes.get(topic_key(topic), ()))
