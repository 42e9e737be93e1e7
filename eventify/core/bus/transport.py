from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, DefaultDict, List

Handler = Callable[[str, Any], None]


class EventBus:
    """Synchronous in-process pub/sub keyed by event topic (the dotCase key)."""

    def __init__(self) -> None:
        self._subscribers: DefaultDict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, topic: str, handler: Handler) -> None:
        if not isinstance(topic, str) or not topic.strip():
            raise ValueError("topic must be a non-empty string.")
        self._subscribers[topic].append(handler)

    def publish(self, topic: str, payload: Any) -> int:
        """Call every handler before returning; returns how many ran."""
        handlers = list(self._subscribers.get(topic, []))
        for handler in handlers:
            handler(topic, payload)
        return len(handlers)

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, []))
