"""
Runtime types imported by generated catalogs, config stubs and services.

A generated ``events.py`` declares one ``EventDefinition`` per event:

    UserBeforeCreate = create_event_definition("user.before.create", client_method="user.create")
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class EventDefinition:
    event_type: str
    client_method: str = ""
    has_result: bool = False


@dataclass
class EventPayload:
    args: Any
    ctx: Any = None
    client: Any = None
    result: Any = None


def create_event_definition(event_type: str, *, client_method: str = "", has_result: bool = False) -> EventDefinition:
    return EventDefinition(event_type=event_type, client_method=client_method, has_result=has_result)


def noop(*_args: Any) -> None:
    """Default callback seeded into config stubs; never subscribed."""
    return None


noop.__eventify_default__ = True  # type: ignore[attr-defined]


def is_default_callback(callback: Any) -> bool:
    return callback is None or bool(getattr(callback, "__eventify_default__", False))


def read_field(record: Any, field: str) -> Any:
    """Field value from a client record (mapping or object), or None if absent."""
    if record is None:
        return None
    if isinstance(record, dict):
        return record.get(field)
    return getattr(record, field, None)
