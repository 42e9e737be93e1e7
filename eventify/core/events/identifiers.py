from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class Method(str, Enum):
    FIND_MANY = "findMany"
    FIND_UNIQUE = "findUnique"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"

    @property
    def client_name(self) -> str:
        """Attribute name on the data client delegate (prisma-client-py style)."""
        return _CLIENT_NAMES[self]


_CLIENT_NAMES = {
    Method.FIND_MANY: "find_many",
    Method.FIND_UNIQUE: "find_unique",
    Method.CREATE: "create",
    Method.UPDATE: "update",
    Method.DELETE: "delete",
}

MUTATING_METHODS: Tuple[Method, ...] = (Method.CREATE, Method.UPDATE, Method.DELETE)


class Hook(str, Enum):
    BEFORE = "before"
    AFTER = "after"


@dataclass(frozen=True)
class EventConstituents:
    model: str
    field: Optional[str] = None
    hook: Optional[Union[Hook, str]] = None
    method: Optional[Union[Method, str]] = None

    @property
    def is_field_level(self) -> bool:
        return bool(self.field)


@dataclass(frozen=True)
class EventIdentifiers:
    dot_case: str
    camel_case: str


def capitalize(value: str) -> str:
    return f"{value[:1].upper()}{value[1:]}"


def _token(part: Optional[Union[Enum, str]]) -> str:
    if part is None:
        return ""
    return part.value if isinstance(part, Enum) else str(part)


def compose_event_identifiers(constituents: EventConstituents) -> EventIdentifiers:
    """
    Build both canonical names for an event.

    Absent parts are skipped entirely, so a model-level event reads
    ``user.before.create`` / ``UserBeforeCreate``.
    """
    parts = [
        _token(constituents.field),
        _token(constituents.hook),
        _token(constituents.method),
    ]
    present = [p for p in parts if p]

    dot_case = ".".join([constituents.model.lower(), *present])
    camel_case = capitalize(constituents.model) + "".join(capitalize(p) for p in present)
    return EventIdentifiers(dot_case=dot_case, camel_case=camel_case)


def _coerce(enum_cls, raw: Optional[str]):
    if raw is None:
        return None
    try:
        return enum_cls(raw)
    except ValueError:
        return raw


def decompose_event_identifier(dot_case: str) -> EventConstituents:
    """
    Split a dotCase key back into its constituents.

    The grammar is positional: three segments or fewer are read as
    ``model.hook.method``, four or more as ``model.field.hook.method``.
    Malformed input never raises; an empty key yields an empty model.
    """
    chunks = (dot_case or "").split(".")

    def at(i: int) -> Optional[str]:
        return chunks[i] if i < len(chunks) and chunks[i] != "" else None

    if len(chunks) <= 3:
        return EventConstituents(
            model=chunks[0],
            hook=_coerce(Hook, at(1)),
            method=_coerce(Method, at(2)),
        )
    return EventConstituents(
        model=chunks[0],
        field=at(1),
        hook=_coerce(Hook, at(2)),
        method=_coerce(Method, at(3)),
    )
