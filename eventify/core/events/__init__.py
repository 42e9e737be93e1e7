from .catalog import EventDescriptor, build_event_descriptors
from .identifiers import (
    MUTATING_METHODS,
    EventConstituents,
    EventIdentifiers,
    Hook,
    Method,
    compose_event_identifiers,
    decompose_event_identifier,
)

__all__ = [
    "EventDescriptor",
    "build_event_descriptors",
    "MUTATING_METHODS",
    "EventConstituents",
    "EventIdentifiers",
    "Hook",
    "Method",
    "compose_event_identifiers",
    "decompose_event_identifier",
]
