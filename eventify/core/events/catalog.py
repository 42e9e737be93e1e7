from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from eventify.core.policy import PolicyFilter
from eventify.core.spec_schema import ModelDescriptor, SchemaDocument

from .identifiers import (
    MUTATING_METHODS,
    EventConstituents,
    EventIdentifiers,
    Hook,
    Method,
    compose_event_identifiers,
)


@dataclass(frozen=True)
class EventDescriptor:
    constituents: EventConstituents
    identifiers: EventIdentifiers

    @property
    def key(self) -> str:
        return self.identifiers.camel_case

    @property
    def topic(self) -> str:
        return self.identifiers.dot_case

    @property
    def hook(self) -> Hook:
        return Hook(self.constituents.hook)

    @property
    def method(self) -> Method:
        return Method(self.constituents.method)

    @property
    def has_result(self) -> bool:
        return self.hook == Hook.AFTER

    @property
    def client_method(self) -> str:
        """Pass-through args type key: ``<model>.<method>``."""
        return f"{self.constituents.model.lower()}.{self.method.value}"


def _descriptor(model: str, hook: Hook, method: Method, field: Optional[str] = None) -> EventDescriptor:
    c = EventConstituents(model=model, field=field, hook=hook, method=method)
    return EventDescriptor(constituents=c, identifiers=compose_event_identifiers(c))


def model_event_descriptors(model: ModelDescriptor, policy: PolicyFilter) -> List[EventDescriptor]:
    """Model-level events first, then field-level events per allowed field."""
    out: List[EventDescriptor] = []
    for method in Method:
        for hook in Hook:
            out.append(_descriptor(model.name, hook, method))

    for f in model.fields:
        if not policy.field_allowed(model.name, f.name):
            continue
        for method in MUTATING_METHODS:
            for hook in Hook:
                out.append(_descriptor(model.name, hook, method, field=f.name))
    return out


def build_event_descriptors(schema: SchemaDocument, policy: PolicyFilter) -> List[EventDescriptor]:
    """
    Single enumeration pass shared by every catalog artifact.

    Events, config stub and config types are all rendered from this list,
    which is what keeps their key sets identical.
    """
    out: List[EventDescriptor] = []
    for model in schema.models:
        if not policy.model_allowed(model.name):
            continue
        out.extend(model_event_descriptors(model, policy))
    return out
