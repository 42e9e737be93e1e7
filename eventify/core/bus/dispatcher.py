from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Set, Tuple

from eventify.core.errors import DispatcherLoadError
from eventify.core.events.identifiers import (
    MUTATING_METHODS,
    EventConstituents,
    Hook,
    compose_event_identifiers,
    decompose_event_identifier,
)
from eventify.core.observability.metrics import inc_published
from eventify.core.policy import PolicyFilter
from eventify.core.spec_schema import SchemaDocument

from .definitions import EventDefinition, EventPayload, is_default_callback
from .transport import EventBus

log = logging.getLogger("eventify.dispatcher")


class DispatcherState(str, Enum):
    UNLOADED = "UNLOADED"
    LOADING = "LOADING"
    READY = "READY"
    FAILED = "FAILED"


_ALLOWED: Set[Tuple[DispatcherState, DispatcherState]] = {
    (DispatcherState.UNLOADED, DispatcherState.LOADING),
    (DispatcherState.LOADING, DispatcherState.READY),
    (DispatcherState.LOADING, DispatcherState.FAILED),
}


class EventDispatcher:
    """
    Runtime entry point for generated services.

    Catalog and callback table are injected and loaded once, in the
    constructor. A dispatcher that fails to load raises DispatcherLoadError
    and is never usable; there is no degraded mode.

    Publishing a mutating model-level event (create/update/delete) also
    publishes the matching field-level event of every allowed field of that
    model. Field events go out first, the model event last.
    """

    def __init__(
        self,
        catalog: Optional[Mapping[str, EventDefinition]],
        callbacks: Optional[Mapping[str, Optional[Callable[..., Any]]]],
        *,
        schema: SchemaDocument,
        policy: PolicyFilter,
        bus: Optional[EventBus] = None,
        context: Any = None,
        strict: bool = False,
    ):
        self.schema = schema
        self.policy = policy
        self.bus = bus if bus is not None else EventBus()
        self.context = context
        self.strict = strict

        self.state = DispatcherState.UNLOADED
        self.events: Dict[str, EventDefinition] = {}
        self.callbacks: Dict[str, Optional[Callable[..., Any]]] = {}
        self.subscribed: Dict[str, Callable[..., Any]] = {}

        self._load(catalog, callbacks)
        self.subscribe_config_events()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def _transition(self, dst: DispatcherState) -> None:
        if (self.state, dst) not in _ALLOWED:
            raise ValueError(f"Illegal transition: {self.state.value} -> {dst.value}")
        self.state = dst

    def _fail(self, message: str) -> None:
        self._transition(DispatcherState.FAILED)
        log.error(message)
        raise DispatcherLoadError(message)

    def _load(self, catalog, callbacks) -> None:
        self._transition(DispatcherState.LOADING)

        if not catalog:
            self._fail("An error occurred while trying to retrieve generated events.")
        if not callbacks:
            self._fail("An error occurred while trying to retrieve the eventify config.")

        if self.strict:
            missing = [k for k in catalog if k not in callbacks]
            unknown = [k for k in callbacks if k not in catalog]
            if missing or unknown:
                self._fail(
                    f"Config drifted from the event catalog: "
                    f"{len(missing)} missing key(s) {missing[:5]}, {len(unknown)} unknown key(s) {unknown[:5]}"
                )

        self.events = dict(catalog)
        self.callbacks = dict(callbacks)
        self._transition(DispatcherState.READY)
        log.info("Dispatcher ready with %d events and %d config entries", len(self.events), len(self.callbacks))

    @property
    def ready(self) -> bool:
        return self.state == DispatcherState.READY

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------
    def subscribe_config_events(self) -> int:
        """
        Subscribe every user callback to its event topic, in catalog order.

        Entries left as None or as the generated no-op are skipped; so are
        keys that no longer exist in the catalog.
        """
        for key in self.callbacks:
            if key not in self.events:
                log.warning("Config entry %s has no matching event in the catalog; skipped", key)

        count = 0
        for key, definition in self.events.items():
            if key in self.subscribed:
                continue
            callback = self.callbacks.get(key)
            if is_default_callback(callback):
                continue
            handler = _adapt_callback(definition, callback)
            self.bus.subscribe(definition.event_type, handler)
            self.subscribed[key] = callback
            count += 1
        log.debug("Subscribed %d config callbacks", count)
        return count

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------
    def publish_event(self, event: str, meta: Optional[Mapping[str, Any]] = None) -> bool:
        """
        Publish an event by its catalog key (camelCase).

        Returns False when the key is unknown or its model is excluded by
        policy; neither case raises.
        """
        definition = self.events.get(event)
        if definition is None:
            log.debug("Unknown event %s; skipped", event)
            return False

        constituents = decompose_event_identifier(definition.event_type)
        model = self.schema.get_model(constituents.model)
        model_name = model.name if model is not None else constituents.model

        if not self.policy.model_allowed(model_name):
            log.debug("Event %s suppressed by policy", event)
            return False

        payload = self._payload(meta)

        if model is not None and not constituents.is_field_level and constituents.method in MUTATING_METHODS:
            for f in model.fields:
                if not self.policy.field_allowed(model_name, f.name):
                    continue
                field_key = compose_event_identifiers(
                    EventConstituents(
                        model=model_name,
                        field=f.name,
                        hook=constituents.hook,
                        method=constituents.method,
                    )
                ).camel_case
                field_definition = self.events.get(field_key)
                if field_definition is not None:
                    self._emit(field_definition, payload)

        self._emit(definition, payload)
        return True

    def _payload(self, meta: Optional[Mapping[str, Any]]) -> EventPayload:
        meta = meta or {}
        ctx = meta.get("ctx", None)
        return EventPayload(
            args=meta.get("args"),
            ctx=ctx if ctx is not None else self.context,
            client=meta.get("client"),
            result=meta.get("result"),
        )

    def _emit(self, definition: EventDefinition, payload: EventPayload) -> None:
        self.bus.publish(definition.event_type, payload)
        inc_published(definition.event_type)


def _adapt_callback(definition: EventDefinition, callback: Callable[..., Any]) -> Callable[[str, EventPayload], None]:
    """Unpack the bus payload into the hook-specific callback signature."""
    hook = decompose_event_identifier(definition.event_type).hook

    if hook == Hook.AFTER:
        def _after(_topic: str, payload: EventPayload) -> None:
            callback(payload.args, payload.ctx, payload.client, payload.result)

        return _after

    def _before(_topic: str, payload: EventPayload) -> None:
        # Return values of before-hooks are not applied to the pending call.
        callback(payload.args, payload.ctx, payload.client)

    return _before
