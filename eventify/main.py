from __future__ import annotations

import logging
from typing import Any, List, Optional

from eventify.core.bus.dispatcher import EventDispatcher
from eventify.core.bus.loader import load_config_table, load_event_catalog
from eventify.core.bus.transport import EventBus
from eventify.core.config import EventifyConfig
from eventify.core.errors import GenerationError
from eventify.core.generators import EventCatalogBuilder, ServiceWrapperBuilder
from eventify.core.generators.emitter import SourceEmitter
from eventify.core.generators.event_gen import CONFIG_FILE, EVENTS_FILE
from eventify.core.policy import PolicyFilter
from eventify.core.spec_schema import SchemaDocument

log = logging.getLogger("eventify.generator")


def run_generation(
    schema: SchemaDocument,
    config: EventifyConfig,
    *,
    standalone: bool = False,
    emitter: Optional[SourceEmitter] = None,
) -> Optional[EventDispatcher]:
    """
    Generate the full bundle (services + catalog artifacts).

    Raises GenerationError if any bundle reported a failure. With
    standalone=True the freshly written bundle is loaded into a dispatcher.
    """
    policy = PolicyFilter.from_config(config)
    generators: List[Any] = [
        ServiceWrapperBuilder(schema, config, emitter=emitter, policy=policy),
        EventCatalogBuilder(schema, config, emitter=emitter, policy=policy),
    ]
    status = [g.generate_bundle() for g in generators]
    if False in status:
        raise GenerationError("Something went wrong while trying to generate the eventify bundle.")

    log.info("Generated eventify bundle in %s", config.out_path)
    if standalone:
        return get_dispatcher(schema, config)
    return None


def get_dispatcher(
    schema: SchemaDocument,
    config: EventifyConfig,
    *,
    bus: Optional[EventBus] = None,
    context: Any = None,
    strict: bool = False,
) -> EventDispatcher:
    """Load a generated bundle from config.out_dir and wire its callbacks."""
    catalog = load_event_catalog(config.build_path(f"{EVENTS_FILE}.py"))
    callbacks = load_config_table(config.build_path(f"{CONFIG_FILE}.py"))
    return EventDispatcher(
        catalog,
        callbacks,
        schema=schema,
        policy=PolicyFilter.from_config(config),
        bus=bus,
        context=context,
        strict=strict,
    )
