from .definitions import EventDefinition, EventPayload, create_event_definition, noop
from .dispatcher import DispatcherState, EventDispatcher
from .loader import load_config_table, load_event_catalog
from .transport import EventBus

__all__ = [
    "EventDefinition",
    "EventPayload",
    "create_event_definition",
    "noop",
    "DispatcherState",
    "EventDispatcher",
    "load_config_table",
    "load_event_catalog",
    "EventBus",
]
