from .emitter import PythonEmitter, SourceEmitter
from .event_gen import EventCatalogBuilder
from .service_gen import ServiceWrapperBuilder

__all__ = ["PythonEmitter", "SourceEmitter", "EventCatalogBuilder", "ServiceWrapperBuilder"]
