from __future__ import annotations


class EventifyError(Exception):
    """Base class for all eventify failures."""


class SchemaLoadError(EventifyError):
    pass


class GenerationError(EventifyError):
    """Raised by the pipeline when at least one artifact bundle failed."""


class DispatcherLoadError(EventifyError):
    """Fatal startup failure: the dispatcher never reaches READY."""


class ConfigLoadError(EventifyError):
    pass
