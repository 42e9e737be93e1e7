from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from eventify.core.config import EventifyConfig
from eventify.core.events.catalog import EventDescriptor, build_event_descriptors
from eventify.core.policy import PolicyFilter
from eventify.core.spec_schema import SchemaDocument

from .emitter import PythonEmitter, SourceEmitter
from .writer import write_artifact

EVENTS_FILE = "events"
CONFIG_FILE = "eventify_config"
CONFIG_TYPES_FILE = "config_types"
PACKAGE_MARKER = "__init__"


class EventCatalogBuilder:
    """
    Emits the events registry, the config stub and the config types.

    All three render from one descriptor list, so their key sets match.
    The config stub is seeded once and never overwritten afterwards.
    """

    def __init__(
        self,
        schema: SchemaDocument,
        config: EventifyConfig,
        emitter: Optional[SourceEmitter] = None,
        policy: Optional[PolicyFilter] = None,
    ):
        self.schema = schema
        self.config = config
        self.emitter = emitter or PythonEmitter()
        self.policy = policy or PolicyFilter.from_config(config)
        self._events: Optional[List[EventDescriptor]] = None

    @property
    def events(self) -> List[EventDescriptor]:
        if self._events is None:
            self._events = build_event_descriptors(self.schema, self.policy)
        return self._events

    def _path(self, stem: str) -> Path:
        return self.config.build_path(stem + self.emitter.file_suffix)

    @property
    def events_path(self) -> Path:
        return self._path(EVENTS_FILE)

    @property
    def config_path(self) -> Path:
        return self._path(CONFIG_FILE)

    @property
    def config_types_path(self) -> Path:
        return self._path(CONFIG_TYPES_FILE)

    def render_events(self) -> str:
        models = [m.name for m in self.schema.models if self.policy.model_allowed(m.name)]
        return self.emitter.render_events(self.events, models)

    def render_config(self) -> str:
        return self.emitter.render_config(self.events)

    def render_config_types(self) -> str:
        return self.emitter.render_config_types(self.events)

    def render_bundle(self) -> Dict[str, str]:
        """
        Returns:
          {"<out_dir>/events.py": "<code>", ...}
        """
        return {
            str(self.events_path): self.render_events(),
            str(self.config_path): self.render_config(),
            str(self.config_types_path): self.render_config_types(),
        }

    # ------------------------------------------------------------------
    # Writers (each one independent; none raises)
    # ------------------------------------------------------------------
    def generate_events_bundle(self) -> bool:
        marker = write_artifact(
            self._path(PACKAGE_MARKER), lambda: "", artifact="package", overwrite=False
        )
        events = write_artifact(self.events_path, self.render_events, artifact="events")
        return marker and events

    def generate_events_configuration(self) -> bool:
        return write_artifact(self.config_path, self.render_config, artifact="config", overwrite=False)

    def generate_events_configuration_types(self) -> bool:
        return write_artifact(self.config_types_path, self.render_config_types, artifact="config_types")

    def generate_bundle(self) -> bool:
        status = [
            self.generate_events_bundle(),
            self.generate_events_configuration(),
            self.generate_events_configuration_types(),
        ]
        return all(status)
