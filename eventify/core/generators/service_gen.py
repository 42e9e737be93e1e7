from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

from eventify.core.config import EventifyConfig
from eventify.core.events.identifiers import (
    EventConstituents,
    Hook,
    Method,
    compose_event_identifiers,
)
from eventify.core.policy import PolicyFilter
from eventify.core.spec_schema import ModelDescriptor, SchemaDocument, python_type_for

from .descriptors import AccessorDescriptor, OperationDescriptor, ServiceDescriptor
from .emitter import PythonEmitter, SourceEmitter
from .writer import write_artifact

log = logging.getLogger("eventify.generator")

SERVICES_DIR = "services"


def _key(model: str, hook: Hook, method: Method, field: Optional[str] = None) -> str:
    return compose_event_identifiers(
        EventConstituents(model=model, field=field, hook=hook, method=method)
    ).camel_case


class ServiceWrapperBuilder:
    """
    Emits one instrumented service per allowed model.

    Services reference event keys by name only; they are composed with the
    same identifier rules as the catalog, which keeps the two in step.
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

    def describe(self, model: ModelDescriptor) -> ServiceDescriptor:
        operations = [
            OperationDescriptor(
                method=method,
                before_key=_key(model.name, Hook.BEFORE, method),
                after_key=_key(model.name, Hook.AFTER, method),
            )
            for method in Method
        ]
        accessors = [
            AccessorDescriptor(
                field=f.name,
                python_type=python_type_for(f.type),
                before_key=_key(model.name, Hook.BEFORE, Method.UPDATE, field=f.name),
                after_key=_key(model.name, Hook.AFTER, Method.UPDATE, field=f.name),
            )
            for f in model.fields
            if self.policy.field_allowed(model.name, f.name)
        ]
        return ServiceDescriptor(
            model=model.name,
            operations=operations,
            accessors=accessors,
            accessor_events=self.config.accessor_events,
            async_client=self.config.async_client,
            client_factory=self.config.client_factory,
        )

    def build_service_descriptors(self) -> List[ServiceDescriptor]:
        return [self.describe(m) for m in self.schema.models if self.policy.model_allowed(m.name)]

    def service_path(self, service: ServiceDescriptor) -> Path:
        return self.config.build_path(service.module_name + self.emitter.file_suffix, SERVICES_DIR)

    @property
    def index_path(self) -> Path:
        return self.config.build_path("__init__" + self.emitter.file_suffix, SERVICES_DIR)

    def render_bundle(self) -> Dict[str, str]:
        services = self.build_service_descriptors()
        files = {str(self.service_path(s)): self.emitter.render_service(s) for s in services}
        files[str(self.index_path)] = self.emitter.render_services_index(services)
        return files

    def remove_stale_services(self, services: List[ServiceDescriptor]) -> bool:
        """Delete service modules whose model is no longer generated."""
        services_dir = self.index_path.parent
        if not services_dir.is_dir():
            return True
        current = {self.service_path(s).name for s in services}
        ok = True
        for path in sorted(services_dir.glob("*_service" + self.emitter.file_suffix)):
            if path.name in current:
                continue
            try:
                path.unlink()
                log.info("Removed stale service %s", path)
            except OSError:
                log.exception("Failed to remove stale service %s", path)
                ok = False
        return ok

    def generate_bundle(self) -> bool:
        services = self.build_service_descriptors()

        # every write is attempted; no short-circuit on the first failure
        status = [self.remove_stale_services(services)]
        status += [
            write_artifact(
                self.service_path(s),
                lambda s=s: self.emitter.render_service(s),
                artifact="service",
            )
            for s in services
        ]
        status.append(
            write_artifact(
                self.index_path,
                lambda: self.emitter.render_services_index(services),
                artifact="services_index",
            )
        )
        return all(status)
