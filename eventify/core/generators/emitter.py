from __future__ import annotations

from pathlib import Path
from typing import List, Protocol, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from eventify.core.events.catalog import EventDescriptor

from .descriptors import ServiceDescriptor

PACKAGE_ROOT = Path(__file__).resolve().parents[2]
TEMPLATES_DIR = PACKAGE_ROOT / "templates"


class SourceEmitter(Protocol):
    """
    Target-language renderer for the generated bundle.

    Builders decide what to emit (names, shapes, ordering); emitters only
    turn descriptors into source text.
    """

    file_suffix: str

    def render_events(self, events: Sequence[EventDescriptor], models: List[str]) -> str:
        ...

    def render_config(self, events: Sequence[EventDescriptor]) -> str:
        ...

    def render_config_types(self, events: Sequence[EventDescriptor]) -> str:
        ...

    def render_service(self, service: ServiceDescriptor) -> str:
        ...

    def render_services_index(self, services: Sequence[ServiceDescriptor]) -> str:
        ...


class PythonEmitter:
    file_suffix = ".py"

    def __init__(self, templates_dir: Path = TEMPLATES_DIR):
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(enabled_extensions=()),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.env.filters["pyrepr"] = repr

    def _render(self, name: str, **kwargs) -> str:
        return self.env.get_template(f"python/{name}").render(**kwargs)

    def render_events(self, events: Sequence[EventDescriptor], models: List[str]) -> str:
        return self._render("events.py.j2", events=events, models=models)

    def render_config(self, events: Sequence[EventDescriptor]) -> str:
        return self._render("eventify_config.py.j2", events=events)

    def render_config_types(self, events: Sequence[EventDescriptor]) -> str:
        return self._render("config_types.py.j2", events=events)

    def render_service(self, service: ServiceDescriptor) -> str:
        return self._render("service.py.j2", s=service)

    def render_services_index(self, services: Sequence[ServiceDescriptor]) -> str:
        return self._render("services_init.py.j2", services=services)
