from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from eventify.core.events.identifiers import Method


def snake_case(name: str) -> str:
    s = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s).lower()


@dataclass(frozen=True)
class OperationDescriptor:
    method: Method
    before_key: str
    after_key: str

    @property
    def name(self) -> str:
        return self.method.client_name

    @property
    def client_name(self) -> str:
        return self.method.client_name


@dataclass(frozen=True)
class AccessorDescriptor:
    field: str
    python_type: str
    before_key: str
    after_key: str

    @property
    def getter(self) -> str:
        return f"get_{snake_case(self.field)}"

    @property
    def setter(self) -> str:
        return f"set_{snake_case(self.field)}"


@dataclass(frozen=True)
class ServiceDescriptor:
    model: str
    operations: List[OperationDescriptor] = field(default_factory=list)
    accessors: List[AccessorDescriptor] = field(default_factory=list)
    accessor_events: bool = True
    async_client: bool = False
    client_factory: Optional[str] = None

    @property
    def class_name(self) -> str:
        return f"{self.model[:1].upper()}{self.model[1:]}Service"

    @property
    def module_name(self) -> str:
        return f"{self.model.lower()}_service"

    @property
    def delegate(self) -> str:
        """Attribute of the data client that owns this model's CRUD methods."""
        return self.model.lower()

    @property
    def factory_import(self) -> Optional[Tuple[str, str]]:
        if not self.client_factory:
            return None
        module, attr = self.client_factory.split(":", 1)
        return module, attr

    @property
    def uses_datetime(self) -> bool:
        return any(a.python_type == "datetime" for a in self.accessors)
