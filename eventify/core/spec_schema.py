from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


# Symbolic schema type tag -> Python annotation used in generated code.
PYTHON_TYPES = {
    "Int": "int",
    "Float": "float",
    "String": "str",
    "Boolean": "bool",
    "DateTime": "datetime",
}


def python_type_for(type_tag: str) -> str:
    return PYTHON_TYPES.get(type_tag, "Any")


class FieldDescriptor(BaseModel):
    name: str
    type: str = "String"


class ModelDescriptor(BaseModel):
    name: str
    fields: List[FieldDescriptor] = Field(default_factory=list)


class SchemaDocument(BaseModel):
    """
    Read-only data model handed to the generators and the dispatcher.

    Model order is the order given by the provider and is never sorted, so
    regenerated artifacts stay diffable.
    """

    models: List[ModelDescriptor] = Field(default_factory=list)

    def get_model(self, model: str) -> Optional[ModelDescriptor]:
        wanted = (model or "").lower()
        for m in self.models:
            if m.name.lower() == wanted:
                return m
        return None

    def get_model_fields(self, model: str) -> List[FieldDescriptor]:
        found = self.get_model(model)
        return list(found.fields) if found else []

    def get_model_field(self, model: str, field: str) -> Optional[FieldDescriptor]:
        wanted = (field or "").lower()
        for f in self.get_model_fields(model):
            if f.name.lower() == wanted:
                return f
        return None
