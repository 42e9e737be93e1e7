"""
Schema provider adapters.

Accepts either a YAML/JSON document:

    models:
      - name: User
        fields:
          - {name: id, type: Int}
          - {name: email, type: String}

or a Prisma datamodel (``*.prisma``), from which only model names and
field name/type pairs are taken. Relations, attributes and enums are passed
through opaquely or ignored.
"""
from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import ValidationError

from eventify.core.errors import SchemaLoadError
from eventify.core.spec_schema import FieldDescriptor, ModelDescriptor, SchemaDocument

_log = logging.getLogger("eventify.schema")

_MODEL_BLOCK = re.compile(r"^\s*model\s+(\w+)\s*\{(.*?)^\s*\}", re.MULTILINE | re.DOTALL)


def parse_prisma_datamodel(text: str) -> SchemaDocument:
    models: List[ModelDescriptor] = []
    for match in _MODEL_BLOCK.finditer(text or ""):
        name, body = match.group(1), match.group(2)
        fields: List[FieldDescriptor] = []
        for raw in body.splitlines():
            line = raw.split("//", 1)[0].strip()
            if not line or line.startswith("@@"):
                continue
            parts = line.split()
            if len(parts) < 2:
                continue
            field_type = parts[1].rstrip("?").replace("[]", "")
            fields.append(FieldDescriptor(name=parts[0], type=field_type))
        models.append(ModelDescriptor(name=name, fields=fields))
    return SchemaDocument(models=models)


def schema_from_dict(data: Dict[str, Any]) -> SchemaDocument:
    try:
        return SchemaDocument.model_validate(data)
    except ValidationError as exc:
        raise SchemaLoadError(f"Invalid schema document: {exc}") from exc


def load_schema(path: Path) -> SchemaDocument:
    path = Path(path)
    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaLoadError(f"Cannot read schema file {path}: {exc}") from exc

    if path.suffix == ".prisma":
        schema = parse_prisma_datamodel(raw_text)
    else:
        try:
            data = json.loads(raw_text)
        except json.JSONDecodeError:
            try:
                data = yaml.safe_load(raw_text)
            except yaml.YAMLError as exc:
                raise SchemaLoadError(f"Failed to parse schema file {path} as JSON or YAML: {exc}") from exc
        if not isinstance(data, dict):
            raise SchemaLoadError(f"Schema file {path} must contain a mapping, got {type(data).__name__}")
        schema = schema_from_dict(data)

    _log.info("Loaded %d models from %s", len(schema.models), path)
    return schema
