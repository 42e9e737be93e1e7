"""
Generator configuration.

Config file format (YAML or JSON):
    excludeModels: [AuditLog]
    excludeFields: [id, user.password]
    outDir: ./eventify_bundle
    clientFactory: myapp.db:Prisma
    asyncClient: true

Environment variables:
    EVENTIFY_CONFIG_FILE — path to the config file (optional).
    EVENTIFY_OUT_DIR     — overrides outDir.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from eventify.core.errors import ConfigLoadError

_log = logging.getLogger("eventify.config")

DEFAULT_OUT_DIR = "./eventify_bundle"


class EventifyConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    exclude_models: List[str] = Field(default_factory=list, alias="excludeModels")
    exclude_fields: List[str] = Field(default_factory=list, alias="excludeFields")
    out_dir: str = Field(default=DEFAULT_OUT_DIR, alias="outDir")

    # Setters publish field-level update events around the write.
    accessor_events: bool = Field(default=True, alias="accessorEvents")

    # Data client methods are coroutines; services are emitted as async.
    async_client: bool = Field(default=False, alias="asyncClient")

    # "module:attr" of a zero-arg callable building the default data client.
    client_factory: Optional[str] = Field(default=None, alias="clientFactory")

    @field_validator("exclude_models", "exclude_fields", mode="before")
    @classmethod
    def _listify(cls, value: Any) -> List[str]:
        # A bare string means a single entry.
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return [str(v) for v in value]

    @field_validator("client_factory")
    @classmethod
    def _check_factory(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and ":" not in value:
            raise ValueError("client_factory must look like 'package.module:attr'")
        return value

    @property
    def out_path(self) -> Path:
        return Path(self.out_dir)

    def build_path(self, filename: str, subdir: str = "") -> Path:
        base = self.out_path / subdir if subdir else self.out_path
        return base / filename


def load_config(path: Optional[Path] = None) -> EventifyConfig:
    """
    Load config from a YAML or JSON file.

    With no path and no EVENTIFY_CONFIG_FILE the defaults are used. A path
    that is given but missing is an error; silently generating with an empty
    policy would emit events for excluded models.
    """
    resolved = _resolve_path(path)
    data: dict = {}

    if resolved is not None:
        if not resolved.exists():
            raise FileNotFoundError(f"eventify config not found: {resolved}")
        raw_text = resolved.read_text(encoding="utf-8")
        try:
            data = json.loads(raw_text)
        except json.JSONDecodeError:
            try:
                data = yaml.safe_load(raw_text) or {}
            except yaml.YAMLError as exc:
                raise ConfigLoadError(f"Failed to parse config file {resolved} as JSON or YAML: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigLoadError(f"Config file {resolved} must contain a mapping, got {type(data).__name__}")
        _log.info("Loaded eventify config from %s", resolved)

    env_out = os.getenv("EVENTIFY_OUT_DIR", "").strip()
    if env_out:
        data = {k: v for k, v in data.items() if k not in ("outDir", "out_dir")}
        data["out_dir"] = env_out

    return EventifyConfig.model_validate(data)


def _resolve_path(path: Optional[Path]) -> Optional[Path]:
    if path is not None:
        return Path(path)
    env_path = os.getenv("EVENTIFY_CONFIG_FILE", "").strip()
    if env_path:
        return Path(env_path)
    return None
