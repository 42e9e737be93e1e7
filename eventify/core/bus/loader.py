from __future__ import annotations

import hashlib
import importlib.util
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from eventify.core.errors import DispatcherLoadError

from .definitions import EventDefinition


def load_module(module_path: Path):
    module_path = Path(module_path).resolve()
    if not module_path.exists():
        raise DispatcherLoadError(f"Generated module not found: {module_path}")

    # module name must be deterministic across interpreter restarts
    path_key = str(module_path).replace("\\", "/").lower().encode("utf-8")
    path_hash = hashlib.sha1(path_key).hexdigest()[:16]
    module_name = f"eventify_generated_{module_path.stem}_{path_hash}"

    spec = importlib.util.spec_from_file_location(module_name, str(module_path))
    if spec is None or spec.loader is None:
        raise DispatcherLoadError(f"Cannot create module spec for {module_path}")

    mod = importlib.util.module_from_spec(spec)

    # register the module BEFORE exec_module (dataclasses needs this)
    sys.modules[module_name] = mod
    try:
        spec.loader.exec_module(mod)  # type: ignore[attr-defined]
    except Exception as exc:
        sys.modules.pop(module_name, None)
        raise DispatcherLoadError(f"Failed to import {module_path}: {exc}") from exc
    return mod


def load_event_catalog(module_path: Path) -> Dict[str, EventDefinition]:
    """Every module-level EventDefinition, in declaration order."""
    mod = load_module(module_path)
    catalog = {
        name: value
        for name, value in vars(mod).items()
        if isinstance(value, EventDefinition)
    }
    if not catalog:
        raise DispatcherLoadError(f"No event definitions found in {module_path}")
    return catalog


def load_config_table(module_path: Path, symbol: str = "config") -> Dict[str, Optional[Callable[..., Any]]]:
    mod = load_module(module_path)
    table = getattr(mod, symbol, None)
    if not isinstance(table, dict) or not table:
        raise DispatcherLoadError(f"{module_path} must export a non-empty '{symbol}' mapping")
    return dict(table)
