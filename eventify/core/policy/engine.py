from __future__ import annotations

from typing import FrozenSet, Iterable

from eventify.core.config import EventifyConfig


class PolicyFilter:
    """
    Inclusion rules for models and fields.

    Exclusion entries are case-folded once. A field entry containing a dot
    ("user.password") only applies to that model; a bare entry ("id")
    applies to every model.
    """

    def __init__(self, excluded_models: Iterable[str] = (), excluded_fields: Iterable[str] = ()):
        self._models: FrozenSet[str] = frozenset(m.strip().lower() for m in excluded_models if m and m.strip())

        bare = set()
        qualified = set()
        for entry in excluded_fields:
            if not entry or not entry.strip():
                continue
            entry = entry.strip().lower()
            if "." in entry:
                qualified.add(entry)
            else:
                bare.add(entry)
        self._bare_fields: FrozenSet[str] = frozenset(bare)
        self._qualified_fields: FrozenSet[str] = frozenset(qualified)

    @classmethod
    def from_config(cls, config: EventifyConfig) -> "PolicyFilter":
        return cls(config.exclude_models, config.exclude_fields)

    def model_allowed(self, model: str) -> bool:
        return model.lower() not in self._models

    def field_allowed(self, model: str, field: str) -> bool:
        f = field.lower()
        if f in self._bare_fields:
            return False
        return f"{model.lower()}.{f}" not in self._qualified_fields
