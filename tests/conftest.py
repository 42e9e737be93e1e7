from typing import Any, Dict, List

import pytest

from eventify.core.config import EventifyConfig
from eventify.core.observability.metrics import reset_metrics
from eventify.core.policy import PolicyFilter
from eventify.core.spec_schema import SchemaDocument


@pytest.fixture(autouse=True)
def _clean_metrics():
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture()
def user_schema() -> SchemaDocument:
    return SchemaDocument.model_validate(
        {
            "models": [
                {
                    "name": "User",
                    "fields": [
                        {"name": "id", "type": "Int"},
                        {"name": "email", "type": "String"},
                    ],
                }
            ]
        }
    )


@pytest.fixture()
def blog_schema() -> SchemaDocument:
    return SchemaDocument.model_validate(
        {
            "models": [
                {
                    "name": "User",
                    "fields": [
                        {"name": "id", "type": "Int"},
                        {"name": "email", "type": "String"},
                        {"name": "password", "type": "String"},
                    ],
                },
                {
                    "name": "Post",
                    "fields": [
                        {"name": "id", "type": "Int"},
                        {"name": "title", "type": "String"},
                        {"name": "published", "type": "Boolean"},
                        {"name": "createdAt", "type": "DateTime"},
                    ],
                },
                {"name": "Tag", "fields": []},
            ]
        }
    )


@pytest.fixture()
def config(tmp_path) -> EventifyConfig:
    return EventifyConfig(exclude_fields=["id"], out_dir=str(tmp_path / "bundle"))


@pytest.fixture()
def policy(config) -> PolicyFilter:
    return PolicyFilter.from_config(config)


class FakeDelegate:
    """Stands in for ``client.<model>`` with prisma-client-py style kwargs."""

    def __init__(self, trace: List[str]):
        self.trace = trace
        self.rows: Dict[Any, Dict[str, Any]] = {}
        self._next_id = 1

    def find_many(self, **kwargs):
        self.trace.append("client.find_many")
        return list(self.rows.values())

    def find_unique(self, where=None, **kwargs):
        self.trace.append("client.find_unique")
        return self.rows.get((where or {}).get("id"))

    def create(self, data=None, **kwargs):
        self.trace.append("client.create")
        row = {"id": self._next_id, **(data or {})}
        self.rows[self._next_id] = row
        self._next_id += 1
        return row

    def update(self, where=None, data=None, **kwargs):
        self.trace.append("client.update")
        row = self.rows.setdefault((where or {}).get("id"), {"id": (where or {}).get("id")})
        row.update(data or {})
        return row

    def delete(self, where=None, **kwargs):
        self.trace.append("client.delete")
        return self.rows.pop((where or {}).get("id"), None)


class FakeClient:
    def __init__(self, *models: str):
        self.trace: List[str] = []
        for m in models:
            setattr(self, m.lower(), FakeDelegate(self.trace))


@pytest.fixture()
def fake_client() -> FakeClient:
    return FakeClient("User", "Post", "Tag")
