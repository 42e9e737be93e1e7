from __future__ import annotations

import ast
import asyncio
import inspect

import pytest

from eventify.core.bus.loader import load_module
from eventify.core.config import EventifyConfig
from eventify.core.generators.service_gen import ServiceWrapperBuilder


class RecordingDispatcher:
    def __init__(self, trace):
        self.trace = trace

    def publish_event(self, event, meta):
        self.trace.append(event)
        return True


def _load_service(builder, model):
    service = next(s for s in builder.build_service_descriptors() if s.model == model)
    return getattr(load_module(builder.service_path(service)), service.class_name)


def test_one_service_per_allowed_model(blog_schema, tmp_path):
    cfg = EventifyConfig(exclude_models=["tag"], out_dir=str(tmp_path))
    services = ServiceWrapperBuilder(blog_schema, cfg).build_service_descriptors()
    assert [s.class_name for s in services] == ["UserService", "PostService"]


def test_service_code_is_valid_python(blog_schema, config):
    files = ServiceWrapperBuilder(blog_schema, config).render_bundle()
    assert len(files) == 4
    for path, code in files.items():
        try:
            ast.parse(code)
        except SyntaxError as exc:
            pytest.fail(f"{path} is not valid Python: {exc}")


def test_accessors_follow_field_policy(blog_schema, tmp_path):
    cfg = EventifyConfig(exclude_fields=["id", "user.password"], out_dir=str(tmp_path))
    services = {s.model: s for s in ServiceWrapperBuilder(blog_schema, cfg).build_service_descriptors()}

    assert [a.getter for a in services["User"].accessors] == ["get_email"]
    assert [a.setter for a in services["Post"].accessors] == ["set_title", "set_published", "set_created_at"]
    assert services["Post"].uses_datetime
    # zero-field model: CRUD only
    assert services["Tag"].accessors == []
    assert [op.name for op in services["Tag"].operations] == ["find_many", "find_unique", "create", "update", "delete"]


def test_generated_crud_publishes_around_client_call(blog_schema, config, fake_client):
    builder = ServiceWrapperBuilder(blog_schema, config)
    assert builder.generate_bundle()

    UserService = _load_service(builder, "User")
    svc = UserService(RecordingDispatcher(fake_client.trace), fake_client)

    created = svc.create({"data": {"email": "a@b.c"}})
    assert created == {"id": 1, "email": "a@b.c"}
    assert fake_client.trace == ["UserBeforeCreate", "client.create", "UserAfterCreate"]


def test_generated_getter_and_setter(blog_schema, config, fake_client):
    builder = ServiceWrapperBuilder(blog_schema, config)
    assert builder.generate_bundle()

    UserService = _load_service(builder, "User")
    svc = UserService(RecordingDispatcher(fake_client.trace), fake_client)
    svc.create({"data": {"email": "old@x.io"}})
    fake_client.trace.clear()

    svc.set_email(1, "new@x.io")
    assert fake_client.trace == ["UserEmailBeforeUpdate", "client.update", "UserEmailAfterUpdate"]
    assert svc.get_email(1) == "new@x.io"
    assert svc.get_email(99) is None


def test_setters_without_accessor_events(blog_schema, tmp_path, fake_client):
    cfg = EventifyConfig(exclude_fields=["id"], out_dir=str(tmp_path), accessor_events=False)
    builder = ServiceWrapperBuilder(blog_schema, cfg)
    assert builder.generate_bundle()

    PostService = _load_service(builder, "Post")
    svc = PostService(RecordingDispatcher(fake_client.trace), fake_client)
    svc.set_title(3, "hello")
    assert fake_client.trace == ["client.update"]


def test_service_requires_client_without_factory(blog_schema, config):
    builder = ServiceWrapperBuilder(blog_schema, config)
    assert builder.generate_bundle()

    TagService = _load_service(builder, "Tag")
    with pytest.raises(ValueError):
        TagService(RecordingDispatcher([]))


def test_service_builds_default_client_from_factory(blog_schema, tmp_path):
    cfg = EventifyConfig(out_dir=str(tmp_path), client_factory="collections:OrderedDict")
    builder = ServiceWrapperBuilder(blog_schema, cfg)
    assert builder.generate_bundle()

    TagService = _load_service(builder, "Tag")
    svc = TagService(RecordingDispatcher([]))
    assert type(svc.client).__name__ == "OrderedDict"


def test_generate_bundle_reports_failed_write(blog_schema, config):
    builder = ServiceWrapperBuilder(blog_schema, config)
    post = next(s for s in builder.build_service_descriptors() if s.model == "Post")
    builder.service_path(post).mkdir(parents=True)

    assert builder.generate_bundle() is False
    # siblings still written
    for s in builder.build_service_descriptors():
        if s.model != "Post":
            assert builder.service_path(s).is_file()
    assert builder.index_path.is_file()


def test_regeneration_removes_services_of_excluded_models(blog_schema, tmp_path):
    builder = ServiceWrapperBuilder(blog_schema, EventifyConfig(out_dir=str(tmp_path)))
    assert builder.generate_bundle()
    post_path = tmp_path / "services" / "post_service.py"
    assert post_path.is_file()

    builder = ServiceWrapperBuilder(blog_schema, EventifyConfig(exclude_models=["post"], out_dir=str(tmp_path)))
    assert builder.generate_bundle()

    assert not post_path.exists()
    assert (tmp_path / "services" / "user_service.py").is_file()
    assert "PostService" not in builder.index_path.read_text(encoding="utf-8")


class AsyncFakeDelegate:
    def __init__(self, trace):
        self.trace = trace

    async def find_unique(self, where=None, **kwargs):
        self.trace.append("client.find_unique")
        return {"id": (where or {}).get("id"), "email": "a@b.c"}

    async def update(self, where=None, data=None, **kwargs):
        await asyncio.sleep(0)
        self.trace.append("client.update")
        return {"id": (where or {}).get("id"), **(data or {})}


class AsyncFakeClient:
    def __init__(self):
        self.trace = []
        self.user = AsyncFakeDelegate(self.trace)


def test_async_client_services_await_before_after_event(blog_schema, tmp_path):
    cfg = EventifyConfig(exclude_fields=["id"], out_dir=str(tmp_path), async_client=True)
    builder = ServiceWrapperBuilder(blog_schema, cfg)
    assert builder.generate_bundle()

    UserService = _load_service(builder, "User")
    client = AsyncFakeClient()
    seen = []

    class Dispatcher:
        def publish_event(self, event, meta):
            client.trace.append(event)
            seen.append(meta.get("result"))
            return True

    svc = UserService(Dispatcher(), client)
    assert inspect.iscoroutinefunction(UserService.update)

    result = asyncio.run(svc.update({"where": {"id": 1}, "data": {"email": "x"}}))
    assert result == {"id": 1, "email": "x"}
    assert client.trace.index("client.update") < client.trace.index("UserAfterUpdate")
    assert seen[-1] == {"id": 1, "email": "x"}

    client.trace.clear()
    asyncio.run(svc.set_email(1, "y"))
    assert client.trace == ["UserEmailBeforeUpdate", "client.update", "UserEmailAfterUpdate"]
    assert asyncio.run(svc.get_email(1)) == "a@b.c"
