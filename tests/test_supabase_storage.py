from types import SimpleNamespace

import httpx
import pytest
from postgrest.exceptions import APIError

from studio.core.errors import StorageError
from studio.modules.configs.schemas import ProjectConfigWrite
from studio.modules.projects.schemas import ProjectCreate, ProjectUpdate
from studio.modules.users.schemas import UserCreate
from studio.storage import SupabaseStorage

NOW = "2025-01-01T00:00:00+00:00"


class RecordingQuery:
    """Chainable stand-in for the PostgREST request builder."""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.calls = []

    def __getattr__(self, name):
        def record(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return record

    async def execute(self):
        self.client.executed.append(self)
        response = self.client.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return SimpleNamespace(data=response)


class FakeSupabase:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.executed = []
        self.postgrest = SimpleNamespace(aclose=self._aclose)
        self.closed = False

    def table(self, name):
        return RecordingQuery(self, name)

    async def _aclose(self):
        self.closed = True

    def call(self, index, name):
        return [c for c in self.executed[index].calls if c[0] == name]


def project_row(**overrides):
    row = {"id": 1, "user_id": "u1", "name": "demo", "created_at": NOW, "updated_at": NOW}
    row.update(overrides)
    return row


async def test_zero_rows_is_absence():
    supabase = FakeSupabase([])
    storage = SupabaseStorage(supabase)
    assert await storage.get_project(42) is None
    assert supabase.executed[0].table == "projects"
    assert supabase.call(0, "eq") == [("eq", ("id", 42), {})]


async def test_api_error_is_not_collapsed_into_absence():
    supabase = FakeSupabase(APIError({"message": "permission denied", "code": "42501"}))
    storage = SupabaseStorage(supabase)
    with pytest.raises(StorageError) as info:
        await storage.get_project(1)
    assert info.value.operation == "get_project"


async def test_network_failure_on_listing_raises():
    supabase = FakeSupabase(httpx.ConnectError("connection refused"))
    storage = SupabaseStorage(supabase)
    with pytest.raises(StorageError):
        await storage.get_projects_by_user_id("u1")


async def test_projects_query_orders_newest_first():
    supabase = FakeSupabase([project_row(id=2), project_row(id=1)])
    storage = SupabaseStorage(supabase)
    projects = await storage.get_projects_by_user_id("u1")
    assert [p.id for p in projects] == [2, 1]
    assert supabase.call(0, "order") == [
        ("order", ("created_at",), {"desc": True}),
        ("order", ("id",), {"desc": True}),
    ]


async def test_create_stamps_timestamps():
    supabase = FakeSupabase([project_row()])
    storage = SupabaseStorage(supabase)
    project = await storage.create_project(ProjectCreate(user_id="u1", name="demo"))
    assert project.id == 1
    (_, (row,), _), = supabase.call(0, "insert")
    assert row["name"] == "demo"
    assert row["created_at"] == row["updated_at"]


async def test_create_with_no_returned_row_is_a_fault():
    storage = SupabaseStorage(FakeSupabase([]))
    with pytest.raises(StorageError):
        await storage.create_user(UserCreate(username="ada", email="ada@example.com"))


async def test_update_missing_row_is_absence():
    supabase = FakeSupabase([])
    storage = SupabaseStorage(supabase)
    assert await storage.update_project(9, ProjectUpdate(name="renamed")) is None
    (_, (fields,), _), = supabase.call(0, "update")
    assert fields["name"] == "renamed"
    assert "updated_at" in fields
    assert "created_at" not in fields


async def test_file_upsert_targets_composite_key_and_leaves_created_at_alone():
    row = {"id": 3, "project_id": 1, "path": "a.ts", "content": "x", "created_at": NOW, "updated_at": NOW}
    supabase = FakeSupabase([row])
    storage = SupabaseStorage(supabase)
    file = await storage.create_or_update_project_file(1, "a.ts", "x")
    assert file.id == 3
    (_, (payload,), kwargs), = supabase.call(0, "upsert")
    assert kwargs == {"on_conflict": "project_id,path"}
    assert "created_at" not in payload
    assert "updated_at" not in payload
    assert "id" not in payload


async def test_config_upsert_targets_project_id():
    row = {"id": 1, "project_id": 4, "framework": "vite", "created_at": NOW, "updated_at": NOW}
    supabase = FakeSupabase([row])
    storage = SupabaseStorage(supabase)
    config = await storage.create_or_update_project_config(4, ProjectConfigWrite(framework="vite"))
    assert config.framework == "vite"
    (_, (payload,), kwargs), = supabase.call(0, "upsert")
    assert kwargs == {"on_conflict": "project_id"}
    assert payload["project_id"] == 4
    assert payload["environment_variables"] == {}
    assert "created_at" not in payload
    assert "updated_at" not in payload
    assert config.environment_variables == {}


async def test_delete_reports_whether_a_row_went_away():
    supabase = FakeSupabase([], [{"id": 1}])
    storage = SupabaseStorage(supabase)
    assert await storage.delete_project_file(1, "gone.ts") is False
    assert await storage.delete_project(1) is True


async def test_close_releases_http_session():
    supabase = FakeSupabase()
    await SupabaseStorage(supabase).close()
    assert supabase.closed is True


async def test_config_upsert_never_sends_null_to_not_null_columns():
    row = {"id": 1, "project_id": 4, "framework": "vite", "environment_variables": {},
           "created_at": NOW, "updated_at": NOW}
    supabase = FakeSupabase([row])
    storage = SupabaseStorage(supabase)
    await storage.create_or_update_project_config(4, ProjectConfigWrite(framework="vite"))
    (_, (payload,), _), = supabase.call(0, "upsert")
    for column in ("project_id", "framework", "environment_variables"):
        assert payload[column] is not None
