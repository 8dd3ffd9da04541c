import asyncio

from studio.modules.configs.schemas import ProjectConfigWrite
from studio.modules.deployments.schemas import DeploymentCreate, DeploymentUpdate
from studio.modules.projects.schemas import ProjectCreate, ProjectUpdate
from studio.modules.users.schemas import UserCreate, UserUpdate


def new_user(name="ada"):
    return UserCreate(username=name, email=f"{name}@example.com")


async def test_create_user_stamps_both_timestamps(storage):
    user = await storage.create_user(new_user())
    assert user.plan == "free"
    assert user.created_at == user.updated_at
    assert await storage.get_user(user.id) == user


async def test_concurrent_user_creation_yields_unique_ids(storage):
    users = await asyncio.gather(*(storage.create_user(new_user(f"u{i}")) for i in range(50)))
    assert len({u.id for u in users}) == 50


async def test_ids_are_allocated_per_entity_type(storage):
    first = await storage.create_project(ProjectCreate(user_id="u1", name="one"))
    await storage.create_or_update_project_file(first.id, "a.txt", "")
    second = await storage.create_project(ProjectCreate(user_id="u1", name="two"))
    assert (first.id, second.id) == (1, 2)


async def test_update_user_merges_and_refreshes_updated_at(storage):
    user = await storage.create_user(new_user())
    updated = await storage.update_user(user.id, UserUpdate(plan="pro"))
    assert updated.plan == "pro"
    assert updated.username == user.username
    assert updated.created_at == user.created_at
    assert updated.updated_at >= user.updated_at


async def test_update_ignores_null_for_required_fields(storage):
    user = await storage.create_user(new_user())
    updated = await storage.update_user(user.id, UserUpdate(username=None, stripe_customer_id="cus_1"))
    assert updated.username == "ada"
    assert updated.stripe_customer_id == "cus_1"


async def test_missing_records_are_absent_not_errors(storage):
    assert await storage.get_user("nope") is None
    assert await storage.update_user("nope", UserUpdate(plan="team")) is None
    assert await storage.get_project(99) is None
    assert await storage.update_project(99, ProjectUpdate(name="x")) is None
    assert await storage.update_project_deployment(99, DeploymentUpdate(status="failed")) is None
    assert await storage.get_project_config(99) is None
    assert await storage.get_project_files(99) == []


async def test_delete_is_idempotent(storage):
    user = await storage.create_user(new_user())
    assert await storage.delete_user(user.id) is True
    assert await storage.delete_user(user.id) is False
    assert await storage.delete_project_file(1, "missing.txt") is False


async def test_projects_listed_newest_first(storage):
    created = []
    for name in ["a", "b", "c", "d"]:
        created.append(await storage.create_project(ProjectCreate(user_id="u1", name=name)))
    await storage.create_project(ProjectCreate(user_id="someone-else", name="x"))

    projects = await storage.get_projects_by_user_id("u1")
    assert [p.name for p in projects] == ["d", "c", "b", "a"]
    keys = [(p.created_at, p.id) for p in projects]
    assert keys == sorted(keys, reverse=True)


async def test_file_upsert_keeps_identity_and_created_at(storage):
    first = await storage.create_or_update_project_file(1, "src/app.ts", "v1")
    second = await storage.create_or_update_project_file(1, "src/app.ts", "v2")

    assert second.id == first.id
    assert second.created_at == first.created_at
    assert second.updated_at >= first.updated_at
    assert second.content == "v2"
    files = await storage.get_project_files(1)
    assert len(files) == 1
    assert files[0].content == "v2"


async def test_concurrent_upserts_to_one_path_store_a_single_record(storage):
    results = await asyncio.gather(
        *(storage.create_or_update_project_file(7, "index.html", f"v{i}") for i in range(20))
    )
    assert len({r.id for r in results}) == 1
    assert len(await storage.get_project_files(7)) == 1


async def test_files_listed_by_path(storage):
    for path in ["src/b.ts", "README.md", "src/a.ts"]:
        await storage.create_or_update_project_file(3, path, "")
    await storage.create_or_update_project_file(4, "other.ts", "")
    assert [f.path for f in await storage.get_project_files(3)] == ["README.md", "src/a.ts", "src/b.ts"]


async def test_returned_records_do_not_alias_stored_state(storage):
    project = await storage.create_project(ProjectCreate(user_id="u1", name="demo"))
    project.name = "mutated"
    assert (await storage.get_project(project.id)).name == "demo"


async def test_config_upsert_is_one_per_project(storage):
    first = await storage.create_or_update_project_config(
        5, ProjectConfigWrite(framework="vite", environment_variables={"A": "1"})
    )
    second = await storage.create_or_update_project_config(
        5, ProjectConfigWrite(framework="next", build_command="next build")
    )
    assert second.id == first.id
    assert second.created_at == first.created_at
    assert second.framework == "next"
    assert second.environment_variables == {}
    assert (await storage.get_project_config(5)) == second


async def test_deployments_newest_first_and_updatable(storage):
    older = await storage.create_project_deployment(
        DeploymentCreate(project_id=1, deployment_url="https://a.example")
    )
    newer = await storage.create_project_deployment(
        DeploymentCreate(project_id=1, deployment_url="https://b.example")
    )
    assert [d.id for d in await storage.get_project_deployments(1)] == [newer.id, older.id]

    updated = await storage.update_project_deployment(older.id, DeploymentUpdate(status="deployed"))
    assert updated.status == "deployed"
    assert updated.deployment_url == "https://a.example"


async def test_delete_project_removes_children(storage):
    project = await storage.create_project(ProjectCreate(user_id="u1", name="demo"))
    await storage.create_or_update_project_file(project.id, "a.txt", "")
    await storage.create_project_deployment(
        DeploymentCreate(project_id=project.id, deployment_url="https://a.example")
    )
    await storage.create_or_update_project_config(project.id, ProjectConfigWrite(framework="vite"))

    assert await storage.delete_project(project.id) is True
    assert await storage.get_project_files(project.id) == []
    assert await storage.get_project_deployments(project.id) == []
    assert await storage.get_project_config(project.id) is None
    assert await storage.delete_project(project.id) is False
