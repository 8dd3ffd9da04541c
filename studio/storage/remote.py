import logging
from typing import List, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient

from studio.core.errors import StorageError
from studio.modules.configs.schemas import ProjectConfig, ProjectConfigWrite
from studio.modules.deployments.schemas import (
    DeploymentCreate, DeploymentUpdate, ProjectDeployment
)
from studio.modules.files.schemas import ProjectFile
from studio.modules.projects.schemas import Project, ProjectCreate, ProjectUpdate
from studio.modules.users.schemas import User, UserCreate, UserUpdate
from studio.storage.base import changed_fields, utcnow

logger = logging.getLogger(__name__)


class SupabaseStorage:
    """Storage backed by Supabase (PostgREST). Tables are documented in each module's models.py."""

    def __init__(self, supabase: AsyncClient):
        self.supabase = supabase
        logger.info("SupabaseStorage initialized")

    async def _execute(self, operation: str, query):
        """Run a query; zero rows is a result, a rejected or failed request is a StorageError."""
        try:
            return await query.execute()
        except (APIError, httpx.HTTPError) as e:
            logger.error(f"Error during {operation}: {str(e)}")
            raise StorageError(operation, str(e)) from e

    async def _fetch_one(self, operation: str, query) -> Optional[dict]:
        result = await self._execute(operation, query.limit(1))
        return result.data[0] if result.data else None

    async def _insert(self, operation: str, table: str, row: dict) -> dict:
        now = utcnow().isoformat()
        row = {**row, "created_at": now, "updated_at": now}
        result = await self._execute(operation, self.supabase.table(table).insert(row))
        if not result.data:
            raise StorageError(operation, "insert returned no row")
        return result.data[0]

    async def _update(self, operation: str, table: str, row_id, fields: dict) -> Optional[dict]:
        fields = {**fields, "updated_at": utcnow().isoformat()}
        result = await self._execute(
            operation,
            self.supabase.table(table)
                .update(fields)
                .eq("id", row_id)
        )
        return result.data[0] if result.data else None

    async def _upsert(self, operation: str, table: str, row: dict, on_conflict: str) -> dict:
        # Timestamps and id come from the table: both default to now() on insert and
        # the set_updated_at trigger refreshes updated_at when the conflict branch updates
        result = await self._execute(
            operation,
            self.supabase.table(table).upsert(row, on_conflict=on_conflict)
        )
        if not result.data:
            raise StorageError(operation, "upsert returned no row")
        return result.data[0]

    # User methods
    async def get_user(self, user_id: str) -> Optional[User]:
        row = await self._fetch_one(
            "get_user",
            self.supabase.table("user_profiles")
                .select("*")
                .eq("id", user_id)
        )
        return User(**row) if row else None

    async def create_user(self, data: UserCreate) -> User:
        row = await self._insert("create_user", "user_profiles", data.model_dump(mode="json"))
        return User(**row)

    async def update_user(self, user_id: str, updates: UserUpdate) -> Optional[User]:
        row = await self._update("update_user", "user_profiles", user_id, changed_fields(updates, User))
        return User(**row) if row else None

    async def delete_user(self, user_id: str) -> bool:
        result = await self._execute(
            "delete_user",
            self.supabase.table("user_profiles")
                .delete()
                .eq("id", user_id)
        )
        return len(result.data) > 0

    # Project methods
    async def get_project(self, project_id: int) -> Optional[Project]:
        row = await self._fetch_one(
            "get_project",
            self.supabase.table("projects")
                .select("*")
                .eq("id", project_id)
        )
        return Project(**row) if row else None

    async def get_projects_by_user_id(self, user_id: str) -> List[Project]:
        result = await self._execute(
            "get_projects_by_user_id",
            self.supabase.table("projects")
                .select("*")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .order("id", desc=True)
        )
        return [Project(**project) for project in result.data]

    async def create_project(self, data: ProjectCreate) -> Project:
        row = await self._insert("create_project", "projects", data.model_dump(mode="json"))
        return Project(**row)

    async def update_project(self, project_id: int, updates: ProjectUpdate) -> Optional[Project]:
        row = await self._update("update_project", "projects", project_id, changed_fields(updates, Project))
        return Project(**row) if row else None

    async def delete_project(self, project_id: int) -> bool:
        result = await self._execute(
            "delete_project",
            self.supabase.table("projects")
                .delete()
                .eq("id", project_id)
        )
        return len(result.data) > 0

    # File methods
    async def get_project_files(self, project_id: int) -> List[ProjectFile]:
        result = await self._execute(
            "get_project_files",
            self.supabase.table("project_files")
                .select("*")
                .eq("project_id", project_id)
                .order("path")
        )
        return [ProjectFile(**file) for file in result.data]

    async def get_project_file(self, project_id: int, path: str) -> Optional[ProjectFile]:
        row = await self._fetch_one(
            "get_project_file",
            self.supabase.table("project_files")
                .select("*")
                .eq("project_id", project_id)
                .eq("path", path)
        )
        return ProjectFile(**row) if row else None

    async def create_or_update_project_file(
        self, project_id: int, path: str, content: str
    ) -> ProjectFile:
        row = await self._upsert(
            "create_or_update_project_file",
            "project_files",
            {"project_id": project_id, "path": path, "content": content},
            on_conflict="project_id,path",
        )
        return ProjectFile(**row)

    async def delete_project_file(self, project_id: int, path: str) -> bool:
        result = await self._execute(
            "delete_project_file",
            self.supabase.table("project_files")
                .delete()
                .eq("project_id", project_id)
                .eq("path", path)
        )
        return len(result.data) > 0

    # Deployment methods
    async def get_project_deployments(self, project_id: int) -> List[ProjectDeployment]:
        result = await self._execute(
            "get_project_deployments",
            self.supabase.table("project_deployments")
                .select("*")
                .eq("project_id", project_id)
                .order("created_at", desc=True)
                .order("id", desc=True)
        )
        return [ProjectDeployment(**deployment) for deployment in result.data]

    async def create_project_deployment(self, data: DeploymentCreate) -> ProjectDeployment:
        row = await self._insert(
            "create_project_deployment", "project_deployments", data.model_dump(mode="json")
        )
        return ProjectDeployment(**row)

    async def update_project_deployment(
        self, deployment_id: int, updates: DeploymentUpdate
    ) -> Optional[ProjectDeployment]:
        row = await self._update(
            "update_project_deployment",
            "project_deployments",
            deployment_id,
            changed_fields(updates, ProjectDeployment),
        )
        return ProjectDeployment(**row) if row else None

    # Config methods
    async def get_project_config(self, project_id: int) -> Optional[ProjectConfig]:
        row = await self._fetch_one(
            "get_project_config",
            self.supabase.table("project_configs")
                .select("*")
                .eq("project_id", project_id)
        )
        return ProjectConfig(**row) if row else None

    async def create_or_update_project_config(
        self, project_id: int, data: ProjectConfigWrite
    ) -> ProjectConfig:
        row = await self._upsert(
            "create_or_update_project_config",
            "project_configs",
            {"project_id": project_id, **data.model_dump(mode="json")},
            on_conflict="project_id",
        )
        return ProjectConfig(**row)

    async def close(self) -> None:
        await self.supabase.postgrest.aclose()
