"""
Storage contract shared by the in-memory and Supabase backends.

Lookups return None when the key does not exist, listings return an empty
list, deletes return False when nothing was removed. Only genuine backend
failures raise, as StorageError.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional, Protocol

from studio.modules.configs.schemas import ProjectConfig, ProjectConfigWrite
from studio.modules.deployments.schemas import (
    DeploymentCreate, DeploymentUpdate, ProjectDeployment
)
from studio.modules.files.schemas import ProjectFile
from studio.modules.projects.schemas import Project, ProjectCreate, ProjectUpdate
from studio.modules.users.schemas import User, UserCreate, UserUpdate


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Storage(Protocol):
    """Persistence operations consumed by the route layer."""

    # Users
    async def get_user(self, user_id: str) -> Optional[User]:
        ...

    async def create_user(self, data: UserCreate) -> User:
        ...

    async def update_user(self, user_id: str, updates: UserUpdate) -> Optional[User]:
        ...

    async def delete_user(self, user_id: str) -> bool:
        ...

    # Projects
    async def get_project(self, project_id: int) -> Optional[Project]:
        ...

    async def get_projects_by_user_id(self, user_id: str) -> List[Project]:
        ...

    async def create_project(self, data: ProjectCreate) -> Project:
        ...

    async def update_project(self, project_id: int, updates: ProjectUpdate) -> Optional[Project]:
        ...

    async def delete_project(self, project_id: int) -> bool:
        ...

    # Files
    async def get_project_files(self, project_id: int) -> List[ProjectFile]:
        ...

    async def get_project_file(self, project_id: int, path: str) -> Optional[ProjectFile]:
        ...

    async def create_or_update_project_file(
        self, project_id: int, path: str, content: str
    ) -> ProjectFile:
        ...

    async def delete_project_file(self, project_id: int, path: str) -> bool:
        ...

    # Deployments
    async def get_project_deployments(self, project_id: int) -> List[ProjectDeployment]:
        ...

    async def create_project_deployment(self, data: DeploymentCreate) -> ProjectDeployment:
        ...

    async def update_project_deployment(
        self, deployment_id: int, updates: DeploymentUpdate
    ) -> Optional[ProjectDeployment]:
        ...

    # Configs
    async def get_project_config(self, project_id: int) -> Optional[ProjectConfig]:
        ...

    async def create_or_update_project_config(
        self, project_id: int, data: ProjectConfigWrite
    ) -> ProjectConfig:
        ...

    async def close(self) -> None:
        ...


def changed_fields(updates, entity) -> dict:
    """Fields the caller actually sent, minus nulls aimed at required columns."""
    fields = updates.model_dump(mode="json", exclude_unset=True)
    return {
        key: value for key, value in fields.items()
        if value is not None or not entity.model_fields[key].is_required()
    }
