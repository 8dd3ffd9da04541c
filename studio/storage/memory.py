import asyncio
import itertools
import logging
import uuid
import weakref
from typing import Dict, Hashable, List, Optional, Tuple

from studio.modules.configs.schemas import ProjectConfig, ProjectConfigWrite
from studio.modules.deployments.schemas import (
    DeploymentCreate, DeploymentUpdate, ProjectDeployment
)
from studio.modules.files.schemas import ProjectFile
from studio.modules.projects.schemas import Project, ProjectCreate, ProjectUpdate
from studio.modules.users.schemas import User, UserCreate, UserUpdate
from studio.storage.base import changed_fields, utcnow

logger = logging.getLogger(__name__)


class MemoryStorage:
    """In-process storage for development and tests. Nothing survives a restart."""

    def __init__(self):
        self.users: Dict[str, User] = {}
        self.projects: Dict[int, Project] = {}
        self.files: Dict[Tuple[int, str], ProjectFile] = {}
        self.deployments: Dict[int, ProjectDeployment] = {}
        self.configs: Dict[int, ProjectConfig] = {}
        # One counter per table, so ids never interleave across entity types
        self._ids = {
            "projects": itertools.count(1),
            "files": itertools.count(1),
            "deployments": itertools.count(1),
            "configs": itertools.count(1),
        }
        self._locks = weakref.WeakValueDictionary()
        logger.info("MemoryStorage initialized (in-memory storage)")

    def _next_id(self, table: str) -> int:
        return next(self._ids[table])

    def _lock(self, key: Hashable) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    # User methods
    async def get_user(self, user_id: str) -> Optional[User]:
        user = self.users.get(user_id)
        return user.model_copy(deep=True) if user else None

    async def create_user(self, data: UserCreate) -> User:
        now = utcnow()
        user = User(id=str(uuid.uuid4()), created_at=now, updated_at=now, **data.model_dump())
        self.users[user.id] = user
        return user.model_copy(deep=True)

    async def update_user(self, user_id: str, updates: UserUpdate) -> Optional[User]:
        async with self._lock(("users", user_id)):
            user = self.users.get(user_id)
            if user is None:
                return None
            fields = changed_fields(updates, User)
            user = user.model_copy(update={**fields, "updated_at": utcnow()})
            self.users[user_id] = user
            return user.model_copy(deep=True)

    async def delete_user(self, user_id: str) -> bool:
        return self.users.pop(user_id, None) is not None

    # Project methods
    async def get_project(self, project_id: int) -> Optional[Project]:
        project = self.projects.get(project_id)
        return project.model_copy(deep=True) if project else None

    async def get_projects_by_user_id(self, user_id: str) -> List[Project]:
        projects = [p for p in self.projects.values() if p.user_id == user_id]
        projects.sort(key=lambda p: (p.created_at, p.id), reverse=True)
        return [p.model_copy(deep=True) for p in projects]

    async def create_project(self, data: ProjectCreate) -> Project:
        now = utcnow()
        project = Project(
            id=self._next_id("projects"), created_at=now, updated_at=now, **data.model_dump()
        )
        self.projects[project.id] = project
        return project.model_copy(deep=True)

    async def update_project(self, project_id: int, updates: ProjectUpdate) -> Optional[Project]:
        async with self._lock(("projects", project_id)):
            project = self.projects.get(project_id)
            if project is None:
                return None
            fields = changed_fields(updates, Project)
            project = project.model_copy(update={**fields, "updated_at": utcnow()})
            self.projects[project_id] = project
            return project.model_copy(deep=True)

    async def delete_project(self, project_id: int) -> bool:
        if self.projects.pop(project_id, None) is None:
            return False
        # Mirror the ON DELETE CASCADE of the relational schema
        for key in [k for k in self.files if k[0] == project_id]:
            del self.files[key]
        for deployment_id in [d.id for d in self.deployments.values() if d.project_id == project_id]:
            del self.deployments[deployment_id]
        self.configs.pop(project_id, None)
        return True

    # File methods
    async def get_project_files(self, project_id: int) -> List[ProjectFile]:
        files = [f for key, f in self.files.items() if key[0] == project_id]
        files.sort(key=lambda f: f.path)
        return [f.model_copy(deep=True) for f in files]

    async def get_project_file(self, project_id: int, path: str) -> Optional[ProjectFile]:
        file = self.files.get((project_id, path))
        return file.model_copy(deep=True) if file else None

    async def create_or_update_project_file(
        self, project_id: int, path: str, content: str
    ) -> ProjectFile:
        key = (project_id, path)
        async with self._lock(("files",) + key):
            existing = self.files.get(key)
            now = utcnow()
            file = ProjectFile(
                id=existing.id if existing else self._next_id("files"),
                project_id=project_id,
                path=path,
                content=content,
                created_at=existing.created_at if existing else now,
                updated_at=now,
            )
            self.files[key] = file
            return file.model_copy(deep=True)

    async def delete_project_file(self, project_id: int, path: str) -> bool:
        return self.files.pop((project_id, path), None) is not None

    # Deployment methods
    async def get_project_deployments(self, project_id: int) -> List[ProjectDeployment]:
        deployments = [d for d in self.deployments.values() if d.project_id == project_id]
        deployments.sort(key=lambda d: (d.created_at, d.id), reverse=True)
        return [d.model_copy(deep=True) for d in deployments]

    async def create_project_deployment(self, data: DeploymentCreate) -> ProjectDeployment:
        now = utcnow()
        deployment = ProjectDeployment(
            id=self._next_id("deployments"), created_at=now, updated_at=now, **data.model_dump()
        )
        self.deployments[deployment.id] = deployment
        return deployment.model_copy(deep=True)

    async def update_project_deployment(
        self, deployment_id: int, updates: DeploymentUpdate
    ) -> Optional[ProjectDeployment]:
        async with self._lock(("deployments", deployment_id)):
            deployment = self.deployments.get(deployment_id)
            if deployment is None:
                return None
            fields = changed_fields(updates, ProjectDeployment)
            deployment = deployment.model_copy(update={**fields, "updated_at": utcnow()})
            self.deployments[deployment_id] = deployment
            return deployment.model_copy(deep=True)

    # Config methods
    async def get_project_config(self, project_id: int) -> Optional[ProjectConfig]:
        config = self.configs.get(project_id)
        return config.model_copy(deep=True) if config else None

    async def create_or_update_project_config(
        self, project_id: int, data: ProjectConfigWrite
    ) -> ProjectConfig:
        async with self._lock(("configs", project_id)):
            existing = self.configs.get(project_id)
            now = utcnow()
            config = ProjectConfig(
                id=existing.id if existing else self._next_id("configs"),
                project_id=project_id,
                created_at=existing.created_at if existing else now,
                updated_at=now,
                **data.model_dump(),
            )
            self.configs[project_id] = config
            return config.model_copy(deep=True)

    async def close(self) -> None:
        logger.info(
            f"Discarding in-memory storage ({len(self.users)} users, {len(self.projects)} projects)"
        )
