from fastapi import APIRouter, Depends, HTTPException, status

from studio.core.dependencies import get_storage
from studio.modules.configs.schemas import ProjectConfig, ProjectConfigWrite
from studio.modules.projects.routes import get_existing_project
from studio.modules.projects.schemas import Project
from studio.storage import Storage

router = APIRouter(prefix="/projects/{project_id}/config", tags=["configs"])


@router.get("", response_model=ProjectConfig)
async def get_config(project_id: int, storage: Storage = Depends(get_storage)):
    config = await storage.get_project_config(project_id)
    if not config:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Config not found")
    return config


@router.put("", response_model=ProjectConfig)
async def save_config(
    config_data: ProjectConfigWrite,
    project: Project = Depends(get_existing_project),
    storage: Storage = Depends(get_storage)
):
    """Replace the project's build configuration (one per project)"""
    return await storage.create_or_update_project_config(project.id, config_data)
