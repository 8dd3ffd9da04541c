from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from studio.core.dependencies import get_storage
from studio.modules.projects.schemas import Project, ProjectCreate, ProjectUpdate
from studio.storage import Storage

router = APIRouter(prefix="/projects", tags=["projects"])


async def get_existing_project(project_id: int, storage: Storage = Depends(get_storage)) -> Project:
    """Dependency for child resources that must hang off a real project."""
    project = await storage.get_project(project_id)
    if not project:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return project


@router.get("/user/{user_id}", response_model=List[Project])
async def list_projects_by_user(user_id: str, storage: Storage = Depends(get_storage)):
    """Newest project first"""
    return await storage.get_projects_by_user_id(user_id)


@router.get("/{project_id}", response_model=Project)
async def get_project(project: Project = Depends(get_existing_project)):
    return project


@router.post("", response_model=Project, status_code=201)
async def create_project(project_data: ProjectCreate, storage: Storage = Depends(get_storage)):
    return await storage.create_project(project_data)


@router.patch("/{project_id}", response_model=Project)
async def update_project(
    project_id: int,
    updates: ProjectUpdate,
    storage: Storage = Depends(get_storage)
):
    project = await storage.update_project(project_id, updates)
    if not project:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return project


@router.delete("/{project_id}", status_code=204)
async def delete_project(project_id: int, storage: Storage = Depends(get_storage)):
    if not await storage.delete_project(project_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return None
