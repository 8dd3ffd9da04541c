from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from studio.core.dependencies import get_storage
from studio.modules.files.schemas import ProjectFile, ProjectFileWrite
from studio.modules.projects.routes import get_existing_project
from studio.modules.projects.schemas import Project
from studio.storage import Storage

router = APIRouter(prefix="/projects/{project_id}/files", tags=["files"])


@router.get("", response_model=List[ProjectFile])
async def list_files(project_id: int, storage: Storage = Depends(get_storage)):
    """All files of a project, sorted by path"""
    return await storage.get_project_files(project_id)


@router.post("", response_model=ProjectFile, status_code=201)
async def save_file(
    file_data: ProjectFileWrite,
    project: Project = Depends(get_existing_project),
    storage: Storage = Depends(get_storage)
):
    """Create the file at `path`, or replace its content if it already exists"""
    return await storage.create_or_update_project_file(project.id, file_data.path, file_data.content)


@router.get("/{path:path}", response_model=ProjectFile)
async def get_file(project_id: int, path: str, storage: Storage = Depends(get_storage)):
    file = await storage.get_project_file(project_id, path)
    if not file:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return file


@router.delete("/{path:path}", status_code=204)
async def delete_file(project_id: int, path: str, storage: Storage = Depends(get_storage)):
    if not await storage.delete_project_file(project_id, path):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return None
