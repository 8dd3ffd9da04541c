import logging
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from studio.core.dependencies import get_storage
from studio.modules.deployments.schemas import (
    PLACEHOLDER_DEPLOYMENT_URL, DeploymentCreate, DeploymentUpdate, ProjectDeployment
)
from studio.modules.projects.routes import get_existing_project
from studio.modules.projects.schemas import Project
from studio.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["deployments"])


@router.get("/projects/{project_id}/deployments", response_model=List[ProjectDeployment])
async def list_deployments(project_id: int, storage: Storage = Depends(get_storage)):
    """Newest deployment first"""
    return await storage.get_project_deployments(project_id)


@router.post("/projects/{project_id}/deploy", response_model=ProjectDeployment, status_code=201)
async def deploy_project(
    project: Project = Depends(get_existing_project),
    storage: Storage = Depends(get_storage)
):
    """
    Record a pending deployment.
    No hosting provider is called; the record carries a placeholder URL.
    """
    deployment = await storage.create_project_deployment(DeploymentCreate(
        project_id=project.id,
        deployment_url=PLACEHOLDER_DEPLOYMENT_URL,
        status="pending",
    ))
    logger.info(f"Deployment {deployment.id} queued for project {project.id}")
    return deployment


@router.patch("/deployments/{deployment_id}", response_model=ProjectDeployment)
async def update_deployment(
    deployment_id: int,
    updates: DeploymentUpdate,
    storage: Storage = Depends(get_storage)
):
    deployment = await storage.update_project_deployment(deployment_id, updates)
    if not deployment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Deployment not found")
    return deployment
