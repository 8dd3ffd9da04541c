from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from studio.modules.projects.schemas import DeploymentStatus

PLACEHOLDER_DEPLOYMENT_URL = "https://placeholder-deploy-url.netlify.app"


class DeploymentCreate(BaseModel):
    project_id: int
    deployment_url: str
    status: DeploymentStatus = "pending"
    build_logs: Optional[str] = None


class DeploymentUpdate(BaseModel):
    deployment_url: Optional[str] = None
    status: Optional[DeploymentStatus] = None
    build_logs: Optional[str] = None


class ProjectDeployment(BaseModel):
    id: int
    project_id: int
    deployment_url: str
    status: DeploymentStatus
    build_logs: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
