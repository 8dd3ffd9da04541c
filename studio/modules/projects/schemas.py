from pydantic import BaseModel, Field
from typing import Literal, Optional
from datetime import datetime

DeploymentStatus = Literal["pending", "building", "deployed", "failed"]


class ProjectCreate(BaseModel):
    user_id: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    deployed_url: Optional[str] = None
    deployment_status: Optional[DeploymentStatus] = None


class Project(BaseModel):
    id: int
    user_id: str
    name: str
    description: Optional[str] = None
    deployed_url: Optional[str] = None
    deployment_status: Optional[DeploymentStatus] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
