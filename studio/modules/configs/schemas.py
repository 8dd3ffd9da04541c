from pydantic import BaseModel, Field
from typing import Dict, Optional
from datetime import datetime


class ProjectConfigWrite(BaseModel):
    framework: str = Field(min_length=1)
    build_command: Optional[str] = None
    output_directory: Optional[str] = None
    environment_variables: Dict[str, str] = Field(default_factory=dict)


class ProjectConfig(BaseModel):
    id: int
    project_id: int
    framework: str
    build_command: Optional[str] = None
    output_directory: Optional[str] = None
    environment_variables: Dict[str, str] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
