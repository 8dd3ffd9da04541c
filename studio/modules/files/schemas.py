from pydantic import BaseModel, Field
from datetime import datetime


class ProjectFileWrite(BaseModel):
    path: str = Field(min_length=1)
    content: str = ""


class ProjectFile(BaseModel):
    id: int
    project_id: int
    path: str
    content: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
