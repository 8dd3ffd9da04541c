from pydantic import BaseModel, EmailStr, Field
from typing import Literal, Optional
from datetime import datetime

Plan = Literal["free", "pro", "team"]


class UserCreate(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    email: EmailStr
    plan: Plan = "free"
    stripe_customer_id: Optional[str] = None


class UserUpdate(BaseModel):
    username: Optional[str] = Field(default=None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    plan: Optional[Plan] = None
    stripe_customer_id: Optional[str] = None


class User(BaseModel):
    id: str
    username: str
    email: str
    plan: Plan
    stripe_customer_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
