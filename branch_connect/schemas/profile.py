from pydantic import BaseModel
from uuid import UUID
from typing import Optional
from datetime import datetime

from branch_connect.models.profile import Gender, UserRole


class ProfileResponse(BaseModel):
    id: UUID
    full_name: str
    e_code: str
    role: UserRole
    location: str
    gender: Optional[Gender] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
