from pydantic import BaseModel
from uuid import UUID
from typing import List, Optional
from datetime import datetime

from branch_connect.models.branch import BranchCategory
from branch_connect.schemas.profile import ProfileResponse


class BranchResponse(BaseModel):
    id: UUID
    name: str
    location: str
    category: BranchCategory

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AssignedReporter(BaseModel):
    user_id: UUID
    bh_name: str


# Branch list for the zone view: who covers which branch
class BranchWithAssignments(BranchResponse):
    bh_count: int
    bh_assignments: List[AssignedReporter] = []


class ReporterResponse(ProfileResponse):
    branches_assigned: int


class AssignmentCreate(BaseModel):
    user_id: UUID
    branch_id: UUID


class AssignmentResponse(BaseModel):
    id: UUID
    user_id: UUID
    branch_id: UUID
    assigned_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ReporterBranchStats(BaseModel):
    assigned_branches: int = 0
    branches_visited: int = 0
    pending_visits: int = 0
    completion_rate: int = 0
