from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from branch_connect.core.dependencies import get_current_user, require_roles
from branch_connect.db.session import get_db
from branch_connect.models.profile import Profile, SUPERVISOR_ROLES
from branch_connect.schemas.branch import (
    AssignmentCreate,
    AssignmentResponse,
    BranchResponse,
    BranchWithAssignments,
    ReporterBranchStats,
    ReporterResponse,
)
from branch_connect.schemas.common import MessageResponse
from branch_connect.schemas.dashboard import CategoryBreakdown
from branch_connect.services import branch_service, category_service, visit_service
from branch_connect.services.branch_service import (
    AssignmentExists,
    AssignmentNotFound,
    BranchNotFound,
    ReporterNotFound,
)

router = APIRouter(prefix="/branches", tags=["Branches"])

supervisor = require_roles(*SUPERVISOR_ROLES)


# ------------------------------------------------------------------
# 1. ZONE VIEW: branches, reporters and assignments
# ------------------------------------------------------------------
@router.get("/", response_model=List[BranchWithAssignments])
def list_zone_branches(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    return branch_service.list_zone_branches(db)


@router.get("/reporters", response_model=List[ReporterResponse])
def list_reporters(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    return branch_service.list_reporters(db)


@router.post("/assignments", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
def assign_branch(
    payload: AssignmentCreate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    try:
        return branch_service.assign_branch(db, payload.user_id, payload.branch_id)
    except ReporterNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reporter not found")
    except BranchNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Branch not found")
    except AssignmentExists:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Assignment already exists")


@router.delete("/assignments/{user_id}/{branch_id}", response_model=MessageResponse)
def unassign_branch(
    user_id: UUID,
    branch_id: UUID,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    try:
        branch_service.unassign_branch(db, user_id, branch_id)
    except AssignmentNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignment not found")
    return MessageResponse(message="Assignment removed")


# ------------------------------------------------------------------
# 2. REPORTER VIEW: own branches and progress
# ------------------------------------------------------------------
@router.get("/mine", response_model=List[BranchResponse])
def list_my_branches(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    return branch_service.list_assigned_branches(db, current_user.id)


@router.get("/mine/stats", response_model=ReporterBranchStats)
def get_my_branch_stats(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    """Assigned, visited and draft counts with the completion rate."""
    return visit_service.fetch_reporter_branch_stats(db, current_user.id)


@router.get("/mine/categories", response_model=CategoryBreakdown)
def get_my_category_coverage(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    return category_service.fetch_reporter_category_coverage(db, current_user.id)


@router.get("/reporters/{user_id}/stats", response_model=ReporterBranchStats)
def get_reporter_branch_stats(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    return visit_service.fetch_reporter_branch_stats(db, user_id)


@router.get("/reporters/{user_id}/categories", response_model=CategoryBreakdown)
def get_reporter_category_coverage(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    return category_service.fetch_reporter_category_coverage(db, user_id)
