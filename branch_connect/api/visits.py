from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from branch_connect.core.dependencies import get_current_user, require_roles
from branch_connect.db.session import get_db
from branch_connect.models.branch_visit import VisitStatus
from branch_connect.models.profile import Profile, SUPERVISOR_ROLES
from branch_connect.schemas.branch_visit import (
    BranchVisitCreate,
    BranchVisitResponse,
    BranchVisitUpdate,
    ReporterReportStats,
    VisitReportRow,
    VisitReview,
)
from branch_connect.services import stats_service, visit_service
from branch_connect.services.branch_service import BranchNotFound
from branch_connect.services.visit_service import (
    InvalidTransition,
    NotVisitOwner,
    VisitNotFound,
)

router = APIRouter(prefix="/visits", tags=["Branch Visits"])

supervisor = require_roles(*SUPERVISOR_ROLES)


def _raise_for(exc: Exception):
    if isinstance(exc, VisitNotFound):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Visit not found")
    if isinstance(exc, BranchNotFound):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Branch not found")
    if isinstance(exc, NotVisitOwner):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only change your own visits")
    if isinstance(exc, InvalidTransition):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    raise exc


# ------------------------------------------------------------------
# 1. REPORTER: create, edit and submit own visits
# ------------------------------------------------------------------
@router.post("/", response_model=BranchVisitResponse, status_code=status.HTTP_201_CREATED)
def create_visit(
    payload: BranchVisitCreate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    """Save a visit as a draft, or submit it straight away."""
    try:
        return visit_service.create_visit(db, current_user, payload)
    except BranchNotFound as exc:
        _raise_for(exc)


@router.get("/mine", response_model=List[BranchVisitResponse])
def list_my_visits(
    status_filter: Optional[VisitStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    return visit_service.list_my_visits(db, current_user.id, status_filter)


@router.get("/mine/stats", response_model=ReporterReportStats)
def get_my_report_stats(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    return stats_service.fetch_reporter_report_stats(db, current_user.id)


@router.patch("/{visit_id}", response_model=BranchVisitResponse)
def update_draft(
    visit_id: UUID,
    payload: BranchVisitUpdate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    try:
        return visit_service.update_draft(db, current_user, visit_id, payload)
    except (VisitNotFound, BranchNotFound, NotVisitOwner, InvalidTransition) as exc:
        _raise_for(exc)


@router.post("/{visit_id}/submit", response_model=BranchVisitResponse)
def submit_visit(
    visit_id: UUID,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    try:
        return visit_service.submit_visit(db, current_user, visit_id)
    except (VisitNotFound, NotVisitOwner, InvalidTransition) as exc:
        _raise_for(exc)


# ------------------------------------------------------------------
# 2. SUPERVISOR: review queue and decisions
# ------------------------------------------------------------------
@router.get("/reports", response_model=List[VisitReportRow])
def list_recent_reports(
    status_filter: Optional[VisitStatus] = Query(None, alias="status"),
    search: Optional[str] = None,
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    return visit_service.list_recent_reports(db, limit=limit, status=status_filter, search=search)


@router.get("/reports/{visit_id}", response_model=VisitReportRow)
def get_report(
    visit_id: UUID,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    try:
        return visit_service.get_report(db, visit_id)
    except VisitNotFound as exc:
        _raise_for(exc)


@router.post("/{visit_id}/review", response_model=BranchVisitResponse)
def review_visit(
    visit_id: UUID,
    payload: VisitReview,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    """Approve or reject a submitted visit; the reporter is emailed the decision."""
    try:
        return visit_service.review_visit(db, current_user, visit_id, payload)
    except (VisitNotFound, InvalidTransition) as exc:
        _raise_for(exc)


@router.get("/{visit_id}", response_model=BranchVisitResponse)
def get_visit(
    visit_id: UUID,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    try:
        visit = visit_service.get_visit(db, visit_id)
    except VisitNotFound as exc:
        _raise_for(exc)

    # Reporters only see their own visits
    if visit.user_id != current_user.id and current_user.role not in SUPERVISOR_ROLES:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only view your own visits")
    return visit
