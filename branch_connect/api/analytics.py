from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from branch_connect.api.params import month_period
from branch_connect.core.dependencies import require_roles
from branch_connect.db.session import get_db
from branch_connect.models.profile import Profile, SUPERVISOR_ROLES
from branch_connect.schemas.analytics import (
    BranchMetricsResponse,
    QualitativeAssessment,
    QualityLeaderboard,
)
from branch_connect.schemas.dashboard import CategoryVisitMetricsResponse, TrendSeries
from branch_connect.services import (
    category_service,
    performer_service,
    qualitative_service,
    trend_service,
)
from branch_connect.services.periods import Period

router = APIRouter(prefix="/analytics", tags=["Analytics"])

supervisor = require_roles(*SUPERVISOR_ROLES)


@router.get("/qualitative", response_model=QualitativeAssessment)
def get_qualitative_assessment(
    all_time: bool = True,
    period: Period = Depends(month_period),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    return qualitative_service.fetch_qualitative_assessment(db, None if all_time else period)


@router.get("/branch-metrics", response_model=BranchMetricsResponse)
def get_branch_metrics(
    all_time: bool = True,
    period: Period = Depends(month_period),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    return qualitative_service.fetch_branch_metrics(db, None if all_time else period)


@router.get("/category-metrics", response_model=CategoryVisitMetricsResponse)
def get_category_metrics(
    all_time: bool = True,
    period: Period = Depends(month_period),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    return category_service.fetch_category_visit_metrics(db, None if all_time else period)


@router.get("/trends", response_model=TrendSeries)
def get_trends_for_range(
    time_range: str = Query("lastSixMonths", alias="range"),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    """Coverage and participation for the time-range selector (unknown ranges fall back to six months)."""
    return trend_service.fetch_trends_for_range(db, time_range)


@router.get("/quality-leaderboard", response_model=QualityLeaderboard)
def get_quality_leaderboard(
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    return performer_service.fetch_quality_leaderboard(db, limit=limit)
