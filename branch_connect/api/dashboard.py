# branch_connect/api/dashboard.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from branch_connect.api.params import month_period
from branch_connect.core.dependencies import require_roles
from branch_connect.db.session import get_db
from branch_connect.models.profile import Profile, SUPERVISOR_ROLES
from branch_connect.schemas.dashboard import (
    CategoryBreakdown,
    CountResponse,
    DashboardStats,
    TopPerformers,
    TrendSeries,
    ZoneOverview,
)
from branch_connect.services import (
    category_service,
    performer_service,
    stats_service,
    trend_service,
)
from branch_connect.services.periods import Period

# Every dashboard figure is zone/channel wide, so reporters are kept out
router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

supervisor = require_roles(*SUPERVISOR_ROLES)


@router.get("/stats", response_model=DashboardStats)
def get_dashboard_stats(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    """Big-number cards: this calendar month against the previous one."""
    return stats_service.fetch_dashboard_stats(db)


@router.get("/zone-overview", response_model=ZoneOverview)
def get_zone_overview(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    return stats_service.fetch_zone_overview(db)


@router.get("/active-reporters", response_model=CountResponse)
def get_active_reporters(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    return stats_service.count_active_reporters(db)


@router.get("/monthly-visits", response_model=CountResponse)
def get_monthly_visits(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    return stats_service.count_visits_in_month(db)


@router.get("/categories", response_model=CategoryBreakdown)
def get_category_breakdown(
    all_time: bool = False,
    period: Period = Depends(month_period),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    """Five category rows for the selected month, or over all time."""
    return category_service.fetch_category_breakdown(db, None if all_time else period)


@router.get("/trends", response_model=TrendSeries)
def get_monthly_trends(
    months: int = Query(trend_service.DEFAULT_TREND_MONTHS, ge=1, le=36),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    return trend_service.fetch_monthly_trends(db, months=months)


@router.get("/top-performers", response_model=TopPerformers)
def get_top_performers(
    limit: int = Query(3, ge=1, le=50),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    return performer_service.fetch_top_performers(db, limit=limit)
