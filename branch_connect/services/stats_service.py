"""
Scalar dashboard figures: coverage, active reporters and HR averages for the
current calendar month compared with the previous one.
"""
import logging
from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from branch_connect.models.branch import Branch
from branch_connect.models.branch_visit import BranchVisit, VisitStatus
from branch_connect.models.profile import Profile, UserRole
from branch_connect.schemas.branch_visit import ReporterReportStats
from branch_connect.schemas.dashboard import (
    CountResponse,
    DashboardStats,
    MetricDeltas,
    MetricSnapshot,
    VisitCounts,
    ZoneOverview,
)
from branch_connect.services.metrics import delta, percentage, rounded_average
from branch_connect.services.notices import failure_notice
from branch_connect.services.periods import Period, current_and_previous_month
from branch_connect.services.queries import qualifying_visits, within

logger = logging.getLogger(__name__)


def summarize_window(visits, total_branches: int) -> MetricSnapshot:
    """Reduce the qualifying visits of one window to the dashboard figures."""
    visited = {v.branch_id for v in visits}
    active = {v.user_id for v in visits}

    return MetricSnapshot(
        visited_branches=len(visited),
        coverage=percentage(len(visited), total_branches),
        active_users=len(active),
        manning_percentage=rounded_average(v.manning_percentage for v in visits),
        attrition_rate=rounded_average(v.attrition_percentage for v in visits),
        er_percentage=rounded_average(v.er_percentage for v in visits),
        non_vendor_percentage=rounded_average(v.non_vendor_percentage for v in visits),
        cwt_cases=sum(v.cwt_cases or 0 for v in visits),
    )


def compare_windows(current: MetricSnapshot, previous: MetricSnapshot) -> MetricDeltas:
    return MetricDeltas(
        visited_branches=delta(current.visited_branches, previous.visited_branches),
        coverage=delta(current.coverage, previous.coverage),
        active_users=delta(current.active_users, previous.active_users),
        manning_percentage=delta(current.manning_percentage, previous.manning_percentage),
        attrition_rate=delta(current.attrition_rate, previous.attrition_rate),
        er_percentage=delta(current.er_percentage, previous.er_percentage),
    )


def _window_visits(db: Session, period: Period):
    return qualifying_visits(
        db,
        BranchVisit.branch_id,
        BranchVisit.user_id,
        BranchVisit.manning_percentage,
        BranchVisit.attrition_percentage,
        BranchVisit.er_percentage,
        BranchVisit.non_vendor_percentage,
        BranchVisit.cwt_cases,
        period=period,
    ).all()


def fetch_dashboard_stats(db: Session, today: Optional[date] = None) -> DashboardStats:
    """
    Dashboard cards for the current calendar month, the previous calendar month
    and the month-over-month deltas.

    Any query failure is logged and masked by an all-zero result carrying a
    notice, so the dashboard always renders.
    """
    current_period, previous_period = current_and_previous_month(today)

    try:
        total_branches = db.query(func.count(Branch.id)).scalar() or 0
        current_visits = _window_visits(db, current_period)
        previous_visits = _window_visits(db, previous_period)
    except SQLAlchemyError:
        logger.exception("[STATS] Error fetching dashboard stats")
        return DashboardStats(notice=failure_notice("Error loading dashboard statistics"))

    current = summarize_window(current_visits, total_branches)
    previous = summarize_window(previous_visits, total_branches)

    logger.info(
        f"[STATS] {current_period.label}: branches={total_branches} "
        f"visited={current.visited_branches} coverage={current.coverage}%"
    )

    return DashboardStats(
        total_branches=total_branches,
        current=current,
        previous=previous,
        vs_last_month=compare_windows(current, previous),
    )


def _visit_counts(statuses) -> VisitCounts:
    return VisitCounts(
        total_visits=len(statuses),
        pending_approval=sum(1 for s in statuses if s == VisitStatus.SUBMITTED),
        completed_visits=sum(1 for s in statuses if s == VisitStatus.APPROVED),
    )


def fetch_zone_overview(db: Session, today: Optional[date] = None) -> ZoneOverview:
    """Branch/reporter totals with visit counts overall and for the current month."""
    current_period, _ = current_and_previous_month(today)

    try:
        total_branches = db.query(func.count(Branch.id)).scalar() or 0
        total_reporters = (
            db.query(func.count(Profile.id)).filter(Profile.role == UserRole.BH).scalar() or 0
        )
        visits = db.query(BranchVisit.status, BranchVisit.visit_date).all()
    except SQLAlchemyError:
        logger.exception("[ZONE] Error fetching zone overview")
        return ZoneOverview(notice=failure_notice("Error loading dashboard statistics"))

    all_statuses = [status for status, _ in visits]
    month_statuses = [status for status, visit_date in visits if current_period.contains(visit_date)]

    return ZoneOverview(
        total_branches=total_branches,
        total_reporters=total_reporters,
        visit_stats=_visit_counts(all_statuses),
        monthly_stats=_visit_counts(month_statuses),
    )


def count_active_reporters(db: Session, today: Optional[date] = None) -> CountResponse:
    """BH reporters with at least one qualifying visit this calendar month."""
    current_period, _ = current_and_previous_month(today)
    try:
        user_ids = (
            qualifying_visits(db, BranchVisit.user_id, period=current_period)
            .join(Profile, Profile.id == BranchVisit.user_id)
            .filter(Profile.role == UserRole.BH)
            .distinct()
            .all()
        )
    except SQLAlchemyError:
        logger.exception("[STATS] Error fetching active reporter count")
        return CountResponse(notice=failure_notice("Error loading active reporters"))
    return CountResponse(count=len(user_ids))


def count_visits_in_month(db: Session, today: Optional[date] = None) -> CountResponse:
    """All visits dated this calendar month, whatever their status."""
    current_period, _ = current_and_previous_month(today)
    try:
        count = within(db.query(func.count(BranchVisit.id)), current_period).scalar() or 0
    except SQLAlchemyError:
        logger.exception("[STATS] Error fetching monthly visit count")
        return CountResponse(notice=failure_notice("Error loading monthly visits"))
    return CountResponse(count=count)


def fetch_reporter_report_stats(db: Session, user_id: UUID) -> ReporterReportStats:
    try:
        statuses = [s for (s,) in db.query(BranchVisit.status).filter(BranchVisit.user_id == user_id).all()]
    except SQLAlchemyError:
        logger.exception(f"[STATS] Error fetching report stats for {user_id}")
        return ReporterReportStats()

    return ReporterReportStats(
        total=len(statuses),
        approved=sum(1 for s in statuses if s == VisitStatus.APPROVED),
        rejected=sum(1 for s in statuses if s == VisitStatus.REJECTED),
        pending=sum(1 for s in statuses if s == VisitStatus.SUBMITTED),
    )
