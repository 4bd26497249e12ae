"""
Time series for the coverage and participation charts.

Each requested bucket yields exactly one point, so the chart axis never has
gaps; a bucket with no qualifying visits is a zero point.
"""
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from branch_connect.models.branch import Branch
from branch_connect.models.branch_visit import BranchVisit
from branch_connect.schemas.dashboard import TrendPoint, TrendSeries
from branch_connect.services.metrics import percentage, ratio_of_sums, rounded_average
from branch_connect.services.notices import failure_notice
from branch_connect.services.periods import Period, time_range_periods, trailing_months
from branch_connect.services.queries import qualifying_visits

logger = logging.getLogger(__name__)

DEFAULT_TREND_MONTHS = 6


def zero_point(period: Period) -> TrendPoint:
    return TrendPoint(label=period.label, period_start=period.start.isoformat())


def bucket_points(periods: List[Period], visits, total_branches: int) -> List[TrendPoint]:
    points = []
    for period in periods:
        in_period = [v for v in visits if v.visit_date and period.contains(v.visit_date)]
        if not in_period:
            points.append(zero_point(period))
            continue

        visited = {v.branch_id for v in in_period}
        points.append(TrendPoint(
            label=period.label,
            period_start=period.start.isoformat(),
            branch_coverage=percentage(len(visited), total_branches),
            participation_rate=ratio_of_sums(
                (v.total_participants for v in in_period),
                (v.total_employees_invited for v in in_period),
            ),
            manning_percentage=rounded_average(v.manning_percentage for v in in_period),
            attrition_rate=rounded_average(v.attrition_percentage for v in in_period),
            er_percentage=rounded_average(v.er_percentage for v in in_period),
            non_vendor_percentage=rounded_average(v.non_vendor_percentage for v in in_period),
        ))
    return points


def _trend_series(db: Session, periods: List[Period]) -> TrendSeries:
    if not periods:
        return TrendSeries(points=[])

    span = Period(start=periods[0].start, end=periods[-1].end, label="span")
    try:
        visits = qualifying_visits(
            db,
            BranchVisit.branch_id,
            BranchVisit.visit_date,
            BranchVisit.total_employees_invited,
            BranchVisit.total_participants,
            BranchVisit.manning_percentage,
            BranchVisit.attrition_percentage,
            BranchVisit.er_percentage,
            BranchVisit.non_vendor_percentage,
            period=span,
        ).all()
        total_branches = db.query(func.count(Branch.id)).scalar() or 0
    except SQLAlchemyError:
        logger.exception("[TRENDS] Error fetching trend data")
        return TrendSeries(
            points=[zero_point(p) for p in periods],
            notice=failure_notice("Error loading monthly trends"),
        )

    logger.debug(f"[TRENDS] {len(visits)} qualifying visits across {len(periods)} buckets")
    return TrendSeries(points=bucket_points(periods, visits, total_branches))


def fetch_monthly_trends(db: Session, months: int = DEFAULT_TREND_MONTHS, today: Optional[date] = None) -> TrendSeries:
    """One point per trailing calendar month, oldest first, current month last."""
    return _trend_series(db, trailing_months(months, today))


def fetch_trends_for_range(db: Session, time_range: str, today: Optional[date] = None) -> TrendSeries:
    """Trend points for the analytics range selector (days, weeks, months or quarters)."""
    return _trend_series(db, time_range_periods(time_range, today))
