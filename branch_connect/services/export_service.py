"""
Monthly report summary and the three CSV downloads.

CSV format: a header row of column names, then one line per row where every
cell is JSON-encoded (strings quoted, missing values as `null`), cells joined
by commas and lines by `\n`. File names are `{report_type}_{month}_{year}.csv`.
"""
import enum
import json
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Set
from uuid import UUID

import pandas as pd
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from branch_connect.models.branch import Branch, BranchCategory
from branch_connect.models.branch_assignment import BranchAssignment
from branch_connect.models.branch_visit import BranchVisit, RATING_FIELDS, VisitStatus
from branch_connect.models.profile import Profile, UserRole
from branch_connect.schemas.reports import MonthlySummaryReport
from branch_connect.services.category_service import empty_breakdown, fetch_category_breakdown
from branch_connect.services.metrics import percentage, ratio_of_sums
from branch_connect.services.notices import failure_notice
from branch_connect.services.performer_service import rank_performers
from branch_connect.services.periods import Period
from branch_connect.services.queries import qualifying_visits, within

logger = logging.getLogger(__name__)

REPORT_TYPES = ("branch_visits", "bhr_performance", "branch_assignments")


@dataclass
class CsvExport:
    filename: str
    content: str


def export_filename(report_type: str, month: str, year) -> str:
    return f"{report_type}_{month}_{year}.csv"


def _cell(value) -> str:
    if isinstance(value, enum.Enum):
        value = value.value
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return "null"
    if isinstance(value, float) and value.is_integer():
        # 85.0 is written as 85
        value = int(value)
    return json.dumps(value, default=str)


def render_csv(rows: List[dict]) -> Optional[str]:
    """Header from the first row's keys; None when there is nothing to export."""
    if not rows:
        return None

    df = pd.DataFrame(rows, dtype=object)
    encoded = df.map(_cell).apply(",".join, axis=1)
    return "\n".join([",".join(str(c) for c in df.columns), *encoded])


# ------------------------------------------------------------------
# 1. BRANCH VISIT DETAIL
# ------------------------------------------------------------------
def branch_visit_rows(
    db: Session,
    period: Period,
    location: Optional[str] = None,
    category: Optional[BranchCategory] = None,
    user_id: Optional[UUID] = None,
) -> List[dict]:
    query = within(
        db.query(BranchVisit, Branch, Profile)
        .outerjoin(Branch, Branch.id == BranchVisit.branch_id)
        .outerjoin(Profile, Profile.id == BranchVisit.user_id)
        .filter(BranchVisit.status != VisitStatus.DRAFT),
        period,
    )
    if location:
        query = query.filter(Branch.location == location)
    if category:
        query = query.filter(BranchVisit.branch_category == category)
    if user_id:
        query = query.filter(BranchVisit.user_id == user_id)

    rows = []
    for visit, branch, profile in query.order_by(BranchVisit.visit_date, Branch.name).all():
        row = {
            "visit_date": visit.visit_date,
            "branch_name": branch.name if branch else "Unknown",
            "location": branch.location if branch else "Unknown",
            "category": visit.branch_category,
            "bh_name": profile.full_name if profile else "Unknown",
            "bh_code": profile.e_code if profile else "N/A",
            "status": visit.status,
            "hr_connect_session": visit.hr_connect_session,
            "total_employees_invited": visit.total_employees_invited,
            "total_participants": visit.total_participants,
            "manning_percentage": visit.manning_percentage,
            "attrition_percentage": visit.attrition_percentage,
            "er_percentage": visit.er_percentage,
            "non_vendor_percentage": visit.non_vendor_percentage,
            "cwt_cases": visit.cwt_cases,
            "performance_level": visit.performance_level,
        }
        for field in RATING_FIELDS:
            row[field] = getattr(visit, field)
        row["feedback"] = visit.feedback
        row["best_practices"] = visit.best_practices
        rows.append(row)
    return rows


def export_branch_visits(
    db: Session,
    period: Period,
    year: int,
    location: Optional[str] = None,
    category: Optional[BranchCategory] = None,
    user_id: Optional[UUID] = None,
) -> Optional[CsvExport]:
    content = render_csv(branch_visit_rows(db, period, location, category, user_id))
    if content is None:
        return None
    return CsvExport(filename=export_filename("branch_visits", period.label, year), content=content)


# ------------------------------------------------------------------
# 2. BHR PERFORMANCE SUMMARY
# ------------------------------------------------------------------
def bhr_performance_rows(db: Session, period: Period) -> List[dict]:
    reporters = (
        db.query(Profile)
        .filter(Profile.role == UserRole.BH)
        .order_by(Profile.full_name)
        .all()
    )
    assignments: Dict[UUID, Set[UUID]] = defaultdict(set)
    for user_id, branch_id in db.query(BranchAssignment.user_id, BranchAssignment.branch_id).all():
        assignments[user_id].add(branch_id)

    visits = qualifying_visits(
        db,
        BranchVisit.user_id,
        BranchVisit.branch_id,
        BranchVisit.total_participants,
        BranchVisit.total_employees_invited,
        period=period,
    ).all()
    by_user = defaultdict(list)
    for visit in visits:
        by_user[visit.user_id].append(visit)

    rows = []
    for reporter in reporters:
        assigned = assignments.get(reporter.id, set())
        own = by_user.get(reporter.id, [])
        visited = {v.branch_id for v in own}
        rows.append({
            "bh_name": reporter.full_name,
            "bh_code": reporter.e_code,
            "location": reporter.location,
            "assigned_branches": len(assigned),
            "branches_visited": len(visited),
            "total_visits": len(own),
            "coverage": percentage(len(visited & assigned), len(assigned)),
            "participation_rate": ratio_of_sums(
                (v.total_participants for v in own),
                (v.total_employees_invited for v in own),
            ),
        })
    return rows


def export_bhr_performance(db: Session, period: Period, year: int) -> Optional[CsvExport]:
    content = render_csv(bhr_performance_rows(db, period))
    if content is None:
        return None
    return CsvExport(filename=export_filename("bhr_performance", period.label, year), content=content)


# ------------------------------------------------------------------
# 3. BRANCH ASSIGNMENTS
# ------------------------------------------------------------------
def branch_assignment_rows(db: Session) -> List[dict]:
    results = (
        db.query(BranchAssignment, Branch, Profile)
        .outerjoin(Branch, Branch.id == BranchAssignment.branch_id)
        .outerjoin(Profile, Profile.id == BranchAssignment.user_id)
        .order_by(Branch.name)
        .all()
    )
    return [
        {
            "branch_name": branch.name if branch else "Unknown",
            "location": branch.location if branch else "Unknown",
            "category": branch.category if branch else None,
            "bh_name": profile.full_name if profile else "Unknown",
            "bh_code": profile.e_code if profile else "N/A",
            "assigned_at": assignment.assigned_at,
        }
        for assignment, branch, profile in results
    ]


def export_branch_assignments(db: Session, period: Period, year: int) -> Optional[CsvExport]:
    # Assignments are not dated; month and year only name the file
    content = render_csv(branch_assignment_rows(db))
    if content is None:
        return None
    return CsvExport(filename=export_filename("branch_assignments", period.label, year), content=content)


# ------------------------------------------------------------------
# 4. MONTHLY SUMMARY
# ------------------------------------------------------------------
def build_monthly_summary(db: Session, period: Period, year: int) -> MonthlySummaryReport:
    try:
        total_branches = db.query(func.count(Branch.id)).scalar() or 0
        visits = qualifying_visits(
            db,
            BranchVisit.user_id,
            BranchVisit.branch_id,
            BranchVisit.total_participants,
            BranchVisit.total_employees_invited,
            period=period,
        ).all()
        reporters = (
            db.query(Profile.id, Profile.full_name, Profile.e_code)
            .filter(Profile.role == UserRole.BH)
            .all()
        )
        assignment_rows = db.query(BranchAssignment.user_id, BranchAssignment.branch_id).all()
    except SQLAlchemyError:
        logger.exception(f"[REPORTS] Error building summary for {period.label} {year}")
        return MonthlySummaryReport(
            month=period.label,
            year=year,
            category_breakdown=empty_breakdown(),
            notice=failure_notice("Error loading report summary"),
        )

    assignments = defaultdict(set)
    for user_id, branch_id in assignment_rows:
        assignments[user_id].add(branch_id)
    visited = defaultdict(set)
    for visit in visits:
        visited[visit.user_id].add(visit.branch_id)

    leaders = rank_performers(reporters, assignments, visited, limit=1)
    top_performer = leaders[0].name if leaders and leaders[0].reports > 0 else None

    breakdown = fetch_category_breakdown(db, period)

    return MonthlySummaryReport(
        month=period.label,
        year=year,
        total_branch_visits=len(visits),
        coverage_percentage=percentage(len({v.branch_id for v in visits}), total_branches),
        avg_participation=ratio_of_sums(
            (v.total_participants for v in visits),
            (v.total_employees_invited for v in visits),
        ),
        top_performer=top_performer,
        category_breakdown=breakdown.categories,
        notice=breakdown.notice,
    )
