"""
Per-category coverage over the fixed five-tier branch classification.

The breakdown is a fixed enumeration, not a group-by: categories without
branches still appear with zero figures.
"""
import logging
from typing import Iterable, List, Optional, Set, Tuple
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from branch_connect.models.branch import Branch, BranchCategory, CATEGORY_ORDER
from branch_connect.models.branch_assignment import BranchAssignment
from branch_connect.models.branch_visit import BranchVisit
from branch_connect.schemas.dashboard import (
    CategoryBreakdown,
    CategoryStats,
    CategoryVisitMetrics,
    CategoryVisitMetricsResponse,
)
from branch_connect.services.metrics import percentage, rounded_average
from branch_connect.services.notices import failure_notice
from branch_connect.services.periods import Period
from branch_connect.services.queries import qualifying_visits

logger = logging.getLogger(__name__)


def empty_breakdown() -> List[CategoryStats]:
    return [CategoryStats(category=category) for category in CATEGORY_ORDER]


def breakdown_rows(branches: Iterable[Tuple[UUID, BranchCategory]], visited_ids: Set[UUID]) -> List[CategoryStats]:
    """
    Five rows in display order. A branch counts as visited when its id is in
    `visited_ids`, however many visits it received.
    """
    totals = {category: 0 for category in CATEGORY_ORDER}
    visited = {category: 0 for category in CATEGORY_ORDER}

    for branch_id, category in branches:
        if category is None:
            continue
        category = BranchCategory(category)
        totals[category] += 1
        if branch_id in visited_ids:
            visited[category] += 1

    return [
        CategoryStats(
            category=category,
            total=totals[category],
            visited=visited[category],
            coverage=percentage(visited[category], totals[category]),
        )
        for category in CATEGORY_ORDER
    ]


def _visited_branch_ids(db: Session, period: Optional[Period] = None, user_id: Optional[UUID] = None) -> Set[UUID]:
    query = qualifying_visits(db, BranchVisit.branch_id, period=period)
    if user_id is not None:
        query = query.filter(BranchVisit.user_id == user_id)
    return {branch_id for (branch_id,) in query.distinct().all()}


def fetch_category_breakdown(db: Session, period: Optional[Period] = None) -> CategoryBreakdown:
    """Total, visited and coverage per category; `period=None` covers all time."""
    try:
        branches = db.query(Branch.id, Branch.category).all()
        visited_ids = _visited_branch_ids(db, period)
    except SQLAlchemyError:
        logger.exception("[CATEGORY] Error fetching branch category stats")
        return CategoryBreakdown(
            categories=empty_breakdown(),
            notice=failure_notice("Error loading category statistics"),
        )

    return CategoryBreakdown(categories=breakdown_rows(branches, visited_ids))


def fetch_reporter_category_coverage(db: Session, user_id: UUID) -> CategoryBreakdown:
    """The same five rows, scoped to the branches assigned to one reporter."""
    try:
        assigned = (
            db.query(Branch.id, Branch.category)
            .join(BranchAssignment, BranchAssignment.branch_id == Branch.id)
            .filter(BranchAssignment.user_id == user_id)
            .all()
        )
        visited_ids = _visited_branch_ids(db, user_id=user_id)
    except SQLAlchemyError:
        logger.exception(f"[CATEGORY] Error fetching category coverage for {user_id}")
        return CategoryBreakdown(
            categories=empty_breakdown(),
            notice=failure_notice("Error loading category coverage"),
        )

    return CategoryBreakdown(categories=breakdown_rows(assigned, visited_ids))


def fetch_category_visit_metrics(db: Session, period: Optional[Period] = None) -> CategoryVisitMetricsResponse:
    """
    HR averages per category, grouped by the category recorded on each visit
    (the snapshot taken at submission, not the branch's current tier).
    """
    def zero_rows():
        return [
            CategoryVisitMetrics(category=category, name=category.value.capitalize())
            for category in CATEGORY_ORDER
        ]

    try:
        visits = qualifying_visits(
            db,
            BranchVisit.branch_category,
            BranchVisit.manning_percentage,
            BranchVisit.attrition_percentage,
            BranchVisit.er_percentage,
            BranchVisit.cwt_cases,
            period=period,
        ).all()
    except SQLAlchemyError:
        logger.exception("[CATEGORY] Error fetching category visit metrics")
        return CategoryVisitMetricsResponse(
            categories=zero_rows(),
            notice=failure_notice("Error loading category metrics"),
        )

    rows = []
    for category in CATEGORY_ORDER:
        in_category = [v for v in visits if v.branch_category == category]
        rows.append(CategoryVisitMetrics(
            category=category,
            name=category.value.capitalize(),
            visits=len(in_category),
            manning=rounded_average(v.manning_percentage for v in in_category),
            attrition=rounded_average(v.attrition_percentage for v in in_category),
            er=rounded_average(v.er_percentage for v in in_category),
            cwt=sum(v.cwt_cases or 0 for v in in_category),
        ))

    return CategoryVisitMetricsResponse(categories=rows)
