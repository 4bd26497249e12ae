"""
Reporter leaderboards.

`fetch_top_performers` ranks BH reporters by distinct branches reported this
calendar month, then by coverage of their assigned branches.
`fetch_quality_leaderboard` ranks by the average of the culture ratings they
recorded.
"""
import logging
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional, Set
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from branch_connect.models.branch_assignment import BranchAssignment
from branch_connect.models.branch_visit import BranchVisit, RATING_FIELDS
from branch_connect.models.profile import Profile, UserRole
from branch_connect.schemas.analytics import QualityLeaderboard, QualityLeaderboardRow
from branch_connect.schemas.dashboard import PerformerRow, TopPerformers
from branch_connect.services.metrics import average, percentage, rating_value, round_half_away_to
from branch_connect.services.notices import failure_notice
from branch_connect.services.periods import current_and_previous_month
from branch_connect.services.queries import qualifying_visits

logger = logging.getLogger(__name__)


def rank_performers(
    reporters,
    assignments: Dict[UUID, Set[UUID]],
    visited: Dict[UUID, Set[UUID]],
    limit: Optional[int] = 3,
) -> List[PerformerRow]:
    rows = []
    for reporter in reporters:
        assigned = assignments.get(reporter.id, set())
        reported = visited.get(reporter.id, set())
        rows.append(PerformerRow(
            id=reporter.id,
            name=reporter.full_name or "Unknown BHR",
            e_code=reporter.e_code,
            assigned_branches=len(assigned),
            reports=len(reported),
            # Only assigned branches count toward coverage, so it never exceeds 100
            coverage=percentage(len(reported & assigned), len(assigned)),
        ))

    rows.sort(key=lambda r: (r.reports, r.coverage), reverse=True)
    if limit is not None:
        rows = rows[:limit]
    return rows


def fetch_top_performers(db: Session, limit: Optional[int] = 3, today: Optional[date] = None) -> TopPerformers:
    current_period, _ = current_and_previous_month(today)

    try:
        reporters = (
            db.query(Profile.id, Profile.full_name, Profile.e_code)
            .filter(Profile.role == UserRole.BH)
            .all()
        )
        assignment_rows = db.query(BranchAssignment.user_id, BranchAssignment.branch_id).all()
        visit_rows = qualifying_visits(
            db, BranchVisit.user_id, BranchVisit.branch_id, period=current_period
        ).all()
    except SQLAlchemyError:
        logger.exception("[PERFORMERS] Error fetching top performers")
        return TopPerformers(notice=failure_notice("Error loading top performers"))

    assignments = defaultdict(set)
    for user_id, branch_id in assignment_rows:
        if user_id and branch_id:
            assignments[user_id].add(branch_id)

    visited = defaultdict(set)
    for user_id, branch_id in visit_rows:
        if user_id and branch_id:
            visited[user_id].add(branch_id)

    return TopPerformers(performers=rank_performers(reporters, assignments, visited, limit))


def fetch_quality_leaderboard(db: Session, limit: Optional[int] = None) -> QualityLeaderboard:
    try:
        rows = (
            qualifying_visits(db, BranchVisit, Profile)
            .outerjoin(Profile, Profile.id == BranchVisit.user_id)
            .all()
        )
    except SQLAlchemyError:
        logger.exception("[PERFORMERS] Error fetching quality leaderboard")
        return QualityLeaderboard(notice=failure_notice("Error fetching performers data"))

    grouped = {}
    for visit, profile in rows:
        entry = grouped.setdefault(visit.user_id, {
            "name": profile.full_name if profile else "N/A",
            "code": profile.e_code if profile else "N/A",
            "visits": 0,
            "ratings": defaultdict(list),
        })
        entry["visits"] += 1
        for field in RATING_FIELDS:
            label = getattr(visit, field)
            if label:
                entry["ratings"][field].append(rating_value(label))

    performers = []
    for user_id, entry in grouped.items():
        overall = sum(average(entry["ratings"][f]) for f in RATING_FIELDS) / len(RATING_FIELDS)
        performers.append(QualityLeaderboardRow(
            id=user_id,
            name=entry["name"],
            code=entry["code"],
            visit_count=entry["visits"],
            overall_score=round_half_away_to(overall),
        ))

    performers.sort(key=lambda p: p.overall_score, reverse=True)
    if limit is not None:
        performers = performers[:limit]
    return QualityLeaderboard(performers=performers)
