"""Culture ratings and per-branch HR metrics from qualifying visits."""
import logging
from collections import defaultdict
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from branch_connect.models.branch import Branch
from branch_connect.models.branch_visit import BranchVisit, RATING_FIELDS
from branch_connect.schemas.analytics import (
    BranchMetricsResponse,
    BranchMetricsRow,
    QualitativeAssessment,
    RatingAverages,
)
from branch_connect.services.metrics import average, rating_value, round_half_away_to, rounded_average
from branch_connect.services.notices import failure_notice
from branch_connect.services.periods import Period
from branch_connect.services.queries import qualifying_visits

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"

# Visit column -> RatingAverages field
RATING_KEYS = {
    "leaders_aligned_with_code": "leaders_aligned",
    "employees_feel_safe": "employees_safe",
    "employees_feel_motivated": "employees_motivated",
    "leaders_abusive_language": "no_abusive_language",
    "employees_comfort_escalation": "comfort_escalation",
    "inclusive_culture": "inclusive_culture",
}


def rating_averages(visits, digits: Optional[int] = 2) -> RatingAverages:
    values: Dict[str, List[int]] = defaultdict(list)
    for visit in visits:
        for field in RATING_FIELDS:
            label = getattr(visit, field)
            if label:
                values[field].append(rating_value(label))

    averages = {}
    for field, key in RATING_KEYS.items():
        mean = average(values[field])
        averages[key] = round_half_away_to(mean, digits) if digits is not None else mean
    return RatingAverages(**averages)


def fetch_qualitative_assessment(db: Session, period: Optional[Period] = None) -> QualitativeAssessment:
    """Average rating per culture question over rated qualifying visits."""
    try:
        visits = (
            qualifying_visits(db, *[getattr(BranchVisit, f) for f in RATING_FIELDS], period=period)
            .filter(BranchVisit.leaders_aligned_with_code.isnot(None))
            .all()
        )
    except SQLAlchemyError:
        logger.exception("[QUALITATIVE] Error fetching qualitative assessments")
        return QualitativeAssessment(notice=failure_notice("Error loading qualitative assessments"))

    if not visits:
        return QualitativeAssessment()

    ratings = rating_averages(visits, digits=None)
    overall = sum(ratings.model_dump().values()) / len(RATING_KEYS)
    return QualitativeAssessment(
        ratings=rating_averages(visits),
        overall=round_half_away_to(overall),
        count=len(visits),
    )


def fetch_branch_metrics(db: Session, period: Optional[Period] = None) -> BranchMetricsResponse:
    """One row per visited branch with its averaged HR metrics and ratings."""
    try:
        rows = (
            qualifying_visits(db, BranchVisit, Branch, period=period)
            .outerjoin(Branch, Branch.id == BranchVisit.branch_id)
            .all()
        )
    except SQLAlchemyError:
        logger.exception("[QUALITATIVE] Error fetching branch metrics")
        return BranchMetricsResponse(notice=failure_notice("Error loading metrics"))

    by_branch = defaultdict(list)
    branch_info = {}
    for visit, branch in rows:
        by_branch[visit.branch_id].append(visit)
        branch_info.setdefault(visit.branch_id, branch)

    result = []
    for branch_id, visits in by_branch.items():
        branch = branch_info.get(branch_id)
        result.append(BranchMetricsRow(
            branch_id=branch_id,
            name=branch.name if branch else UNKNOWN,
            location=branch.location if branch else UNKNOWN,
            # Fall back to the category recorded on the visit
            category=(branch.category if branch else visits[0].branch_category).value,
            visits=len(visits),
            manning=rounded_average(v.manning_percentage for v in visits),
            attrition=rounded_average(v.attrition_percentage for v in visits),
            er=rounded_average(v.er_percentage for v in visits),
            non_vendor=rounded_average(v.non_vendor_percentage for v in visits),
            cwt=rounded_average(v.cwt_cases for v in visits),
            ratings=rating_averages(visits),
        ))

    result.sort(key=lambda r: r.name)
    return BranchMetricsResponse(branches=result)
