from typing import Optional

from sqlalchemy.orm import Query, Session

from branch_connect.models.branch_visit import BranchVisit, QUALIFYING_STATUSES
from branch_connect.services.periods import Period


def qualifying_visits(db: Session, *columns, period: Optional[Period] = None) -> Query:
    """Visits that count toward aggregates (submitted or approved), optionally within a period."""
    query = db.query(*columns) if columns else db.query(BranchVisit)
    query = query.filter(BranchVisit.status.in_(QUALIFYING_STATUSES))
    if period is not None:
        query = query.filter(
            BranchVisit.visit_date >= period.start,
            BranchVisit.visit_date <= period.end,
        )
    return query


def within(query: Query, period: Optional[Period]) -> Query:
    if period is None:
        return query
    return query.filter(
        BranchVisit.visit_date >= period.start,
        BranchVisit.visit_date <= period.end,
    )
