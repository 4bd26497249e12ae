"""
Branch visit lifecycle.

    draft --(owner submits)--> submitted --(supervisor reviews)--> approved | rejected

Approved and rejected are terminal. Only the owner may edit a visit, and only
while it is a draft. The branch category is copied onto the visit whenever the
owner writes it and is never re-synced from the branch afterwards.
"""
import enum
import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import distinct, func, or_
from sqlalchemy.orm import Session

from branch_connect.models.branch import Branch
from branch_connect.models.branch_assignment import BranchAssignment
from branch_connect.models.branch_visit import BranchVisit, QUALIFYING_STATUSES, VisitStatus
from branch_connect.models.profile import Profile
from branch_connect.schemas.branch import ReporterBranchStats
from branch_connect.schemas.branch_visit import (
    BranchVisitCreate,
    BranchVisitUpdate,
    VisitReportRow,
    VisitReview,
)
from branch_connect.services.branch_service import BranchNotFound
from branch_connect.services.metrics import percentage
from branch_connect.services.notification_service import send_visit_decision_email

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("branch_id", "visit_date")

ALLOWED_TRANSITIONS = {
    VisitStatus.DRAFT: {VisitStatus.SUBMITTED},
    VisitStatus.SUBMITTED: {VisitStatus.APPROVED, VisitStatus.REJECTED},
}


class VisitNotFound(Exception):
    pass


class NotVisitOwner(Exception):
    pass


class InvalidTransition(Exception):
    def __init__(self, current: VisitStatus, target: VisitStatus):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move a {current.value} visit to {target.value}")


def _plain(data: dict) -> dict:
    # Ratings are stored as their labels
    return {k: (v.value if isinstance(v, enum.Enum) else v) for k, v in data.items()}


def _branch_or_raise(db: Session, branch_id: UUID) -> Branch:
    branch = db.query(Branch).filter(Branch.id == branch_id).first()
    if not branch:
        raise BranchNotFound(str(branch_id))
    return branch


def _transition(visit: BranchVisit, target: VisitStatus) -> None:
    current = VisitStatus(visit.status)
    if target not in ALLOWED_TRANSITIONS.get(current, set()):
        raise InvalidTransition(current, target)
    visit.status = target


def get_visit(db: Session, visit_id: UUID) -> BranchVisit:
    visit = db.query(BranchVisit).filter(BranchVisit.id == visit_id).first()
    if not visit:
        raise VisitNotFound(str(visit_id))
    return visit


def create_visit(db: Session, current_user: Profile, payload: BranchVisitCreate) -> BranchVisit:
    branch = _branch_or_raise(db, payload.branch_id)

    data = _plain(payload.model_dump(exclude={"status"}))
    visit = BranchVisit(
        **data,
        user_id=current_user.id,
        branch_category=branch.category,
        status=VisitStatus(payload.status),
    )
    db.add(visit)
    db.commit()
    db.refresh(visit)

    logger.info(f"[VISITS] {current_user.e_code} created {visit.status.value} visit {visit.id} for {branch.name}")
    return visit


def update_draft(db: Session, current_user: Profile, visit_id: UUID, payload: BranchVisitUpdate) -> BranchVisit:
    visit = get_visit(db, visit_id)
    if visit.user_id != current_user.id:
        raise NotVisitOwner(str(visit_id))
    if visit.status != VisitStatus.DRAFT:
        raise InvalidTransition(VisitStatus(visit.status), VisitStatus.DRAFT)

    data = _plain(payload.model_dump(exclude_unset=True))
    # An explicit null must not clear a required column
    data = {k: v for k, v in data.items() if v is not None or k not in REQUIRED_FIELDS}
    branch = _branch_or_raise(db, data.get("branch_id") or visit.branch_id)

    for field, value in data.items():
        setattr(visit, field, value)
    visit.branch_category = branch.category

    db.commit()
    db.refresh(visit)
    return visit


def submit_visit(db: Session, current_user: Profile, visit_id: UUID) -> BranchVisit:
    visit = get_visit(db, visit_id)
    if visit.user_id != current_user.id:
        raise NotVisitOwner(str(visit_id))

    _transition(visit, VisitStatus.SUBMITTED)
    db.commit()
    db.refresh(visit)

    logger.info(f"[VISITS] Visit {visit.id} submitted by {current_user.e_code}")
    return visit


def review_visit(db: Session, reviewer: Profile, visit_id: UUID, review: VisitReview) -> BranchVisit:
    """Approve or reject a submitted visit, then notify its reporter."""
    visit = get_visit(db, visit_id)

    _transition(visit, VisitStatus(review.decision))
    visit.reviewed_by = reviewer.id
    visit.reviewed_at = datetime.now(timezone.utc)
    visit.review_comment = review.comment

    db.commit()
    db.refresh(visit)

    logger.info(f"[VISITS] Visit {visit.id} {review.decision} by {reviewer.e_code}")

    # Notification failures never undo the review
    owner = visit.profile
    send_visit_decision_email(
        user_id=visit.user_id,
        user_name=owner.full_name if owner else "Unknown",
        decision=review.decision,
        comment=review.comment,
        branch_name=visit.branch.name if visit.branch else "Unknown",
        visit_date=str(visit.visit_date),
        reviewer_name=reviewer.full_name,
    )

    return visit


def list_my_visits(db: Session, user_id: UUID, status: Optional[VisitStatus] = None) -> List[BranchVisit]:
    query = db.query(BranchVisit).filter(BranchVisit.user_id == user_id)
    if status:
        query = query.filter(BranchVisit.status == status)
    return query.order_by(BranchVisit.visit_date.desc(), BranchVisit.created_at.desc()).all()


def _report_query(db: Session):
    return (
        db.query(BranchVisit, Branch, Profile)
        .outerjoin(Branch, Branch.id == BranchVisit.branch_id)
        .outerjoin(Profile, Profile.id == BranchVisit.user_id)
    )


def _report_row(visit: BranchVisit, branch: Optional[Branch], profile: Optional[Profile]) -> VisitReportRow:
    return VisitReportRow(
        id=visit.id,
        visit_date=visit.visit_date,
        status=visit.status,
        branch_id=visit.branch_id,
        branch_name=branch.name if branch else "Unknown",
        branch_location=branch.location if branch else "Unknown",
        branch_category=visit.branch_category,
        user_id=visit.user_id,
        bh_name=profile.full_name if profile else "Unknown",
        bh_code=profile.e_code if profile else "N/A",
    )


def list_recent_reports(
    db: Session,
    limit: int = 50,
    status: Optional[VisitStatus] = None,
    search: Optional[str] = None,
) -> List[VisitReportRow]:
    """Review queue: newest visits first; drafts only when asked for explicitly."""
    query = _report_query(db)

    if status:
        query = query.filter(BranchVisit.status == status)
    else:
        query = query.filter(BranchVisit.status != VisitStatus.DRAFT)

    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Branch.name.ilike(pattern),
            Branch.location.ilike(pattern),
            Profile.full_name.ilike(pattern),
            Profile.e_code.ilike(pattern),
        ))

    rows = (
        query
        .order_by(BranchVisit.visit_date.desc(), BranchVisit.created_at.desc())
        .limit(limit)
        .all()
    )
    return [_report_row(*row) for row in rows]


def get_report(db: Session, visit_id: UUID) -> VisitReportRow:
    row = _report_query(db).filter(BranchVisit.id == visit_id).first()
    if not row:
        raise VisitNotFound(str(visit_id))
    return _report_row(*row)


def fetch_reporter_branch_stats(db: Session, user_id: UUID) -> ReporterBranchStats:
    assigned = (
        db.query(func.count(BranchAssignment.id))
        .filter(BranchAssignment.user_id == user_id)
        .scalar() or 0
    )
    visited = (
        db.query(func.count(distinct(BranchVisit.branch_id)))
        .filter(
            BranchVisit.user_id == user_id,
            BranchVisit.status.in_(QUALIFYING_STATUSES),
        )
        .scalar() or 0
    )
    drafts = (
        db.query(func.count(BranchVisit.id))
        .filter(BranchVisit.user_id == user_id, BranchVisit.status == VisitStatus.DRAFT)
        .scalar() or 0
    )

    return ReporterBranchStats(
        assigned_branches=assigned,
        branches_visited=visited,
        pending_visits=drafts,
        completion_rate=min(percentage(visited, assigned), 100),
    )
