import logging
from collections import defaultdict
from typing import List
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from branch_connect.models.branch import Branch
from branch_connect.models.branch_assignment import BranchAssignment
from branch_connect.models.profile import Profile, UserRole
from branch_connect.schemas.branch import (
    AssignedReporter,
    BranchResponse,
    BranchWithAssignments,
    ReporterResponse,
)
from branch_connect.schemas.profile import ProfileResponse

logger = logging.getLogger(__name__)


class AssignmentExists(Exception):
    pass


class AssignmentNotFound(Exception):
    pass


class ReporterNotFound(Exception):
    pass


class BranchNotFound(Exception):
    pass


def list_zone_branches(db: Session) -> List[BranchWithAssignments]:
    """Every branch with the reporters assigned to it."""
    branches = db.query(Branch).order_by(Branch.name).all()
    assignments = (
        db.query(BranchAssignment.branch_id, BranchAssignment.user_id, Profile.full_name)
        .outerjoin(Profile, Profile.id == BranchAssignment.user_id)
        .all()
    )

    by_branch = defaultdict(list)
    for branch_id, user_id, full_name in assignments:
        by_branch[branch_id].append(AssignedReporter(user_id=user_id, bh_name=full_name or "Unknown"))

    result = []
    for branch in branches:
        assigned = by_branch.get(branch.id, [])
        result.append(BranchWithAssignments(
            **BranchResponse.model_validate(branch).model_dump(),
            bh_count=len({a.user_id for a in assigned}),
            bh_assignments=assigned,
        ))
    return result


def list_reporters(db: Session) -> List[ReporterResponse]:
    reporters = (
        db.query(Profile)
        .filter(Profile.role == UserRole.BH)
        .order_by(Profile.full_name)
        .all()
    )
    counts = defaultdict(int)
    for (user_id,) in db.query(BranchAssignment.user_id).all():
        counts[user_id] += 1

    return [
        ReporterResponse(
            **ProfileResponse.model_validate(reporter).model_dump(),
            branches_assigned=counts.get(reporter.id, 0),
        )
        for reporter in reporters
    ]


def list_assigned_branches(db: Session, user_id: UUID) -> List[Branch]:
    return (
        db.query(Branch)
        .join(BranchAssignment, BranchAssignment.branch_id == Branch.id)
        .filter(BranchAssignment.user_id == user_id)
        .order_by(Branch.name)
        .all()
    )


def assign_branch(db: Session, user_id: UUID, branch_id: UUID) -> BranchAssignment:
    reporter = db.query(Profile).filter(Profile.id == user_id, Profile.role == UserRole.BH).first()
    if not reporter:
        raise ReporterNotFound(str(user_id))
    if not db.query(Branch).filter(Branch.id == branch_id).first():
        raise BranchNotFound(str(branch_id))

    assignment = BranchAssignment(user_id=user_id, branch_id=branch_id)
    db.add(assignment)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise AssignmentExists(f"{user_id}:{branch_id}")

    db.refresh(assignment)
    logger.info(f"[ASSIGNMENTS] Branch {branch_id} assigned to {reporter.e_code}")
    return assignment


def unassign_branch(db: Session, user_id: UUID, branch_id: UUID) -> None:
    assignment = (
        db.query(BranchAssignment)
        .filter(BranchAssignment.user_id == user_id, BranchAssignment.branch_id == branch_id)
        .first()
    )
    if not assignment:
        raise AssignmentNotFound(f"{user_id}:{branch_id}")

    db.delete(assignment)
    db.commit()
    logger.info(f"[ASSIGNMENTS] Branch {branch_id} unassigned from {user_id}")
