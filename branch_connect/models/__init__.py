from branch_connect.models.profile import Profile, UserRole, Gender, SUPERVISOR_ROLES
from branch_connect.models.branch import Branch, BranchCategory, CATEGORY_ORDER
from branch_connect.models.branch_assignment import BranchAssignment
from branch_connect.models.branch_visit import (
    BranchVisit,
    VisitStatus,
    QualitativeRating,
    QUALIFYING_STATUSES,
    RATING_FIELDS,
)

__all__ = [
    "Profile",
    "UserRole",
    "Gender",
    "SUPERVISOR_ROLES",
    "Branch",
    "BranchCategory",
    "CATEGORY_ORDER",
    "BranchAssignment",
    "BranchVisit",
    "VisitStatus",
    "QualitativeRating",
    "QUALIFYING_STATUSES",
    "RATING_FIELDS",
]
