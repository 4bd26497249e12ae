import enum
import uuid

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from branch_connect.db.base import Base, enum_values
from branch_connect.models.branch import BranchCategory


class VisitStatus(str, enum.Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


# Only these statuses count toward coverage, participation and averages
QUALIFYING_STATUSES = (VisitStatus.SUBMITTED, VisitStatus.APPROVED)


class QualitativeRating(str, enum.Enum):
    VERY_POOR = "very_poor"
    POOR = "poor"
    NEUTRAL = "neutral"
    GOOD = "good"
    EXCELLENT = "excellent"


RATING_FIELDS = (
    "leaders_aligned_with_code",
    "employees_feel_safe",
    "employees_feel_motivated",
    "leaders_abusive_language",
    "employees_comfort_escalation",
    "inclusive_culture",
)


class BranchVisit(Base):
    __tablename__ = "branch_visits"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False)
    branch_id = Column(Uuid, ForeignKey("branches.id"), nullable=False)

    visit_date = Column(Date, nullable=False)

    # Copied from the branch when the visit is written; not re-synced later
    branch_category = Column(
        Enum(BranchCategory, name="branch_category", values_callable=enum_values),
        nullable=False,
    )

    status = Column(
        Enum(VisitStatus, name="visit_status", values_callable=enum_values),
        nullable=False,
        default=VisitStatus.DRAFT,
    )

    hr_connect_session = Column(Boolean, nullable=True)
    total_employees_invited = Column(Integer, nullable=True)
    total_participants = Column(Integer, nullable=True)

    manning_percentage = Column(Float, nullable=True)
    attrition_percentage = Column(Float, nullable=True)
    non_vendor_percentage = Column(Float, nullable=True)
    er_percentage = Column(Float, nullable=True)
    cwt_cases = Column(Integer, nullable=True)
    performance_level = Column(String, nullable=True)

    new_employees_total = Column(Integer, nullable=True)
    new_employees_covered = Column(Integer, nullable=True)
    star_employees_total = Column(Integer, nullable=True)
    star_employees_covered = Column(Integer, nullable=True)

    # Ordinal ratings: very_poor, poor, neutral, good, excellent
    leaders_aligned_with_code = Column(String, nullable=True)
    employees_feel_safe = Column(String, nullable=True)
    employees_feel_motivated = Column(String, nullable=True)
    leaders_abusive_language = Column(String, nullable=True)
    employees_comfort_escalation = Column(String, nullable=True)
    inclusive_culture = Column(String, nullable=True)

    feedback = Column(Text, nullable=True)
    best_practices = Column(Text, nullable=True)

    reviewed_by = Column(Uuid, ForeignKey("profiles.id"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    review_comment = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    # Relationships
    profile = relationship("Profile", foreign_keys=[user_id])
    branch = relationship("Branch")
    reviewer = relationship("Profile", foreign_keys=[reviewed_by])
