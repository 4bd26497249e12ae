from pydantic import BaseModel, Field
from uuid import UUID
from datetime import date, datetime
from typing import Literal, Optional

from branch_connect.models.branch import BranchCategory
from branch_connect.models.branch_visit import QualitativeRating, VisitStatus


class BranchVisitBase(BaseModel):
    branch_id: UUID
    visit_date: date

    hr_connect_session: Optional[bool] = None
    total_employees_invited: Optional[int] = Field(default=None, ge=0)
    total_participants: Optional[int] = Field(default=None, ge=0)

    manning_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    attrition_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    non_vendor_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    er_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    cwt_cases: Optional[int] = Field(default=None, ge=0)
    performance_level: Optional[str] = None

    new_employees_total: Optional[int] = Field(default=None, ge=0)
    new_employees_covered: Optional[int] = Field(default=None, ge=0)
    star_employees_total: Optional[int] = Field(default=None, ge=0)
    star_employees_covered: Optional[int] = Field(default=None, ge=0)

    leaders_aligned_with_code: Optional[QualitativeRating] = None
    employees_feel_safe: Optional[QualitativeRating] = None
    employees_feel_motivated: Optional[QualitativeRating] = None
    leaders_abusive_language: Optional[QualitativeRating] = None
    employees_comfort_escalation: Optional[QualitativeRating] = None
    inclusive_culture: Optional[QualitativeRating] = None

    feedback: Optional[str] = None
    best_practices: Optional[str] = None


class BranchVisitCreate(BranchVisitBase):
    # A visit is either saved as a draft or submitted straight away
    status: Literal["draft", "submitted"] = "draft"


class BranchVisitUpdate(BaseModel):
    branch_id: Optional[UUID] = None
    visit_date: Optional[date] = None

    hr_connect_session: Optional[bool] = None
    total_employees_invited: Optional[int] = Field(default=None, ge=0)
    total_participants: Optional[int] = Field(default=None, ge=0)

    manning_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    attrition_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    non_vendor_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    er_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    cwt_cases: Optional[int] = Field(default=None, ge=0)
    performance_level: Optional[str] = None

    new_employees_total: Optional[int] = Field(default=None, ge=0)
    new_employees_covered: Optional[int] = Field(default=None, ge=0)
    star_employees_total: Optional[int] = Field(default=None, ge=0)
    star_employees_covered: Optional[int] = Field(default=None, ge=0)

    leaders_aligned_with_code: Optional[QualitativeRating] = None
    employees_feel_safe: Optional[QualitativeRating] = None
    employees_feel_motivated: Optional[QualitativeRating] = None
    leaders_abusive_language: Optional[QualitativeRating] = None
    employees_comfort_escalation: Optional[QualitativeRating] = None
    inclusive_culture: Optional[QualitativeRating] = None

    feedback: Optional[str] = None
    best_practices: Optional[str] = None


class BranchVisitResponse(BranchVisitBase):
    id: UUID
    user_id: UUID
    branch_category: BranchCategory
    status: VisitStatus

    reviewed_by: Optional[UUID] = None
    reviewed_at: Optional[datetime] = None
    review_comment: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class VisitReview(BaseModel):
    decision: Literal["approved", "rejected"]
    comment: Optional[str] = None


# Row of the supervisor review queue
class VisitReportRow(BaseModel):
    id: UUID
    visit_date: date
    status: VisitStatus
    branch_id: UUID
    branch_name: str
    branch_location: str
    branch_category: BranchCategory
    user_id: UUID
    bh_name: str
    bh_code: str


class ReporterReportStats(BaseModel):
    total: int = 0
    approved: int = 0
    rejected: int = 0
    pending: int = 0
