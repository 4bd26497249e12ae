from pydantic import BaseModel
from uuid import UUID
from typing import List, Optional

from branch_connect.schemas.common import Notice


class RatingAverages(BaseModel):
    leaders_aligned: float = 0
    employees_safe: float = 0
    employees_motivated: float = 0
    no_abusive_language: float = 0
    comfort_escalation: float = 0
    inclusive_culture: float = 0


class QualitativeAssessment(BaseModel):
    ratings: RatingAverages = RatingAverages()
    overall: float = 0
    count: int = 0
    notice: Optional[Notice] = None


class BranchMetricsRow(BaseModel):
    branch_id: UUID
    name: str
    location: str
    category: str
    visits: int = 0
    manning: int = 0
    attrition: int = 0
    er: int = 0
    non_vendor: int = 0
    cwt: int = 0
    ratings: RatingAverages = RatingAverages()


class BranchMetricsResponse(BaseModel):
    branches: List[BranchMetricsRow] = []
    notice: Optional[Notice] = None


class QualityLeaderboardRow(BaseModel):
    id: UUID
    name: str
    code: str
    visit_count: int = 0
    overall_score: float = 0


class QualityLeaderboard(BaseModel):
    performers: List[QualityLeaderboardRow] = []
    notice: Optional[Notice] = None
