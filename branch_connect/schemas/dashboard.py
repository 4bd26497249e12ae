# branch_connect/schemas/dashboard.py
from pydantic import BaseModel
from uuid import UUID
from typing import List, Optional

from branch_connect.models.branch import BranchCategory
from branch_connect.schemas.common import Notice


# 1. Figures for one comparison window (the "Big Numbers" cards)
class MetricSnapshot(BaseModel):
    visited_branches: int = 0
    coverage: int = 0
    active_users: int = 0
    manning_percentage: int = 0
    attrition_rate: int = 0
    er_percentage: int = 0
    non_vendor_percentage: int = 0
    cwt_cases: int = 0


# 2. Current minus previous, drives the up/down arrows
class MetricDeltas(BaseModel):
    visited_branches: int = 0
    coverage: int = 0
    active_users: int = 0
    manning_percentage: int = 0
    attrition_rate: int = 0
    er_percentage: int = 0


class DashboardStats(BaseModel):
    total_branches: int = 0
    current: MetricSnapshot = MetricSnapshot()
    previous: MetricSnapshot = MetricSnapshot()
    vs_last_month: MetricDeltas = MetricDeltas()
    notice: Optional[Notice] = None


class VisitCounts(BaseModel):
    total_visits: int = 0
    pending_approval: int = 0
    completed_visits: int = 0


class ZoneOverview(BaseModel):
    total_branches: int = 0
    total_reporters: int = 0
    visit_stats: VisitCounts = VisitCounts()
    monthly_stats: VisitCounts = VisitCounts()
    notice: Optional[Notice] = None


class CountResponse(BaseModel):
    count: int = 0
    notice: Optional[Notice] = None


# 3. Per-category coverage table (always five rows)
class CategoryStats(BaseModel):
    category: BranchCategory
    total: int = 0
    visited: int = 0
    coverage: int = 0


class CategoryBreakdown(BaseModel):
    categories: List[CategoryStats]
    notice: Optional[Notice] = None


class CategoryVisitMetrics(BaseModel):
    category: BranchCategory
    name: str
    visits: int = 0
    manning: int = 0
    attrition: int = 0
    er: int = 0
    cwt: int = 0


class CategoryVisitMetricsResponse(BaseModel):
    categories: List[CategoryVisitMetrics]
    notice: Optional[Notice] = None


# 4. Time series for the trend charts
class TrendPoint(BaseModel):
    label: str
    period_start: str
    branch_coverage: int = 0
    participation_rate: int = 0
    manning_percentage: int = 0
    attrition_rate: int = 0
    er_percentage: int = 0
    non_vendor_percentage: int = 0


class TrendSeries(BaseModel):
    points: List[TrendPoint]
    notice: Optional[Notice] = None


# 5. Leaderboards
class PerformerRow(BaseModel):
    id: UUID
    name: str
    e_code: Optional[str] = None
    assigned_branches: int = 0
    reports: int = 0
    coverage: int = 0


class TopPerformers(BaseModel):
    performers: List[PerformerRow] = []
    notice: Optional[Notice] = None
