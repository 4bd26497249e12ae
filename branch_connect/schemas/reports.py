from pydantic import BaseModel
from typing import List, Optional

from branch_connect.schemas.common import Notice
from branch_connect.schemas.dashboard import CategoryStats


class MonthlySummaryReport(BaseModel):
    month: str
    year: int
    total_branch_visits: int = 0
    coverage_percentage: int = 0
    avg_participation: int = 0
    top_performer: Optional[str] = None
    category_breakdown: List[CategoryStats] = []
    notice: Optional[Notice] = None
