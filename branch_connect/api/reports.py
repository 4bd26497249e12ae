import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from branch_connect.api.params import month_period
from branch_connect.core.dependencies import require_roles
from branch_connect.db.session import get_db
from branch_connect.models.branch import BranchCategory
from branch_connect.models.profile import Profile, SUPERVISOR_ROLES
from branch_connect.schemas.reports import MonthlySummaryReport
from branch_connect.services import export_service
from branch_connect.services.export_service import CsvExport
from branch_connect.services.periods import Period

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports & Exports"])

supervisor = require_roles(*SUPERVISOR_ROLES)


def _csv_response(export: Optional[CsvExport]) -> StreamingResponse:
    if export is None:
        raise HTTPException(404, "No data to export")

    response = StreamingResponse(iter([export.content]), media_type="text/csv")
    response.headers["Content-Disposition"] = f"attachment; filename={export.filename}"
    return response


# ------------------------------------------------------------------
# 1. MONTHLY SUMMARY
# ------------------------------------------------------------------
@router.get("/summary", response_model=MonthlySummaryReport)
def get_monthly_summary(
    period: Period = Depends(month_period),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    return export_service.build_monthly_summary(db, period, period.start.year)


# ------------------------------------------------------------------
# 2. CSV DOWNLOADS
# ------------------------------------------------------------------
@router.get("/branch-visits.csv")
def export_branch_visits(
    location: Optional[str] = None,
    category: Optional[BranchCategory] = None,
    user_id: Optional[UUID] = None,
    period: Period = Depends(month_period),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    """Visit detail for the month, optionally narrowed by location, category or reporter."""
    try:
        export = export_service.export_branch_visits(
            db, period, period.start.year, location=location, category=category, user_id=user_id
        )
    except SQLAlchemyError:
        logger.exception("[REPORTS] Branch visit export failed")
        raise HTTPException(500, "There was an error exporting the branch visit data.")
    return _csv_response(export)


@router.get("/bhr-performance.csv")
def export_bhr_performance(
    period: Period = Depends(month_period),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    try:
        export = export_service.export_bhr_performance(db, period, period.start.year)
    except SQLAlchemyError:
        logger.exception("[REPORTS] BHR performance export failed")
        raise HTTPException(500, "There was an error exporting the BHR performance data.")
    return _csv_response(export)


@router.get("/branch-assignments.csv")
def export_branch_assignments(
    period: Period = Depends(month_period),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(supervisor),
):
    try:
        export = export_service.export_branch_assignments(db, period, period.start.year)
    except SQLAlchemyError:
        logger.exception("[REPORTS] Branch assignment export failed")
        raise HTTPException(500, "There was an error exporting the branch assignments.")
    return _csv_response(export)
