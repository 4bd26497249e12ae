from typing import Optional

from fastapi import HTTPException, Query

from branch_connect.services.periods import Period, parse_month


def month_period(
    month: Optional[str] = Query(None, description="Month name, abbreviation or number"),
    year: Optional[str] = Query(None),
) -> Period:
    """Month/year filter shared by the dashboard and report routes; defaults to the current month."""
    try:
        return parse_month(month, year)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
