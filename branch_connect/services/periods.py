"""
Calendar windows used by the dashboards.

Every aggregate is scoped to calendar periods: the current month is compared
with the previous calendar month, trends walk back whole months, and report
filters name a month and a year.
"""
import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional


@dataclass(frozen=True)
class Period:
    start: date
    end: date  # inclusive
    label: str

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def _shift_month(year: int, month: int, offset: int):
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def month_window(year: int, month: int, label: Optional[str] = None) -> Period:
    last_day = calendar.monthrange(year, month)[1]
    return Period(
        start=date(year, month, 1),
        end=date(year, month, last_day),
        label=label or calendar.month_name[month],
    )


def current_and_previous_month(today: Optional[date] = None):
    today = today or date.today()
    current = month_window(today.year, today.month)
    prev_year, prev_month = _shift_month(today.year, today.month, -1)
    return current, month_window(prev_year, prev_month)


def trailing_months(count: int, today: Optional[date] = None) -> List[Period]:
    """The last `count` calendar months, oldest first, ending with the current month."""
    today = today or date.today()
    periods = []
    for offset in range(count - 1, -1, -1):
        year, month = _shift_month(today.year, today.month, -offset)
        periods.append(month_window(year, month))
    return periods


def parse_month(month: Optional[str] = None, year: Optional[str] = None, today: Optional[date] = None) -> Period:
    """
    Resolve UI filter values ("October", "oct", "10" and "2026") to a month window.
    Missing values fall back to the current calendar month.
    """
    today = today or date.today()

    month_number = today.month
    if month:
        token = str(month).strip().lower()
        if token.isdigit():
            month_number = int(token)
        else:
            names = {name.lower(): i for i, name in enumerate(calendar.month_name) if name}
            abbrs = {name.lower(): i for i, name in enumerate(calendar.month_abbr) if name}
            month_number = names.get(token) or abbrs.get(token) or 0
        if not 1 <= month_number <= 12:
            raise ValueError(f"Unknown month: {month}")

    year_number = today.year
    if year:
        try:
            year_number = int(str(year).strip())
        except ValueError:
            raise ValueError(f"Invalid year: {year}")
        if not 1900 <= year_number <= 9999:
            raise ValueError(f"Invalid year: {year}")

    return month_window(year_number, month_number)


TIME_RANGES = (
    "lastSevenDays",
    "lastMonth",
    "lastThreeMonths",
    "lastSixMonths",
    "lastYear",
    "lastThreeYears",
)


def time_range_periods(time_range: str, today: Optional[date] = None) -> List[Period]:
    """Buckets for the analytics time-range selector."""
    today = today or date.today()

    if time_range == "lastSevenDays":
        days = [today - timedelta(days=i) for i in range(6, -1, -1)]
        return [Period(start=d, end=d, label=d.strftime("%a")) for d in days]

    if time_range == "lastMonth":
        start_year, start_month = _shift_month(today.year, today.month, -1)
        day = min(today.day, calendar.monthrange(start_year, start_month)[1])
        cursor = date(start_year, start_month, day)
        periods = []
        while cursor < today:
            week_end = min(cursor + timedelta(days=6), today)
            periods.append(Period(start=cursor, end=week_end, label=f"Week {len(periods) + 1}"))
            cursor += timedelta(days=7)
        return periods

    if time_range in ("lastThreeMonths", "lastYear"):
        count = 4 if time_range == "lastThreeMonths" else 13
        return [
            month_window(p.start.year, p.start.month, label=p.start.strftime("%b"))
            for p in trailing_months(count, today)
        ]

    if time_range == "lastThreeYears":
        start_year = today.year - 3
        quarter_month = ((today.month - 1) // 3) * 3 + 1
        year, month = start_year, quarter_month
        periods = []
        while date(year, month, 1) <= today:
            end_year, end_month = _shift_month(year, month, 2)
            window = month_window(end_year, end_month)
            quarter = (month - 1) // 3 + 1
            periods.append(Period(start=date(year, month, 1), end=window.end, label=f"Q{quarter} {year}"))
            year, month = _shift_month(year, month, 3)
        return periods

    # lastSixMonths and anything unrecognised
    return [
        month_window(p.start.year, p.start.month, label=p.start.strftime("%b"))
        for p in trailing_months(7, today)
    ]
