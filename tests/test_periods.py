from datetime import date

import pytest

from branch_connect.services.periods import (
    current_and_previous_month,
    month_window,
    parse_month,
    time_range_periods,
    trailing_months,
)

TODAY = date(2026, 10, 18)


def test_month_window_covers_whole_month():
    feb = month_window(2024, 2)
    assert feb.start == date(2024, 2, 1)
    assert feb.end == date(2024, 2, 29)
    assert feb.label == "February"
    assert feb.contains(date(2024, 2, 29))
    assert not feb.contains(date(2024, 3, 1))


def test_previous_month_crosses_year_boundary():
    current, previous = current_and_previous_month(date(2026, 1, 10))
    assert current.start == date(2026, 1, 1)
    assert previous.start == date(2025, 12, 1)
    assert previous.end == date(2025, 12, 31)


def test_trailing_months_oldest_first_current_last():
    periods = trailing_months(6, TODAY)
    assert len(periods) == 6
    assert [p.label for p in periods] == ["May", "June", "July", "August", "September", "October"]
    assert periods[-1].contains(TODAY)


@pytest.mark.parametrize("month", ["October", "oct", "10", " OCTOBER "])
def test_parse_month_accepts_names_and_numbers(month):
    period = parse_month(month, "2025", today=TODAY)
    assert period.start == date(2025, 10, 1)
    assert period.end == date(2025, 10, 31)


def test_parse_month_defaults_to_current_month():
    period = parse_month(None, None, today=TODAY)
    assert period.start == date(2026, 10, 1)


@pytest.mark.parametrize("month, year", [("Smarch", "2026"), ("13", "2026"), ("May", "twenty")])
def test_parse_month_rejects_garbage(month, year):
    with pytest.raises(ValueError):
        parse_month(month, year, today=TODAY)


def test_last_seven_days_are_daily():
    periods = time_range_periods("lastSevenDays", TODAY)
    assert len(periods) == 7
    assert periods[-1].start == periods[-1].end == TODAY
    assert periods[-1].label == "Sun"


def test_last_month_is_weekly_and_ends_today():
    periods = time_range_periods("lastMonth", TODAY)
    assert periods[0].label == "Week 1"
    assert periods[0].start == date(2026, 9, 18)
    assert periods[-1].end == TODAY


def test_last_three_years_is_quarterly():
    periods = time_range_periods("lastThreeYears", TODAY)
    assert periods[0].label == "Q4 2023"
    assert periods[-1].label == "Q4 2026"
    assert len(periods) == 13


def test_unknown_range_falls_back_to_six_months():
    assert time_range_periods("whenever", TODAY) == time_range_periods("lastSixMonths", TODAY)


def test_last_month_has_no_single_day_trailing_week():
    periods = time_range_periods("lastMonth", date(2026, 3, 1))

    assert len(periods) == 4
    assert periods[-1].start == date(2026, 2, 22)
    assert periods[-1].end == date(2026, 2, 28)
