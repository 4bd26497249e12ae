from datetime import date
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from branch_connect.models import UserRole, VisitStatus
from branch_connect.services import stats_service

TODAY = date(2026, 10, 18)
THIS_MONTH = date(2026, 10, 5)
LAST_MONTH = date(2026, 9, 20)


def _broken_session():
    db = MagicMock()
    db.query.side_effect = OperationalError("SELECT 1", {}, Exception("database is down"))
    return db


def test_empty_database_gives_zero_state(db):
    stats = stats_service.fetch_dashboard_stats(db, today=TODAY)

    assert stats.total_branches == 0
    assert stats.current.coverage == 0
    assert stats.current.manning_percentage == 0
    assert stats.vs_last_month.visited_branches == 0
    assert stats.notice is None


def test_drafts_do_not_count(db, make_profile, make_branch, make_visit):
    bh = make_profile()
    branch = make_branch()
    make_visit(bh, branch, THIS_MONTH, status=VisitStatus.DRAFT, manning_percentage=90)

    stats = stats_service.fetch_dashboard_stats(db, today=TODAY)

    assert stats.total_branches == 1
    assert stats.current.visited_branches == 0
    assert stats.current.active_users == 0
    assert stats.current.manning_percentage == 0


def test_current_month_against_previous(db, make_profile, make_branch, make_visit):
    first, second = make_profile(), make_profile()
    branches = [make_branch() for _ in range(4)]

    # Two visits to the same branch count once
    make_visit(first, branches[0], THIS_MONTH, manning_percentage=80, attrition_percentage=10, er_percentage=5)
    make_visit(first, branches[0], date(2026, 10, 6), manning_percentage=90, attrition_percentage=20)
    make_visit(second, branches[1], date(2026, 10, 7), status=VisitStatus.APPROVED, manning_percentage=85)
    make_visit(second, branches[2], LAST_MONTH, manning_percentage=70, cwt_cases=2)

    stats = stats_service.fetch_dashboard_stats(db, today=TODAY)

    assert stats.current.visited_branches == 2
    assert stats.current.coverage == 50
    assert stats.current.active_users == 2
    assert stats.current.manning_percentage == 85
    assert stats.current.attrition_rate == 15
    assert stats.current.er_percentage == 5

    assert stats.previous.visited_branches == 1
    assert stats.previous.coverage == 25
    assert stats.previous.cwt_cases == 2

    assert stats.vs_last_month.visited_branches == 1
    assert stats.vs_last_month.coverage == 25
    assert stats.vs_last_month.manning_percentage == 15


def test_query_failure_is_masked_with_notice():
    stats = stats_service.fetch_dashboard_stats(_broken_session(), today=TODAY)

    assert stats.total_branches == 0
    assert stats.current.coverage == 0
    assert stats.notice is not None
    assert stats.notice.variant == "destructive"


def test_zone_overview_counts(db, make_profile, make_branch, make_visit):
    bh = make_profile()
    make_profile(role=UserRole.ZH)
    branch = make_branch()
    make_visit(bh, branch, THIS_MONTH, status=VisitStatus.SUBMITTED)
    make_visit(bh, branch, LAST_MONTH, status=VisitStatus.APPROVED)
    make_visit(bh, branch, THIS_MONTH, status=VisitStatus.DRAFT)

    overview = stats_service.fetch_zone_overview(db, today=TODAY)

    assert overview.total_branches == 1
    assert overview.total_reporters == 1
    assert overview.visit_stats.total_visits == 3
    assert overview.visit_stats.pending_approval == 1
    assert overview.visit_stats.completed_visits == 1
    assert overview.monthly_stats.total_visits == 2
    assert overview.monthly_stats.completed_visits == 0


def test_active_reporters_only_count_bh_with_qualifying_visits(db, make_profile, make_branch, make_visit):
    active, idle = make_profile(), make_profile()
    supervisor = make_profile(role=UserRole.ZH)
    branch = make_branch()
    make_visit(active, branch, THIS_MONTH)
    make_visit(active, branch, date(2026, 10, 9))
    make_visit(idle, branch, THIS_MONTH, status=VisitStatus.DRAFT)
    make_visit(supervisor, branch, THIS_MONTH)

    assert stats_service.count_active_reporters(db, today=TODAY).count == 1
    # Monthly count includes every status
    assert stats_service.count_visits_in_month(db, today=TODAY).count == 4


def test_card_counts_fall_back_to_zero():
    result = stats_service.count_active_reporters(_broken_session(), today=TODAY)
    assert result.count == 0
    assert result.notice is not None


def test_reporter_report_stats(db, make_profile, make_branch, make_visit):
    bh = make_profile()
    branch = make_branch()
    for status in (VisitStatus.APPROVED, VisitStatus.APPROVED, VisitStatus.REJECTED,
                   VisitStatus.SUBMITTED, VisitStatus.DRAFT):
        make_visit(bh, branch, THIS_MONTH, status=status)

    stats = stats_service.fetch_reporter_report_stats(db, bh.id)

    assert stats.total == 5
    assert stats.approved == 2
    assert stats.rejected == 1
    assert stats.pending == 1
