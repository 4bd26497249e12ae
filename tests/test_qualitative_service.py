from datetime import date

from branch_connect.models import VisitStatus
from branch_connect.services import qualitative_service
from branch_connect.services.periods import month_window


def test_no_rated_visits_gives_zero_assessment(db, make_profile, make_branch, make_visit):
    make_visit(make_profile(), make_branch(), date(2026, 10, 1))

    assessment = qualitative_service.fetch_qualitative_assessment(db)

    assert assessment.count == 0
    assert assessment.overall == 0
    assert assessment.ratings.leaders_aligned == 0


def test_rating_averages_and_overall(db, make_profile, make_branch, make_visit):
    bh = make_profile()
    branch = make_branch()
    ratings = {
        "leaders_aligned_with_code": "excellent",
        "employees_feel_safe": "good",
        "employees_feel_motivated": "neutral",
        "leaders_abusive_language": "excellent",
        "employees_comfort_escalation": "good",
        "inclusive_culture": "neutral",
    }
    make_visit(bh, branch, date(2026, 10, 1), **ratings)
    make_visit(bh, branch, date(2026, 10, 2), **dict(ratings, leaders_aligned_with_code="good"))
    make_visit(bh, branch, date(2026, 10, 3), status=VisitStatus.DRAFT,
               **dict(ratings, leaders_aligned_with_code="very_poor"))

    assessment = qualitative_service.fetch_qualitative_assessment(db)

    assert assessment.count == 2
    assert assessment.ratings.leaders_aligned == 4.5
    assert assessment.ratings.employees_safe == 4
    assert assessment.ratings.inclusive_culture == 3
    assert assessment.overall == 3.92


def test_assessment_respects_period(db, make_profile, make_branch, make_visit):
    bh = make_profile()
    make_visit(bh, make_branch(), date(2026, 9, 1), leaders_aligned_with_code="poor")

    assert qualitative_service.fetch_qualitative_assessment(db, month_window(2026, 10)).count == 0
    assert qualitative_service.fetch_qualitative_assessment(db, month_window(2026, 9)).count == 1


def test_branch_metrics_rows(db, make_profile, make_branch, make_visit):
    bh = make_profile()
    alpha = make_branch(name="Alpha", location="Pune")
    beta = make_branch(name="Beta")
    make_visit(bh, alpha, date(2026, 10, 1), manning_percentage=80, cwt_cases=1)
    make_visit(bh, alpha, date(2026, 10, 2), manning_percentage=91, cwt_cases=3)
    make_visit(bh, beta, date(2026, 10, 2), status=VisitStatus.DRAFT)

    rows = qualitative_service.fetch_branch_metrics(db).branches

    assert len(rows) == 1
    assert rows[0].name == "Alpha"
    assert rows[0].location == "Pune"
    assert rows[0].visits == 2
    assert rows[0].manning == 86
    assert rows[0].cwt == 2
