from datetime import date

from branch_connect.models import BranchCategory, VisitStatus
from branch_connect.services import export_service
from branch_connect.services.periods import month_window

OCTOBER = month_window(2026, 10)


def test_render_csv_json_encodes_every_cell():
    content = export_service.render_csv([
        {"name": "Alpha, East", "visits": 3, "score": 85.0, "note": None, "flag": True},
        {"name": 'Say "hi"', "visits": 0, "score": 72.5, "note": "ok", "flag": False},
    ])

    assert content.split("\n") == [
        "name,visits,score,note,flag",
        '"Alpha, East",3,85,null,true',
        '"Say \\"hi\\"",0,72.5,"ok",false',
    ]


def test_render_csv_with_no_rows_is_none():
    assert export_service.render_csv([]) is None


def test_empty_month_produces_no_file(db):
    assert export_service.export_branch_visits(db, OCTOBER, 2026) is None


def test_branch_visit_export(db, make_profile, make_branch, make_visit):
    bh = make_profile(full_name="Asha", e_code="BH7")
    branch = make_branch(BranchCategory.GOLD, name="Fort", location="Mumbai")
    make_visit(bh, branch, date(2026, 10, 3), manning_percentage=90, inclusive_culture="good")
    make_visit(bh, branch, date(2026, 10, 4), status=VisitStatus.DRAFT)
    make_visit(bh, branch, date(2026, 9, 4))

    export = export_service.export_branch_visits(db, OCTOBER, 2026)

    assert export.filename == "branch_visits_October_2026.csv"
    header, *lines = export.content.split("\n")
    assert header.startswith("visit_date,branch_name,location,category,bh_name,bh_code,status")
    assert len(lines) == 1
    assert lines[0].startswith('"2026-10-03","Fort","Mumbai","gold","Asha","BH7","submitted"')
    assert '"good"' in lines[0]


def test_branch_visit_export_filters(db, make_profile, make_branch, make_visit):
    bh, other = make_profile(), make_profile()
    mumbai = make_branch(BranchCategory.GOLD, location="Mumbai")
    delhi = make_branch(BranchCategory.BRONZE, location="Delhi")
    make_visit(bh, mumbai, date(2026, 10, 3))
    make_visit(other, delhi, date(2026, 10, 3))

    by_location = export_service.export_branch_visits(db, OCTOBER, 2026, location="Delhi")
    by_category = export_service.export_branch_visits(db, OCTOBER, 2026, category=BranchCategory.GOLD)
    by_reporter = export_service.export_branch_visits(db, OCTOBER, 2026, user_id=other.id)

    assert len(by_location.content.split("\n")) == 2
    assert '"gold"' in by_category.content
    assert '"Delhi"' in by_reporter.content
    assert export_service.export_branch_visits(db, OCTOBER, 2026, location="Chennai") is None


def test_bhr_performance_export(db, make_profile, make_branch, make_visit, assign):
    bh = make_profile(full_name="Asha")
    branches = [make_branch() for _ in range(2)]
    for branch in branches:
        assign(bh, branch)
    make_visit(bh, branches[0], date(2026, 10, 3), total_employees_invited=10, total_participants=7)

    export = export_service.export_bhr_performance(db, OCTOBER, 2026)

    assert export.filename == "bhr_performance_October_2026.csv"
    header, line = export.content.split("\n")
    assert header == (
        "bh_name,bh_code,location,assigned_branches,branches_visited,"
        "total_visits,coverage,participation_rate"
    )
    assert line.endswith("2,1,1,50,70")


def test_branch_assignment_export(db, make_profile, make_branch, assign):
    assert export_service.export_branch_assignments(db, OCTOBER, 2026) is None

    assign(make_profile(full_name="Asha"), make_branch(BranchCategory.SILVER, name="Fort"))

    export = export_service.export_branch_assignments(db, OCTOBER, 2026)

    assert export.filename == "branch_assignments_October_2026.csv"
    assert '"Fort"' in export.content
    assert '"silver"' in export.content


def test_monthly_summary(db, make_profile, make_branch, make_visit, assign):
    leader, other = make_profile(full_name="Leader"), make_profile(full_name="Other")
    branches = [make_branch(BranchCategory.PLATINUM) for _ in range(4)]
    assign(leader, branches[0])
    assign(leader, branches[1])
    make_visit(leader, branches[0], date(2026, 10, 2), total_employees_invited=10, total_participants=5)
    make_visit(leader, branches[1], date(2026, 10, 3), total_employees_invited=10, total_participants=10)
    make_visit(other, branches[2], date(2026, 10, 3))

    summary = export_service.build_monthly_summary(db, OCTOBER, 2026)

    assert summary.month == "October"
    assert summary.total_branch_visits == 3
    assert summary.coverage_percentage == 75
    assert summary.avg_participation == 75
    assert summary.top_performer == "Leader"
    assert summary.category_breakdown[0].visited == 3
    assert len(summary.category_breakdown) == 5


def test_monthly_summary_without_visits_has_no_top_performer(db, make_profile):
    make_profile()

    summary = export_service.build_monthly_summary(db, OCTOBER, 2026)

    assert summary.top_performer is None
    assert summary.total_branch_visits == 0
