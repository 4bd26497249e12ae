from datetime import date

import pytest

from branch_connect.models import UserRole


@pytest.mark.parametrize("path", [
    "/dashboard/stats",
    "/dashboard/categories",
    "/dashboard/trends",
    "/analytics/qualitative",
    "/reports/summary",
])
def test_reporters_are_kept_out_of_zone_views(client, acting, make_profile, path):
    acting["user"] = make_profile(role=UserRole.BH)

    res = client.get(path)

    assert res.status_code == 403


def test_me_returns_acting_profile(client, admin):
    body = client.get("/me").json()

    assert body["e_code"] == "ADM001"
    assert body["role"] == "admin"


def test_dashboard_stats_shape(client, make_profile, make_branch, make_visit):
    bh = make_profile()
    make_visit(bh, make_branch(), date.today(), manning_percentage=88)
    make_branch()

    body = client.get("/dashboard/stats").json()

    assert body["total_branches"] == 2
    assert body["current"]["coverage"] == 50
    assert body["current"]["manning_percentage"] == 88
    assert body["notice"] is None
    assert set(body["vs_last_month"]) == {
        "visited_branches", "coverage", "active_users",
        "manning_percentage", "attrition_rate", "er_percentage",
    }


def test_category_breakdown_defaults_to_current_month(client, make_profile, make_branch, make_visit):
    bh = make_profile()
    branch = make_branch()
    make_visit(bh, branch, date(2020, 1, 10))

    this_month = client.get("/dashboard/categories").json()["categories"]
    all_time = client.get("/dashboard/categories", params={"all_time": True}).json()["categories"]

    assert [row["category"] for row in this_month] == ["platinum", "diamond", "gold", "silver", "bronze"]
    assert this_month[2]["visited"] == 0
    assert all_time[2]["visited"] == 1


def test_invalid_month_is_422(client):
    res = client.get("/dashboard/categories", params={"month": "Smarch"})

    assert res.status_code == 422


def test_trends_return_requested_number_of_points(client):
    body = client.get("/dashboard/trends", params={"months": 12}).json()

    assert len(body["points"]) == 12


def test_top_performers_limit(client, make_profile):
    for _ in range(6):
        make_profile()

    assert len(client.get("/dashboard/top-performers").json()["performers"]) == 3
    assert len(client.get("/dashboard/top-performers", params={"limit": 5}).json()["performers"]) == 5


def test_analytics_range_selector(client):
    body = client.get("/analytics/trends", params={"range": "lastThreeMonths"}).json()

    assert len(body["points"]) == 4


def test_csv_download(client, make_profile, make_branch, make_visit):
    today = date.today()
    make_visit(make_profile(), make_branch(), today)

    res = client.get("/reports/branch-visits.csv", params={"month": str(today.month), "year": str(today.year)})

    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/csv")
    month_name = today.strftime("%B")
    assert f"branch_visits_{month_name}_{today.year}.csv" in res.headers["content-disposition"]


def test_csv_download_without_data_is_404(client):
    res = client.get("/reports/bhr-performance.csv")

    assert res.status_code == 404
    assert res.json()["detail"] == "No data to export"


def test_branch_metrics_month_filter(client, make_profile, make_branch, make_visit):
    make_visit(make_profile(), make_branch(name="Old Town"), date(2020, 1, 10))

    all_time = client.get("/analytics/branch-metrics").json()["branches"]
    this_month = client.get("/analytics/branch-metrics", params={"all_time": False}).json()["branches"]

    assert [row["name"] for row in all_time] == ["Old Town"]
    assert this_month == []
