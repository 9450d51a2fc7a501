from datetime import date, timedelta

from app.seed.seed_data import seed


def check_in(client, employee_id, at, **extra):
    return client.post("/attendance/check-in", json={"employee_id": employee_id, "at": at, **extra})


def check_out(client, employee_id, at, **extra):
    return client.post("/attendance/check-out", json={"employee_id": employee_id, "at": at, **extra})


def test_check_in_and_out_with_break(client, hourly_employee):
    first = check_in(client, hourly_employee, "2024-03-04T09:00:00Z")
    assert first.status_code == 201
    assert first.json()["currently_open"] is True

    check_out(client, hourly_employee, "2024-03-04T12:00:00Z")
    check_in(client, hourly_employee, "2024-03-04T13:00:00Z")
    response = check_out(client, hourly_employee, "2024-03-04T17:30:00Z")

    assert response.status_code == 200
    body = response.json()
    assert body["worked_hours"] == 7.5
    assert body["break_hours"] == 1.0
    assert [e["type"] for e in body["events"]] == ["in", "out", "in", "out"]
    assert body["first_check_in"].startswith("2024-03-04T09:00:00")
    assert body["anomalies"] == []


def test_second_check_in_is_rejected(client, hourly_employee):
    check_in(client, hourly_employee, "2024-03-04T09:00:00Z")

    response = check_in(client, hourly_employee, "2024-03-04T10:00:00Z")

    assert response.status_code == 400
    assert response.json()["detail"] == "Already checked in. Please check out first."


def test_check_out_without_check_in_is_rejected(client, hourly_employee):
    response = check_out(client, hourly_employee, "2024-03-04T17:00:00Z")

    assert response.status_code == 400


def test_unknown_employee_is_not_found(client):
    response = check_in(client, 999, "2024-03-04T09:00:00Z")

    assert response.status_code == 404


def test_check_in_closes_previous_open_day(client, hourly_employee):
    check_in(client, hourly_employee, "2024-03-04T20:00:00Z")
    check_in(client, hourly_employee, "2024-03-05T09:00:00Z")

    days = client.get(
        "/attendance",
        params={"employee_id": hourly_employee, "start_date": "2024-03-04", "end_date": "2024-03-04"},
    ).json()

    assert days[0]["auto_checked_out"] is True
    assert days[0]["check_out"].startswith("2024-03-04T23:59:59.999")
    assert days[0]["currently_open"] is False
    assert round(days[0]["worked_hours"], 2) == 4.0


def test_sweep_endpoint_is_idempotent(client, hourly_employee):
    check_in(client, hourly_employee, "2024-03-04T09:00:00Z")

    first = client.post("/attendance/sweep", json={"employee_id": hourly_employee, "today": "2024-03-05"})
    second = client.post("/attendance/sweep", json={"employee_id": hourly_employee, "today": "2024-03-05"})

    assert first.json()["remediated"] == 1
    assert second.json()["remediated"] == 0


def test_list_rejects_inverted_range(client, hourly_employee):
    response = client.get(
        "/attendance",
        params={"employee_id": hourly_employee, "start_date": "2024-03-05", "end_date": "2024-03-04"},
    )

    assert response.status_code == 400


def test_monthly_summary(client, hourly_employee):
    for day in ("04", "05"):
        check_in(client, hourly_employee, f"2024-03-{day}T09:00:00Z")
        check_out(client, hourly_employee, f"2024-03-{day}T17:00:00Z")

    summary = client.get(
        "/attendance/summary", params={"employee_id": hourly_employee, "year": 2024, "month": 3}
    ).json()

    assert summary["present_days"] == 2
    assert summary["worked_hours"] == 16.0
    assert summary["anomaly_count"] == 0


def test_seeded_week_has_lunch_breaks(client, db_session):
    seed(db_session)
    monday = date.today() - timedelta(days=date.today().weekday() + 7)

    days = client.get(
        "/attendance",
        params={"employee_id": 1, "start_date": str(monday), "end_date": str(monday + timedelta(days=4))},
    ).json()

    assert len(days) == 5
    assert all(day["break_hours"] == 0.5 for day in days)
    assert days[-1]["worked_hours"] == 10.5
