def generate(client, employee_id, **extra):
    return client.post("/payroll/generate", json={"employee_id": employee_id, "year": 2024, "month": 3, **extra})


def test_generate_hourly_payroll(client, worked_employee):
    response = generate(
        client,
        worked_employee,
        bonuses=[{"name": "shift", "amount": 100}],
        deductions=[{"name": "uniform", "amount": 30}],
    )

    assert response.status_code == 201
    body = response.json()
    assert body["payment_type"] == "HOURLY"
    assert (body["hours_worked"], body["regular_hours"], body["overtime_hours"]) == (46, 40, 6)
    assert body["earnings"] == 980.0
    assert body["net_salary"] == 1050.0
    assert body["status"] == "PENDING"


def test_generate_twice_is_rejected(client, worked_employee):
    generate(client, worked_employee)

    response = generate(client, worked_employee)

    assert response.status_code == 400
    assert response.json()["detail"] == "Payroll already exists for this period"


def test_generate_for_missing_employee(client):
    assert generate(client, 404).status_code == 404


def test_hourly_without_rate_is_bad_request(client):
    employee = client.post("/employees", json={"name": "No Rate", "payment_type": "HOURLY"}).json()

    response = generate(client, employee["id"])

    assert response.status_code == 400
    assert "Hourly rate is required" in response.json()["detail"]


def test_salary_payroll(client):
    employee = client.post("/employees", json={"name": "Grace", "payment_type": "SALARY", "monthly_salary": 5000}).json()

    body = generate(
        client,
        employee["id"],
        bonuses=[{"name": "a", "amount": 200}, {"name": "b", "amount": 50}],
        deductions=[{"name": "c", "amount": 100}],
    ).json()

    assert body["net_salary"] == 5150.0
    assert body["hours_worked"] is None


def test_daily_earnings_split_overtime(client, worked_employee):
    response = client.get("/payroll/daily-earnings", params={"employee_id": worked_employee, "year": 2024, "month": 3})

    days = {d["day"]: d for d in response.json()}
    assert len(days) == 31
    assert days["2024-03-08"]["overtime_hours"] == 6
    assert days["2024-03-08"]["earnings"] == 180.0
    assert days["2024-03-04"]["earnings"] == 200.0


def test_overtime_split_endpoint(client, worked_employee):
    body = client.get("/payroll/overtime-split", params={"employee_id": worked_employee, "on": "2024-03-08"}).json()

    assert body["regular_hours"] == 0
    assert body["overtime_hours"] == 6
    assert body["weekly_threshold_hours"] == 40


def test_override_recalculates_existing_record(client, worked_employee):
    record = generate(client, worked_employee).json()

    response = client.post(
        "/payroll/daily-override",
        json={"employee_id": worked_employee, "day": "2024-03-08", "total_hours": 8},
    )

    assert response.status_code == 201
    assert response.json()["overridden"] is True
    records = client.get("/payroll", params={"employee_id": worked_employee}).json()
    assert records[0]["id"] == record["id"]
    assert records[0]["earnings"] == 1040.0

    removed = client.delete("/payroll/daily-override", params={"employee_id": worked_employee, "day": "2024-03-08"})
    assert removed.status_code == 204
    assert client.get("/payroll").json()[0]["earnings"] == 980.0


def test_override_in_future_is_rejected(client, hourly_employee):
    response = client.post(
        "/payroll/daily-override",
        json={"employee_id": hourly_employee, "day": "2999-01-01", "total_hours": 8},
    )

    assert response.status_code == 400


def test_paid_record_cannot_be_recalculated(client, worked_employee):
    record = generate(client, worked_employee).json()
    paid = client.patch(f"/payroll/{record['id']}/status", json={"status": "PAID", "approved_by": "admin"})
    assert paid.json()["approved_at"] is not None

    response = client.patch(f"/payroll/{record['id']}/recalculate")

    assert response.status_code == 409


def test_rate_period_overrides_profile_rate(client, worked_employee):
    created = client.post(
        "/hourly-rates",
        json={"employee_id": worked_employee, "start_date": "2024-03-01", "end_date": "2024-03-31", "hourly_rate": 25},
    )
    client.post(
        "/hourly-rates",
        json={"employee_id": worked_employee, "start_date": "2024-03-08", "end_date": "2024-03-08", "hourly_rate": 30},
    )

    assert created.status_code == 201
    resolved = client.get("/hourly-rates/resolve", params={"employee_id": worked_employee, "on": "2024-03-08"}).json()
    assert resolved == {"employee_id": worked_employee, "on": "2024-03-08", "rate": 30.0, "source": "period"}
    assert client.get("/hourly-rates/resolve", params={"employee_id": worked_employee, "on": "2024-03-04"}).json()[
        "rate"
    ] == 25.0


def test_inverted_rate_period_is_rejected(client, hourly_employee):
    response = client.post(
        "/hourly-rates",
        json={"employee_id": hourly_employee, "start_date": "2024-03-31", "end_date": "2024-03-01", "hourly_rate": 25},
    )

    assert response.status_code == 422


def test_overtime_config_defaults_and_update(client, worked_employee):
    default = client.get(f"/overtime-config/{worked_employee}").json()
    assert (default["weekly_threshold_hours"], default["overtime_multiplier"]) == (40, 1.5)

    client.put(f"/overtime-config/{worked_employee}", json={"weekly_threshold_hours": 44, "overtime_multiplier": 2})

    body = client.get("/payroll/overtime-split", params={"employee_id": worked_employee, "on": "2024-03-08"}).json()
    assert body["regular_hours"] == 4
    assert body["overtime_hours"] == 2


def test_recalculate_keeps_earnings_with_partial_rate_period(client, worked_employee):
    client.post(
        "/hourly-rates",
        json={"employee_id": worked_employee, "start_date": "2024-03-08", "end_date": "2024-03-31", "hourly_rate": 30},
    )
    record = generate(client, worked_employee).json()

    response = client.patch(f"/payroll/{record['id']}/recalculate")

    assert record["earnings"] == 1070.0
    assert record["hourly_rate"] == 20
    assert response.json()["earnings"] == record["earnings"]


def test_override_counts_toward_weekly_overtime(client, hourly_employee):
    client.put(f"/overtime-config/{hourly_employee}", json={"weekly_threshold_hours": 20, "overtime_multiplier": 1.5})
    client.post("/attendance/check-in", json={"employee_id": hourly_employee, "at": "2024-03-05T08:00:00Z"})
    client.post("/attendance/check-out", json={"employee_id": hourly_employee, "at": "2024-03-05T14:00:00Z"})
    client.post("/payroll/daily-override", json={"employee_id": hourly_employee, "day": "2024-03-04", "total_hours": 18})

    body = client.get("/payroll/overtime-split", params={"employee_id": hourly_employee, "on": "2024-03-05"}).json()

    assert (body["regular_hours"], body["overtime_hours"]) == (2, 4)


def test_stats_summarise_payroll_records(client, worked_employee):
    generate(client, worked_employee)

    response = client.get("/payroll/stats", params={"employee_id": worked_employee})

    assert response.status_code == 200
    body = response.json()
    assert body["all_time_total"] == 980.0
    assert (body["total_payrolls"], body["pending_count"]) == (1, 1)
    assert body["average_monthly_earnings"] == 980.0
    assert body["all_time_hours"] == 46
    assert len(body["monthly_breakdown"]) == 12
    assert body["yearly_breakdown"] == [{"year": 2024, "total_earnings": 980.0, "payroll_count": 1}]
