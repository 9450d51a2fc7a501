from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.session import Base, get_session
from app.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_session] = override_get_session


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def hourly_employee(client):
    response = client.post("/employees", json={"name": "Ada Lovelace", "payment_type": "HOURLY", "hourly_rate": 20})
    assert response.status_code == 201
    return response.json()["id"]


def work_week(client, employee_id):
    """Mon-Thu 10h and Friday 6h in the week of 2024-03-04."""
    for day, end in [("04", "18"), ("05", "18"), ("06", "18"), ("07", "18"), ("08", "14")]:
        client.post("/attendance/check-in", json={"employee_id": employee_id, "at": f"2024-03-{day}T08:00:00Z"})
        client.post("/attendance/check-out", json={"employee_id": employee_id, "at": f"2024-03-{day}T{end}:00:00Z"})


@pytest.fixture
def worked_employee(client, hourly_employee):
    work_week(client, hourly_employee)
    return hourly_employee


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
