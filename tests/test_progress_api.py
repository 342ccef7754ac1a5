import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from gymdesk.dependencies import get_store
from gymdesk.routers.progress import router
from gymdesk.store import DomainStore


@pytest.fixture(name="client")
def client_fixture(store: DomainStore):
    test_app = FastAPI()
    test_app.include_router(router, prefix="/api/progress")
    test_app.dependency_overrides[get_store] = lambda: store
    return TestClient(test_app)


def test_list_by_student(client: TestClient):
    response = client.get("/api/progress", params={"student_id": "s1"})
    assert response.status_code == 200
    assert [p["weight_used"] for p in response.json()] == [60, 65, 70]


def test_list_by_exercise(client: TestClient):
    response = client.get("/api/progress", params={"exercise_id": "ex1"})
    assert [p["id"] for p in response.json()] == ["p4", "p5"]


def test_list_by_student_and_exercise(client: TestClient):
    response = client.get("/api/progress", params={"student_id": "s1", "exercise_id": "ex1"})
    assert response.json() == []


def test_list_requires_a_filter(client: TestClient):
    assert client.get("/api/progress").status_code == 400


def test_log_progress(client: TestClient):
    response = client.post(
        "/api/progress",
        json={
            "student_id": "s2",
            "exercise_id": "ex1",
            "date": "2023-06-12",
            "sets_completed": 3,
            "reps_completed": 12,
            "weight_used": 37.5,
            "notes": "Nuevo récord",
        },
    )
    assert response.status_code == 201
    data = response.json()
    assert data["id"] == "p6"
    assert data["date"] == "2023-06-12"


def test_log_progress_unknown_student(client: TestClient):
    response = client.post(
        "/api/progress",
        json={
            "student_id": "s99",
            "exercise_id": "ex1",
            "date": "2023-06-12",
            "sets_completed": 3,
            "reps_completed": 12,
            "weight_used": 37.5,
        },
    )
    assert response.status_code == 404


def test_progress_by_date(client: TestClient):
    response = client.get("/api/progress/students/s2/by-date")
    data = response.json()
    assert [d["date"] for d in data] == ["2023-06-05", "2023-05-28"]
    assert data[0]["entries"][0]["id"] == "p5"


def test_exercise_history(client: TestClient):
    response = client.get("/api/progress/students/s1/exercises/ex2")
    assert response.json() == [
        {"date": "2023-06-01", "weight_used": 60.0, "reps_completed": 8},
        {"date": "2023-06-08", "weight_used": 65.0, "reps_completed": 8},
        {"date": "2023-06-15", "weight_used": 70.0, "reps_completed": 8},
    ]
