from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from gymdesk.dependencies import get_store
from gymdesk.routers.students import router
from gymdesk.store import ALL_STUDENTS, DomainStore


@pytest.fixture(name="client")
def client_fixture(store: DomainStore):
    test_app = FastAPI()
    test_app.include_router(router, prefix="/api/students")
    test_app.dependency_overrides[get_store] = lambda: store
    return TestClient(test_app)


NEW_STUDENT = {
    "name": "Lucía Gómez",
    "email": "lucia@ejemplo.com",
    "teacher_id": "t2",
    "routine_id": "r3",
    "phone": "+34 611 000 009",
}


# ---------------------------------------------------------------------------
# GET
# ---------------------------------------------------------------------------


def test_list_all_students(client: TestClient):
    response = client.get("/api/students")
    assert response.status_code == 200
    assert len(response.json()) == 5


def test_list_students_by_teacher(client: TestClient):
    response = client.get("/api/students", params={"teacher_id": "t2"})
    assert [s["id"] for s in response.json()] == ["s4", "s5"]


def test_get_student_hides_credentials(client: TestClient):
    response = client.get("/api/students/s1")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Miguel Rodríguez"
    assert data["payment_status"] == "pending"
    assert "password" not in data


def test_get_student_not_found(client: TestClient):
    assert client.get("/api/students/s99").status_code == 404


# ---------------------------------------------------------------------------
# POST
# ---------------------------------------------------------------------------


def test_create_student(store: DomainStore, client: TestClient):
    response = client.post("/api/students", json=NEW_STUDENT)
    assert response.status_code == 201
    data = response.json()
    assert data["id"] == "s6"
    assert data["role"] == "student"
    assert data["is_active"] is True
    assert store.get_teacher("t2").student_ids == ["s4", "s5", "s6"]


def test_create_student_duplicate_email(client: TestClient):
    response = client.post("/api/students", json={**NEW_STUDENT, "email": "Elena@ejemplo.com"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Email Elena@ejemplo.com is already in use"


def test_create_student_missing_fields(client: TestClient):
    response = client.post("/api/students", json={"name": "Sin Email"})
    assert response.status_code == 400


def test_create_student_unknown_teacher(client: TestClient):
    response = client.post("/api/students", json={**NEW_STUDENT, "teacher_id": "t9"})
    assert response.status_code == 404


# ---------------------------------------------------------------------------
# DELETE
# ---------------------------------------------------------------------------


def test_delete_student(client: TestClient):
    assert client.delete("/api/students/s3").status_code == 204
    assert client.get("/api/students/s3").status_code == 404


def test_delete_student_not_found(client: TestClient):
    assert client.delete("/api/students/s99").status_code == 404


# ---------------------------------------------------------------------------
# PATCH
# ---------------------------------------------------------------------------


def test_mark_paid(client: TestClient):
    response = client.patch("/api/students/s1/payment", json={"status": "paid"})
    assert response.status_code == 200
    data = response.json()
    assert data["payment_status"] == "paid"
    assert data["last_payment_date"] == date.today().isoformat()


def test_mark_overdue_clears_date(client: TestClient):
    response = client.patch("/api/students/s3/payment", json={"status": "overdue"})
    assert response.json()["last_payment_date"] is None


def test_invalid_payment_status(client: TestClient):
    response = client.patch("/api/students/s1/payment", json={"status": "refunded"})
    assert response.status_code == 422


def test_assign_routine(client: TestClient):
    response = client.patch("/api/students/s4/routine", json={"routine_id": "r3"})
    assert response.status_code == 200
    assert response.json()["routine_id"] == "r3"


def test_assign_unknown_routine(client: TestClient):
    response = client.patch("/api/students/s4/routine", json={"routine_id": "r99"})
    assert response.status_code == 404
    assert client.get("/api/students/s4").json()["routine_id"] == "r2"


def test_deactivate_student(client: TestClient):
    response = client.patch("/api/students/s2/status", json={"is_active": False})
    assert response.status_code == 200
    assert response.json()["is_active"] is False


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


def test_get_credentials(client: TestClient):
    response = client.get("/api/students/s4/credentials")
    assert response.json() == {"username": "elena.garcia", "password": "h7c4ry"}


def test_regenerate_credentials(client: TestClient):
    response = client.post("/api/students/s4/credentials")
    assert response.status_code == 200
    data = response.json()
    assert data["username"] == "elena.garcia"
    assert data["password"] != "h7c4ry"
    assert client.get("/api/students/s4/credentials").json() == data


def test_credentials_not_found(client: TestClient):
    assert client.get("/api/students/s99/credentials").status_code == 404
    assert client.post("/api/students/s99/credentials").status_code == 404


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------


def test_concurrent_creates_keep_roster_consistent(client: TestClient, store: DomainStore):
    def create(n: int) -> int:
        body = {**NEW_STUDENT, "name": f"Alumno {n}", "email": f"alumno{n}@ejemplo.com"}
        return client.post("/api/students", json=body).status_code

    with ThreadPoolExecutor(max_workers=16) as pool:
        codes = list(pool.map(create, range(60)))

    assert codes == [201] * 60
    students = store.get_students_by_teacher("t2")
    assert len(students) == 62
    assert sorted(store.get_teacher("t2").student_ids) == sorted(s.id for s in students)
    assert len({s.id for s in store.get_students_by_teacher(ALL_STUDENTS)}) == 65


def test_concurrent_failures_report_their_own_status(client: TestClient):
    def create(n: int) -> int:
        # even requests reuse an existing email, odd ones name an unknown teacher
        if n % 2 == 0:
            body = {**NEW_STUDENT, "email": "miguel@ejemplo.com"}
        else:
            body = {**NEW_STUDENT, "teacher_id": "t99"}
        return client.post("/api/students", json=body).status_code

    with ThreadPoolExecutor(max_workers=16) as pool:
        codes = list(pool.map(create, range(40)))

    assert codes == [400, 404] * 20
