import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from gymdesk.dependencies import get_store
from gymdesk.routers.payments import router as payments_router
from gymdesk.routers.teachers import router as teachers_router
from gymdesk.store import DomainStore


@pytest.fixture(name="client")
def client_fixture(store: DomainStore):
    test_app = FastAPI()
    test_app.include_router(payments_router, prefix="/api/payments")
    test_app.include_router(teachers_router, prefix="/api/teachers")
    test_app.dependency_overrides[get_store] = lambda: store
    return TestClient(test_app)


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------


def test_list_all_payments(client: TestClient):
    response = client.get("/api/payments")
    assert response.status_code == 200
    assert len(response.json()) == 5


def test_list_payments_by_student(client: TestClient):
    response = client.get("/api/payments", params={"student_id": "s4"})
    assert response.json() == [
        {"id": "pay4", "student_id": "s4", "amount": 50.0, "date": "", "status": "pending"}
    ]


def test_teacher_ledger_newest_first(client: TestClient):
    response = client.get("/api/payments/teachers/t2")
    assert [p["id"] for p in response.json()] == ["pay5", "pay4"]


def test_teacher_ledger_unknown_teacher(client: TestClient):
    assert client.get("/api/payments/teachers/t9").status_code == 404


def test_ledger_reflects_mark_paid(store: DomainStore, client: TestClient):
    store.update_payment_status("s4", "paid")
    ledger = client.get("/api/payments/teachers/t2").json()
    assert ledger[0]["id"] == "pay4"
    assert ledger[0]["status"] == "paid"


# ---------------------------------------------------------------------------
# Teachers
# ---------------------------------------------------------------------------


def test_list_teachers(client: TestClient):
    response = client.get("/api/teachers")
    assert [t["email"] for t in response.json()] == ["carlos@gimnasio.com", "ana@gimnasio.com"]


def test_get_teacher(client: TestClient):
    data = client.get("/api/teachers/t1").json()
    assert data["student_ids"] == ["s1", "s2", "s3"]
    assert data["role"] == "teacher"
    assert client.get("/api/teachers/t9").status_code == 404


def test_pending_students(client: TestClient):
    response = client.get("/api/teachers/t1/pending")
    assert [s["id"] for s in response.json()] == ["s1", "s2"]
    assert client.get("/api/teachers/t9/pending").status_code == 404


def test_dashboard_summary(client: TestClient):
    response = client.get("/api/teachers/t2/summary")
    assert response.json() == {
        "teacher_id": "t2",
        "student_count": 2,
        "pending_payment_count": 1,
        "routine_count": 3,
    }
    assert client.get("/api/teachers/t9/summary").status_code == 404
