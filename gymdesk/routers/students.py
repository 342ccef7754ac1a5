from fastapi import APIRouter, HTTPException

from gymdesk.dependencies import StoreDep, failure
from gymdesk.schemas import (
    ActiveStatusUpdate,
    Credentials,
    PaymentStatusUpdate,
    RoutineAssignment,
    StudentCreate,
    StudentRead,
)
from gymdesk.store import ALL_STUDENTS

router = APIRouter()


@router.get("", response_model=list[StudentRead])
def list_students(store: StoreDep, teacher_id: str = ALL_STUDENTS):
    return store.get_students_by_teacher(teacher_id)


@router.post("", response_model=StudentRead, status_code=201)
def create_student(body: StudentCreate, store: StoreDep):
    student = store.add_student(body)
    if student is None:
        raise failure(store)
    return student


@router.get("/{id}", response_model=StudentRead)
def get_student(id: str, store: StoreDep):
    student = store.get_student(id)
    if student is None:
        raise HTTPException(status_code=404, detail="Student not found")
    return student


@router.delete("/{id}", status_code=204)
def delete_student(id: str, store: StoreDep):
    if not store.delete_student(id):
        raise failure(store)


@router.patch("/{id}/payment", response_model=StudentRead)
def update_payment(id: str, body: PaymentStatusUpdate, store: StoreDep):
    if not store.update_payment_status(id, body.status):
        raise failure(store)
    return store.get_student(id)


@router.patch("/{id}/routine", response_model=StudentRead)
def update_routine(id: str, body: RoutineAssignment, store: StoreDep):
    if not store.update_student_routine(id, body.routine_id):
        raise failure(store)
    return store.get_student(id)


@router.patch("/{id}/status", response_model=StudentRead)
def update_status(id: str, body: ActiveStatusUpdate, store: StoreDep):
    if not store.update_student_status(id, body.is_active):
        raise failure(store)
    return store.get_student(id)


@router.get("/{id}/credentials", response_model=Credentials)
def get_credentials(id: str, store: StoreDep):
    credentials = store.get_credentials(id)
    if credentials is None:
        raise HTTPException(status_code=404, detail="Student not found")
    return credentials


@router.post("/{id}/credentials", response_model=Credentials)
def regenerate_credentials(id: str, store: StoreDep):
    credentials = store.regenerate_credentials(id)
    if credentials is None:
        raise failure(store)
    return credentials
