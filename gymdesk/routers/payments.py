from fastapi import APIRouter, HTTPException

from gymdesk.dependencies import StoreDep
from gymdesk.schemas import PaymentRead

router = APIRouter()


@router.get("", response_model=list[PaymentRead])
def list_payments(store: StoreDep, student_id: str | None = None):
    if student_id is None:
        return store.get_all_payments()
    return store.get_payments_by_student(student_id)


@router.get("/teachers/{teacher_id}", response_model=list[PaymentRead])
def teacher_payments(teacher_id: str, store: StoreDep):
    """Payments of a teacher's students, newest first."""
    if store.get_teacher(teacher_id) is None:
        raise HTTPException(status_code=404, detail="Teacher not found")
    return store.get_teacher_payments(teacher_id)
