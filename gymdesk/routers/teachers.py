from fastapi import APIRouter, HTTPException

from gymdesk.dependencies import StoreDep
from gymdesk.schemas import DashboardSummary, StudentRead, TeacherRead

router = APIRouter()


@router.get("", response_model=list[TeacherRead])
def list_teachers(store: StoreDep):
    return store.get_all_teachers()


@router.get("/{id}", response_model=TeacherRead)
def get_teacher(id: str, store: StoreDep):
    teacher = store.get_teacher(id)
    if teacher is None:
        raise HTTPException(status_code=404, detail="Teacher not found")
    return teacher


@router.get("/{id}/pending", response_model=list[StudentRead])
def pending_students(id: str, store: StoreDep):
    if store.get_teacher(id) is None:
        raise HTTPException(status_code=404, detail="Teacher not found")
    return store.get_pending_students(id)


@router.get("/{id}/summary", response_model=DashboardSummary)
def dashboard_summary(id: str, store: StoreDep):
    summary = store.get_dashboard_summary(id)
    if summary is None:
        raise HTTPException(status_code=404, detail="Teacher not found")
    return summary
