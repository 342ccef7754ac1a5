from fastapi import APIRouter, HTTPException

from gymdesk.dependencies import StoreDep, failure
from gymdesk.schemas import ExerciseHistoryPoint, ProgressCreate, ProgressDay, ProgressRead

router = APIRouter()


@router.get("", response_model=list[ProgressRead])
def list_progress(store: StoreDep, student_id: str | None = None, exercise_id: str | None = None):
    if student_id is not None:
        entries = store.get_progress_by_student(student_id)
        if exercise_id is not None:
            entries = [e for e in entries if e.exercise_id == exercise_id]
        return entries
    if exercise_id is not None:
        return store.get_progress_by_exercise(exercise_id)
    raise HTTPException(status_code=400, detail="student_id or exercise_id is required")


@router.post("", response_model=ProgressRead, status_code=201)
def log_progress(body: ProgressCreate, store: StoreDep):
    entry = store.add_progress_entry(body)
    if entry is None:
        raise failure(store)
    return entry


@router.get("/students/{student_id}/by-date", response_model=list[ProgressDay])
def progress_by_date(student_id: str, store: StoreDep):
    return store.group_progress_by_date(student_id)


@router.get(
    "/students/{student_id}/exercises/{exercise_id}",
    response_model=list[ExerciseHistoryPoint],
)
def exercise_history(student_id: str, exercise_id: str, store: StoreDep):
    return store.get_exercise_history(student_id, exercise_id)
