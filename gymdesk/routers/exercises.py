from fastapi import APIRouter, HTTPException

from gymdesk.dependencies import StoreDep
from gymdesk.schemas import ExerciseRead

router = APIRouter()


@router.get("", response_model=list[ExerciseRead])
def list_exercises(store: StoreDep):
    return store.get_all_exercises()


@router.get("/{id}", response_model=ExerciseRead)
def get_exercise(id: str, store: StoreDep):
    exercise = store.get_exercise(id)
    if exercise is None:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return exercise
