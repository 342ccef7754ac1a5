from fastapi import APIRouter, HTTPException

from gymdesk.dependencies import StoreDep, failure
from gymdesk.schemas import ExerciseCreate, RoutineCreate, RoutineRead

router = APIRouter()


@router.get("", response_model=list[RoutineRead])
def list_routines(store: StoreDep, teacher_id: str | None = None):
    if teacher_id is None:
        routines = store.get_all_routines()
    else:
        routines = store.get_routines_by_teacher(teacher_id)
    return [store.read_routine(r.id) for r in routines]


@router.post("", response_model=RoutineRead, status_code=201)
def create_routine(body: RoutineCreate, store: StoreDep):
    routine = store.add_routine(body)
    if routine is None:
        raise failure(store)
    return store.read_routine(routine.id)


@router.get("/{id}", response_model=RoutineRead)
def get_routine(id: str, store: StoreDep):
    routine = store.read_routine(id)
    if routine is None:
        raise HTTPException(status_code=404, detail="Routine not found")
    return routine


@router.delete("/{id}", status_code=204)
def delete_routine(id: str, store: StoreDep):
    if not store.delete_routine(id):
        raise failure(store)


@router.post("/{id}/exercises", response_model=RoutineRead, status_code=201)
def add_exercise(id: str, body: ExerciseCreate, store: StoreDep):
    if not store.add_exercise_to_routine(id, body):
        raise failure(store)
    return store.read_routine(id)


@router.delete("/{id}/exercises/{exercise_id}", status_code=204)
def delete_exercise(id: str, exercise_id: str, store: StoreDep):
    if not store.delete_exercise_from_routine(id, exercise_id):
        raise failure(store)
