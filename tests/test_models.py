"""Smoke tests: verify all tables are created and records round-trip."""

from datetime import date

from sqlmodel import Session, select

from gymdesk.database import open_session
from gymdesk.models import (
    Exercise,
    MuscleGroup,
    Payment,
    PaymentStatus,
    ProgressEntry,
    Role,
    Routine,
    RoutineExercise,
    RoutineLevel,
    RoutineType,
    Student,
    Teacher,
)


def _session() -> Session:
    return open_session("sqlite://")


def test_teacher_roster_roundtrip():
    session = _session()
    teacher = Teacher(id="t1", name="Carlos", email="carlos@gimnasio.com", student_ids=["s1", "s2"])
    session.add(teacher)
    session.commit()
    session.refresh(teacher)
    assert teacher.role == Role.TEACHER
    assert teacher.student_ids == ["s1", "s2"]


def test_student_defaults():
    session = _session()
    student = Student(id="s1", name="Miguel", email="miguel@ejemplo.com", teacher_id="t1")
    session.add(student)
    session.commit()
    session.refresh(student)
    assert student.role == Role.STUDENT
    assert student.routine_id == ""
    assert student.payment_status == PaymentStatus.PENDING
    assert student.is_active is True
    assert student.last_payment_date is None


def test_routine_with_schedule_and_exercise_copy():
    session = _session()
    routine = Routine(
        id="r1",
        name="Fuerza",
        level=RoutineLevel.BEGINNER,
        type=RoutineType.STRENGTH,
        created_by="t1",
        days_per_week=3,
        rest_days=[0, 6],
    )
    session.add(routine)
    session.add(
        RoutineExercise(
            routine_id="r1", exercise_id="ex1", name="Sentadillas", muscle_group=MuscleGroup.LEGS
        )
    )
    session.commit()
    session.refresh(routine)

    assert routine.rest_days == [0, 6]
    row = session.exec(select(RoutineExercise)).one()
    assert row.row_id is not None
    assert row.exercise_id == "ex1"


def test_exercise_progress_and_payment_roundtrip():
    session = _session()
    session.add(Exercise(id="ex1", name="Remo", muscle_group=MuscleGroup.BACK, sets=3, reps=12, weight=40))
    session.add(
        ProgressEntry(
            id="p1",
            student_id="s1",
            exercise_id="ex1",
            date=date(2023, 6, 1),
            sets_completed=3,
            reps_completed=12,
            weight_used=40,
        )
    )
    session.add(Payment(id="pay1", student_id="s1", amount=50, status=PaymentStatus.PENDING))
    session.commit()

    assert session.get(Exercise, "ex1").weight == 40
    assert session.get(ProgressEntry, "p1").date == date(2023, 6, 1)
    payment = session.get(Payment, "pay1")
    assert payment.date == ""
    assert payment.status == PaymentStatus.PENDING
