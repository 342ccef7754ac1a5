"""
Bootstrap data for the gym dashboard.
Run with: python -m gymdesk.seed

Seeding only happens into an empty database; an existing store is left alone.
"""

from datetime import date

from sqlmodel import Session, select

from gymdesk.config import DATABASE_URL
from gymdesk.database import open_session
from gymdesk.models import (
    Exercise,
    MuscleGroup,
    Payment,
    PaymentStatus,
    ProgressEntry,
    Routine,
    RoutineExercise,
    RoutineLevel,
    RoutineType,
    Student,
    Teacher,
)
from gymdesk.store import DomainStore

# ---------------------------------------------------------------------------
# Exercise library
# ---------------------------------------------------------------------------

# (id, name, muscle group, sets, reps, weight kg)
EXERCISES = [
    ("ex1", "Sentadillas", MuscleGroup.LEGS, 3, 12, 30.0),
    ("ex2", "Press de banca", MuscleGroup.CHEST, 4, 8, 60.0),
    ("ex3", "Peso muerto", MuscleGroup.BACK, 3, 10, 80.0),
    ("ex4", "Dominadas", MuscleGroup.BACK, 3, 8, 0.0),
    ("ex5", "Curl de bíceps", MuscleGroup.BICEPS, 3, 12, 15.0),
    ("ex6", "Extensiones de tríceps", MuscleGroup.TRICEPS, 3, 12, 20.0),
    ("ex7", "Zancadas", MuscleGroup.LEGS, 3, 10, 20.0),
    ("ex8", "Prensa de piernas", MuscleGroup.LEGS, 4, 12, 120.0),
    ("ex9", "Remo", MuscleGroup.BACK, 3, 12, 40.0),
    ("ex10", "Press militar", MuscleGroup.SHOULDERS, 3, 10, 30.0),
]

# ---------------------------------------------------------------------------
# Routines
# ---------------------------------------------------------------------------

ROUTINES = [
    {
        "id": "r1",
        "name": "Fuerza Superior",
        "description": "Rutina enfocada en desarrollar la fuerza de la parte superior del cuerpo",
        "level": RoutineLevel.INTERMEDIATE,
        "type": RoutineType.STRENGTH,
        "created_by": "t1",
        "days_per_week": 3,
        "rest_days": [0, 3, 6],
        "exercises": ["ex2", "ex4", "ex5", "ex6", "ex10"],
    },
    {
        "id": "r2",
        "name": "Fuerza Inferior",
        "description": "Rutina enfocada en desarrollar la fuerza de la parte inferior del cuerpo",
        "level": RoutineLevel.INTERMEDIATE,
        "type": RoutineType.STRENGTH,
        "created_by": "t1",
        "days_per_week": 2,
        "rest_days": [0, 2, 4, 6],
        "exercises": ["ex1", "ex3", "ex7", "ex8"],
    },
    {
        "id": "r3",
        "name": "Full Body",
        "description": "Rutina completa para trabajar todo el cuerpo",
        "level": RoutineLevel.BEGINNER,
        "type": RoutineType.HYPERTROPHY,
        "created_by": "t2",
        "days_per_week": None,
        "rest_days": None,
        "exercises": ["ex1", "ex2", "ex9", "ex5", "ex10"],
    },
]

# ---------------------------------------------------------------------------
# People
# ---------------------------------------------------------------------------

# (id, name, email, phone, profile image, roster)
TEACHERS = [
    ("t1", "Carlos Pérez", "carlos@gimnasio.com", "+34 600 000 001", "https://randomuser.me/api/portraits/men/1.jpg", ["s1", "s2", "s3"]),
    ("t2", "Ana López", "ana@gimnasio.com", "+34 600 000 002", "https://randomuser.me/api/portraits/women/2.jpg", ["s4", "s5"]),
]

# (id, name, email, teacher, routine, status, last payment, username, password)
STUDENTS = [
    ("s1", "Miguel Rodríguez", "miguel@ejemplo.com", "t1", "r1", PaymentStatus.PENDING, None, "miguel.rodriguez", "k3m9qa"),
    ("s2", "Laura Sánchez", "laura@ejemplo.com", "t1", "r2", PaymentStatus.PENDING, None, "laura.sanchez", "x81vte"),
    ("s3", "Javier Martínez", "javier@ejemplo.com", "t1", "r3", PaymentStatus.PAID, date(2023, 6, 10), "javier.martinez", "p0w2zd"),
    ("s4", "Elena García", "elena@ejemplo.com", "t2", "r2", PaymentStatus.OVERDUE, None, "elena.garcia", "h7c4ry"),
    ("s5", "Roberto Fernández", "roberto@ejemplo.com", "t2", "r1", PaymentStatus.PAID, date(2023, 6, 20), "roberto.fernandez", "b5n6ju"),
]

# (id, student, exercise, date, sets, reps, weight, notes)
PROGRESS = [
    ("p1", "s1", "ex2", date(2023, 6, 1), 4, 8, 60.0, "Buena forma"),
    ("p2", "s1", "ex2", date(2023, 6, 8), 4, 8, 65.0, "Aumenté peso"),
    ("p3", "s1", "ex2", date(2023, 6, 15), 4, 8, 70.0, "Difícil pero completado"),
    ("p4", "s2", "ex1", date(2023, 5, 28), 3, 12, 30.0, "Primera vez con este peso"),
    ("p5", "s2", "ex1", date(2023, 6, 5), 3, 12, 35.0, "Mejorando la técnica"),
]

# (id, student, amount, date, status)
PAYMENTS = [
    ("pay1", "s1", 50.0, "", PaymentStatus.PENDING),
    ("pay2", "s2", 50.0, "2023-05-15", PaymentStatus.PAID),
    ("pay3", "s3", 50.0, "2023-06-10", PaymentStatus.PAID),
    ("pay4", "s4", 50.0, "", PaymentStatus.PENDING),
    ("pay5", "s5", 50.0, "2023-06-20", PaymentStatus.PAID),
]


def seed_store(store: DomainStore) -> bool:
    """Load the bootstrap data. Returns False when the store already holds users."""
    session: Session = store.session
    if session.exec(select(Teacher)).first() is not None:
        return False

    library: dict[str, Exercise] = {}
    for ex_id, name, group, sets, reps, weight in EXERCISES:
        library[ex_id] = Exercise(
            id=ex_id, name=name, muscle_group=group, sets=sets, reps=reps, weight=weight
        )
    session.add_all(library.values())

    for entry in ROUTINES:
        routine = Routine(**{k: v for k, v in entry.items() if k != "exercises"})
        session.add(routine)
        for position, ex_id in enumerate(entry["exercises"]):
            exercise = library[ex_id]
            session.add(
                RoutineExercise(
                    routine_id=routine.id,
                    exercise_id=ex_id,
                    position=position,
                    **exercise.model_dump(exclude={"id"}),
                )
            )

    for t_id, name, email, phone, image, roster in TEACHERS:
        session.add(
            Teacher(
                id=t_id,
                name=name,
                email=email,
                phone=phone,
                profile_image=image,
                student_ids=list(roster),
            )
        )

    for s_id, name, email, t_id, r_id, status, last_paid, username, password in STUDENTS:
        session.add(
            Student(
                id=s_id,
                name=name,
                email=email,
                teacher_id=t_id,
                routine_id=r_id,
                payment_status=status,
                last_payment_date=last_paid,
                username=username,
                password=password,
                phone="+34 611 000 00" + s_id[1:],
            )
        )

    for p_id, s_id, ex_id, day, sets, reps, weight, notes in PROGRESS:
        session.add(
            ProgressEntry(
                id=p_id,
                student_id=s_id,
                exercise_id=ex_id,
                date=day,
                sets_completed=sets,
                reps_completed=reps,
                weight_used=weight,
                notes=notes,
            )
        )

    for pay_id, s_id, amount, day, status in PAYMENTS:
        session.add(Payment(id=pay_id, student_id=s_id, amount=amount, date=day, status=status))

    session.commit()
    return True


def create_store(url: str = DATABASE_URL) -> DomainStore:
    """Open the database, build the store and seed it if it is empty."""
    store = DomainStore(open_session(url))
    seed_store(store)
    return store


def main() -> None:
    store = create_store()
    print(f"Teachers:  {len(store.get_all_teachers())}")
    print(f"Students:  {len(store.get_students_by_teacher('all'))}")
    print(f"Routines:  {len(store.get_all_routines())}")
    print(f"Exercises: {len(store.get_all_exercises())}")
    print(f"Payments:  {len(store.get_all_payments())}")
    print("Seed complete! ✦")


if __name__ == "__main__":
    main()
