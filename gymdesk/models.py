from datetime import date
from enum import Enum

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

UNASSIGNED_ROUTINE = ""


class Role(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"


class PaymentStatus(str, Enum):
    PAID = "paid"
    PENDING = "pending"
    OVERDUE = "overdue"


class RoutineLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class RoutineType(str, Enum):
    STRENGTH = "strength"
    HYPERTROPHY = "hypertrophy"
    ENDURANCE = "endurance"
    CUSTOM = "custom"


class MuscleGroup(str, Enum):
    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    LEGS = "legs"
    GLUTES = "glutes"
    CORE = "core"
    FULL_BODY = "full_body"


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class Teacher(SQLModel, table=True):
    id: str = Field(primary_key=True)
    name: str
    email: str = Field(index=True, unique=True)
    role: Role = Role.TEACHER
    phone: str = ""
    profile_image: str | None = None
    # Derived roster; Student.teacher_id is authoritative
    student_ids: list[str] = Field(default_factory=list, sa_column=Column(JSON))


class Student(SQLModel, table=True):
    id: str = Field(primary_key=True)
    name: str
    email: str = Field(index=True, unique=True)
    role: Role = Role.STUDENT
    teacher_id: str = Field(index=True)
    routine_id: str = UNASSIGNED_ROUTINE
    payment_status: PaymentStatus = PaymentStatus.PENDING
    is_active: bool = True
    username: str = ""
    password: str = ""
    last_payment_date: date | None = None
    phone: str = ""
    profile_image: str | None = None


User = Teacher | Student


# ---------------------------------------------------------------------------
# Exercises and routines
# ---------------------------------------------------------------------------


class Exercise(SQLModel, table=True):
    id: str = Field(primary_key=True)
    name: str
    muscle_group: MuscleGroup
    sets: int = 0
    reps: int = 0
    weight: float = 0.0  # kg
    instructions: str | None = None
    notes: str | None = None
    image_url: str | None = None
    video_url: str | None = None


class Routine(SQLModel, table=True):
    id: str = Field(primary_key=True)
    name: str
    description: str = ""
    level: RoutineLevel
    type: RoutineType
    created_by: str = Field(index=True)
    days_per_week: int | None = None
    rest_days: list[int] | None = Field(default=None, sa_column=Column(JSON))


class RoutineExercise(SQLModel, table=True):
    """A routine's own copy of an exercise, keyed inside the routine by exercise_id."""

    row_id: int | None = Field(default=None, primary_key=True)
    routine_id: str = Field(foreign_key="routine.id", index=True)
    exercise_id: str
    position: int = 0
    name: str
    muscle_group: MuscleGroup
    sets: int = 0
    reps: int = 0
    weight: float = 0.0  # kg
    instructions: str | None = None
    notes: str | None = None
    image_url: str | None = None
    video_url: str | None = None


# ---------------------------------------------------------------------------
# Progress and payments
# ---------------------------------------------------------------------------


class ProgressEntry(SQLModel, table=True):
    id: str = Field(primary_key=True)
    student_id: str = Field(index=True)
    exercise_id: str = Field(index=True)
    date: date
    sets_completed: int
    reps_completed: int
    weight_used: float
    notes: str | None = None


class Payment(SQLModel, table=True):
    id: str = Field(primary_key=True)
    student_id: str = Field(index=True)
    amount: float
    date: str = ""  # ISO date, empty until paid
    status: PaymentStatus


class IdSequence(SQLModel, table=True):
    prefix: str = Field(primary_key=True)
    last: int = 0
