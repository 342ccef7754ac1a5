from datetime import date

from sqlmodel import SQLModel

from gymdesk.models import (
    UNASSIGNED_ROUTINE,
    MuscleGroup,
    PaymentStatus,
    Role,
    RoutineLevel,
    RoutineType,
)

# ---------------------------------------------------------------------------
# Request schemas
#
# Required fields default to empty so that presence is checked by the store
# (a failed result) instead of by construction.
# ---------------------------------------------------------------------------


class StudentCreate(SQLModel):
    name: str = ""
    email: str = ""
    teacher_id: str = ""
    routine_id: str = UNASSIGNED_ROUTINE
    phone: str = ""
    payment_status: PaymentStatus = PaymentStatus.PENDING
    profile_image: str | None = None


class ExerciseCreate(SQLModel):
    id: str = ""  # library id to copy; a new one is issued when empty
    name: str = ""
    muscle_group: MuscleGroup | None = None
    sets: int = 0
    reps: int = 0
    weight: float = 0.0
    instructions: str | None = None
    notes: str | None = None
    image_url: str | None = None
    video_url: str | None = None


class Schedule(SQLModel):
    days_per_week: int
    rest_days: list[int] = []


class RoutineCreate(SQLModel):
    name: str = ""
    description: str = ""
    level: RoutineLevel | None = None
    type: RoutineType | None = None
    created_by: str = ""
    exercises: list[ExerciseCreate] = []
    schedule: Schedule | None = None


class ProgressCreate(SQLModel):
    student_id: str
    exercise_id: str
    date: date
    sets_completed: int
    reps_completed: int
    weight_used: float
    notes: str | None = None


class PaymentStatusUpdate(SQLModel):
    status: PaymentStatus


class RoutineAssignment(SQLModel):
    routine_id: str


class ActiveStatusUpdate(SQLModel):
    is_active: bool


class LoginBody(SQLModel):
    email: str
    password: str = ""


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class Credentials(SQLModel):
    username: str
    password: str


class TeacherRead(SQLModel):
    id: str
    name: str
    email: str
    role: Role
    phone: str
    profile_image: str | None
    student_ids: list[str]


class StudentRead(SQLModel):
    id: str
    name: str
    email: str
    role: Role
    teacher_id: str
    routine_id: str
    payment_status: PaymentStatus
    is_active: bool
    last_payment_date: date | None
    phone: str
    profile_image: str | None


class ExerciseRead(SQLModel):
    id: str
    name: str
    muscle_group: MuscleGroup
    sets: int
    reps: int
    weight: float
    instructions: str | None = None
    notes: str | None = None
    image_url: str | None = None
    video_url: str | None = None


class RoutineRead(SQLModel):
    id: str
    name: str
    description: str
    level: RoutineLevel
    type: RoutineType
    created_by: str
    schedule: Schedule | None
    exercises: list[ExerciseRead]


class ProgressRead(SQLModel):
    id: str
    student_id: str
    exercise_id: str
    date: date
    sets_completed: int
    reps_completed: int
    weight_used: float
    notes: str | None


class ProgressDay(SQLModel):
    date: date
    entries: list[ProgressRead]


class ExerciseHistoryPoint(SQLModel):
    date: date
    weight_used: float
    reps_completed: int


class PaymentRead(SQLModel):
    id: str
    student_id: str
    amount: float
    date: str
    status: PaymentStatus


class DashboardSummary(SQLModel):
    teacher_id: str
    student_count: int
    pending_payment_count: int
    routine_count: int


class StoredIdentity(SQLModel):
    """Shape of the persisted session record; extra user fields are ignored."""

    id: str
    role: Role
    email: str
    name: str
