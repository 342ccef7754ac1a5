"""
In-memory domain store: the single owner of every gym entity collection.

Reads return live records (or None / an empty list). Writes keep the
cross-entity invariants and report failure through their return value; the
kind and message of the calling thread's most recent failure are kept in
``last_failure`` and ``last_error``. Every public method holds the store lock.
"""

import functools
import logging
import re
import threading
from collections import defaultdict
from datetime import date

from sqlmodel import Session, select

from gymdesk.config import MONTHLY_FEE
from gymdesk.credentials import generate_credentials
from gymdesk.errors import FailureKind
from gymdesk.models import (
    UNASSIGNED_ROUTINE,
    Exercise,
    IdSequence,
    Payment,
    PaymentStatus,
    ProgressEntry,
    Routine,
    RoutineExercise,
    Student,
    Teacher,
    User,
)
from gymdesk.schemas import (
    Credentials,
    DashboardSummary,
    ExerciseCreate,
    ExerciseHistoryPoint,
    ExerciseRead,
    ProgressCreate,
    ProgressDay,
    ProgressRead,
    RoutineCreate,
    RoutineRead,
    Schedule,
    StudentCreate,
)

logger = logging.getLogger(__name__)

ALL_STUDENTS = "all"

# Id prefix -> columns whose existing ids count toward the sequence
_ID_SOURCES = {
    "t": [Teacher.id],
    "s": [Student.id],
    "r": [Routine.id],
    "ex": [Exercise.id, RoutineExercise.exercise_id],
    "p": [ProgressEntry.id],
    "pay": [Payment.id],
}


def _sequence_number(entity_id: str, prefix: str) -> int | None:
    match = re.fullmatch(rf"{prefix}(\d+)", entity_id)
    return int(match.group(1)) if match else None


def _serialized(method):
    """Run ``method`` while holding the store lock; the session is not thread-safe."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


class DomainStore:
    def __init__(self, session: Session):
        self.session = session
        self._lock = threading.RLock()
        # Failure details are per calling thread so concurrent requests report their own
        self._failures = threading.local()

    @property
    def last_failure(self) -> FailureKind | None:
        return getattr(self._failures, "kind", None)

    @property
    def last_error(self) -> str:
        return getattr(self._failures, "message", "")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _reject(self, kind: FailureKind, message: str, *args) -> None:
        self._failures.kind = kind
        self._failures.message = message % args
        logger.warning(message, *args)

    def _ok(self) -> None:
        self._failures.kind = None
        self._failures.message = ""

    @_serialized
    def next_id(self, prefix: str) -> str:
        """Issue a fresh id for ``prefix``. Issued ids are never handed out again."""
        sequence = self.session.get(IdSequence, prefix)
        if sequence is None:
            sequence = IdSequence(prefix=prefix, last=0)

        highest = sequence.last
        for column in _ID_SOURCES.get(prefix, []):
            for existing in self.session.exec(select(column)).all():
                number = _sequence_number(existing, prefix)
                if number is not None and number > highest:
                    highest = number

        sequence.last = highest + 1
        self.session.add(sequence)
        self.session.flush()
        return f"{prefix}{sequence.last}"

    def _email_in_use(self, email: str) -> bool:
        return self.find_user_by_email(email) is not None

    def _routine_exercise_rows(self, routine_id: str) -> list[RoutineExercise]:
        return list(
            self.session.exec(
                select(RoutineExercise)
                .where(RoutineExercise.routine_id == routine_id)
                .order_by(RoutineExercise.position, RoutineExercise.row_id)
            ).all()
        )

    @staticmethod
    def _exercise_is_complete(exercise: ExerciseCreate) -> bool:
        return bool(exercise.name) and exercise.muscle_group is not None

    def _settle_payment(self, student: Student) -> Payment:
        """Stamp today on the student and on its newest pending payment, or a new one."""
        today = date.today()
        student.last_payment_date = today

        pending = [
            p for p in self.get_payments_by_student(student.id) if p.status == PaymentStatus.PENDING
        ]
        if pending:
            payment = max(pending, key=lambda p: _sequence_number(p.id, "pay") or 0)
            payment.status = PaymentStatus.PAID
            payment.date = today.isoformat()
        else:
            payment = Payment(
                id=self.next_id("pay"),
                student_id=student.id,
                amount=MONTHLY_FEE,
                date=today.isoformat(),
                status=PaymentStatus.PAID,
            )
        self.session.add(payment)
        logger.info("Recorded payment %s for student %s", payment.id, student.id)
        return payment

    def _copy_into_routine(
        self, routine_id: str, exercise: ExerciseCreate, position: int
    ) -> RoutineExercise:
        exercise_id = exercise.id or self.next_id("ex")
        row = RoutineExercise(
            routine_id=routine_id,
            exercise_id=exercise_id,
            position=position,
            **exercise.model_dump(exclude={"id"}),
        )
        self.session.add(row)
        return row

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    @_serialized
    def get_teacher(self, teacher_id: str) -> Teacher | None:
        return self.session.get(Teacher, teacher_id)

    @_serialized
    def get_all_teachers(self) -> list[Teacher]:
        return list(self.session.exec(select(Teacher)).all())

    @_serialized
    def get_students_by_teacher(self, teacher_id: str) -> list[Student]:
        """Students of a teacher; ``ALL_STUDENTS`` returns everyone."""
        statement = select(Student)
        if teacher_id != ALL_STUDENTS:
            statement = statement.where(Student.teacher_id == teacher_id)
        return list(self.session.exec(statement).all())

    @_serialized
    def get_student(self, student_id: str) -> Student | None:
        return self.session.get(Student, student_id)

    @_serialized
    def get_user(self, user_id: str) -> User | None:
        return self.get_teacher(user_id) or self.get_student(user_id)

    @_serialized
    def find_user_by_email(self, email: str) -> User | None:
        """Case-insensitive email lookup over teachers first, then students."""
        wanted = email.strip().lower()
        if not wanted:
            return None
        users: list[User] = [*self.get_all_teachers(), *self.get_students_by_teacher(ALL_STUDENTS)]
        for user in users:
            if user.email.strip().lower() == wanted:
                return user
        return None

    @_serialized
    def add_student(self, body: StudentCreate) -> Student | None:
        email = body.email.strip()
        required = {
            "name": body.name,
            "email": email,
            "teacher_id": body.teacher_id,
            "routine_id": body.routine_id,
            "phone": body.phone,
        }
        missing = [field for field, value in required.items() if not value]
        if missing:
            self._reject(FailureKind.VALIDATION, "Student is missing required fields: %s", missing)
            return None

        if self._email_in_use(email):
            self._reject(FailureKind.DUPLICATE, "Email %s is already in use", email)
            return None

        teacher = self.get_teacher(body.teacher_id)
        if teacher is None:
            self._reject(FailureKind.NOT_FOUND, "Teacher %s does not exist", body.teacher_id)
            return None

        if self.get_routine(body.routine_id) is None:
            self._reject(FailureKind.NOT_FOUND, "Routine %s does not exist", body.routine_id)
            return None

        credentials = generate_credentials(body.name)
        student = Student(
            id=self.next_id("s"),
            name=body.name,
            email=email,
            teacher_id=teacher.id,
            routine_id=body.routine_id,
            payment_status=body.payment_status,
            phone=body.phone,
            profile_image=body.profile_image,
            username=credentials.username,
            password=credentials.password,
        )
        self.session.add(student)
        if student.payment_status == PaymentStatus.PAID:
            self._settle_payment(student)
        teacher.student_ids = [*teacher.student_ids, student.id]
        self.session.add(teacher)
        self.session.commit()
        self.session.refresh(student)

        logger.info("Added student %s to teacher %s", student.id, teacher.id)
        self._ok()
        return student

    @_serialized
    def delete_student(self, student_id: str) -> bool:
        student = self.get_student(student_id)
        if student is None:
            self._reject(FailureKind.NOT_FOUND, "Student %s does not exist", student_id)
            return False

        teacher = self.get_teacher(student.teacher_id)
        if teacher is not None:
            teacher.student_ids = [sid for sid in teacher.student_ids if sid != student_id]
            self.session.add(teacher)
        # Payments must reference an existing student; progress history is kept
        payments = self.get_payments_by_student(student_id)
        for payment in payments:
            self.session.delete(payment)
        self.session.delete(student)
        self.session.commit()

        logger.info("Deleted student %s and %d payments", student_id, len(payments))
        self._ok()
        return True

    @_serialized
    def update_payment_status(self, student_id: str, status: PaymentStatus) -> bool:
        """
        Set a student's payment status. Marking "paid" stamps today's date on
        the student and on a Payment record: the most recent pending one if the
        student has any, otherwise a new record for the monthly fee.
        """
        student = self.get_student(student_id)
        if student is None:
            self._reject(FailureKind.NOT_FOUND, "Student %s does not exist", student_id)
            return False

        status = PaymentStatus(status)
        student.payment_status = status
        if status == PaymentStatus.PAID:
            self._settle_payment(student)
        else:
            student.last_payment_date = None

        self.session.add(student)
        self.session.commit()
        self._ok()
        return True

    @_serialized
    def update_student_routine(self, student_id: str, routine_id: str) -> bool:
        student = self.get_student(student_id)
        if student is None:
            self._reject(FailureKind.NOT_FOUND, "Student %s does not exist", student_id)
            return False
        if self.get_routine(routine_id) is None:
            self._reject(FailureKind.NOT_FOUND, "Routine %s does not exist", routine_id)
            return False

        student.routine_id = routine_id
        self.session.add(student)
        self.session.commit()
        self._ok()
        return True

    @_serialized
    def update_student_status(self, student_id: str, is_active: bool) -> bool:
        student = self.get_student(student_id)
        if student is None:
            self._reject(FailureKind.NOT_FOUND, "Student %s does not exist", student_id)
            return False

        student.is_active = is_active
        self.session.add(student)
        self.session.commit()
        self._ok()
        return True

    @_serialized
    def regenerate_credentials(self, student_id: str) -> Credentials | None:
        student = self.get_student(student_id)
        if student is None:
            self._reject(FailureKind.NOT_FOUND, "Student %s does not exist", student_id)
            return None

        credentials = generate_credentials(student.name)
        while credentials.password == student.password:
            credentials = generate_credentials(student.name)

        student.username = credentials.username
        student.password = credentials.password
        self.session.add(student)
        self.session.commit()
        self._ok()
        return credentials

    @_serialized
    def get_credentials(self, student_id: str) -> Credentials | None:
        student = self.get_student(student_id)
        if student is None:
            return None
        return Credentials(username=student.username, password=student.password)

    # ------------------------------------------------------------------
    # Routines and exercises
    # ------------------------------------------------------------------

    @_serialized
    def get_routine(self, routine_id: str) -> Routine | None:
        if not routine_id:
            return None
        return self.session.get(Routine, routine_id)

    @_serialized
    def get_all_routines(self) -> list[Routine]:
        return list(self.session.exec(select(Routine)).all())

    @_serialized
    def get_routines_by_teacher(self, teacher_id: str) -> list[Routine]:
        return list(self.session.exec(select(Routine).where(Routine.created_by == teacher_id)).all())

    @_serialized
    def get_routine_exercises(self, routine_id: str) -> list[ExerciseRead]:
        internal = {"row_id", "routine_id", "exercise_id", "position"}
        return [
            ExerciseRead(id=row.exercise_id, **row.model_dump(exclude=internal))
            for row in self._routine_exercise_rows(routine_id)
        ]

    @_serialized
    def read_routine(self, routine_id: str) -> RoutineRead | None:
        """A routine together with its ordered exercise list."""
        routine = self.get_routine(routine_id)
        if routine is None:
            return None
        schedule = None
        if routine.days_per_week is not None:
            schedule = Schedule(days_per_week=routine.days_per_week, rest_days=routine.rest_days or [])
        return RoutineRead(
            id=routine.id,
            name=routine.name,
            description=routine.description,
            level=routine.level,
            type=routine.type,
            created_by=routine.created_by,
            schedule=schedule,
            exercises=self.get_routine_exercises(routine.id),
        )

    @_serialized
    def get_exercise(self, exercise_id: str) -> Exercise | None:
        return self.session.get(Exercise, exercise_id)

    @_serialized
    def get_all_exercises(self) -> list[Exercise]:
        return list(self.session.exec(select(Exercise)).all())

    @_serialized
    def add_routine(self, body: RoutineCreate) -> Routine | None:
        required = {
            "name": body.name,
            "level": body.level,
            "type": body.type,
            "created_by": body.created_by,
        }
        missing = [field for field, value in required.items() if not value]
        if missing:
            self._reject(FailureKind.VALIDATION, "Routine is missing required fields: %s", missing)
            return None

        if any(not self._exercise_is_complete(e) for e in body.exercises):
            self._reject(FailureKind.VALIDATION, "Routine %r has an exercise without name or muscle group", body.name)
            return None

        given_ids = [e.id for e in body.exercises if e.id]
        if len(given_ids) != len(set(given_ids)):
            self._reject(FailureKind.DUPLICATE, "Routine %r lists the same exercise more than once", body.name)
            return None

        schedule = body.schedule
        if schedule is not None:
            if not 1 <= schedule.days_per_week <= 7 or any(not 0 <= d <= 6 for d in schedule.rest_days):
                self._reject(FailureKind.VALIDATION, "Routine %r has an invalid schedule", body.name)
                return None

        routine = Routine(
            id=self.next_id("r"),
            name=body.name,
            description=body.description,
            level=body.level,
            type=body.type,
            created_by=body.created_by,
            days_per_week=schedule.days_per_week if schedule else None,
            rest_days=sorted(set(schedule.rest_days)) if schedule else None,
        )
        self.session.add(routine)
        for position, exercise in enumerate(body.exercises):
            self._copy_into_routine(routine.id, exercise, position)
        self.session.commit()
        self.session.refresh(routine)

        logger.info("Added routine %s (%s)", routine.id, routine.name)
        self._ok()
        return routine

    @_serialized
    def delete_routine(self, routine_id: str) -> bool:
        """Delete a routine and unassign it from every student that referenced it."""
        routine = self.get_routine(routine_id)
        if routine is None:
            self._reject(FailureKind.NOT_FOUND, "Routine %s does not exist", routine_id)
            return False

        affected = self.session.exec(select(Student).where(Student.routine_id == routine_id)).all()
        for student in affected:
            student.routine_id = UNASSIGNED_ROUTINE
            self.session.add(student)
        for row in self._routine_exercise_rows(routine_id):
            self.session.delete(row)
        self.session.delete(routine)
        self.session.commit()

        logger.info("Deleted routine %s, unassigned %d students", routine_id, len(affected))
        self._ok()
        return True

    @_serialized
    def add_exercise_to_routine(self, routine_id: str, exercise: ExerciseCreate) -> bool:
        if self.get_routine(routine_id) is None:
            self._reject(FailureKind.NOT_FOUND, "Routine %s does not exist", routine_id)
            return False
        if not self._exercise_is_complete(exercise):
            self._reject(FailureKind.VALIDATION, "Exercise is missing name or muscle group")
            return False

        rows = self._routine_exercise_rows(routine_id)
        if exercise.id and any(row.exercise_id == exercise.id for row in rows):
            self._reject(FailureKind.DUPLICATE, "Routine %s already has exercise %s", routine_id, exercise.id)
            return False

        position = rows[-1].position + 1 if rows else 0
        row = self._copy_into_routine(routine_id, exercise, position)
        self.session.commit()

        logger.info("Added exercise %s to routine %s", row.exercise_id, routine_id)
        self._ok()
        return True

    @_serialized
    def delete_exercise_from_routine(self, routine_id: str, exercise_id: str) -> bool:
        if self.get_routine(routine_id) is None:
            self._reject(FailureKind.NOT_FOUND, "Routine %s does not exist", routine_id)
            return False

        rows = [row for row in self._routine_exercise_rows(routine_id) if row.exercise_id == exercise_id]
        if not rows:
            self._reject(FailureKind.NOT_FOUND, "Routine %s has no exercise %s", routine_id, exercise_id)
            return False

        for row in rows:
            self.session.delete(row)
        self.session.commit()
        self._ok()
        return True

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    @_serialized
    def get_progress_by_student(self, student_id: str) -> list[ProgressEntry]:
        return list(
            self.session.exec(select(ProgressEntry).where(ProgressEntry.student_id == student_id)).all()
        )

    @_serialized
    def get_progress_by_exercise(self, exercise_id: str) -> list[ProgressEntry]:
        return list(
            self.session.exec(select(ProgressEntry).where(ProgressEntry.exercise_id == exercise_id)).all()
        )

    @_serialized
    def add_progress_entry(self, body: ProgressCreate) -> ProgressEntry | None:
        if self.get_student(body.student_id) is None:
            self._reject(FailureKind.NOT_FOUND, "Student %s does not exist", body.student_id)
            return None

        entry = ProgressEntry(id=self.next_id("p"), **body.model_dump())
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        self._ok()
        return entry

    @_serialized
    def group_progress_by_date(self, student_id: str) -> list[ProgressDay]:
        """Progress entries bucketed by day, newest day first."""
        grouped: dict[date, list[ProgressRead]] = defaultdict(list)
        for entry in self.get_progress_by_student(student_id):
            grouped[entry.date].append(ProgressRead.model_validate(entry, from_attributes=True))
        return [ProgressDay(date=day, entries=grouped[day]) for day in sorted(grouped, reverse=True)]

    @_serialized
    def get_exercise_history(self, student_id: str, exercise_id: str) -> list[ExerciseHistoryPoint]:
        """Chart series for one exercise of one student, oldest first."""
        entries = [e for e in self.get_progress_by_student(student_id) if e.exercise_id == exercise_id]
        return [
            ExerciseHistoryPoint(date=e.date, weight_used=e.weight_used, reps_completed=e.reps_completed)
            for e in sorted(entries, key=lambda e: e.date)
        ]

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    @_serialized
    def get_payments_by_student(self, student_id: str) -> list[Payment]:
        return list(self.session.exec(select(Payment).where(Payment.student_id == student_id)).all())

    @_serialized
    def get_all_payments(self) -> list[Payment]:
        return list(self.session.exec(select(Payment)).all())

    @_serialized
    def get_pending_students(self, teacher_id: str) -> list[Student]:
        return [
            s for s in self.get_students_by_teacher(teacher_id) if s.payment_status != PaymentStatus.PAID
        ]

    @_serialized
    def get_teacher_payments(self, teacher_id: str) -> list[Payment]:
        """Payments of a teacher's students, newest first; undated payments last."""
        payments = [
            payment
            for student in self.get_students_by_teacher(teacher_id)
            for payment in self.get_payments_by_student(student.id)
        ]
        dated = sorted((p for p in payments if p.date), key=lambda p: p.date, reverse=True)
        return dated + [p for p in payments if not p.date]

    @_serialized
    def get_dashboard_summary(self, teacher_id: str) -> DashboardSummary | None:
        if self.get_teacher(teacher_id) is None:
            return None
        return DashboardSummary(
            teacher_id=teacher_id,
            student_count=len(self.get_students_by_teacher(teacher_id)),
            pending_payment_count=len(self.get_pending_students(teacher_id)),
            routine_count=len(self.get_all_routines()),
        )
