from __future__ import annotations

from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Session

from errors import DuplicateKeyError, TransactionFailure
from models import AttendanceLog, Itinerary, PaymentRecord, Student
from utils.logger import get_logger
from utils.validation import require_id, validate_student

_LOGGER = get_logger(__name__)

students_table = Student.__table__

# Removed together with the student, after the student row itself
_DEPENDENT_TABLES = (
    PaymentRecord.__table__,
    AttendanceLog.__table__,
    Itinerary.__table__,
)


def list_students(session: Session) -> list[Student]:
    """All students ordered by name (BINARY collation, so case-sensitive)."""
    return list(session.scalars(sa.select(Student).order_by(Student.name.asc())))


def students_in_class(session: Session, class_id: str) -> list[Student]:
    stmt = sa.select(Student).where(Student.class_id == class_id).order_by(Student.name.asc())
    return list(session.scalars(stmt))


def get_student(session: Session, student_id: str) -> Optional[Student]:
    return session.get(Student, student_id)


def count_students(session: Session) -> int:
    return session.scalar(sa.select(sa.func.count()).select_from(students_table)) or 0


def add_student(session: Session, student: Student) -> None:
    validate_student(student)
    try:
        session.execute(sa.insert(students_table).values(**student.row_values()))
    except sa.exc.IntegrityError as e:
        _LOGGER.error("Student id %s already exists", student.id)
        raise DuplicateKeyError(students_table.name, student.id) from e
    _LOGGER.info("Student %s added", student.name)


def update_student(session: Session, student: Student) -> int:
    """Replace every mutable field of the student with ``student.id``.

    Returns the number of rows changed; 0 means no student had that id.
    """
    validate_student(student)
    stmt = (
        sa.update(students_table)
        .where(students_table.c.id == student.id)
        .values(**student.row_values(Student.MUTABLE_FIELDS))
    )
    result = session.execute(stmt)
    if result.rowcount:
        _LOGGER.info("Student %s updated", student.name)
    else:
        _LOGGER.warning("Update skipped: no student with id %s", student.id)
    return result.rowcount


def delete_student(session: Session, student_id: str) -> int:
    """Delete a student and every payment, attendance log and itinerary it owns.

    Must run inside the caller's transaction: on any failure the raised
    TransactionFailure propagates, so the enclosing transaction rolls back
    and nothing from this call is kept. Returns the number of student rows
    removed (0 or 1).
    """
    student_id = require_id(student_id, "studentId")
    removed: dict[str, int] = {}
    try:
        result = session.execute(sa.delete(students_table).where(students_table.c.id == student_id))
        for table in _DEPENDENT_TABLES:
            dep = session.execute(sa.delete(table).where(table.c.studentId == student_id))
            removed[table.name] = dep.rowcount
    except sa.exc.SQLAlchemyError as e:
        _LOGGER.exception("Failed deleting student %s or its related rows", student_id)
        raise TransactionFailure(f"delete of student {student_id!r} rolled back: {e}") from e

    _LOGGER.info(
        "Student %s deleted (payments=%d, attendance=%d, itineraries=%d)",
        student_id,
        removed["payment_records"],
        removed["attendance_logs"],
        removed["itineraries"],
    )
    return result.rowcount
