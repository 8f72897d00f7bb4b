from __future__ import annotations

from typing import Any

import sqlalchemy as sa
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from models import ATTENDANCE_PENDING, AttendanceLog, Student
from utils.logger import get_logger
from utils.validation import validate_attendance

_LOGGER = get_logger(__name__)

attendance_table = AttendanceLog.__table__


def attendance_for_class_and_date(session: Session, class_id: str, log_date: str) -> list[AttendanceLog]:
    stmt = sa.select(AttendanceLog).where(
        AttendanceLog.class_id == class_id,
        AttendanceLog.log_date == log_date,
    )
    return list(session.scalars(stmt))


def upsert_attendance(session: Session, log: AttendanceLog) -> None:
    """Insert the log, or overwrite status/topics/attachment of the existing row.

    studentId, classId and logDate keep the values from the first insert.
    """
    validate_attendance(log)
    stmt = sqlite_insert(attendance_table).values(**log.row_values())
    stmt = stmt.on_conflict_do_update(
        index_elements=[attendance_table.c.id],
        set_={
            col: stmt.excluded[col]
            for col in log.row_values(AttendanceLog.MUTABLE_FIELDS)
        },
    )
    session.execute(stmt)
    _LOGGER.info("Attendance for %s on %s saved (%s)", log.student_id, log.log_date, log.status)


def default_entry(student_id: str, class_id: str, log_date: str) -> dict[str, Any]:
    """Row shape used when a student has no log for the session yet."""
    return {
        "id": None,
        "studentId": student_id,
        "classId": class_id,
        "logDate": log_date,
        "status": ATTENDANCE_PENDING,
        "topics": "",
        "attachmentName": "",
        "attachmentContent": "",
    }


def attendance_sheet(session: Session, class_id: str, log_date: str) -> dict[str, dict[str, Any]]:
    """Map every student of ``class_id`` to their log for ``log_date``.

    Students without a stored log get a ``Pendente`` entry with empty topics
    and attachment. Logs for students no longer in the class are left out.
    """
    students = session.scalars(
        sa.select(Student.id).where(Student.class_id == class_id).order_by(Student.name.asc())
    ).all()
    logs = {
        log.student_id: log.to_dict()
        for log in attendance_for_class_and_date(session, class_id, log_date)
    }
    return {
        student_id: logs.get(student_id) or default_entry(student_id, class_id, log_date)
        for student_id in students
    }
