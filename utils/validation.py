from __future__ import annotations

import math
import re
from typing import Any

from errors import ValidationError
from models import ATTENDANCE_STATUSES, AttendanceLog, Itinerary, Student

_MONTH_YEAR_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def require_id(value: Any, field: str = "id") -> Any:
    """Reject missing or blank keys; the key itself is returned untouched."""
    if value is None or not str(value).strip():
        raise ValidationError(field, "must not be empty")
    return value


def validate_month_year(value: Any) -> str:
    if not isinstance(value, str) or not _MONTH_YEAR_RE.fullmatch(value):
        raise ValidationError("monthYear", f"expected YYYY-MM, got {value!r}")
    return value


def validate_student(student: Student) -> None:
    """Checks applied before a student row is inserted or replaced.

    The day is not checked against any calendar: 31 is accepted even though
    some months are shorter.
    """
    require_id(student.id)
    if student.amount is not None:
        try:
            amount = float(student.amount)
        except (TypeError, ValueError):
            raise ValidationError("amount", f"not a number: {student.amount!r}") from None
        if math.isnan(amount) or math.isinf(amount):
            raise ValidationError("amount", f"not a finite number: {student.amount!r}")
        if amount < 0:
            raise ValidationError("amount", "must be >= 0")
    if student.payment_day is not None:
        if isinstance(student.payment_day, bool) or not isinstance(student.payment_day, int):
            raise ValidationError("paymentDay", f"not an integer: {student.payment_day!r}")
        if not 1 <= student.payment_day <= 31:
            raise ValidationError("paymentDay", "must be between 1 and 31")


def validate_attendance(log: AttendanceLog) -> None:
    require_id(log.id)
    require_id(log.student_id, "studentId")
    if log.status not in ATTENDANCE_STATUSES:
        raise ValidationError("status", f"must be one of {', '.join(ATTENDANCE_STATUSES)}")


def validate_itinerary(itinerary: Itinerary) -> None:
    require_id(itinerary.id)
    require_id(itinerary.student_id, "studentId")
