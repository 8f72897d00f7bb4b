from __future__ import annotations

from typing import Any, Optional

from sqlalchemy.orm import Session

from models import Student
from utils.payments import paid_student_ids
from utils.students import list_students
from utils.timestamps import current_month_year


def unpaid_students(session: Session, month_year: str) -> list[Student]:
    """Students with no payment record for ``month_year``, ordered by name."""
    paid = paid_student_ids(session, month_year)
    return [s for s in list_students(session) if s.id not in paid]


def dashboard_summary(session: Session, month_year: Optional[str] = None) -> dict[str, Any]:
    """Headline numbers for the dashboard: totals and who still owes this month."""
    month_year = month_year or current_month_year()
    students = list_students(session)
    paid = paid_student_ids(session, month_year)
    pending = [s for s in students if s.id not in paid]
    return {
        "monthYear": month_year,
        "totalStudents": len(students),
        "paidCount": len(students) - len(pending),
        "pendingCount": len(pending),
        "pendingAmount": round(sum(float(s.amount or 0) for s in pending), 2),
    }
