from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm import Session

from models import Student
from utils.logger import get_logger
from utils.payments import record_payment
from utils.students import add_student, count_students
from utils.timestamps import current_month_year, to_iso

_LOGGER = get_logger(__name__)


DEMO_STUDENTS = [
    dict(
        id="s1",
        name="Ana Silva",
        guardian="Mariana Silva",
        contact="(86) 99999-1111",
        school="Escola ABC",
        grade="5º Ano",
        report="N/A",
        allergy="Nenhuma",
        class_id="A",
        payment_day=10,
        amount=250.00,
        registration_date=to_iso(datetime(2025, 5, 15, tzinfo=timezone.utc)),
    ),
    dict(
        id="s2",
        name="Bruno Costa",
        guardian="Ricardo Costa",
        contact="(86) 99999-2222",
        school="Escola XYZ",
        grade="4º Ano",
        report="Dislexia",
        allergy="Amendoim",
        class_id="A",
        payment_day=5,
        amount=250.00,
        registration_date=to_iso(datetime(2025, 5, 20, tzinfo=timezone.utc)),
    ),
]

# Demo student marked as paid for the current month
DEMO_PAID_STUDENT_ID = "s1"


def seed_if_empty(session: Session) -> int:
    """Insert the demo students the first time the store is seen empty.

    The only guard is the student count: any existing student skips seeding
    entirely, and a half-seeded store is not detected. Returns the number of
    students inserted.
    """
    if count_students(session) > 0:
        _LOGGER.info("Initial data already present, skipping seed")
        return 0

    for row in DEMO_STUDENTS:
        add_student(session, Student(**row))
    record_payment(session, DEMO_PAID_STUDENT_ID, current_month_year())
    _LOGGER.info("Seeded %d demo students", len(DEMO_STUDENTS))
    return len(DEMO_STUDENTS)
