from __future__ import annotations

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from models import PaymentRecord, payment_record_id
from utils.logger import get_logger
from utils.timestamps import now_iso, to_iso
from utils.validation import require_id, validate_month_year

_LOGGER = get_logger(__name__)

payments_table = PaymentRecord.__table__


def payments_for_month(session: Session, month_year: str) -> list[PaymentRecord]:
    stmt = sa.select(PaymentRecord).where(PaymentRecord.month_year == month_year)
    return list(session.scalars(stmt))


def paid_student_ids(session: Session, month_year: str) -> set[str]:
    stmt = sa.select(PaymentRecord.student_id).where(PaymentRecord.month_year == month_year)
    return set(session.scalars(stmt))


def record_payment(
    session: Session,
    student_id: str,
    month_year: str,
    paid_at: Optional[datetime] = None,
) -> PaymentRecord:
    """Mark ``student_id`` as paid for ``month_year``.

    Insert-or-replace on the derived id: paying the same month again
    overwrites datePaid instead of adding a second row.
    """
    student_id = require_id(student_id, "studentId")
    month_year = validate_month_year(month_year)
    record = PaymentRecord(
        id=payment_record_id(student_id, month_year),
        student_id=student_id,
        month_year=month_year,
        date_paid=to_iso(paid_at) if paid_at else now_iso(),
    )
    stmt = sqlite_insert(payments_table).values(**record.row_values())
    stmt = stmt.on_conflict_do_update(
        index_elements=[payments_table.c.id],
        set_={
            "studentId": stmt.excluded.studentId,
            "monthYear": stmt.excluded.monthYear,
            "datePaid": stmt.excluded.datePaid,
        },
    )
    session.execute(stmt)
    _LOGGER.info("Payment for %s in %s recorded", student_id, month_year)
    return record
