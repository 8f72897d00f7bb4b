from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

import sqlalchemy as sa
from sqlalchemy.orm import declarative_base

Base = declarative_base()

ATTENDANCE_PRESENT = "Presente"
ATTENDANCE_ABSENT = "Ausente"
ATTENDANCE_PENDING = "Pendente"
ATTENDANCE_STATUSES = (ATTENDANCE_PRESENT, ATTENDANCE_ABSENT, ATTENDANCE_PENDING)


def payment_record_id(student_id: str, month_year: str) -> str:
    return f"{student_id}-{month_year}"


def attendance_log_id(student_id: str, class_id: str, log_date: str) -> str:
    return f"{student_id}-{class_id}-{log_date}"


class _RowMixin:
    """Maps between Python attributes and the camelCase row shape.

    Columns are declared as ``attr = sa.Column('dbName', ...)`` so the
    persisted layout keeps the names the presentation layer reads, while
    Python code uses snake_case attributes.
    """

    @classmethod
    def _column_map(cls) -> dict[str, str]:
        # attribute name -> database column name
        return {attr.key: attr.columns[0].name for attr in sa.inspect(cls).column_attrs}

    def to_dict(self) -> dict[str, Any]:
        return {col: getattr(self, attr) for attr, col in self._column_map().items()}

    def row_values(self, fields: Optional[Iterable[str]] = None) -> dict[str, Any]:
        """Values keyed by database column, for Core ``insert``/``update`` on ``__table__``.

        ``fields`` restricts the result to the given attribute names.
        """
        cmap = self._column_map()
        attrs = cmap.keys() if fields is None else fields
        return {cmap[attr]: getattr(self, attr) for attr in attrs}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]):
        """Build an instance from a camelCase row or snake_case attributes."""
        kwargs = {}
        for attr, col in cls._column_map().items():
            if col in data:
                kwargs[attr] = data[col]
            elif attr in data:
                kwargs[attr] = data[attr]
        return cls(**kwargs)


class Student(_RowMixin, Base):
    __tablename__ = 'students'

    id = sa.Column(sa.Text, primary_key=True)
    name = sa.Column(sa.Text)
    guardian = sa.Column(sa.Text)
    contact = sa.Column(sa.Text)
    school = sa.Column(sa.Text)
    grade = sa.Column(sa.Text)
    report = sa.Column(sa.Text)
    allergy = sa.Column(sa.Text)
    class_id = sa.Column('classId', sa.Text)
    payment_day = sa.Column('paymentDay', sa.Integer)
    amount = sa.Column(sa.REAL)
    registration_date = sa.Column('registrationDate', sa.Text)

    # Fields replaced by a full update; id and registrationDate are fixed
    MUTABLE_FIELDS = (
        "name", "guardian", "contact", "school", "grade", "report",
        "allergy", "class_id", "payment_day", "amount",
    )

    def __repr__(self):
        return f'<Student {self.name} ({self.id})>'


class PaymentRecord(_RowMixin, Base):
    __tablename__ = 'payment_records'

    id = sa.Column(sa.Text, primary_key=True)
    student_id = sa.Column('studentId', sa.Text)
    month_year = sa.Column('monthYear', sa.Text)
    date_paid = sa.Column('datePaid', sa.Text)

    def __repr__(self):
        return f'<PaymentRecord StudentID={self.student_id} Month={self.month_year}>'


class AttendanceLog(_RowMixin, Base):
    __tablename__ = 'attendance_logs'

    id = sa.Column(sa.Text, primary_key=True)
    student_id = sa.Column('studentId', sa.Text)
    class_id = sa.Column('classId', sa.Text)
    log_date = sa.Column('logDate', sa.Text)
    status = sa.Column(sa.Text)
    topics = sa.Column(sa.Text)
    attachment_name = sa.Column('attachmentName', sa.Text)
    attachment_content = sa.Column('attachmentContent', sa.Text)

    # Overwritten on conflict; studentId/classId/logDate stay as first written
    MUTABLE_FIELDS = ("status", "topics", "attachment_name", "attachment_content")

    def __repr__(self):
        return f'<AttendanceLog StudentID={self.student_id} {self.class_id}@{self.log_date} {self.status}>'


class Itinerary(_RowMixin, Base):
    __tablename__ = 'itineraries'

    id = sa.Column(sa.Text, primary_key=True)
    student_id = sa.Column('studentId', sa.Text)
    title = sa.Column(sa.Text)
    instructions = sa.Column(sa.Text)
    attachment_name = sa.Column('attachmentName', sa.Text)
    attachment_content = sa.Column('attachmentContent', sa.Text)
    created_date = sa.Column('createdDate', sa.Text)

    MUTABLE_FIELDS = ("title", "instructions", "attachment_name", "attachment_content")

    def __repr__(self):
        return f'<Itinerary {self.title} StudentID={self.student_id}>'
