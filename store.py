"""Local store used by the screens of the tutoring admin app.

One ``TutoringStore`` owns the single SQLite handle for the process. Build it,
call ``init()`` once at start-up, hand it to whatever needs data, and
``close()`` it on shutdown::

    store = TutoringStore("reforco_escolar.db")
    store.init()
    for student in store.get_students():
        ...
    store.close()
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional, Type, TypeVar, Union

import sqlalchemy as sa
from sqlalchemy.orm import Session

from config import Config
from errors import StorageInitError, StoreNotInitializedError
from extensions import create_session_factory, create_store_engine
from models import AttendanceLog, Itinerary, PaymentRecord, Student, attendance_log_id
from utils import attendance, itineraries, payments, reports, students
from utils.logger import ROOT_LOGGER_NAME, get_logger, setup_logger
from utils.schema import ensure_schema
from utils.seed import seed_if_empty
from utils.timestamps import new_itinerary_id, new_student_id, now_iso

_LOGGER = get_logger(__name__)

M = TypeVar("M", Student, PaymentRecord, AttendanceLog, Itinerary)


def _coerce(model: Type[M], value: Union[M, Mapping[str, Any]]) -> M:
    """Accept either a model instance or a camelCase dict from the screens."""
    if isinstance(value, model):
        return value
    if isinstance(value, Mapping):
        return model.from_dict(value)
    raise TypeError(f"expected {model.__name__} or mapping, got {type(value).__name__}")


class TutoringStore:
    """Owns the single SQLite handle and exposes every read and write the screens use."""

    def __init__(self, database_path: Optional[str] = None, config: Optional[Config] = None) -> None:
        if config is None:
            config = Config.for_path(database_path) if database_path else Config()
        self.config = config
        self._engine: Optional[sa.Engine] = None
        self._session_factory = None
        setup_logger(ROOT_LOGGER_NAME, level=config.LOG_LEVEL, log_file=config.LOG_FILE)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> sa.Engine:
        if self._engine is None:
            raise StoreNotInitializedError("store is not open; call init() first")
        return self._engine

    def init(self) -> None:
        """Open the database, create missing tables and seed an empty store.

        Calling it again on an open store does nothing.
        """
        if self._engine is not None:
            return
        uri = self.config.SQLALCHEMY_DATABASE_URI
        try:
            engine = create_store_engine(uri, echo=self.config.SQLALCHEMY_ECHO)
        except (sa.exc.ArgumentError, sa.exc.NoSuchModuleError) as e:
            raise StorageInitError(f"invalid database URI {uri!r}: {e}") from e

        try:
            ensure_schema(engine)
        except StorageInitError:
            engine.dispose()
            raise

        self._engine = engine
        self._session_factory = create_session_factory(engine)

        if self.config.SEED_DEMO_DATA:
            try:
                with self.session_scope() as session:
                    seed_if_empty(session)
            except sa.exc.SQLAlchemyError as e:
                _LOGGER.exception("Failed to seed initial data")
                self.close()
                raise StorageInitError(f"could not seed store: {e}") from e
        _LOGGER.info("Store ready at %s", engine.url)

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._session_factory = None
        _LOGGER.info("Store closed")

    def __enter__(self) -> "TutoringStore":
        self.init()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """One transaction: commit on success, roll back on any exception."""
        if self._session_factory is None:
            raise StoreNotInitializedError("store is not open; call init() first")
        session = self._session_factory()
        try:
            with session.begin():
                yield session
        finally:
            session.close()

    # ------------------------------------------------------------------
    # Students
    # ------------------------------------------------------------------

    def get_students(self) -> list[Student]:
        with self.session_scope() as session:
            return students.list_students(session)

    def get_student(self, student_id: str) -> Optional[Student]:
        with self.session_scope() as session:
            return students.get_student(session, student_id)

    def get_students_in_class(self, class_id: str) -> list[Student]:
        with self.session_scope() as session:
            return students.students_in_class(session, class_id)

    def add_student(self, student: Union[Student, Mapping[str, Any]]) -> Student:
        student = _coerce(Student, student)
        if not student.id:
            student.id = new_student_id()
        if not student.registration_date:
            student.registration_date = now_iso()
        with self.session_scope() as session:
            students.add_student(session, student)
        return student

    def update_student(self, student: Union[Student, Mapping[str, Any]]) -> int:
        with self.session_scope() as session:
            return students.update_student(session, _coerce(Student, student))

    def delete_student(self, student_id: str) -> int:
        with self.session_scope() as session:
            return students.delete_student(session, student_id)

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    def get_payments_for_month(self, month_year: str) -> list[PaymentRecord]:
        with self.session_scope() as session:
            return payments.payments_for_month(session, month_year)

    def record_payment(self, student_id: str, month_year: str) -> PaymentRecord:
        with self.session_scope() as session:
            return payments.record_payment(session, student_id, month_year)

    def get_unpaid_students(self, month_year: str) -> list[Student]:
        with self.session_scope() as session:
            return reports.unpaid_students(session, month_year)

    # ------------------------------------------------------------------
    # Attendance
    # ------------------------------------------------------------------

    def get_attendance_for_date(self, class_id: str, log_date: str) -> list[AttendanceLog]:
        with self.session_scope() as session:
            return attendance.attendance_for_class_and_date(session, class_id, log_date)

    def upsert_attendance(self, log: Union[AttendanceLog, Mapping[str, Any]]) -> AttendanceLog:
        log = _coerce(AttendanceLog, log)
        if not log.id and log.student_id and log.class_id and log.log_date:
            log.id = attendance_log_id(log.student_id, log.class_id, log.log_date)
        with self.session_scope() as session:
            attendance.upsert_attendance(session, log)
        return log

    def get_attendance_sheet(self, class_id: str, log_date: str) -> dict[str, dict[str, Any]]:
        with self.session_scope() as session:
            return attendance.attendance_sheet(session, class_id, log_date)

    # ------------------------------------------------------------------
    # Itineraries
    # ------------------------------------------------------------------

    def get_itineraries_for_student(self, student_id: str) -> list[Itinerary]:
        with self.session_scope() as session:
            return itineraries.itineraries_for_student(session, student_id)

    def get_itinerary(self, itinerary_id: str) -> Optional[Itinerary]:
        with self.session_scope() as session:
            return itineraries.get_itinerary(session, itinerary_id)

    def add_itinerary(self, itinerary: Union[Itinerary, Mapping[str, Any]]) -> Itinerary:
        itinerary = _coerce(Itinerary, itinerary)
        if not itinerary.id:
            itinerary.id = new_itinerary_id()
        with self.session_scope() as session:
            itineraries.add_itinerary(session, itinerary)
        return itinerary

    def update_itinerary(self, itinerary: Union[Itinerary, Mapping[str, Any]]) -> int:
        with self.session_scope() as session:
            return itineraries.update_itinerary(session, _coerce(Itinerary, itinerary))

    def delete_itinerary(self, itinerary_id: str) -> int:
        with self.session_scope() as session:
            return itineraries.delete_itinerary(session, itinerary_id)

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    def get_dashboard_summary(self, month_year: Optional[str] = None) -> dict[str, Any]:
        with self.session_scope() as session:
            return reports.dashboard_summary(session, month_year)
