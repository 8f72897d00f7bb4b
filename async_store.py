"""Coroutine facade over TutoringStore for async callers."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Mapping, Optional, TypeVar, Union

from config import Config
from models import AttendanceLog, Itinerary, PaymentRecord, Student
from store import TutoringStore


T = TypeVar("T")


class AsyncTutoringStore:
    """Runs each store call in a worker thread, one call at a time.

    A single asyncio.Lock guards the store, so operations never overlap even
    when several tasks await them concurrently.
    """

    def __init__(
        self,
        database_path: Optional[str] = None,
        config: Optional[Config] = None,
        store: Optional[TutoringStore] = None,
    ) -> None:
        self._store = store or TutoringStore(database_path, config=config)
        self._lock: Optional[asyncio.Lock] = None

    @property
    def store(self) -> TutoringStore:
        return self._store

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        # Created lazily so the lock binds to the running loop
        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            return await asyncio.to_thread(func, *args)

    async def init(self) -> None:
        await self._run(self._store.init)

    async def close(self) -> None:
        await self._run(self._store.close)

    async def __aenter__(self) -> "AsyncTutoringStore":
        await self.init()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def get_students(self) -> list[Student]:
        return await self._run(self._store.get_students)

    async def get_student(self, student_id: str) -> Optional[Student]:
        return await self._run(self._store.get_student, student_id)

    async def get_students_in_class(self, class_id: str) -> list[Student]:
        return await self._run(self._store.get_students_in_class, class_id)

    async def add_student(self, student: Union[Student, Mapping[str, Any]]) -> Student:
        return await self._run(self._store.add_student, student)

    async def update_student(self, student: Union[Student, Mapping[str, Any]]) -> int:
        return await self._run(self._store.update_student, student)

    async def delete_student(self, student_id: str) -> int:
        return await self._run(self._store.delete_student, student_id)

    async def get_payments_for_month(self, month_year: str) -> list[PaymentRecord]:
        return await self._run(self._store.get_payments_for_month, month_year)

    async def record_payment(self, student_id: str, month_year: str) -> PaymentRecord:
        return await self._run(self._store.record_payment, student_id, month_year)

    async def get_unpaid_students(self, month_year: str) -> list[Student]:
        return await self._run(self._store.get_unpaid_students, month_year)

    async def get_attendance_for_date(self, class_id: str, log_date: str) -> list[AttendanceLog]:
        return await self._run(self._store.get_attendance_for_date, class_id, log_date)

    async def upsert_attendance(self, log: Union[AttendanceLog, Mapping[str, Any]]) -> AttendanceLog:
        return await self._run(self._store.upsert_attendance, log)

    async def get_attendance_sheet(self, class_id: str, log_date: str) -> dict[str, dict[str, Any]]:
        return await self._run(self._store.get_attendance_sheet, class_id, log_date)

    async def get_itineraries_for_student(self, student_id: str) -> list[Itinerary]:
        return await self._run(self._store.get_itineraries_for_student, student_id)

    async def get_itinerary(self, itinerary_id: str) -> Optional[Itinerary]:
        return await self._run(self._store.get_itinerary, itinerary_id)

    async def add_itinerary(self, itinerary: Union[Itinerary, Mapping[str, Any]]) -> Itinerary:
        return await self._run(self._store.add_itinerary, itinerary)

    async def update_itinerary(self, itinerary: Union[Itinerary, Mapping[str, Any]]) -> int:
        return await self._run(self._store.update_itinerary, itinerary)

    async def delete_itinerary(self, itinerary_id: str) -> int:
        return await self._run(self._store.delete_itinerary, itinerary_id)

    async def get_dashboard_summary(self, month_year: Optional[str] = None) -> dict[str, Any]:
        return await self._run(self._store.get_dashboard_summary, month_year)
