import pytest
import sqlalchemy as sa

from conftest import make_config, make_student
from errors import StorageInitError, StoreNotInitializedError
from extensions import create_store_engine
from store import TutoringStore
from utils.schema import TABLE_NAMES, ensure_schema, list_tables, table_columns


def test_ensure_schema_creates_the_four_tables(store):
    assert list_tables(store.engine) == sorted(TABLE_NAMES)


def test_ensure_schema_is_idempotent_and_keeps_data(store):
    store.add_student(make_student("s1", "Ana"))
    for _ in range(3):
        ensure_schema(store.engine)
    assert list_tables(store.engine) == sorted(TABLE_NAMES)
    assert [s.id for s in store.get_students()] == ["s1"]


def test_persisted_column_names(store):
    assert table_columns(store.engine, "students") == [
        "id", "name", "guardian", "contact", "school", "grade", "report",
        "allergy", "classId", "paymentDay", "amount", "registrationDate",
    ]
    assert table_columns(store.engine, "payment_records") == ["id", "studentId", "monthYear", "datePaid"]
    assert table_columns(store.engine, "attendance_logs") == [
        "id", "studentId", "classId", "logDate", "status", "topics",
        "attachmentName", "attachmentContent",
    ]
    assert table_columns(store.engine, "itineraries") == [
        "id", "studentId", "title", "instructions", "attachmentName",
        "attachmentContent", "createdDate",
    ]


def test_reopening_a_file_keeps_rows(db_path):
    with TutoringStore(config=make_config(db_path)) as first:
        first.add_student(make_student("s1", "Ana"))
    with TutoringStore(config=make_config(db_path)) as second:
        assert [s.name for s in second.get_students()] == ["Ana"]


def test_missing_directory_raises_storage_init_error(tmp_path):
    s = TutoringStore(config=make_config(tmp_path / "nope" / "deeper" / "x.db"))
    with pytest.raises(StorageInitError):
        s.init()
    assert not s.is_open


def test_corrupt_file_raises_storage_init_error(tmp_path):
    path = tmp_path / "corrupt.db"
    path.write_bytes(b"this is definitely not sqlite " * 200)
    engine = create_store_engine(f"sqlite:///{path}")
    with pytest.raises(StorageInitError):
        ensure_schema(engine)
    engine.dispose()


def test_operations_before_init_are_rejected(db_path):
    s = TutoringStore(config=make_config(db_path))
    with pytest.raises(StoreNotInitializedError):
        s.get_students()


def test_operations_after_close_are_rejected(store):
    store.close()
    with pytest.raises(StoreNotInitializedError):
        store.get_payments_for_month("2025-06")


def test_in_memory_store_keeps_one_connection():
    s = TutoringStore(config=make_config(":memory:"))
    s.init()
    s.add_student(make_student("s1", "Ana"))
    # A second session must see the same in-memory database
    with s.session_scope() as session:
        count = session.scalar(sa.text("SELECT count(*) FROM students"))
    assert count == 1
    s.close()
