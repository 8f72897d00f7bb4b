import pytest
import sqlalchemy as sa

from conftest import make_student
from errors import ConstraintViolation, DuplicateKeyError, TransactionFailure, ValidationError
from models import AttendanceLog, Itinerary, PaymentRecord, Student


def _rows_for(store, model, student_id):
    with store.session_scope() as session:
        return session.scalar(
            sa.select(sa.func.count()).select_from(model).where(model.student_id == student_id)
        )


def _populate_dependents(store, student_id):
    store.record_payment(student_id, "2025-06")
    store.upsert_attendance({
        "studentId": student_id,
        "classId": "A",
        "logDate": "2025-06-10",
        "status": "Presente",
        "topics": "frações",
    })
    store.add_itinerary({
        "id": f"it-{student_id}",
        "studentId": student_id,
        "title": "Revisão",
        "instructions": "Capítulo 3",
        "createdDate": "2025-06-11T10:00:00.000Z",
    })


def test_students_are_listed_by_name(store):
    store.add_student(make_student("s2", "Bruno"))
    store.add_student(make_student("s1", "Ana"))
    assert [s.name for s in store.get_students()] == ["Ana", "Bruno"]


def test_name_order_is_case_sensitive(store):
    store.add_student(make_student("s1", "ana"))
    store.add_student(make_student("s2", "Bruno"))
    assert [s.name for s in store.get_students()] == ["Bruno", "ana"]


def test_add_accepts_camelcase_dict(store):
    store.add_student({
        "id": "s9",
        "name": "Clara",
        "classId": "B",
        "paymentDay": 15,
        "amount": 180.5,
        "registrationDate": "2025-06-01T00:00:00.000Z",
    })
    clara = store.get_student("s9")
    assert clara.class_id == "B"
    assert clara.payment_day == 15
    assert clara.amount == 180.5
    assert clara.to_dict()["classId"] == "B"


def test_add_generates_id_and_registration_date_when_missing(store):
    created = store.add_student({"name": "Davi", "classId": "A", "paymentDay": 1, "amount": 0})
    assert created.id.startswith("s")
    assert created.registration_date
    assert store.get_student(created.id).name == "Davi"


def test_duplicate_id_raises(store):
    store.add_student(make_student("s1", "Ana"))
    with pytest.raises(DuplicateKeyError) as excinfo:
        store.add_student(make_student("s1", "Outra Ana"))
    assert isinstance(excinfo.value, ConstraintViolation)
    assert excinfo.value.key == "s1"
    assert [s.name for s in store.get_students()] == ["Ana"]


def test_update_replaces_mutable_fields_only(store):
    store.add_student(make_student("s1", "Ana", registration_date="2025-05-15T00:00:00.000Z"))
    changed = make_student(
        "s1", "Ana Souza", class_id="B", amount=300.0, payment_day=20,
        registration_date="2030-01-01T00:00:00.000Z",
    )
    assert store.update_student(changed) == 1

    ana = store.get_student("s1")
    assert ana.name == "Ana Souza"
    assert ana.class_id == "B"
    assert ana.amount == 300.0
    assert ana.payment_day == 20
    assert ana.registration_date == "2025-05-15T00:00:00.000Z"


def test_update_missing_student_reports_zero_rows(store):
    assert store.update_student(make_student("ghost", "Nobody")) == 0
    assert store.get_students() == []


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"amount": -1}, "amount"),
        ({"amount": float("nan")}, "amount"),
        ({"amount": float("inf")}, "amount"),
        ({"payment_day": 0}, "paymentDay"),
        ({"payment_day": 32}, "paymentDay"),
        ({"payment_day": "10"}, "paymentDay"),
        ({"id": "  "}, "id"),
    ],
)
def test_invalid_students_are_rejected(store, overrides, field):
    student = make_student("s1", "Ana", **overrides)
    with pytest.raises(ValidationError) as excinfo:
        store.add_student(student)
    assert excinfo.value.field == field


def test_payment_day_31_is_accepted_without_calendar_checks(store):
    store.add_student(make_student("s1", "Ana", payment_day=31))
    assert store.get_student("s1").payment_day == 31


def test_delete_cascades_to_every_dependent_table(store):
    store.add_student(make_student("s1", "Ana"))
    store.add_student(make_student("s2", "Bruno"))
    _populate_dependents(store, "s1")
    _populate_dependents(store, "s2")

    assert store.delete_student("s1") == 1

    assert store.get_student("s1") is None
    for model in (PaymentRecord, AttendanceLog, Itinerary):
        assert _rows_for(store, model, "s1") == 0
        assert _rows_for(store, model, "s2") == 1


def test_delete_missing_student_is_a_zero_row_noop(store):
    store.add_student(make_student("s1", "Ana"))
    assert store.delete_student("ghost") == 0
    assert len(store.get_students()) == 1


def test_failed_cascade_rolls_back_everything(store):
    store.add_student(make_student("s1", "Ana"))
    _populate_dependents(store, "s1")
    # Last step of the cascade will fail on the missing table
    with store.engine.begin() as conn:
        conn.execute(sa.text("DROP TABLE itineraries"))

    with pytest.raises(TransactionFailure):
        store.delete_student("s1")

    assert store.get_student("s1") is not None
    assert _rows_for(store, PaymentRecord, "s1") == 1
    assert _rows_for(store, AttendanceLog, "s1") == 1


def test_students_in_class(store):
    store.add_student(make_student("s1", "Carla", class_id="A"))
    store.add_student(make_student("s2", "Ana", class_id="A"))
    store.add_student(make_student("s3", "Bia", class_id="B"))
    assert [s.name for s in store.get_students_in_class("A")] == ["Ana", "Carla"]
    assert store.get_students_in_class("Z") == []


def test_returned_rows_are_model_instances(store):
    store.add_student(make_student("s1", "Ana"))
    (ana,) = store.get_students()
    assert isinstance(ana, Student)
    assert repr(ana) == "<Student Ana (s1)>"


def test_ids_are_matched_exactly_on_delete(store):
    store.add_student(make_student("s1", "Ana"))
    store.add_student(make_student(" s1", "Ana com espaço"))
    _populate_dependents(store, "s1")

    assert store.delete_student(" s1") == 1

    assert [s.id for s in store.get_students()] == ["s1"]
    for model in (PaymentRecord, AttendanceLog, Itinerary):
        assert _rows_for(store, model, "s1") == 1


def test_delete_student_without_dependents(store, caplog):
    store.add_student(make_student("s1", "Ana"))
    with caplog.at_level("INFO", logger="reforco"):
        assert store.delete_student("s1") == 1
    assert store.get_students() == []
    assert "payments=0, attendance=0, itineraries=0" in caplog.text


@pytest.mark.parametrize("blank", ["", "   ", None])
def test_update_with_blank_id_is_rejected(store, blank):
    store.add_student(make_student("s1", "Ana"))
    with pytest.raises(ValidationError) as excinfo:
        store.update_student(make_student(blank, "Outra"))
    assert excinfo.value.field == "id"
    assert store.get_student("s1").name == "Ana"


def test_nan_amount_is_not_stored(store):
    with pytest.raises(ValidationError):
        store.add_student({"id": "s1", "name": "Ana", "amount": float("nan")})
    assert store.get_students() == []
