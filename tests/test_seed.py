import logging

from conftest import make_config, make_student
from store import TutoringStore
from utils.seed import DEMO_STUDENTS, seed_if_empty
from utils.students import count_students
from utils.timestamps import current_month_year


def test_init_seeds_demo_students_and_one_payment(seeded_store):
    students = seeded_store.get_students()
    assert [s.name for s in students] == ["Ana Silva", "Bruno Costa"]
    assert {s.class_id for s in students} == {"A"}

    payments = seeded_store.get_payments_for_month(current_month_year())
    assert [(p.id, p.student_id) for p in payments] == [
        (f"s1-{current_month_year()}", "s1"),
    ]


def test_second_seed_is_a_noop(seeded_store):
    with seeded_store.session_scope() as session:
        assert seed_if_empty(session) == 0
        assert count_students(session) == len(DEMO_STUDENTS)
    assert len(seeded_store.get_payments_for_month(current_month_year())) == 1


def test_seed_skipped_when_any_student_exists(store):
    store.add_student(make_student("x1", "Zoe"))
    with store.session_scope() as session:
        assert seed_if_empty(session) == 0
    assert [s.id for s in store.get_students()] == ["x1"]


def test_reopening_a_seeded_file_does_not_duplicate(db_path):
    for _ in range(2):
        with TutoringStore(config=make_config(db_path, seed=True)) as s:
            assert len(s.get_students()) == 2


def test_seed_after_students_were_deleted_runs_again(seeded_store):
    for s in seeded_store.get_students():
        seeded_store.delete_student(s.id)
    with seeded_store.session_scope() as session:
        assert seed_if_empty(session) == 2


def test_seed_logs_what_it_did(store, caplog):
    with caplog.at_level(logging.INFO, logger="reforco"):
        with store.session_scope() as session:
            seed_if_empty(session)
    assert "Seeded 2 demo students" in caplog.text
