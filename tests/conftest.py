import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config import Config
from models import Student
from store import TutoringStore


def make_config(path, seed=False):
    cfg = Config.for_path(str(path))
    cfg.SEED_DEMO_DATA = seed
    cfg.LOG_FILE = None
    return cfg


def make_student(student_id, name, class_id="A", **overrides):
    fields = dict(
        id=student_id,
        name=name,
        guardian=f"Guardian of {name}",
        contact="(86) 90000-0000",
        school="Escola Teste",
        grade="5º Ano",
        report="",
        allergy="Nenhuma",
        class_id=class_id,
        payment_day=10,
        amount=200.0,
        registration_date="2025-06-01T12:00:00.000Z",
    )
    fields.update(overrides)
    return Student(**fields)


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "reforco_test.db"


@pytest.fixture
def store(db_path):
    """An open store on a fresh file, without demo data."""
    s = TutoringStore(config=make_config(db_path))
    s.init()
    yield s
    s.close()


@pytest.fixture
def seeded_store(db_path):
    s = TutoringStore(config=make_config(db_path, seed=True))
    s.init()
    yield s
    s.close()
