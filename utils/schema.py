from __future__ import annotations

import sqlalchemy as sa

from errors import StorageInitError
from models import Base
from utils.logger import get_logger

_LOGGER = get_logger(__name__)

TABLE_NAMES = ("students", "payment_records", "attendance_logs", "itineraries")


def ensure_schema(engine: sa.Engine) -> None:
    """Create the four store tables if they do not exist yet.

    Safe to call on every start. Any failure to open the database file or to
    apply the CREATE statements is fatal and raised as StorageInitError.
    """
    try:
        with engine.begin() as conn:
            Base.metadata.create_all(conn, checkfirst=True)
    except sa.exc.SQLAlchemyError as e:
        _LOGGER.exception("Failed to create store tables")
        raise StorageInitError(f"could not initialise store at {engine.url}: {e}") from e
    _LOGGER.info("Tables created or already present")


def list_tables(engine: sa.Engine) -> list[str]:
    return sorted(sa.inspect(engine).get_table_names())


def table_columns(engine: sa.Engine, table: str) -> list[str]:
    return [c["name"] for c in sa.inspect(engine).get_columns(table)]
