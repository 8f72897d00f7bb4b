from __future__ import annotations

from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Session

from errors import DuplicateKeyError
from models import Itinerary
from utils.logger import get_logger
from utils.timestamps import now_iso
from utils.validation import require_id, validate_itinerary

_LOGGER = get_logger(__name__)

itineraries_table = Itinerary.__table__


def itineraries_for_student(session: Session, student_id: str) -> list[Itinerary]:
    """Most recent first."""
    stmt = (
        sa.select(Itinerary)
        .where(Itinerary.student_id == student_id)
        .order_by(Itinerary.created_date.desc())
    )
    return list(session.scalars(stmt))


def get_itinerary(session: Session, itinerary_id: str) -> Optional[Itinerary]:
    return session.get(Itinerary, itinerary_id)


def add_itinerary(session: Session, itinerary: Itinerary) -> None:
    validate_itinerary(itinerary)
    if not itinerary.created_date:
        itinerary.created_date = now_iso()
    try:
        session.execute(sa.insert(itineraries_table).values(**itinerary.row_values()))
    except sa.exc.IntegrityError as e:
        _LOGGER.error("Itinerary id %s already exists", itinerary.id)
        raise DuplicateKeyError(itineraries_table.name, itinerary.id) from e
    _LOGGER.info("Itinerary %s added for %s", itinerary.title, itinerary.student_id)


def update_itinerary(session: Session, itinerary: Itinerary) -> int:
    # studentId and createdDate are fixed once created
    require_id(itinerary.id)
    stmt = (
        sa.update(itineraries_table)
        .where(itineraries_table.c.id == itinerary.id)
        .values(**itinerary.row_values(Itinerary.MUTABLE_FIELDS))
    )
    result = session.execute(stmt)
    if result.rowcount:
        _LOGGER.info("Itinerary %s updated", itinerary.id)
    else:
        _LOGGER.warning("Update skipped: no itinerary with id %s", itinerary.id)
    return result.rowcount


def delete_itinerary(session: Session, itinerary_id: str) -> int:
    itinerary_id = require_id(itinerary_id)
    result = session.execute(sa.delete(itineraries_table).where(itineraries_table.c.id == itinerary_id))
    _LOGGER.info("Itinerary %s deleted (%d row)", itinerary_id, result.rowcount)
    return result.rowcount
