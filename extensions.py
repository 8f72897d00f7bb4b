from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


def create_store_engine(database_uri: str, echo: bool = False) -> sa.Engine:
    """Create the engine backing the store.

    StaticPool keeps exactly one DB-API connection for the engine's lifetime,
    and ``check_same_thread`` is off so the async facade can reach it from
    worker threads (calls are serialized by the facade's lock).
    """
    return sa.create_engine(
        database_uri,
        echo=echo,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


def create_session_factory(engine: sa.Engine) -> sessionmaker:
    # Rows handed back to callers must stay readable after the session closes
    return sessionmaker(bind=engine, expire_on_commit=False)
