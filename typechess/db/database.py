"""Generate database session"""

from functools import lru_cache
from typing import Iterator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from typechess.core.config import get_settings
from typechess.db.schema import Base


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    engine = create_engine(database_url, echo=echo)
    # Ensure all tables are created
    Base.metadata.create_all(bind=engine)
    return engine


@lru_cache
def get_session_factory() -> sessionmaker[Session]:
    """One engine per process, built from the settings the first time a session is requested"""
    settings = get_settings()
    return sessionmaker(bind=create_db_engine(settings.database_url, settings.echo_sql))


def get_db() -> Iterator[Session]:
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()
