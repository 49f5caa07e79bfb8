"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    name: Mapped[str] = mapped_column(primary_key=True)
    settings: Mapped[dict[str, bool]] = mapped_column(JSON)
    # every ChessState snapshot (JSON encoded), oldest first
    state_history: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    current_state_index: Mapped[int] = mapped_column(default=0)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
