"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import JSON, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.core.shared_types import GameStatus

# six FEN fields on a full board stay well below this
FEN_MAX_LENGTH = 100


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    """
    One row per game. The move list (coordinate notation) is what the game gets rebuilt from,
    the current FEN + status are denormalized for listing games without replaying them.
    """

    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    starting_fen: Mapped[Optional[str]] = mapped_column(String(FEN_MAX_LENGTH))
    current_fen: Mapped[str] = mapped_column(String(FEN_MAX_LENGTH))
    moves: Mapped[list[str]] = mapped_column(JSON, default=list)
    status: Mapped[str] = mapped_column(String(16), default=GameStatus.IN_PROGRESS.value)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, index=True)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
