"""GameRepository backed by a SQL database (SQLAlchemy ORM)"""

from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import GameModel
from src.db.schema import DBGame


def _write_fields(game_db: DBGame, game: GameModel) -> None:
    game_db.starting_fen = game.starting_fen
    game_db.current_fen = game.current_fen
    # always a fresh list: the JSON column does not notice in-place changes
    game_db.moves = list(game.moves)
    game_db.status = game.status


def _read_fields(game_db: DBGame) -> GameModel:
    return GameModel(
        starting_fen=game_db.starting_fen,
        current_fen=game_db.current_fen,
        moves=list(game_db.moves),
        status=game_db.status,
    )


class SQLGameRepository:
    """Every write commits right away. Unknown ids give None, like the in-memory version."""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        game_db = self._fetch_game(game_id)
        return _read_fields(game_db) if game_db else None

    def list_games(self) -> dict[UUID, GameModel]:
        """Oldest game first."""
        rows = self.db.scalars(select(DBGame).order_by(DBGame.created_at))
        return {game_db.id: _read_fields(game_db) for game_db in rows}

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        game_db = DBGame(id=uuid4())
        _write_fields(game_db, game)
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        return _read_fields(game_db), game_db.id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        game_db = self._fetch_game(game_id)
        if game_db is None:
            return None
        _write_fields(game_db, game)
        self.db.commit()
        self.db.refresh(game_db)
        return _read_fields(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Returns the record as it was before deletion."""
        game_db = self._fetch_game(game_id)
        if game_db is None:
            return None
        deleted = _read_fields(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return deleted

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        return self.db.scalar(select(DBGame).where(DBGame.id == game_id))
