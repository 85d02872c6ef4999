"""Unit tests for src/db/database.py"""

from sqlalchemy import inspect

from src.core.config import DatabaseSettings
from src.core.models import GameModel
from src.db.database import create_db_engine, create_session_factory, get_db
from src.db.sql_repository import SQLGameRepository


def test_engine_creates_the_tables() -> None:
    engine = create_db_engine(DatabaseSettings(url="sqlite:///:memory:"))
    assert "games" in inspect(engine).get_table_names()


def test_get_db_yields_a_working_session() -> None:
    engine = create_db_engine(DatabaseSettings(url="sqlite:///:memory:"))
    sessions = get_db(create_session_factory(engine))
    session = next(sessions)

    repo = SQLGameRepository(session)
    _, game_id = repo.create_game(GameModel(moves=["e2e4"]))
    assert repo.get_game(game_id).moves == ["e2e4"]

    # exhausting the generator closes the session
    assert next(sessions, None) is None
