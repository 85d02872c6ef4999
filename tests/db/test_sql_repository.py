"""Unit tests for src/db/sql_repository.py"""

from uuid import uuid4

from sqlalchemy.orm import Session

from src.core.models import GameModel
from src.db.sql_repository import SQLGameRepository

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
AFTER_E4 = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"


def new_game() -> GameModel:
    return GameModel(current_fen=STARTING_FEN)


def test_create_game(db_session_repo: Session) -> None:
    """Conversion from a GameModel to DBGame for a new entry to the database."""
    model = GameModel(
        starting_fen="4k3/8/8/8/8/8/8/4K2R w K - 0 1",
        current_fen="4k3/8/8/8/8/8/8/5RK1 b - - 1 1",
        moves=["O-O"],
        status="in_progress",
    )

    repo = SQLGameRepository(db_session_repo)
    record_in_db, game_id = repo.create_game(model)
    assert isinstance(record_in_db, GameModel)
    assert record_in_db == model
    assert game_id is not None


def test_get_game_by_id(db_session_repo: Session) -> None:
    """Create a game, then fetch it from db."""
    repo = SQLGameRepository(db_session_repo)
    expected_game, game_id = repo.create_game(new_game())
    game_found = repo.get_game(game_id)
    assert isinstance(game_found, GameModel)
    assert game_found == expected_game
    assert game_found.starting_fen is None
    assert game_found.moves == []


def test_get_unknown_game(db_session_repo: Session) -> None:
    """Should return None if ID does not match anything in database."""
    repo = SQLGameRepository(db_session_repo)
    assert repo.get_game(uuid4()) is None

    repo.create_game(new_game())
    assert repo.get_game(uuid4()) is None


def test_list_games(db_session_repo: Session) -> None:
    repo = SQLGameRepository(db_session_repo)
    assert repo.list_games() == {}

    _, first_id = repo.create_game(new_game())
    _, second_id = repo.create_game(GameModel(current_fen=AFTER_E4, moves=["e2e4"]))
    games = repo.list_games()
    assert set(games) == {first_id, second_id}
    assert games[second_id].moves == ["e2e4"]


def test_update_game(db_session_repo: Session) -> None:
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(new_game())

    after = GameModel(current_fen=AFTER_E4, moves=["e2e4"], status="in_progress")
    updated_game = repo.update_game(game_id, after)
    assert updated_game == after
    assert repo.get_game(game_id) == after


def test_consecutive_game_updates(db_session_repo: Session) -> None:
    """The move list grows with every update (and can shrink again after an undo)"""
    repo = SQLGameRepository(db_session_repo)
    model = new_game()
    _, game_id = repo.create_game(model)

    for notation in ["e2e4", "e7e5", "g1f3"]:
        model.moves.append(notation)
        repo.update_game(game_id, model)

    model.moves.pop()
    repo.update_game(game_id, model)

    after_all_updates = repo.get_game(game_id)
    assert after_all_updates is not None
    assert after_all_updates.moves == ["e2e4", "e7e5"]


def test_attempt_updating_unknown_game(db_session_repo: Session) -> None:
    repo = SQLGameRepository(db_session_repo)
    assert repo.update_game(uuid4(), new_game()) is None


def test_delete_game(db_session_repo: Session) -> None:
    """Record of the game should no longer exist after deletion"""
    repo = SQLGameRepository(db_session_repo)
    created_game, game_id = repo.create_game(new_game())
    deleted_game = repo.delete_game(game_id)

    # the correct game should be deleted
    assert deleted_game == created_game

    # The game should no longer be available in db
    assert repo.get_game(game_id) is None


def test_attempt_deleting_unknown_game(db_session_repo: Session) -> None:
    repo = SQLGameRepository(db_session_repo)
    assert repo.delete_game(uuid4()) is None
