"""Protocol repository + a dictionary based implementation (default for the service, and handy in tests)"""

import threading
from dataclasses import replace
from typing import Protocol
from uuid import UUID, uuid4

from src.core.models import GameModel


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        ...

    def list_games(self) -> dict[UUID, GameModel]:
        """All stored games by ID."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        ...


def _copy(game: GameModel) -> GameModel:
    """Callers must not be able to change stored records by mutating what they passed in / got back."""
    return replace(game, moves=list(game.moves))


class InMemoryGameRepository:
    """Games are lost when the process stops."""

    def __init__(self) -> None:
        self._games: dict[UUID, GameModel] = {}
        self._lock = threading.Lock()

    def get_game(self, game_id: UUID) -> GameModel | None:
        with self._lock:
            game = self._games.get(game_id)
            return _copy(game) if game else None

    def list_games(self) -> dict[UUID, GameModel]:
        with self._lock:
            return {game_id: _copy(game) for game_id, game in self._games.items()}

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        new_id = uuid4()
        with self._lock:
            self._games[new_id] = _copy(game)
        return _copy(game), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        with self._lock:
            if game_id not in self._games:
                return None
            self._games[game_id] = _copy(game)
        return _copy(game)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        with self._lock:
            return self._games.pop(game_id, None)
