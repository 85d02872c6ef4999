"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
import random
import threading
from contextlib import contextmanager
from typing import Iterator, Optional
from uuid import UUID

from src.ai.context import SearchContext
from src.ai.factory import create_engine
from src.ai.llm_engine import LLMClient
from src.api.models import (
    AIMoveRequest,
    AIMoveResponse,
    AnalysisRequest,
    AnalysisResponse,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    LoadFENRequest,
    MoveRequest,
    MoveResponse,
    PGNRequest,
    PGNResponse,
    UndoRequest,
)
from src.core.config import Settings
from src.core.exceptions import GameNotFoundError, GameStateError
from src.core.models import GameModel
from src.core.shared_types import Color
from src.db.repository import GameRepository
from src.engine.game import Game
from src.engine.notation import san_for_move
from src.engine.pieces import Color as EngineColor

logger = logging.getLogger(__name__)


def _to_api_color(color: EngineColor) -> Color:
    return Color.WHITE if color == EngineColor.WHITE else Color.BLACK


class ChessService:
    """
    Orchestration of layers for chess game.

    Every call that changes a game holds that game's lock from fetching the stored model until the updated model
    is back in the repository, so two requests for the same game never interleave.
    """

    def __init__(
        self,
        repository: GameRepository,
        settings: Optional[Settings] = None,
        llm_clients: Optional[dict[str, LLMClient]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.repo = repository
        self.settings = settings or Settings()
        self.llm_clients = llm_clients or {}
        self.rng = rng or random.Random()
        self._locks: dict[UUID, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    # -- API routes logic ---
    def create_game(self, request: CreateGameRequest) -> GameResponse:
        """New game, from the standard starting position or from the supplied FEN."""
        game = Game.from_fen(request.starting_fen) if request.starting_fen else Game()
        stored_game, game_id = self.repo.create_game(game.to_model())
        logger.info("Created game %s", game_id)
        return self._create_game_response(game_id, Game.from_model(stored_game))

    def get_game(self, request: GetGameRequest) -> GameResponse:
        """Retrieve current game state."""
        game = Game.from_model(self._fetch_game(request.game_id))
        return self._create_game_response(request.game_id, game)

    def list_games(self) -> list[GameResponse]:
        """Show all recorded games."""
        return [
            self._create_game_response(game_id, Game.from_model(model))
            for game_id, model in self.repo.list_games().items()
        ]

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        with self._game_lock(request.game_id):
            if self.repo.delete_game(request.game_id) is None:
                raise GameNotFoundError(f"Game with game_id={request.game_id} not found.")
        with self._registry_lock:
            self._locks.pop(request.game_id, None)
        logger.info("Deleted game %s", request.game_id)

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """Make a move attempt."""
        with self._game_lock(request.game_id):
            game = Game.from_model(self._fetch_game(request.game_id))
            self._assert_in_play(game)

            played = game.play(request.to_notation())
            san = game.generate_san()[-1]

            self._store(request.game_id, game)

        logger.info("Game %s: played %s (%s)", request.game_id, played, game.status)
        return MoveResponse(
            move=played.to_notation(),
            san=san,
            game=self._create_game_response(request.game_id, game),
        )

    def undo_move(self, request: UndoRequest) -> GameResponse:
        with self._game_lock(request.game_id):
            game = Game.from_model(self._fetch_game(request.game_id))
            move = game.undo_move()
            self._store(request.game_id, game)

        logger.info("Game %s: took back %s", request.game_id, move)
        return self._create_game_response(request.game_id, game)

    def load_fen(self, request: LoadFENRequest) -> GameResponse:
        """Replace the position of an existing game. The move history starts over."""
        with self._game_lock(request.game_id):
            game = Game.from_model(self._fetch_game(request.game_id))
            game.load_fen(request.fen)
            self._store(request.game_id, game)

        logger.info("Game %s: loaded FEN %s", request.game_id, game.to_fen())
        return self._create_game_response(request.game_id, game)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """retrieve set of legal moves."""
        game = Game.from_model(self._fetch_game(request.game_id))
        legal_moves = [move.to_notation() for move in game.get_all_legal_moves()]
        return LegalMovesResponse(
            game_id=request.game_id,
            active_color=_to_api_color(game.active_color),
            legal_moves=legal_moves,
            count=len(legal_moves),
        )

    def ai_move(
        self, request: AIMoveRequest, context: Optional[SearchContext] = None
    ) -> AIMoveResponse:
        """
        Let an engine pick a move for the side to move (and play it, unless `apply` is off).
        Without a context, the search gets the configured maximum think time.
        """
        ai_settings = self.settings.ai
        engine_kind = request.engine or ai_settings.default_engine
        level = request.level or ai_settings.default_difficulty
        engine = create_engine(
            engine_kind,
            level,
            rng=self.rng,
            llm_client=self._llm_client(request.provider),
            max_think_ms=ai_settings.random_max_think_ms,
            think_ms_per_ply=ai_settings.heuristic_think_ms_per_ply,
        )

        with self._game_lock(request.game_id):
            game = Game.from_model(self._fetch_game(request.game_id))
            self._assert_in_play(game)

            # the think budget starts once the game is ours
            context = context or SearchContext.with_timeout(ai_settings.max_think_seconds)
            move = engine.get_best_move(game, context)
            san = san_for_move(game, move)
            if request.apply:
                game.make_move(move)
                self._store(request.game_id, game)

        logger.info(
            "Game %s: %s engine (%s) picked %s", request.game_id, engine_kind, level, move
        )
        return AIMoveResponse(
            move=move.to_notation(),
            san=san,
            engine=engine_kind,
            level=level,
            applied=request.apply,
            game=self._create_game_response(request.game_id, game),
        )

    def analyze(self, request: AnalysisRequest) -> AnalysisResponse:
        game = Game.from_model(self._fetch_game(request.game_id))
        return AnalysisResponse(
            game_id=request.game_id,
            status=game.status,
            active_color=_to_api_color(game.active_color),
            move_count=game.move_count,
            evaluation=game.evaluate(),
            in_check=game.is_in_check(),
            legal_move_count=len(game.get_all_legal_moves()),
            material={
                _to_api_color(color): points
                for color, points in game.board.count_material().items()
            },
            can_castle=game.castling_rights.has_any(game.active_color),
        )

    def pgn(self, request: PGNRequest) -> PGNResponse:
        game = Game.from_model(self._fetch_game(request.game_id))
        return PGNResponse(game_id=request.game_id, pgn=game.to_pgn(**request.headers))

    # -- Internal helpers --
    @contextmanager
    def _game_lock(self, game_id: UUID) -> Iterator[None]:
        with self._registry_lock:
            lock = self._locks.setdefault(game_id, threading.Lock())
        with lock:
            yield

    def _llm_client(self, provider: Optional[str]) -> Optional[LLMClient]:
        if not self.settings.llm.enabled:
            return None
        return self.llm_clients.get(provider or self.settings.llm.default_provider)

    @staticmethod
    def _assert_in_play(game: Game) -> None:
        if game.status.is_over:
            raise GameStateError(f"Game is over. status: {game.status}")

    def _store(self, game_id: UUID, game: Game) -> None:
        if self.repo.update_game(game_id, game.to_model()) is None:
            raise GameNotFoundError(f"Game with {game_id=} not found.")

    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        """Convert a Game to a GameResponse (for game with given ID.)"""
        model: GameModel = game.to_model()
        return GameResponse(
            game_id=game_id,
            fen=model.current_fen,
            board=str(game.board),
            status=game.status,
            active_color=_to_api_color(game.active_color),
            move_count=game.move_count,
            move_history=model.moves,
            san_history=game.generate_san(),
            starting_fen=model.starting_fen,
            in_check=game.is_in_check(),
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise GameNotFoundError(f"Game with {game_id=} not found.")
        return game_model
