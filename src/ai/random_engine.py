"""Uniform random move selection"""

from __future__ import annotations

import logging
import random
from typing import Optional

from src.ai.context import SearchContext
from src.core.exceptions import NoLegalMovesError
from src.core.shared_types import Difficulty
from src.engine.game import Game
from src.engine.moves import Move

logger = logging.getLogger(__name__)

DEFAULT_MAX_THINK_MS = 1000


class RandomEngine:
    """Picks any legal move, after pretending to think for a random amount of time (less than `max_think_ms`)."""

    def __init__(
        self,
        difficulty: Difficulty = Difficulty.BEGINNER,
        rng: Optional[random.Random] = None,
        max_think_ms: int = DEFAULT_MAX_THINK_MS,
    ) -> None:
        self._difficulty = difficulty
        self._rng = rng or random.Random()
        self.max_think_ms = max_think_ms

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    @difficulty.setter
    def difficulty(self, difficulty: Difficulty) -> None:
        self._difficulty = difficulty

    def get_best_move(
        self, game: Game, context: Optional[SearchContext] = None
    ) -> Move:
        context = context or SearchContext()
        moves = game.get_all_legal_moves()
        if not moves:
            raise NoLegalMovesError("no legal moves available")

        think_ms = self._rng.randrange(self.max_think_ms) if self.max_think_ms > 0 else 0
        context.sleep(think_ms / 1000)

        move = self._rng.choice(moves)
        logger.debug("Random engine picked %s out of %d moves", move, len(moves))
        return move
