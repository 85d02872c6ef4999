"""Common interface of the move-selection engines."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

from src.core.shared_types import Difficulty

if TYPE_CHECKING:
    from src.ai.context import SearchContext
    from src.engine.game import Game
    from src.engine.moves import Move

# Nominal search depth per difficulty. The heuristic engine only uses it to scale its thinking time.
DIFFICULTY_DEPTHS: dict[Difficulty, int] = {
    Difficulty.BEGINNER: 2,
    Difficulty.EASY: 2,
    Difficulty.MEDIUM: 3,
    Difficulty.HARD: 4,
    Difficulty.EXPERT: 5,
}


def depth_for(difficulty: Difficulty) -> int:
    return DIFFICULTY_DEPTHS.get(difficulty, 2)


class Engine(Protocol):
    """
    Pick one legal move for the side to move.

    Raises NoLegalMovesError if there is none, SearchCancelledError / SearchTimeoutError if the context says stop.
    The game is only read, never modified.
    """

    @property
    def difficulty(self) -> Difficulty: ...

    @difficulty.setter
    def difficulty(self, difficulty: Difficulty) -> None: ...

    def get_best_move(
        self, game: Game, context: Optional[SearchContext] = None
    ) -> Move: ...
