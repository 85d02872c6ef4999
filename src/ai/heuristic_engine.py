"""
One-ply heuristic move selection.

Every legal move gets a score, the highest score wins (the first one found on ties):
* value of the captured piece (queen 900, rook 500, bishop/knight 300, pawn 100)
* a flat bonus for landing on one of the four centre squares
* during the opening: a bonus for developing a knight or bishop off its back rank

NOTE: The difficulty maps onto a nominal depth, which only scales the thinking time. There is no deeper search.
"""

from __future__ import annotations

import logging
from typing import Optional

from src.ai.base import depth_for
from src.ai.context import SearchContext
from src.core.exceptions import NoLegalMovesError
from src.core.shared_types import Difficulty
from src.engine.game import Game
from src.engine.moves import Move
from src.engine.pieces import Color, PieceType
from src.engine.square import Square

logger = logging.getLogger(__name__)

DEFAULT_THINK_MS_PER_PLY = 500

CENTRE_SQUARES: frozenset[Square] = frozenset(
    Square.from_algebraic(name) for name in ("d4", "e4", "d5", "e5")
)
CENTRE_BONUS = 30
DEVELOPMENT_BONUS = 20
OPENING_MOVES = 10
MINOR_PIECES = (PieceType.KNIGHT, PieceType.BISHOP)
BACK_RANK: dict[Color, int] = {Color.WHITE: 0, Color.BLACK: 7}


def score_move(game: Game, move: Move) -> int:
    score = move.captured.value
    if move.to_square in CENTRE_SQUARES:
        score += CENTRE_BONUS
    if (
        game.full_move_number < OPENING_MOVES
        and move.piece.type in MINOR_PIECES
        and move.from_square.rank == BACK_RANK[move.piece.color]
    ):
        score += DEVELOPMENT_BONUS
    return score


class HeuristicEngine:
    def __init__(
        self,
        difficulty: Difficulty = Difficulty.MEDIUM,
        think_ms_per_ply: int = DEFAULT_THINK_MS_PER_PLY,
    ) -> None:
        self._difficulty = difficulty
        self.depth = depth_for(difficulty)
        self.think_ms_per_ply = think_ms_per_ply

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    @difficulty.setter
    def difficulty(self, difficulty: Difficulty) -> None:
        """Changing the difficulty also changes the (nominal) depth"""
        self._difficulty = difficulty
        self.depth = depth_for(difficulty)

    def get_best_move(
        self, game: Game, context: Optional[SearchContext] = None
    ) -> Move:
        context = context or SearchContext()
        moves = game.get_all_legal_moves()
        if not moves:
            raise NoLegalMovesError("no legal moves available")

        if game.is_in_check():
            # only moves that get the king out of check
            moves = [move for move in moves if game.is_legal_move(move)]

        context.sleep(self.depth * self.think_ms_per_ply / 1000)

        best_move = moves[0]
        best_score = score_move(game, best_move)
        for move in moves[1:]:
            context.check()
            score = score_move(game, move)
            if score > best_score:
                best_move, best_score = move, score

        logger.debug(
            "Heuristic engine picked %s (score %d, depth %d)",
            best_move,
            best_score,
            self.depth,
        )
        return best_move
