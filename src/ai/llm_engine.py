"""
Boundary adapter for move selection by a large language model.

This module only builds the prompt and reads the reply. Talking to an actual provider is the job of an injected
`LLMClient`. Whenever the client fails, or the reply does not contain a legal move, the fallback engine
(uniform random by default) picks the move instead.
"""

from __future__ import annotations

import logging
import random
from typing import Optional, Protocol

from src.ai.context import SearchContext
from src.ai.random_engine import RandomEngine
from src.core.exceptions import GameError, NoLegalMovesError
from src.core.shared_types import Difficulty
from src.engine.game import Game
from src.engine.moves import Move
from src.engine.notation import san_for_move
from src.engine.pieces import Color

logger = logging.getLogger(__name__)

RECENT_MOVES_WINDOW = 10
DEFAULT_PERSONALITY = "a friendly but competitive chess player"
REPLY_PREFIXES = ("best move:", "move:")
REPLY_STRIP_CHARS = " \t\"'`.!?+#"
GIVE_UP_REPLY = "random"

DIFFICULTY_INSTRUCTIONS: dict[Difficulty, str] = {
    Difficulty.BEGINNER: "Play at a beginner level, occasionally making suboptimal moves.",
    Difficulty.EASY: "Play at an easy level with basic tactical awareness.",
    Difficulty.MEDIUM: "Play at a medium level with good tactical and some strategic understanding.",
    Difficulty.HARD: "Play at a hard level with strong tactical and strategic play.",
    Difficulty.EXPERT: "Play at an expert level with excellent tactical and strategic understanding.",
}


class LLMClient(Protocol):
    """Anything that can send a (system prompt, prompt) pair to a chat model and return its text reply."""

    def complete(self, system_prompt: str, prompt: str) -> str: ...


def system_prompt(difficulty: Difficulty, personality: str = DEFAULT_PERSONALITY) -> str:
    return (
        f"You are a chess AI opponent. You have the personality of: {personality}. "
        f"{DIFFICULTY_INSTRUCTIONS[difficulty]}\n"
        "Your task is to analyze the chess position and pick a move for the side to move.\n\n"
        "IMPORTANT RULES:\n"
        "1. Respond ONLY with one move from the list of legal moves, in coordinate notation (e.g. e2e4, g1f3, e7e8Q, O-O)\n"
        "2. Do not include explanations, commentary, or extra text\n"
        f'3. If you cannot determine a good move, respond with "{GIVE_UP_REPLY}"'
    )


def build_prompt(game: Game) -> str:
    """Prompt context: the board, FEN, side to move, check flag, recent moves and the legal moves."""
    lines = [
        "Current chess position:",
        "",
        str(game.board),
        f"FEN: {game.to_fen()}",
        f"Active color: {'White' if game.active_color == Color.WHITE else 'Black'}",
    ]
    if game.is_in_check():
        lines.append("You are in check!")

    recent = game.move_history[-RECENT_MOVES_WINDOW:]
    if recent:
        lines.append(f"Recent moves: {' '.join(str(move) for move in recent)}")

    legal_moves = " ".join(str(move) for move in game.get_all_legal_moves())
    lines.append(f"Legal moves: {legal_moves}")
    lines.append("")
    lines.append("Provide your move:")
    return "\n".join(lines)


def _clean_reply_line(line: str) -> str:
    line = line.strip()
    for prefix in REPLY_PREFIXES:
        if line.lower().startswith(prefix):
            line = line[len(prefix) :]
    return line.strip(REPLY_STRIP_CHARS)


def parse_reply(reply: str, game: Game) -> Optional[Move]:
    """
    First legal move found in the reply, line by line.
    Coordinate notation is tried first, SAN (e.g. 'Nf3', 'exd5') second. None if there is no usable move.
    """
    lines = [_clean_reply_line(line) for line in reply.splitlines()]
    candidates = [line for line in lines if line]
    if not candidates or candidates[0].lower() == GIVE_UP_REPLY:
        return None

    san_lookup: Optional[dict[str, Move]] = None
    for candidate in candidates:
        try:
            move = game.parse_move(candidate)
        except GameError:
            move = None
        if move is not None and game.is_legal_move(move):
            return move

        if san_lookup is None:
            san_lookup = {
                san_for_move(game, legal).rstrip("+#"): legal
                for legal in game.get_all_legal_moves()
            }
        if candidate in san_lookup:
            return san_lookup[candidate]
    return None


class LLMEngine:
    def __init__(
        self,
        client: LLMClient,
        difficulty: Difficulty = Difficulty.MEDIUM,
        fallback: Optional[RandomEngine] = None,
        rng: Optional[random.Random] = None,
        personality: str = DEFAULT_PERSONALITY,
    ) -> None:
        self._client = client
        self._difficulty = difficulty
        self._fallback = fallback or RandomEngine(difficulty, rng=rng)
        self.personality = personality

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    @difficulty.setter
    def difficulty(self, difficulty: Difficulty) -> None:
        self._difficulty = difficulty
        self._fallback.difficulty = difficulty

    def get_best_move(
        self, game: Game, context: Optional[SearchContext] = None
    ) -> Move:
        context = context or SearchContext()
        if not game.has_legal_moves():
            raise NoLegalMovesError("no legal moves available")
        context.check()

        try:
            reply = self._client.complete(
                system_prompt(self._difficulty, self.personality), build_prompt(game)
            )
        except Exception as e:
            logger.warning("LLM request failed (%s), falling back to a random move", e)
            return self._fallback.get_best_move(game, context)

        context.check()
        move = parse_reply(reply, game)
        if move is None:
            logger.warning(
                "No legal move in LLM reply %r, falling back to a random move", reply
            )
            return self._fallback.get_best_move(game, context)
        return move
