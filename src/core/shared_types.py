"""
Type definitions used across layers
"""

from enum import StrEnum


class GameStatus(StrEnum):
    IN_PROGRESS = "in_progress"
    CHECK = "check"
    WHITE_WINS = "white_wins"
    BLACK_WINS = "black_wins"
    DRAW = "draw"

    @property
    def is_over(self) -> bool:
        return self in (GameStatus.WHITE_WINS, GameStatus.BLACK_WINS, GameStatus.DRAW)


# --- Color does NOT contain an option for empty squares (that one lives in src/engine/pieces.py)
# --- NOTE Same name as the engine's Color, as that reads clearly. Let the imports show which version is used where.
class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class Difficulty(StrEnum):
    BEGINNER = "beginner"
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"


class EngineKind(StrEnum):
    RANDOM = "random"
    HEURISTIC = "heuristic"
    LLM = "llm"
