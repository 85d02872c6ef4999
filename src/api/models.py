"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator, model_validator

from src.ai.factory import parse_engine_kind
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, Difficulty, EngineKind, GameStatus

MIN_FEN_FIELDS = 4
MAX_FEN_FIELDS = 6
PROMOTION_LETTERS = "QRBN"


def _validate_fen_structure(value: str) -> str:
    """Only the structure: the engine checks every field when loading the position"""
    parts = value.split()
    if not MIN_FEN_FIELDS <= len(parts) <= MAX_FEN_FIELDS:
        raise InvalidRequestError(
            f"FEN string must contain {MIN_FEN_FIELDS} to {MAX_FEN_FIELDS} space-separated parts."
        )
    return " ".join(parts)


def _is_algebraic_notation(value: str) -> bool:
    return len(value) == 2 and value[0] in "abcdefgh" and value[1] in "12345678"


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    starting_fen: Optional[str] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _validate_fen_structure(value)


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


class UndoRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID


class AnalysisRequest(BaseModel):
    game_id: UUID


class PGNRequest(BaseModel):
    game_id: UUID
    headers: dict[str, str] = {}


class LoadFENRequest(BaseModel):
    game_id: UUID
    fen: str

    @field_validator("fen")
    @classmethod
    def validate_fen(cls, value: str) -> str:
        return _validate_fen_structure(value)


class MoveRequest(BaseModel):
    """Either `notation` ("e2e4", "e7e8Q", "O-O") or a from_square + to_square pair (+ promotion)"""

    game_id: UUID
    notation: Optional[str] = None
    from_square: Optional[str] = None
    to_square: Optional[str] = None
    promotion: Optional[str] = None

    @field_validator("from_square", "to_square")
    @classmethod
    def validate_square(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip().lower()
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value

    @field_validator("promotion")
    @classmethod
    def validate_promotion(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip().upper()
        if len(value) != 1 or value not in PROMOTION_LETTERS:
            raise InvalidRequestError(
                f"Cannot promote to {value!r}. Pick one from {', '.join(PROMOTION_LETTERS)}"
            )
        return value

    @model_validator(mode="after")
    def validate_move_given(self) -> "MoveRequest":
        if self.notation:
            return self
        if self.from_square is None or self.to_square is None:
            raise InvalidRequestError(
                "Supply either the move notation or both from_square and to_square."
            )
        return self

    def to_notation(self) -> str:
        if self.notation:
            return self.notation.strip()
        return f"{self.from_square}{self.to_square}{self.promotion or ''}"


class AIMoveRequest(BaseModel):
    game_id: UUID
    level: Optional[Difficulty] = None
    engine: Optional[EngineKind] = None
    provider: Optional[str] = None
    apply: bool = True

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, value: Optional[str]) -> Optional[Difficulty]:
        if value is None:
            return value
        try:
            return Difficulty(str(value).strip().lower())
        except ValueError as e:
            raise InvalidRequestError(
                f"Unknown level {value!r}. Pick one from {', '.join(level.value for level in Difficulty)}"
            ) from e

    @field_validator("engine", mode="before")
    @classmethod
    def validate_engine(cls, value: Optional[str]) -> Optional[EngineKind]:
        if value is None:
            return value
        return parse_engine_kind(str(value))


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    fen: str
    board: str
    status: GameStatus
    active_color: Color
    move_count: int
    move_history: list[str]
    san_history: list[str]
    starting_fen: Optional[str]
    in_check: bool


class MoveResponse(BaseModel):
    move: str
    san: str
    game: GameResponse


class LegalMovesResponse(BaseModel):
    game_id: UUID
    active_color: Color
    legal_moves: list[str]
    count: int


class AIMoveResponse(BaseModel):
    move: str
    san: str
    engine: EngineKind
    level: Difficulty
    applied: bool
    game: GameResponse


class AnalysisResponse(BaseModel):
    game_id: UUID
    status: GameStatus
    active_color: Color
    move_count: int
    evaluation: int
    in_check: bool
    legal_move_count: int
    material: dict[Color, int]
    can_castle: bool


class PGNResponse(BaseModel):
    game_id: UUID
    pgn: str
