"""
Representation of a single position on the board. The part that can be encoded in a FEN string.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from src.core.exceptions import InvalidFENError, InvalidSquareError
from src.engine.board import Board
from src.engine.castling import CASTLING_ORDER, CastlingRights
from src.engine.pieces import Color
from src.engine.square import Square

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

MIN_FEN_FIELDS = 4
MAX_FEN_FIELDS = 6
VALID_CASTLING_CHARACTERS = {direction.value for direction in CASTLING_ORDER}

COLOR_CODES: dict[str, Color] = {"w": Color.WHITE, "b": Color.BLACK}


def parse_color(active_color: str) -> Color:
    if active_color not in COLOR_CODES:
        raise InvalidFENError(
            f"Invalid FEN active color {active_color!r}: expected 'w' or 'b'"
        )
    return COLOR_CODES[active_color]


def parse_castling_rights(castling: str) -> CastlingRights:
    """A valid castling encoding has either KQkq, KQk, etc. or a '-' if all rights have been revoked."""
    if castling == "-":
        return CastlingRights.none()
    if not castling or any(char not in VALID_CASTLING_CHARACTERS for char in castling):
        raise InvalidFENError(f"Invalid FEN castling rights {castling!r}")
    return CastlingRights.from_fen(castling)


def parse_en_passant(en_passant: str) -> Optional[Square]:
    """Valid en passant square encoding should be a square that exists on the board or a '-'"""
    if en_passant == "-":
        return None
    try:
        return Square.from_algebraic(en_passant)
    except InvalidSquareError as e:
        raise InvalidFENError(f"Invalid FEN en passant square {en_passant!r}") from e


def parse_counter(counter: str, name: str, minimum: int) -> int:
    if not (counter.isascii() and counter.isdigit()) or int(counter) < minimum:
        raise InvalidFENError(f"Invalid FEN {name} {counter!r}")
    return int(counter)


@dataclass
class FENState:
    """
    Data that can be constructed from a FEN string.
    ----

    FEN, or Forsyth-Edwards Notation, is a standard notation for describing a particular board position of a chess game.
    The purpose of FEN is to provide all the necessary information to restart a game from a particular position.

    <board position string><active color><castling rights><en passant square><# half move clock><number turns played>

    * The string to describe the board position is described in the Board class
    * The active color is either "w" or "b"
    * Castling rights are denoted as "k" for king-side or "q" for queen-side. Capital letters for the white pieces, small letters for the black pieces.
        If no rights remain, a single "-" is used.
    * The en passant square indicates the square a pawn can take on. If not available a "-" is used.
    * The half move clock counts the number of moves made since the last pawn move or capture.
    * The number of turns starts at 1 and increments after every move black makes.

    The last two fields are optional when reading (defaulting to 0 and 1), and always written.

    ex) The standard starting position has a FEN
    rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1
    """

    board: Board = field(default_factory=Board.starting_position)
    color_to_move: Color = Color.WHITE
    castling_rights: CastlingRights = field(default_factory=CastlingRights)
    en_passant_square: Optional[Square] = None
    half_move_clock: int = 0
    num_turns: int = 1

    @classmethod
    def from_fen(cls, fen: str) -> FENState:
        """Parse the FEN into data. Raises InvalidFENError naming the first field that is off."""
        parts = fen.split()
        if not MIN_FEN_FIELDS <= len(parts) <= MAX_FEN_FIELDS:
            raise InvalidFENError(
                f"Invalid FEN: expected {MIN_FEN_FIELDS} to {MAX_FEN_FIELDS} fields, got {len(parts)}"
            )

        board = Board.from_fen(parts[0])
        color_to_move = parse_color(parts[1])
        castling_rights = parse_castling_rights(parts[2])
        en_passant_square = parse_en_passant(parts[3])
        half_move_clock = (
            parse_counter(parts[4], "half move clock", minimum=0)
            if len(parts) > 4
            else 0
        )
        num_turns = (
            parse_counter(parts[5], "full move number", minimum=1)
            if len(parts) > 5
            else 1
        )
        return cls(
            board,
            color_to_move,
            castling_rights,
            en_passant_square,
            half_move_clock,
            num_turns,
        )

    def to_fen(self) -> str:
        """reverse operation: write a FEN from the given data"""
        active_color = "w" if self.color_to_move == Color.WHITE else "b"
        en_passant_algebraic = (
            self.en_passant_square.to_algebraic()
            if self.en_passant_square is not None
            else "-"
        )
        return (
            f"{self.board.to_fen()} {active_color} {self.castling_rights.to_fen()} "
            f"{en_passant_algebraic} {self.half_move_clock} {self.num_turns}"
        )

    def copy(self) -> FENState:
        return FENState(
            self.board.copy(),
            self.color_to_move,
            self.castling_rights.copy(),
            self.en_passant_square,
            self.half_move_clock,
            self.num_turns,
        )


def is_valid_fen(fen: str) -> bool:
    """
    Check if given string follows proper FEN notation.
    """
    try:
        FENState.from_fen(fen)
    except InvalidFENError:
        return False
    return True
