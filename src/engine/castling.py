"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from src.engine.pieces import Color
from src.engine.square import Square


class CastlingDirection(Enum):
    """The four castling directions. Values represent their encodings in FEN string."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"

    @property
    def color(self) -> Color:
        return Color.WHITE if self.value.isupper() else Color.BLACK

    @property
    def is_king_side(self) -> bool:
        return self.value.lower() == "k"

    @classmethod
    def for_color(cls, color: Color, king_side: bool) -> CastlingDirection:
        letter = "k" if king_side else "q"
        return cls(letter.upper() if color == Color.WHITE else letter)


CASTLING_ORDER: tuple[CastlingDirection, ...] = (
    CastlingDirection.WHITE_KING_SIDE,
    CastlingDirection.WHITE_QUEEN_SIDE,
    CastlingDirection.BLACK_KING_SIDE,
    CastlingDirection.BLACK_QUEEN_SIDE,
)


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: If castling rights have not been revoked, we already know the king / rook are still at their starting squares.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> CastlingSquares:
        """Convenience method: to make mapping shown below (from CastlingDirection) more readable"""
        king_from = Square.from_algebraic(k_from)
        king_to = Square.from_algebraic(k_to)
        rook_from = Square.from_algebraic(r_from)
        rook_to = Square.from_algebraic(r_to)
        return cls(king_from, king_to, rook_from, rook_to)

    def squares_between(self) -> list[Square]:
        """Squares strictly between king and rook: all of them must be empty to castle."""
        step = 1 if self.rook_from.file > self.king_from.file else -1
        return [
            Square(file, self.king_from.rank)
            for file in range(self.king_from.file + step, self.rook_from.file, step)
        ]

    def king_path(self) -> list[Square]:
        """Squares the king passes through and lands on (excluding its starting square)."""
        step = 1 if self.king_to.file > self.king_from.file else -1
        return [
            Square(file, self.king_from.rank)
            for file in range(self.king_from.file + step, self.king_to.file + step, step)
        ]


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    CastlingDirection.WHITE_KING_SIDE: CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1"
    ),
    CastlingDirection.WHITE_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1"
    ),
    CastlingDirection.BLACK_KING_SIDE: CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8"
    ),
    CastlingDirection.BLACK_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8"
    ),
}

# Home square of the king of each color
KING_HOME: dict[Color, Square] = {
    Color.WHITE: Square.from_algebraic("e1"),
    Color.BLACK: Square.from_algebraic("e8"),
}


def _all_rights() -> dict[CastlingDirection, bool]:
    return {direction: True for direction in CASTLING_ORDER}


@dataclass
class CastlingRights:
    """Four independent flags: white/black x king side/queen side."""

    rights: dict[CastlingDirection, bool] = field(default_factory=_all_rights)

    @classmethod
    def none(cls) -> CastlingRights:
        return cls({direction: False for direction in CASTLING_ORDER})

    @classmethod
    def from_fen(cls, castle_fen: str) -> CastlingRights:
        """parse the part of the FEN string that encodes castling rights"""
        return cls(
            {direction: (direction.value in castle_fen) for direction in CASTLING_ORDER}
        )

    def to_fen(self) -> str:
        """create the part of the FEN string that encodes castling rights"""
        castling_chars = "".join(
            [direction.value for direction in CASTLING_ORDER if self.rights[direction]]
        )
        return castling_chars or "-"

    def has(self, direction: CastlingDirection) -> bool:
        return self.rights[direction]

    def has_any(self, color: Color) -> bool:
        return any(self.rights[direction] for direction in self.directions_for(color))

    def directions_for(self, color: Color) -> list[CastlingDirection]:
        return [direction for direction in CASTLING_ORDER if direction.color == color]

    def revoke(self, direction: CastlingDirection) -> None:
        self.rights[direction] = False

    def revoke_all(self, color: Color) -> None:
        for direction in self.directions_for(color):
            self.revoke(direction)

    def revoke_for_rook_square(self, square: Square) -> None:
        """A rook left (or was captured on) its home square: that side can no longer castle."""
        for direction, squares in CASTLING_RULES.items():
            if squares.rook_from == square:
                self.revoke(direction)

    def copy(self) -> CastlingRights:
        return CastlingRights(dict(self.rights))
