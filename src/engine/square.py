"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_lowercase

from src.core.exceptions import InvalidSquareError

# Chess board is always 8x8.
BOARD_DIMENSIONS = (8, 8)
NUM_SQUARES = BOARD_DIMENSIONS[0] * BOARD_DIMENSIONS[1]
FILE_NAMES = ascii_lowercase[: BOARD_DIMENSIONS[0]]


@dataclass(frozen=True)
class Square:
    """
    Zero-based coordinates: 'a1' is (file=0, rank=0) and has index 0, 'h8' is (7, 7) and has index 63.
    """

    file: int
    rank: int

    @classmethod
    def from_index(cls, index: int) -> Square:
        return cls(index % BOARD_DIMENSIONS[0], index // BOARD_DIMENSIONS[0])

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (0,0) - (7,7)"""
        if len(sq) != 2:
            raise InvalidSquareError(f"Invalid square notation: {sq!r}")

        file_char, rank_char = sq[0], sq[1]
        if file_char not in FILE_NAMES or rank_char not in "12345678":
            raise InvalidSquareError(f"Invalid square notation: {sq!r}")

        square = cls(FILE_NAMES.index(file_char), int(rank_char) - 1)
        if not square.is_within_bounds():
            raise InvalidSquareError(f"Invalid square notation: {sq!r}")
        return square

    @property
    def index(self) -> int:
        return self.rank * BOARD_DIMENSIONS[0] + self.file

    def to_algebraic(self) -> str:
        return f"{FILE_NAMES[self.file]}{self.rank + 1}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.file < BOARD_DIMENSIONS[0]) and (
            0 <= self.rank < BOARD_DIMENSIONS[1]
        )

    def offset(self, df: int, dr: int) -> Square:
        """The square df files and dr ranks away. Can lie outside the board: callers check."""
        return Square(self.file + df, self.rank + dr)

    def __str__(self) -> str:
        return self.to_algebraic() if self.is_within_bounds() else "invalid"


ALL_SQUARES: tuple[Square, ...] = tuple(
    Square.from_index(index) for index in range(NUM_SQUARES)
)
