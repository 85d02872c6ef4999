"""The Board only stores which piece stands where. It knows nothing about the rules of chess (those live in moves.py and game.py)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from src.core.exceptions import InvalidFENError
from src.engine.pieces import FEN_TO_PIECE, EMPTY_PIECE, Color, Piece, PieceType
from src.engine.square import (
    ALL_SQUARES,
    BOARD_DIMENSIONS,
    FILE_NAMES,
    NUM_SQUARES,
    Square,
)

STARTING_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"


def _empty_squares() -> list[Piece]:
    return [EMPTY_PIECE] * NUM_SQUARES


@dataclass
class Board:
    squares: list[Piece] = field(default_factory=_empty_squares)

    @classmethod
    def empty(cls) -> Board:
        return cls()

    @classmethod
    def starting_position(cls) -> Board:
        board = cls()
        board.setup_starting_position()
        return board

    @classmethod
    def from_fen(cls, placement: str) -> Board:
        """Construct a board using the first field of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.
        """
        num_files, num_ranks = BOARD_DIMENSIONS
        rank_fens = placement.split("/")
        if len(rank_fens) != num_ranks:
            raise InvalidFENError(
                f"Invalid FEN placement: expected {num_ranks} ranks, got {len(rank_fens)}"
            )

        board = cls()
        for rank_idx, fen_one_rank in enumerate(rank_fens):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            rank = num_ranks - 1 - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            file = 0
            for character in fen_one_rank:
                if character in "12345678":
                    # A number denotes the amount of empty squares after each other
                    file += int(character)
                elif character.lower() in FEN_TO_PIECE:
                    if file >= num_files:
                        raise InvalidFENError(
                            f"Invalid FEN rank {rank + 1}: too many squares in {fen_one_rank!r}"
                        )
                    board.set_piece(Square(file, rank), Piece.from_fen(character))
                    file += 1
                else:
                    raise InvalidFENError(
                        f"Invalid FEN piece character {character!r} in rank {rank + 1}"
                    )

            # make sure you are creating a correctly sized board
            if file != num_files:
                raise InvalidFENError(
                    f"Invalid FEN rank {rank + 1}: expected {num_files} files, got {file}"
                )
        return board

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(BOARD_DIMENSIONS[1] - 1, -1, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(BOARD_DIMENSIONS[0]):
            piece = self.get_piece(Square(file, rank))

            if not piece.is_empty:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def setup_starting_position(self) -> None:
        self.squares = Board.from_fen(STARTING_PLACEMENT).squares

    def get_piece(self, square: Square) -> Piece:
        """Off-board squares read as empty."""
        if not square.is_within_bounds():
            return EMPTY_PIECE
        return self.squares[square.index]

    def set_piece(self, square: Square, piece: Piece) -> None:
        """Silently ignores off-board squares."""
        if square.is_within_bounds():
            self.squares[square.index] = piece

    def remove_piece(self, square: Square) -> None:
        self.set_piece(square, EMPTY_PIECE)

    def move_piece(self, from_square: Square, to_square: Square) -> None:
        """Relocate whatever stands on from_square (captures by overwriting)."""
        self.set_piece(to_square, self.get_piece(from_square))
        self.remove_piece(from_square)

    def copy(self) -> Board:
        """Deep copy: Pieces are immutable, so a new backing list is all we need."""
        return Board(list(self.squares))

    def locate_color(self, color: Color) -> list[Square]:
        return [
            square
            for square in ALL_SQUARES
            if not self.squares[square.index].is_empty
            and self.squares[square.index].color == color
        ]

    def locate_pieces(self, piece_type: PieceType, color: Color) -> list[Square]:
        return [
            square
            for square in ALL_SQUARES
            if self.squares[square.index] == Piece(piece_type, color)
        ]

    def find_king(self, color: Color) -> Optional[Square]:
        """Malformed positions (loaded via FEN) might lack a king: return None instead of crashing."""
        kings = self.locate_pieces(PieceType.KING, color)
        return kings[0] if kings else None

    def count_material(self) -> dict[Color, int]:
        """Tally the points of material each player has on the board"""
        return {
            color: sum(
                self.get_piece(square).points for square in self.locate_color(color)
            )
            for color in (Color.WHITE, Color.BLACK)
        }

    def __str__(self) -> str:
        """8x8 grid, rank 8 on top. Upper case: white, lower case: black, '.' for an empty square."""
        file_labels = "  " + " ".join(FILE_NAMES) + "\n"
        lines = [file_labels]
        for rank in range(BOARD_DIMENSIONS[1] - 1, -1, -1):
            cells = " ".join(
                self.get_piece(Square(file, rank)).to_fen()
                for file in range(BOARD_DIMENSIONS[0])
            )
            lines.append(f"{rank + 1} {cells} {rank + 1}\n")
        lines.append(file_labels)
        return "".join(lines)
