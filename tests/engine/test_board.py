"""Unit tests for /src/engine/board.py"""

import pytest

from src.core.exceptions import InvalidFENError
from src.engine.board import STARTING_PLACEMENT, Board
from src.engine.pieces import EMPTY_PIECE, Color, Piece, PieceType
from src.engine.square import Square

EMPTY_PLACEMENT = "/".join(["8"] * 8)


def test_starting_position() -> None:
    board = Board.starting_position()
    assert board.get_piece(Square.from_algebraic("e1")) == Piece.from_fen("K")
    assert board.get_piece(Square.from_algebraic("d8")) == Piece.from_fen("q")
    assert board.get_piece(Square.from_algebraic("a2")) == Piece.from_fen("P")
    assert board.get_piece(Square.from_algebraic("e4")) == EMPTY_PIECE
    assert len(board.locate_color(Color.WHITE)) == 16
    assert len(board.locate_color(Color.BLACK)) == 16
    assert board.to_fen() == STARTING_PLACEMENT


@pytest.mark.parametrize(
    "placement",
    [
        STARTING_PLACEMENT,
        EMPTY_PLACEMENT,
        "r3k2r/pppq1ppp/2npbn2/4p3/2B1P3/2NP1N2/PPP2PPP/R1BQ1RK1",
        "7k/4P3/8/8/8/8/8/4K3",
    ],
)
def test_placement_round_trip(placement: str) -> None:
    assert Board.from_fen(placement).to_fen() == placement


@pytest.mark.parametrize(
    "placement",
    [
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP",  # 7 ranks
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR/8",  # 9 ranks
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBN",  # 7 files on the first rank
        "rnbqkbnr/pppppppp/9/8/8/8/PPPPPPPP/RNBQKBNR",  # digit 9
        "rnbqkbnr/ppppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR",  # 9 files
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNX",  # no such piece
        "rnbqkbnr/pppppppp/8/8/8/0/PPPPPPPP/RNBQKBNR",  # digit 0
    ],
)
def test_invalid_placement(placement: str) -> None:
    with pytest.raises(InvalidFENError):
        Board.from_fen(placement)


def test_out_of_range_access_is_harmless() -> None:
    """Reading off the board gives an empty square, writing off the board does nothing"""
    board = Board.starting_position()
    assert board.get_piece(Square(8, 0)) == EMPTY_PIECE
    assert board.get_piece(Square(-1, 3)) == EMPTY_PIECE
    board.set_piece(Square(0, 8), Piece.from_fen("Q"))
    assert board.to_fen() == STARTING_PLACEMENT


def test_copy_is_independent() -> None:
    board = Board.starting_position()
    copied = board.copy()
    copied.move_piece(Square.from_algebraic("e2"), Square.from_algebraic("e4"))
    assert board.to_fen() == STARTING_PLACEMENT
    assert copied.get_piece(Square.from_algebraic("e4")) == Piece.from_fen("P")
    assert copied.get_piece(Square.from_algebraic("e2")) == EMPTY_PIECE


def test_find_king() -> None:
    board = Board.starting_position()
    assert board.find_king(Color.WHITE) == Square.from_algebraic("e1")
    assert board.find_king(Color.BLACK) == Square.from_algebraic("e8")


def test_find_king_on_board_without_kings() -> None:
    assert Board.from_fen(EMPTY_PLACEMENT).find_king(Color.WHITE) is None


def test_empty_board() -> None:
    board = Board.empty()
    assert board.to_fen() == EMPTY_PLACEMENT
    assert board.locate_color(Color.WHITE) == []
    board.setup_starting_position()
    assert board.to_fen() == STARTING_PLACEMENT


def test_locate_pieces() -> None:
    board = Board.starting_position()
    knights = board.locate_pieces(PieceType.KNIGHT, Color.BLACK)
    assert knights == [Square.from_algebraic("b8"), Square.from_algebraic("g8")]


def test_count_material() -> None:
    """8 pawns + 2 knights + 2 bishops + 2 rooks + queen = 8 + 6 + 6 + 10 + 9"""
    assert Board.starting_position().count_material() == {
        Color.WHITE: 39,
        Color.BLACK: 39,
    }


def test_ascii_grid() -> None:
    lines = str(Board.starting_position()).splitlines()
    assert lines[0] == "  a b c d e f g h"
    assert lines[1] == "8 r n b q k b n r 8"
    assert lines[5] == "4 . . . . . . . . 4"
    assert lines[8] == "1 R N B Q K B N R 1"
    assert lines[9] == "  a b c d e f g h"
