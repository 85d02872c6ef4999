"""Unit tests for /src/engine/moves.py"""

import pytest

from src.engine.board import Board
from src.engine.moves import (
    Move,
    MoveKind,
    candidate_moves,
    en_passant_moves,
    is_square_attacked,
)
from src.engine.pieces import EMPTY_PIECE, Color, Piece, PieceType
from src.engine.square import Square


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


def destinations(square: str, board: Board) -> set[str]:
    return {move.to_square.to_algebraic() for move in candidate_moves(sq(square), board)}


# --- MOVE VALUE ---
def test_move_notation() -> None:
    pawn = Piece.from_fen("P")
    assert str(Move(sq("e2"), sq("e4"), piece=pawn)) == "e2e4"
    assert (
        Move(sq("e7"), sq("e8"), MoveKind.PROMOTION, pawn, promotion=PieceType.QUEEN).to_notation()
        == "e7e8Q"
    )
    king = Piece.from_fen("k")
    assert str(Move(sq("e8"), sq("g8"), MoveKind.CASTLING, king)) == "O-O"
    assert str(Move(sq("e8"), sq("c8"), MoveKind.CASTLING, king)) == "O-O-O"


def test_move_is_capture() -> None:
    pawn = Piece.from_fen("P")
    assert not Move(sq("e2"), sq("e4"), piece=pawn).is_capture
    assert Move(sq("e4"), sq("d5"), MoveKind.CAPTURE, pawn, Piece.from_fen("p")).is_capture
    assert Move(sq("e5"), sq("d6"), MoveKind.EN_PASSANT, pawn, Piece.from_fen("p")).is_capture


# --- MOVEMENT RULES ---
def test_knight_in_the_corner() -> None:
    board = Board.from_fen("8/8/8/8/8/8/8/N7")
    assert destinations("a1", board) == {"b3", "c2"}


def test_rook_stops_at_first_piece() -> None:
    """Own pieces block, enemy pieces can be taken (but not jumped over)"""
    board = Board.from_fen("8/8/8/3p4/8/8/8/R2P4")
    assert destinations("a1", board) == {
        "b1", "c1",
        "a2", "a3", "a4", "a5", "a6", "a7", "a8",
    }
    board = Board.from_fen("8/8/8/8/8/8/8/R2p4")
    assert "d1" in destinations("a1", board)
    assert "e1" not in destinations("a1", board)


def test_bishop_moves_diagonally() -> None:
    board = Board.from_fen("8/8/8/8/3B4/8/8/8")
    moves = destinations("d4", board)
    assert len(moves) == 13
    assert {"a1", "h8", "a7", "g1"} <= moves


def test_queen_combines_rook_and_bishop() -> None:
    board = Board.from_fen("8/8/8/8/3Q4/8/8/8")
    assert len(destinations("d4", board)) == 27


def test_king_single_steps() -> None:
    board = Board.from_fen("8/8/8/8/8/8/8/4K3")
    assert destinations("e1", board) == {"d1", "f1", "d2", "e2", "f2"}


def test_captures_are_marked() -> None:
    board = Board.from_fen("8/8/8/8/8/8/2p5/N7")
    moves = {move.to_square.to_algebraic(): move for move in candidate_moves(sq("a1"), board)}
    assert moves["b3"].kind == MoveKind.NORMAL
    assert moves["b3"].captured == EMPTY_PIECE
    assert moves["c2"].kind == MoveKind.CAPTURE
    assert moves["c2"].captured == Piece.from_fen("p")


def test_pawn_pushes() -> None:
    board = Board.starting_position()
    assert destinations("e2", board) == {"e3", "e4"}
    assert destinations("e7", board) == {"e6", "e5"}


def test_pawn_double_push_needs_two_empty_squares() -> None:
    board = Board.from_fen("8/8/8/8/8/4n3/4P3/8")
    assert destinations("e2", board) == set()
    board = Board.from_fen("8/8/8/8/4n3/8/4P3/8")
    assert destinations("e2", board) == {"e3"}


def test_pawn_takes_diagonally() -> None:
    board = Board.from_fen("8/8/8/3p1N2/4P3/8/8/8")
    moves = {move.to_square.to_algebraic(): move for move in candidate_moves(sq("e4"), board)}
    assert set(moves) == {"e5", "d5"}
    assert moves["d5"].kind == MoveKind.CAPTURE
    assert moves["d5"].captured == Piece.from_fen("p")


def test_pawn_promotions_get_expanded() -> None:
    board = Board.from_fen("3r4/4P3/8/8/8/8/8/8")
    moves = candidate_moves(sq("e7"), board)
    assert len(moves) == 8
    assert all(move.kind == MoveKind.PROMOTION for move in moves)
    promotions = {(move.to_square.to_algebraic(), move.promotion) for move in moves}
    for piece_type in (PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT):
        assert ("e8", piece_type) in promotions
        assert ("d8", piece_type) in promotions


def test_en_passant_moves() -> None:
    """White pawns on c5 and e5 can both take the d-pawn that just passed d6"""
    board = Board.from_fen("8/8/8/2PpP3/8/8/8/8")
    moves = en_passant_moves(sq("d6"), Color.WHITE, board)
    assert {move.from_square.to_algebraic() for move in moves} == {"c5", "e5"}
    assert all(move.kind == MoveKind.EN_PASSANT for move in moves)
    assert all(move.captured == Piece.from_fen("p") for move in moves)


def test_no_en_passant_square() -> None:
    board = Board.from_fen("8/8/8/2PpP3/8/8/8/8")
    assert en_passant_moves(None, Color.WHITE, board) == []


# --- ATTACKS ---
@pytest.mark.parametrize(
    "placement, square, attacked_by_white",
    [
        ("8/8/8/8/8/8/4P3/8", "d3", True),  # pawn attacks diagonally
        ("8/8/8/8/8/8/4P3/8", "e3", False),  # ... but not straight ahead
        ("8/8/8/8/8/8/8/N7", "b3", True),  # knight
        ("8/8/8/8/8/8/8/R7", "a8", True),  # rook along the file
        ("8/8/8/8/8/p7/8/R7", "a8", False),  # ... blocked
        ("8/8/8/8/8/8/8/B7", "h8", True),  # bishop along the diagonal
        ("8/8/8/8/8/8/8/Q7", "h1", True),  # queen along the rank
        ("8/8/8/8/8/8/8/4K3", "f2", True),  # king
        ("8/8/8/8/8/8/8/4K3", "e3", False),
    ],
)
def test_is_square_attacked(placement: str, square: str, attacked_by_white: bool) -> None:
    board = Board.from_fen(placement)
    assert is_square_attacked(sq(square), Color.WHITE, board) == attacked_by_white
    assert not is_square_attacked(sq(square), Color.BLACK, board)


def test_black_pawn_attacks_downwards() -> None:
    board = Board.from_fen("8/8/8/8/4p3/8/8/8")
    assert is_square_attacked(sq("d3"), Color.BLACK, board)
    assert is_square_attacked(sq("f3"), Color.BLACK, board)
    assert not is_square_attacked(sq("d5"), Color.BLACK, board)
