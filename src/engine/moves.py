"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the pseudo-legal move sets for each piece type.


Legality (castling rights, not leaving your own king in check) is checked later by Game
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional, Protocol

from src.engine.pieces import EMPTY_PIECE, PIECE_TO_FEN, Color, Piece, PieceType
from src.engine.square import BOARD_DIMENSIONS, Square


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def get_piece(self, square: Square) -> Piece: ...


Vector = tuple[int, int]


class MoveKind(Enum):
    NORMAL = auto()
    CAPTURE = auto()
    CASTLING = auto()
    EN_PASSANT = auto()
    PROMOTION = auto()

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Move:
    """
    A move as it was read from the board: `kind` and `captured` are filled in when the move gets created (parsing or
    generation) and never recomputed later.
    """

    from_square: Square
    to_square: Square
    kind: MoveKind = MoveKind.NORMAL
    piece: Piece = EMPTY_PIECE
    captured: Piece = EMPTY_PIECE
    promotion: PieceType = PieceType.EMPTY

    @property
    def is_capture(self) -> bool:
        return self.kind == MoveKind.EN_PASSANT or not self.captured.is_empty

    @property
    def is_castling(self) -> bool:
        return self.kind == MoveKind.CASTLING

    @property
    def is_kingside_castle(self) -> bool:
        return self.is_castling and self.to_square.file > self.from_square.file

    def to_notation(self) -> str:
        """
        Coordinate notation, as accepted by Game.parse_move():
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8Q" : (pawn) moves from e7 to e8 and promotes to a queen
        * "O-O" / "O-O-O": castling king side / queen side
        """
        if self.is_castling:
            return "O-O" if self.is_kingside_castle else "O-O-O"
        notation = f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}"
        if self.kind == MoveKind.PROMOTION:
            notation += PIECE_TO_FEN[self.promotion].upper()
        return notation

    def __str__(self) -> str:
        return self.to_notation()


# --- DIRECTIONS ---
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = STRAIGHTS + DIAGONALS


def pawn_direction(color: Color) -> int:
    """White moves UP the board, black moves DOWN"""
    return 1 if color == Color.WHITE else -1


def pawn_start_rank(color: Color) -> int:
    return 1 if color == Color.WHITE else BOARD_DIMENSIONS[1] - 2


def promotion_rank(color: Color) -> int:
    return BOARD_DIMENSIONS[1] - 1 if color == Color.WHITE else 0


def _move_to(square: Square, target_square: Square, board: Board) -> Move:
    """Normal move onto an empty square, capture otherwise."""
    target = board.get_piece(target_square)
    return Move(
        from_square=square,
        to_square=target_square,
        kind=MoveKind.NORMAL if target.is_empty else MoveKind.CAPTURE,
        piece=board.get_piece(square),
        captured=target,
    )


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Square, board: Board, directions: list[Vector]
) -> list[Move]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.
    """

    player_color = board.get_piece(square).color

    moves: list[Move] = []
    for df, dr in directions:
        target_square = square
        while True:
            target_square = target_square.offset(df, dr)
            if not target_square.is_within_bounds():
                break

            target = board.get_piece(target_square)
            if not target.is_empty:
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if target.color == player_color.opponent:
                    moves.append(_move_to(square, target_square, board))
                break

            moves.append(_move_to(square, target_square, board))
    return moves


def single_step_move(square: Square, board: Board, deltas: list[Vector]) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just can move a single step along a direction"""
    player_color = board.get_piece(square).color
    moves: list[Move] = []
    for df, dr in deltas:
        target_square = square.offset(df, dr)
        if not target_square.is_within_bounds():
            continue

        target = board.get_piece(target_square)
        if target.is_empty or target.color != player_color:
            moves.append(_move_to(square, target_square, board))

    return moves


def candidate_pawn_moves(square: Square, board: Board) -> list[Move]:
    """
    A pawn:
    - moves by a single square forward.
    - It can move by two in their first move (so when on their starting rank), if both squares are empty
    - takes diagonally

    NOTE: En passant is added separately (`en_passant_moves()`), promotions get expanded by `expand_promotions()`
    """
    pawn = board.get_piece(square)
    direction = pawn_direction(pawn.color)
    moves: list[Move] = []

    # Pawn pushes
    one_step = square.offset(0, direction)
    if one_step.is_within_bounds() and board.get_piece(one_step).is_empty:
        moves.append(_move_to(square, one_step, board))

        two_steps = square.offset(0, 2 * direction)
        if square.rank == pawn_start_rank(pawn.color) and board.get_piece(
            two_steps
        ).is_empty:
            moves.append(_move_to(square, two_steps, board))

    # pawns take diagonally:
    for df in (-1, 1):
        target_square = square.offset(df, direction)
        if not target_square.is_within_bounds():
            continue
        target = board.get_piece(target_square)
        if not target.is_empty and target.color == pawn.color.opponent:
            moves.append(_move_to(square, target_square, board))

    return expand_promotions(moves)


def candidate_knight_moves(square: Square, board: Board) -> list[Move]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(square, board, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Square, board: Board) -> list[Move]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(square, board, DIAGONALS)


def candidate_rook_moves(square: Square, board: Board) -> list[Move]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, STRAIGHTS)


def candidate_queen_moves(square: Square, board: Board) -> list[Move]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return raycasting_move(square, board, STRAIGHTS + DIAGONALS)


def candidate_king_moves(square: Square, board: Board) -> list[Move]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (handled by Game, as it needs the castling rights).
    """
    return single_step_move(square, board, KING_DELTAS)


def _no_moves(square: Square, board: Board) -> list[Move]:
    return []


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Board], list[Move]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.EMPTY: _no_moves,
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


def candidate_moves(square: Square, board: Board) -> list[Move]:
    """Pseudo-legal moves of whatever piece stands on the square."""
    return MOVEMENT_RULES[board.get_piece(square).type](square, board)


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    square: Square,
    by_color: Color,
    by_piece_types: tuple[PieceType, ...],
    board: Board,
    directions: list[Vector],
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    Similar to raycasting moves.
    However, where `raycasting_move()` determines
    _"What is the line-of-sight of the piece standing on the specified square?"_

    This function determines:
    _"Is the specified square in the line-of-sight of a piece of the specified color and that
    is allowed to move along the given direction?"_
    """
    for df, dr in directions:
        target_square = square
        while True:
            target_square = target_square.offset(df, dr)
            if not target_square.is_within_bounds():
                break

            piece_found = board.get_piece(target_square)
            if not piece_found.is_empty:
                # only the first occupied square along the ray matters
                if piece_found.color == by_color and piece_found.type in by_piece_types:
                    return True
                break
    return False


def single_step_attack(
    square: Square,
    by_color: Color,
    by_piece_type: PieceType,
    board: Board,
    deltas: list[Vector],
) -> bool:
    """
    The single step version of `raycasting_attack()` for pawns, kings, and knights.
    """
    for df, dr in deltas:
        target_square = square.offset(df, dr)
        if not target_square.is_within_bounds():
            continue

        piece_found = board.get_piece(target_square)
        if piece_found == Piece(by_piece_type, by_color):
            return True

    return False


def is_attacked_by_pawn(square: Square, by_color: Color, board: Board) -> bool:
    """
    Pawns take diagonally
    ----

    NOTE: Pawn moves are not symmetric, so to check IF a white pawn could take on your square -->
    Must look one rank DOWN the board. Hence, vectors are exactly opposite to the ones used in `candidate_pawn_moves()`
    """
    direction = pawn_direction(by_color)
    inverse_pawn_take_deltas: list[Vector] = [(1, -direction), (-1, -direction)]
    return single_step_attack(
        square, by_color, PieceType.PAWN, board, inverse_pawn_take_deltas
    )


def is_attacked_by_knight(square: Square, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KNIGHT, board, KNIGHT_DELTAS)


def is_attacked_along_diagonal(square: Square, by_color: Color, board: Board) -> bool:
    """Bishops and queens"""
    return raycasting_attack(
        square, by_color, (PieceType.BISHOP, PieceType.QUEEN), board, DIAGONALS
    )


def is_attacked_along_straight(square: Square, by_color: Color, board: Board) -> bool:
    """Rooks and queens"""
    return raycasting_attack(
        square, by_color, (PieceType.ROOK, PieceType.QUEEN), board, STRAIGHTS
    )


def is_attacked_by_king(square: Square, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KING, board, KING_DELTAS)


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsAttackedFn = Callable[[Square, Color, Board], bool]
ATTACK_RULES: tuple[IsAttackedFn, ...] = (
    is_attacked_by_pawn,
    is_attacked_by_knight,
    is_attacked_along_diagonal,
    is_attacked_along_straight,
    is_attacked_by_king,
)


def is_square_attacked(square: Square, by_color: Color, board: Board) -> bool:
    """Could any piece of `by_color` (pseudo-legally) capture on the square?"""
    return any(rule(square, by_color, board) for rule in ATTACK_RULES)


# -- EN PASSANT MOVES ---
def en_passant_capture_square(move: Move) -> Square:
    """The captured pawn stands behind the target square (same file, the rank the capturing pawn started from)"""
    return Square(move.to_square.file, move.from_square.rank)


def en_passant_moves(
    en_passant_square: Optional[Square], color: Color, board: Board
) -> list[Move]:
    """Given a target en passant square, check the adjacent files (one rank behind the en passant square) for pawns of the correct color."""
    if en_passant_square is None:
        return []

    behind = -pawn_direction(color)
    own_pawn = Piece(PieceType.PAWN, color)
    moves: list[Move] = []
    for df in (-1, 1):
        maybe_pawn_square = en_passant_square.offset(df, behind)
        if board.get_piece(maybe_pawn_square) != own_pawn:
            continue
        captured_square = Square(en_passant_square.file, maybe_pawn_square.rank)
        moves.append(
            Move(
                from_square=maybe_pawn_square,
                to_square=en_passant_square,
                kind=MoveKind.EN_PASSANT,
                piece=own_pawn,
                captured=board.get_piece(captured_square),
            )
        )
    return moves


# -- PAWN PROMOTION MOVES --
PROMOTION_OPTIONS: list[PieceType] = [
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
]


def is_pawn_move_to_promotion_square(move: Move) -> bool:
    """check if the move is a pawn move that reaches the far rank"""
    return move.piece.type == PieceType.PAWN and (
        move.to_square.rank == promotion_rank(move.piece.color)
    )


def expand_promotions(moves: list[Move]) -> list[Move]:
    """Pawn moves onto the far rank get replaced by one move per piece type to promote into."""
    expanded: list[Move] = []
    for move in moves:
        if not is_pawn_move_to_promotion_square(move):
            expanded.append(move)
            continue
        expanded.extend(
            Move(
                from_square=move.from_square,
                to_square=move.to_square,
                kind=MoveKind.PROMOTION,
                piece=move.piece,
                captured=move.captured,
                promotion=piece_type,
            )
            for piece_type in PROMOTION_OPTIONS
        )
    return expanded
