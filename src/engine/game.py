"""
The Game class will be the entrypoint into the domain layer for the service layer (and the move-selection engines).
It is responsible for orchestrating all the business logic required to play a turn: parsing and validating moves,
updating the position, and keeping track of the game status.
"""

from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Iterator, Optional

from src.core.exceptions import (
    EmptyHistoryError,
    GameStateError,
    IllegalMoveError,
    InvalidMoveNotationError,
    InvalidSquareError,
)
from src.core.models import GameModel
from src.core.shared_types import GameStatus
from src.engine.board import Board
from src.engine.castling import (
    CASTLING_RULES,
    KING_HOME,
    CastlingDirection,
    CastlingRights,
)
from src.engine.fen import STARTING_FEN, FENState
from src.engine.moves import (
    Move,
    MoveKind,
    candidate_moves,
    en_passant_capture_square,
    en_passant_moves,
    is_square_attacked,
)
from src.engine.notation import build_pgn, san_for_move
from src.engine.pieces import FEN_TO_PIECE, Color, Piece, PieceType
from src.engine.square import Square

logger = logging.getLogger(__name__)

CASTLING_TOKENS: dict[str, bool] = {
    "O-O": True,
    "0-0": True,
    "O-O-O": False,
    "0-0-0": False,
}
PROMOTION_LETTERS = "qrbn"

# Positional evaluation (centipawns). Slightly different from the capture table used by the engines.
EVALUATION_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 100,
    PieceType.KNIGHT: 320,
    PieceType.BISHOP: 330,
    PieceType.ROOK: 500,
    PieceType.QUEEN: 900,
    PieceType.KING: 0,
}
CENTRE_CONTROL_BONUS = 5
CENTRAL_FILES = range(2, 6)
CENTRAL_RANKS = range(2, 6)


@dataclass(frozen=True)
class Snapshot:
    """Everything `undo_move()` needs to put back."""

    state: FENState
    status: GameStatus


def apply_move_to_board(board: Board, move: Move) -> None:
    """
    Relocate the pieces on the board (and only there):
    * castling moves the king AND the rook
    * en passant removes the pawn behind the target square
    * promotion replaces the pawn on the far rank
    """
    if move.is_castling:
        squares = CASTLING_RULES[
            CastlingDirection.for_color(move.piece.color, move.is_kingside_castle)
        ]
        board.move_piece(squares.king_from, squares.king_to)
        board.move_piece(squares.rook_from, squares.rook_to)
        return

    board.move_piece(move.from_square, move.to_square)
    if move.kind == MoveKind.EN_PASSANT:
        board.remove_piece(en_passant_capture_square(move))
    elif move.kind == MoveKind.PROMOTION:
        board.set_piece(move.to_square, move.piece.promote_to(move.promotion))


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    state: FENState = field(default_factory=FENState)
    moves: list[Move] = field(default_factory=list)
    snapshots: list[Snapshot] = field(default_factory=list)
    status: GameStatus = GameStatus.IN_PROGRESS
    starting_fen: Optional[str] = None

    @classmethod
    def new_game(cls) -> Game:
        """Standard starting position, white to move"""
        return cls()

    @classmethod
    def from_fen(cls, fen: str) -> Game:
        game = cls()
        game.load_fen(fen)
        return game

    @classmethod
    def from_model(cls, model: GameModel) -> Game:
        """
        Define how to construct a Game from the information the Service layer actually has.

        The moves are replayed from the starting position, so the rebuilt game can undo them again.
        """
        game = cls.from_fen(model.starting_fen) if model.starting_fen else cls()
        for notation in model.moves:
            game.play(notation)

        if model.current_fen and game.to_fen() != model.current_fen:
            raise GameStateError(
                f"Stored position {model.current_fen!r} does not match the replayed moves ({game.to_fen()!r})"
            )
        if model.status and game.status.value != model.status:
            raise GameStateError(
                f"Stored status {model.status!r} does not match the replayed moves ({game.status})"
            )
        return game

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            starting_fen=self.starting_fen,
            current_fen=self.to_fen(),
            moves=[move.to_notation() for move in self.moves],
            status=self.status.value,
        )

    # --- READ-ONLY QUERIES ---
    @property
    def board(self) -> Board:
        """A copy: mutating it does not affect the game"""
        return self.state.board.copy()

    @property
    def active_color(self) -> Color:
        return self.state.color_to_move

    @property
    def move_count(self) -> int:
        """The full move number: starts at 1, goes up after every black move"""
        return self.state.num_turns

    @property
    def move_history(self) -> list[Move]:
        return list(self.moves)

    @property
    def castling_rights(self) -> CastlingRights:
        return self.state.castling_rights.copy()

    @property
    def en_passant_square(self) -> Optional[Square]:
        return self.state.en_passant_square

    @property
    def half_move_clock(self) -> int:
        return self.state.half_move_clock

    @property
    def full_move_number(self) -> int:
        return self.state.num_turns

    @property
    def started_from_fen(self) -> bool:
        return self.starting_fen is not None

    def copy(self) -> Game:
        return deepcopy(self)

    def to_fen(self) -> str:
        return self.state.to_fen()

    def load_fen(self, fen: str) -> None:
        """
        Replace the position by the one described in the FEN string.
        The string gets fully validated before anything changes: an invalid FEN leaves the game as it was.
        """
        state = FENState.from_fen(fen)

        self.state = state
        self.moves = []
        self.snapshots = []
        self.starting_fen = state.to_fen()
        self.status = self._compute_status()
        logger.debug("Loaded FEN %s (status: %s)", self.starting_fen, self.status)

    # --- PARSING ---
    def parse_move(self, notation: str) -> Move:
        """
        Read a move in coordinate notation, in the context of the current position:
        * "e2e4" / "g1f3": from square + to square
        * "e7e8Q": pawn promotion (suffix Q, R, B or N, case-insensitive)
        * "O-O" / "O-O-O" (or with zeros): castling for the side to move
        * "e1g1" and friends: a king moving two files from its home square is read as castling

        Only the format (and the piece on the from square) is checked here. Use is_legal_move() for the rules.
        """
        notation = notation.strip()
        if notation in CASTLING_TOKENS:
            return self._castling_move(self.active_color, CASTLING_TOKENS[notation])

        if len(notation) not in (4, 5):
            raise InvalidMoveNotationError(f"Invalid move notation: {notation!r}")

        try:
            from_square = Square.from_algebraic(notation[:2])
            to_square = Square.from_algebraic(notation[2:4])
        except InvalidSquareError as e:
            raise InvalidMoveNotationError(
                f"Invalid move notation: {notation!r} ({e})"
            ) from e

        board = self.state.board
        piece = board.get_piece(from_square)
        if piece.is_empty:
            raise InvalidMoveNotationError(f"No piece on {from_square}")
        if piece.color != self.active_color:
            raise InvalidMoveNotationError(
                f"Piece on {from_square} does not belong to {self.active_color}"
            )

        if len(notation) == 5:
            return self._promotion_move(piece, from_square, to_square, notation[4])

        if self._is_uci_castling(piece, from_square, to_square):
            return self._castling_move(piece.color, to_square.file > from_square.file)

        if (
            piece.type == PieceType.PAWN
            and to_square == self.state.en_passant_square
            and to_square.file != from_square.file
        ):
            return Move(
                from_square,
                to_square,
                MoveKind.EN_PASSANT,
                piece,
                captured=board.get_piece(Square(to_square.file, from_square.rank)),
            )

        target = board.get_piece(to_square)
        kind = MoveKind.NORMAL if target.is_empty else MoveKind.CAPTURE
        return Move(from_square, to_square, kind, piece, captured=target)

    def _promotion_move(
        self, piece: Piece, from_square: Square, to_square: Square, letter: str
    ) -> Move:
        if piece.type != PieceType.PAWN:
            raise InvalidMoveNotationError(
                f"Promotion suffix {letter!r} is only allowed on pawn moves"
            )
        if letter.lower() not in PROMOTION_LETTERS:
            raise InvalidMoveNotationError(
                f"Invalid promotion piece {letter!r}: pick one of Q, R, B, N"
            )
        return Move(
            from_square,
            to_square,
            MoveKind.PROMOTION,
            piece,
            captured=self.state.board.get_piece(to_square),
            promotion=FEN_TO_PIECE[letter.lower()],
        )

    def _is_uci_castling(
        self, piece: Piece, from_square: Square, to_square: Square
    ) -> bool:
        return (
            piece.type == PieceType.KING
            and from_square == KING_HOME[piece.color]
            and to_square.rank == from_square.rank
            and abs(to_square.file - from_square.file) == 2
        )

    def _castling_move(self, color: Color, king_side: bool) -> Move:
        squares = CASTLING_RULES[CastlingDirection.for_color(color, king_side)]
        king = Piece(PieceType.KING, color)
        if self.state.board.get_piece(squares.king_from) != king:
            raise InvalidMoveNotationError(
                f"Cannot castle: the {color} king is not on {squares.king_from}"
            )
        return Move(squares.king_from, squares.king_to, MoveKind.CASTLING, king)

    # --- LEGALITY ---
    def is_legal_move(self, move: Move) -> bool:
        return self._find_legal_move(move) is not None

    def get_all_legal_moves(self) -> list[Move]:
        return list(self._iter_legal_moves())

    def has_legal_moves(self) -> bool:
        return next(self._iter_legal_moves(), None) is not None

    def is_in_check(self, color: Optional[Color] = None) -> bool:
        """Is the king of the given color (side to move by default) attacked? No king: never in check."""
        color = color or self.active_color
        king_square = self.state.board.find_king(color)
        if king_square is None:
            return False
        return is_square_attacked(king_square, color.opponent, self.state.board)

    def can_castle_kingside(self, color: Color) -> bool:
        return self._can_castle(CastlingDirection.for_color(color, king_side=True))

    def can_castle_queenside(self, color: Color) -> bool:
        return self._can_castle(CastlingDirection.for_color(color, king_side=False))

    def _can_castle(self, direction: CastlingDirection) -> bool:
        """
        Castling is allowed when
        1. the right has not been revoked (and king + rook are in place)
        2. all squares between king and rook are empty
        3. the king is not in check
        4. the king does not pass through, or land on, an attacked square
        """
        if not self.state.castling_rights.has(direction):
            return False

        color = direction.color
        squares = CASTLING_RULES[direction]
        board = self.state.board
        if board.get_piece(squares.king_from) != Piece(PieceType.KING, color):
            return False
        if board.get_piece(squares.rook_from) != Piece(PieceType.ROOK, color):
            return False

        if any(not board.get_piece(square).is_empty for square in squares.squares_between()):
            return False

        if is_square_attacked(squares.king_from, color.opponent, board):
            return False

        # walk the king one square at a time
        simulation = board.copy()
        king_square = squares.king_from
        for square in squares.king_path():
            simulation.move_piece(king_square, square)
            king_square = square
            if is_square_attacked(square, color.opponent, simulation):
                return False
        return True

    def _castling_moves(self, color: Color) -> list[Move]:
        return [
            self._castling_move(color, direction.is_king_side)
            for direction in self.state.castling_rights.directions_for(color)
            if self._can_castle(direction)
        ]

    def _pseudo_legal_moves_from(self, square: Square) -> list[Move]:
        """Basic movement rules + the special moves (en passant, castling) starting on the square."""
        piece = self.state.board.get_piece(square)
        moves = candidate_moves(square, self.state.board)
        if piece.type == PieceType.PAWN:
            moves.extend(
                move
                for move in en_passant_moves(
                    self.state.en_passant_square, piece.color, self.state.board
                )
                if move.from_square == square
            )
        elif piece.type == PieceType.KING and square == KING_HOME[piece.color]:
            moves.extend(self._castling_moves(piece.color))
        return moves

    def _iter_legal_moves(self) -> Iterator[Move]:
        for square in self.state.board.locate_color(self.active_color):
            for move in self._pseudo_legal_moves_from(square):
                if self._is_legal_candidate(move):
                    yield move

    def _is_legal_candidate(self, move: Move) -> bool:
        """A (pseudo-legal) candidate is legal if it does not capture a king and leaves your own king safe."""
        if move.captured.type == PieceType.KING:
            return False
        return not self._leaves_king_in_check(move)

    def _find_legal_move(self, move: Move) -> Optional[Move]:
        """
        Look up the move among the candidates of the piece on its from square.

        Matching happens on (from, to, promotion): the returned candidate is the move as the rules see it,
        so its kind / captured piece are always consistent with the board.
        """
        piece = self.state.board.get_piece(move.from_square)
        if piece.is_empty or piece.color != self.active_color:
            return None
        if self.state.board.get_piece(move.to_square).type == PieceType.KING:
            return None

        for candidate in self._pseudo_legal_moves_from(move.from_square):
            if (
                candidate.to_square == move.to_square
                and candidate.promotion == move.promotion
                and self._is_legal_candidate(candidate)
            ):
                return candidate
        return None

    def _leaves_king_in_check(self, move: Move) -> bool:
        """Play the move on a private copy of the board and check whether the own king ends up attacked."""
        color = move.piece.color
        board = self.state.board.copy()
        apply_move_to_board(board, move)
        king_square = board.find_king(color)
        if king_square is None:
            return False
        return is_square_attacked(king_square, color.opponent, board)

    # --- MAKING / TAKING BACK MOVES ---
    def make_move(self, move: Move) -> None:
        """
        Attempt to make a move
        -----

        1. validate (an illegal move leaves the game untouched)
        2. snapshot the state for undo_move()
        3. update the board (castling: king and rook, en passant: remove the taken pawn, promotion: swap the pawn)
        4. update castling rights, en passant square, move counters and the color to move
        5. update the game status
        """
        legal_move = self._find_legal_move(move)
        if legal_move is None:
            raise IllegalMoveError(f"Illegal move: {move}")

        self.snapshots.append(Snapshot(self.state.copy(), self.status))

        color = self.active_color
        apply_move_to_board(self.state.board, legal_move)
        self.moves.append(legal_move)

        self._update_castling_rights(legal_move)
        self.state.en_passant_square = self._determine_en_passant_square(legal_move)

        if legal_move.piece.type == PieceType.PAWN or legal_move.is_capture:
            self.state.half_move_clock = 0
        else:
            self.state.half_move_clock += 1

        if color == Color.BLACK:
            self.state.num_turns += 1
        self.state.color_to_move = color.opponent

        self.status = self._compute_status()
        logger.debug("Played %s (status: %s)", legal_move, self.status)

    def play(self, notation: str) -> Move:
        """Convenience: parse and make the move in one go. Returns the move as it was played."""
        self.make_move(self.parse_move(notation))
        return self.moves[-1]

    def undo_move(self) -> Move:
        """Restore the position as it was before the last move"""
        if not self.snapshots:
            raise EmptyHistoryError("No moves to undo")

        snapshot = self.snapshots.pop()
        self.state = snapshot.state
        self.status = snapshot.status
        move = self.moves.pop()
        logger.debug("Took back %s", move)
        return move

    def _update_castling_rights(self, move: Move) -> None:
        """
        Rights only ever get revoked:
        * a king move revokes both rights of that color
        * a rook leaving its home square revokes that side
        * capturing a rook on its home square revokes that side for the opponent
        """
        rights = self.state.castling_rights
        if move.piece.type == PieceType.KING:
            rights.revoke_all(move.piece.color)
        elif move.piece.type == PieceType.ROOK:
            rights.revoke_for_rook_square(move.from_square)

        if move.captured.type == PieceType.ROOK:
            rights.revoke_for_rook_square(move.to_square)

    @staticmethod
    def _determine_en_passant_square(move: Move) -> Optional[Square]:
        """Only a double pawn step creates an en passant square: the square it passed."""
        if (
            move.piece.type != PieceType.PAWN
            or abs(move.to_square.rank - move.from_square.rank) != 2
        ):
            return None
        return Square(
            move.from_square.file, (move.from_square.rank + move.to_square.rank) // 2
        )

    def _compute_status(self) -> GameStatus:
        """
        No legal moves left: checkmate if the king is attacked (the OTHER side wins), otherwise stalemate (draw).
        """
        in_check = self.is_in_check(self.active_color)
        if not self.has_legal_moves():
            if not in_check:
                return GameStatus.DRAW
            return (
                GameStatus.BLACK_WINS
                if self.active_color == Color.WHITE
                else GameStatus.WHITE_WINS
            )
        return GameStatus.CHECK if in_check else GameStatus.IN_PROGRESS

    # --- NOTATION / EVALUATION ---
    def generate_san(self) -> list[str]:
        """SAN of the move history, replayed from the position the game started in."""
        replay = Game.from_fen(self.starting_fen) if self.starting_fen else Game()
        sans: list[str] = []
        for move in self.moves:
            sans.append(san_for_move(replay, move))
            replay.make_move(move)
        return sans

    def to_pgn(self, **headers: str) -> str:
        return build_pgn(
            headers,
            self.generate_san(),
            self.status,
            starting_fen=self.starting_fen or STARTING_FEN,
        )

    def evaluate(self) -> int:
        """
        Static evaluation in centipawns, positive if white stands better:
        material + a small bonus for every piece on the 16 central squares (c3-f6)
        """
        score = 0
        board = self.state.board
        for color, sign in ((Color.WHITE, 1), (Color.BLACK, -1)):
            for square in board.locate_color(color):
                score += sign * EVALUATION_VALUES[board.get_piece(square).type]
                if square.file in CENTRAL_FILES and square.rank in CENTRAL_RANKS:
                    score += sign * CENTRE_CONTROL_BONUS
        return score
