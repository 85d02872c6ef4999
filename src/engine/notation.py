"""SAN and PGN serialization helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from src.core.shared_types import GameStatus
from src.engine.fen import STARTING_FEN, FENState
from src.engine.moves import Move, MoveKind
from src.engine.pieces import PIECE_TO_FEN, Color, PieceType
from src.engine.square import FILE_NAMES

if TYPE_CHECKING:
    from src.engine.game import Game

SEVEN_TAG_ROSTER: dict[str, str] = {
    "Event": "?",
    "Site": "?",
    "Date": "????.??.??",
    "Round": "?",
    "White": "?",
    "Black": "?",
    "Result": "*",
}


def _san_letter(piece_type: PieceType) -> str:
    return PIECE_TO_FEN[piece_type].upper()


def disambiguation(game: Game, move: Move) -> str:
    """
    Other pieces of the same type that can legally reach the same square?
    -> add the file of the moving piece, unless that is shared: then the rank. If both are shared: the full square.
    """
    rivals = {
        candidate.from_square
        for candidate in game.get_all_legal_moves()
        if candidate.piece == move.piece
        and candidate.to_square == move.to_square
        and candidate.from_square != move.from_square
    }
    if not rivals:
        return ""

    origin = move.from_square
    file_is_unique = all(square.file != origin.file for square in rivals)
    rank_is_unique = all(square.rank != origin.rank for square in rivals)
    if file_is_unique:
        return FILE_NAMES[origin.file]
    if rank_is_unique:
        return str(origin.rank + 1)
    return origin.to_algebraic()


def san_for_move(game: Game, move: Move) -> str:
    """
    Standard Algebraic Notation of a move, as played in the game's CURRENT position (so: before making the move)

    * castling: O-O / O-O-O
    * pawns: e4, exd5 (also en passant), e8=Q
    * pieces: Nf3, Nbd2, R1a3, Qh4xe1 ...
    * suffix: + for check, # for checkmate
    """
    if move.kind == MoveKind.CASTLING:
        san = "O-O" if move.is_kingside_castle else "O-O-O"
    elif move.piece.type == PieceType.PAWN:
        san = ""
        if move.is_capture:
            san += f"{FILE_NAMES[move.from_square.file]}x"
        san += move.to_square.to_algebraic()
        if move.kind == MoveKind.PROMOTION:
            san += f"={_san_letter(move.promotion)}"
    else:
        san = _san_letter(move.piece.type) + disambiguation(game, move)
        if move.is_capture:
            san += "x"
        san += move.to_square.to_algebraic()

    after = game.copy()
    after.make_move(move)
    if after.status in (GameStatus.WHITE_WINS, GameStatus.BLACK_WINS):
        san += "#"
    elif after.is_in_check():
        san += "+"
    return san


def pgn_result_token(status: GameStatus) -> str:
    """Convert a game status to a PGN result token."""
    if status == GameStatus.WHITE_WINS:
        return "1-0"
    if status == GameStatus.BLACK_WINS:
        return "0-1"
    if status == GameStatus.DRAW:
        return "1/2-1/2"
    return "*"


def pgn_movetext(
    sans: list[str],
    result_token: str,
    first_move_number: int = 1,
    black_moves_first: bool = False,
) -> str:
    """Build PGN movetext from SAN moves and a result token."""
    parts: list[str] = []
    offset = 1 if black_moves_first else 0
    for idx, san in enumerate(sans):
        ply = idx + offset
        move_number = first_move_number + ply // 2
        if ply % 2 == 0:
            parts.append(f"{move_number}.")
        elif idx == 0:
            parts.append(f"{move_number}...")
        parts.append(san)
    parts.append(result_token)
    return " ".join(parts)


def build_pgn(
    headers: dict[str, str],
    sans: list[str],
    status: GameStatus,
    starting_fen: Optional[str] = None,
) -> str:
    """
    Build a single-game PGN document: the seven tag roster first (unknown values as "?"),
    SetUp/FEN tags if the game did not start from the standard position, then the movetext.
    """
    result_token = pgn_result_token(status)
    tags = dict(SEVEN_TAG_ROSTER)
    tags.update(headers)
    tags["Result"] = result_token

    start = FENState.from_fen(starting_fen or STARTING_FEN)
    if starting_fen and start.to_fen() != STARTING_FEN:
        tags["SetUp"] = "1"
        tags["FEN"] = start.to_fen()

    lines: list[str] = []
    for key, value in tags.items():
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        lines.append(f'[{key} "{escaped}"]')
    lines.append("")
    lines.append(
        pgn_movetext(
            sans,
            result_token,
            first_move_number=start.num_turns,
            black_moves_first=start.color_to_move == Color.BLACK,
        )
    )
    lines.append("")
    return "\n".join(lines)
