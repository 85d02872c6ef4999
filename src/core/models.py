"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Optional

# Type alias to make GameModel easier to read
MoveNotation = str


@dataclass
class GameModel:
    """
    Transport-safe representation of a chess game used between API, Service, DB, and Game layers.

    The moves (coordinate notation, replayable from the starting position) are the source of truth.
    The current FEN and status are stored alongside for queries that do not need the full game.
    """

    starting_fen: Optional[str] = None
    current_fen: str = ""
    moves: list[MoveNotation] = field(default_factory=list)
    status: str = "in_progress"
