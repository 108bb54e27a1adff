"""Core domain layer: enums, coordinates, position codec and rules oracle.

Quick start::

    from clockmate.core import STARTING_FEN, MoveCoordinates, PythonChessOracle

    oracle = PythonChessOracle(STARTING_FEN)
    oracle.is_legal(MoveCoordinates.from_uci("e2e4"))
"""

from clockmate.core.enums import (
    GameEnding,
    GameTermination,
    PieceType,
    Side,
    TerminationCause,
)
from clockmate.core.notation import (
    EMPTY_POSITION_FEN,
    STARTING_FEN,
    parse_position,
    pieces_grid,
    validate_legal_start,
)
from clockmate.core.oracle import ONGOING, PythonChessOracle, RulesOracle, Verdict
from clockmate.core.position import Position
from clockmate.core.types import MoveCoordinates, parse_square, square_name

__all__ = [
    # Enums
    "GameEnding",
    "GameTermination",
    "PieceType",
    "Side",
    "TerminationCause",
    # Types
    "MoveCoordinates",
    "Position",
    "parse_square",
    "square_name",
    # Oracle
    "ONGOING",
    "PythonChessOracle",
    "RulesOracle",
    "Verdict",
    # Notation
    "EMPTY_POSITION_FEN",
    "STARTING_FEN",
    "parse_position",
    "pieces_grid",
    "validate_legal_start",
]
