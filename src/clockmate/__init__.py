"""clockmate — local two-player chess session with a dual clock."""

from clockmate.core import GameEnding, MoveCoordinates, PieceType, Side
from clockmate.errors import (
    ClockmateError,
    ExportFailure,
    IllegalMove,
    IllegalStartingPosition,
    InvalidOperationForState,
    MalformedExchangeText,
    MalformedNumericField,
    OppositeKingInCheck,
    WrongFieldsCount,
    WrongKingsCount,
)
from clockmate.game import ClockEngine, ClockSettings, GameController, GameSession

__version__ = "0.1.0"

__all__ = [
    "ClockEngine",
    "ClockSettings",
    "ClockmateError",
    "ExportFailure",
    "GameController",
    "GameEnding",
    "GameSession",
    "IllegalMove",
    "IllegalStartingPosition",
    "InvalidOperationForState",
    "MalformedExchangeText",
    "MalformedNumericField",
    "MoveCoordinates",
    "OppositeKingInCheck",
    "PieceType",
    "Side",
    "WrongFieldsCount",
    "WrongKingsCount",
]
