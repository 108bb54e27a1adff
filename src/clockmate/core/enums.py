"""Core enumerations for the session domain."""

from __future__ import annotations

from enum import IntEnum, auto


class Side(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Side:
        return Side(1 - self.value)

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Chess piece types ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    @property
    def is_promotion_choice(self) -> bool:
        return self in _PROMOTION_CHOICES


_PROMOTION_CHOICES = frozenset(
    {PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT}
)


class GameTermination(IntEnum):
    """Coarse game result stored in the history timeline."""

    IN_PROGRESS = 0
    WHITE_WIN = 1
    BLACK_WIN = 2
    DRAW = 3

    @property
    def token(self) -> str:
        """PGN result token."""
        return _TERMINATION_TOKENS[self]


_TERMINATION_TOKENS: dict[GameTermination, str] = {
    GameTermination.IN_PROGRESS: "*",
    GameTermination.WHITE_WIN: "1-0",
    GameTermination.BLACK_WIN: "0-1",
    GameTermination.DRAW: "1/2-1/2",
}


class TerminationCause(IntEnum):
    """Why the rules oracle considers the game over."""

    CHECKMATE = auto()
    STALEMATE = auto()
    THREEFOLD_REPETITION = auto()
    INSUFFICIENT_MATERIAL = auto()
    FIFTY_MOVE_RULE = auto()


class GameEnding(IntEnum):
    """Every distinct way a game can stop, for user-facing messaging."""

    CHECKMATE_WHITE_WINS = auto()
    CHECKMATE_BLACK_WINS = auto()
    STALEMATE = auto()
    THREEFOLD_REPETITION = auto()
    INSUFFICIENT_MATERIAL = auto()
    FIFTY_MOVE_RULE = auto()
    WHITE_WINS_ON_TIME = auto()
    BLACK_WINS_ON_TIME = auto()
    DRAW_ON_TIME_INSUFFICIENT_MATERIAL = auto()
    ABORTED = auto()  # user asked, announce it
    ABANDONED = auto()  # silent stop

    @property
    def termination(self) -> GameTermination:
        """Coarse result recorded for this ending."""
        return _ENDING_TERMINATION[self]


_ENDING_TERMINATION: dict[GameEnding, GameTermination] = {
    GameEnding.CHECKMATE_WHITE_WINS: GameTermination.WHITE_WIN,
    GameEnding.CHECKMATE_BLACK_WINS: GameTermination.BLACK_WIN,
    GameEnding.STALEMATE: GameTermination.DRAW,
    GameEnding.THREEFOLD_REPETITION: GameTermination.DRAW,
    GameEnding.INSUFFICIENT_MATERIAL: GameTermination.DRAW,
    GameEnding.FIFTY_MOVE_RULE: GameTermination.DRAW,
    GameEnding.WHITE_WINS_ON_TIME: GameTermination.WHITE_WIN,
    GameEnding.BLACK_WINS_ON_TIME: GameTermination.BLACK_WIN,
    GameEnding.DRAW_ON_TIME_INSUFFICIENT_MATERIAL: GameTermination.DRAW,
    GameEnding.ABORTED: GameTermination.IN_PROGRESS,
    GameEnding.ABANDONED: GameTermination.IN_PROGRESS,
}
