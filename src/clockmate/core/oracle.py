"""Rules oracle: the only place that knows the rules of chess.

The session depends on the :class:`RulesOracle` protocol; the concrete
:class:`PythonChessOracle` delegates every rule question to python-chess.
One oracle instance follows one game: it keeps the played moves so that
repetition can be detected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import chess

from clockmate.core.enums import PieceType, Side, TerminationCause
from clockmate.core.notation.fen import parse_position
from clockmate.core.position import Position
from clockmate.core.types import MoveCoordinates
from clockmate.errors import IllegalMove, MalformedExchangeText


@dataclass(frozen=True, slots=True)
class Verdict:
    """Termination classification of the current position."""

    cause: TerminationCause | None = None
    winner: Side | None = None

    @property
    def is_terminal(self) -> bool:
        return self.cause is not None


ONGOING = Verdict()


class RulesOracle(Protocol):
    """Rule questions the session needs answered."""

    @property
    def position(self) -> Position: ...

    def is_legal(
        self, coordinates: MoveCoordinates, promotion: PieceType | None = None
    ) -> bool: ...

    def apply(
        self, coordinates: MoveCoordinates, promotion: PieceType | None = None
    ) -> Position: ...

    def notate(
        self, coordinates: MoveCoordinates, promotion: PieceType | None = None
    ) -> str: ...

    def classify(self) -> Verdict: ...

    def count_pieces(self, piece_type: PieceType, side: Side) -> int: ...

    def is_in_check(self, side: Side) -> bool: ...


def _color(side: Side) -> chess.Color:
    return chess.WHITE if side == Side.WHITE else chess.BLACK


class PythonChessOracle:
    """:class:`RulesOracle` backed by :class:`chess.Board`."""

    __slots__ = ("_board",)

    def __init__(self, position: Position | str) -> None:
        fen = position.fen if isinstance(position, Position) else position
        try:
            self._board = chess.Board(fen)
        except ValueError as exc:
            raise MalformedExchangeText(str(exc)) from exc

    @property
    def position(self) -> Position:
        return parse_position(self._board.fen())

    # ── Moves ────────────────────────────────────────────────────────────

    def _move(
        self, coordinates: MoveCoordinates, promotion: PieceType | None
    ) -> chess.Move:
        return chess.Move(
            chess.square(coordinates.start_file, coordinates.start_rank),
            chess.square(coordinates.end_file, coordinates.end_rank),
            promotion=int(promotion) if promotion is not None else None,
        )

    def is_legal(
        self, coordinates: MoveCoordinates, promotion: PieceType | None = None
    ) -> bool:
        if not coordinates.is_on_board:
            return False
        return self._board.is_legal(self._move(coordinates, promotion))

    def notate(
        self, coordinates: MoveCoordinates, promotion: PieceType | None = None
    ) -> str:
        if not self.is_legal(coordinates, promotion):
            raise IllegalMove(f"Cannot notate illegal move {coordinates}")
        return self._board.san(self._move(coordinates, promotion))

    def apply(
        self, coordinates: MoveCoordinates, promotion: PieceType | None = None
    ) -> Position:
        if not self.is_legal(coordinates, promotion):
            raise IllegalMove(f"Illegal move {coordinates}")
        self._board.push(self._move(coordinates, promotion))
        return self.position

    # ── Queries ──────────────────────────────────────────────────────────

    def classify(self) -> Verdict:
        board = self._board
        if board.is_checkmate():
            winner = Side.BLACK if board.turn == chess.WHITE else Side.WHITE
            return Verdict(TerminationCause.CHECKMATE, winner)
        if board.is_stalemate():
            return Verdict(TerminationCause.STALEMATE)
        if board.is_insufficient_material():
            return Verdict(TerminationCause.INSUFFICIENT_MATERIAL)
        if board.is_repetition(3):
            return Verdict(TerminationCause.THREEFOLD_REPETITION)
        if board.is_fifty_moves():
            return Verdict(TerminationCause.FIFTY_MOVE_RULE)
        return ONGOING

    def count_pieces(self, piece_type: PieceType, side: Side) -> int:
        return len(self._board.pieces(int(piece_type), _color(side)))

    def is_in_check(self, side: Side) -> bool:
        color = _color(side)
        king = self._board.king(color)
        if king is None:
            return False
        return self._board.is_attacked_by(not color, king)
