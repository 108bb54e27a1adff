"""Immutable position value exchanged between the session and the oracle."""

from __future__ import annotations

from dataclasses import dataclass

from clockmate.core.enums import Side


@dataclass(frozen=True, slots=True)
class Position:
    """A parsed six-field exchange position.

    Build instances with :func:`clockmate.core.notation.parse_position`;
    the fields are kept in their textual form so that serialising gives
    back exactly what was parsed.
    """

    placement: str
    side_to_move: Side
    castling: str
    en_passant: str
    halfmove_clock: int
    fullmove_number: int

    @property
    def white_to_move(self) -> bool:
        return self.side_to_move == Side.WHITE

    @property
    def fen(self) -> str:
        side = "w" if self.side_to_move == Side.WHITE else "b"
        return (
            f"{self.placement} {side} {self.castling} {self.en_passant} "
            f"{self.halfmove_clock} {self.fullmove_number}"
        )

    def __str__(self) -> str:
        return self.fen
