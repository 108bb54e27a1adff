"""Shared notation-layer data models."""

from __future__ import annotations

from dataclasses import dataclass, field

from clockmate.core.position import Position


@dataclass(frozen=True, slots=True)
class FinishedGame:
    """Export-ready snapshot taken when a game stops."""

    start_position: Position
    sans: tuple[str, ...]
    result_token: str


@dataclass(slots=True)
class ExportRecord:
    """Tags, mainline and result ready to be written as PGN."""

    headers: dict[str, str]
    sans: list[str]
    result_token: str
    first_move_number: int = 1
    white_moves_first: bool = True
    comments: list[str | None] = field(default_factory=list)
