"""Notation package: exchange-position codec and PGN assembly."""

from clockmate.core.notation.fen import (
    EMPTY_CELL,
    EMPTY_POSITION_FEN,
    STARTING_FEN,
    compose_position,
    is_well_formed,
    parse_position,
    pieces_grid,
    validate_legal_start,
)
from clockmate.core.notation.models import ExportRecord, FinishedGame
from clockmate.core.notation.pgn import (
    build_export_record,
    build_pgn,
    pgn_movetext,
    pgn_result_token,
    write_pgn,
)

__all__ = [
    "EMPTY_CELL",
    "EMPTY_POSITION_FEN",
    "STARTING_FEN",
    "ExportRecord",
    "FinishedGame",
    "build_export_record",
    "build_pgn",
    "compose_position",
    "is_well_formed",
    "parse_position",
    "pgn_movetext",
    "pgn_result_token",
    "pieces_grid",
    "validate_legal_start",
    "write_pgn",
]
