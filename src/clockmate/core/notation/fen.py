"""Position codec: parse, validate and serialise the six-field exchange text."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from clockmate.core.enums import PieceType, Side
from clockmate.core.position import Position
from clockmate.errors import (
    MalformedExchangeText,
    MalformedNumericField,
    OppositeKingInCheck,
    WrongFieldsCount,
    WrongKingsCount,
)

if TYPE_CHECKING:
    from clockmate.core.oracle import RulesOracle

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
EMPTY_POSITION_FEN = "4k3/8/8/8/8/8/8/4K3 w - - 0 1"
EMPTY_CELL = " "

_PIECE_LETTERS = frozenset("pnbrqkPNBRQK")
_CASTLING_ORDER = "KQkq"


def _parse_placement(placement: str) -> None:
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise MalformedExchangeText(f"Placement must contain 8 ranks: {placement!r}")
    for rank_text in ranks:
        width = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise MalformedExchangeText(f"Invalid placement digit {ch!r}")
                width += step
            elif ch in _PIECE_LETTERS:
                width += 1
            else:
                raise MalformedExchangeText(f"Invalid placement character {ch!r}")
        if width != 8:
            raise MalformedExchangeText(f"Invalid rank width: {rank_text!r}")


def _parse_counter(field_name: str, value: str) -> int:
    # isdigit alone admits superscripts and other digits int() refuses.
    if not (value.isascii() and value.isdigit()):
        raise MalformedNumericField(field_name, value)
    return int(value)


def parse_position(text: str) -> Position:
    """Parse exchange text into a :class:`Position`.

    Raises :class:`WrongFieldsCount` or :class:`MalformedNumericField` for
    the structural failures, :class:`MalformedExchangeText` for anything
    else that cannot be read.
    """
    parts = text.split()
    if len(parts) != 6:
        raise WrongFieldsCount(len(parts))

    placement, side_part, castling, en_passant, halfmove, fullmove = parts
    halfmove_clock = _parse_counter("half-move clock", halfmove)
    fullmove_number = _parse_counter("full-move number", fullmove)

    _parse_placement(placement)

    if side_part == "w":
        side = Side.WHITE
    elif side_part == "b":
        side = Side.BLACK
    else:
        raise MalformedExchangeText(f"Invalid side-to-move field: {side_part!r}")

    if castling != "-":
        if len(set(castling)) != len(castling) or any(
            ch not in _CASTLING_ORDER for ch in castling
        ):
            raise MalformedExchangeText(f"Invalid castling field: {castling!r}")

    if en_passant != "-":
        expected_rank = "6" if side == Side.WHITE else "3"
        if (
            len(en_passant) != 2
            or en_passant[0] not in "abcdefgh"
            or en_passant[1] != expected_rank
        ):
            raise MalformedExchangeText(f"Invalid en-passant field: {en_passant!r}")

    return Position(
        placement=placement,
        side_to_move=side,
        castling=castling,
        en_passant=en_passant,
        halfmove_clock=halfmove_clock,
        fullmove_number=fullmove_number,
    )


def is_well_formed(text: str) -> bool:
    """Quick structural check used by position editors before validation."""
    try:
        parse_position(text)
    except MalformedExchangeText:
        return False
    return True


def validate_legal_start(
    text: str | Position,
    oracle_factory: Callable[[Position], RulesOracle] | None = None,
) -> Position:
    """Check that *text* can start a game and return the parsed position.

    Requires exactly one king per side and that the side not to move is
    not in check. Check detection is delegated to the rules oracle.
    """
    position = text if isinstance(text, Position) else parse_position(text)
    if oracle_factory is None:
        from clockmate.core.oracle import PythonChessOracle

        oracle_factory = PythonChessOracle

    oracle = oracle_factory(position)
    white_kings = oracle.count_pieces(PieceType.KING, Side.WHITE)
    black_kings = oracle.count_pieces(PieceType.KING, Side.BLACK)
    if white_kings != 1 or black_kings != 1:
        raise WrongKingsCount(white_kings, black_kings)

    if oracle.is_in_check(position.side_to_move.opposite):
        raise OppositeKingInCheck()

    return position


def pieces_grid(position: Position | str) -> list[list[str]]:
    """Expand the placement into 8 rows of 8 cells, rank 8 first.

    Cells hold a piece letter or :data:`EMPTY_CELL`.
    """
    if isinstance(position, str):
        position = parse_position(position)
    grid: list[list[str]] = []
    for rank_text in position.placement.split("/"):
        row: list[str] = []
        for ch in rank_text:
            if ch.isdigit():
                row.extend(EMPTY_CELL * int(ch))
            else:
                row.append(ch)
        grid.append(row)
    return grid


def _placement_from_grid(grid: Sequence[Sequence[str]]) -> str:
    rows: list[str] = []
    for line in grid:
        row = ""
        empty = 0
        for cell in line:
            if cell == EMPTY_CELL:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += cell
        if empty:
            row += str(empty)
        rows.append(row)
    return "/".join(rows)


def compose_position(
    grid: Sequence[Sequence[str]],
    *,
    white_to_move: bool = True,
    white_kingside: bool = False,
    white_queenside: bool = False,
    black_kingside: bool = False,
    black_queenside: bool = False,
    en_passant_file: int | None = None,
    halfmove_clock: int = 0,
    fullmove_number: int = 1,
) -> str:
    """Build exchange text from a position editor's state."""
    castling = ""
    if white_kingside:
        castling += "K"
    if white_queenside:
        castling += "Q"
    if black_kingside:
        castling += "k"
    if black_queenside:
        castling += "q"
    if not castling:
        castling = "-"

    if en_passant_file is None:
        en_passant = "-"
    else:
        rank = 6 if white_to_move else 3
        en_passant = f"{chr(ord('a') + en_passant_file)}{rank}"

    side = "w" if white_to_move else "b"
    placement = _placement_from_grid(grid)
    return f"{placement} {side} {castling} {en_passant} {halfmove_clock} {fullmove_number}"
