"""Error taxonomy shared by the codec, session, clock and PGN export."""

from __future__ import annotations


class ClockmateError(Exception):
    """Base class for every error raised by this package."""


# ── Exchange text ───────────────────────────────────────────────────────────


class MalformedExchangeText(ClockmateError, ValueError):
    """The position text cannot be read at all."""


class WrongFieldsCount(MalformedExchangeText):
    """The position text does not have exactly six fields."""

    def __init__(self, count: int) -> None:
        super().__init__(f"Expected 6 position fields, got {count}")
        self.count = count


class MalformedNumericField(MalformedExchangeText):
    """Half-move clock or full-move number is not a non-negative integer."""

    def __init__(self, field_name: str, value: str) -> None:
        super().__init__(f"Invalid {field_name}: {value!r}")
        self.field_name = field_name
        self.value = value


# ── Starting position legality ──────────────────────────────────────────────


class IllegalStartingPosition(ClockmateError):
    """The position is readable but cannot start a game."""


class WrongKingsCount(IllegalStartingPosition):
    """Each side needs exactly one king."""

    def __init__(self, white_kings: int, black_kings: int) -> None:
        super().__init__(
            f"Expected one king per side, got white={white_kings} black={black_kings}"
        )
        self.white_kings = white_kings
        self.black_kings = black_kings


class OppositeKingInCheck(IllegalStartingPosition):
    """The side not to move is already in check."""

    def __init__(self) -> None:
        super().__init__("The king of the side not to move is in check")


# ── Runtime ─────────────────────────────────────────────────────────────────


class IllegalMove(ClockmateError):
    """The rules oracle refused to apply a move."""


class InvalidOperationForState(ClockmateError):
    """Operation requested in a state that does not allow it."""


class ExportFailure(ClockmateError):
    """Writing an exported game failed. The original error is ``__cause__``."""
