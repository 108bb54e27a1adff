"""Board coordinates as the presentation layer sends them.

Files and ranks are zero-based: file 0–7 is a–h, rank 0–7 is 1–8.
"""

from __future__ import annotations

from dataclasses import dataclass


def is_on_board(file: int, rank: int) -> bool:
    """Check whether a file/rank pair lies on the board."""
    return 0 <= file < 8 and 0 <= rank < 8


def square_name(file: int, rank: int) -> str:
    """Human-readable name, e.g. (4, 3) → 'e4'."""
    if not is_on_board(file, rank):
        raise ValueError(f"Square out of board: file={file} rank={rank}")
    return chr(ord("a") + file) + str(rank + 1)


def parse_square(name: str) -> tuple[int, int]:
    """Parse square name, e.g. 'e4' → (4, 3)."""
    if len(name) != 2 or name[0] not in "abcdefgh" or name[1] not in "12345678":
        raise ValueError(f"Invalid square name: {name!r}")
    return ord(name[0]) - ord("a"), int(name[1]) - 1


@dataclass(frozen=True, slots=True)
class MoveCoordinates:
    """Start and end squares of a move, also used for the last-move arrow."""

    start_file: int
    start_rank: int
    end_file: int
    end_rank: int

    @classmethod
    def from_uci(cls, text: str) -> MoveCoordinates:
        """Build from a UCI-like string such as ``"e2e4"`` or ``"e7e8q"``."""
        if len(text) < 4:
            raise ValueError(f"Not a UCI move string: {text!r}")
        start_file, start_rank = parse_square(text[0:2])
        end_file, end_rank = parse_square(text[2:4])
        return cls(start_file, start_rank, end_file, end_rank)

    @property
    def is_on_board(self) -> bool:
        return is_on_board(self.start_file, self.start_rank) and is_on_board(
            self.end_file, self.end_rank
        )

    @property
    def start_square(self) -> str:
        return square_name(self.start_file, self.start_rank)

    @property
    def end_square(self) -> str:
        return square_name(self.end_file, self.end_rank)

    def uci(self) -> str:
        return self.start_square + self.end_square

    def __str__(self) -> str:
        return self.uci()
