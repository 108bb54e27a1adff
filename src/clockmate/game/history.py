"""History timeline: move-number markers, move entries and the result marker."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import IntEnum
from typing import TypeAlias

from clockmate.core.enums import GameTermination
from clockmate.core.position import Position
from clockmate.core.types import MoveCoordinates
from clockmate.errors import InvalidOperationForState


@dataclass(frozen=True, slots=True)
class MoveNumberMarker:
    number: int
    white_to_move: bool


@dataclass(frozen=True, slots=True)
class MoveEntry:
    """A committed move and the position it produced."""

    san: str
    position: Position
    side_was_white: bool
    coordinates: MoveCoordinates


@dataclass(frozen=True, slots=True)
class TerminationMarker:
    termination: GameTermination


HistoryNode: TypeAlias = MoveNumberMarker | MoveEntry | TerminationMarker


class Direction(IntEnum):
    FORWARD = 1
    BACKWARD = -1


class HistoryTimeline:
    """Append-only sequence of history nodes for one game."""

    __slots__ = ("_nodes", "_has_move")

    def __init__(self) -> None:
        self._nodes: list[HistoryNode] = []
        self._has_move = False

    def reset(self, move_number: int, white_to_move: bool) -> None:
        """Replace the timeline with a single opening move-number marker."""
        self._nodes = [MoveNumberMarker(move_number, white_to_move)]
        self._has_move = False

    # ── Mutation ─────────────────────────────────────────────────────────

    def record_move(
        self,
        coordinates: MoveCoordinates,
        san: str,
        position: Position,
        side_was_white: bool,
        move_number: int,
    ) -> MoveEntry:
        """Append a move entry, preceded by a marker for white moves.

        The opening marker already covers the first recorded move.
        """
        if self.is_terminated:
            raise InvalidOperationForState("Timeline is closed by a result marker")
        if side_was_white and self._has_move:
            self._nodes.append(MoveNumberMarker(move_number, True))
        entry = MoveEntry(san, position, side_was_white, coordinates)
        self._nodes.append(entry)
        self._has_move = True
        return entry

    def append_termination(self, termination: GameTermination) -> bool:
        """Close the timeline. Returns False if it was already closed."""
        if self.is_terminated:
            return False
        self._nodes.append(TerminationMarker(termination))
        return True

    # ── Navigation helpers ───────────────────────────────────────────────

    def select_nearest_move_entry(
        self, from_index: int, direction: Direction
    ) -> int | None:
        """Index of the nearest move entry strictly past *from_index*.

        Markers are skipped. Returns None rather than wrapping around.
        """
        index = from_index + direction
        while 0 <= index < len(self._nodes):
            if isinstance(self._nodes[index], MoveEntry):
                return index
            index += direction
        return None

    def last_move_entry_index(self) -> int | None:
        return self.select_nearest_move_entry(len(self._nodes), Direction.BACKWARD)

    def is_move_entry(self, index: int) -> bool:
        return 0 <= index < len(self._nodes) and isinstance(
            self._nodes[index], MoveEntry
        )

    # ── Read access ──────────────────────────────────────────────────────

    @property
    def is_terminated(self) -> bool:
        return bool(self._nodes) and isinstance(self._nodes[-1], TerminationMarker)

    @property
    def termination(self) -> GameTermination | None:
        if self.is_terminated:
            last = self._nodes[-1]
            assert isinstance(last, TerminationMarker)
            return last.termination
        return None

    @property
    def nodes(self) -> tuple[HistoryNode, ...]:
        return tuple(self._nodes)

    def move_entries(self) -> list[MoveEntry]:
        return [node for node in self._nodes if isinstance(node, MoveEntry)]

    def __len__(self) -> int:
        return len(self._nodes)

    def __getitem__(self, index: int) -> HistoryNode:
        return self._nodes[index]

    def __iter__(self) -> Iterator[HistoryNode]:
        return iter(self._nodes)
