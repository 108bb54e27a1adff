"""Abstract interfaces and small value types for the game layer.

The controller depends on :class:`IClock`, not on the threaded
:class:`~clockmate.game.clock.ClockEngine`, so tests can plug in a fake.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import IntEnum, auto

from clockmate.core.enums import Side

FlagCallback = Callable[[Side], None]


# ── Session FSM states ──────────────────────────────────────────────────────


class SessionPhase(IntEnum):
    """Finite-state-machine states for a session."""

    IDLE = auto()
    IN_PROGRESS = auto()
    FINISHED = auto()


class PlayerType(IntEnum):
    """Who is expected to play a side."""

    HUMAN = auto()
    NONE = auto()


# ── Time control presets ─────────────────────────────────────────────────────


class TimeControl:
    """Immutable per-side time-control definition.

    Args:
        allocated_deciseconds: Base time, in tenths of a second.
        increment_seconds: Per-move increment (Fischer).
    """

    __slots__ = ("allocated_deciseconds", "increment_seconds")

    def __init__(self, allocated_deciseconds: int, increment_seconds: int = 0) -> None:
        if allocated_deciseconds < 0 or increment_seconds < 0:
            raise ValueError("Time control values must be non-negative")
        self.allocated_deciseconds = allocated_deciseconds
        self.increment_seconds = increment_seconds

    @property
    def increment_deciseconds(self) -> int:
        return self.increment_seconds * 10

    # Common presets
    @classmethod
    def bullet_1m(cls) -> TimeControl:
        return cls(600, 0)

    @classmethod
    def bullet_2m1s(cls) -> TimeControl:
        return cls(1200, 1)

    @classmethod
    def blitz_3m2s(cls) -> TimeControl:
        return cls(1800, 2)

    @classmethod
    def blitz_5m(cls) -> TimeControl:
        return cls(3000, 0)

    @classmethod
    def rapid_10m(cls) -> TimeControl:
        return cls(6000, 0)

    @classmethod
    def rapid_15m10s(cls) -> TimeControl:
        return cls(9000, 10)

    @classmethod
    def classical_30m(cls) -> TimeControl:
        return cls(18000, 0)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeControl):
            return NotImplemented
        return (
            self.allocated_deciseconds == other.allocated_deciseconds
            and self.increment_seconds == other.increment_seconds
        )

    def __hash__(self) -> int:
        return hash((self.allocated_deciseconds, self.increment_seconds))

    def __repr__(self) -> str:
        mins = self.allocated_deciseconds / 600
        if self.increment_seconds:
            return f"TimeControl({mins:g}m+{self.increment_seconds}s)"
        return f"TimeControl({mins:g}m)"


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IClock(ABC):
    """Interface for a dual countdown clock."""

    @abstractmethod
    def configure(
        self,
        white_allocated: int,
        white_increment: int,
        black_allocated: int | None = None,
        black_increment: int | None = None,
        differential: bool = False,
    ) -> None:
        """Set allocations (deciseconds) and increments (seconds)."""

    @abstractmethod
    def start(self, active_side: Side, on_flag: FlagCallback) -> None:
        """Start counting down for *active_side*."""

    @abstractmethod
    def stop(self) -> None:
        """Stop counting; no tick runs after this returns."""

    @abstractmethod
    def on_move_committed(self) -> None:
        """Credit the mover's increment and switch sides."""

    @abstractmethod
    def remaining(self, side: Side) -> int:
        """Deciseconds remaining for *side*, possibly negative."""

    @property
    @abstractmethod
    def is_running(self) -> bool: ...
