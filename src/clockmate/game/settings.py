"""User-editable clock configuration."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from clockmate.core.enums import Side
from clockmate.game.clock import with_hours, with_minutes, with_seconds
from clockmate.game.interfaces import IClock, TimeControl


@dataclass
class ClockSettings:
    """Clock options chosen before a game starts."""

    enabled: bool = False
    white: TimeControl = field(default_factory=TimeControl.bullet_1m)
    black: TimeControl = field(default_factory=lambda: TimeControl(0, 0))
    differential: bool = False

    def time_control(self, side: Side) -> TimeControl:
        """Effective control for *side*; black mirrors white unless differential."""
        if side == Side.BLACK and self.differential:
            return self.black
        return self.white

    def configure_clock(self, clock: IClock) -> None:
        white = self.time_control(Side.WHITE)
        black = self.time_control(Side.BLACK)
        clock.configure(
            white.allocated_deciseconds,
            white.increment_seconds,
            black.allocated_deciseconds,
            black.increment_seconds,
            differential=self.differential,
        )

    # Pickers edit one component at a time; the others come from the
    # previous total so repeated edits never drift.

    def set_hours(self, hours: int, side: Side = Side.WHITE) -> None:
        self._set_allocated(side, with_hours(self._allocated(side), hours))

    def set_minutes(self, minutes: int, side: Side = Side.WHITE) -> None:
        self._set_allocated(side, with_minutes(self._allocated(side), minutes))

    def set_seconds(self, seconds: int, side: Side = Side.WHITE) -> None:
        self._set_allocated(side, with_seconds(self._allocated(side), seconds))

    def set_increment(self, seconds: int, side: Side = Side.WHITE) -> None:
        control = self.white if side == Side.WHITE else self.black
        updated = TimeControl(control.allocated_deciseconds, seconds)
        if side == Side.WHITE:
            self.white = updated
        else:
            self.black = updated

    def copy(self) -> ClockSettings:
        return replace(self)

    def _allocated(self, side: Side) -> int:
        control = self.white if side == Side.WHITE else self.black
        return control.allocated_deciseconds

    def _set_allocated(self, side: Side, total: int) -> None:
        control = self.white if side == Side.WHITE else self.black
        updated = TimeControl(total, control.increment_seconds)
        if side == Side.WHITE:
            self.white = updated
        else:
            self.black = updated
