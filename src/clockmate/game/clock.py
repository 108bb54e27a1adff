"""Dual countdown clock with Fischer increment and a background ticker.

Times are kept in deciseconds. The ticker thread and the caller's thread
share the countdown state under one lock.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass

from clockmate.core.enums import Side
from clockmate.errors import InvalidOperationForState
from clockmate.game.interfaces import FlagCallback, IClock

_LOGGER = logging.getLogger(__name__)

TICK_SECONDS = 0.1


@dataclass(frozen=True, slots=True)
class ClockSnapshot:
    """Consistent view of both countdowns, for display."""

    white_remaining: int
    black_remaining: int
    active_side: Side | None
    is_running: bool


class ClockEngine(IClock):
    """Dual chess clock counting down one decisecond per tick.

    ``on_flag`` runs on the ticker thread, outside the lock, exactly once
    per flag fall. After a flag the ticker stops decrementing but the
    engine stays in the running state until :meth:`stop` is called.
    """

    __slots__ = (
        "_lock",
        "_allocated",
        "_increment",
        "_remaining",
        "_active_side",
        "_running",
        "_flagged_side",
        "_stop_event",
        "_thread",
        "_tick_seconds",
    )

    def __init__(self, tick_seconds: float = TICK_SECONDS) -> None:
        self._lock = threading.Lock()
        self._allocated: dict[Side, int] = {Side.WHITE: 600, Side.BLACK: 600}
        self._increment: dict[Side, int] = {Side.WHITE: 0, Side.BLACK: 0}
        self._remaining: dict[Side, int] = dict(self._allocated)
        self._active_side: Side | None = None
        self._running = False
        self._flagged_side: Side | None = None
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._tick_seconds = tick_seconds

    # ── IClock implementation ────────────────────────────────────────────

    def configure(
        self,
        white_allocated: int,
        white_increment: int,
        black_allocated: int | None = None,
        black_increment: int | None = None,
        differential: bool = False,
    ) -> None:
        if not differential or black_allocated is None:
            black_allocated = white_allocated
        if not differential or black_increment is None:
            black_increment = white_increment
        if min(white_allocated, white_increment, black_allocated, black_increment) < 0:
            raise ValueError("Clock values must be non-negative")
        with self._lock:
            if self._running:
                raise InvalidOperationForState("Cannot configure a running clock")
            self._allocated = {Side.WHITE: white_allocated, Side.BLACK: black_allocated}
            self._increment = {Side.WHITE: white_increment, Side.BLACK: black_increment}
            self._reset_remaining()

    def start(self, active_side: Side, on_flag: FlagCallback) -> None:
        with self._lock:
            if self._running:
                raise InvalidOperationForState("Clock must be stopped before restarting")
        previous = self._thread
        if previous is not None:
            if previous is threading.current_thread():
                raise InvalidOperationForState("Cannot restart the clock from its ticker")
            # Stopped from its own flag callback; wait for it to unwind.
            previous.join()
            self._thread = None
        with self._lock:
            self._reset_remaining()
            self._active_side = active_side
            self._flagged_side = None
            self._running = True
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            args=(on_flag,),
            name="clockmate-clock",
            daemon=True,
        )
        self._thread.start()
        _LOGGER.debug("Clock started for %s", active_side)

    def stop(self) -> None:
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
            self._thread = None
        with self._lock:
            was_running = self._running
            self._running = False
        if was_running:
            _LOGGER.debug("Clock stopped")

    def on_move_committed(self) -> None:
        with self._lock:
            mover = self._active_side
            if mover is None:
                return
            self._remaining[mover] += self._increment[mover] * 10
            self._active_side = mover.opposite

    def remaining(self, side: Side) -> int:
        with self._lock:
            return self._remaining[side]

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._running

    # ── Extra helpers ────────────────────────────────────────────────────

    def remaining_display(self, side: Side) -> int:
        """Remaining deciseconds clamped at zero."""
        return max(0, self.remaining(side))

    @property
    def active_side(self) -> Side | None:
        with self._lock:
            return self._active_side

    @property
    def flagged_side(self) -> Side | None:
        with self._lock:
            return self._flagged_side

    def allocated(self, side: Side) -> int:
        return self._allocated[side]

    def increment(self, side: Side) -> int:
        return self._increment[side]

    def snapshot(self) -> ClockSnapshot:
        with self._lock:
            return ClockSnapshot(
                white_remaining=max(0, self._remaining[Side.WHITE]),
                black_remaining=max(0, self._remaining[Side.BLACK]),
                active_side=self._active_side,
                is_running=self._running,
            )

    # ── Internal ─────────────────────────────────────────────────────────

    def _reset_remaining(self) -> None:
        # Each side starts with one increment already credited.
        self._remaining = {
            side: self._allocated[side] + self._increment[side] * 10 for side in Side
        }

    def _run(self, on_flag: FlagCallback) -> None:
        deadline = time.monotonic() + self._tick_seconds
        while not self._stop_event.wait(max(0.0, deadline - time.monotonic())):
            deadline += self._tick_seconds
            flagged = self._tick()
            if flagged is not None:
                _LOGGER.info("Flag fell for %s", flagged)
                on_flag(flagged)
                return

    def _tick(self) -> Side | None:
        with self._lock:
            if not self._running or self._stop_event.is_set():
                return None
            side = self._active_side
            if side is None or self._flagged_side is not None:
                return None
            self._remaining[side] -= 1
            if self._remaining[side] <= 0:
                self._flagged_side = side
                return side
            return None


# ── Time arithmetic ─────────────────────────────────────────────────────────


def hours_for(deciseconds: int) -> int:
    return (deciseconds // 10) // 3600


def minutes_for(deciseconds: int) -> int:
    return ((deciseconds // 10) % 3600) // 60


def seconds_for(deciseconds: int) -> int:
    return (deciseconds // 10) % 60


def compose_deciseconds(hours: int, minutes: int, seconds: int) -> int:
    return hours * 36000 + minutes * 600 + seconds * 10


def with_hours(total: int, hours: int) -> int:
    """Replace the hour component of *total*, keeping minutes and seconds."""
    return compose_deciseconds(hours, minutes_for(total), seconds_for(total))


def with_minutes(total: int, minutes: int) -> int:
    return compose_deciseconds(hours_for(total), minutes, seconds_for(total))


def with_seconds(total: int, seconds: int) -> int:
    return compose_deciseconds(hours_for(total), minutes_for(total), seconds)


def format_clock_time(deciseconds: int) -> str:
    """``HH:MM:SS`` from one hour, ``MM:SS`` from one minute, else ``SS.S``."""
    deciseconds = max(0, deciseconds)
    hours = hours_for(deciseconds)
    minutes = minutes_for(deciseconds)
    seconds = seconds_for(deciseconds)
    if deciseconds >= 36000:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    if deciseconds >= 600:
        return f"{minutes:02d}:{seconds:02d}"
    return f"{seconds:02d}.{deciseconds % 10}"
