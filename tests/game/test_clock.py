"""Tests for ClockEngine and the time helpers."""

import threading
import time

import pytest

from clockmate.core.enums import Side
from clockmate.errors import InvalidOperationForState
from clockmate.game.clock import (
    ClockEngine,
    compose_deciseconds,
    format_clock_time,
    hours_for,
    minutes_for,
    seconds_for,
    with_hours,
    with_minutes,
    with_seconds,
)

# Ticks far apart enough that none fire during a test.
_FROZEN = 60.0


def _noop(_side: Side) -> None:
    pass


class TestClockBasics:
    def test_initial_remaining_includes_one_increment(self) -> None:
        clock = ClockEngine()
        clock.configure(600, 2)
        assert clock.remaining(Side.WHITE) == 620
        assert clock.remaining(Side.BLACK) == 620

    def test_not_running_initially(self) -> None:
        clock = ClockEngine()
        assert not clock.is_running
        assert clock.active_side is None

    def test_start_sets_running(self) -> None:
        clock = ClockEngine(tick_seconds=_FROZEN)
        clock.start(Side.WHITE, _noop)
        try:
            assert clock.is_running
            assert clock.active_side == Side.WHITE
        finally:
            clock.stop()
        assert not clock.is_running

    def test_stop_is_idempotent(self) -> None:
        clock = ClockEngine()
        clock.stop()
        clock.stop()
        assert not clock.is_running

    def test_negative_values_rejected(self) -> None:
        with pytest.raises(ValueError):
            ClockEngine().configure(-1, 0)

    def test_differential_allocation(self) -> None:
        clock = ClockEngine()
        clock.configure(600, 1, 1200, 2, differential=True)
        assert clock.remaining(Side.WHITE) == 610
        assert clock.remaining(Side.BLACK) == 1220
        assert clock.allocated(Side.BLACK) == 1200
        assert clock.increment(Side.BLACK) == 2

    def test_black_mirrors_white_without_differential(self) -> None:
        clock = ClockEngine()
        clock.configure(600, 1, 1200, 2)
        assert clock.remaining(Side.BLACK) == 610

    def test_configure_while_running_raises(self) -> None:
        clock = ClockEngine(tick_seconds=_FROZEN)
        clock.start(Side.WHITE, _noop)
        try:
            with pytest.raises(InvalidOperationForState):
                clock.configure(600, 0)
            with pytest.raises(InvalidOperationForState):
                clock.start(Side.BLACK, _noop)
        finally:
            clock.stop()


class TestClockCountdown:
    def test_only_active_side_ticks(self) -> None:
        clock = ClockEngine(tick_seconds=0.001)
        clock.configure(600, 0)
        clock.start(Side.WHITE, _noop)
        time.sleep(0.05)
        clock.stop()
        assert clock.remaining(Side.WHITE) < 600
        assert clock.remaining(Side.BLACK) == 600

    def test_no_tick_after_stop(self) -> None:
        clock = ClockEngine(tick_seconds=0.001)
        clock.configure(600, 0)
        clock.start(Side.WHITE, _noop)
        time.sleep(0.02)
        clock.stop()
        frozen = clock.remaining(Side.WHITE)
        time.sleep(0.02)
        assert clock.remaining(Side.WHITE) == frozen


class TestClockIncrement:
    def test_move_credits_mover_and_switches(self) -> None:
        clock = ClockEngine(tick_seconds=_FROZEN)
        clock.configure(600, 3)
        clock.start(Side.WHITE, _noop)
        clock.on_move_committed()
        clock.stop()
        assert clock.remaining(Side.WHITE) == 660
        assert clock.remaining(Side.BLACK) == 630
        assert clock.active_side == Side.BLACK

    def test_move_without_active_side_is_ignored(self) -> None:
        clock = ClockEngine()
        clock.configure(600, 3)
        clock.on_move_committed()
        assert clock.remaining(Side.WHITE) == 630
        assert clock.active_side is None

    def test_start_resets_countdown(self) -> None:
        clock = ClockEngine(tick_seconds=_FROZEN)
        clock.configure(600, 3)
        clock.start(Side.WHITE, _noop)
        clock.on_move_committed()
        clock.stop()
        clock.start(Side.BLACK, _noop)
        clock.stop()
        assert clock.remaining(Side.WHITE) == 630
        assert clock.active_side == Side.BLACK


class TestClockFlagFall:
    def test_flag_reported_once(self) -> None:
        clock = ClockEngine(tick_seconds=0.001)
        clock.configure(3, 0)
        flagged: list[Side] = []
        done = threading.Event()

        def on_flag(side: Side) -> None:
            flagged.append(side)
            done.set()

        clock.start(Side.WHITE, on_flag)
        assert done.wait(2.0)
        time.sleep(0.02)
        assert flagged == [Side.WHITE]
        assert clock.flagged_side == Side.WHITE
        assert clock.remaining(Side.WHITE) == 0
        assert clock.remaining(Side.BLACK) == 3
        clock.stop()
        assert not clock.is_running

    def test_stop_from_flag_callback_then_restart(self) -> None:
        clock = ClockEngine(tick_seconds=0.001)
        clock.configure(2, 0)
        done = threading.Event()

        def on_flag(_side: Side) -> None:
            clock.stop()
            done.set()

        clock.start(Side.BLACK, on_flag)
        assert done.wait(2.0)
        assert not clock.is_running

        clock.configure(600, 0)
        clock.start(Side.WHITE, _noop)
        try:
            assert clock.flagged_side is None
            assert clock.remaining(Side.BLACK) == 600
        finally:
            clock.stop()

    def test_snapshot_clamps_at_zero(self) -> None:
        clock = ClockEngine(tick_seconds=0.001)
        clock.configure(1, 0)
        done = threading.Event()
        clock.start(Side.WHITE, lambda _side: done.set())
        assert done.wait(2.0)
        snap = clock.snapshot()
        clock.stop()
        assert snap.white_remaining == 0
        assert snap.active_side == Side.WHITE
        assert clock.remaining_display(Side.WHITE) == 0


class TestTimeHelpers:
    def test_components(self) -> None:
        total = compose_deciseconds(1, 2, 3)
        assert total == 37230
        assert hours_for(total) == 1
        assert minutes_for(total) == 2
        assert seconds_for(total) == 3

    def test_replacing_one_component_keeps_the_others(self) -> None:
        total = compose_deciseconds(1, 2, 3)
        assert with_hours(total, 0) == compose_deciseconds(0, 2, 3)
        assert with_minutes(total, 45) == compose_deciseconds(1, 45, 3)
        assert with_seconds(total, 59) == compose_deciseconds(1, 2, 59)

    @pytest.mark.parametrize(
        "deciseconds, text",
        [
            (36000, "01:00:00"),
            (37230, "01:02:03"),
            (6000, "10:00"),
            (600, "01:00"),
            (599, "59.9"),
            (5, "00.5"),
            (-4, "00.0"),
        ],
    )
    def test_format_clock_time(self, deciseconds: int, text: str) -> None:
        assert format_clock_time(deciseconds) == text
