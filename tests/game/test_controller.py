"""Tests for GameController — session and clock wiring."""

import threading
import time

from clockmate.core.enums import GameEnding, Side
from clockmate.core.position import Position
from clockmate.game.clock import ClockEngine
from clockmate.game.controller import GameController
from clockmate.game.interfaces import FlagCallback, IClock, TimeControl
from clockmate.game.session import MoveStatus
from clockmate.game.settings import ClockSettings

MATE_IN_ONE_FEN = "8/8/8/8/8/3n1kp1/4n3/7K b - - 0 1"
TIMEOUT_FEN = "4k3/8/8/8/8/2n5/8/R3K3 w - - 0 1"


class _FakeClock(IClock):
    """Records calls; flags only when told to."""

    def __init__(self) -> None:
        self.configured: list[tuple[int, int, int | None, int | None, bool]] = []
        self.started: list[Side] = []
        self.moves = 0
        self.stops = 0
        self.on_flag: FlagCallback | None = None
        self._running = False

    def configure(
        self,
        white_allocated: int,
        white_increment: int,
        black_allocated: int | None = None,
        black_increment: int | None = None,
        differential: bool = False,
    ) -> None:
        self.configured.append(
            (white_allocated, white_increment, black_allocated, black_increment, differential)
        )

    def start(self, active_side: Side, on_flag: FlagCallback) -> None:
        self.started.append(active_side)
        self.on_flag = on_flag
        self._running = True

    def stop(self) -> None:
        self.stops += 1
        self._running = False

    def on_move_committed(self) -> None:
        self.moves += 1

    def remaining(self, side: Side) -> int:
        return 0

    @property
    def is_running(self) -> bool:
        return self._running


def _controller(enabled: bool = True) -> tuple[GameController, _FakeClock]:
    clock = _FakeClock()
    settings = ClockSettings(enabled=enabled, white=TimeControl(3000, 2))
    return GameController(clock=clock, settings=settings), clock


class TestNewGame:
    def test_clock_configured_and_started(self) -> None:
        ctrl, clock = _controller()
        assert ctrl.start_new_game()
        assert clock.configured == [(3000, 2, 3000, 2, False)]
        assert clock.started == [Side.WHITE]
        assert ctrl.clock_in_use

    def test_clock_starts_for_side_to_move(self) -> None:
        ctrl, clock = _controller()
        ctrl.start_new_game(MATE_IN_ONE_FEN)
        assert clock.started == [Side.BLACK]

    def test_clock_disabled(self) -> None:
        ctrl, clock = _controller(enabled=False)
        ctrl.start_new_game()
        assert clock.started == []
        assert not ctrl.clock_in_use
        ctrl.submit_move(4, 1, 4, 3)
        assert clock.moves == 0

    def test_refused_while_in_progress(self) -> None:
        ctrl, clock = _controller()
        ctrl.start_new_game()
        assert not ctrl.start_new_game()
        assert clock.started == [Side.WHITE]

    def test_started_event_after_clock(self) -> None:
        ctrl, clock = _controller()
        seen: list[tuple[Position, int]] = []
        ctrl.events.on_game_started.append(lambda pos: seen.append((pos, len(clock.started))))
        ctrl.start_new_game()
        assert len(seen) == 1
        assert seen[0][1] == 1


class TestMoves:
    def test_clock_switches_once_per_committed_move(self) -> None:
        ctrl, clock = _controller()
        ctrl.start_new_game()
        ctrl.submit_move(4, 1, 4, 3)
        ctrl.submit_move(4, 1, 4, 3)  # rejected
        ctrl.submit_move(4, 6, 4, 4)
        assert clock.moves == 2

    def test_move_event(self) -> None:
        ctrl, _clock = _controller()
        sans: list[str] = []
        ctrl.events.on_move.append(lambda entry: sans.append(entry.san))
        ctrl.start_new_game()
        ctrl.submit_move(4, 1, 4, 3)
        assert sans == ["e4"]

    def test_checkmate_stops_clock(self) -> None:
        ctrl, clock = _controller()
        endings: list[GameEnding] = []
        ctrl.events.on_game_over.append(endings.append)
        ctrl.start_new_game(MATE_IN_ONE_FEN)
        ctrl.submit_move(3, 2, 5, 1)
        assert endings == [GameEnding.CHECKMATE_BLACK_WINS]
        assert not clock.is_running

    def test_cancelled_promotion_leaves_clock_alone(self) -> None:
        ctrl, clock = _controller()
        ctrl.start_new_game("4k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        stops = clock.stops
        assert ctrl.submit_move(0, 6, 0, 7).status == MoveStatus.PROMOTION_PENDING
        assert ctrl.cancel_promotion()
        assert clock.moves == 0
        assert clock.stops == stops
        assert clock.is_running
        assert ctrl.session.promotion is None

    def test_play_moves_with_promotion(self) -> None:
        ctrl, clock = _controller()
        ctrl.start_new_game("4k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        results = ctrl.play_moves(["a7a8r", "e8d7"])
        assert [r.status for r in results] == [MoveStatus.COMMITTED, MoveStatus.COMMITTED]
        assert results[0].entry is not None and results[0].entry.san == "a8=R+"
        assert clock.moves == 2

    def test_play_moves_stops_at_rejection(self) -> None:
        ctrl, _clock = _controller()
        ctrl.start_new_game()
        results = ctrl.play_moves(["e2e4", "e2e4", "e7e5"])
        assert [r.status for r in results] == [MoveStatus.COMMITTED, MoveStatus.REJECTED]


class TestStopAndFlag:
    def test_stop_game(self) -> None:
        ctrl, clock = _controller()
        ctrl.start_new_game()
        assert ctrl.stop_game() == GameEnding.ABORTED
        assert not clock.is_running
        assert ctrl.session.result_token == "*"
        assert ctrl.stop_game() is None

    def test_shutdown_is_silent_abandon(self) -> None:
        ctrl, clock = _controller()
        endings: list[GameEnding] = []
        ctrl.events.on_game_over.append(endings.append)
        ctrl.start_new_game()
        ctrl.shutdown()
        assert endings == [GameEnding.ABANDONED]
        assert not clock.is_running

    def test_game_over_handlers_run_outside_the_lock(self) -> None:
        ctrl, _clock = _controller()
        finished: list[bool] = []

        def on_over(_ending: GameEnding) -> None:
            worker = threading.Thread(target=lambda: finished.append(ctrl.cancel_promotion()))
            worker.start()
            worker.join(timeout=2.0)
            finished.append(not worker.is_alive())

        ctrl.events.on_game_over.append(on_over)
        ctrl.start_new_game(MATE_IN_ONE_FEN)
        ctrl.submit_move(3, 2, 5, 1)
        assert finished == [False, True]

    def test_flag_adjudicates(self) -> None:
        ctrl, clock = _controller()
        ctrl.start_new_game(TIMEOUT_FEN)
        assert clock.on_flag is not None
        clock.on_flag(Side.WHITE)
        assert ctrl.session.result_token == "1/2-1/2"
        assert not clock.is_running

    def test_late_flag_ignored(self) -> None:
        ctrl, clock = _controller()
        ctrl.start_new_game()
        ctrl.stop_game()
        assert clock.on_flag is not None
        clock.on_flag(Side.BLACK)
        assert ctrl.session.result_token == "*"


class TestRealClock:
    def test_flag_fall_ends_game(self) -> None:
        settings = ClockSettings(enabled=True, white=TimeControl(3, 0))
        clock = ClockEngine(tick_seconds=0.001)
        ctrl = GameController(clock=clock, settings=settings)
        done = threading.Event()
        endings: list[GameEnding] = []

        def on_over(ending: GameEnding) -> None:
            endings.append(ending)
            done.set()

        ctrl.events.on_game_over.append(on_over)
        ctrl.start_new_game(TIMEOUT_FEN)
        assert done.wait(2.0)
        deadline = time.monotonic() + 2.0
        while clock.is_running and time.monotonic() < deadline:
            time.sleep(0.005)

        assert endings == [GameEnding.DRAW_ON_TIME_INSUFFICIENT_MATERIAL]
        assert not clock.is_running
        ctrl.shutdown()

    def test_new_game_after_flag(self) -> None:
        settings = ClockSettings(enabled=True, white=TimeControl(2, 0))
        clock = ClockEngine(tick_seconds=0.001)
        ctrl = GameController(clock=clock, settings=settings)
        done = threading.Event()
        ctrl.events.on_game_over.append(lambda _ending: done.set())
        ctrl.start_new_game()
        assert done.wait(2.0)

        ctrl.settings = ClockSettings(enabled=True, white=TimeControl(6000, 0))
        assert ctrl.start_new_game()
        try:
            assert clock.is_running
            assert clock.remaining(Side.WHITE) > 5000
        finally:
            ctrl.shutdown()
        assert not clock.is_running

    def test_e2_e4_credits_white_and_activates_black(self) -> None:
        settings = ClockSettings(enabled=True, white=TimeControl(600, 2))
        clock = ClockEngine(tick_seconds=60.0)
        ctrl = GameController(clock=clock, settings=settings)
        ctrl.start_new_game()
        try:
            result = ctrl.submit_move(4, 1, 4, 3)
            assert result.entry is not None and result.entry.san == "e4"
            assert clock.remaining(Side.WHITE) == 640
            assert clock.remaining(Side.BLACK) == 620
            assert clock.active_side == Side.BLACK
        finally:
            ctrl.shutdown()
