"""Qt bridge that re-emits controller events as signals.

Flag falls are reported on the clock thread; emitting through a
``pyqtSignal`` lets Qt queue them onto the receiver's thread.
"""

from __future__ import annotations

from PyQt6.QtCore import QObject, QTimer, pyqtSignal, pyqtSlot

from clockmate.core.enums import GameEnding, Side
from clockmate.core.position import Position
from clockmate.game.controller import GameController
from clockmate.game.history import MoveEntry

REFRESH_INTERVAL_MS = 100


class GameSignals(QObject):
    """Signal front-end of a :class:`GameController`."""

    game_started = pyqtSignal(object)
    move_committed = pyqtSignal(object)
    game_over = pyqtSignal(object)
    clock_updated = pyqtSignal(int, int)

    def __init__(
        self, controller: GameController, parent: QObject | None = None
    ) -> None:
        super().__init__(parent)
        self._controller = controller

        controller.events.on_game_started.append(self._relay_started)
        controller.events.on_move.append(self._relay_move)
        controller.events.on_game_over.append(self._relay_game_over)

        self._timer = QTimer(self)
        self._timer.setInterval(REFRESH_INTERVAL_MS)
        self._timer.timeout.connect(self.refresh_clock)
        self.game_started.connect(self._on_game_started)
        self.game_over.connect(self._on_game_over)

    @property
    def controller(self) -> GameController:
        return self._controller

    @property
    def is_refreshing(self) -> bool:
        return self._timer.isActive()

    @pyqtSlot()
    def refresh_clock(self) -> None:
        """Emit the current countdowns, clamped at zero."""
        clock = self._controller.clock
        self.clock_updated.emit(
            max(0, clock.remaining(Side.WHITE)),
            max(0, clock.remaining(Side.BLACK)),
        )

    # ── Relays (may run on the clock thread) ─────────────────────────────

    def _relay_started(self, position: Position) -> None:
        self.game_started.emit(position)

    def _relay_move(self, entry: MoveEntry) -> None:
        self.move_committed.emit(entry)

    def _relay_game_over(self, ending: GameEnding) -> None:
        self.game_over.emit(ending)

    # ── Refresh timer (GUI thread) ───────────────────────────────────────

    def _on_game_started(self, _position: object) -> None:
        self.refresh_clock()
        if self._controller.clock_in_use:
            self._timer.start()

    def _on_game_over(self, _ending: object) -> None:
        self._timer.stop()
        self.refresh_clock()
