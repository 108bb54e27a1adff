"""GameController — wires a session to its clock.

The session never reads the clock and the clock never reads the timeline:
the controller subscribes clock reactions to session events and routes
flag falls back into the session.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from clockmate.core.enums import GameEnding, PieceType, Side
from clockmate.core.notation import STARTING_FEN
from clockmate.core.position import Position
from clockmate.core.types import MoveCoordinates
from clockmate.game.clock import ClockEngine
from clockmate.game.history import MoveEntry
from clockmate.game.interfaces import IClock
from clockmate.game.session import GameSession, MoveResult, MoveStatus
from clockmate.game.settings import ClockSettings

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

GameStartedCallback = Callable[[Position], None]
GameOverCallback = Callable[[GameEnding], None]
MoveCallback = Callable[[MoveEntry], None]


@dataclass
class GameEvents:
    """Observable callbacks for the presentation layer.

    ``on_move`` runs while the controller lock is held. ``on_game_over``
    runs after it is released and may fire on the clock thread when a
    flag falls.
    """

    on_game_started: list[GameStartedCallback] = field(default_factory=list)
    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)


# ── Controller ───────────────────────────────────────────────────────────────


class GameController:
    """Orchestrates one session and its clock.

    Thread-safety: session mutations are serialised by an internal lock
    because flag falls arrive on the clock thread. The lock is never held
    while waiting for the clock thread to finish.
    """

    __slots__ = (
        "_session",
        "_clock",
        "_settings",
        "_clock_in_use",
        "_lock",
        "_pending_endings",
        "events",
    )

    def __init__(
        self,
        session: GameSession | None = None,
        clock: IClock | None = None,
        settings: ClockSettings | None = None,
    ) -> None:
        self._session = session if session is not None else GameSession()
        self._clock: IClock = clock if clock is not None else ClockEngine()
        self._settings = settings if settings is not None else ClockSettings()
        self._clock_in_use = False
        self._lock = threading.RLock()
        self._pending_endings: list[GameEnding] = []
        self.events = GameEvents()

        self._session.events.on_move_committed.append(self._on_move_committed)
        self._session.events.on_game_over.append(self._on_game_over)

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def session(self) -> GameSession:
        return self._session

    @property
    def clock(self) -> IClock:
        return self._clock

    @property
    def settings(self) -> ClockSettings:
        return self._settings

    @settings.setter
    def settings(self, value: ClockSettings) -> None:
        self._settings = value

    @property
    def clock_in_use(self) -> bool:
        """Whether the current game is played with a clock."""
        return self._clock_in_use

    # ── Game lifecycle ───────────────────────────────────────────────────

    def start_new_game(self, start_position: Position | str = STARTING_FEN) -> bool:
        """Start a game, with the clock if enabled in :attr:`settings`.

        Returns False while a game is in progress. Position errors from the
        codec propagate to the caller.
        """
        if self._session.is_game_in_progress:
            return False
        # A previous ticker must be gone before the countdown is reset.
        self._clock.stop()

        with self._lock:
            self._session.start(start_position)
            self._clock_in_use = self._settings.enabled
            if self._clock_in_use:
                self._settings.configure_clock(self._clock)
                self._clock.start(self._session.position.side_to_move, self._on_flag)

        for cb in self.events.on_game_started:
            cb(self._session.start_position)
        return True

    def stop_game(self, user_requested: bool = True) -> GameEnding | None:
        with self._lock:
            ending = self._session.abort(user_requested)
        self._flush_game_over()
        self._sync_clock()
        return ending

    def shutdown(self) -> None:
        """Abandon any game silently and stop the clock thread."""
        self.stop_game(user_requested=False)
        self._clock.stop()

    # ── Moves ────────────────────────────────────────────────────────────

    def submit_move(
        self, start_file: int, start_rank: int, end_file: int, end_rank: int
    ) -> MoveResult:
        with self._lock:
            result = self._session.submit_move(start_file, start_rank, end_file, end_rank)
        self._flush_game_over()
        self._sync_clock()
        return result

    def commit_promotion(self, piece: PieceType) -> MoveResult:
        with self._lock:
            result = self._session.commit_promotion(piece)
        self._flush_game_over()
        self._sync_clock()
        return result

    def cancel_promotion(self) -> bool:
        with self._lock:
            return self._session.cancel_promotion()

    # ── Clock reactions ──────────────────────────────────────────────────

    def _on_move_committed(self, entry: MoveEntry) -> None:
        if self._clock_in_use:
            self._clock.on_move_committed()
        for cb in self.events.on_move:
            cb(entry)

    def _on_game_over(self, ending: GameEnding) -> None:
        # Delivered by _flush_game_over once the lock is released.
        self._pending_endings.append(ending)

    def _flush_game_over(self) -> None:
        with self._lock:
            endings, self._pending_endings = self._pending_endings, []
        for ending in endings:
            for cb in self.events.on_game_over:
                cb(ending)

    def _on_flag(self, side: Side) -> None:
        """Runs on the clock thread."""
        with self._lock:
            ending = self._session.resolve_timeout_adjudication(side)
        self._flush_game_over()
        if ending is None:
            _LOGGER.debug("Flag for %s ignored, no game in progress", side)
        self._clock.stop()

    def _sync_clock(self) -> None:
        if not self._session.is_game_in_progress and self._clock.is_running:
            self._clock.stop()

    # ── Scripted play ────────────────────────────────────────────────────

    def play_moves(self, moves: list[str]) -> list[MoveResult]:
        """Play UCI-like moves in order, stopping at the first rejection.

        A five-character move (``e7e8n``) picks its promotion piece.
        """
        results: list[MoveResult] = []
        for text in moves:
            coords = MoveCoordinates.from_uci(text)
            result = self.submit_move(
                coords.start_file, coords.start_rank, coords.end_file, coords.end_rank
            )
            if result.status == MoveStatus.PROMOTION_PENDING and len(text) == 5:
                result = self.commit_promotion(_PROMOTION_LETTERS[text[4].lower()])
            results.append(result)
            if result.status == MoveStatus.REJECTED:
                break
        return results


_PROMOTION_LETTERS = {
    "q": PieceType.QUEEN,
    "r": PieceType.ROOK,
    "b": PieceType.BISHOP,
    "n": PieceType.KNIGHT,
}
