"""Game management layer: session state machine, history, clock, controller.

Quick start::

    from clockmate.game import ClockSettings, GameController

    ctrl = GameController(settings=ClockSettings(enabled=True))
    ctrl.start_new_game()
    ctrl.submit_move(4, 1, 4, 3)  # e2-e4
"""

from clockmate.game.clock import ClockEngine, ClockSnapshot, format_clock_time
from clockmate.game.controller import GameController, GameEvents
from clockmate.game.history import (
    Direction,
    HistoryNode,
    HistoryTimeline,
    MoveEntry,
    MoveNumberMarker,
    TerminationMarker,
)
from clockmate.game.interfaces import IClock, PlayerType, SessionPhase, TimeControl
from clockmate.game.session import (
    AwaitingChoice,
    GameSession,
    MoveResult,
    MoveStatus,
    PendingPromotion,
    SessionEvents,
)
from clockmate.game.settings import ClockSettings

__all__ = [
    # Interfaces
    "IClock",
    "PlayerType",
    "SessionPhase",
    "TimeControl",
    # History
    "Direction",
    "HistoryNode",
    "HistoryTimeline",
    "MoveEntry",
    "MoveNumberMarker",
    "TerminationMarker",
    # Concrete
    "AwaitingChoice",
    "ClockEngine",
    "ClockSettings",
    "ClockSnapshot",
    "GameController",
    "GameEvents",
    "GameSession",
    "MoveResult",
    "MoveStatus",
    "PendingPromotion",
    "SessionEvents",
    "format_clock_time",
]
