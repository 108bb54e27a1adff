"""GameSession — the state machine of one local two-player game.

Owns the displayed position, the history timeline, the navigation cursor
and the pending-promotion sub-state. Rule questions go to a
:class:`~clockmate.core.oracle.RulesOracle`; the clock is not touched here,
listeners on :attr:`GameSession.events` react to what the session emits.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum, auto
from pathlib import Path
from typing import TypeAlias

from clockmate.core.enums import GameEnding, PieceType, Side, TerminationCause
from clockmate.core.notation import (
    EMPTY_POSITION_FEN,
    STARTING_FEN,
    ExportRecord,
    FinishedGame,
    build_export_record,
    parse_position,
    pieces_grid,
    validate_legal_start,
    write_pgn,
)
from clockmate.core.oracle import PythonChessOracle, RulesOracle
from clockmate.core.position import Position
from clockmate.core.types import MoveCoordinates
from clockmate.errors import InvalidOperationForState
from clockmate.game.history import Direction, HistoryTimeline, MoveEntry
from clockmate.game.interfaces import PlayerType, SessionPhase

_LOGGER = logging.getLogger(__name__)

OracleFactory = Callable[[Position], RulesOracle]


# ── Results ─────────────────────────────────────────────────────────────────


class MoveStatus(IntEnum):
    REJECTED = auto()
    COMMITTED = auto()
    PROMOTION_PENDING = auto()


@dataclass(frozen=True, slots=True)
class MoveResult:
    """Outcome of a move submission or promotion choice."""

    status: MoveStatus
    entry: MoveEntry | None = None
    ending: GameEnding | None = None

    @property
    def is_committed(self) -> bool:
        return self.status == MoveStatus.COMMITTED


REJECTED = MoveResult(MoveStatus.REJECTED)
PROMOTION_PENDING = MoveResult(MoveStatus.PROMOTION_PENDING)


@dataclass(frozen=True, slots=True)
class AwaitingChoice:
    """A queen-promotion-shaped move waiting for the piece choice."""

    side: Side
    coordinates: MoveCoordinates

    @property
    def start_square(self) -> str:
        return self.coordinates.start_square

    @property
    def end_square(self) -> str:
        return self.coordinates.end_square


PendingPromotion: TypeAlias = AwaitingChoice | None


# ── Events ──────────────────────────────────────────────────────────────────

GameStartedCallback = Callable[[Position], None]
MoveCommittedCallback = Callable[[MoveEntry], None]
GameOverCallback = Callable[[GameEnding], None]


@dataclass
class SessionEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_game_started: list[GameStartedCallback] = field(default_factory=list)
    on_move_committed: list[MoveCommittedCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)


_DRAW_ENDINGS: dict[TerminationCause, GameEnding] = {
    TerminationCause.STALEMATE: GameEnding.STALEMATE,
    TerminationCause.THREEFOLD_REPETITION: GameEnding.THREEFOLD_REPETITION,
    TerminationCause.INSUFFICIENT_MATERIAL: GameEnding.INSUFFICIENT_MATERIAL,
    TerminationCause.FIFTY_MOVE_RULE: GameEnding.FIFTY_MOVE_RULE,
}


# ── Session ─────────────────────────────────────────────────────────────────


class GameSession:
    """One game at a time, from start through navigation of the finished record.

    Thread-safety: not thread-safe. Callers that mix threads (the clock
    ticker) serialise access themselves, see
    :class:`~clockmate.game.controller.GameController`.
    """

    __slots__ = (
        "_oracle_factory",
        "_oracle",
        "_phase",
        "_start_position",
        "_position",
        "_position_before_last_move",
        "_timeline",
        "_cursor",
        "_promotion",
        "_last_move_arrow",
        "_players",
        "_result_token",
        "_finished_game",
        "events",
    )

    def __init__(self, oracle_factory: OracleFactory = PythonChessOracle) -> None:
        self._oracle_factory = oracle_factory
        empty = parse_position(EMPTY_POSITION_FEN)
        self._oracle: RulesOracle = oracle_factory(empty)
        self._phase = SessionPhase.IDLE
        self._start_position = parse_position(STARTING_FEN)
        self._position = empty
        self._position_before_last_move: Position | None = None
        self._timeline = HistoryTimeline()
        self._cursor: int | None = None
        self._promotion: PendingPromotion = None
        self._last_move_arrow: MoveCoordinates | None = None
        self._players = {Side.WHITE: PlayerType.NONE, Side.BLACK: PlayerType.NONE}
        self._result_token: str | None = None
        self._finished_game: FinishedGame | None = None
        self.events = SessionEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def is_game_in_progress(self) -> bool:
        return self._phase == SessionPhase.IN_PROGRESS

    @property
    def position(self) -> Position:
        """Position currently displayed."""
        return self._position

    @property
    def position_before_last_move(self) -> Position | None:
        return self._position_before_last_move

    @property
    def start_position(self) -> Position:
        return self._start_position

    @property
    def timeline(self) -> HistoryTimeline:
        return self._timeline

    @property
    def selected_node_index(self) -> int | None:
        return self._cursor

    @property
    def promotion(self) -> PendingPromotion:
        return self._promotion

    @property
    def last_move_arrow(self) -> MoveCoordinates | None:
        return self._last_move_arrow

    @property
    def is_white_turn(self) -> bool:
        return self._position.white_to_move

    @property
    def result_token(self) -> str | None:
        return self._result_token

    @property
    def finished_game(self) -> FinishedGame | None:
        return self._finished_game

    def player(self, side: Side) -> PlayerType:
        return self._players[side]

    def pieces(self) -> list[list[str]]:
        return pieces_grid(self._position)

    # ── Lifecycle ────────────────────────────────────────────────────────

    def start(self, start_position: Position | str = STARTING_FEN) -> None:
        """Start a new game, discarding the previous timeline.

        Raises the position codec's typed errors, leaving the session
        untouched, when *start_position* cannot start a game.
        """
        start = validate_legal_start(start_position, self._oracle_factory)

        self._oracle = self._oracle_factory(start)
        self._start_position = start
        self._position = start
        self._position_before_last_move = None
        self._timeline.reset(start.fullmove_number, start.white_to_move)
        self._cursor = None
        self._promotion = None
        self._last_move_arrow = None
        self._players = {Side.WHITE: PlayerType.HUMAN, Side.BLACK: PlayerType.HUMAN}
        self._result_token = None
        self._finished_game = None
        self._phase = SessionPhase.IN_PROGRESS

        _LOGGER.info("Game started from %s", start.fen)
        for cb in self.events.on_game_started:
            cb(start)

    def abort(self, user_requested: bool = True) -> GameEnding | None:
        """Stop the game without a rules verdict; the result is ``*``."""
        if not self.is_game_in_progress:
            return None
        ending = GameEnding.ABORTED if user_requested else GameEnding.ABANDONED
        self._finish(ending)
        return ending

    # ── Moves ────────────────────────────────────────────────────────────

    def submit_move(
        self, start_file: int, start_rank: int, end_file: int, end_rank: int
    ) -> MoveResult:
        """Try a move dropped by the user.

        A pawn move that is only legal as a promotion is parked as
        :class:`AwaitingChoice` until :meth:`commit_promotion` or
        :meth:`cancel_promotion`.
        """
        if not self.is_game_in_progress or self._promotion is not None:
            return REJECTED
        coordinates = MoveCoordinates(start_file, start_rank, end_file, end_rank)
        if not coordinates.is_on_board:
            return REJECTED

        if self._oracle.is_legal(coordinates):
            return self._commit(coordinates, None)

        if self._oracle.is_legal(coordinates, PieceType.QUEEN):
            self._promotion = AwaitingChoice(self._position.side_to_move, coordinates)
            return PROMOTION_PENDING

        return REJECTED

    def cancel_promotion(self) -> bool:
        if self._promotion is None:
            return False
        self._promotion = None
        return True

    def commit_promotion(self, piece: PieceType) -> MoveResult:
        pending = self._promotion
        if pending is None or not self.is_game_in_progress:
            return REJECTED
        if not piece.is_promotion_choice:
            return REJECTED
        if not self._oracle.is_legal(pending.coordinates, piece):
            _LOGGER.warning(
                "Promotion %s to %s refused by the rules oracle",
                pending.coordinates,
                piece.name,
            )
            return REJECTED

        self._promotion = None
        return self._commit(pending.coordinates, piece)

    def resolve_timeout_adjudication(self, flagged_side: Side) -> GameEnding | None:
        """Finish the game after *flagged_side* ran out of time.

        The opponent only wins if it still has mating material: no queen,
        rook or pawn and at most one bishop or knight means a draw.
        """
        if not self.is_game_in_progress:
            return None
        winner = flagged_side.opposite
        count = self._oracle.count_pieces
        majors_and_pawns = (
            count(PieceType.QUEEN, winner)
            + count(PieceType.ROOK, winner)
            + count(PieceType.PAWN, winner)
        )
        minors = count(PieceType.BISHOP, winner) + count(PieceType.KNIGHT, winner)

        if majors_and_pawns == 0 and minors <= 1:
            ending = GameEnding.DRAW_ON_TIME_INSUFFICIENT_MATERIAL
        elif winner == Side.WHITE:
            ending = GameEnding.WHITE_WINS_ON_TIME
        else:
            ending = GameEnding.BLACK_WINS_ON_TIME
        self._finish(ending)
        return ending

    # ── Navigation ───────────────────────────────────────────────────────

    def request_position(
        self,
        position: Position | str,
        coordinates: MoveCoordinates,
        node_index: int,
    ) -> bool:
        """Display a recorded position, e.g. after a click in the move list."""
        if self.is_game_in_progress:
            return False
        if not self._timeline.is_move_entry(node_index):
            return False
        if isinstance(position, str):
            position = parse_position(position)
        self._position = position
        self._last_move_arrow = coordinates
        self._cursor = node_index
        return True

    def step_back(self) -> bool:
        if self.is_game_in_progress or self._cursor is None:
            return False
        index = self._timeline.select_nearest_move_entry(
            self._cursor, Direction.BACKWARD
        )
        if index is None:
            self._cursor = None
            self._position = self._start_position
            self._last_move_arrow = None
            return True
        self._show_entry(index)
        return True

    def step_forward(self) -> bool:
        if self.is_game_in_progress:
            return False
        origin = -1 if self._cursor is None else self._cursor
        index = self._timeline.select_nearest_move_entry(origin, Direction.FORWARD)
        if index is None:
            return False
        self._show_entry(index)
        return True

    def go_to_start(self) -> bool:
        if self.is_game_in_progress:
            return False
        while self.step_back():
            pass
        return True

    def go_to_end(self) -> bool:
        if self.is_game_in_progress:
            return False
        while self.step_forward():
            pass
        return True

    # ── Export ───────────────────────────────────────────────────────────

    def export_record(self, **tags: str) -> ExportRecord:
        """Export data of the last finished game."""
        if self._finished_game is None:
            raise InvalidOperationForState("No finished game to export")
        return build_export_record(self._finished_game, **tags)

    def export_pgn(self, path: Path | str, **tags: str) -> Path:
        return write_pgn(self.export_record(**tags), path)

    # ── Internal helpers ─────────────────────────────────────────────────

    def _commit(
        self, coordinates: MoveCoordinates, promotion: PieceType | None
    ) -> MoveResult:
        before = self._position
        san = self._oracle.notate(coordinates, promotion)
        after = self._oracle.apply(coordinates, promotion)

        self._position_before_last_move = before
        self._position = after
        self._last_move_arrow = coordinates
        entry = self._timeline.record_move(
            coordinates,
            san,
            after,
            side_was_white=before.white_to_move,
            move_number=before.fullmove_number,
        )
        _LOGGER.debug("Move committed: %s (%s)", san, coordinates)

        for cb in self.events.on_move_committed:
            cb(entry)

        ending = self._resolve_termination()
        return MoveResult(MoveStatus.COMMITTED, entry, ending)

    def _resolve_termination(self) -> GameEnding | None:
        verdict = self._oracle.classify()
        if verdict.cause is None:
            return None
        if verdict.cause == TerminationCause.CHECKMATE:
            ending = (
                GameEnding.CHECKMATE_WHITE_WINS
                if verdict.winner == Side.WHITE
                else GameEnding.CHECKMATE_BLACK_WINS
            )
        else:
            ending = _DRAW_ENDINGS[verdict.cause]
        self._finish(ending)
        return ending

    def _finish(self, ending: GameEnding) -> None:
        termination = ending.termination
        self._phase = SessionPhase.FINISHED
        self._players = {Side.WHITE: PlayerType.NONE, Side.BLACK: PlayerType.NONE}
        self._promotion = None
        self._result_token = termination.token
        self._timeline.append_termination(termination)
        self._finished_game = FinishedGame(
            start_position=self._start_position,
            sans=tuple(entry.san for entry in self._timeline.move_entries()),
            result_token=termination.token,
        )
        self._cursor = self._timeline.last_move_entry_index()

        _LOGGER.info("Game over: %s (%s)", ending.name, termination.token)
        for cb in self.events.on_game_over:
            cb(ending)

    def _show_entry(self, index: int) -> None:
        entry = self._timeline[index]
        assert isinstance(entry, MoveEntry)
        self._cursor = index
        self._position = entry.position
        self._last_move_arrow = entry.coordinates
