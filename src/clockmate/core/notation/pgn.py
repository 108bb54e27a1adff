"""PGN assembly and export for finished games."""

from __future__ import annotations

import logging
from pathlib import Path

from clockmate.core.enums import GameTermination
from clockmate.core.notation.fen import STARTING_FEN
from clockmate.core.notation.models import ExportRecord, FinishedGame
from clockmate.errors import ExportFailure

_LOGGER = logging.getLogger(__name__)

PGN_RESULT_TOKENS = frozenset({"1-0", "0-1", "1/2-1/2", "*"})

_ROSTER_TAGS = ("Event", "Site", "Date", "Round", "White", "Black")


def pgn_result_token(termination: GameTermination) -> str:
    """Convert :class:`GameTermination` to a PGN result token."""
    return termination.token


def build_export_record(finished: FinishedGame, **tags: str) -> ExportRecord:
    """Map a finished game and optional tag values into an export record.

    Roster tags default to blank. ``SetUp``/``FEN`` are only present when
    the game did not start from the standard array.
    """
    unknown = set(tags) - set(_ROSTER_TAGS)
    if unknown:
        raise ValueError(f"Unsupported PGN tags: {sorted(unknown)}")

    headers = {name: tags.get(name, "") for name in _ROSTER_TAGS}
    headers["Result"] = finished.result_token
    start = finished.start_position
    if start.fen != STARTING_FEN:
        headers["SetUp"] = "1"
        headers["FEN"] = start.fen

    return ExportRecord(
        headers=headers,
        sans=list(finished.sans),
        result_token=finished.result_token,
        first_move_number=max(1, start.fullmove_number),
        white_moves_first=start.white_to_move,
    )


def pgn_movetext(
    sans: list[str],
    result_token: str,
    *,
    first_move_number: int = 1,
    white_moves_first: bool = True,
    comments: list[str | None] | None = None,
) -> str:
    """Build PGN movetext; a black first move is numbered ``N...``."""
    parts: list[str] = []
    number = first_move_number
    white_to_move = white_moves_first
    for idx, san in enumerate(sans):
        if white_to_move:
            parts.append(f"{number}.")
        elif idx == 0:
            parts.append(f"{number}...")
        parts.append(san)
        if comments and comments[idx]:
            # PGN comments cannot contain a closing brace.
            safe_comment = (comments[idx] or "").replace("}", "]")
            parts.append(f"{{{safe_comment}}}")
        if not white_to_move:
            number += 1
        white_to_move = not white_to_move
    parts.append(result_token)
    return " ".join(parts)


def build_pgn(record: ExportRecord) -> str:
    """Build a single-game PGN document."""
    if record.result_token not in PGN_RESULT_TOKENS:
        raise ValueError(f"Invalid PGN result token: {record.result_token!r}")
    if record.comments and len(record.comments) != len(record.sans):
        raise ValueError("PGN comments length must match SAN move length")

    lines: list[str] = []
    for key, value in record.headers.items():
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        lines.append(f'[{key} "{escaped}"]')
    lines.append("")
    lines.append(
        pgn_movetext(
            record.sans,
            record.result_token,
            first_move_number=record.first_move_number,
            white_moves_first=record.white_moves_first,
            comments=record.comments or None,
        )
    )
    lines.append("")
    return "\n".join(lines)


def write_pgn(record: ExportRecord, path: Path | str) -> Path:
    """Write *record* to *path* once; raises :class:`ExportFailure`."""
    target = Path(path)
    text = build_pgn(record)
    try:
        target.write_text(text, encoding="utf-8")
    except OSError as exc:
        _LOGGER.exception("Failed to write PGN file %s", target)
        raise ExportFailure(f"Could not write {target}") from exc
    _LOGGER.info("PGN exported to %s", target)
    return target
